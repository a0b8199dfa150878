"""Engine configuration with environment-specific profiles.

Supports dev, staging, and production environments via APP_ENV.
All values can be overridden by environment variables.
"""

from __future__ import annotations

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class Settings:
    """Immutable engine settings resolved from environment."""

    app_env: str = "dev"
    log_level: str = "INFO"
    log_json: bool = True

    # Analysis defaults callers fall back to when they do not pass their own
    plateau_window_weeks: int = 3
    vo2max_target_percentile: float = 90.0

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"

    @property
    def is_dev(self) -> bool:
        return self.app_env == "dev"


# -- Environment profiles --

_ENV_PROFILES: dict[str, dict] = {
    "dev": {
        "log_level": "DEBUG",
        "log_json": False,
    },
    "staging": {
        "log_level": "INFO",
        "log_json": True,
    },
    "production": {
        "log_level": "WARNING",
        "log_json": True,
    },
}


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def get_settings() -> Settings:
    """Build Settings by merging environment profile with env-var overrides."""
    app_env = os.getenv("APP_ENV", "dev")
    profile = _ENV_PROFILES.get(app_env, _ENV_PROFILES["dev"])

    return Settings(
        app_env=app_env,
        log_level=os.getenv("LOG_LEVEL", profile.get("log_level", "INFO")),
        log_json=_env_bool("LOG_JSON", profile.get("log_json", True)),
        plateau_window_weeks=int(os.getenv("PLATEAU_WINDOW_WEEKS", "3")),
        vo2max_target_percentile=float(os.getenv("VO2MAX_TARGET_PERCENTILE", "90")),
    )

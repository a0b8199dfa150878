from __future__ import annotations

from training_engine.config import Settings, get_settings
from training_engine.logging_config import get_logger, log_context, setup_logging


def init_engine(settings: Settings | None = None) -> Settings:
    """
    Resolve settings and configure logging for a host process embedding the
    engine. Safe to call more than once; logging is only configured the first
    time.
    """
    settings = settings or get_settings()
    setup_logging(settings.log_level, json_output=settings.log_json)
    get_logger(__name__).debug("training engine initialised", extra=log_context(app_env=settings.app_env))
    return settings

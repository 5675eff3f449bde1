import logging

from .config import determine_log_mode, get_app_settings
from .logger.config import configured_logger

__root_logger: None | logging.Logger = None


def get_logger(module=None) -> logging.Logger:
    """
    Returns the queryspec logger, configuring it on first use.

    When `module` is given, a child logger (`queryspec.<module>`) is returned.
    """
    global __root_logger

    if __root_logger is None:
        settings = get_app_settings()

        substitutions = {"LOG_LEVEL": settings.LOG_LEVEL.upper()}

        __root_logger = configured_logger(
            mode=determine_log_mode(),
            config_override=settings.LOG_CONFIG_OVERRIDE,
            substitutions=substitutions,
        )

    if module is None:
        return __root_logger

    return __root_logger.getChild(module)

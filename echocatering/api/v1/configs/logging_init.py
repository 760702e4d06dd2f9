"""
Logger initialization shared by the API modules.
Configures both the ``echocatering`` and ``echocatering-models`` loggers
from the same verbosity setting.
"""

import logging

from echocatering.api.v1.configs.custom_logging import setup_logging
from echocatering.api.v1.configs.settings_models import Settings
from echocatering.models.logging import setup_logging as setup_models_logging

__all__ = ["logger", "initialize_loggers"]

settings = Settings()

logger = setup_logging(__name__, level=settings.logging.verbosity_level)


def initialize_loggers(
    verbose: bool | None = True,
    verbose_level: str | None = None,
) -> logging.Logger:
    """
    Initialize all loggers with consistent settings.

    Args:
        verbose: Whether the models logger emits anything below CRITICAL
        verbose_level: Level name (DEBUG, INFO, ...); defaults to the settings value

    Returns:
        The application logger
    """
    if verbose_level is None:
        verbose_level = settings.logging.verbosity_level

    setup_models_logging(verbose=bool(verbose), verbose_level=verbose_level)

    global logger
    logger = setup_logging(__name__, level=verbose_level)

    return logger

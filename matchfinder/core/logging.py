import logging
from logging.handlers import RotatingFileHandler

from matchfinder.core.config import Settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(settings: Settings) -> logging.Logger:
    """Configure the root logger: console always, rotating file if LOG_FILE is set."""
    formatter = logging.Formatter(LOG_FORMAT)

    logger = logging.getLogger()
    logger.setLevel(settings.LOG_LEVEL.upper())

    # Re-running setup (scheduled imports, reloads) must not stack handlers
    for handler in list(logger.handlers):
        if getattr(handler, "_matchfinder", False):
            logger.removeHandler(handler)

    handlers = [logging.StreamHandler()]
    if settings.LOG_FILE:
        handlers.append(RotatingFileHandler(settings.LOG_FILE, maxBytes=5 * 1024 * 1024, backupCount=3))

    for handler in handlers:
        handler.setFormatter(formatter)
        handler._matchfinder = True
        logger.addHandler(handler)

    return logger

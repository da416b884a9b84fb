import logging
import os
import sys
from logging.handlers import RotatingFileHandler

from . import config


_UVICORN_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")
DECODER_LOGGER = "camsight.decoders"


def _level(debug: bool) -> int:
    return logging.DEBUG if debug else logging.INFO


def _configure_decoder_logger() -> logging.Logger:
    # Registry and availability probe output; inherits the app level unless traced.
    logger = logging.getLogger(DECODER_LOGGER)
    logger.setLevel(logging.DEBUG if config.DECODER_DEBUG else logging.NOTSET)
    logger.propagate = True
    return logger


def setup_logging() -> logging.Logger:
    """Set up the "camsight" logger and its "camsight.decoders" child."""
    logger = logging.getLogger("camsight")
    logger.setLevel(_level(config.DEBUG))
    _configure_decoder_logger()

    if not config.LOG_ENABLED:
        logger.handlers.clear()
        logger.addHandler(logging.NullHandler())
        logger.propagate = False
        for name in _UVICORN_LOGGERS:
            ul = logging.getLogger(name)
            ul.handlers.clear()
            ul.propagate = False
            ul.setLevel(logging.CRITICAL)
        return logger

    if logger.handlers:
        return logger

    os.makedirs(os.path.dirname(config.LOG_FILE) or config.DATA_DIR, exist_ok=True)
    fmt = logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s")
    # Handlers pass whatever the loggers let through so decoder tracing reaches them.
    handler_level = _level(config.DEBUG or config.DECODER_DEBUG)

    file_handler = RotatingFileHandler(config.LOG_FILE, maxBytes=2_000_000, backupCount=3, encoding="utf-8")
    file_handler.setFormatter(fmt)
    file_handler.setLevel(handler_level)
    logger.addHandler(file_handler)

    console = None
    if config.CONSOLE_LOG:
        console = logging.StreamHandler(sys.stdout)
        console.setFormatter(fmt)
        console.setLevel(handler_level)
        logger.addHandler(console)

    for name in _UVICORN_LOGGERS:
        ul = logging.getLogger(name)
        ul.handlers.clear()
        ul.propagate = False
        ul.setLevel(_level(config.DEBUG))
        ul.addHandler(file_handler)
        if console is not None:
            ul.addHandler(console)

    return logger


log = setup_logging()
decoder_log = logging.getLogger(DECODER_LOGGER)


def reload_logging() -> logging.Logger:
    """Reload logger level and handlers from current configuration."""
    logger = logging.getLogger("camsight")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        try:
            handler.close()
        except Exception:
            pass
    logger.propagate = True

    for name in _UVICORN_LOGGERS:
        ul = logging.getLogger(name)
        ul.handlers.clear()
        ul.propagate = True

    return setup_logging()

import logging

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "loomstats"


def configure_logging(level: str = "INFO") -> logging.Logger:
    """Attach a rich handler to the package logger.

    Safe to call more than once; the handler is only installed the first time
    and later calls just adjust the level.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        handler = RichHandler(
            console=Console(stderr=True),
            rich_tracebacks=True,
            show_time=True,
            show_path=False,
        )
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)

    return logger

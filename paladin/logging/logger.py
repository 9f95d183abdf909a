import functools
import logging
import sys

from rich.logging import RichHandler
from termcolor import colored

LOG_MODES = ("rich", "color", "plain")
DATE_FORMAT = "%m/%d %H:%M:%S"


class ColorfulFormatter(logging.Formatter):
    """Prefixes warnings and errors with a highlighted level name."""

    def formatMessage(self, record):
        log = super().formatMessage(record)

        if record.levelno == logging.WARNING:
            prefix = colored("WARNING", "red", attrs=["blink"])

        elif record.levelno >= logging.ERROR:
            prefix = colored("ERROR", "red", attrs=["blink", "underline"])

        else:
            return log

        return prefix + " " + log


@functools.lru_cache()  # so that calling make_logger multiple times won't add many handlers
def make_logger(name="paladin", mode="rich", level="INFO"):
    """
    Initialize a logger with a single handler.
    Args:
        name (str): the logger name
        mode (str): "rich" for rich.logging.RichHandler, "color" for a termcolor
            formatter on stdout, "plain" for an uncolored formatter on stdout.
        level (str): a logging level name such as "DEBUG" or "INFO".
    Returns:
        logging.Logger: a logger
    """

    if mode not in LOG_MODES:
        raise ValueError(f"unknown log mode '{mode}', expected one of {LOG_MODES}")

    logger = logging.getLogger(name)

    if logger.handlers:
        return logger

    logger.setLevel(level)
    logger.propagate = False

    if mode == "rich":
        logger.addHandler(RichHandler(level=level, log_time_format=DATE_FORMAT))

        return logger

    ch = logging.StreamHandler(stream=sys.stdout)
    ch.setLevel(level)

    if mode == "color":
        formatter = ColorfulFormatter(
            colored("[%(asctime)s %(name)s]: ", "green") + "%(message)s",
            datefmt=DATE_FORMAT,
        )

    else:
        formatter = logging.Formatter(
            "[%(asctime)s] %(name)s %(levelname)s: %(message)s", datefmt=DATE_FORMAT
        )

    ch.setFormatter(formatter)
    logger.addHandler(ch)

    return logger

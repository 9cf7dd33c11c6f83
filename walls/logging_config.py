"""Logging setup for applications embedding the wall engine.

Library modules only create loggers; handlers are attached here, once, by
the host application.
"""
import logging
import sys

_NAMESPACES = ("walls", "geom2d")


def setup_logging(level: int = logging.INFO, log_file: str | None = None) -> None:
    """Attach a stdout handler (and optionally a file handler) to the engine loggers.

    Existing handlers are cleared so repeated calls do not duplicate output.
    """
    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode='w', encoding='utf-8'))
    for h in handlers:
        h.setLevel(level)
        h.setFormatter(formatter)

    for name in _NAMESPACES:
        logger = logging.getLogger(name)
        logger.setLevel(level)
        for old in list(logger.handlers):
            logger.removeHandler(old)
            old.close()
        for h in handlers:
            logger.addHandler(h)

    logging.getLogger("walls").info("Logging initialized.")

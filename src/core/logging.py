"""Logging configuration for the random number library.

Library modules obtain loggers through :func:`get_logger`; they all live
under the ``mtprng`` namespace, which carries a ``NullHandler`` so that
importing the library never prints anything. Only command-line entry points
call :func:`configure_logging`.
"""

from __future__ import annotations

import logging

__all__ = ["ROOT_LOGGER_NAME", "get_logger", "configure_logging"]

ROOT_LOGGER_NAME = "mtprng"

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

logging.getLogger(ROOT_LOGGER_NAME).addHandler(logging.NullHandler())


def get_logger(name: str) -> logging.Logger:
    """Return the library logger for a module name (e.g. ``prng.seeding``)."""
    if name == ROOT_LOGGER_NAME or name.startswith(ROOT_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def configure_logging(level: int | str = logging.INFO) -> logging.Logger:
    """Attach a stream handler to the library root logger.

    Calling this more than once replaces the level but does not stack handlers.

    Args:
        level: Logging level as int or name (e.g. "DEBUG").

    Returns:
        The configured root library logger.
    """
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown log level: {level}")
        level = resolved

    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(level)
    if not any(getattr(h, "_mtprng_stream", False) for h in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_LOG_FORMAT))
        handler._mtprng_stream = True  # type: ignore[attr-defined]
        root.addHandler(handler)
    return root

import logging
import os
from typing import Dict, Union


_LOGGER_CACHE: Dict[str, logging.Logger] = {}


def _default_level() -> int:
    return logging.DEBUG if str(os.getenv("LONGSHOT_DEBUG", "false")).lower() == "true" else logging.INFO


def get_logger(name: str) -> logging.Logger:
    """Return a configured logger.

    Respects LONGSHOT_DEBUG env var to set DEBUG/INFO level.
    Ensures we don't duplicate handlers across multiple imports.
    """
    lg = _LOGGER_CACHE.get(name)
    if lg:
        return lg
    lg = logging.getLogger(name)
    if not lg.handlers:
        level = _default_level()
        lg.setLevel(level)
        handler = logging.StreamHandler()
        handler.setLevel(level)
        fmt = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
        handler.setFormatter(fmt)
        lg.addHandler(handler)
        lg.propagate = False
    _LOGGER_CACHE[name] = lg
    return lg


def set_log_level(level: Union[int, str]) -> None:
    """Change the level of every logger handed out by get_logger."""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    for lg in _LOGGER_CACHE.values():
        lg.setLevel(level)
        for handler in lg.handlers:
            handler.setLevel(level)

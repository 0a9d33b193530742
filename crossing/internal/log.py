"""
Logging helpers for the crossing engine.

Every component asks for a named logger through `get_logger`; levels are
resolved from the environment the first time a logger is requested:

    CROSSING_LOG_LEVEL=DEBUG          # default level for every module
    CROSSING_LOG_RUN_STATE=DEBUG      # level for crossing.run_state only

Or programmatically:

    from crossing.internal.log import configure_logging
    configure_logging(level="DEBUG", modules={"scheduler": "INFO"})
"""

from __future__ import annotations

import logging
import os
from typing import Dict, Optional

ROOT_LOGGER_NAME = "crossing"
ENV_PREFIX = "CROSSING_LOG_"

_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

_configured = False


def _level_from_string(level: str) -> int:
    return _LEVELS.get(level.upper(), logging.INFO)


def _module_key(module: str) -> str:
    return module.lower().replace(".", "_")


def configure_logging(
    level: str = "WARNING",
    modules: Optional[Dict[str, str]] = None,
) -> None:
    """
    Set the default level of the engine loggers and, optionally, per-module
    overrides. Attaches a stream handler to the root engine logger once.
    """
    global _configured

    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(_level_from_string(level))
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("[%(name)s] %(levelname)s: %(message)s"))
        root.addHandler(handler)

    for module, module_level in (modules or {}).items():
        logging.getLogger(f"{ROOT_LOGGER_NAME}.{_module_key(module)}").setLevel(
            _level_from_string(module_level)
        )
    _configured = True


def _load_env_config() -> None:
    modules = {}
    for key, value in os.environ.items():
        if key.startswith(ENV_PREFIX) and key != f"{ENV_PREFIX}LEVEL":
            modules[key[len(ENV_PREFIX):].lower()] = value
    configure_logging(os.environ.get(f"{ENV_PREFIX}LEVEL", "WARNING"), modules)


def get_logger(module: str) -> logging.Logger:
    if not _configured:
        _load_env_config()
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{_module_key(module)}")

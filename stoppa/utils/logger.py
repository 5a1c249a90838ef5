"""Structured logging configuration."""
import logging
import sys
from typing import Optional

from stoppa.config import config

ROOT_LOGGER = "stoppa"


def _configure_root() -> logging.Logger:
    """Attach the stdout handler to the package root logger once."""
    root = logging.getLogger(ROOT_LOGGER)
    
    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        formatter = logging.Formatter(
            "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )
        handler.setFormatter(formatter)
        root.addHandler(handler)
        root.setLevel(getattr(logging, config.log_level.upper(), logging.INFO))
    
    return root


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get a configured logger instance.
    
    Module loggers are children of the ``stoppa`` logger, so a single
    handler and level apply to the whole package.
    
    Args:
        name: Logger name, typically __name__ of the calling module.
        
    Returns:
        Configured logger instance.
    """
    root = _configure_root()
    if not name or name == ROOT_LOGGER:
        return root
    if not name.startswith(ROOT_LOGGER + "."):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)


def set_log_level(level: str) -> None:
    """Change the package log level at runtime (e.g. quiet the CLI)."""
    _configure_root().setLevel(getattr(logging, level.upper(), logging.INFO))

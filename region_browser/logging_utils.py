"""Logging helpers shared by every region_browser module."""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Callable, Optional, Union

PACKAGE_FOLDER_NAME = Path(__file__).resolve().parent.name
LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s [%(threadName)s]: %(message)s"

BASE_LOGGER = logging.getLogger(PACKAGE_FOLDER_NAME)
BASE_LOGGER.propagate = True

_EXCEPTION_HOOKS_INSTALLED = False
THREAD_NAME_PREFIX = "region-browser"


def get_logger(suffix: str | None = None) -> logging.Logger:
    """Return the shared package logger or one of its children."""

    if suffix is None:
        return BASE_LOGGER
    logger = BASE_LOGGER.getChild(suffix)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
    return logger


def coerce_log_level(value: object) -> Optional[int]:
    """Translate ``"debug"``, ``"10"`` or ``10`` into a logging level."""

    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        candidate = value.strip()
        if not candidate:
            return None
        if candidate.isdigit():
            return int(candidate)
        level = logging.getLevelName(candidate.upper())
        if isinstance(level, int):
            return level
    return None


def set_log_level(level: Union[int, str]) -> None:
    """Update the base logger level (and implicitly its children)."""

    resolved = coerce_log_level(level)
    if resolved is None:
        BASE_LOGGER.warning("Ignoring unknown log level %r", level)
        return
    BASE_LOGGER.setLevel(resolved)


def configure_logging(level: Union[int, str] = logging.INFO) -> None:
    """Attach a stderr handler to the base logger once."""

    if not any(getattr(handler, "_region_browser", False) for handler in BASE_LOGGER.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._region_browser = True  # type: ignore[attr-defined]
        BASE_LOGGER.addHandler(handler)
    set_log_level(level)


def build_thread_excepthook(
    logger: logging.Logger,
    prior_hook: Callable[[threading.ExceptHookArgs], object],
) -> Callable[[threading.ExceptHookArgs], None]:
    """Log exceptions from the browser's worker threads, defer the rest."""

    def _thread_excepthook(args: threading.ExceptHookArgs) -> None:
        thread_name = args.thread.name if args.thread is not None else ""
        if thread_name.lower().startswith(THREAD_NAME_PREFIX):
            logger.error(
                "Unhandled exception in thread %s",
                thread_name,
                exc_info=(args.exc_type, args.exc_value, args.exc_traceback),
            )
            return
        prior_hook(args)

    return _thread_excepthook


def install_exception_logging(logger: logging.Logger | None = None) -> None:
    """Route exceptions escaping the browser's worker threads to the log."""

    global _EXCEPTION_HOOKS_INSTALLED
    if _EXCEPTION_HOOKS_INSTALLED:
        return
    threading.excepthook = build_thread_excepthook(logger or BASE_LOGGER, threading.excepthook)
    _EXCEPTION_HOOKS_INSTALLED = True

"""Runtime settings resolved from defaults, the environment and CLI flags."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Mapping, Optional

from .logging_utils import coerce_log_level, get_logger

_log = get_logger("settings")

DEFAULT_API_ROOT = "http://blackbuck-fe.appspot.com"
DEFAULT_TIMEOUT = 10.0
DEFAULT_CACHE_TTL = 300.0
DEFAULT_PREFS_PATH = Path.home() / ".region_browser" / "preferences.json"

ENV_API_ROOT = "REGION_BROWSER_API_ROOT"
ENV_TIMEOUT = "REGION_BROWSER_TIMEOUT"
ENV_CACHE_TTL = "REGION_BROWSER_CACHE_TTL"
ENV_PREFS = "REGION_BROWSER_PREFS"
ENV_LOG_LEVEL = "REGION_BROWSER_LOG_LEVEL"


@dataclass(frozen=True)
class Settings:
    api_root: str = DEFAULT_API_ROOT
    request_timeout: float = DEFAULT_TIMEOUT
    search_min_chars: int = 1
    search_cache_ttl: float = DEFAULT_CACHE_TTL
    prefs_path: Optional[Path] = DEFAULT_PREFS_PATH
    log_level: str = "INFO"

    def with_overrides(self, **overrides: object) -> "Settings":
        """Return a copy with every non-``None`` override applied."""

        cleaned = {key: value for key, value in overrides.items() if value is not None}
        if "api_root" in cleaned:
            cleaned["api_root"] = normalize_api_root(str(cleaned["api_root"]))
        if "prefs_path" in cleaned:
            cleaned["prefs_path"] = Path(str(cleaned["prefs_path"])).expanduser()
        return replace(self, **cleaned)


def normalize_api_root(value: Optional[str]) -> str:
    candidate = (value or "").strip().rstrip("/")
    return candidate or DEFAULT_API_ROOT


def clamp_timeout(value: object) -> float:
    try:
        timeout = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        timeout = DEFAULT_TIMEOUT
    return max(1.0, min(120.0, timeout))


def clamp_cache_ttl(value: object) -> float:
    try:
        ttl = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        ttl = DEFAULT_CACHE_TTL
    return max(0.0, min(86_400.0, ttl))


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build settings from ``environ`` (defaults to ``os.environ``)."""

    env = os.environ if environ is None else environ

    timeout = DEFAULT_TIMEOUT
    raw_timeout = env.get(ENV_TIMEOUT)
    if raw_timeout:
        timeout = clamp_timeout(raw_timeout)

    ttl = DEFAULT_CACHE_TTL
    raw_ttl = env.get(ENV_CACHE_TTL)
    if raw_ttl:
        ttl = clamp_cache_ttl(raw_ttl)

    prefs_path: Optional[Path] = DEFAULT_PREFS_PATH
    raw_prefs = (env.get(ENV_PREFS) or "").strip()
    if raw_prefs:
        prefs_path = Path(raw_prefs).expanduser()

    log_level = (env.get(ENV_LOG_LEVEL) or "INFO").strip().upper()
    if coerce_log_level(log_level) is None:
        _log.warning("Unknown log level %r in %s; using INFO", log_level, ENV_LOG_LEVEL)
        log_level = "INFO"

    return Settings(
        api_root=normalize_api_root(env.get(ENV_API_ROOT)),
        request_timeout=timeout,
        search_cache_ttl=ttl,
        prefs_path=prefs_path,
        log_level=log_level,
    )


__all__ = [
    "DEFAULT_API_ROOT",
    "Settings",
    "clamp_cache_ttl",
    "clamp_timeout",
    "load_settings",
    "normalize_api_root",
]

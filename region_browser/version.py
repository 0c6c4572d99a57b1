"""Centralized application metadata and version helpers."""

from __future__ import annotations


APP_NAME = "Region Browser"
APP_VERSION = "0.3.0"


def display_version(value: str) -> str:
    """Return a version string prefixed with ``v`` if missing."""

    value = value.strip()
    return value if value.lower().startswith("v") else f"v{value}"


def user_agent() -> str:
    return f"region-browser/{APP_VERSION}"


__all__ = ["APP_NAME", "APP_VERSION", "display_version", "user_agent"]

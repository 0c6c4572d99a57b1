"""Shared HTTP session for the places API clients."""

from __future__ import annotations

from typing import Optional

import requests

from .version import user_agent

_SESSION: Optional[requests.Session] = None


def _build_user_agent(existing: Optional[str]) -> str:
    agent = user_agent()
    candidate = (existing or "").strip()
    if candidate and agent in candidate:
        return candidate
    if candidate:
        return f"{candidate} {agent}"
    return agent


def get_shared_session() -> requests.Session:
    """Return the lazily created session shared by every client."""

    global _SESSION
    if _SESSION is None:
        session = requests.Session()
        session.headers["User-Agent"] = _build_user_agent(session.headers.get("User-Agent"))
        session.headers["Accept"] = "application/json"
        _SESSION = session
    return _SESSION


__all__ = ["get_shared_session"]

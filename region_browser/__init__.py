"""Search states and browse their cities through a remote places service."""

from __future__ import annotations

from .controller import AppController
from .preferences import PreferenceStore
from .state import CityRecord, ControllerPhase, Option, SessionState, SortDirection
from .version import APP_VERSION

__version__ = APP_VERSION

__all__ = [
    "APP_VERSION",
    "AppController",
    "CityRecord",
    "ControllerPhase",
    "Option",
    "PreferenceStore",
    "SessionState",
    "SortDirection",
    "__version__",
]

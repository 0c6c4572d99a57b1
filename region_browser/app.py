"""Wiring of settings, clients, preferences and the controller."""

from __future__ import annotations

from typing import Optional

import requests

from .controller import AppController, Runner
from .integrations.city_dataset import CityDatasetFetcher
from .integrations.places_api import PlacesApiClient
from .integrations.state_search import StateSearchProvider
from .logging_utils import get_logger
from .preferences import PreferenceStore
from .settings import Settings
from .storage import JsonFileStorage, KeyValueStorage

_log = get_logger()


def build_places_client(settings: Settings, session: Optional[requests.Session] = None) -> PlacesApiClient:
    return PlacesApiClient(settings.api_root, session=session, timeout=settings.request_timeout)


def build_storage(settings: Settings) -> Optional[KeyValueStorage]:
    if settings.prefs_path is None:
        _log.info("No preferences file configured; selections will not be remembered")
        return None
    return JsonFileStorage(settings.prefs_path)


def build_controller(
    settings: Settings,
    *,
    session: Optional[requests.Session] = None,
    storage: Optional[KeyValueStorage] = None,
    runner: Optional[Runner] = None,
) -> AppController:
    """Create a controller for ``settings``; ``storage`` overrides the file."""

    api = build_places_client(settings, session)
    if storage is None:
        storage = build_storage(settings)
    return AppController(
        StateSearchProvider(api, cache_ttl=settings.search_cache_ttl),
        CityDatasetFetcher(api),
        PreferenceStore(storage),
        runner=runner,
        search_min_chars=settings.search_min_chars,
    )


__all__ = ["build_controller", "build_places_client", "build_storage"]

"""Search-as-you-type lookups against the ``/states`` endpoint."""

from __future__ import annotations

import threading
import time
from typing import Callable, Dict, List, Optional, Tuple

from ..logging_utils import get_logger
from ..settings import DEFAULT_CACHE_TTL
from ..state import RequestOutcome, Option
from .places_api import Place, PlacesApiClient

_log = get_logger("places")

SearchResult = RequestOutcome[Tuple[Option, ...]]


def _place_to_option(place: Place) -> Optional[Option]:
    return Option.from_payload({"value": place.get("id"), "label": place.get("state")})


class StateSearchProvider:
    """Map ``{id, state}`` places to options, caching successful queries."""

    def __init__(
        self,
        api: PlacesApiClient,
        *,
        cache_ttl: float = DEFAULT_CACHE_TTL,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._api = api
        self._cache_ttl = max(0.0, float(cache_ttl))
        self._clock = clock
        self._cache: Dict[str, Tuple[float, Tuple[Option, ...]]] = {}
        self._lock = threading.Lock()

    def search(self, query_text: str) -> SearchResult:
        query = query_text or ""
        cached = self._cached(query)
        if cached is not None:
            _log.debug("State search query=%r served from cache", query)
            return RequestOutcome.success(cached)

        outcome = self._api.get_places("states", {"query": query})
        if not outcome.ok:
            return RequestOutcome.failure(outcome.kind, outcome.error or "search failed", value=())

        options: List[Option] = []
        for place in outcome.value or ():
            option = _place_to_option(place)
            if option is None:
                _log.debug("Skipping state without a usable id: %r", place)
                continue
            options.append(option)

        result = tuple(options)
        self._remember(query, result)
        return RequestOutcome.success(result)

    def clear_cache(self) -> None:
        with self._lock:
            self._cache.clear()

    def _cached(self, query: str) -> Optional[Tuple[Option, ...]]:
        if self._cache_ttl <= 0:
            return None
        with self._lock:
            entry = self._cache.get(query)
            if entry is None:
                return None
            stored_at, options = entry
            if self._clock() - stored_at >= self._cache_ttl:
                del self._cache[query]
                return None
            return options

    def _remember(self, query: str, options: Tuple[Option, ...]) -> None:
        if self._cache_ttl <= 0:
            return
        with self._lock:
            self._cache[query] = (self._clock(), options)


__all__ = ["SearchResult", "StateSearchProvider"]

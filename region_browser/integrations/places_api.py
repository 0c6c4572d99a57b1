"""Low-level access to the ``{places: [...]}`` endpoints."""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Tuple

import requests

from ..http_client import get_shared_session
from ..logging_utils import get_logger
from ..settings import DEFAULT_API_ROOT, DEFAULT_TIMEOUT, normalize_api_root
from ..state import DECODE_ERROR, TRANSPORT_ERROR, RequestOutcome

_log = get_logger("places")

Place = Mapping[str, Any]


class PlacesApiClient:
    """Issue GET requests against the places service and unwrap ``places``."""

    def __init__(
        self,
        api_root: str = DEFAULT_API_ROOT,
        session: Optional[requests.Session] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self._api_root = normalize_api_root(api_root)
        self._session = session or get_shared_session()
        self._timeout = timeout

    @property
    def api_root(self) -> str:
        return self._api_root

    def get_places(self, endpoint: str, params: Dict[str, object]) -> RequestOutcome[Tuple[Place, ...]]:
        url = f"{self._api_root}/{endpoint}"
        try:
            response = self._session.get(url, params=params, timeout=self._timeout)
        except requests.RequestException as exc:
            _log.warning("Places request to %s failed (params=%s): %s", endpoint, params, exc)
            return RequestOutcome.failure(TRANSPORT_ERROR, str(exc))

        if response.status_code != 200:
            _log.warning(
                "Places request to %s returned status %s (params=%s)",
                endpoint,
                response.status_code,
                params,
            )
            return RequestOutcome.failure(TRANSPORT_ERROR, f"HTTP {response.status_code}")

        try:
            payload = response.json()
        except ValueError as exc:
            _log.warning("Places response from %s is not valid JSON: %s", endpoint, exc)
            return RequestOutcome.failure(DECODE_ERROR, "invalid JSON")

        if not isinstance(payload, Mapping):
            _log.warning("Unexpected places payload from %s: %r", endpoint, payload)
            return RequestOutcome.failure(DECODE_ERROR, "payload is not an object")

        places = payload.get("places")
        if places is None:
            places = []
        if not isinstance(places, list):
            _log.warning("Unexpected 'places' value from %s: %r", endpoint, places)
            return RequestOutcome.failure(DECODE_ERROR, "'places' is not a list")

        cleaned = tuple(place for place in places if isinstance(place, Mapping))
        if len(cleaned) != len(places):
            _log.debug("Dropped %d non-object place(s) from %s", len(places) - len(cleaned), endpoint)

        _log.debug("Places request to %s params=%s returned %d place(s)", endpoint, params, len(cleaned))
        return RequestOutcome.success(cleaned)


__all__ = ["Place", "PlacesApiClient"]

"""Dependent fetch of the cities belonging to a selected state."""

from __future__ import annotations

from typing import List, Optional, Tuple, Union

from ..logging_utils import get_logger
from ..state import CityRecord, Option, RequestOutcome
from .places_api import Place, PlacesApiClient

_log = get_logger("places")

FetchResult = RequestOutcome[Tuple[CityRecord, ...]]


def _coerce_population(value: object) -> Union[int, float]:
    if isinstance(value, bool):
        raise ValueError("population must be numeric")
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        text = value.strip().replace(",", "")
        try:
            return int(text)
        except ValueError:
            return float(text)
    raise ValueError(f"population must be numeric, got {value!r}")


def place_to_city(place: Place) -> CityRecord:
    """Build a record from ``{id, city, population}``; raises ``ValueError``."""

    identifier = place.get("id")
    if isinstance(identifier, bool) or not isinstance(identifier, (int, str)):
        raise ValueError(f"city id must be an int or str, got {identifier!r}")
    city = place.get("city")
    return CityRecord(
        id=identifier,
        city="" if city is None else str(city),
        population=_coerce_population(place.get("population")),
    )


class CityDatasetFetcher:
    """Fetch ``/cities`` rows for a selection, skipping empty selections."""

    def __init__(self, api: PlacesApiClient) -> None:
        self._api = api

    def fetch_for(self, selection: Optional[Option]) -> FetchResult:
        if selection is None or not selection.has_value:
            _log.debug("City fetch skipped: no selected state")
            return RequestOutcome.skipped("no selected state")

        outcome = self._api.get_places("cities", {"state_id": selection.value})
        if not outcome.ok:
            return RequestOutcome.failure(outcome.kind, outcome.error or "fetch failed")

        records: List[CityRecord] = []
        for place in outcome.value or ():
            try:
                records.append(place_to_city(place))
            except ValueError as exc:
                _log.warning("Skipping malformed city for state %s: %s", selection.value, exc)
        return RequestOutcome.success(tuple(records))


__all__ = ["CityDatasetFetcher", "FetchResult", "place_to_city"]

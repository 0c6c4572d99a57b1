"""Preference loading and persistence for the region browser."""

from __future__ import annotations

import json
from typing import Optional, Union

from .logging_utils import get_logger
from .state import Option, PersistedPreferences, SortDirection
from .storage import KeyValueStorage

_log = get_logger("preferences")

SELECTION_KEY = "region_browser_selected_state"
SORT_KEY = "region_browser_sort"

PreferenceValue = Union[Option, SortDirection, str, int, float, bool, dict, list]

_OPTION_FIELDS = frozenset(("value", "label"))


def encode_value(value: PreferenceValue) -> str:
    """Text form written to storage; strings are stored as-is."""

    if isinstance(value, SortDirection):
        return value.value
    if isinstance(value, str):
        return value
    if isinstance(value, Option):
        return json.dumps(value.to_payload())
    return json.dumps(value)


def _decode_object(payload: dict) -> object:
    if set(payload) == _OPTION_FIELDS:
        option = Option.from_payload(payload)
        if option is not None:
            return option
    return payload


class PreferenceStore:
    """Key/value preferences with a decode step that never fails.

    Without a storage medium every call degrades to a no-op so the browser
    still runs (without remembering anything between sessions).
    """

    def __init__(self, storage: Optional[KeyValueStorage] = None) -> None:
        self._storage = storage

    def save(self, key: str, value: PreferenceValue) -> None:
        if self._storage is None:
            return
        try:
            self._storage.set(key, encode_value(value))
        except Exception:
            _log.exception("Failed to persist preference %s", key)

    def load(self, key: str) -> object:
        """Return the decoded value at ``key``, its raw text, or ``None``."""

        if self._storage is None:
            return None
        try:
            raw = self._storage.get_str(key)
        except Exception:
            _log.exception("Failed to read preference %s", key)
            return None
        if not raw:
            return None
        try:
            decoded = json.loads(raw, object_hook=_decode_object)
        except ValueError as exc:
            _log.debug("Preference %s is not JSON (%s); using raw value %r", key, exc, raw)
            return raw
        if decoded is None:
            return raw
        return decoded

    def delete(self, key: str) -> None:
        if self._storage is None:
            return
        try:
            self._storage.delete(key)
        except Exception:
            _log.exception("Failed to delete preference %s", key)

    # ------------------------------------------------------------------
    # Typed accessors for the two persisted preferences
    # ------------------------------------------------------------------
    def save_selection(self, option: Option) -> None:
        self.save(SELECTION_KEY, option)

    def save_sort_direction(self, direction: SortDirection) -> None:
        self.save(SORT_KEY, direction)

    def restore(self) -> PersistedPreferences:
        raw_selection = self.load(SELECTION_KEY)
        selection = Option.from_payload(raw_selection)
        if raw_selection is not None and selection is None:
            _log.warning("Ignoring unusable saved selection %r", raw_selection)

        raw_direction = self.load(SORT_KEY)
        direction = SortDirection.coerce(raw_direction)
        if raw_direction is not None and direction is None:
            _log.warning("Ignoring unusable saved sort direction %r", raw_direction)

        return PersistedPreferences(selected_option=selection, sort_direction=direction)

    def clear(self) -> None:
        self.delete(SELECTION_KEY)
        self.delete(SORT_KEY)


__all__ = ["PreferenceStore", "SELECTION_KEY", "SORT_KEY", "encode_value"]

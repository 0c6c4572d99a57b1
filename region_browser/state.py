"""Dataclasses describing the browser's data model and session state."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, Mapping, Optional, Tuple, TypeVar, Union

Identifier = Union[int, str]

T = TypeVar("T")

SUCCESS = "success"
TRANSPORT_ERROR = "transport_error"
DECODE_ERROR = "decode_error"
SKIPPED = "skipped"


class SortDirection(str, Enum):
    ASCENDING = "ASC"
    DESCENDING = "DESC"

    @classmethod
    def coerce(cls, value: object) -> Optional["SortDirection"]:
        """Return the direction named by ``value`` or ``None``."""

        if isinstance(value, SortDirection):
            return value
        if not isinstance(value, str):
            return None
        candidate = value.strip().upper()
        if candidate in ("ASC", "ASCENDING"):
            return cls.ASCENDING
        if candidate in ("DESC", "DESCENDING"):
            return cls.DESCENDING
        return None


class ControllerPhase(str, Enum):
    IDLE = "idle"
    SELECTING = "selecting"
    LOADING = "loading"
    LOADED = "loaded"
    SORTED = "sorted"


def _is_identifier(value: object) -> bool:
    return isinstance(value, (int, str)) and not isinstance(value, bool)


@dataclass(frozen=True)
class Option:
    """A selectable search result identifying one region."""

    value: Identifier
    label: str

    @property
    def has_value(self) -> bool:
        return self.value is not None and self.value != ""

    def to_payload(self) -> dict[str, Any]:
        return {"value": self.value, "label": self.label}

    @classmethod
    def from_payload(cls, payload: object) -> Optional["Option"]:
        if isinstance(payload, Option):
            return payload
        if not isinstance(payload, Mapping):
            return None
        value = payload.get("value")
        if not _is_identifier(value):
            return None
        label = payload.get("label")
        if label is None:
            label = str(value)
        return cls(value=value, label=str(label))


@dataclass(frozen=True)
class CityRecord:
    """One row of the dependent dataset."""

    id: Identifier
    city: str
    population: Union[int, float]


@dataclass(frozen=True)
class PersistedPreferences:
    selected_option: Optional[Option] = None
    sort_direction: Optional[SortDirection] = None


@dataclass(frozen=True)
class RequestOutcome(Generic[T]):
    """Discriminated result of a search or fetch."""

    kind: str
    value: Optional[T] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.kind == SUCCESS

    @classmethod
    def success(cls, value: T) -> "RequestOutcome[T]":
        return cls(kind=SUCCESS, value=value)

    @classmethod
    def failure(cls, kind: str, error: str, value: Optional[T] = None) -> "RequestOutcome[T]":
        return cls(kind=kind, value=value, error=error)

    @classmethod
    def skipped(cls, reason: str) -> "RequestOutcome[T]":
        return cls(kind=SKIPPED, error=reason)


@dataclass(frozen=True)
class SessionState:
    """Transient state owned by the controller and fed to the presentation."""

    cities_data: Tuple[CityRecord, ...] = ()
    query_text: str = ""
    selected_option: Optional[Option] = None
    sort_direction: Optional[SortDirection] = None
    options: Tuple[Option, ...] = ()
    phase: ControllerPhase = ControllerPhase.IDLE
    search_generation: int = 0
    fetch_generation: int = 0

    @property
    def is_loading(self) -> bool:
        return self.phase is ControllerPhase.LOADING


__all__ = [
    "CityRecord",
    "ControllerPhase",
    "DECODE_ERROR",
    "Identifier",
    "Option",
    "PersistedPreferences",
    "RequestOutcome",
    "SKIPPED",
    "SUCCESS",
    "SessionState",
    "SortDirection",
    "TRANSPORT_ERROR",
]

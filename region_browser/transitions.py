"""Pure session transitions.

Each function takes the current :class:`SessionState` plus the event payload
and returns the next state together with the effects the controller must
carry out (searches, fetches and preference writes). Nothing here performs
I/O, which keeps the selection cascade testable without a network or a
storage medium.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional, Tuple, Union

from .sorting import sort_cities, toggle_sort_direction
from .state import (
    CityRecord,
    ControllerPhase,
    Option,
    PersistedPreferences,
    RequestOutcome,
    SessionState,
    SortDirection,
)


@dataclass(frozen=True)
class SearchStates:
    query: str
    token: int


@dataclass(frozen=True)
class FetchCities:
    option: Option
    token: int


@dataclass(frozen=True)
class PersistSelection:
    option: Option


@dataclass(frozen=True)
class PersistSortDirection:
    direction: SortDirection


Effect = Union[SearchStates, FetchCities, PersistSelection, PersistSortDirection]
Transition = Tuple[SessionState, Tuple[Effect, ...]]


def settled_phase(state: SessionState) -> ControllerPhase:
    """Phase to fall back to once nothing is in flight."""

    if not state.cities_data:
        return ControllerPhase.IDLE
    if state.sort_direction is not None:
        return ControllerPhase.SORTED
    return ControllerPhase.LOADED


def query_input(state: SessionState, text: str, *, min_chars: int = 1) -> Transition:
    token = state.search_generation + 1
    phase = state.phase if state.is_loading else ControllerPhase.SELECTING
    if len(text.strip()) < min_chars:
        # Bumping the generation drops any search still in flight.
        next_state = replace(
            state,
            query_text=text,
            options=(),
            search_generation=token,
            phase=state.phase if state.is_loading else settled_phase(state),
        )
        return next_state, ()
    next_state = replace(state, query_text=text, search_generation=token, phase=phase)
    return next_state, (SearchStates(query=text, token=token),)


def search_completed(
    state: SessionState,
    token: int,
    outcome: RequestOutcome[Tuple[Option, ...]],
) -> Transition:
    if token != state.search_generation:
        return state, ()
    options = tuple(outcome.value or ()) if outcome.ok else ()
    return replace(state, options=options), ()


def _begin_fetch(state: SessionState, option: Option) -> Tuple[SessionState, FetchCities]:
    token = state.fetch_generation + 1
    next_state = replace(
        state,
        selected_option=option,
        fetch_generation=token,
        phase=ControllerPhase.LOADING,
    )
    return next_state, FetchCities(option=option, token=token)


def select(state: SessionState, option: Optional[Option]) -> Transition:
    if option is None:
        # Clearing the selection also clears the rows fetched for it.
        next_state = replace(
            state,
            selected_option=None,
            cities_data=(),
            fetch_generation=state.fetch_generation + 1,
        )
        return replace(next_state, phase=settled_phase(next_state)), ()

    if not option.has_value:
        return replace(state, selected_option=option), ()

    next_state, fetch = _begin_fetch(state, option)
    return next_state, (PersistSelection(option=option), fetch)


def restore(state: SessionState, preferences: PersistedPreferences) -> Transition:
    next_state = replace(
        state,
        selected_option=preferences.selected_option,
        sort_direction=preferences.sort_direction,
    )
    option = preferences.selected_option
    if option is None or not option.has_value:
        return replace(next_state, phase=settled_phase(next_state)), ()
    next_state, fetch = _begin_fetch(next_state, option)
    return next_state, (fetch,)


def fetch_completed(
    state: SessionState,
    token: int,
    outcome: RequestOutcome[Tuple[CityRecord, ...]],
) -> Transition:
    if token != state.fetch_generation:
        return state, ()
    if not outcome.ok:
        return replace(state, phase=settled_phase(state)), ()

    records: Tuple[CityRecord, ...] = tuple(outcome.value or ())
    if state.sort_direction is not None:
        records = tuple(sort_cities(records, state.sort_direction))
    next_state = replace(state, cities_data=records)
    return replace(next_state, phase=settled_phase(next_state)), ()


def sort_toggle(state: SessionState) -> Transition:
    direction = toggle_sort_direction(state.sort_direction)
    records = tuple(sort_cities(state.cities_data, direction))
    phase = state.phase if state.is_loading else ControllerPhase.SORTED
    next_state = replace(state, sort_direction=direction, cities_data=records, phase=phase)
    return next_state, (PersistSortDirection(direction=direction),)


__all__ = [
    "Effect",
    "FetchCities",
    "PersistSelection",
    "PersistSortDirection",
    "SearchStates",
    "Transition",
    "fetch_completed",
    "query_input",
    "restore",
    "search_completed",
    "select",
    "settled_phase",
    "sort_toggle",
]

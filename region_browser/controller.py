"""Session controller coordinating search, fetch, sort and preferences."""

from __future__ import annotations

import queue
import threading
from typing import Callable, List, Optional, Tuple

from .integrations.city_dataset import CityDatasetFetcher
from .integrations.state_search import StateSearchProvider
from .logging_utils import THREAD_NAME_PREFIX, get_logger
from .preferences import PreferenceStore
from .state import TRANSPORT_ERROR, Option, RequestOutcome, SessionState
from . import transitions
from .transitions import (
    Effect,
    FetchCities,
    PersistSelection,
    PersistSortDirection,
    SearchStates,
    Transition,
)

_log = get_logger("controller")

SEARCH = "search"
FETCH = "fetch"

Runner = Callable[[str, Callable[[], None]], None]
Listener = Callable[[SessionState], None]


def run_in_thread(name: str, work: Callable[[], None]) -> None:
    threading.Thread(target=work, name=name, daemon=True).start()


def run_inline(name: str, work: Callable[[], None]) -> None:
    work()


class AppController:
    """Own the session state and apply the browser's state transitions.

    Network calls run through ``runner`` (a daemon thread per request by
    default). Their outcomes are queued and only applied to the session
    when the owning thread calls :meth:`process_pending`, so session state
    is never touched from a worker. Every request carries a token; an
    outcome whose token is no longer the latest for its kind is dropped.
    """

    def __init__(
        self,
        search_provider: StateSearchProvider,
        dataset_fetcher: CityDatasetFetcher,
        preferences: PreferenceStore,
        *,
        runner: Optional[Runner] = None,
        search_min_chars: int = 1,
    ) -> None:
        self._search = search_provider
        self._fetcher = dataset_fetcher
        self._preferences = preferences
        self._runner = runner or run_in_thread
        self._search_min_chars = max(0, int(search_min_chars))
        self._state = SessionState()
        self._outcomes: "queue.Queue[Tuple[str, int, RequestOutcome]]" = queue.Queue()
        self._listeners: List[Listener] = []

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    @property
    def state(self) -> SessionState:
        return self._state

    def add_listener(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass

    def start(self) -> None:
        preferences = self._preferences.restore()
        _log.info(
            "Restoring session: selection=%s sort=%s",
            preferences.selected_option.label if preferences.selected_option else None,
            preferences.sort_direction.value if preferences.sort_direction else None,
        )
        self._apply(transitions.restore(self._state, preferences))

    def on_query_input(self, text: str) -> None:
        self._apply(transitions.query_input(self._state, text or "", min_chars=self._search_min_chars))

    def on_select(self, option: Optional[Option]) -> None:
        self._apply(transitions.select(self._state, option))

    def on_sort_toggle(self) -> None:
        self._apply(transitions.sort_toggle(self._state))

    def process_pending(self) -> int:
        """Apply every queued outcome; return how many were drained."""

        processed = 0
        while True:
            try:
                kind, token, outcome = self._outcomes.get_nowait()
            except queue.Empty:
                break
            processed += 1
            if kind == SEARCH:
                self._apply(transitions.search_completed(self._state, token, outcome))
            else:
                if token != self._state.fetch_generation:
                    _log.debug("Discarding stale city fetch (token=%s, latest=%s)", token, self._state.fetch_generation)
                self._apply(transitions.fetch_completed(self._state, token, outcome))
        return processed

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _apply(self, transition: Transition) -> None:
        next_state, effects = transition
        changed = next_state != self._state
        self._state = next_state
        for effect in effects:
            self._run_effect(effect)
        if changed:
            self._notify()

    def _run_effect(self, effect: Effect) -> None:
        if isinstance(effect, PersistSelection):
            self._preferences.save_selection(effect.option)
        elif isinstance(effect, PersistSortDirection):
            self._preferences.save_sort_direction(effect.direction)
        elif isinstance(effect, SearchStates):
            query = effect.query
            self._submit(SEARCH, effect.token, lambda: self._search.search(query))
        elif isinstance(effect, FetchCities):
            option = effect.option
            self._submit(FETCH, effect.token, lambda: self._fetcher.fetch_for(option))
        else:  # pragma: no cover - exhaustive over Effect
            raise TypeError(f"Unknown effect {effect!r}")

    def _submit(self, kind: str, token: int, work: Callable[[], RequestOutcome]) -> None:
        def worker() -> None:
            try:
                outcome = work()
            except Exception as exc:
                _log.exception("Unexpected error during %s request", kind)
                outcome = RequestOutcome.failure(TRANSPORT_ERROR, str(exc), value=() if kind == SEARCH else None)
            self._outcomes.put((kind, token, outcome))

        self._runner(f"{THREAD_NAME_PREFIX}-{kind}", worker)

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self._state)
            except Exception:
                _log.exception("State listener %r failed", listener)


__all__ = ["AppController", "Runner", "run_in_thread", "run_inline"]

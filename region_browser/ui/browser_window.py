"""Main browser window: state search box plus the sortable cities table."""

from __future__ import annotations

from typing import Optional, Tuple

try:
    import tkinter as tk
    from tkinter import ttk
except ImportError as exc:  # pragma: no cover - tkinter ships with CPython
    raise RuntimeError("Tkinter must be available to run the region browser window") from exc

from ..controller import AppController
from ..formatting import format_population, header_label
from ..logging_utils import get_logger
from ..state import CityRecord, ControllerPhase, Option, SessionState
from ..version import APP_NAME, APP_VERSION, display_version

_log = get_logger("ui")

_STATUS_TEXT = {
    ControllerPhase.IDLE: "Search for a state to list its cities.",
    ControllerPhase.SELECTING: "Pick a state from the suggestions.",
    ControllerPhase.LOADING: "Loading cities...",
}


class BrowserWindow:
    """Render :class:`SessionState` and forward user input to the controller."""

    SEARCH_DEBOUNCE_MS = 200
    POLL_INTERVAL_MS = 100

    def __init__(self, root: tk.Tk, controller: AppController) -> None:
        self._root = root
        self._controller = controller
        self._search_job: Optional[str] = None
        self._poll_job: Optional[str] = None
        self._rendered_options: Tuple[Option, ...] = ()
        self._rendered_rows: Tuple[CityRecord, ...] = ()

        self._root.title(f"{APP_NAME} {display_version(APP_VERSION)}")
        self._root.minsize(640, 420)
        self._root.protocol("WM_DELETE_WINDOW", self.close)

        self._query_var = tk.StringVar(master=self._root, value="")
        self._selection_var = tk.StringVar(master=self._root, value="")
        self._status_var = tk.StringVar(master=self._root, value="")

        self._options_listbox: Optional[tk.Listbox] = None
        self._cities_tree: Optional[ttk.Treeview] = None

        self._build_ui()
        self._controller.add_listener(self._render)
        self._render(self._controller.state)
        self._schedule_poll()

    # ------------------------------------------------------------------
    # UI construction
    # ------------------------------------------------------------------
    def _build_ui(self) -> None:
        container = tk.Frame(self._root, highlightthickness=0, bd=0)
        container.pack(fill="both", expand=True, padx=12, pady=12)

        search_frame = tk.Frame(container, highlightthickness=0, bd=0)
        search_frame.pack(fill="x")
        tk.Label(search_frame, text="Search for States", anchor="w", font=(None, 9, "bold")).pack(fill="x")

        entry = ttk.Entry(search_frame, textvariable=self._query_var)
        entry.pack(fill="x", pady=(4, 0))
        entry.bind("<Down>", self._focus_options, add="+")
        entry.bind("<Return>", self._focus_options, add="+")
        self._query_var.trace_add("write", self._on_query_changed)

        listbox = tk.Listbox(search_frame, height=6, exportselection=False)
        listbox.pack(fill="x", pady=(2, 0))
        listbox.bind("<Return>", self._apply_option_event, add="+")
        listbox.bind("<Double-Button-1>", self._apply_option_event, add="+")
        self._options_listbox = listbox

        tk.Label(search_frame, textvariable=self._selection_var, anchor="w").pack(fill="x", pady=(6, 0))

        results_frame = tk.Frame(container, highlightthickness=0, bd=0)
        results_frame.pack(fill="both", expand=True, pady=(8, 0))
        tk.Label(results_frame, text="Results", anchor="w", font=(None, 9, "bold")).pack(fill="x")

        table_frame = tk.Frame(results_frame, highlightthickness=0, bd=0)
        table_frame.pack(fill="both", expand=True)

        tree = ttk.Treeview(table_frame, columns=("id", "city", "population"), show="headings")
        tree.heading("id", text="Id", command=self._controller.on_sort_toggle)
        tree.heading("city", text="City")
        tree.heading("population", text="Population")
        tree.column("id", width=120, anchor="w")
        tree.column("city", width=240, anchor="w")
        tree.column("population", width=160, anchor="e")

        tree_scroll = ttk.Scrollbar(table_frame, orient="vertical", command=tree.yview)
        tree.configure(yscrollcommand=tree_scroll.set)
        tree.pack(side="left", fill="both", expand=True)
        tree_scroll.pack(side="right", fill="y")
        self._cities_tree = tree

        tk.Label(container, textvariable=self._status_var, anchor="w").pack(fill="x", pady=(6, 0))

    # ------------------------------------------------------------------
    # Event handlers
    # ------------------------------------------------------------------
    def _on_query_changed(self, *_: object) -> None:
        if self._search_job:
            try:
                self._root.after_cancel(self._search_job)
            except Exception:
                pass
        query = self._query_var.get()
        self._search_job = self._root.after(self.SEARCH_DEBOUNCE_MS, lambda q=query: self._send_query(q))

    def _send_query(self, query: str) -> None:
        self._search_job = None
        self._controller.on_query_input(query)

    def _focus_options(self, _event: tk.Event) -> Optional[str]:
        listbox = self._options_listbox
        if not listbox or listbox.size() == 0:
            return None
        listbox.focus_set()
        listbox.selection_clear(0, "end")
        listbox.selection_set(0)
        listbox.activate(0)
        return "break"

    def _apply_option_event(self, _event: tk.Event) -> str:
        listbox = self._options_listbox
        if not listbox:
            return "break"
        selection = listbox.curselection()
        if not selection:
            return "break"
        index = int(selection[0])
        if index >= len(self._rendered_options):
            return "break"
        self._controller.on_select(self._rendered_options[index])
        return "break"

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------
    def _render(self, state: SessionState) -> None:
        if state.options != self._rendered_options:
            self._render_options(state.options)
        if state.cities_data != self._rendered_rows:
            self._render_rows(state.cities_data)

        tree = self._cities_tree
        if tree:
            tree.heading("id", text=header_label("Id", state.sort_direction))

        if state.selected_option is not None:
            self._selection_var.set(f"Selected: {state.selected_option.label}")
        else:
            self._selection_var.set("")

        status = _STATUS_TEXT.get(state.phase)
        if status is None:
            status = f"{len(state.cities_data)} cities"
        self._status_var.set(status)

    def _render_options(self, options: Tuple[Option, ...]) -> None:
        self._rendered_options = options
        listbox = self._options_listbox
        if not listbox:
            return
        listbox.delete(0, "end")
        for option in options:
            listbox.insert("end", option.label)

    def _render_rows(self, rows: Tuple[CityRecord, ...]) -> None:
        self._rendered_rows = rows
        tree = self._cities_tree
        if not tree:
            return
        for item in tree.get_children():
            tree.delete(item)
        for record in rows:
            tree.insert("", "end", values=(record.id, record.city, format_population(record.population)))

    # ------------------------------------------------------------------
    # Polling and lifecycle
    # ------------------------------------------------------------------
    def _schedule_poll(self) -> None:
        self._poll_job = self._root.after(self.POLL_INTERVAL_MS, self._poll_outcomes)

    def _poll_outcomes(self) -> None:
        self._poll_job = None
        try:
            self._controller.process_pending()
        except Exception:
            _log.exception("Failed to apply pending results")
        self._schedule_poll()

    def close(self) -> None:
        for job in (self._search_job, self._poll_job):
            if job:
                try:
                    self._root.after_cancel(job)
                except Exception:
                    pass
        self._search_job = None
        self._poll_job = None
        self._controller.remove_listener(self._render)
        try:
            self._root.destroy()
        except Exception:
            pass


__all__ = ["BrowserWindow"]

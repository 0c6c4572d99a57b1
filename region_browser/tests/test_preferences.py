import json

import pytest

from region_browser.preferences import SELECTION_KEY, SORT_KEY, PreferenceStore, encode_value
from region_browser.state import Option, PersistedPreferences, SortDirection
from region_browser.storage import MemoryStorage


class _BrokenStorage:
    def get_str(self, key):
        raise OSError("disk unavailable")

    def set(self, key, value):
        raise OSError("disk unavailable")

    def delete(self, key):
        raise OSError("disk unavailable")


@pytest.mark.parametrize(
    "value",
    [
        Option(value="CA", label="California"),
        Option(value=6, label="California"),
        SortDirection.ASCENDING,
        SortDirection.DESCENDING,
    ],
)
def test_round_trip(value) -> None:
    store = PreferenceStore(MemoryStorage())
    store.save("key", value)
    assert store.load("key") == value


def test_saved_direction_coerces_back_to_the_enum() -> None:
    store = PreferenceStore(MemoryStorage())
    store.save("key", SortDirection.DESCENDING)
    assert SortDirection.coerce(store.load("key")) is SortDirection.DESCENDING


def test_loaded_option_is_rebuilt_but_other_objects_stay_dicts() -> None:
    store = PreferenceStore(
        MemoryStorage(
            {
                "option": '{"value": "CA", "label": "California"}',
                "nested": '{"value": "CA", "label": "California", "extra": 1}',
            }
        )
    )
    loaded = store.load("option")
    assert isinstance(loaded, Option)
    assert loaded == Option(value="CA", label="California")
    assert store.load("nested") == {"value": "CA", "label": "California", "extra": 1}


def test_json_null_loads_as_its_raw_text() -> None:
    store = PreferenceStore(MemoryStorage({"key": "null"}))
    assert store.load("key") == "null"
    assert PreferenceStore(MemoryStorage({SORT_KEY: "null"})).restore().sort_direction is None


def test_strings_are_stored_raw_and_objects_as_json() -> None:
    storage = MemoryStorage()
    store = PreferenceStore(storage)
    store.save(SORT_KEY, SortDirection.DESCENDING)
    store.save(SELECTION_KEY, Option(value="CA", label="California"))

    assert storage.get_str(SORT_KEY) == "DESC"
    assert json.loads(storage.get_str(SELECTION_KEY)) == {"value": "CA", "label": "California"}
    assert encode_value([1, 2]) == "[1, 2]"


def test_non_json_value_loads_as_raw_string() -> None:
    store = PreferenceStore(MemoryStorage({"key": "{not json"}))
    assert store.load("key") == "{not json"


def test_missing_and_empty_values_load_as_none() -> None:
    store = PreferenceStore(MemoryStorage({"empty": ""}))
    assert store.load("missing") is None
    assert store.load("empty") is None


def test_without_storage_every_call_is_a_no_op() -> None:
    store = PreferenceStore(None)
    store.save(SORT_KEY, SortDirection.ASCENDING)
    assert store.load(SORT_KEY) is None
    assert store.restore() == PersistedPreferences()


def test_storage_errors_do_not_escape() -> None:
    store = PreferenceStore(_BrokenStorage())
    store.save(SORT_KEY, SortDirection.ASCENDING)
    store.clear()
    assert store.load(SORT_KEY) is None


def test_restore_reads_both_preferences() -> None:
    store = PreferenceStore(MemoryStorage())
    store.save_selection(Option(value="CA", label="California"))
    store.save_sort_direction(SortDirection.DESCENDING)

    restored = store.restore()

    assert restored.selected_option == Option(value="CA", label="California")
    assert restored.sort_direction is SortDirection.DESCENDING


def test_restore_accepts_json_quoted_direction() -> None:
    store = PreferenceStore(MemoryStorage({SORT_KEY: '"ASC"'}))
    assert store.restore().sort_direction is SortDirection.ASCENDING


def test_restore_degrades_corrupted_values_to_absent() -> None:
    store = PreferenceStore(
        MemoryStorage({SELECTION_KEY: "California", SORT_KEY: "sideways"})
    )
    restored = store.restore()
    assert restored.selected_option is None
    assert restored.sort_direction is None


def test_clear_removes_both_keys() -> None:
    storage = MemoryStorage({SELECTION_KEY: "{}", SORT_KEY: "ASC", "other": "x"})
    PreferenceStore(storage).clear()
    assert storage.snapshot() == {"other": "x"}

"""Textual key/value media backing the preference store."""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Dict, Optional, Protocol

from .logging_utils import get_logger

_log = get_logger("storage")


class KeyValueStorage(Protocol):
    def get_str(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def delete(self, key: str) -> None:
        ...


class MemoryStorage:
    """Process-local storage, mostly for tests and ``--no-persist`` runs."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._values: Dict[str, str] = dict(initial or {})

    def get_str(self, key: str) -> Optional[str]:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value

    def delete(self, key: str) -> None:
        self._values.pop(key, None)

    def snapshot(self) -> Dict[str, str]:
        return dict(self._values)


class JsonFileStorage:
    """Durable storage kept as a flat JSON object of string values.

    Writes go through a temporary file in the same directory followed by
    ``os.replace`` so a crash never leaves a half-written file behind. A
    file that cannot be parsed is treated as empty and rewritten on the
    next ``set``.
    """

    def __init__(self, path: Path) -> None:
        self._path = Path(path)
        self._values: Optional[Dict[str, str]] = None

    @property
    def path(self) -> Path:
        return self._path

    def get_str(self, key: str) -> Optional[str]:
        value = self._load().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        values = dict(self._load())
        values[key] = value
        self._write(values)
        self._values = values

    def delete(self, key: str) -> None:
        values = dict(self._load())
        if key not in values:
            return
        del values[key]
        self._write(values)
        self._values = values

    def _load(self) -> Dict[str, str]:
        if self._values is not None:
            return self._values
        values: Dict[str, str] = {}
        try:
            with self._path.open("r", encoding="utf-8") as handle:
                payload = json.load(handle)
        except FileNotFoundError:
            payload = {}
        except (OSError, ValueError):
            _log.exception("Failed to read preferences file %s; starting empty", self._path)
            payload = {}
        if isinstance(payload, dict):
            values = {str(key): value for key, value in payload.items() if isinstance(value, str)}
        else:
            _log.warning("Preferences file %s does not hold an object; ignoring it", self._path)
        self._values = values
        return values

    def _write(self, values: Dict[str, str]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self._path.name}.", suffix=".tmp", dir=str(self._path.parent)
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(values, handle, indent=2, sort_keys=True)
            os.replace(tmp_name, self._path)
        except BaseException:
            try:
                os.unlink(tmp_name)
            except FileNotFoundError:
                pass
            raise


__all__ = ["JsonFileStorage", "KeyValueStorage", "MemoryStorage"]

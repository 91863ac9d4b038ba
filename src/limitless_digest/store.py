from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Dict, Optional, Protocol

from .utils import eprint, progress_print

DEFAULT_STATE_PATH = Path.home() / ".limitless" / "state.json"


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]: ...
    def set(self, key: str, value: str) -> None: ...
    def delete(self, key: str) -> None: ...


class JsonFileStore:
    """String key-value store persisted as a single JSON object.

    Every read goes to disk, so the file stays the source of truth across runs.
    """

    def __init__(self, path: Path=DEFAULT_STATE_PATH, verbose: bool=False):
        self.path = Path(path)
        self.verbose = verbose

    def _read(self) -> Dict[str, str]:
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        if not isinstance(data, dict):
            raise ValueError(f"State file {self.path} does not hold a JSON object")
        return data

    def _write(self, data: Dict[str, str]):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_name(self.path.name + ".tmp")
        tmp.write_text(json.dumps(data, indent=2, sort_keys=True), encoding="utf-8")
        os.replace(tmp, self.path)
        eprint(f"[State] wrote {self.path}", self.verbose)

    def get(self, key: str) -> Optional[str]:
        value = self._read().get(key)
        return None if value is None else str(value)

    def _read_for_update(self) -> Optional[Dict[str, str]]:
        # None means the file was unreadable and the next write replaces it.
        try:
            return self._read()
        except ValueError as e:
            progress_print(f"[State] {self.path} is unreadable ({e}); starting it afresh.")
            return None

    def set(self, key: str, value: str) -> None:
        data = self._read_for_update() or {}
        data[key] = value
        self._write(data)

    def delete(self, key: str) -> None:
        data = self._read_for_update()
        if data is None:
            self._write({})
        elif data.pop(key, None) is not None:
            self._write(data)

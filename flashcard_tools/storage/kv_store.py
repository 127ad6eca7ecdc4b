"""Async key-value stores used for the dictionary, cache and flashcards.

Every store follows the same small contract: ``get`` returns a mapping of the
requested keys that are present, ``set`` merges a mapping into the store and
``remove`` drops keys. Writes are last-write-wins with no transactions.
"""

from __future__ import annotations

import asyncio
import copy
import json
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Protocol, Union, runtime_checkable

from flashcard_tools import logging_manager as log_mgr

logger = log_mgr.get_logger().getChild("storage")

Keys = Union[str, Iterable[str]]


class StorageError(RuntimeError):
    """Raised when the backing store cannot be read or written."""


@runtime_checkable
class KeyValueStore(Protocol):
    """Structural interface shared by all stores."""

    async def get(self, keys: Keys) -> Dict[str, Any]:
        ...

    async def set(self, values: Mapping[str, Any]) -> None:
        ...

    async def remove(self, keys: Keys) -> None:
        ...


def _as_key_list(keys: Keys) -> list[str]:
    if isinstance(keys, str):
        return [keys]
    return [str(key) for key in keys]


class InMemoryStore:
    """Dictionary backed store.

    Values are deep-copied on the way in and out, so callers never share
    mutable state with the store.
    """

    def __init__(self, initial: Mapping[str, Any] | None = None) -> None:
        self._data: Dict[str, Any] = copy.deepcopy(dict(initial or {}))

    async def get(self, keys: Keys) -> Dict[str, Any]:
        return {
            key: copy.deepcopy(self._data[key])
            for key in _as_key_list(keys)
            if key in self._data
        }

    async def set(self, values: Mapping[str, Any]) -> None:
        for key, value in values.items():
            self._data[str(key)] = copy.deepcopy(value)

    async def remove(self, keys: Keys) -> None:
        for key in _as_key_list(keys):
            self._data.pop(key, None)

    def snapshot(self) -> Dict[str, Any]:
        """Return a deep copy of the whole store."""
        return copy.deepcopy(self._data)


class JsonFileStore:
    """Store persisted as a single JSON document on disk.

    File I/O runs in a worker thread. Writes go to a temporary file in the
    same directory and are moved into place with :func:`os.replace`.
    """

    def __init__(self, path: Union[str, Path]) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def _read_all(self) -> Dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            content = self._path.read_text(encoding="utf-8")
        except OSError as exc:
            raise StorageError(f"Failed to read store at {self._path}: {exc}") from exc
        except UnicodeDecodeError as exc:
            raise StorageError(f"Store at {self._path} is not valid UTF-8: {exc}") from exc
        if not content.strip():
            return {}
        try:
            data = json.loads(content)
        except json.JSONDecodeError as exc:
            raise StorageError(f"Store at {self._path} is not valid JSON: {exc}") from exc
        if not isinstance(data, dict):
            raise StorageError(f"Store at {self._path} must contain a JSON object")
        return data

    def _write_all(self, data: Dict[str, Any]) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self._path.name}.", suffix=".tmp", dir=self._path.parent
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    json.dump(data, handle, ensure_ascii=False, indent=2)
                os.replace(tmp_name, self._path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except (OSError, TypeError, ValueError) as exc:
            raise StorageError(f"Failed to write store at {self._path}: {exc}") from exc

    async def get(self, keys: Keys) -> Dict[str, Any]:
        data = await asyncio.to_thread(self._read_all)
        return {key: data[key] for key in _as_key_list(keys) if key in data}

    async def set(self, values: Mapping[str, Any]) -> None:
        def _merge() -> None:
            data = self._read_all()
            data.update({str(key): value for key, value in values.items()})
            self._write_all(data)

        await asyncio.to_thread(_merge)
        logger.debug("Wrote %d key(s) to %s", len(values), self._path)

    async def remove(self, keys: Keys) -> None:
        key_list = _as_key_list(keys)

        def _drop() -> None:
            data = self._read_all()
            if any(key in data for key in key_list):
                for key in key_list:
                    data.pop(key, None)
                self._write_all(data)

        await asyncio.to_thread(_drop)


__all__ = [
    "InMemoryStore",
    "JsonFileStore",
    "KeyValueStore",
    "StorageError",
]

from __future__ import annotations

import logging
import os
import threading
from pathlib import Path
from typing import Any

from .codec import decode_mapping, encode_mapping
from .errors import PreferenceStoreError
from .json_store import atomic_write_json, read_json
from .kinds import SupportedType
from .locks import GLOBAL_PATH_LOCKS
from .settings import Settings

logger = logging.getLogger(__name__)


def _file_signature(path: Path) -> tuple[int, int, int] | None:
    try:
        st = os.stat(path)
    except OSError:
        return None
    return (st.st_ino, st.st_mtime_ns, st.st_size)


class PreferenceStore:
    """
    Process-wide typed preferences, one JSON document per application.

    Reads are served from memory while the document on disk is unchanged
    (same inode, mtime and size); any change made through another instance or
    process is picked up on the next access. Every set() re-reads the document
    under the path lock before writing it back. Typed getters return None when
    the key is absent or holds a value of another kind.
    """

    _shared: dict[str, "PreferenceStore"] = {}
    _shared_guard = threading.Lock()

    def __init__(self, path: Path):
        self._path = Path(path)
        self._values: dict[str, Any] | None = None
        self._signature: tuple[int, int, int] | None = None

    @classmethod
    def shared(cls, path: Path) -> "PreferenceStore":
        # absolute(), not resolve(): building a store must not touch the filesystem.
        key = str(Path(path).expanduser().absolute())
        with cls._shared_guard:
            store = cls._shared.get(key)
            if store is None:
                store = cls(Path(path))
                cls._shared[key] = store
            return store

    @classmethod
    def from_settings(cls, settings: Settings) -> "PreferenceStore":
        return cls.shared(settings.preferences_path)

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> dict[str, Any]:
        signature = _file_signature(self._path)
        try:
            raw = read_json(self._path)
            values = decode_mapping(raw) if raw is not None else {}
        except (OSError, ValueError, RecursionError) as e:
            logger.warning("PREFERENCES LOAD: ignoring unreadable %s: %r", self._path, e)
            values = {}
        self._values = values
        self._signature = signature
        return values

    def _snapshot(self) -> dict[str, Any]:
        if self._values is None or _file_signature(self._path) != self._signature:
            return self._load()
        return self._values

    def reload(self) -> None:
        with GLOBAL_PATH_LOCKS.held(self._path):
            self._values = None

    def keys(self) -> list[str]:
        with GLOBAL_PATH_LOCKS.held(self._path):
            return sorted(self._snapshot())

    def get(self, key: str, kind: SupportedType) -> Any | None:
        with GLOBAL_PATH_LOCKS.held(self._path):
            return kind.narrow(self._snapshot().get(key))

    def set(self, key: str, kind: SupportedType, value: Any | None) -> None:
        if value is not None:
            value = kind.check(value)
        with GLOBAL_PATH_LOCKS.held(self._path):
            # Always start from what is on disk now, not from the cached copy.
            values = dict(self._load())
            if value is None:
                if key not in values:
                    return
                values.pop(key)
            else:
                values[key] = value
            try:
                atomic_write_json(self._path, encode_mapping(values))
            except OSError as e:
                raise PreferenceStoreError(f"could not write {self._path}: {e}") from e
            self._values = values
            self._signature = _file_signature(self._path)

    def get_string(self, key: str) -> str | None:
        return self.get(key, SupportedType.STRING)

    def get_int(self, key: str) -> int | None:
        return self.get(key, SupportedType.INTEGER)

    def get_bool(self, key: str) -> bool | None:
        return self.get(key, SupportedType.BOOLEAN)

    def get_bytes(self, key: str) -> bytes | None:
        return self.get(key, SupportedType.BYTE_BLOB)

    def set_string(self, key: str, value: str | None) -> None:
        self.set(key, SupportedType.STRING, value)

    def set_int(self, key: str, value: int | None) -> None:
        self.set(key, SupportedType.INTEGER, value)

    def set_bool(self, key: str, value: bool | None) -> None:
        self.set(key, SupportedType.BOOLEAN, value)

    def set_bytes(self, key: str, value: bytes | None) -> None:
        self.set(key, SupportedType.BYTE_BLOB, value)

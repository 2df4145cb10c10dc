from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Mapping

from .codec import decode_mapping, encode_mapping
from .errors import BackingFileError
from .json_store import atomic_write_json, read_json
from .locks import GLOBAL_PATH_LOCKS
from .settings import DEFAULT_BACKING_FILE, Settings, default_documents_dir

logger = logging.getLogger(__name__)


class FileDictionaryStore:
    """
    Stores the file backend's key -> value mapping as one JSON document.

    - A missing file is an empty mapping, not an error.
    - Writes replace the whole file atomically.
    - load()/save() raise BackingFileError; read()/write() log and absorb.

    update() serializes read-modify-write per path within this process only.
    Two processes updating the same file can still lose each other's changes
    (last writer wins, including for unrelated keys).
    """

    def __init__(self, documents_dir: Path | None = None, backing_file: str = DEFAULT_BACKING_FILE):
        self._documents_dir = Path(documents_dir) if documents_dir is not None else None
        self._backing_file = backing_file

    @classmethod
    def from_settings(cls, settings: Settings) -> "FileDictionaryStore":
        return cls(settings.documents_dir, settings.backing_file)

    @property
    def path(self) -> Path:
        base = self._documents_dir if self._documents_dir is not None else default_documents_dir()
        return base / self._backing_file

    def load(self) -> dict[str, Any]:
        path = self.path
        with GLOBAL_PATH_LOCKS.held(path):
            try:
                raw = read_json(path)
            except (OSError, ValueError, RecursionError) as e:
                # RecursionError: pathologically nested JSON
                raise BackingFileError(f"could not read {path}: {e}") from e
        if raw is None:
            return {}
        try:
            return decode_mapping(raw)
        except ValueError as e:
            raise BackingFileError(f"{path} is not a key/value document: {e}") from e

    def save(self, mapping: Mapping[str, Any]) -> None:
        path = self.path
        doc = encode_mapping(mapping)
        with GLOBAL_PATH_LOCKS.held(path):
            try:
                atomic_write_json(path, doc)
            except (OSError, TypeError, ValueError) as e:
                raise BackingFileError(f"could not write {path}: {e}") from e

    def read(self) -> dict[str, Any] | None:
        try:
            return self.load()
        except BackingFileError as e:
            logger.warning("FILE STORE READ: %s", e)
            return None

    def write(self, mapping: Mapping[str, Any]) -> bool:
        try:
            self.save(mapping)
        except BackingFileError as e:
            logger.warning("FILE STORE WRITE: %s", e)
            return False
        return True

    def update(self, key: str, value: Any | None) -> None:
        """
        Upsert ``key`` (or remove it when ``value`` is None) and persist.

        An unreadable file is replaced by a fresh mapping rather than blocking
        the write. Raises BackingFileError if the write fails.
        """
        with GLOBAL_PATH_LOCKS.held(self.path):
            data = self.read()
            if data is None:
                logger.warning("FILE STORE UPDATE: starting %s from an empty mapping", self.path)
                data = {}
            if value is None:
                data.pop(key, None)
            else:
                data[key] = value
            self.save(data)

from __future__ import annotations

import contextlib
import threading
from pathlib import Path
from typing import Iterator


class PathLockRegistry:
    """
    Hands out one re-entrant lock per backing file.

    Paths are normalized (``~`` expanded, symlinks resolved) so two stores
    pointing at the same file through different spellings share a lock. The
    locks only order threads of this process; other processes writing the
    same file are not excluded.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[Path, threading.RLock] = {}

    def lock_for(self, path: Path) -> threading.RLock:
        key = Path(path).expanduser().resolve()
        with self._guard:
            return self._locks.setdefault(key, threading.RLock())

    @contextlib.contextmanager
    def held(self, path: Path) -> Iterator[None]:
        with self.lock_for(path):
            yield


GLOBAL_PATH_LOCKS = PathLockRegistry()

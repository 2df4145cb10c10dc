from __future__ import annotations

import logging
from typing import Any, Generic, TypeVar

from .backends import Backends, StorageBackend, default_backends
from .errors import PersistentValueError
from .kinds import SupportedType

logger = logging.getLogger(__name__)

T = TypeVar("T", str, int, bool, bytes)


class PersistentValue(Generic[T]):
    """
    One named, typed value persisted in one of the storage backends.

        score = PersistentValue("score", StorageBackend.FILE, int)
        score.value = 17
        score.value   # -> 17
        score.value = None   # deletes the key

    Every read and write goes to the backend; nothing is cached here.

    Storage failures are absorbed by default: get() returns None and set()
    returns False, with a warning logged. Pass strict=True to have
    PersistentValueError propagate instead.

    Caller errors are always raised: a value of the wrong type raises
    TypeError, and an int outside the signed 64-bit range raises
    OverflowError on the credential store, whose integer encoding is fixed
    at 8 bytes. The file and preference backends take any int.
    """

    def __init__(
        self,
        name: str,
        storage: StorageBackend | str,
        value_type: type[T] | SupportedType,
        *,
        backends: Backends | None = None,
        strict: bool = False,
    ):
        # Type check first so an unsupported request never touches configuration.
        self._kind = SupportedType.for_type(value_type)
        if not isinstance(name, str) or not name:
            raise ValueError("name must be a non-empty string")
        self._name = name
        self._storage = StorageBackend(storage)
        self._backends = backends if backends is not None else default_backends()
        self._strict = strict

    @classmethod
    def create(
        cls,
        name: str,
        storage: StorageBackend | str,
        value_type: type[T] | SupportedType,
        *,
        backends: Backends | None = None,
        strict: bool = False,
    ) -> "PersistentValue[T]":
        return cls(name, storage, value_type, backends=backends, strict=strict)

    @property
    def name(self) -> str:
        return self._name

    @property
    def storage(self) -> StorageBackend:
        return self._storage

    @property
    def kind(self) -> SupportedType:
        return self._kind

    def get(self) -> T | None:
        try:
            return self._read()
        except PersistentValueError as e:
            if self._strict:
                raise
            logger.warning("PERSISTENT VALUE GET: %s (%s) unreadable: %s", self._name, self._storage.value, e)
            return None

    def set(self, value: T | None) -> bool:
        """Store ``value``, or delete the key when it is None. Returns False if the write was lost."""
        if value is not None:
            value = self._kind.check(value)
        try:
            self._write(value)
        except PersistentValueError as e:
            if self._strict:
                raise
            logger.warning("PERSISTENT VALUE SET: %s (%s) not persisted: %s", self._name, self._storage.value, e)
            return False
        return True

    def clear(self) -> bool:
        return self.set(None)

    @property
    def value(self) -> T | None:
        return self.get()

    @value.setter
    def value(self, new_value: T | None) -> None:
        self.set(new_value)

    def _read(self) -> Any | None:
        if self._storage is StorageBackend.PREFERENCES:
            return self._backends.preferences.get(self._name, self._kind)

        if self._storage is StorageBackend.FILE:
            data = self._backends.files.load()
            return self._kind.narrow(data.get(self._name))

        return self._kind.narrow(self._backends.credentials.get(self._name, self._kind))

    def _write(self, value: Any | None) -> None:
        if self._storage is StorageBackend.PREFERENCES:
            self._backends.preferences.set(self._name, self._kind, value)
        elif self._storage is StorageBackend.FILE:
            self._backends.files.update(self._name, value)
        else:
            self._backends.credentials.set(self._name, self._kind, value)

    def __repr__(self) -> str:
        return f"PersistentValue(name={self._name!r}, storage={self._storage.value!r}, kind={self._kind.value!r})"

from __future__ import annotations

import enum
import functools
from dataclasses import dataclass

from keyring.backend import KeyringBackend

from .credential_store import CredentialStore
from .file_store import FileDictionaryStore
from .preferences import PreferenceStore
from .settings import Settings, get_settings


class StorageBackend(enum.Enum):
    PREFERENCES = "preferences"
    CREDENTIAL_STORE = "credential_store"
    FILE = "file"


@dataclass(frozen=True)
class Backends:
    """The three stores a handle can route to. Building one performs no I/O."""

    preferences: PreferenceStore
    credentials: CredentialStore
    files: FileDictionaryStore

    @classmethod
    def from_settings(cls, settings: Settings, *, keyring_backend: KeyringBackend | None = None) -> "Backends":
        return cls(
            preferences=PreferenceStore.from_settings(settings),
            credentials=CredentialStore.from_settings(settings, keyring_backend=keyring_backend),
            files=FileDictionaryStore.from_settings(settings),
        )


@functools.lru_cache(maxsize=1)
def default_backends() -> Backends:
    # Environment is read once; call default_backends.cache_clear() after changing it.
    return Backends.from_settings(get_settings())

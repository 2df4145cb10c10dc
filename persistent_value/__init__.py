from __future__ import annotations

from .backends import Backends, StorageBackend, default_backends
from .credential_store import CredentialStore
from .errors import (
    BackingFileError,
    CredentialStoreError,
    PersistentValueError,
    PreferenceStoreError,
    UnsupportedType,
)
from .file_store import FileDictionaryStore
from .handle import PersistentValue
from .kinds import SupportedType
from .preferences import PreferenceStore
from .settings import Settings, get_settings

__all__ = [
    "PersistentValue",
    "StorageBackend",
    "SupportedType",
    "Backends",
    "default_backends",
    "CredentialStore",
    "FileDictionaryStore",
    "PreferenceStore",
    "Settings",
    "get_settings",
    "PersistentValueError",
    "BackingFileError",
    "CredentialStoreError",
    "PreferenceStoreError",
    "UnsupportedType",
]

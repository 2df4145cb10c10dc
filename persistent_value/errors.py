from __future__ import annotations


class PersistentValueError(Exception):
    """Base class for storage failures raised by the backend components."""


class BackingFileError(PersistentValueError):
    """The file backend could not read or write its backing dictionary."""


class CredentialStoreError(PersistentValueError):
    """The credential store (keyring) rejected a read or write."""


class PreferenceStoreError(PersistentValueError):
    """The preference store could not persist its document."""


class UnsupportedType(TypeError):
    """Raised when a handle is requested for a type outside the supported set."""

    def __init__(self, value_type: object):
        self.value_type = value_type
        name = getattr(value_type, "__qualname__", None) or repr(value_type)
        super().__init__(f"unsupported value type {name}; expected one of str, int, bool, bytes")

from __future__ import annotations

import logging
from typing import Any

import keyring
from keyring.backend import KeyringBackend
from keyring.errors import KeyringError, PasswordDeleteError

from .codec import bytes_to_text, decode_bool, decode_int, encode_bool, encode_int, text_to_bytes
from .errors import CredentialStoreError
from .kinds import SupportedType
from .settings import Settings

logger = logging.getLogger(__name__)


def _escape(part: str) -> str:
    return part.replace("\\", "\\\\").replace("/", "\\/")


def namespace_service(service: str, access_group: str | None = None) -> str:
    """
    keyring service name for a service / access-group pair.

    Both parts are escaped so the only unescaped "/" is the group separator;
    distinct pairs therefore never share a keyring service.
    """
    if access_group:
        return f"{_escape(access_group)}/{_escape(service)}"
    return _escape(service)


class CredentialStore:
    """
    Typed view over one keyring namespace.

    keyring only stores strings, so:

    - str values are stored as-is;
    - bytes are base64 text;
    - int is 8 bytes signed little-endian, stored as bytes;
    - bool is the int 1 or 0.

    Every key is a keyring "username" under the namespace's service name.
    """

    def __init__(
        self,
        service: str,
        access_group: str | None = None,
        *,
        keyring_backend: KeyringBackend | None = None,
    ):
        if not service:
            raise ValueError("service identifier must not be empty")
        self._service = service
        self._access_group = access_group
        self._backend = keyring_backend

    @classmethod
    def from_settings(cls, settings: Settings, *, keyring_backend: KeyringBackend | None = None) -> "CredentialStore":
        return cls(settings.keychain_service, settings.access_group, keyring_backend=keyring_backend)

    @property
    def service(self) -> str:
        return self._service

    @property
    def access_group(self) -> str | None:
        return self._access_group

    @property
    def keyring_service(self) -> str:
        return namespace_service(self._service, self._access_group)

    def _keyring(self) -> KeyringBackend:
        if self._backend is None:
            self._backend = keyring.get_keyring()
        return self._backend

    # Raw string slot -------------------------------------------------------
    def get_string(self, key: str) -> str | None:
        try:
            return self._keyring().get_password(self.keyring_service, key)
        except KeyringError as e:
            raise CredentialStoreError(f"could not read {key!r} from {self.keyring_service!r}: {e}") from e

    def set_string(self, key: str, value: str) -> None:
        try:
            self._keyring().set_password(self.keyring_service, key, value)
        except KeyringError as e:
            raise CredentialStoreError(f"could not write {key!r} to {self.keyring_service!r}: {e}") from e

    # Byte blobs --------------------------------------------------------------
    def get_bytes(self, key: str) -> bytes | None:
        text = self.get_string(key)
        if text is None:
            return None
        return text_to_bytes(text)

    def set_bytes(self, key: str, value: bytes) -> None:
        self.set_string(key, bytes_to_text(value))

    # Fixed-width scalars ----------------------------------------------------
    def get_int(self, key: str) -> int | None:
        data = self.get_bytes(key)
        return decode_int(data) if data is not None else None

    def set_int(self, key: str, value: int) -> None:
        self.set_bytes(key, encode_int(value))

    def get_bool(self, key: str) -> bool | None:
        data = self.get_bytes(key)
        return decode_bool(data) if data is not None else None

    def set_bool(self, key: str, value: bool) -> None:
        self.set_bytes(key, encode_bool(value))

    # Kind dispatch ------------------------------------------------------------
    def get(self, key: str, kind: SupportedType) -> Any | None:
        if kind is SupportedType.STRING:
            return self.get_string(key)
        if kind is SupportedType.INTEGER:
            return self.get_int(key)
        if kind is SupportedType.BOOLEAN:
            return self.get_bool(key)
        return self.get_bytes(key)

    def set(self, key: str, kind: SupportedType, value: Any | None) -> None:
        if value is None:
            self.remove(key)
        elif kind is SupportedType.STRING:
            self.set_string(key, value)
        elif kind is SupportedType.INTEGER:
            self.set_int(key, value)
        elif kind is SupportedType.BOOLEAN:
            self.set_bool(key, value)
        else:
            self.set_bytes(key, value)

    def remove(self, key: str) -> bool:
        """Delete-if-present. Failures are swallowed; returns whether an entry was removed."""
        try:
            self._keyring().delete_password(self.keyring_service, key)
        except PasswordDeleteError:
            logger.debug("CREDENTIAL REMOVE: no entry %r in %r", key, self.keyring_service)
            return False
        except KeyringError as e:
            logger.debug("CREDENTIAL REMOVE: failed for %r in %r: %r", key, self.keyring_service, e)
            return False
        return True

    def __repr__(self) -> str:
        return f"CredentialStore(service={self._service!r}, access_group={self._access_group!r})"

from __future__ import annotations

import enum
from typing import Any

from pydantic import StrictBool, StrictBytes, StrictInt, StrictStr, TypeAdapter, ValidationError

from .errors import UnsupportedType


class SupportedType(enum.Enum):
    """
    The closed set of value kinds a handle can be bound to.

    Each member carries the exact Python type it stands for. There is no
    fallback encoding for anything else.
    """

    STRING = "string"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    BYTE_BLOB = "byte_blob"

    @property
    def python_type(self) -> type:
        return _TYPE_BY_KIND[self]

    @classmethod
    def for_type(cls, value_type: Any) -> "SupportedType":
        """
        Map a requested type onto its kind.

        The lookup is by exact type: subclasses (``IntEnum``), wrapped
        variants (``bytearray``) and generic aliases are all rejected.
        """
        if isinstance(value_type, cls):
            return value_type
        try:
            kind = _KIND_BY_TYPE.get(value_type)
        except TypeError:
            # unhashable "types", e.g. a list passed by mistake
            kind = None
        if kind is None:
            raise UnsupportedType(value_type)
        return kind

    def narrow(self, value: Any) -> Any | None:
        """Return ``value`` if it is stored in this kind's shape, else None."""
        if value is None:
            return None
        # bool is an int subclass; keep the two kinds apart in both directions.
        if self is SupportedType.INTEGER and isinstance(value, bool):
            return None
        try:
            return _ADAPTERS[self].validate_python(value, strict=True)
        except ValidationError:
            return None

    def check(self, value: Any) -> Any:
        """Like narrow(), but a mismatch is the caller's bug and raises TypeError."""
        narrowed = self.narrow(value)
        if narrowed is None:
            raise TypeError(f"expected a {self.python_type.__name__} value, got {type(value).__name__}")
        return narrowed


_TYPE_BY_KIND: dict[SupportedType, type] = {
    SupportedType.STRING: str,
    SupportedType.INTEGER: int,
    SupportedType.BOOLEAN: bool,
    SupportedType.BYTE_BLOB: bytes,
}

_KIND_BY_TYPE: dict[Any, SupportedType] = {t: k for k, t in _TYPE_BY_KIND.items()}

_ADAPTERS: dict[SupportedType, TypeAdapter[Any]] = {
    SupportedType.STRING: TypeAdapter(StrictStr),
    SupportedType.INTEGER: TypeAdapter(StrictInt),
    SupportedType.BOOLEAN: TypeAdapter(StrictBool),
    SupportedType.BYTE_BLOB: TypeAdapter(StrictBytes),
}

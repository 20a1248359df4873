"""Common-encryption boxes: protection system headers and track encryption."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import ClassVar, Optional

from .box import BoxType, Context, FullBox, _field, register_box, str_to_box_type

BOX_TYPE_PSSH = str_to_box_type("pssh")
BOX_TYPE_TENC = str_to_box_type("tenc")

_UINT64_MASK = (1 << 64) - 1


@dataclass(kw_only=True)
class PsshKID:
    kid: bytes = _field(bytes(16), size=8, length=16, uuid=True)


@dataclass(kw_only=True)
class Pssh(FullBox):
    """Protection system specific header."""

    box_type: ClassVar[BoxType] = BOX_TYPE_PSSH
    system_id: bytes = _field(bytes(16), size=8, length=16, uuid=True)
    kid_count: int = _field(0, size=32, nver=0)
    kids: list[PsshKID] = _field(factory=list, nver=0, length="dynamic", size=128)
    data_size: int = _field(0, size=32, signed=True)
    data: bytes = _field(b"", size=8, length="dynamic")

    def field_length(self, name: str, ctx: Context) -> int:
        if name == "kids":
            return self.kid_count
        if name == "data":
            return self.data_size & _UINT64_MASK
        raise ValueError(f"invalid name of dynamic-length field: boxType=pssh fieldName={name}")

    def stringify_field(self, name: str, indent: str, depth: int, ctx: Context) -> Optional[str]:
        if name == "kids":
            return "[" + ", ".join(str(uuid.UUID(bytes=bytes(k.kid))) for k in self.kids) + "]"
        return None


@dataclass(kw_only=True)
class Tenc(FullBox):
    """Track encryption box."""

    box_type: ClassVar[BoxType] = BOX_TYPE_TENC
    reserved: int = _field(0, size=8, dec=True)
    # Both block counts are always zero in version 0.
    default_crypt_byte_block: int = _field(0, size=4, dec=True)
    default_skip_byte_block: int = _field(0, size=4, dec=True)
    default_is_protected: int = _field(0, size=8, dec=True)
    default_per_sample_iv_size: int = _field(0, size=8, dec=True)
    default_kid: bytes = _field(bytes(16), size=8, length=16, uuid=True)
    default_constant_iv_size: int = _field(0, size=8, opt="dynamic", dec=True)
    default_constant_iv: bytes = _field(b"", size=8, opt="dynamic", length="dynamic")

    def is_opt_field_enabled(self, name: str, ctx: Context) -> bool:
        if name in ("default_constant_iv_size", "default_constant_iv"):
            return self.default_is_protected == 1 and self.default_per_sample_iv_size == 0
        return False

    def field_length(self, name: str, ctx: Context) -> int:
        if name == "default_constant_iv":
            return self.default_constant_iv_size
        raise ValueError(f"invalid name of dynamic-length field: boxType=tenc fieldName={name}")


register_box(Pssh, (0, 1))
register_box(Tenc, (0, 1))

__all__ = ["PsshKID", "Pssh", "Tenc"]
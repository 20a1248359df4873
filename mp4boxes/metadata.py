"""iTunes-style metadata item lists, QuickTime keys and 3GPP user-data strings."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Optional

from .box import (
    AnyTypeBox,
    Box,
    BoxType,
    Context,
    CustomFieldObject,
    FullBox,
    _field,
    register_box,
    str_to_box_type,
)
from .containers import is_under_udta

BOX_TYPE_ILST = str_to_box_type("ilst")
BOX_TYPE_DATA = str_to_box_type("data")
BOX_TYPE_KEYS = str_to_box_type("keys")

DATA_TYPE_BINARY = 0
DATA_TYPE_STRING_UTF8 = 1
DATA_TYPE_STRING_UTF16 = 2
DATA_TYPE_STRING_MAC = 3
DATA_TYPE_STRING_JPEG = 14
DATA_TYPE_SIGNED_INT_BIG_ENDIAN = 21
DATA_TYPE_FLOAT32_BIG_ENDIAN = 22
DATA_TYPE_FLOAT64_BIG_ENDIAN = 23

_DATA_TYPE_NAMES = {
    DATA_TYPE_BINARY: "BINARY",
    DATA_TYPE_STRING_UTF8: "UTF8",
    DATA_TYPE_STRING_UTF16: "UTF16",
    DATA_TYPE_STRING_MAC: "MAC_STR",
    DATA_TYPE_STRING_JPEG: "JPEG",
    DATA_TYPE_SIGNED_INT_BIG_ENDIAN: "INT",
    DATA_TYPE_FLOAT32_BIG_ENDIAN: "FLOAT32",
    DATA_TYPE_FLOAT64_BIG_ENDIAN: "FLOAT64",
}

_UINT64_MASK = (1 << 64) - 1

_ILST_META_BOX_TYPES: tuple[BoxType, ...] = tuple(
    str_to_box_type(name)
    for name in (
        "----", "aART", "akID", "apID", "atID", "cmID", "cnID", "covr", "cpil",
        "cprt", "desc", "disk", "egid", "geID", "gnre", "pcst", "pgap", "plID",
        "purd", "purl", "rtng", "sfID", "soaa", "soal", "soar", "soco", "sonm",
        "sosn", "stik", "tmpo", "trkn", "tven", "tves", "tvnn", "tvsh", "tvsn",
    )
) + tuple(
    BoxType(b"\xa9" + suffix)
    for suffix in (b"ART", b"alb", b"cmt", b"com", b"day", b"gen", b"grp", b"nam", b"too", b"wrt")
)

_UDTA_3GPP_META_BOX_TYPES: tuple[BoxType, ...] = tuple(
    str_to_box_type(name) for name in ("titl", "dscp", "cprt", "perf", "auth", "gnre")
)


def _escape_unprintables(raw: bytes) -> str:
    """Decode bytes as text, replacing every unprintable character with a dot."""
    text = raw.decode("utf-8", errors="replace")
    return "".join(c if c.isprintable() else "." for c in text)


def _quoted(raw: bytes) -> str:
    return f'"{_escape_unprintables(raw)}"'


def is_ilst_meta_box_type(box_type: BoxType) -> bool:
    """Whether the type is one of the known item types under an ilst box."""
    return any(box_type == known for known in _ILST_META_BOX_TYPES)


def _is_ilst_meta_container(ctx: Context) -> bool:
    return ctx.under_ilst and not ctx.under_ilst_meta


def _is_under_ilst_meta(ctx: Context) -> bool:
    return ctx.under_ilst_meta


def _is_under_ilst_free_format(ctx: Context) -> bool:
    return ctx.under_ilst_free_meta


# ----------------------------------------------------------------- ilst


@dataclass(kw_only=True)
class Ilst(Box):
    box_type: ClassVar[BoxType] = BOX_TYPE_ILST


@dataclass(kw_only=True)
class IlstMetaContainer(AnyTypeBox):
    """A metadata item under ilst; its type names the item."""


@dataclass(kw_only=True)
class Data(Box):
    """Value box holding a typed metadata value."""

    box_type: ClassVar[BoxType] = BOX_TYPE_DATA
    data_type: int = _field(0, size=32)
    data_lang: int = _field(0, size=32)
    data: bytes = _field(b"", size=8)

    def stringify_field(self, name: str, indent: str, depth: int, ctx: Context) -> Optional[str]:
        if name == "data_type":
            return _DATA_TYPE_NAMES.get(self.data_type)
        if name == "data" and self.data_type == DATA_TYPE_STRING_UTF8:
            return _quoted(self.data)
        return None


@dataclass(kw_only=True)
class StringData(AnyTypeBox):
    """The mean and name boxes of a free-form item."""

    data: bytes = _field(b"", size=8)

    def stringify_field(self, name: str, indent: str, depth: int, ctx: Context) -> Optional[str]:
        if name == "data":
            return _quoted(self.data)
        return None


@dataclass(kw_only=True)
class Item(AnyTypeBox):
    """A numbered item under an item list."""

    version: int = _field(0, size=8)
    flags: bytes = _field(bytes(3), size=8, length=3)
    item_name: bytes = _field(b"", size=8, length=4)
    data: Data = _field(factory=Data)

    def stringify_field(self, name: str, indent: str, depth: int, ctx: Context) -> Optional[str]:
        if name == "item_name":
            return _quoted(self.item_name)
        return None


# ----------------------------------------------------------------- keys


@dataclass(kw_only=True)
class Key(CustomFieldObject):
    key_size: int = _field(0, size=32, signed=True)
    key_namespace: bytes = _field(b"", size=8, length=4)
    key_value: bytes = _field(b"", size=8, length="dynamic")

    def field_length(self, name: str, ctx: Context) -> int:
        if name == "key_value":
            # The size counts the size field and the namespace: 8 bytes.
            return (self.key_size - 8) & _UINT64_MASK
        raise ValueError(f"invalid name of dynamic-length field: boxType=key fieldName={name}")

    def stringify_field(self, name: str, indent: str, depth: int, ctx: Context) -> Optional[str]:
        if name == "key_namespace":
            return _quoted(self.key_namespace)
        if name == "key_value":
            return _quoted(self.key_value)
        return None


@dataclass(kw_only=True)
class Keys(FullBox):
    box_type: ClassVar[BoxType] = BOX_TYPE_KEYS
    entry_count: int = _field(0, size=32, signed=True)
    entries: list[Key] = _field(factory=list, length="dynamic")

    def field_length(self, name: str, ctx: Context) -> int:
        if name == "entries":
            return self.entry_count & _UINT64_MASK
        raise ValueError(f"invalid name of dynamic-length field: boxType=keys fieldName={name}")


# ----------------------------------------------------------- 3GPP udta


@dataclass(kw_only=True)
class Udta3GppString(AnyTypeBox, FullBox):
    """A 3GPP string such as titl or auth under a udta box."""

    pad: bool = _field(False, size=1, hidden=True)
    # ISO-639-2/T language code, three 5-bit letters.
    language: bytes = _field(bytes(3), size=5, length=3, iso639_2=True)
    data: bytes = _field(b"", size=8, string=True)


register_box(Ilst)
register_box(Data, accept=_is_under_ilst_meta)
for _box_type in _ILST_META_BOX_TYPES:
    register_box(IlstMetaContainer, box_type=_box_type, accept=_is_ilst_meta_container)
for _name in ("mean", "name"):
    register_box(StringData, box_type=str_to_box_type(_name), accept=_is_under_ilst_free_format)
register_box(Keys)
for _box_type in _UDTA_3GPP_META_BOX_TYPES:
    register_box(Udta3GppString, (0,), box_type=_box_type, accept=is_under_udta)

__all__ = [
    "DATA_TYPE_BINARY",
    "DATA_TYPE_STRING_UTF8",
    "DATA_TYPE_STRING_UTF16",
    "DATA_TYPE_STRING_MAC",
    "DATA_TYPE_STRING_JPEG",
    "DATA_TYPE_SIGNED_INT_BIG_ENDIAN",
    "DATA_TYPE_FLOAT32_BIG_ENDIAN",
    "DATA_TYPE_FLOAT64_BIG_ENDIAN",
    "Ilst",
    "IlstMetaContainer",
    "Data",
    "StringData",
    "Item",
    "Key",
    "Keys",
    "Udta3GppString",
    "is_ilst_meta_box_type",
]
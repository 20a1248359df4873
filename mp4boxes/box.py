"""Box headers, the base box classes and the registry of known box types."""

from __future__ import annotations

import dataclasses
import io
import struct
from dataclasses import dataclass, field
from typing import Any, BinaryIO, Callable, ClassVar, Optional

LENGTH_UNLIMITED = 0xFFFFFFFF
SMALL_HEADER_SIZE = 8
LARGE_HEADER_SIZE = 16

_UINT32_MAX = 0xFFFFFFFF
_FLAGS_MASK = 0xFFFFFF


def _field(default: Any = 0, *, factory: Optional[Callable[[], Any]] = None, **spec: Any) -> Any:
    """Declare a box field; ``spec`` describes its layout in the stream."""
    if factory is not None:
        return field(default_factory=factory, metadata=spec)
    return field(default=default, metadata=spec)


@dataclass(frozen=True)
class BoxType:
    """The four-byte code naming a box."""

    code: bytes = bytes(4)

    def __post_init__(self) -> None:
        if not isinstance(self.code, (bytes, bytearray)) or len(self.code) != 4:
            raise ValueError(f"box type must be 4 bytes: {self.code!r}")
        object.__setattr__(self, "code", bytes(self.code))

    def __bytes__(self) -> bytes:
        return self.code


def str_to_box_type(text: str) -> BoxType:
    """Build a box type from a four-character string."""
    code = text.encode("latin-1")
    if len(code) != 4:
        raise ValueError(f"invalid box type: {text!r}")
    return BoxType(code)


@dataclass
class Context:
    """Where a box sits in the file, as far as its layout depends on it."""

    is_quicktime_compatible: bool = False
    quicktime_keys_meta_entry_count: int = 0
    under_wave: bool = False
    under_ilst: bool = False
    under_ilst_meta: bool = False
    under_ilst_free_meta: bool = False
    under_udta: bool = False


@dataclass(kw_only=True)
class BoxInfo:
    """Offset, size and type of a box, as found in its header."""

    offset: int = 0
    size: int = 0
    header_size: int = 0
    box_type: BoxType = BoxType()
    extend_to_eof: bool = False
    context: Context = field(default_factory=Context)

    def seek_to_start(self, stream: BinaryIO) -> int:
        return stream.seek(self.offset, io.SEEK_SET)

    def seek_to_payload(self, stream: BinaryIO) -> int:
        return stream.seek(self.offset + self.header_size, io.SEEK_SET)

    def seek_to_end(self, stream: BinaryIO) -> int:
        return stream.seek(self.offset + self.size, io.SEEK_SET)

    def is_supported_type(self) -> bool:
        return is_supported(self.box_type, self.context)


def _read_exact(stream: BinaryIO, size: int) -> bytes:
    data = stream.read(size)
    if len(data) < size:
        raise EOFError(f"expected {size} bytes, got {len(data)}")
    return data


def write_box_info(stream: BinaryIO, info: BoxInfo) -> BoxInfo:
    """Write a box header at the current position.

    ``info.offset`` is ignored; the returned info carries the real offset
    and the size and header size that were actually written.
    """
    offset = stream.tell()
    code = info.box_type.code
    if info.extend_to_eof:
        header = bytes(4) + code
    elif info.size <= _UINT32_MAX and info.header_size != LARGE_HEADER_SIZE:
        header = struct.pack(">I", info.size) + code
    else:
        header = struct.pack(">I", 1) + code + struct.pack(">Q", info.size)
    stream.write(header)
    return BoxInfo(
        offset=offset,
        size=info.size - info.header_size + len(header),
        header_size=len(header),
        box_type=info.box_type,
        extend_to_eof=info.extend_to_eof,
    )


def read_box_info(stream: BinaryIO) -> BoxInfo:
    """Read a box header at the current position."""
    offset = stream.tell()
    header = _read_exact(stream, SMALL_HEADER_SIZE)
    (size,) = struct.unpack(">I", header[:4])
    info = BoxInfo(
        offset=offset,
        size=size,
        header_size=SMALL_HEADER_SIZE,
        box_type=BoxType(header[4:]),
    )
    if size == 0:
        end = stream.seek(0, io.SEEK_END)
        info.size = end - offset
        info.extend_to_eof = True
        info.seek_to_payload(stream)
    elif size == 1:
        (info.size,) = struct.unpack(">Q", _read_exact(stream, LARGE_HEADER_SIZE - SMALL_HEADER_SIZE))
        info.header_size = LARGE_HEADER_SIZE
    if info.size == 0:
        raise ValueError("invalid size")
    return info


class CustomFieldObject:
    """Hooks through which an object steers the layout of its own fields.

    Subclasses may decode or encode a single field themselves by defining
    ``_read_<name>(reader, left_bits, ctx)`` or ``_write_<name>(writer, ctx)``;
    both return the number of bits handled and whether the field was handled.
    ``_pstring_overrides`` maps field names to whether they may hold a
    Pascal-style string; fields not listed may.
    """

    _pstring_overrides: ClassVar[dict[str, bool]] = {}

    def field_size(self, name: str, ctx: Context) -> int:
        raise ValueError(f"invalid name of dynamic-size field: {name}")

    def field_length(self, name: str, ctx: Context) -> int:
        raise ValueError(f"invalid name of dynamic-length field: {name}")

    def is_opt_field_enabled(self, name: str, ctx: Context) -> bool:
        return False

    def stringify_field(self, name: str, indent: str, depth: int, ctx: Context) -> Optional[str]:
        """Return a custom rendering of a field, or None for the default one."""
        return None

    def is_pstring(self, name: str, data: bytes, remaining_size: int, ctx: Context) -> bool:
        """Tell whether the named string field may be read as a Pascal string."""
        return self._pstring_overrides.get(name, True)

    def before_unmarshal(self, stream: BinaryIO, size: int, ctx: Context) -> tuple[int, bool]:
        """Return the bytes consumed and whether the usual decoding is replaced."""
        if size < 0:
            raise ValueError(f"negative payload size: {size}")
        consumed = 0
        return consumed, False

    def on_read_field(self, name: str, reader: BinaryIO, left_bits: int, ctx: Context) -> tuple[int, bool]:
        """Return the bits read and whether the field was decoded here."""
        if left_bits < 0:
            raise ValueError(f"negative bit count left: {left_bits}")
        handler = getattr(self, f"_read_{name}", None)
        if handler is None:
            return 0, False
        return handler(reader, left_bits, ctx)

    def on_write_field(self, name: str, writer: BinaryIO, ctx: Context) -> tuple[int, bool]:
        """Return the bits written and whether the field was encoded here."""
        handler = getattr(self, f"_write_{name}", None)
        if handler is None:
            return 0, False
        return handler(writer, ctx)


@dataclass(kw_only=True)
class Box(CustomFieldObject):
    """A box without version and flags."""

    box_type: ClassVar[BoxType]

    @property
    def version(self) -> int:
        return 0

    @version.setter
    def version(self, value: int) -> None:
        # A plain box has no version field to store it in.
        pass

    @property
    def flags(self) -> int:
        return 0

    @flags.setter
    def flags(self, value: int) -> None:
        pass

    def check_flag(self, flag: int) -> bool:
        return True

    def add_flag(self, flag: int) -> None:
        pass

    def remove_flag(self, flag: int) -> None:
        pass


@dataclass(kw_only=True)
class FullBox(Box):
    """A box that starts with an 8-bit version and 24-bit flags."""

    version: int = _field(0, size=8)
    flags: int = _field(0, size=24, hex=True)

    def check_flag(self, flag: int) -> bool:
        return self.flags & flag != 0

    def add_flag(self, flag: int) -> None:
        self.flags = (self.flags | flag) & _FLAGS_MASK

    def remove_flag(self, flag: int) -> None:
        self.flags = self.flags & ~flag & _FLAGS_MASK


@dataclass(kw_only=True)
class AnyTypeBox(Box):
    """A box whose type is chosen per instance."""

    box_type: BoxType = field(default=BoxType())


@dataclass(frozen=True)
class _BoxDef:
    box_class: type
    box_type: BoxType
    versions: tuple[int, ...]
    accept: Optional[Callable[[Context], bool]]


_registry: dict[BoxType, list[_BoxDef]] = {}


def register_box(
    box_class: type,
    versions: tuple[int, ...] = (),
    box_type: Optional[BoxType] = None,
    accept: Optional[Callable[[Context], bool]] = None,
) -> type:
    """Register a box class under a type, optionally limited to some contexts."""
    if box_type is None:
        if issubclass(box_class, AnyTypeBox):
            raise TypeError(f"{box_class.__name__} needs an explicit box type")
        box_type = box_class.box_type
    definition = _BoxDef(box_class, box_type, tuple(versions), accept)
    _registry.setdefault(box_type, []).append(definition)
    return box_class


def find_box_def(box_type: BoxType, ctx: Optional[Context] = None) -> Optional[_BoxDef]:
    """Return the first definition of the type that accepts the context."""
    ctx = ctx if ctx is not None else Context()
    return next(
        (d for d in _registry.get(box_type, ()) if d.accept is None or d.accept(ctx)),
        None,
    )


def is_supported(box_type: BoxType, ctx: Optional[Context] = None) -> bool:
    return find_box_def(box_type, ctx) is not None


def new_box(box_type: BoxType, ctx: Optional[Context] = None) -> Box:
    """Create an empty box of the given type."""
    definition = find_box_def(box_type, ctx)
    if definition is None:
        raise LookupError(f"box type not found: {box_type.code!r}")
    box = definition.box_class()
    if isinstance(box, AnyTypeBox):
        box.box_type = box_type
    return box


__all__ = [
    "LENGTH_UNLIMITED",
    "SMALL_HEADER_SIZE",
    "LARGE_HEADER_SIZE",
    "BoxType",
    "str_to_box_type",
    "Context",
    "BoxInfo",
    "read_box_info",
    "write_box_info",
    "CustomFieldObject",
    "Box",
    "FullBox",
    "AnyTypeBox",
    "register_box",
    "find_box_def",
    "is_supported",
    "new_box",
]

# Keep the dataclasses module referenced for field introspection by callers.
fields = dataclasses.fields
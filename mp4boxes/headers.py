"""Movie, track and media header boxes, edit lists and event messages."""

from __future__ import annotations

from dataclasses import dataclass
from typing import BinaryIO, ClassVar

from .box import Box, BoxType, Context, FullBox, _field, register_box, str_to_box_type


def _by_version(version: int, v0: int, v1: int) -> int:
    if version == 0:
        return v0
    if version == 1:
        return v1
    return 0


def _read_cstring(reader: BinaryIO) -> bytes:
    """Read bytes up to and excluding a NUL terminator."""
    chunks = bytearray()
    while True:
        byte = reader.read(1)
        if not byte:
            raise EOFError("unterminated string")
        if byte == b"\x00":
            return bytes(chunks)
        chunks += byte


def _encode(text: str) -> bytes:
    return text.encode("utf-8", errors="surrogateescape")


def _decode(raw: bytes) -> str:
    return raw.decode("utf-8", errors="surrogateescape")


@dataclass(kw_only=True)
class Mvhd(FullBox):
    box_type: ClassVar[BoxType] = str_to_box_type("mvhd")
    creation_time_v0: int = _field(0, size=32, ver=0)
    modification_time_v0: int = _field(0, size=32, ver=0)
    creation_time_v1: int = _field(0, size=64, ver=1)
    modification_time_v1: int = _field(0, size=64, ver=1)
    timescale: int = _field(0, size=32)
    duration_v0: int = _field(0, size=32, ver=0)
    duration_v1: int = _field(0, size=64, ver=1)
    # Fixed-point 16.16; the template value is 0x00010000.
    rate_fixed: int = _field(0, size=32, signed=True)
    # Fixed-point 8.8; the template value is 0x0100.
    volume: int = _field(0, size=16, signed=True)
    reserved: int = _field(0, size=16, signed=True, const=0)
    reserved2: list[int] = _field(factory=lambda: [0, 0], size=32, length=2, const=0)
    matrix: list[int] = _field(factory=lambda: [0] * 9, size=32, length=9, signed=True, hex=True)
    pre_defined: list[int] = _field(factory=lambda: [0] * 6, size=32, length=6, signed=True)
    next_track_id: int = _field(0, size=32)

    def creation_time(self) -> int:
        return _by_version(self.version, self.creation_time_v0, self.creation_time_v1)

    def modification_time(self) -> int:
        return _by_version(self.version, self.modification_time_v0, self.modification_time_v1)

    def duration(self) -> int:
        return _by_version(self.version, self.duration_v0, self.duration_v1)

    def rate(self) -> float:
        return self.rate_fixed / (1 << 16)

    def rate_int(self) -> int:
        return self.rate_fixed >> 16


@dataclass(kw_only=True)
class Tkhd(FullBox):
    box_type: ClassVar[BoxType] = str_to_box_type("tkhd")
    creation_time_v0: int = _field(0, size=32, ver=0)
    modification_time_v0: int = _field(0, size=32, ver=0)
    creation_time_v1: int = _field(0, size=64, ver=1)
    modification_time_v1: int = _field(0, size=64, ver=1)
    track_id: int = _field(0, size=32)
    reserved0: int = _field(0, size=32, const=0)
    duration_v0: int = _field(0, size=32, ver=0)
    duration_v1: int = _field(0, size=64, ver=1)
    reserved1: list[int] = _field(factory=lambda: [0, 0], size=32, length=2, const=0)
    layer: int = _field(0, size=16, signed=True)
    alternate_group: int = _field(0, size=16, signed=True)
    volume: int = _field(0, size=16, signed=True)
    reserved2: int = _field(0, size=16, const=0)
    matrix: list[int] = _field(factory=lambda: [0] * 9, size=32, length=9, signed=True, hex=True)
    # Fixed-point 16.16.
    width_fixed: int = _field(0, size=32)
    height_fixed: int = _field(0, size=32)

    def creation_time(self) -> int:
        return _by_version(self.version, self.creation_time_v0, self.creation_time_v1)

    def modification_time(self) -> int:
        return _by_version(self.version, self.modification_time_v0, self.modification_time_v1)

    def duration(self) -> int:
        return _by_version(self.version, self.duration_v0, self.duration_v1)

    def width(self) -> float:
        return self.width_fixed / (1 << 16)

    def width_int(self) -> int:
        return (self.width_fixed >> 16) & 0xFFFF

    def height(self) -> float:
        return self.height_fixed / (1 << 16)

    def height_int(self) -> int:
        return (self.height_fixed >> 16) & 0xFFFF


@dataclass(kw_only=True)
class Mdhd(FullBox):
    box_type: ClassVar[BoxType] = str_to_box_type("mdhd")
    creation_time_v0: int = _field(0, size=32, ver=0)
    modification_time_v0: int = _field(0, size=32, ver=0)
    creation_time_v1: int = _field(0, size=64, ver=1)
    modification_time_v1: int = _field(0, size=64, ver=1)
    timescale: int = _field(0, size=32)
    duration_v0: int = _field(0, size=32, ver=0)
    duration_v1: int = _field(0, size=64, ver=1)
    pad: bool = _field(False, size=1, hidden=True)
    # ISO-639-2/T language code, three 5-bit letters.
    language: bytes = _field(bytes(3), size=5, length=3, iso639_2=True)
    pre_defined: int = _field(0, size=16)

    def creation_time(self) -> int:
        return _by_version(self.version, self.creation_time_v0, self.creation_time_v1)

    def modification_time(self) -> int:
        return _by_version(self.version, self.modification_time_v0, self.modification_time_v1)

    def duration(self) -> int:
        return _by_version(self.version, self.duration_v0, self.duration_v1)


@dataclass(kw_only=True)
class Mehd(FullBox):
    box_type: ClassVar[BoxType] = str_to_box_type("mehd")
    fragment_duration_v0: int = _field(0, size=32, ver=0)
    fragment_duration_v1: int = _field(0, size=64, ver=1)

    def fragment_duration(self) -> int:
        return _by_version(self.version, self.fragment_duration_v0, self.fragment_duration_v1)


@dataclass(kw_only=True)
class Cslg(FullBox):
    box_type: ClassVar[BoxType] = str_to_box_type("cslg")
    composition_to_dts_shift_v0: int = _field(0, size=32, signed=True, ver=0)
    least_decode_to_display_delta_v0: int = _field(0, size=32, signed=True, ver=0)
    greatest_decode_to_display_delta_v0: int = _field(0, size=32, signed=True, ver=0)
    composition_start_time_v0: int = _field(0, size=32, signed=True, ver=0)
    composition_end_time_v0: int = _field(0, size=32, signed=True, ver=0)
    composition_to_dts_shift_v1: int = _field(0, size=64, signed=True, nver=0)
    least_decode_to_display_delta_v1: int = _field(0, size=64, signed=True, nver=0)
    greatest_decode_to_display_delta_v1: int = _field(0, size=64, signed=True, nver=0)
    composition_start_time_v1: int = _field(0, size=64, signed=True, nver=0)
    composition_end_time_v1: int = _field(0, size=64, signed=True, nver=0)

    def composition_to_dts_shift(self) -> int:
        return _by_version(
            self.version, self.composition_to_dts_shift_v0, self.composition_to_dts_shift_v1
        )

    def least_decode_to_display_delta(self) -> int:
        return _by_version(
            self.version,
            self.least_decode_to_display_delta_v0,
            self.least_decode_to_display_delta_v1,
        )

    def greatest_decode_to_display_delta(self) -> int:
        return _by_version(
            self.version,
            self.greatest_decode_to_display_delta_v0,
            self.greatest_decode_to_display_delta_v1,
        )

    def composition_start_time(self) -> int:
        return _by_version(
            self.version, self.composition_start_time_v0, self.composition_start_time_v1
        )

    def composition_end_time(self) -> int:
        return _by_version(self.version, self.composition_end_time_v0, self.composition_end_time_v1)


@dataclass(kw_only=True)
class Smhd(FullBox):
    box_type: ClassVar[BoxType] = str_to_box_type("smhd")
    # Fixed-point 8.8.
    balance: int = _field(0, size=16, signed=True)
    reserved: int = _field(0, size=16, const=0)

    def balance_value(self) -> float:
        return self.balance / (1 << 8)

    def balance_int(self) -> int:
        return self.balance >> 8


@dataclass(kw_only=True)
class Vmhd(FullBox):
    box_type: ClassVar[BoxType] = str_to_box_type("vmhd")
    graphicsmode: int = _field(0, size=16)
    opcolor: list[int] = _field(factory=lambda: [0, 0, 0], size=16, length=3)


@dataclass(kw_only=True)
class ElstEntry:
    segment_duration_v0: int = _field(0, size=32, ver=0)
    media_time_v0: int = _field(0, size=32, signed=True, ver=0)
    segment_duration_v1: int = _field(0, size=64, ver=1)
    media_time_v1: int = _field(0, size=64, signed=True, ver=1)
    media_rate_integer: int = _field(0, size=16, signed=True)
    media_rate_fraction: int = _field(0, size=16, signed=True, const=0)


@dataclass(kw_only=True)
class Elst(FullBox):
    box_type: ClassVar[BoxType] = str_to_box_type("elst")
    entry_count: int = _field(0, size=32)
    entries: list[ElstEntry] = _field(factory=list, length="dynamic", size="dynamic")

    def field_size(self, name: str, ctx: Context) -> int:
        if name == "entries":
            if self.version == 0:
                return 32 + 32 + 16 + 16
            if self.version == 1:
                return 64 + 64 + 16 + 16
        raise ValueError(f"invalid name of dynamic-size field: boxType=elst fieldName={name}")

    def field_length(self, name: str, ctx: Context) -> int:
        if name == "entries":
            return self.entry_count
        raise ValueError(f"invalid name of dynamic-length field: boxType=elst fieldName={name}")

    def segment_duration(self, index: int) -> int:
        entry = self.entries[index]
        return _by_version(self.version, entry.segment_duration_v0, entry.segment_duration_v1)

    def media_time(self, index: int) -> int:
        entry = self.entries[index]
        return _by_version(self.version, entry.media_time_v0, entry.media_time_v1)


@dataclass(kw_only=True)
class Emsg(FullBox):
    box_type: ClassVar[BoxType] = str_to_box_type("emsg")
    scheme_id_uri: str = _field("", string=True)
    value: str = _field("", string=True)
    timescale: int = _field(0, size=32)
    presentation_time_delta: int = _field(0, size=32, ver=0)
    presentation_time: int = _field(0, size=64, ver=1)
    event_duration: int = _field(0, size=32)
    id: int = _field(0, size=32)
    message_data: bytes = _field(b"", size=8, string=True)

    def on_read_field(self, name: str, reader: BinaryIO, left_bits: int, ctx: Context) -> tuple[int, bool]:
        """In version 1 the two strings follow the fixed fields, just before the data."""
        if self.version == 0:
            return 0, False
        if name in ("scheme_id_uri", "value"):
            return 0, True
        if name == "message_data":
            scheme = _read_cstring(reader)
            value = _read_cstring(reader)
            self.scheme_id_uri = _decode(scheme)
            self.value = _decode(value)
            return (len(scheme) + len(value) + 2) * 8, False
        return 0, False

    def on_write_field(self, name: str, writer: BinaryIO, ctx: Context) -> tuple[int, bool]:
        if self.version == 0:
            return 0, False
        if name in ("scheme_id_uri", "value"):
            return 0, True
        if name == "message_data":
            scheme = _encode(self.scheme_id_uri)
            value = _encode(self.value)
            writer.write(scheme + b"\x00")
            writer.write(value + b"\x00")
            return (len(scheme) + len(value) + 2) * 8, False
        return 0, False


for _box_class in (Mvhd, Tkhd, Mdhd, Mehd, Cslg, Elst, Emsg):
    register_box(_box_class, (0, 1))

for _box_class in (Smhd, Vmhd):
    register_box(_box_class, (0,))

__all__ = [
    "Mvhd",
    "Tkhd",
    "Mdhd",
    "Mehd",
    "Cslg",
    "Smhd",
    "Vmhd",
    "ElstEntry",
    "Elst",
    "Emsg",
]

_unused: tuple[type, ...] = (Box,)
"""Movie fragment boxes, segment indexes and a few small descriptive boxes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from .box import Box, BoxType, Context, FullBox, _field, register_box, str_to_box_type

TFHD_BASE_DATA_OFFSET_PRESENT = 0x000001
TFHD_SAMPLE_DESCRIPTION_INDEX_PRESENT = 0x000002
TFHD_DEFAULT_SAMPLE_DURATION_PRESENT = 0x000008
TFHD_DEFAULT_SAMPLE_SIZE_PRESENT = 0x000010
TFHD_DEFAULT_SAMPLE_FLAGS_PRESENT = 0x000020
TFHD_DURATION_IS_EMPTY = 0x010000
TFHD_DEFAULT_BASE_IS_MOOF = 0x020000

_TRUN_ENTRY_FLAGS = (0x100, 0x200, 0x400, 0x800)

_NCLX_FIELDS = frozenset(
    {
        "colour_type",
        "colour_primaries",
        "transfer_characteristics",
        "matrix_coefficients",
        "full_range_flag",
        "reserved",
    }
)


def _by_version(version: int, v0: int, v1: int) -> int:
    if version == 0:
        return v0
    if version == 1:
        return v1
    return 0


def _bad_size(box: str, name: str) -> ValueError:
    return ValueError(f"invalid name of dynamic-size field: boxType={box} fieldName={name}")


def _bad_length(box: str, name: str) -> ValueError:
    return ValueError(f"invalid name of dynamic-length field: boxType={box} fieldName={name}")


# ----------------------------------------------------------------- trun


@dataclass(kw_only=True)
class TrunEntry:
    sample_duration: int = _field(0, size=32, opt=0x000100)
    sample_size: int = _field(0, size=32, opt=0x000200)
    sample_flags: int = _field(0, size=32, opt=0x000400, hex=True)
    sample_composition_time_offset_v0: int = _field(0, size=32, opt=0x000800, ver=0)
    sample_composition_time_offset_v1: int = _field(
        0, size=32, signed=True, opt=0x000800, nver=0
    )


@dataclass(kw_only=True)
class Trun(FullBox):
    box_type: ClassVar[BoxType] = str_to_box_type("trun")
    sample_count: int = _field(0, size=32)
    data_offset: int = _field(0, size=32, signed=True, opt=0x000001)
    first_sample_flags: int = _field(0, size=32, opt=0x000004, hex=True)
    entries: list[TrunEntry] = _field(factory=list, length="dynamic", size="dynamic")

    def field_size(self, name: str, ctx: Context) -> int:
        if name == "entries":
            flags = self.flags
            return sum(32 for flag in _TRUN_ENTRY_FLAGS if flags & flag)
        raise _bad_size("trun", name)

    def field_length(self, name: str, ctx: Context) -> int:
        if name == "entries":
            return self.sample_count
        raise _bad_length("trun", name)

    def sample_composition_time_offset(self, index: int) -> int:
        if self.version not in (0, 1):
            return 0
        entry = self.entries[index]
        return _by_version(
            self.version,
            entry.sample_composition_time_offset_v0,
            entry.sample_composition_time_offset_v1,
        )


# ----------------------------------------------------------------- tfhd


@dataclass(kw_only=True)
class Tfhd(FullBox):
    box_type: ClassVar[BoxType] = str_to_box_type("tfhd")
    track_id: int = _field(0, size=32)
    base_data_offset: int = _field(0, size=64, opt=TFHD_BASE_DATA_OFFSET_PRESENT)
    sample_description_index: int = _field(0, size=32, opt=TFHD_SAMPLE_DESCRIPTION_INDEX_PRESENT)
    default_sample_duration: int = _field(0, size=32, opt=TFHD_DEFAULT_SAMPLE_DURATION_PRESENT)
    default_sample_size: int = _field(0, size=32, opt=TFHD_DEFAULT_SAMPLE_SIZE_PRESENT)
    default_sample_flags: int = _field(
        0, size=32, opt=TFHD_DEFAULT_SAMPLE_FLAGS_PRESENT, hex=True
    )


# ----------------------------------------------------------------- tfdt


@dataclass(kw_only=True)
class Tfdt(FullBox):
    box_type: ClassVar[BoxType] = str_to_box_type("tfdt")
    base_media_decode_time_v0: int = _field(0, size=32, ver=0)
    base_media_decode_time_v1: int = _field(0, size=64, ver=1)

    def base_media_decode_time(self) -> int:
        return _by_version(
            self.version, self.base_media_decode_time_v0, self.base_media_decode_time_v1
        )


# ----------------------------------------------------------------- tfra


@dataclass(kw_only=True)
class TfraEntry:
    time_v0: int = _field(0, size=32, ver=0)
    moof_offset_v0: int = _field(0, size=32, ver=0)
    time_v1: int = _field(0, size=64, ver=1)
    moof_offset_v1: int = _field(0, size=64, ver=1)
    traf_number: int = _field(0, size="dynamic")
    trun_number: int = _field(0, size="dynamic")
    sample_number: int = _field(0, size="dynamic")


@dataclass(kw_only=True)
class Tfra(FullBox):
    box_type: ClassVar[BoxType] = str_to_box_type("tfra")
    track_id: int = _field(0, size=32)
    reserved: int = _field(0, size=26, const=0)
    length_size_of_traf_num: int = _field(0, size=2)
    length_size_of_trun_num: int = _field(0, size=2)
    length_size_of_sample_num: int = _field(0, size=2)
    number_of_entry: int = _field(0, size=32)
    entries: list[TfraEntry] = _field(factory=list, length="dynamic", size="dynamic")

    def _number_sizes(self) -> int:
        return (
            (self.length_size_of_traf_num + 1) * 8
            + (self.length_size_of_trun_num + 1) * 8
            + (self.length_size_of_sample_num + 1) * 8
        )

    def field_size(self, name: str, ctx: Context) -> int:
        if name == "traf_number":
            return (self.length_size_of_traf_num + 1) * 8
        if name == "trun_number":
            return (self.length_size_of_trun_num + 1) * 8
        if name == "sample_number":
            return (self.length_size_of_sample_num + 1) * 8
        if name == "entries":
            if self.version == 0:
                return 32 + 32 + self._number_sizes()
            if self.version == 1:
                return 64 + 64 + self._number_sizes()
        raise _bad_size("tfra", name)

    def field_length(self, name: str, ctx: Context) -> int:
        if name == "entries":
            return self.number_of_entry
        raise _bad_length("tfra", name)

    def time(self, index: int) -> int:
        if self.version not in (0, 1):
            return 0
        entry = self.entries[index]
        return _by_version(self.version, entry.time_v0, entry.time_v1)

    def moof_offset(self, index: int) -> int:
        if self.version not in (0, 1):
            return 0
        entry = self.entries[index]
        return _by_version(self.version, entry.moof_offset_v0, entry.moof_offset_v1)


# ----------------------------------------------------- trex, trep, mfhd, mfro


@dataclass(kw_only=True)
class Trex(FullBox):
    box_type: ClassVar[BoxType] = str_to_box_type("trex")
    track_id: int = _field(0, size=32)
    default_sample_description_index: int = _field(0, size=32)
    default_sample_duration: int = _field(0, size=32)
    default_sample_size: int = _field(0, size=32)
    default_sample_flags: int = _field(0, size=32, hex=True)


@dataclass(kw_only=True)
class Trep(FullBox):
    box_type: ClassVar[BoxType] = str_to_box_type("trep")
    track_id: int = _field(0, size=32)


@dataclass(kw_only=True)
class Mfhd(FullBox):
    box_type: ClassVar[BoxType] = str_to_box_type("mfhd")
    sequence_number: int = _field(0, size=32)


@dataclass(kw_only=True)
class Mfro(FullBox):
    box_type: ClassVar[BoxType] = str_to_box_type("mfro")
    size: int = _field(0, size=32)


# ----------------------------------------------------------------- sidx


@dataclass(kw_only=True)
class SidxReference:
    reference_type: bool = _field(False, size=1)
    referenced_size: int = _field(0, size=31)
    subsegment_duration: int = _field(0, size=32)
    starts_with_sap: bool = _field(False, size=1)
    sap_type: int = _field(0, size=3)
    sap_delta_time: int = _field(0, size=28)


@dataclass(kw_only=True)
class Sidx(FullBox):
    box_type: ClassVar[BoxType] = str_to_box_type("sidx")
    reference_id: int = _field(0, size=32)
    timescale: int = _field(0, size=32)
    earliest_presentation_time_v0: int = _field(0, size=32, ver=0)
    first_offset_v0: int = _field(0, size=32, ver=0)
    earliest_presentation_time_v1: int = _field(0, size=64, nver=0)
    first_offset_v1: int = _field(0, size=64, nver=0)
    reserved: int = _field(0, size=16, const=0)
    reference_count: int = _field(0, size=16)
    references: list[SidxReference] = _field(factory=list, size=96, length="dynamic")

    def field_length(self, name: str, ctx: Context) -> int:
        if name == "references":
            return self.reference_count
        raise _bad_length("sidx", name)

    def earliest_presentation_time(self) -> int:
        return _by_version(
            self.version, self.earliest_presentation_time_v0, self.earliest_presentation_time_v1
        )

    def first_offset(self) -> int:
        return _by_version(self.version, self.first_offset_v0, self.first_offset_v1)


# ------------------------------------------------------ schm, btrt, fiel, colr


@dataclass(kw_only=True)
class Schm(FullBox):
    box_type: ClassVar[BoxType] = str_to_box_type("schm")
    scheme_type: bytes = _field(bytes(4), size=8, length=4, string=True)
    scheme_version: int = _field(0, size=32, hex=True)
    scheme_uri: bytes = _field(b"", size=8, opt=0x000001, string=True)


@dataclass(kw_only=True)
class Btrt(Box):
    box_type: ClassVar[BoxType] = str_to_box_type("btrt")
    buffer_size_db: int = _field(0, size=32)
    max_bitrate: int = _field(0, size=32)
    avg_bitrate: int = _field(0, size=32)


@dataclass(kw_only=True)
class Fiel(Box):
    box_type: ClassVar[BoxType] = str_to_box_type("fiel")
    field_count: int = _field(0, size=8)
    field_ordering: int = _field(0, size=8)


@dataclass(kw_only=True)
class Colr(Box):
    box_type: ClassVar[BoxType] = str_to_box_type("colr")
    colour_type: bytes = _field(bytes(4), size=8, length=4, string=True)
    colour_primaries: int = _field(0, size=16, opt="dynamic")
    transfer_characteristics: int = _field(0, size=16, opt="dynamic")
    matrix_coefficients: int = _field(0, size=16, opt="dynamic")
    full_range_flag: bool = _field(False, size=1, opt="dynamic")
    reserved: int = _field(0, size=7, opt="dynamic")
    profile: bytes = _field(b"", size=8, opt="dynamic")
    unknown: bytes = _field(b"", size=8, opt="dynamic")

    def is_opt_field_enabled(self, name: str, ctx: Context) -> bool:
        if self.colour_type == b"nclx":
            return name in _NCLX_FIELDS
        if self.colour_type in (b"rICC", b"prof"):
            return name == "profile"
        return name == "unknown"


for _box_class in (Trun, Tfdt, Tfra, Sidx):
    register_box(_box_class, (0, 1))

for _box_class in (Tfhd, Trex, Trep, Mfhd, Mfro, Schm, Btrt):
    register_box(_box_class, (0,))

for _box_class in (Fiel, Colr):
    register_box(_box_class)

__all__ = [
    "TFHD_BASE_DATA_OFFSET_PRESENT",
    "TFHD_SAMPLE_DESCRIPTION_INDEX_PRESENT",
    "TFHD_DEFAULT_SAMPLE_DURATION_PRESENT",
    "TFHD_DEFAULT_SAMPLE_SIZE_PRESENT",
    "TFHD_DEFAULT_SAMPLE_FLAGS_PRESENT",
    "TFHD_DURATION_IS_EMPTY",
    "TFHD_DEFAULT_BASE_IS_MOOF",
    "TrunEntry",
    "Trun",
    "Tfhd",
    "Tfdt",
    "TfraEntry",
    "Tfra",
    "Trex",
    "Trep",
    "Mfhd",
    "Mfro",
    "SidxReference",
    "Sidx",
    "Schm",
    "Btrt",
    "Fiel",
    "Colr",
]
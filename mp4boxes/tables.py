"""Sample tables: timing, chunking, sizes, sync samples, grouping and aux info."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from .box import BoxType, Context, CustomFieldObject, FullBox, _field, register_box, str_to_box_type

_UINT32_MASK = 0xFFFFFFFF

_SGPD_ENTRY_LISTS = frozenset(
    {
        "roll_distances",
        "roll_distances_l",
        "alternative_startup_entries",
        "alternative_startup_entries_l",
        "visual_random_access_entries",
        "visual_random_access_entries_l",
        "temporal_level_entries",
        "temporal_level_entries_l",
    }
)


def _by_version(version: int, v0: int, v1: int) -> int:
    if version == 0:
        return v0
    if version == 1:
        return v1
    return 0


def _bad_length(box: str, name: str) -> ValueError:
    return ValueError(f"invalid name of dynamic-length field: boxType={box} fieldName={name}")


# ----------------------------------------------------------------- stts


@dataclass(kw_only=True)
class SttsEntry:
    sample_count: int = _field(0, size=32)
    sample_delta: int = _field(0, size=32)


@dataclass(kw_only=True)
class Stts(FullBox):
    box_type: ClassVar[BoxType] = str_to_box_type("stts")
    entry_count: int = _field(0, size=32)
    entries: list[SttsEntry] = _field(factory=list, length="dynamic", size=64)

    def field_length(self, name: str, ctx: Context) -> int:
        if name == "entries":
            return self.entry_count
        raise _bad_length("stts", name)


# ----------------------------------------------------------------- stsc


@dataclass(kw_only=True)
class StscEntry:
    first_chunk: int = _field(0, size=32)
    samples_per_chunk: int = _field(0, size=32)
    sample_description_index: int = _field(0, size=32)


@dataclass(kw_only=True)
class Stsc(FullBox):
    box_type: ClassVar[BoxType] = str_to_box_type("stsc")
    entry_count: int = _field(0, size=32)
    entries: list[StscEntry] = _field(factory=list, length="dynamic", size=96)

    def field_length(self, name: str, ctx: Context) -> int:
        if name == "entries":
            return self.entry_count
        raise _bad_length("stsc", name)


# ----------------------------------------------------------- stco, co64


@dataclass(kw_only=True)
class Stco(FullBox):
    box_type: ClassVar[BoxType] = str_to_box_type("stco")
    entry_count: int = _field(0, size=32)
    chunk_offset: list[int] = _field(factory=list, size=32, length="dynamic")

    def field_length(self, name: str, ctx: Context) -> int:
        if name == "chunk_offset":
            return self.entry_count
        raise _bad_length("stco", name)


@dataclass(kw_only=True)
class Co64(FullBox):
    box_type: ClassVar[BoxType] = str_to_box_type("co64")
    entry_count: int = _field(0, size=32)
    chunk_offset: list[int] = _field(factory=list, size=64, length="dynamic")

    def field_length(self, name: str, ctx: Context) -> int:
        if name == "chunk_offset":
            return self.entry_count
        raise _bad_length("co64", name)


# ----------------------------------------------------------------- ctts


@dataclass(kw_only=True)
class CttsEntry:
    sample_count: int = _field(0, size=32)
    sample_offset_v0: int = _field(0, size=32, ver=0)
    sample_offset_v1: int = _field(0, size=32, signed=True, ver=1)


@dataclass(kw_only=True)
class Ctts(FullBox):
    box_type: ClassVar[BoxType] = str_to_box_type("ctts")
    entry_count: int = _field(0, size=32)
    entries: list[CttsEntry] = _field(factory=list, length="dynamic", size=64)

    def field_length(self, name: str, ctx: Context) -> int:
        if name == "entries":
            return self.entry_count
        raise _bad_length("ctts", name)

    def sample_offset(self, index: int) -> int:
        if self.version not in (0, 1):
            return 0
        entry = self.entries[index]
        return _by_version(self.version, entry.sample_offset_v0, entry.sample_offset_v1)


# ----------------------------------------------------------------- stsz


@dataclass(kw_only=True)
class Stsz(FullBox):
    box_type: ClassVar[BoxType] = str_to_box_type("stsz")
    sample_size: int = _field(0, size=32)
    sample_count: int = _field(0, size=32)
    entry_size: list[int] = _field(factory=list, size=32, length="dynamic")

    def field_length(self, name: str, ctx: Context) -> int:
        if name == "entry_size":
            return self.sample_count if self.sample_size == 0 else 0
        raise _bad_length("stsz", name)


# ----------------------------------------------------------------- stss


@dataclass(kw_only=True)
class Stss(FullBox):
    box_type: ClassVar[BoxType] = str_to_box_type("stss")
    entry_count: int = _field(0, size=32)
    sample_number: list[int] = _field(factory=list, length="dynamic", size=32)

    def field_length(self, name: str, ctx: Context) -> int:
        if name == "sample_number":
            return self.entry_count
        raise _bad_length("stss", name)


# ----------------------------------------------------------------- sdtp


@dataclass(kw_only=True)
class SdtpSampleElem:
    is_leading: int = _field(0, size=2)
    sample_depends_on: int = _field(0, size=2)
    sample_is_depended_on: int = _field(0, size=2)
    sample_has_redundancy: int = _field(0, size=2)


@dataclass(kw_only=True)
class Sdtp(FullBox):
    box_type: ClassVar[BoxType] = str_to_box_type("sdtp")
    # Runs to the end of the box.
    samples: list[SdtpSampleElem] = _field(factory=list, size=8)


# ----------------------------------------------------------------- sbgp


@dataclass(kw_only=True)
class SbgpEntry:
    sample_count: int = _field(0, size=32)
    group_description_index: int = _field(0, size=32)


@dataclass(kw_only=True)
class Sbgp(FullBox):
    box_type: ClassVar[BoxType] = str_to_box_type("sbgp")
    grouping_type: int = _field(0, size=32)
    grouping_type_parameter: int = _field(0, size=32, ver=1)
    entry_count: int = _field(0, size=32)
    entries: list[SbgpEntry] = _field(factory=list, length="dynamic", size=64)

    def field_length(self, name: str, ctx: Context) -> int:
        if name == "entries":
            return self.entry_count
        raise _bad_length("sbgp", name)


# ----------------------------------------------------------------- sgpd


@dataclass(kw_only=True)
class RollDistanceWithLength:
    description_length: int = _field(0, size=32)
    roll_distance: int = _field(0, size=16, signed=True)


@dataclass(kw_only=True)
class AlternativeStartupEntryOpt:
    num_output_samples: int = _field(0, size=16)
    num_total_samples: int = _field(0, size=16)


@dataclass(kw_only=True)
class AlternativeStartupEntry(CustomFieldObject):
    roll_count: int = _field(0, size=16)
    first_output_sample: int = _field(0, size=16)
    sample_offset: list[int] = _field(factory=list, size=32, length="dynamic")
    opts: list[AlternativeStartupEntryOpt] = _field(factory=list, size=32)

    def field_length(self, name: str, ctx: Context) -> int:
        if name == "sample_offset":
            return self.roll_count
        return 0


@dataclass(kw_only=True)
class AlternativeStartupEntryL(CustomFieldObject):
    description_length: int = _field(0, size=32)
    alternative_startup_entry: AlternativeStartupEntry = _field(
        factory=AlternativeStartupEntry, extend=True, size="dynamic"
    )

    def field_size(self, name: str, ctx: Context) -> int:
        if name == "alternative_startup_entry":
            return (self.description_length * 8) & _UINT32_MASK
        return 0


@dataclass(kw_only=True)
class VisualRandomAccessEntry:
    num_leading_samples_known: bool = _field(False, size=1)
    num_leading_samples: int = _field(0, size=7)


@dataclass(kw_only=True)
class VisualRandomAccessEntryL:
    description_length: int = _field(0, size=32)
    visual_random_access_entry: VisualRandomAccessEntry = _field(
        factory=VisualRandomAccessEntry, extend=True
    )


@dataclass(kw_only=True)
class TemporalLevelEntry:
    level_independently_decodable: bool = _field(False, size=1)
    reserved: int = _field(0, size=7, const=0)


@dataclass(kw_only=True)
class TemporalLevelEntryL:
    description_length: int = _field(0, size=32)
    temporal_level_entry: TemporalLevelEntry = _field(factory=TemporalLevelEntry, extend=True)


@dataclass(kw_only=True)
class Sgpd(FullBox):
    box_type: ClassVar[BoxType] = str_to_box_type("sgpd")
    grouping_type: bytes = _field(bytes(4), size=8, length=4, string=True)
    default_length: int = _field(0, size=32, ver=1)
    default_sample_description_index: int = _field(0, size=32, ver=2)
    entry_count: int = _field(0, size=32)
    roll_distances: list[int] = _field(factory=list, size=16, signed=True, opt="dynamic")
    roll_distances_l: list[RollDistanceWithLength] = _field(factory=list, size=16, opt="dynamic")
    alternative_startup_entries: list[AlternativeStartupEntry] = _field(
        factory=list, size="dynamic", length="dynamic", opt="dynamic"
    )
    alternative_startup_entries_l: list[AlternativeStartupEntryL] = _field(
        factory=list, length="dynamic", opt="dynamic"
    )
    visual_random_access_entries: list[VisualRandomAccessEntry] = _field(
        factory=list, length="dynamic", opt="dynamic"
    )
    visual_random_access_entries_l: list[VisualRandomAccessEntryL] = _field(
        factory=list, length="dynamic", opt="dynamic"
    )
    temporal_level_entries: list[TemporalLevelEntry] = _field(
        factory=list, length="dynamic", opt="dynamic"
    )
    temporal_level_entries_l: list[TemporalLevelEntryL] = _field(
        factory=list, length="dynamic", opt="dynamic"
    )
    unsupported: bytes = _field(b"", size=8, opt="dynamic")

    def field_size(self, name: str, ctx: Context) -> int:
        if name == "alternative_startup_entries":
            return (self.default_length * 8) & _UINT32_MASK
        return 0

    def field_length(self, name: str, ctx: Context) -> int:
        if name in _SGPD_ENTRY_LISTS:
            return self.entry_count
        return 0

    def is_opt_field_enabled(self, name: str, ctx: Context) -> bool:
        no_default_length = self.version == 1 and self.default_length == 0
        kinds = {
            "roll_distances": self.grouping_type in (b"roll", b"prol"),
            "alternative_startup_entries": self.grouping_type == b"alst",
            "visual_random_access_entries": self.grouping_type == b"rap ",
            "temporal_level_entries": self.grouping_type == b"tele",
        }
        if name in kinds:
            return kinds[name] and not no_default_length
        if name.endswith("_l") and name[:-2] in kinds:
            return kinds[name[:-2]] and no_default_length
        if name == "unsupported":
            return not any(kinds.values())
        return False


# ----------------------------------------------------------------- saio


@dataclass(kw_only=True)
class Saio(FullBox):
    box_type: ClassVar[BoxType] = str_to_box_type("saio")
    aux_info_type: bytes = _field(bytes(4), size=8, length=4, opt=0x000001, string=True)
    aux_info_type_parameter: int = _field(0, size=32, opt=0x000001, hex=True)
    entry_count: int = _field(0, size=32)
    offset_v0: list[int] = _field(factory=list, size=32, ver=0, length="dynamic")
    offset_v1: list[int] = _field(factory=list, size=64, nver=0, length="dynamic")

    def field_length(self, name: str, ctx: Context) -> int:
        if name in ("offset_v0", "offset_v1"):
            return self.entry_count
        raise _bad_length("saio", name)

    def offset(self, index: int) -> int:
        if self.version == 0:
            return self.offset_v0[index]
        if self.version == 1:
            return self.offset_v1[index]
        return 0


# ----------------------------------------------------------------- saiz


@dataclass(kw_only=True)
class Saiz(FullBox):
    box_type: ClassVar[BoxType] = str_to_box_type("saiz")
    aux_info_type: bytes = _field(bytes(4), size=8, length=4, opt=0x000001, string=True)
    aux_info_type_parameter: int = _field(0, size=32, opt=0x000001, hex=True)
    default_sample_info_size: int = _field(0, size=8, dec=True)
    sample_count: int = _field(0, size=32)
    sample_info_size: list[int] = _field(
        factory=list, size=8, opt="dynamic", length="dynamic", dec=True
    )

    def is_opt_field_enabled(self, name: str, ctx: Context) -> bool:
        if name == "sample_info_size":
            return self.default_sample_info_size == 0
        return False

    def field_length(self, name: str, ctx: Context) -> int:
        if name == "sample_info_size":
            return self.sample_count
        raise _bad_length("saiz", name)


for _box_class in (Stts, Stsc, Stco, Co64, Stsz, Stss, Sdtp, Saiz):
    register_box(_box_class, (0,))

for _box_class in (Ctts, Sbgp, Saio):
    register_box(_box_class, (0, 1))

# Version 0 is deprecated by ISO/IEC 14496-12.
register_box(Sgpd, (1, 2))

__all__ = [
    "SttsEntry",
    "Stts",
    "StscEntry",
    "Stsc",
    "Stco",
    "Co64",
    "CttsEntry",
    "Ctts",
    "Stsz",
    "Stss",
    "SdtpSampleElem",
    "Sdtp",
    "SbgpEntry",
    "Sbgp",
    "RollDistanceWithLength",
    "AlternativeStartupEntryOpt",
    "AlternativeStartupEntry",
    "AlternativeStartupEntryL",
    "VisualRandomAccessEntry",
    "VisualRandomAccessEntryL",
    "TemporalLevelEntry",
    "TemporalLevelEntryL",
    "Sgpd",
    "Saio",
    "Saiz",
]
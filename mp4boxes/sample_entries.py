"""Sample entries and the decoder configuration boxes that go with them."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Optional

from .box import (
    LENGTH_UNLIMITED,
    AnyTypeBox,
    Box,
    BoxType,
    Context,
    CustomFieldObject,
    _field,
    register_box,
    str_to_box_type,
)

BOX_TYPE_MP4V = str_to_box_type("mp4v")
BOX_TYPE_AVC1 = str_to_box_type("avc1")
BOX_TYPE_ENCV = str_to_box_type("encv")
BOX_TYPE_HEV1 = str_to_box_type("hev1")
BOX_TYPE_HVC1 = str_to_box_type("hvc1")
BOX_TYPE_MP4A = str_to_box_type("mp4a")
BOX_TYPE_ENCA = str_to_box_type("enca")
BOX_TYPE_AVCC = str_to_box_type("avcC")
BOX_TYPE_PASP = str_to_box_type("pasp")
BOX_TYPE_STPP = str_to_box_type("stpp")
BOX_TYPE_SBTT = str_to_box_type("sbtt")
BOX_TYPE_HVCC = str_to_box_type("hvcC")

AVC_BASELINE_PROFILE = 66
AVC_MAIN_PROFILE = 77
AVC_EXTENDED_PROFILE = 88
AVC_HIGH_PROFILE = 100
AVC_HIGH10_PROFILE = 110
AVC_HIGH422_PROFILE = 122

_AVC_HIGH_PROFILES = frozenset({AVC_HIGH_PROFILE, AVC_HIGH10_PROFILE, AVC_HIGH422_PROFILE, 144})

_AVC_HIGH_PROFILE_FIELDS = frozenset(
    {
        "reserved3",
        "chroma_format",
        "reserved4",
        "bit_depth_luma_minus8",
        "reserved5",
        "bit_depth_chroma_minus8",
        "num_of_sequence_parameter_set_ext",
        "sequence_parameter_sets_ext",
    }
)


def _escape_unprintables(raw: bytes) -> str:
    """Decode bytes as text, replacing every unprintable character with a dot."""
    text = raw.decode("utf-8", errors="replace")
    return "".join(c if c.isprintable() else "." for c in text)


def _format_unsigned_fixed_1616(value: int) -> str:
    if value & 0xFFFF == 0:
        return str(value >> 16)
    return f"{value / (1 << 16):.6f}".rstrip("0").rstrip(".")


# ---------------------------------------------------------- sample entries


@dataclass(kw_only=True)
class SampleEntry(AnyTypeBox):
    reserved: list[int] = _field(factory=lambda: [0] * 6, size=8, length=6, const=0)
    data_reference_index: int = _field(0, size=16)


@dataclass(kw_only=True)
class VisualSampleEntry(SampleEntry):
    pre_defined: int = _field(0, size=16)
    # The sample entry's own reserved bytes already use the name "reserved".
    reserved2: int = _field(0, size=16, const=0)
    pre_defined2: list[int] = _field(factory=lambda: [0, 0, 0], size=32, length=3)
    width: int = _field(0, size=16)
    height: int = _field(0, size=16)
    horizresolution: int = _field(0, size=32)
    vertresolution: int = _field(0, size=32)
    reserved3: int = _field(0, size=32, const=0)
    frame_count: int = _field(0, size=16)
    compressorname: bytes = _field(bytes(32), size=8, length=32)
    depth: int = _field(0, size=16)
    pre_defined3: int = _field(0, size=16, signed=True)

    def stringify_field(self, name: str, indent: str, depth: int, ctx: Context) -> Optional[str]:
        if name == "compressorname" and self.compressorname and self.compressorname[0] <= 31:
            length = self.compressorname[0]
            return '"' + _escape_unprintables(self.compressorname[1 : length + 1]) + '"'
        return None


@dataclass(kw_only=True)
class AudioSampleEntry(SampleEntry):
    # The inherited sample entry fields are optional as well.
    base_spec: ClassVar[dict[str, Any]] = {"opt": "dynamic"}

    entry_version: int = _field(0, size=16, opt="dynamic")
    reserved2: list[int] = _field(
        factory=lambda: [0, 0, 0], size=16, length=3, opt="dynamic", const=0
    )
    channel_count: int = _field(0, size=16, opt="dynamic")
    sample_size: int = _field(0, size=16, opt="dynamic")
    pre_defined: int = _field(0, size=16, opt="dynamic")
    reserved3: int = _field(0, size=16, opt="dynamic", const=0)
    # Fixed-point 16.16.
    sample_rate: int = _field(0, size=32, opt="dynamic")
    quick_time_data: bytes = _field(b"", size=8, opt="dynamic", length="dynamic")

    def is_opt_field_enabled(self, name: str, ctx: Context) -> bool:
        if name == "quick_time_data":
            return ctx.is_quicktime_compatible and (
                ctx.under_wave or self.entry_version in (1, 2)
            )
        return not (ctx.is_quicktime_compatible and ctx.under_wave)

    def field_length(self, name: str, ctx: Context) -> int:
        if name == "quick_time_data" and ctx.is_quicktime_compatible:
            if ctx.under_wave:
                return LENGTH_UNLIMITED
            if self.entry_version == 1:
                return 16
            if self.entry_version == 2:
                return 36
        return 0

    def stringify_field(self, name: str, indent: str, depth: int, ctx: Context) -> Optional[str]:
        if name == "sample_rate":
            return _format_unsigned_fixed_1616(self.sample_rate)
        return None

    def sample_rate_value(self) -> float:
        return self.sample_rate / (1 << 16)

    def sample_rate_int(self) -> int:
        return (self.sample_rate >> 16) & 0xFFFF


# -------------------------------------------------------------------- avcC


@dataclass(kw_only=True)
class AVCParameterSet(CustomFieldObject):
    length: int = _field(0, size=16)
    nal_unit: bytes = _field(b"", size=8, length="dynamic")

    def field_length(self, name: str, ctx: Context) -> int:
        if name == "nal_unit":
            return self.length
        return 0


@dataclass(kw_only=True)
class AVCDecoderConfiguration(AnyTypeBox):
    configuration_version: int = _field(0, size=8)
    profile: int = _field(0, size=8)
    profile_compatibility: int = _field(0, size=8)
    level: int = _field(0, size=8)
    reserved: int = _field(63, size=6, const=63)
    length_size_minus_one: int = _field(0, size=2)
    reserved2: int = _field(7, size=3, const=7)
    num_of_sequence_parameter_sets: int = _field(0, size=5)
    sequence_parameter_sets: list[AVCParameterSet] = _field(factory=list, length="dynamic")
    num_of_picture_parameter_sets: int = _field(0, size=8)
    picture_parameter_sets: list[AVCParameterSet] = _field(factory=list, length="dynamic")
    high_profile_fields_enabled: bool = _field(False, hidden=True)
    reserved3: int = _field(63, size=6, opt="dynamic", const=63)
    chroma_format: int = _field(0, size=2, opt="dynamic")
    reserved4: int = _field(31, size=5, opt="dynamic", const=31)
    bit_depth_luma_minus8: int = _field(0, size=3, opt="dynamic")
    reserved5: int = _field(31, size=5, opt="dynamic", const=31)
    bit_depth_chroma_minus8: int = _field(0, size=3, opt="dynamic")
    num_of_sequence_parameter_set_ext: int = _field(0, size=8, opt="dynamic")
    sequence_parameter_sets_ext: list[AVCParameterSet] = _field(
        factory=list, length="dynamic", opt="dynamic"
    )

    def field_length(self, name: str, ctx: Context) -> int:
        if name == "sequence_parameter_sets":
            return self.num_of_sequence_parameter_sets
        if name == "picture_parameter_sets":
            return self.num_of_picture_parameter_sets
        if name == "sequence_parameter_sets_ext":
            return self.num_of_sequence_parameter_set_ext
        return 0

    def is_opt_field_enabled(self, name: str, ctx: Context) -> bool:
        if name in _AVC_HIGH_PROFILE_FIELDS:
            return self.high_profile_fields_enabled
        return False

    def on_read_field(self, name, reader, left_bits: int, ctx: Context) -> tuple[int, bool]:
        if name == "high_profile_fields_enabled":
            self.high_profile_fields_enabled = (
                left_bits >= 32 and self.profile in _AVC_HIGH_PROFILES
            )
            return 0, True
        return 0, False

    def on_write_field(self, name, writer, ctx: Context) -> tuple[int, bool]:
        if name == "high_profile_fields_enabled":
            if self.high_profile_fields_enabled and self.profile not in _AVC_HIGH_PROFILES:
                raise ValueError(
                    "each values of Profile and HighProfileFieldsEnabled are inconsistent"
                )
            return 0, True
        return 0, False


# ------------------------------------------------------- pasp, subtitles


@dataclass(kw_only=True)
class PixelAspectRatioBox(AnyTypeBox):
    h_spacing: int = _field(0, size=32)
    v_spacing: int = _field(0, size=32)


@dataclass(kw_only=True)
class XMLSubtitleSampleEntry(SampleEntry):
    # Space-separated lists; the last two may be empty.
    namespace: str = _field("", string=True)
    schema_location: str = _field("", string=True)
    auxiliary_mime_types: str = _field("", string=True)

    def namespace_list(self) -> list[str]:
        return self.namespace.split()

    def schema_location_list(self) -> list[str]:
        return self.schema_location.split()

    def auxiliary_mime_types_list(self) -> list[str]:
        return self.auxiliary_mime_types.split()


@dataclass(kw_only=True)
class TextSubtitleSampleEntry(SampleEntry):
    content_encoding: str = _field("", string=True)
    mime_format: str = _field("", string=True)


# -------------------------------------------------------------------- hvcC


@dataclass(kw_only=True)
class HEVCNalu(CustomFieldObject):
    length: int = _field(0, size=16)
    nal_unit: bytes = _field(b"", size=8, length="dynamic")

    def field_length(self, name: str, ctx: Context) -> int:
        if name == "nal_unit":
            return self.length
        return 0


@dataclass(kw_only=True)
class HEVCNaluArray(CustomFieldObject):
    completeness: bool = _field(False, size=1)
    reserved: bool = _field(False, size=1)
    nalu_type: int = _field(0, size=6)
    num_nalus: int = _field(0, size=16)
    nalus: list[HEVCNalu] = _field(factory=list, length="dynamic")

    def field_length(self, name: str, ctx: Context) -> int:
        if name == "nalus":
            return self.num_nalus
        return 0


@dataclass(kw_only=True)
class HvcC(Box):
    box_type: ClassVar[BoxType] = BOX_TYPE_HVCC
    configuration_version: int = _field(0, size=8)
    general_profile_space: int = _field(0, size=2)
    general_tier_flag: bool = _field(False, size=1)
    general_profile_idc: int = _field(0, size=5)
    general_profile_compatibility: list[bool] = _field(
        factory=lambda: [False] * 32, size=1, length=32
    )
    general_constraint_indicator: list[int] = _field(factory=lambda: [0] * 6, size=8, length=6)
    general_level_idc: int = _field(0, size=8)
    reserved1: int = _field(15, size=4, const=15)
    min_spatial_segmentation_idc: int = _field(0, size=12)
    reserved2: int = _field(63, size=6, const=63)
    parallelism_type: int = _field(0, size=2)
    reserved3: int = _field(63, size=6, const=63)
    chroma_format_idc: int = _field(0, size=2)
    reserved4: int = _field(31, size=5, const=31)
    bit_depth_luma_minus8: int = _field(0, size=3)
    reserved5: int = _field(31, size=5, const=31)
    bit_depth_chroma_minus8: int = _field(0, size=3)
    avg_frame_rate: int = _field(0, size=16)
    constant_frame_rate: int = _field(0, size=2)
    num_temporal_layers: int = _field(0, size=2)
    temporal_id_nested: int = _field(0, size=2)
    length_size_minus_one: int = _field(0, size=2)
    num_of_nalu_arrays: int = _field(0, size=8)
    nalu_arrays: list[HEVCNaluArray] = _field(factory=list, length="dynamic")

    def field_length(self, name: str, ctx: Context) -> int:
        if name == "nalu_arrays":
            return self.num_of_nalu_arrays
        return 0


for _box_type in (BOX_TYPE_MP4V, BOX_TYPE_AVC1, BOX_TYPE_ENCV, BOX_TYPE_HEV1, BOX_TYPE_HVC1):
    register_box(VisualSampleEntry, box_type=_box_type)
for _box_type in (BOX_TYPE_MP4A, BOX_TYPE_ENCA):
    register_box(AudioSampleEntry, box_type=_box_type)
register_box(AVCDecoderConfiguration, box_type=BOX_TYPE_AVCC)
register_box(PixelAspectRatioBox, box_type=BOX_TYPE_PASP)
register_box(XMLSubtitleSampleEntry, box_type=BOX_TYPE_STPP)
register_box(TextSubtitleSampleEntry, box_type=BOX_TYPE_SBTT)
register_box(HvcC)

__all__ = [
    "AVC_BASELINE_PROFILE",
    "AVC_MAIN_PROFILE",
    "AVC_EXTENDED_PROFILE",
    "AVC_HIGH_PROFILE",
    "AVC_HIGH10_PROFILE",
    "AVC_HIGH422_PROFILE",
    "SampleEntry",
    "VisualSampleEntry",
    "AudioSampleEntry",
    "AVCParameterSet",
    "AVCDecoderConfiguration",
    "PixelAspectRatioBox",
    "XMLSubtitleSampleEntry",
    "TextSubtitleSampleEntry",
    "HEVCNalu",
    "HEVCNaluArray",
    "HvcC",
]
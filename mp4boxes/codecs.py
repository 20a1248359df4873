"""Codec configuration boxes for AV1, AC-3, Opus, VP8/VP9 and PCM."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from .box import Box, BoxType, Context, FullBox, _field, register_box, str_to_box_type
from .sample_entries import AudioSampleEntry, VisualSampleEntry

BOX_TYPE_AV01 = str_to_box_type("av01")
BOX_TYPE_AV1C = str_to_box_type("av1C")
BOX_TYPE_AC3 = str_to_box_type("ac-3")
BOX_TYPE_DAC3 = str_to_box_type("dac3")
BOX_TYPE_OPUS = str_to_box_type("Opus")
BOX_TYPE_DOPS = str_to_box_type("dOps")
BOX_TYPE_VP08 = str_to_box_type("vp08")
BOX_TYPE_VP09 = str_to_box_type("vp09")
BOX_TYPE_VPCC = str_to_box_type("vpcC")
BOX_TYPE_IPCM = str_to_box_type("ipcm")
BOX_TYPE_FPCM = str_to_box_type("fpcm")
BOX_TYPE_PCMC = str_to_box_type("pcmC")


@dataclass(kw_only=True)
class Av1C(Box):
    """AV1 codec configuration record."""

    box_type: ClassVar[BoxType] = BOX_TYPE_AV1C
    marker: int = _field(1, size=1, const=1)
    version: int = _field(1, size=7, const=1)
    seq_profile: int = _field(0, size=3)
    seq_level_idx_0: int = _field(0, size=5)
    seq_tier_0: int = _field(0, size=1)
    high_bitdepth: int = _field(0, size=1)
    twelve_bit: int = _field(0, size=1)
    monochrome: int = _field(0, size=1)
    chroma_subsampling_x: int = _field(0, size=1)
    chroma_subsampling_y: int = _field(0, size=1)
    chroma_sample_position: int = _field(0, size=2)
    reserved: int = _field(0, size=3, const=0)
    initial_presentation_delay_present: int = _field(0, size=1)
    initial_presentation_delay_minus_one: int = _field(0, size=4)
    config_obus: bytes = _field(b"", size=8)


@dataclass(kw_only=True)
class Dac3(Box):
    """AC-3 specific box."""

    box_type: ClassVar[BoxType] = BOX_TYPE_DAC3
    fscod: int = _field(0, size=2)
    bsid: int = _field(0, size=5)
    bsmod: int = _field(0, size=3)
    acmod: int = _field(0, size=3)
    lfe_on: int = _field(0, size=1)
    bit_rate_code: int = _field(0, size=5)
    reserved: int = _field(0, size=5, const=0)


@dataclass(kw_only=True)
class DOps(Box):
    """Opus specific box."""

    box_type: ClassVar[BoxType] = BOX_TYPE_DOPS
    version: int = _field(0, size=8)
    output_channel_count: int = _field(0, size=8)
    pre_skip: int = _field(0, size=16)
    input_sample_rate: int = _field(0, size=32)
    output_gain: int = _field(0, size=16, signed=True)
    channel_mapping_family: int = _field(0, size=8)
    stream_count: int = _field(0, size=8, opt="dynamic")
    coupled_count: int = _field(0, size=8, opt="dynamic")
    channel_mapping: bytes = _field(b"", size=8, opt="dynamic", length="dynamic")

    def is_opt_field_enabled(self, name: str, ctx: Context) -> bool:
        if name in ("stream_count", "coupled_count", "channel_mapping"):
            return self.channel_mapping_family != 0
        return False

    def field_length(self, name: str, ctx: Context) -> int:
        if name == "channel_mapping":
            return self.output_channel_count
        return 0


@dataclass(kw_only=True)
class PcmC(FullBox):
    """PCM configuration box."""

    box_type: ClassVar[BoxType] = BOX_TYPE_PCMC
    format_flags: int = _field(0, size=8)
    pcm_sample_size: int = _field(0, size=8)


@dataclass(kw_only=True)
class VpcC(FullBox):
    """VP codec configuration box."""

    box_type: ClassVar[BoxType] = BOX_TYPE_VPCC
    profile: int = _field(0, size=8)
    level: int = _field(0, size=8)
    bit_depth: int = _field(0, size=4)
    chroma_subsampling: int = _field(0, size=3)
    video_full_range_flag: int = _field(0, size=1)
    colour_primaries: int = _field(0, size=8)
    transfer_characteristics: int = _field(0, size=8)
    matrix_coefficients: int = _field(0, size=8)
    codec_initialization_data_size: int = _field(0, size=16)
    codec_initialization_data: bytes = _field(b"", size=8, length="dynamic")

    def field_length(self, name: str, ctx: Context) -> int:
        if name == "codec_initialization_data":
            return self.codec_initialization_data_size
        return 0


for _box_type in (BOX_TYPE_AV01, BOX_TYPE_VP08, BOX_TYPE_VP09):
    register_box(VisualSampleEntry, box_type=_box_type)
for _box_type in (BOX_TYPE_AC3, BOX_TYPE_OPUS, BOX_TYPE_IPCM, BOX_TYPE_FPCM):
    register_box(AudioSampleEntry, box_type=_box_type)
for _box_class in (Av1C, Dac3, DOps, VpcC):
    register_box(_box_class)
register_box(PcmC, (0, 1))

__all__ = ["Av1C", "Dac3", "DOps", "PcmC", "VpcC"]
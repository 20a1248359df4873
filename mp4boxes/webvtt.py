"""WebVTT sample entry, configuration and cue boxes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from .box import Box, BoxType, _field, register_box, str_to_box_type
from .sample_entries import SampleEntry

BOX_TYPE_VTTC_CONFIG = str_to_box_type("vttC")
BOX_TYPE_VLAB = str_to_box_type("vlab")
BOX_TYPE_WVTT = str_to_box_type("wvtt")
BOX_TYPE_VTTC = str_to_box_type("vttc")
BOX_TYPE_VSID = str_to_box_type("vsid")
BOX_TYPE_CTIM = str_to_box_type("ctim")
BOX_TYPE_IDEN = str_to_box_type("iden")
BOX_TYPE_STTG = str_to_box_type("sttg")
BOX_TYPE_PAYL = str_to_box_type("payl")
BOX_TYPE_VTTE = str_to_box_type("vtte")
BOX_TYPE_VTTA = str_to_box_type("vtta")


@dataclass(kw_only=True)
class WebVTTConfigurationBox(Box):
    box_type: ClassVar[BoxType] = BOX_TYPE_VTTC_CONFIG
    config: str = _field("", string=True)


@dataclass(kw_only=True)
class WebVTTSourceLabelBox(Box):
    box_type: ClassVar[BoxType] = BOX_TYPE_VLAB
    source_label: str = _field("", string=True)


@dataclass(kw_only=True)
class WVTTSampleEntry(SampleEntry):
    """WebVTT sample entry."""


@dataclass(kw_only=True)
class VTTCueBox(Box):
    box_type: ClassVar[BoxType] = BOX_TYPE_VTTC


@dataclass(kw_only=True)
class CueSourceIDBox(Box):
    box_type: ClassVar[BoxType] = BOX_TYPE_VSID
    source_id: int = _field(0, size=32)


@dataclass(kw_only=True)
class CueTimeBox(Box):
    box_type: ClassVar[BoxType] = BOX_TYPE_CTIM
    cue_current_time: str = _field("", string=True)


@dataclass(kw_only=True)
class CueIDBox(Box):
    box_type: ClassVar[BoxType] = BOX_TYPE_IDEN
    cue_id: str = _field("", string=True)


@dataclass(kw_only=True)
class CueSettingsBox(Box):
    box_type: ClassVar[BoxType] = BOX_TYPE_STTG
    settings: str = _field("", string=True)


@dataclass(kw_only=True)
class CuePayloadBox(Box):
    box_type: ClassVar[BoxType] = BOX_TYPE_PAYL
    cue_text: str = _field("", string=True)


@dataclass(kw_only=True)
class VTTEmptyCueBox(Box):
    box_type: ClassVar[BoxType] = BOX_TYPE_VTTE


@dataclass(kw_only=True)
class VTTAdditionalTextBox(Box):
    box_type: ClassVar[BoxType] = BOX_TYPE_VTTA
    cue_additional_text: str = _field("", string=True)


for _box_class in (
    WebVTTConfigurationBox,
    WebVTTSourceLabelBox,
    VTTCueBox,
    CueSourceIDBox,
    CueTimeBox,
    CueIDBox,
    CueSettingsBox,
    CuePayloadBox,
    VTTEmptyCueBox,
    VTTAdditionalTextBox,
):
    register_box(_box_class)
register_box(WVTTSampleEntry, box_type=BOX_TYPE_WVTT)

__all__ = [
    "WebVTTConfigurationBox",
    "WebVTTSourceLabelBox",
    "WVTTSampleEntry",
    "VTTCueBox",
    "CueSourceIDBox",
    "CueTimeBox",
    "CueIDBox",
    "CueSettingsBox",
    "CuePayloadBox",
    "VTTEmptyCueBox",
    "VTTAdditionalTextBox",
]
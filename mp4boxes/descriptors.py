"""The elementary stream descriptor box and its descriptors."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Optional

from .box import BoxType, Context, CustomFieldObject, FullBox, _field, register_box, str_to_box_type

BOX_TYPE_ESDS = str_to_box_type("esds")

ES_DESCR_TAG = 0x03
DECODER_CONFIG_DESCR_TAG = 0x04
DEC_SPECIFIC_INFO_TAG = 0x05
SL_CONFIG_DESCR_TAG = 0x06

_TAG_NAMES = {
    ES_DESCR_TAG: "ESDescr",
    DECODER_CONFIG_DESCR_TAG: "DecoderConfigDescr",
    DEC_SPECIFIC_INFO_TAG: "DecSpecificInfo",
    SL_CONFIG_DESCR_TAG: "SLConfigDescr",
}


@dataclass(kw_only=True)
class ESDescriptor(CustomFieldObject):
    es_id: int = _field(0, size=16)
    stream_dependence_flag: bool = _field(False, size=1)
    url_flag: bool = _field(False, size=1)
    ocr_stream_flag: bool = _field(False, size=1)
    stream_priority: int = _field(0, size=5, signed=True)
    depends_on_es_id: int = _field(0, size=16, opt="dynamic")
    url_length: int = _field(0, size=8, opt="dynamic")
    url_string: bytes = _field(b"", size=8, length="dynamic", opt="dynamic", string=True)
    ocr_es_id: int = _field(0, size=16, opt="dynamic")

    def field_length(self, name: str, ctx: Context) -> int:
        if name == "url_string":
            return self.url_length
        raise ValueError(
            f"invalid name of dynamic-length field: boxType=ESDescriptor fieldName={name}"
        )

    def is_opt_field_enabled(self, name: str, ctx: Context) -> bool:
        if name == "depends_on_es_id":
            return self.stream_dependence_flag
        if name in ("url_length", "url_string"):
            return self.url_flag
        if name == "ocr_es_id":
            return self.ocr_stream_flag
        return False


@dataclass(kw_only=True)
class DecoderConfigDescriptor(CustomFieldObject):
    object_type_indication: int = _field(0, size=8)
    stream_type: int = _field(0, size=6, signed=True)
    up_stream: bool = _field(False, size=1)
    reserved: bool = _field(False, size=1)
    buffer_size_db: int = _field(0, size=24)
    max_bitrate: int = _field(0, size=32)
    avg_bitrate: int = _field(0, size=32)


@dataclass(kw_only=True)
class Descriptor(CustomFieldObject):
    """A tagged descriptor; the tag decides which body follows the size."""

    tag: int = _field(0, size=8, signed=True)
    size: int = _field(0, varint=True)
    es_descriptor: Optional[ESDescriptor] = _field(None, extend=True, opt="dynamic")
    decoder_config_descriptor: Optional[DecoderConfigDescriptor] = _field(
        None, extend=True, opt="dynamic"
    )
    data: bytes = _field(b"", size=8, opt="dynamic", length="dynamic")

    def field_length(self, name: str, ctx: Context) -> int:
        if name == "data":
            return self.size
        raise ValueError(f"invalid name of dynamic-length field: boxType=esds fieldName={name}")

    def is_opt_field_enabled(self, name: str, ctx: Context) -> bool:
        if self.tag == ES_DESCR_TAG:
            return name == "es_descriptor"
        if self.tag == DECODER_CONFIG_DESCR_TAG:
            return name == "decoder_config_descriptor"
        return name == "data"

    def stringify_field(self, name: str, indent: str, depth: int, ctx: Context) -> Optional[str]:
        if name == "tag":
            return _TAG_NAMES.get(self.tag)
        return None


@dataclass(kw_only=True)
class Esds(FullBox):
    """Elementary stream descriptor box."""

    box_type: ClassVar[BoxType] = BOX_TYPE_ESDS
    descriptors: list[Descriptor] = _field(factory=list, array=True)


register_box(Esds, (0,))

__all__ = [
    "ES_DESCR_TAG",
    "DECODER_CONFIG_DESCR_TAG",
    "DEC_SPECIFIC_INFO_TAG",
    "SL_CONFIG_DESCR_TAG",
    "Esds",
    "Descriptor",
    "ESDescriptor",
    "DecoderConfigDescriptor",
]
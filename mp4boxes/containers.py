"""Container boxes and the structural boxes of the ISO base media file format."""

from __future__ import annotations

import io
from dataclasses import dataclass
from typing import BinaryIO, ClassVar

from .box import Box, BoxType, Context, FullBox, _field, register_box, str_to_box_type

BRAND_QT = b"qt  "
BRAND_ISOM = b"isom"
BRAND_ISO2 = b"iso2"
BRAND_ISO3 = b"iso3"
BRAND_ISO4 = b"iso4"
BRAND_ISO5 = b"iso5"
BRAND_ISO6 = b"iso6"
BRAND_ISO7 = b"iso7"
BRAND_ISO8 = b"iso8"
BRAND_ISO9 = b"iso9"
BRAND_AVC1 = b"avc1"
BRAND_MP41 = b"mp41"
BRAND_MP71 = b"mp71"

URL_SELF_CONTAINED = 0x000001
URN_SELF_CONTAINED = 0x000001


def _decode(raw: bytes) -> str:
    return raw.decode("utf-8", errors="surrogateescape")


def _remaining(stream: BinaryIO) -> int:
    position = stream.tell()
    end = stream.seek(0, io.SEEK_END)
    stream.seek(position, io.SEEK_SET)
    return end - position


@dataclass(kw_only=True)
class Dinf(Box):
    box_type: ClassVar[BoxType] = str_to_box_type("dinf")


@dataclass(kw_only=True)
class Dref(FullBox):
    box_type: ClassVar[BoxType] = str_to_box_type("dref")
    entry_count: int = _field(0, size=32)


@dataclass(kw_only=True)
class Url(FullBox):
    box_type: ClassVar[BoxType] = str_to_box_type("url ")
    location: str = _field("", string=True, nopt=URL_SELF_CONTAINED)


@dataclass(kw_only=True)
class Urn(FullBox):
    box_type: ClassVar[BoxType] = str_to_box_type("urn ")
    name: str = _field("", string=True, nopt=URN_SELF_CONTAINED)
    location: str = _field("", string=True, nopt=URN_SELF_CONTAINED)


@dataclass(kw_only=True)
class Edts(Box):
    box_type: ClassVar[BoxType] = str_to_box_type("edts")


@dataclass(kw_only=True)
class FreeSpace(Box):
    data: bytes = _field(b"", size=8)


@dataclass(kw_only=True)
class Free(FreeSpace):
    box_type: ClassVar[BoxType] = str_to_box_type("free")


@dataclass(kw_only=True)
class Skip(FreeSpace):
    box_type: ClassVar[BoxType] = str_to_box_type("skip")


@dataclass(kw_only=True)
class Frma(Box):
    box_type: ClassVar[BoxType] = str_to_box_type("frma")
    data_format: bytes = _field(bytes(4), size=8, length=4, string=True)


@dataclass(kw_only=True)
class CompatibleBrandElem:
    compatible_brand: bytes = _field(bytes(4), size=8, length=4, string=True)


@dataclass(kw_only=True)
class Ftyp(Box):
    box_type: ClassVar[BoxType] = str_to_box_type("ftyp")
    major_brand: bytes = _field(bytes(4), size=8, length=4, string=True)
    minor_version: int = _field(0, size=32)
    # Runs to the end of the box.
    compatible_brands: list[CompatibleBrandElem] = _field(factory=list, size=32)

    def add_compatible_brand(self, brand: bytes) -> None:
        if not self.has_compatible_brand(brand):
            self.compatible_brands.append(CompatibleBrandElem(compatible_brand=brand))

    def remove_compatible_brand(self, brand: bytes) -> None:
        """Remove every occurrence, moving the last entry into each freed slot."""
        brands = self.compatible_brands
        i = 0
        while i < len(brands):
            if brands[i].compatible_brand != brand:
                i += 1
                continue
            brands[i] = brands[-1]
            brands.pop()

    def has_compatible_brand(self, brand: bytes) -> bool:
        return any(e.compatible_brand == brand for e in self.compatible_brands)


@dataclass(kw_only=True)
class Styp(Box):
    box_type: ClassVar[BoxType] = str_to_box_type("styp")
    major_brand: bytes = _field(bytes(4), size=8, length=4, string=True)
    minor_version: int = _field(0, size=32)
    compatible_brands: list[CompatibleBrandElem] = _field(factory=list, size=32)


@dataclass(kw_only=True)
class Hdlr(FullBox):
    box_type: ClassVar[BoxType] = str_to_box_type("hdlr")
    # Zero in ISO files; QuickTime stores the component type ("mhlr", "dhlr") here.
    pre_defined: int = _field(0, size=32)
    handler_type: bytes = _field(bytes(4), size=8, length=4, string=True)
    reserved: list[int] = _field(factory=lambda: [0, 0, 0], size=32, length=3, const=0)
    name: str = _field("", string=True)

    def on_read_field(self, name: str, reader: BinaryIO, left_bits: int, ctx: Context) -> tuple[int, bool]:
        if name != "name":
            return 0, False
        size = left_bits // 8
        if size == 0:
            self.name = ""
            return 0, True
        if _remaining(reader) < size:
            raise ValueError("not enough bits")
        buf = reader.read(size)
        if len(buf) < size:
            raise EOFError(f"expected {size} bytes, got {len(buf)}")
        plen = buf[0]
        if self.pre_defined != 0 and size >= 2 and size == (plen + 1) & 0xFF:
            self.name = _decode(buf[1 : plen + 1])
        else:
            self.name = _decode(buf.split(b"\x00", 1)[0])
        return left_bits, True


@dataclass(kw_only=True)
class Mdat(Box):
    box_type: ClassVar[BoxType] = str_to_box_type("mdat")
    data: bytes = _field(b"", size=8)


@dataclass(kw_only=True)
class Mdia(Box):
    box_type: ClassVar[BoxType] = str_to_box_type("mdia")


@dataclass(kw_only=True)
class Meta(FullBox):
    box_type: ClassVar[BoxType] = str_to_box_type("meta")

    def before_unmarshal(self, stream: BinaryIO, size: int, ctx: Context) -> tuple[int, bool]:
        """Detect the QuickTime layout, which has no version and flags."""
        head = stream.read(4)
        if len(head) < 4:
            raise EOFError(f"expected 4 bytes, got {len(head)}")
        stream.seek(-len(head), io.SEEK_CUR)
        if any(head):
            self.version = 0
            self.flags = 0
            return 0, True
        return 0, False


@dataclass(kw_only=True)
class Mfra(Box):
    box_type: ClassVar[BoxType] = str_to_box_type("mfra")


@dataclass(kw_only=True)
class Minf(Box):
    box_type: ClassVar[BoxType] = str_to_box_type("minf")


@dataclass(kw_only=True)
class Moof(Box):
    box_type: ClassVar[BoxType] = str_to_box_type("moof")


@dataclass(kw_only=True)
class Moov(Box):
    box_type: ClassVar[BoxType] = str_to_box_type("moov")


@dataclass(kw_only=True)
class Mvex(Box):
    box_type: ClassVar[BoxType] = str_to_box_type("mvex")


@dataclass(kw_only=True)
class Schi(Box):
    box_type: ClassVar[BoxType] = str_to_box_type("schi")


@dataclass(kw_only=True)
class Sinf(Box):
    box_type: ClassVar[BoxType] = str_to_box_type("sinf")


@dataclass(kw_only=True)
class Stbl(Box):
    box_type: ClassVar[BoxType] = str_to_box_type("stbl")


@dataclass(kw_only=True)
class Stsd(FullBox):
    box_type: ClassVar[BoxType] = str_to_box_type("stsd")
    entry_count: int = _field(0, size=32)


@dataclass(kw_only=True)
class Traf(Box):
    box_type: ClassVar[BoxType] = str_to_box_type("traf")


@dataclass(kw_only=True)
class Trak(Box):
    box_type: ClassVar[BoxType] = str_to_box_type("trak")


@dataclass(kw_only=True)
class Udta(Box):
    box_type: ClassVar[BoxType] = str_to_box_type("udta")


@dataclass(kw_only=True)
class Wave(Box):
    """QuickTime wave box."""

    box_type: ClassVar[BoxType] = str_to_box_type("wave")


def is_under_udta(ctx: Context) -> bool:
    return ctx.under_udta


for _box_class in (
    Dinf, Edts, Free, Skip, Frma, Ftyp, Styp, Mdat, Mdia, Mfra, Minf,
    Moof, Moov, Mvex, Schi, Sinf, Stbl, Traf, Trak, Udta, Wave,
):
    register_box(_box_class)

for _box_class in (Dref, Url, Urn, Hdlr, Meta, Stsd):
    register_box(_box_class, (0,))
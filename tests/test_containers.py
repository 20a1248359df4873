import io

import pytest

from mp4boxes.box import Context, find_box_def, is_supported, new_box, str_to_box_type
from mp4boxes.containers import (
    BRAND_ISO2,
    BRAND_ISOM,
    BRAND_MP41,
    URL_SELF_CONTAINED,
    CompatibleBrandElem,
    Free,
    Ftyp,
    Hdlr,
    Meta,
    Moov,
    Skip,
    Url,
    is_under_udta,
)


@pytest.mark.parametrize(
    "code",
    [
        "dinf", "dref", "url ", "urn ", "edts", "free", "skip", "frma", "ftyp",
        "styp", "hdlr", "mdat", "mdia", "meta", "mfra", "minf", "moof", "moov",
        "mvex", "schi", "sinf", "stbl", "stsd", "traf", "trak", "udta", "wave",
    ],
)
def test_registered_box_types(code):
    box_type = str_to_box_type(code)
    assert is_supported(box_type, Context()) is True
    assert new_box(box_type, Context()).box_type == box_type


@pytest.mark.parametrize("code", ["dref", "url ", "urn ", "hdlr", "meta", "stsd"])
def test_full_boxes_support_version_zero(code):
    assert find_box_def(str_to_box_type(code), Context()).versions == (0,)


def test_new_box_builds_empty_instance():
    free = new_box(str_to_box_type("free"), Context())
    assert free == Free()
    assert free.data == b""
    assert new_box(str_to_box_type("moov")) == Moov()


def test_free_and_skip_are_distinct():
    assert Free.box_type == str_to_box_type("free")
    assert Skip.box_type == str_to_box_type("skip")
    assert not (Free(data=b"x") == Skip(data=b"x"))


def test_hdlr_reads_pascal_string_when_predefined_is_set():
    hdlr = Hdlr(pre_defined=int.from_bytes(b"mhlr", "big"))
    reader = io.BytesIO(b"\x05Video")
    assert hdlr.on_read_field("name", reader, 48, Context()) == (48, True)
    assert hdlr.name == "Video"


def test_hdlr_reads_c_string():
    hdlr = Hdlr()
    reader = io.BytesIO(b"Video\x00xx")
    assert hdlr.on_read_field("name", reader, 64, Context()) == (64, True)
    assert hdlr.name == "Video"
    assert reader.tell() == 8


def test_hdlr_without_predefined_ignores_length_prefix():
    hdlr = Hdlr()
    hdlr.on_read_field("name", io.BytesIO(b"\x05Video"), 48, Context())
    assert hdlr.name == "\x05Video"


def test_hdlr_empty_name():
    hdlr = Hdlr(name="old")
    assert hdlr.on_read_field("name", io.BytesIO(b""), 0, Context()) == (0, True)
    assert hdlr.name == ""


def test_hdlr_not_enough_data():
    hdlr = Hdlr()
    with pytest.raises(ValueError):
        hdlr.on_read_field("name", io.BytesIO(b"abc"), 64, Context())


def test_hdlr_leaves_other_fields_alone():
    hdlr = Hdlr()
    assert hdlr.on_read_field("pre_defined", io.BytesIO(b"abcd"), 32, Context()) == (0, False)


def test_ftyp_add_and_has_brand():
    ftyp = Ftyp(major_brand=BRAND_ISOM)
    ftyp.add_compatible_brand(BRAND_ISOM)
    ftyp.add_compatible_brand(BRAND_ISO2)
    ftyp.add_compatible_brand(BRAND_ISOM)
    assert [e.compatible_brand for e in ftyp.compatible_brands] == [BRAND_ISOM, BRAND_ISO2]
    assert ftyp.has_compatible_brand(BRAND_ISO2) is True
    assert ftyp.has_compatible_brand(BRAND_MP41) is False


def test_ftyp_remove_moves_last_brand_into_place():
    ftyp = Ftyp(
        compatible_brands=[
            CompatibleBrandElem(compatible_brand=BRAND_ISOM),
            CompatibleBrandElem(compatible_brand=BRAND_ISO2),
            CompatibleBrandElem(compatible_brand=BRAND_MP41),
        ]
    )
    ftyp.remove_compatible_brand(BRAND_ISOM)
    assert [e.compatible_brand for e in ftyp.compatible_brands] == [BRAND_MP41, BRAND_ISO2]
    assert ftyp.has_compatible_brand(BRAND_ISOM) is False


def test_ftyp_remove_every_duplicate():
    ftyp = Ftyp(
        compatible_brands=[
            CompatibleBrandElem(compatible_brand=BRAND_ISOM),
            CompatibleBrandElem(compatible_brand=BRAND_ISOM),
        ]
    )
    ftyp.remove_compatible_brand(BRAND_ISOM)
    assert ftyp.compatible_brands == []


def test_meta_detects_quicktime_layout():
    meta = Meta(version=1, flags=5)
    stream = io.BytesIO(b"\x00\x00\x00\x10hdlr")
    assert meta.before_unmarshal(stream, 8, Context()) == (0, True)
    assert meta.version == 0
    assert meta.flags == 0
    assert stream.tell() == 0


def test_meta_keeps_iso_layout():
    meta = Meta()
    stream = io.BytesIO(bytes(8))
    assert meta.before_unmarshal(stream, 8, Context()) == (0, False)
    assert stream.tell() == 0


def test_meta_short_stream():
    with pytest.raises(EOFError):
        Meta().before_unmarshal(io.BytesIO(b"\x00\x01"), 2, Context())


def test_is_under_udta():
    assert is_under_udta(Context(under_udta=True)) is True
    assert is_under_udta(Context()) is False


def test_url_self_contained_flag():
    url = Url()
    assert url.check_flag(URL_SELF_CONTAINED) is False
    url.add_flag(URL_SELF_CONTAINED)
    assert url.check_flag(URL_SELF_CONTAINED) is True
    assert url.flags == URL_SELF_CONTAINED
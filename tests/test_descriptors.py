import pytest

from mp4boxes.box import Context, is_supported, new_box, str_to_box_type
from mp4boxes.descriptors import (
    DEC_SPECIFIC_INFO_TAG,
    DECODER_CONFIG_DESCR_TAG,
    ES_DESCR_TAG,
    SL_CONFIG_DESCR_TAG,
    Descriptor,
    ESDescriptor,
    Esds,
)


@pytest.mark.parametrize(
    "tag, expected",
    [
        (ES_DESCR_TAG, "ESDescr"),
        (DECODER_CONFIG_DESCR_TAG, "DecoderConfigDescr"),
        (DEC_SPECIFIC_INFO_TAG, "DecSpecificInfo"),
        (SL_CONFIG_DESCR_TAG, "SLConfigDescr"),
    ],
)
def test_tag_names(tag, expected):
    assert Descriptor(tag=tag).stringify_field("tag", "", 0, Context()) == expected


def test_unknown_tag_not_overridden():
    assert Descriptor(tag=0x10).stringify_field("tag", "", 0, Context()) is None


def test_descriptor_options_follow_tag():
    ctx = Context()
    es = Descriptor(tag=ES_DESCR_TAG, size=0x1234567)
    assert es.is_opt_field_enabled("es_descriptor", ctx)
    assert not es.is_opt_field_enabled("data", ctx)
    dc = Descriptor(tag=DECODER_CONFIG_DESCR_TAG)
    assert dc.is_opt_field_enabled("decoder_config_descriptor", ctx)
    assert not dc.is_opt_field_enabled("es_descriptor", ctx)
    info = Descriptor(tag=DEC_SPECIFIC_INFO_TAG, size=3, data=b"\x11\x22\x33")
    assert info.is_opt_field_enabled("data", ctx)
    assert info.field_length("data", ctx) == 3


def test_descriptor_bad_length_field():
    with pytest.raises(ValueError):
        Descriptor().field_length("tag", Context())


def test_es_descriptor_options():
    ctx = Context()
    with_dep = ESDescriptor(stream_dependence_flag=True, ocr_stream_flag=True)
    assert with_dep.is_opt_field_enabled("depends_on_es_id", ctx)
    assert with_dep.is_opt_field_enabled("ocr_es_id", ctx)
    assert not with_dep.is_opt_field_enabled("url_string", ctx)
    with_url = ESDescriptor(url_flag=True, url_length=11, url_string=b"http://hoge")
    assert with_url.is_opt_field_enabled("url_length", ctx)
    assert with_url.field_length("url_string", ctx) == 11
    with pytest.raises(ValueError):
        with_url.field_length("es_id", ctx)


def test_esds_registered():
    esds_type = str_to_box_type("esds")
    assert is_supported(esds_type, Context())
    box = new_box(esds_type, Context())
    assert isinstance(box, Esds)
    assert box.descriptors == []
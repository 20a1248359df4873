import pytest

from mp4boxes.box import Context, is_supported, new_box, str_to_box_type
from mp4boxes.metadata import (
    Data,
    Key,
    Keys,
    StringData,
    Udta3GppString,
    is_ilst_meta_box_type,
)


@pytest.mark.parametrize(
    "data_type, expected",
    [
        (0, "BINARY"),
        (1, "UTF8"),
        (2, "UTF16"),
        (3, "MAC_STR"),
        (14, "JPEG"),
        (21, "INT"),
        (22, "FLOAT32"),
        (23, "FLOAT64"),
    ],
)
def test_data_type_names(data_type, expected):
    data = Data(data_type=data_type, data_lang=0x12345678, data=b"foo")
    assert data.stringify_field("data_type", "", 0, Context()) == expected


def test_data_utf8_is_quoted():
    data = Data(data_type=1, data_lang=0x12345678, data=b"foo")
    assert data.stringify_field("data", "", 0, Context()) == '"foo"'


def test_data_utf8_escapes_unprintables():
    data = Data(data_type=1, data_lang=0x12345678, data=b"\x00foo")
    assert data.stringify_field("data", "", 0, Context()) == '".foo"'


def test_data_binary_is_not_overridden():
    data = Data(data_type=0, data=b"foo")
    assert data.stringify_field("data", "", 0, Context()) is None


def test_string_data_escapes():
    ctx = Context(under_ilst_free_meta=True)
    box = new_box(str_to_box_type("mean"), ctx)
    assert isinstance(box, StringData)
    box.data = b"\x00foo"
    assert box.stringify_field("data", "", 0, ctx) == '".foo"'


def test_key_lengths_and_strings():
    key = Key(key_size=27, key_namespace=b"mdta", key_value=b"com.android.version")
    assert key.field_length("key_value", Context()) == len(b"com.android.version")
    assert key.stringify_field("key_namespace", "", 0, Context()) == '"mdta"'
    assert key.stringify_field("key_value", "", 0, Context()) == '"com.android.version"'
    assert key.stringify_field("key_size", "", 0, Context()) is None


def test_key_bad_field():
    with pytest.raises(ValueError):
        Key().field_length("key_size", Context())


def test_keys_entry_count():
    keys = Keys(entry_count=2)
    assert keys.field_length("entries", Context()) == 2
    with pytest.raises(ValueError):
        keys.field_length("other", Context())


def test_ilst_meta_box_types():
    assert is_ilst_meta_box_type(str_to_box_type("covr"))
    assert is_ilst_meta_box_type(str_to_box_type("----"))
    assert not is_ilst_meta_box_type(str_to_box_type("moov"))


def test_data_needs_ilst_meta_context():
    data_type = str_to_box_type("data")
    assert is_supported(data_type, Context(under_ilst_meta=True))
    assert not is_supported(data_type, Context())


def test_meta_container_context():
    free = str_to_box_type("----")
    assert is_supported(free, Context(under_ilst=True))
    assert not is_supported(free, Context(under_ilst=True, under_ilst_meta=True))


def test_udta_string_registration_and_flags():
    ctx = Context(under_udta=True)
    titl = str_to_box_type("titl")
    assert is_supported(titl, ctx)
    assert not is_supported(titl, Context())
    box = new_box(titl, ctx)
    assert isinstance(box, Udta3GppString)
    box.add_flag(0x000001)
    assert box.check_flag(0x000001)
    box.remove_flag(0x000001)
    assert not box.check_flag(0x000001)
import io

import pytest

from mp4boxes.box import Context, find_box_def, new_box, str_to_box_type
from mp4boxes.headers import Cslg, Elst, ElstEntry, Emsg, Mdhd, Mehd, Mvhd, Smhd, Tkhd, Vmhd


@pytest.mark.parametrize("cls", [Mvhd, Tkhd, Mdhd])
def test_versioned_times(cls):
    box = cls(
        creation_time_v0=11,
        modification_time_v0=12,
        duration_v0=13,
        creation_time_v1=1 << 40,
        modification_time_v1=(1 << 40) + 1,
        duration_v1=(1 << 40) + 2,
    )
    assert (box.creation_time(), box.modification_time(), box.duration()) == (11, 12, 13)
    box.version = 1
    assert box.creation_time() == 1 << 40
    assert box.modification_time() == (1 << 40) + 1
    assert box.duration() == (1 << 40) + 2
    box.version = 2
    assert (box.creation_time(), box.modification_time(), box.duration()) == (0, 0, 0)


def test_mvhd_rate():
    box = Mvhd(rate_fixed=0x00010000)
    assert box.rate() == 1.0
    assert box.rate_int() == int(box.rate())


def test_mvhd_negative_rate_int_is_floor():
    box = Mvhd(rate_fixed=-0x00018000)
    assert box.rate() == -(0x00018000 / 65536)
    assert box.rate_int() < box.rate()


def test_tkhd_width_height():
    box = Tkhd(width_fixed=(1920 << 16) | 0x8000, height_fixed=1080 << 16)
    assert box.width_int() == 1920
    assert box.height_int() == 1080
    assert box.height() == 1080
    assert box.width() > 1920


def test_mehd_fragment_duration():
    box = Mehd(fragment_duration_v0=500, fragment_duration_v1=1 << 33)
    assert box.fragment_duration() == 500
    box.version = 1
    assert box.fragment_duration() == 1 << 33


def test_cslg_accessors_by_version():
    box = Cslg(
        composition_to_dts_shift_v0=-5,
        least_decode_to_display_delta_v0=-6,
        greatest_decode_to_display_delta_v0=7,
        composition_start_time_v0=8,
        composition_end_time_v0=9,
        composition_to_dts_shift_v1=-(1 << 40),
        composition_end_time_v1=1 << 41,
    )
    assert box.composition_to_dts_shift() == -5
    assert box.least_decode_to_display_delta() == -6
    assert box.greatest_decode_to_display_delta() == 7
    assert box.composition_start_time() == 8
    assert box.composition_end_time() == 9
    box.version = 1
    assert box.composition_to_dts_shift() == -(1 << 40)
    assert box.composition_end_time() == 1 << 41
    assert box.composition_start_time() == 0


def test_smhd_balance():
    box = Smhd(balance=-0x0180)
    assert box.balance_value() * 256 == box.balance
    assert box.balance_int() == box.balance >> 8


def test_elst_field_size_by_version():
    box = Elst()
    assert box.field_size("entries", Context()) == 96
    box.version = 1
    assert box.field_size("entries", Context()) == 160


def test_elst_field_size_errors():
    box = Elst(version=2)
    with pytest.raises(ValueError):
        box.field_size("entries", Context())
    with pytest.raises(ValueError):
        Elst().field_size("other", Context())


def test_elst_field_length_and_entries():
    entries = [
        ElstEntry(segment_duration_v0=100, media_time_v0=-1, segment_duration_v1=1 << 35, media_time_v1=-(1 << 35)),
        ElstEntry(segment_duration_v0=200, media_time_v0=40),
    ]
    box = Elst(entry_count=2, entries=entries)
    assert box.field_length("entries", Context()) == 2
    assert box.segment_duration(0) == 100
    assert box.media_time(0) == -1
    assert box.media_time(1) == 40
    box.version = 1
    assert box.segment_duration(0) == 1 << 35
    assert box.media_time(0) == -(1 << 35)
    with pytest.raises(ValueError):
        box.field_length("nope", Context())


def test_emsg_version0_does_not_override():
    box = Emsg(scheme_id_uri="urn:x")
    writer = io.BytesIO()
    assert box.on_write_field("scheme_id_uri", writer, Context()) == (0, False)
    assert box.on_write_field("message_data", writer, Context()) == (0, False)
    assert writer.getvalue() == b""
    assert box.on_read_field("message_data", io.BytesIO(b"a\x00b\x00"), 32, Context()) == (0, False)
    assert box.scheme_id_uri == "urn:x"


def test_emsg_version1_skips_leading_strings():
    box = Emsg(version=1)
    assert box.on_write_field("scheme_id_uri", io.BytesIO(), Context()) == (0, True)
    assert box.on_read_field("value", io.BytesIO(), 0, Context()) == (0, True)
    assert box.on_read_field("timescale", io.BytesIO(), 0, Context()) == (0, False)


def test_emsg_version1_round_trip():
    src = Emsg(version=1, scheme_id_uri="urn:test", value="1", message_data=b"xyz")
    writer = io.BytesIO()
    bits, override = src.on_write_field("message_data", writer, Context())
    assert override is False
    assert writer.getvalue() == b"urn:test\x00" + b"1\x00"
    assert bits == len(writer.getvalue()) * 8

    dst = Emsg(version=1)
    reader = io.BytesIO(writer.getvalue() + b"xyz")
    read_bits, read_override = dst.on_read_field("message_data", reader, 1000, Context())
    assert (read_bits, read_override) == (bits, False)
    assert dst.scheme_id_uri == "urn:test"
    assert dst.value == "1"
    assert reader.read() == b"xyz"


def test_emsg_unterminated_string():
    box = Emsg(version=1)
    with pytest.raises(EOFError):
        box.on_read_field("message_data", io.BytesIO(b"urn:no-terminator"), 200, Context())


@pytest.mark.parametrize(
    "code,cls,versions",
    [
        ("mvhd", Mvhd, (0, 1)),
        ("tkhd", Tkhd, (0, 1)),
        ("mdhd", Mdhd, (0, 1)),
        ("mehd", Mehd, (0, 1)),
        ("cslg", Cslg, (0, 1)),
        ("elst", Elst, (0, 1)),
        ("emsg", Emsg, (0, 1)),
        ("smhd", Smhd, (0,)),
        ("vmhd", Vmhd, (0,)),
    ],
)
def test_registered(code, cls, versions):
    box_type = str_to_box_type(code)
    definition = find_box_def(box_type)
    assert definition.box_class is cls
    assert definition.versions == versions
    assert type(new_box(box_type)) is cls
    assert cls.box_type == box_type


def test_vmhd_defaults_are_independent():
    first = Vmhd()
    second = Vmhd()
    first.opcolor[0] = 7
    assert second.opcolor == [0, 0, 0]
    assert len(first.opcolor) == 3
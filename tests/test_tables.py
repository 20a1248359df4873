import dataclasses

import pytest

from mp4boxes.box import Context, find_box_def, new_box, str_to_box_type
from mp4boxes.tables import (
    AlternativeStartupEntry,
    AlternativeStartupEntryL,
    Co64,
    Ctts,
    CttsEntry,
    Saio,
    Saiz,
    Sbgp,
    Sdtp,
    Sgpd,
    Stco,
    Stsc,
    Stss,
    Stsz,
    Stts,
    SttsEntry,
)

CTX = Context()


def _meta(obj, name):
    return next(f.metadata for f in dataclasses.fields(obj) if f.name == name)


@pytest.mark.parametrize(
    "box, name",
    [
        (Stts(entry_count=7), "entries"),
        (Stsc(entry_count=7), "entries"),
        (Stco(entry_count=7), "chunk_offset"),
        (Co64(entry_count=7), "chunk_offset"),
        (Ctts(entry_count=7), "entries"),
        (Stss(entry_count=7), "sample_number"),
        (Sbgp(entry_count=7), "entries"),
        (Saio(entry_count=7), "offset_v0"),
        (Saio(entry_count=7), "offset_v1"),
    ],
)
def test_field_length_follows_entry_count(box, name):
    assert box.field_length(name, CTX) == box.entry_count


@pytest.mark.parametrize("cls", [Stts, Stsc, Stco, Co64, Ctts, Stss, Sbgp, Saio, Stsz, Saiz])
def test_field_length_rejects_unknown_name(cls):
    with pytest.raises(ValueError, match="invalid name of dynamic-length field"):
        cls().field_length("bogus", CTX)


def test_stsz_entry_size_length_depends_on_sample_size():
    assert Stsz(sample_size=0, sample_count=5).field_length("entry_size", CTX) == 5
    assert Stsz(sample_size=1024, sample_count=5).field_length("entry_size", CTX) == 0


def test_ctts_sample_offset_by_version():
    entries = [CttsEntry(sample_count=1, sample_offset_v0=100, sample_offset_v1=-100)]
    assert Ctts(version=0, entries=entries).sample_offset(0) == 100
    assert Ctts(version=1, entries=entries).sample_offset(0) == -100
    assert Ctts(version=2, entries=entries).sample_offset(0) == 0


def test_saio_offset_by_version():
    box = Saio(entry_count=1, offset_v0=[0x1234], offset_v1=[0x123456789A])
    box.version = 0
    assert box.offset(0) == 0x1234
    box.version = 1
    assert box.offset(0) == 0x123456789A
    box.version = 2
    assert box.offset(0) == 0


def test_saiz_sample_info_size_optional():
    assert Saiz(default_sample_info_size=0).is_opt_field_enabled("sample_info_size", CTX)
    assert not Saiz(default_sample_info_size=8).is_opt_field_enabled("sample_info_size", CTX)
    assert not Saiz().is_opt_field_enabled("other", CTX)
    assert Saiz(sample_count=3).field_length("sample_info_size", CTX) == 3


@pytest.mark.parametrize("grouping", [b"roll", b"prol"])
def test_sgpd_roll_distances_with_default_length(grouping):
    box = Sgpd(version=1, grouping_type=grouping, default_length=2)
    assert box.is_opt_field_enabled("roll_distances", CTX)
    assert not box.is_opt_field_enabled("roll_distances_l", CTX)
    assert not box.is_opt_field_enabled("unsupported", CTX)


def test_sgpd_without_default_length_uses_long_entries():
    box = Sgpd(version=1, grouping_type=b"rap ", default_length=0)
    assert box.is_opt_field_enabled("visual_random_access_entries_l", CTX)
    assert not box.is_opt_field_enabled("visual_random_access_entries", CTX)
    box = Sgpd(version=1, grouping_type=b"tele", default_length=0)
    assert box.is_opt_field_enabled("temporal_level_entries_l", CTX)
    assert not box.is_opt_field_enabled("temporal_level_entries", CTX)


def test_sgpd_version_2_ignores_default_length():
    box = Sgpd(version=2, grouping_type=b"alst", default_length=0)
    assert box.is_opt_field_enabled("alternative_startup_entries", CTX)
    assert not box.is_opt_field_enabled("alternative_startup_entries_l", CTX)


def test_sgpd_unknown_grouping_is_unsupported():
    box = Sgpd(version=1, grouping_type=b"xxxx", default_length=4)
    assert box.is_opt_field_enabled("unsupported", CTX)
    assert not any(
        box.is_opt_field_enabled(name, CTX)
        for name in ("roll_distances", "alternative_startup_entries", "temporal_level_entries")
    )
    assert not box.is_opt_field_enabled("no_such_field", CTX)


def test_sgpd_lengths_and_sizes():
    box = Sgpd(version=1, grouping_type=b"alst", default_length=4, entry_count=3)
    assert box.field_length("alternative_startup_entries", CTX) == 3
    assert box.field_length("temporal_level_entries_l", CTX) == 3
    assert box.field_length("unsupported", CTX) == 0
    assert box.field_size("alternative_startup_entries", CTX) == 4 * 8
    assert box.field_size("roll_distances", CTX) == 0


def test_alternative_startup_entries_dynamic_fields():
    entry = AlternativeStartupEntry(roll_count=2, sample_offset=[1, 2])
    assert entry.field_length("sample_offset", CTX) == 2
    assert entry.field_length("opts", CTX) == 0
    long_entry = AlternativeStartupEntryL(description_length=6)
    assert long_entry.field_size("alternative_startup_entry", CTX) == 6 * 8
    assert long_entry.field_size("description_length", CTX) == 0


def test_field_layout_fixed_by_format():
    stts = new_box(str_to_box_type("stts"), CTX)
    stsc = new_box(str_to_box_type("stsc"), CTX)
    co64 = new_box(str_to_box_type("co64"), CTX)
    entry = SttsEntry(sample_count=1, sample_delta=2)
    assert _meta(stts, "entries")["size"] == 64
    assert _meta(stsc, "entries")["size"] == 96
    assert _meta(co64, "chunk_offset")["size"] == 64
    assert _meta(entry, "sample_delta")["size"] == 32
    assert entry.sample_delta == 2


@pytest.mark.parametrize(
    "code, cls, versions",
    [
        ("stts", Stts, (0,)),
        ("stsc", Stsc, (0,)),
        ("stco", Stco, (0,)),
        ("co64", Co64, (0,)),
        ("ctts", Ctts, (0, 1)),
        ("stsz", Stsz, (0,)),
        ("stss", Stss, (0,)),
        ("sdtp", Sdtp, (0,)),
        ("sbgp", Sbgp, (0, 1)),
        ("sgpd", Sgpd, (1, 2)),
        ("saio", Saio, (0, 1)),
        ("saiz", Saiz, (0,)),
    ],
)
def test_registered(code, cls, versions):
    box_type = str_to_box_type(code)
    definition = find_box_def(box_type, CTX)
    assert definition.box_class is cls
    assert definition.versions == versions
    assert isinstance(new_box(box_type, CTX), cls)
    assert cls.box_type == box_type


def test_new_boxes_start_empty():
    assert Sdtp().samples == []
    assert Stts().entries == []
    assert Sgpd().unsupported == b""
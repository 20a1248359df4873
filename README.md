# mp4boxes

Box definitions for the ISO base media file format (MP4, ISO/IEC 14496-12)
and related specifications, a registry that maps four-character box types to
those definitions, and reading and writing of box headers.

## Modules

- `mp4boxes.box`: `BoxType`, `str_to_box_type`, `Context`, `BoxInfo`,
  `read_box_info`, `write_box_info`, the base classes `CustomFieldObject`,
  `Box`, `FullBox` and `AnyTypeBox`, and the registry functions
  `register_box`, `find_box_def`, `is_supported` and `new_box`.
- `mp4boxes.containers`: `ftyp`, `styp`, `moov`, `trak`, `mdia`, `minf`,
  `stbl`, `stsd`, `hdlr`, `meta`, `mdat`, `free`/`skip`, `dinf`, `dref`,
  `url `, `urn `, `edts`, `frma`, `moof`, `traf`, `mfra`, `mvex`, `schi`,
  `sinf`, `udta`, `wave`.
- `mp4boxes.headers`: `mvhd`, `tkhd`, `mdhd`, `mehd`, `cslg`, `smhd`, `vmhd`,
  `elst`, `emsg`.
- `mp4boxes.tables`: `stts`, `stsc`, `stco`, `co64`, `ctts`, `stsz`, `stss`,
  `sdtp`, `sbgp`, `sgpd`, `saio`, `saiz`.
- `mp4boxes.fragments`: `trun`, `tfhd`, `tfdt`, `tfra`, `trex`, `trep`,
  `mfhd`, `mfro`, `sidx`, `schm`, `btrt`, `fiel`, `colr`.
- `mp4boxes.sample_entries`: visual, audio and subtitle sample entries
  (`mp4v`, `avc1`, `encv`, `hev1`, `hvc1`, `mp4a`, `enca`, `stpp`, `sbtt`),
  `avcC`, `pasp` and `hvcC`.
- `mp4boxes.codecs`: `av1C`, `dac3`, `dOps`, `pcmC`, `vpcC`, and the sample
  entry types `av01`, `vp08`, `vp09`, `ac-3`, `Opus`, `ipcm`, `fpcm`.
- `mp4boxes.metadata`: `ilst` and its item containers, `data`, `mean`/`name`,
  numbered items, `keys`, and 3GPP strings (`titl`, `auth`, ...) under `udta`.
- `mp4boxes.descriptors`: `esds` and its descriptors.
- `mp4boxes.webvtt`: the WebVTT sample entry, configuration and cue boxes.
- `mp4boxes.protection`: `pssh` and `tenc`.

A box type is registered when the module defining it is imported.

## Reading a box header

```python
import io
from mp4boxes.box import read_box_info

stream = io.BytesIO(b"\x00\x00\x00\x10ftypisom\x00\x00\x02\x00")
info = read_box_info(stream)
print(info.box_type.code, info.size, info.header_size)  # b'ftyp' 16 8
info.seek_to_payload(stream)
```

A size field of 1 is followed by a 64-bit size (header size 16). A size
field of 0 means the box runs to the end of the stream: `extend_to_eof` is
set and `size` is computed from the stream's length. A short header raises
`EOFError`; a resulting size of zero raises `ValueError`.

## Writing a box header

```python
import io
from mp4boxes.box import BoxInfo, str_to_box_type, write_box_info

out = io.BytesIO()
written = write_box_info(
    out, BoxInfo(size=0x12345, header_size=8, box_type=str_to_box_type("free"))
)
```

The header is written at the current position; `written.offset` is that
position. A size that does not fit in 32 bits, or an info whose
`header_size` is 16, is written as a 16-byte header, and the returned
`BoxInfo` reports the recalculated size and header size.

## The registry

```python
import mp4boxes.containers
import mp4boxes.metadata
from mp4boxes.box import Context, is_supported, new_box, str_to_box_type

ftyp = new_box(str_to_box_type("ftyp"))
ftyp.add_compatible_brand(b"isom")

data = str_to_box_type("data")
is_supported(data)                              # False
is_supported(data, Context(under_ilst_meta=True))  # True
```

`new_box` raises `LookupError` for a type with no definition accepting the
context. Boxes of an `AnyTypeBox` class get the requested type set on the
instance.

## Box classes

Each box is a dataclass. The metadata of each field (see
`dataclasses.fields`) describes its layout: `size` in bits, `length` of an
array, and markers such as `ver`/`nver` (present only for a version),
`opt` (present only with a flag, or `"dynamic"`), `const`, `string`,
`signed`, `hex`, `dec`, `uuid` and `varint`. Where the layout depends on
other values, the box answers through `field_size`, `field_length`,
`is_opt_field_enabled`, `before_unmarshal`, `on_read_field` and
`on_write_field`, and `stringify_field` gives a custom text rendering.

Boxes also offer accessors that pick the version-dependent field, such as
`Mvhd.duration()`, `Tkhd.width()`, `Elst.segment_duration(index)` or
`Sidx.first_offset()`.

```python
from mp4boxes.box import FullBox

box = FullBox()
box.add_flag(0x000001)
assert box.check_flag(0x000001)
box.remove_flag(0x000001)
```

## What it does not do

The package describes box payloads but does not encode or decode them:
there is no function that marshals a box to bytes, unmarshals bytes into a
box, renders a whole box as text, or walks the box tree of a file. Only box
headers are read and written.

## Running the tests

```
pip install -e ".[test]"
pytest
```
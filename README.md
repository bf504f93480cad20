# tiffnotes

A small, dependency-free library for reading TIFF-encoded data. It gives you
the Image File Directories (IFDs) and their tags, with typed access to each
tag's values. It can also decode the Canon and Nikon (version 3) maker notes
that cameras embed in EXIF data.

## Installation

```
pip install tiffnotes
```

## Decoding a TIFF structure

```python
from tiffnotes.tiff import decode

with open("photo.tif", "rb") as fh:
    tif = decode(fh)

print(tif.order)            # ByteOrder.LITTLE or ByteOrder.BIG
for directory in tif.dirs:  # IFD0, IFD1, ...
    for tag in directory.tags:
        print(hex(tag.id), tag.type, tag.count, tag)
```

`decode` reads the rest of the stream and treats its first byte as the start
of the TIFF data. Both the standard magic number and the Olympus variants are
accepted. It raises `tiffnotes.tag.TiffError` when the data has no valid
byte-order mark or magic number, when an IFD offset is negative or points past
the end of the data, when the IFD chain loops back on itself, or when a
directory or tag cannot be read.

To read a single directory or tag from a seekable binary stream:

- `tiffnotes.tiff.decode_dir(stream, order)` returns a `(Dir, next_offset)`
  pair; `next_offset` is 0 when no IFD follows.
- `tiffnotes.tag.decode_tag(stream, order)` returns one `Tag` and leaves the
  stream just after the 12-byte entry.

In both, value offsets are taken relative to the start of the stream, and
`order` is a `tiffnotes.tag.ByteOrder`.

`decode_tag` raises `TiffError` for a truncated entry, a count of
`0xFFFFFFFF`, an unknown data type or a zero count (both give a zero-length
value), or a value size that overflows 32 bits. It raises
`ShortReadTagValueError` (a `TiffError`) when an out-of-line value runs past
the end of the data.

## Working with tags

A `Tag` has the fields `id`, `type` (a `DataType`), `count`, `val` (the raw
value bytes), `val_offset` (0 when the value fit inside the entry) and
`order`. Its `format` property tells you which accessor fits its data type:

| `tag.format`       | Accessor                                                            |
|--------------------|---------------------------------------------------------------------|
| `Format.INT`       | `tag.int_val(i)`                                                    |
| `Format.FLOAT`     | `tag.float_val(i)`                                                  |
| `Format.RATIONAL`  | `tag.rat(i)` (a `Fraction`) or `tag.rat2(i)` (numerator, denominator) |
| `Format.STRING`    | `tag.string_val()` (text up to the first NUL byte)                  |

`Format.UNDEFINED` and `Format.OTHER` tags have no typed accessor; use `val`.
An accessor that does not match the tag's format raises `WrongFormatError`.
An index that is out of range raises `IndexError`, and `rat` raises
`ZeroDivisionError` for a zero denominator.

`tag.to_json()` returns the tag's values as JSON text, for example
`["72/1"]` or `[1,2,3]`; string and undefined tags give their printable bytes
in quotes. `str(tag)` gives the same text but drops the brackets when the tag
holds a single value. `str()` of a `Dir` or `Tiff` lists their tags in the
same way.

## Maker notes

```python
from tiffnotes.makernote import parse_canon, parse_nikon_v3

canon_tags = parse_canon(maker_note_tag, make_tag, tif.order)
nikon_tags = parse_nikon_v3(maker_note_tag)
```

Each parser returns a dict from field names, such as `"FirmwareVersion"` or
`"Nikon.ShotInfo"`, to decoded tags; when a tag id occurs twice, the later one
wins. Tags whose ids are not known are left out. The tables used are
`CANON_FIELDS` and `NIKON3_FIELDS`.

- `parse_canon` returns an empty dict when either tag is `None` or the make is
  not exactly the string `"Canon"`. The Canon note is a bare IFD whose offsets
  refer to the enclosing TIFF data, so `maker_note_tag.val_offset` must be the
  note's offset in that data (as `decode_tag` records it).
- `parse_nikon_v3` returns an empty dict when the tag is `None` or its value
  does not start with `b"Nikon\x00"`. The TIFF structure after the 10-byte
  header is decoded on its own; a note with no IFD raises `TiffError`.

## What this package does not do

It reads TIFF structures only. It does not find the EXIF block inside JPEG or
other container files, does not name the standard EXIF fields, and does not
follow EXIF, GPS or interoperability sub-IFD pointers for you: you pick the
maker note and make tags out yourself. It cannot write or modify TIFF data,
and it has no command-line tool.
import io
import struct

import pytest

from tiffnotes.tag import ByteOrder, TiffError
from tiffnotes.tiff import Dir, Tiff, decode, decode_dir


def blob():
    return bytes.fromhex(
        "49492A000800000002001A0105000100"
        "00002600000069870400010000001102"
        "0000000000004800000001000000"
    )


def test_decode_blob():
    tif = decode(io.BytesIO(blob()))
    assert tif.order is ByteOrder.LITTLE
    assert len(tif.dirs) == 1
    tags = tif.dirs[0].tags
    assert [t.id for t in tags] == [0x011A, 0x8769]
    assert tags[0].rat2(0) == (72, 1)
    assert tags[1].int_val(0) == 529


def test_str_of_blob():
    tif = decode(io.BytesIO(blob()))
    assert str(tif) == 'Tiff{Dir{"72/1", 529, }, }'
    assert str(tif.dirs[0]) == 'Dir{"72/1", 529, }'


def test_decode_big_endian():
    data = b"MM\x00\x2a\x00\x00\x00\x08"
    data += b"\x00\x01" + struct.pack(">HHI", 0x0112, 3, 1) + b"\x00\x06\x00\x00"
    data += b"\x00\x00\x00\x00"
    tif = decode(io.BytesIO(data))
    assert tif.order is ByteOrder.BIG
    assert tif.dirs[0].tags[0].id == 0x0112
    assert tif.dirs[0].tags[0].int_val(0) == 6


def test_decode_two_dirs():
    header = b"II*\x00" + struct.pack("<i", 8)
    ifd0 = struct.pack("<h", 1) + struct.pack("<HHI", 1, 4, 1) + struct.pack("<I", 7)
    ifd0 += struct.pack("<i", 8 + len(ifd0) + 4)
    ifd1 = struct.pack("<h", 1) + struct.pack("<HHI", 2, 4, 1) + struct.pack("<I", 9)
    ifd1 += struct.pack("<i", 0)
    tif = decode(io.BytesIO(header + ifd0 + ifd1))
    assert len(tif.dirs) == 2
    assert tif.dirs[0].tags[0].int_val(0) == 7
    assert tif.dirs[1].tags[0].int_val(0) == 9


def test_olympus_marker_accepted():
    data = b"IIRO" + struct.pack("<i", 8) + struct.pack("<h", 0) + struct.pack("<i", 0)
    tif = decode(io.BytesIO(data))
    assert tif.dirs == [Dir([])]


def test_no_dirs_when_first_offset_zero():
    tif = decode(io.BytesIO(b"MM\x00\x2a\x00\x00\x00\x00"))
    assert tif == Tiff(dirs=[], order=ByteOrder.BIG)


def test_bad_byte_order():
    with pytest.raises(TiffError, match="byte order"):
        decode(io.BytesIO(b"XX*\x00\x08\x00\x00\x00"))


def test_bad_magic():
    with pytest.raises(TiffError, match="special tiff marker"):
        decode(io.BytesIO(b"II\x2b\x00\x08\x00\x00\x00"))


def test_missing_first_offset():
    with pytest.raises(TiffError, match="offset to first IFD"):
        decode(io.BytesIO(b"II*\x00\x08"))


def test_recursive_ifd():
    data = b"II*\x00\x08\x00\x00\x00" + b"\x00\x00" + b"\x08\x00\x00\x00"
    with pytest.raises(TiffError, match="recursive IFD"):
        decode(io.BytesIO(data))


def test_offset_after_eof():
    data = b"II*\x00" + struct.pack("<i", 100)
    with pytest.raises(TiffError, match="after EOF"):
        decode(io.BytesIO(data))


def test_negative_offset():
    data = b"II*\x00" + struct.pack("<i", -4)
    with pytest.raises(TiffError, match="seek to IFD failed"):
        decode(io.BytesIO(data))


def test_decode_dir_directly():
    data = struct.pack(">h", 1) + struct.pack(">HHI", 5, 3, 1) + b"\x00\x09\x00\x00"
    data += struct.pack(">i", 1234)
    directory, next_offset = decode_dir(io.BytesIO(data), ByteOrder.BIG)
    assert next_offset == 1234
    assert directory.tags[0].int_val(0) == 9


def test_decode_dir_truncated():
    data = struct.pack(">h", 0)
    with pytest.raises(TiffError, match="offset to next IFD"):
        decode_dir(io.BytesIO(data), ByteOrder.BIG)
    with pytest.raises(TiffError, match="IFD tag count"):
        decode_dir(io.BytesIO(b""), ByteOrder.BIG)
"""Decoding of TIFF structures: header and chains of image file directories."""

from __future__ import annotations

import io
import struct
from dataclasses import dataclass, field
from typing import BinaryIO

from .tag import ByteOrder, Tag, TiffError, _read_exact, decode_tag

_TIFF_MAGIC = 42
_OLYMPUS_MAGIC_1 = 20306  # MMOR or IIRO
_OLYMPUS_MAGIC_2 = 21330  # MMSR or IIRS
_MAGICS = frozenset({_TIFF_MAGIC, _OLYMPUS_MAGIC_1, _OLYMPUS_MAGIC_2})


@dataclass
class Dir:
    """The parsed content of one image file directory (IFD)."""

    tags: list[Tag] = field(default_factory=list)

    def __str__(self) -> str:
        return "Dir{" + "".join(f"{tag}, " for tag in self.tags) + "}"


@dataclass
class Tiff:
    """A decoded TIFF structure: its IFDs in order and its byte order."""

    dirs: list[Dir]
    order: ByteOrder

    def __str__(self) -> str:
        return "Tiff{" + "".join(f"{d}, " for d in self.dirs) + "}"


def decode_dir(stream: BinaryIO, order: ByteOrder) -> tuple[Dir, int]:
    """Decode the IFD at the stream's position.

    Returns the directory and the offset of the next IFD (0 if none).
    Tag value offsets are taken relative to the start of the stream.
    """
    try:
        raw = _read_exact(stream, 2, "tiff: failed to read IFD tag count")
    except TiffError:
        raise
    (tag_count,) = struct.unpack(order.value + "h", raw)

    directory = Dir([decode_tag(stream, order) for _ in range(tag_count)])

    raw = _read_exact(stream, 4, "tiff: failed to read offset to next IFD")
    (next_offset,) = struct.unpack(order.value + "i", raw)
    return directory, next_offset


def decode(stream: BinaryIO) -> Tiff:
    """Decode TIFF data whose first byte is the stream's current position."""
    try:
        data = stream.read()
    except OSError as exc:
        raise TiffError("tiff: could not read data") from exc
    buf = io.BytesIO(data)

    marker = buf.read(2)
    if marker == b"II":
        order = ByteOrder.LITTLE
    elif marker == b"MM":
        order = ByteOrder.BIG
    else:
        raise TiffError("tiff: could not read tiff byte order")

    raw = buf.read(2)
    if len(raw) < 2 or struct.unpack(order.value + "h", raw)[0] not in _MAGICS:
        raise TiffError("tiff: could not find special tiff marker")

    raw = buf.read(4)
    if len(raw) < 4:
        raise TiffError("tiff: could not read offset to first IFD")
    (offset,) = struct.unpack(order.value + "i", raw)

    dirs: list[Dir] = []
    seen = {offset}
    while offset != 0:
        if offset < 0:
            raise TiffError("tiff: seek to IFD failed")
        if offset >= len(data):
            raise TiffError("tiff: seek offset after EOF")
        buf.seek(offset)
        directory, offset = decode_dir(buf, order)
        if offset in seen:
            raise TiffError("tiff: recursive IFD")
        seen.add(offset)
        dirs.append(directory)

    return Tiff(dirs=dirs, order=order)
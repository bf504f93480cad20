"""Decoding of individual TIFF IFD entries (tags)."""

from __future__ import annotations

import enum
import struct
from dataclasses import dataclass, field
from decimal import Decimal
from fractions import Fraction
from typing import BinaryIO

_UINT32_MASK = 0xFFFFFFFF


class TiffError(Exception):
    """Raised when TIFF data cannot be decoded."""


class ShortReadTagValueError(TiffError):
    """Raised when a tag's out-of-line value extends past the end of the data."""

    def __init__(self) -> None:
        super().__init__("tiff: short read of tag value")


class WrongFormatError(TiffError):
    """Raised when a tag's value is requested in a format it does not hold."""

    def __init__(self, from_name: str, to_name: str) -> None:
        self.from_name = from_name
        self.to_name = to_name
        super().__init__(f"cannot convert tag type '{from_name}' into '{to_name}'")


class ByteOrder(enum.Enum):
    """Byte order of TIFF data; the value is the matching struct prefix."""

    LITTLE = "<"
    BIG = ">"

    def __str__(self) -> str:
        return "LittleEndian" if self is ByteOrder.LITTLE else "BigEndian"


class Format(enum.Enum):
    """The Python-side representation a tag's value is converted to."""

    INT = "int"
    FLOAT = "float"
    RATIONAL = "rational"
    STRING = "string"
    UNDEFINED = "undefined"
    OTHER = "other"


class DataType(enum.IntEnum):
    """The basic TIFF tag data types."""

    BYTE = 1
    ASCII = 2
    SHORT = 3
    LONG = 4
    RATIONAL = 5
    SBYTE = 6
    UNDEFINED = 7
    SSHORT = 8
    SLONG = 9
    SRATIONAL = 10
    FLOAT = 11
    DOUBLE = 12

    @property
    def type_name(self) -> str:
        return _TYPE_INFO[self][0]

    @property
    def size(self) -> int:
        return _TYPE_INFO[self][1]


# name, size in bytes, struct code of one element (None if not numeric)
_TYPE_INFO: dict[DataType, tuple[str, int, str | None]] = {
    DataType.BYTE: ("byte", 1, "B"),
    DataType.ASCII: ("ascii", 1, None),
    DataType.SHORT: ("short", 2, "H"),
    DataType.LONG: ("long", 4, "I"),
    DataType.RATIONAL: ("rational", 8, "I"),
    DataType.SBYTE: ("signed byte", 1, "b"),
    DataType.UNDEFINED: ("undefined", 1, None),
    DataType.SSHORT: ("signed short", 2, "h"),
    DataType.SLONG: ("signed long", 4, "i"),
    DataType.SRATIONAL: ("signed rational", 8, "i"),
    DataType.FLOAT: ("float", 4, "f"),
    DataType.DOUBLE: ("double", 8, "d"),
}

_FORMATS: dict[DataType, Format] = {
    DataType.BYTE: Format.INT,
    DataType.SHORT: Format.INT,
    DataType.LONG: Format.INT,
    DataType.SBYTE: Format.INT,
    DataType.SSHORT: Format.INT,
    DataType.SLONG: Format.INT,
    DataType.RATIONAL: Format.RATIONAL,
    DataType.SRATIONAL: Format.RATIONAL,
    DataType.FLOAT: Format.FLOAT,
    DataType.DOUBLE: Format.FLOAT,
    DataType.ASCII: Format.STRING,
    DataType.UNDEFINED: Format.UNDEFINED,
}


def _read_exact(stream: BinaryIO, size: int, context: str) -> bytes:
    """Read exactly ``size`` bytes or raise TiffError prefixed by ``context``."""
    if size == 0:
        return b""
    data = stream.read(size)
    if len(data) < size:
        reason = "EOF" if not data else "unexpected EOF"
        raise TiffError(f"{context}: {reason}")
    return data


def _read_number(stream: BinaryIO, order: ByteOrder, code: str, context: str) -> int:
    size = struct.calcsize(code)
    return struct.unpack(order.value + code, _read_exact(stream, size, context))[0]


def _format_float(value: float) -> str:
    """Format a float the way a shortest-representation %v formatter does."""
    if value != value:
        return "NaN"
    if value in (float("inf"), float("-inf")):
        return "+Inf" if value > 0 else "-Inf"
    dec = Decimal(repr(value)).normalize()
    sign, digits, exponent = dec.as_tuple()
    sci_exponent = len(digits) - 1 + exponent
    if digits == (0,):
        sci_exponent = 0
    if sci_exponent < -4 or sci_exponent >= 21:
        text = "".join(str(d) for d in digits)
        mantissa = text[0] + ("." + text[1:] if len(text) > 1 else "")
        exp_sign = "-" if sci_exponent < 0 else "+"
        return f"{'-' if sign else ''}{mantissa}e{exp_sign}{abs(sci_exponent):02d}"
    return f"{dec:f}"


def _null_string(raw: bytes) -> str:
    """Quote the printable bytes of ``raw``; empty quotes if not valid UTF-8."""
    kept = bytes(b for b in raw if chr(b).isprintable())
    try:
        return '"' + kept.decode("utf-8") + '"'
    except UnicodeDecodeError:
        return '""'


@dataclass
class Tag:
    """The parsed content of a TIFF IFD entry."""

    id: int
    type: DataType
    count: int
    val: bytes
    val_offset: int = 0
    order: ByteOrder = ByteOrder.LITTLE
    _int_vals: list[int] = field(init=False, repr=False, default_factory=list)
    _float_vals: list[float] = field(init=False, repr=False, default_factory=list)
    _rat_vals: list[tuple[int, int]] = field(init=False, repr=False, default_factory=list)
    _str_val: str = field(init=False, repr=False, default="")
    _format: Format = field(init=False, repr=False, default=Format.OTHER)

    def __post_init__(self) -> None:
        self._convert()

    def _convert(self) -> None:
        try:
            data_type = DataType(self.type)
        except ValueError:
            self._format = Format.OTHER
            return
        self.type = data_type
        code = _TYPE_INFO[data_type][2]
        prefix = self.order.value
        if data_type is DataType.ASCII:
            if self.val:
                self._str_val = self.val.split(b"\x00", 1)[0].decode(
                    "utf-8", "surrogateescape"
                )
        elif data_type in (DataType.RATIONAL, DataType.SRATIONAL):
            values = struct.unpack(f"{prefix}{2 * self.count}{code}", self.val)
            self._rat_vals = list(zip(values[0::2], values[1::2]))
        elif data_type in (DataType.FLOAT, DataType.DOUBLE):
            self._float_vals = [
                float(v) for v in struct.unpack(f"{prefix}{self.count}{code}", self.val)
            ]
        elif code is not None:
            self._int_vals = list(struct.unpack(f"{prefix}{self.count}{code}", self.val))
        self._format = _FORMATS[data_type]

    @property
    def format(self) -> Format:
        """Which accessor returns this tag's value properly typed."""
        return self._format

    def _type_error(self, target: Format) -> WrongFormatError:
        try:
            name = DataType(self.type).type_name
        except ValueError:
            name = ""
        return WrongFormatError(name, target.value)

    def rat(self, i: int) -> Fraction:
        """Return the i'th value as a Fraction."""
        num, den = self.rat2(i)
        return Fraction(num, den)

    def rat2(self, i: int) -> tuple[int, int]:
        """Return the i'th value as a (numerator, denominator) pair."""
        if self._format is not Format.RATIONAL:
            raise self._type_error(Format.RATIONAL)
        return self._rat_vals[i]

    def int_val(self, i: int) -> int:
        """Return the i'th value as an integer."""
        if self._format is not Format.INT:
            raise self._type_error(Format.INT)
        return self._int_vals[i]

    def float_val(self, i: int) -> float:
        """Return the i'th value as a float."""
        if self._format is not Format.FLOAT:
            raise self._type_error(Format.FLOAT)
        return self._float_vals[i]

    def string_val(self) -> str:
        """Return the value as a string, up to the first NUL byte."""
        if self._format is not Format.STRING:
            raise self._type_error(Format.STRING)
        return self._str_val

    def to_json(self) -> str:
        """Return the value encoded as JSON text."""
        if self._format in (Format.STRING, Format.UNDEFINED):
            return _null_string(self.val)
        if self._format is Format.OTHER:
            return f"unknown tag type '{int(self.type)}'"
        if self._format is Format.RATIONAL:
            items = [f'"{n}/{d}"' for n, d in self._rat_vals[: self.count]]
        elif self._format is Format.FLOAT:
            items = [_format_float(v) for v in self._float_vals[: self.count]]
        else:
            items = [str(v) for v in self._int_vals[: self.count]]
        return "[" + ",".join(items) + "]"

    def __str__(self) -> str:
        data = self.to_json()
        if self.count == 1:
            return data.strip("[]")
        return data


def decode_tag(stream: BinaryIO, order: ByteOrder) -> Tag:
    """Decode one IFD entry starting at the stream's current position.

    Out-of-line values are read at their offset from the start of the stream,
    and the stream is left positioned just after the 12-byte entry.
    """
    tag_id = _read_number(stream, order, "H", "tiff: tag id read failed")
    raw_type = _read_number(stream, order, "H", "tiff: tag type read failed")
    count = _read_number(stream, order, "I", "tiff: tag component count read failed")

    if count == _UINT32_MASK:
        raise TiffError("invalid Count offset in tag")

    try:
        data_type = DataType(raw_type)
        size = data_type.size
    except ValueError:
        size = 0
    product = size * count
    val_len = product & _UINT32_MASK
    if val_len == 0:
        raise TiffError("zero length tag value")
    if product > _UINT32_MASK:
        raise TiffError("invalid Count offset in tag (integer overflow)")

    if val_len > 4:
        val_offset = _read_number(stream, order, "I", "tiff: tag value offset read failed")
        position = stream.tell()
        stream.seek(val_offset)
        val = stream.read(val_len)
        stream.seek(position)
        if len(val) != val_len:
            raise ShortReadTagValueError()
    else:
        val_offset = 0
        val = _read_exact(stream, val_len, "tiff: tag offset read failed")
        _read_exact(stream, 4 - val_len, "tiff: tag offset read failed")

    return Tag(
        id=tag_id,
        type=data_type,
        count=count,
        val=val,
        val_offset=val_offset,
        order=order,
    )
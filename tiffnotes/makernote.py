"""Decoding of camera maker notes (Canon and Nikon version 3)."""

from __future__ import annotations

import io
from types import MappingProxyType
from typing import Mapping

from .tag import ByteOrder, Tag, TiffError, WrongFormatError
from .tiff import Dir, decode, decode_dir

CANON_FIELDS: Mapping[int, str] = MappingProxyType(
    {
        0x0000: "Canon.0x0000",
        0x0001: "Canon.CameraSettings",
        0x0002: "FocalLength",
        0x0003: "Canon.0x0003",
        0x0004: "Canon.ShotInfo",
        0x0005: "Panorama",
        0x0006: "ImageType",
        0x0007: "FirmwareVersion",
        0x0008: "FileNumber",
        0x0009: "OwnerName",
        0x000C: "SerialNumber",
        0x000D: "CameraInfo",
        0x000F: "CustomFunctions",
        0x0010: "ModelID",
        0x0012: "PictureInfo",
        0x0013: "ThumbnailImageValidArea",
        0x0015: "SerialNumberFormat",
        0x001A: "SuperMacro",
        0x0026: "Canon.AFInfo",
        0x0035: "Canon.TimeInfo",
        0x0083: "OriginalDecisionDataOffset",
        0x00A4: "WhiteBalanceTable",
        0x0095: "LensModel",
        0x0096: "InternalSerialNumber",
        0x0097: "DustRemovalData",
        0x0099: "CustomFunctions",
        0x00A0: "ProcessingInfo",
        0x00AA: "MeasuredColor",
        0x00B4: "ColorSpace",
        0x00B5: "Canon.0x00b5",
        0x00C0: "Canon.0x00c0",
        0x00C1: "Canon.0x00c1",
        0x00D0: "VRDOffset",
        0x00E0: "SensorInfo",
        0x4001: "ColorData",
    }
)

# Used by E5400, SQ, D2H, D70 and newer.
NIKON3_FIELDS: Mapping[int, str] = MappingProxyType(
    {
        0x0001: "Nikon.Version",
        0x0002: "ISOSpeed",
        0x0003: "ColorMode",
        0x0004: "Quality",
        0x0005: "Nikon.WhiteBalance",
        0x0006: "Sharpening",
        0x0007: "Focus",
        0x0008: "FlashSetting",
        0x0009: "FlashDevice",
        0x000A: "Nikon3.0x000a",
        0x000B: "WhiteBalanceBias",
        0x000C: "WB_RBLevels",
        0x000D: "ProgramShift",
        0x000E: "ExposureDiff",
        0x000F: "ISOSelection",
        0x0010: "DataDump",
        0x0011: "Preview",
        0x0012: "FlashComp",
        0x0013: "ISOSettings",
        0x0016: "ImageBoundary",
        0x0017: "FlashExposureComp",
        0x0018: "FlashBracketComp",
        0x0019: "ExposureBracketComp",
        0x001A: "ImageProcessing",
        0x001B: "CropHiSpeed",
        0x001C: "ExposureTuning",
        0x001D: "SerialNumber",
        0x001E: "Nikon.ColorSpace",
        0x001F: "Nikon.VRInfo",
        0x0020: "ImageAuthentication",
        0x0022: "ActiveDLighting",
        0x0023: "Nikon.PictureControl",
        0x0024: "Nikon.WorldTime",
        0x0025: "Nikon.ISOInfo",
        0x002A: "VignetteControl",
        0x0080: "ImageAdjustment",
        0x0081: "ToneComp",
        0x0082: "AuxiliaryLens",
        0x0083: "LensType",
        0x0084: "Lens",
        0x0085: "FocusDistance",
        0x0086: "DigitalZoom",
        0x0087: "FlashMode",
        0x0088: "Nikon.AFInfo",
        0x0089: "ShootingMode",
        0x008A: "AutoBracketRelease",
        0x008B: "LensFStops",
        0x008C: "ContrastCurve",
        0x008D: "ColorHue",
        0x008F: "SceneMode",
        0x0090: "Nikon.LightSource",
        0x0091: "Nikon.ShotInfo",
        0x0092: "HueAdjustment",
        0x0093: "NEFCompression",
        0x0094: "Nikon_Saturation",
        0x0095: "NoiseReduction",
        0x0096: "LinearizationTable",
        0x0097: "Nikon.ColorBalance",
        0x0098: "Nikon.LensData",
        0x0099: "RawImageCenter",
        0x009A: "SensorPixelSize",
        0x009B: "Nikon3.0x009b",
        0x009C: "SceneAssist",
        0x009E: "RetouchHistory",
        0x009F: "Nikon3.0x009f",
        0x00A0: "Nikon.SerialNO",
        0x00A2: "ImageDataSize",
        0x00A3: "Nikon3.0x00a3",
        0x00A5: "ImageCount",
        0x00A6: "DeletedImageCount",
        0x00A7: "ShutterCount",
        0x00A8: "Nikon.FlashInfo",
        0x00A9: "ImageOptimization",
        0x00AA: "SaturationText",
        0x00AB: "VariProgram",
        0x00AC: "ImageStabilization",
        0x00AD: "AFResponse",
        0x00B0: "Nikon.MultiExposure",
        0x00B1: "HighISONoiseReduction",
        0x00B3: "ToningEffect",
        0x00B7: "Nikon.AFInfo2",
        0x00B8: "Nikon.FileInfo",
        0x00B9: "Nikon.AFTune",
        0x0E00: "PrintIM",
        0x0E01: "CaptureData",
        0x0E09: "CaptureVersion",
        0x0E0E: "CaptureOffsets",
        0x0E10: "ScanIFD",
        0x0E1D: "ICCProfile",
        0x0E1E: "CaptureOutput",
    }
)

_NIKON_HEADER = b"Nikon\x00"
_NIKON_TIFF_START = 10


def _named_tags(directory: Dir, fields: Mapping[int, str]) -> dict[str, Tag]:
    """Map the known tags of a directory to their field names; later tags win."""
    return {fields[tag.id]: tag for tag in directory.tags if tag.id in fields}


def parse_canon(
    maker_note: Tag | None, make: Tag | None, order: ByteOrder
) -> dict[str, Tag]:
    """Decode a Canon maker note into a mapping of field name to tag.

    Returns an empty mapping when either tag is missing or the make is not
    exactly "Canon". The note is a bare IFD whose value offsets are relative
    to the enclosing TIFF structure, so ``maker_note.val_offset`` must be set.
    """
    if maker_note is None or make is None:
        return {}
    try:
        if make.string_val() != "Canon":
            return {}
    except WrongFormatError:
        return {}

    buf = io.BytesIO(bytes(maker_note.val_offset) + maker_note.val)
    buf.seek(maker_note.val_offset)
    directory, _ = decode_dir(buf, order)
    return _named_tags(directory, CANON_FIELDS)


def parse_nikon_v3(maker_note: Tag | None) -> dict[str, Tag]:
    """Decode a Nikon version 3 maker note into a mapping of field name to tag.

    Returns an empty mapping when the tag is missing or lacks the Nikon header.
    The note holds a self-contained TIFF structure after a 10-byte header.
    """
    if maker_note is None:
        return {}
    raw = maker_note.val
    if len(raw) < len(_NIKON_HEADER) or raw[: len(_NIKON_HEADER)] != _NIKON_HEADER:
        return {}

    notes = decode(io.BytesIO(raw[_NIKON_TIFF_START:]))
    if not notes.dirs:
        raise TiffError("tiff: maker note holds no IFD")
    return _named_tags(notes.dirs[0], NIKON3_FIELDS)
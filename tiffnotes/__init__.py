"""Decode TIFF structures, IFD tags and Canon/Nikon maker notes."""

__version__ = "0.1.0"
__all__ = ["tag", "tiff", "makernote"]
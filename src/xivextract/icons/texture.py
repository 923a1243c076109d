"""
Texture files.

A .tex file is an 80-byte little-endian header followed by the pixel data of
every mip level:

    0x00  u32      attributes
    0x04  u32      pixel format
    0x08  u16      width
    0x0A  u16      height
    0x0C  u16      depth
    0x0E  u16      mip level count
    0x10  3 x u32  LoD mip offsets
    0x1C  13 x u32 surface offsets (from the start of the file)

Only the first (full-size) surface is kept.
"""

import struct
from dataclasses import dataclass
from enum import IntEnum
from typing import Optional

from xivextract.errors import Unknown

TEX_HEADER = struct.Struct("<IIHHHH3I13I")


class TextureFormat(IntEnum):
    """Pixel format tags used by texture headers."""
    L8 = 0x1130
    A8 = 0x1131
    RGBA4 = 0x1440
    RGB5A1 = 0x1441
    ARGB8 = 0x1450
    RGBX8 = 0x1451
    R32F = 0x2150
    RG16F = 0x2250
    RGBA16F = 0x2460
    RGBA32F = 0x2470
    DXT1 = 0x3420
    DXT3 = 0x3430
    DXT5 = 0x3431
    D16 = 0x4140
    D24S8 = 0x4250
    RGBA8 = 0x4401
    BC5 = 0x6230
    BC7 = 0x6432


@dataclass(frozen=True)
class TextureRecord:
    width: int
    height: int
    format: int
    data: bytes
    path: str = ""

    @property
    def texture_format(self) -> Optional[TextureFormat]:
        try:
            return TextureFormat(self.format)
        except ValueError:
            return None

    @classmethod
    def from_bytes(cls, raw: bytes, path: str = "") -> "TextureRecord":
        """
        Parse a .tex file.

        Raises:
            Unknown: the file is shorter than its header says
        """
        try:
            fields = TEX_HEADER.unpack_from(raw, 0)
        except struct.error as e:
            raise Unknown(e) from e

        _attributes, format_tag, width, height, _depth, _mips = fields[:6]
        surfaces = fields[9:]

        start = surfaces[0] or TEX_HEADER.size
        end = surfaces[1] if surfaces[1] > start else len(raw)
        if start > len(raw):
            raise Unknown(ValueError(f'Texture "{path}" has no data at offset {start}'))

        return cls(width=width, height=height, format=format_tag, data=raw[start:end], path=path)

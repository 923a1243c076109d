"""
Texture pixel decoding.

Every decoder turns the first surface of a texture into ``width * height``
RGBA pixels, four bytes each. Block-compressed formats go through Pillow's
``bcn`` decoder; the uncompressed 16- and 32-bit formats are expanded here.
"""

import logging
import struct
from typing import Callable, Dict

from PIL import Image

from xivextract.errors import Unknown, UnsupportedIconFormat
from xivextract.icons.texture import TextureFormat, TextureRecord

logger = logging.getLogger(__name__)

# TextureFormat -> Pillow bcn decoder variant
BCN_VARIANTS = {
    TextureFormat.DXT1: 1,
    TextureFormat.DXT3: 2,
    TextureFormat.DXT5: 3,
}

# Bytes per 4x4 block for each bcn variant
BCN_BLOCK_SIZES = {1: 8, 2: 16, 3: 16}


# =============================================================================
# Payload sizes
# =============================================================================

def expected_size(texture_format: TextureFormat, width: int, height: int) -> int:
    """Number of payload bytes the first surface of a texture occupies."""
    if texture_format in BCN_VARIANTS:
        blocks = ((width + 3) // 4) * ((height + 3) // 4)
        return blocks * BCN_BLOCK_SIZES[BCN_VARIANTS[texture_format]]
    if texture_format in (TextureFormat.RGB5A1, TextureFormat.RGBA4):
        return width * height * 2
    return width * height * 4


# =============================================================================
# Uncompressed formats
# =============================================================================

def decode_rgb5a1(data: bytes, width: int, height: int) -> bytes:
    """
    1-bit alpha, 5-bit colour channels (A1 R5 G5 B5 in a little-endian u16).

    Each channel is widened by replicating its top three bits into the low
    bits, so 0x1F becomes 0xFF; the alpha bit becomes 0x00 or 0xFF.
    """
    out = bytearray(width * height * 4)
    for i, (value,) in enumerate(struct.iter_unpack("<H", data[:width * height * 2])):
        a = value & 0x8000
        r = value & 0x7C00
        g = value & 0x03E0
        b = value & 0x001F

        rgb = (r << 9) | (g << 6) | (b << 3)
        argb = (a * 0x1FE00) | rgb | ((rgb >> 5) & 0x070707)

        pos = i * 4
        out[pos] = (argb >> 16) & 0xFF
        out[pos + 1] = (argb >> 8) & 0xFF
        out[pos + 2] = argb & 0xFF
        out[pos + 3] = (argb >> 24) & 0xFF
    return bytes(out)


def decode_rgba4(data: bytes, width: int, height: int) -> bytes:
    """4-bit channels (A4 R4 G4 B4 in a little-endian u16), shifted into the high nibble."""
    out = bytearray(width * height * 4)
    for i, (value,) in enumerate(struct.iter_unpack("<H", data[:width * height * 2])):
        pos = i * 4
        out[pos] = ((value >> 8) & 0x0F) << 4
        out[pos + 1] = ((value >> 4) & 0x0F) << 4
        out[pos + 2] = (value & 0x0F) << 4
        out[pos + 3] = ((value >> 12) & 0x0F) << 4
    return bytes(out)


def decode_argb8(data: bytes, width: int, height: int) -> bytes:
    """Stored as B G R A; swap the blue and red bytes of every pixel."""
    size = width * height * 4
    out = bytearray(data[:size])
    out[0::4] = data[2:size:4]
    out[2::4] = data[0:size:4]
    return bytes(out)


def decode_rgba8(data: bytes, width: int, height: int) -> bytes:
    return bytes(data[:width * height * 4])


# =============================================================================
# Block-compressed formats
# =============================================================================

def _bcn_decoder(variant: int) -> Callable[[bytes, int, int], bytes]:
    def decode_bcn(data: bytes, width: int, height: int) -> bytes:
        image = Image.frombytes("RGBA", (width, height), bytes(data), "bcn", variant)
        return image.tobytes()
    decode_bcn.__name__ = f"decode_bc{variant}"
    return decode_bcn


DECODERS: Dict[TextureFormat, Callable[[bytes, int, int], bytes]] = {
    TextureFormat.RGB5A1: decode_rgb5a1,
    TextureFormat.RGBA4: decode_rgba4,
    TextureFormat.ARGB8: decode_argb8,
    TextureFormat.RGBA8: decode_rgba8,
}
DECODERS.update((fmt, _bcn_decoder(variant)) for fmt, variant in BCN_VARIANTS.items())


def decode_icon(texture: TextureRecord) -> bytes:
    """
    Decode a texture to RGBA pixels.

    Args:
        texture: Parsed texture; ``texture.path`` is used in error messages

    Returns:
        ``width * height * 4`` bytes of RGBA

    Raises:
        UnsupportedIconFormat: the pixel format has no decoder
        Unknown: the payload is shorter than the format requires
    """
    texture_format = texture.texture_format
    decoder = DECODERS.get(texture_format) if texture_format is not None else None
    if decoder is None:
        raise UnsupportedIconFormat(texture.format, texture.path)

    width, height = texture.width, texture.height
    if width == 0 or height == 0:
        return b""

    needed = expected_size(texture_format, width, height)
    if len(texture.data) < needed:
        raise Unknown(ValueError(
            f'Texture "{texture.path}" is truncated: {len(texture.data)} bytes, '
            f'{texture_format.name} {width}x{height} needs {needed}'
        ))

    logger.debug(f"Decoding {texture_format.name} {width}x{height} texture {texture.path}")
    return decoder(texture.data[:needed], width, height)

"""
xivextract.icons - Icon extraction

Icon resource paths, .tex parsing, pixel decoding and PNG encoding.
"""

from xivextract.icons.decoder import decode_icon, expected_size
from xivextract.icons.encoder import encode_png
from xivextract.icons.paths import icon_path
from xivextract.icons.texture import TextureFormat, TextureRecord

__all__ = [
    "TextureFormat",
    "TextureRecord",
    "decode_icon",
    "encode_png",
    "expected_size",
    "icon_path",
]

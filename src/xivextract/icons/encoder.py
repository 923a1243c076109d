"""PNG encoding of decoded RGBA pixels."""

import io

from PIL import Image


def encode_png(rgba: bytes, width: int, height: int) -> bytes:
    """Encode ``width * height`` RGBA pixels as a PNG file."""
    image = Image.frombytes("RGBA", (width, height), bytes(rgba))
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()

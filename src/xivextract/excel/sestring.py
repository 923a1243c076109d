"""
SeString decoding.

Sheet strings are UTF-8 text interleaved with macro payloads:

    0x02 <type:u8> <length:packed int> <payload: length bytes> 0x03

Only the plain text survives decoding. Layout macros with an obvious text
equivalent (new line, non-breaking space, hyphen) are replaced by it; every
other payload is dropped.
"""

from typing import Tuple


PAYLOAD_START = 0x02
PAYLOAD_END = 0x03

MACRO_TEXT = {
    0x10: "\n",       # new line
    0x1D: "\u00a0",  # non-breaking space
    0x1F: "-",        # hyphen
}


class SeStringError(ValueError):
    """Malformed macro payload."""


def read_packed_int(data: bytes, pos: int) -> Tuple[int, int]:
    """
    Read one packed integer.

    Markers 0x01..0xCF encode ``marker - 1`` directly. Markers 0xF0..0xFE
    carry a bitmask in ``(marker + 1) & 0x0F`` saying which of the four
    big-endian value bytes follow.

    Returns:
        (value, position after the integer)
    """
    if pos >= len(data):
        raise SeStringError("Unexpected end of data in packed integer")
    marker = data[pos]
    pos += 1

    if 0x01 <= marker <= 0xCF:
        return marker - 1, pos

    if 0xF0 <= marker <= 0xFE:
        flags = (marker + 1) & 0x0F
        value = 0
        for shift in (24, 16, 8, 0):
            if flags & (1 << (shift // 8)):
                if pos >= len(data):
                    raise SeStringError("Unexpected end of data in packed integer")
                value |= data[pos] << shift
                pos += 1
        return value, pos

    raise SeStringError(f"Unsupported packed integer marker {marker:#04x}")


def decode_sestring(data: bytes) -> str:
    """Decode raw SeString bytes to plain text."""
    parts = []
    text_start = 0
    pos = 0
    length = len(data)

    while pos < length:
        if data[pos] != PAYLOAD_START:
            pos += 1
            continue

        parts.append(data[text_start:pos].decode("utf-8", errors="replace"))

        if pos + 1 >= length:
            raise SeStringError("Truncated macro payload")
        macro_type = data[pos + 1]
        payload_length, pos = read_packed_int(data, pos + 2)
        pos += payload_length

        if pos >= length or data[pos] != PAYLOAD_END:
            raise SeStringError(f"Macro {macro_type:#04x} is not terminated")
        pos += 1
        text_start = pos

        parts.append(MACRO_TEXT.get(macro_type, ""))

    parts.append(data[text_start:].decode("utf-8", errors="replace"))
    return "".join(parts)

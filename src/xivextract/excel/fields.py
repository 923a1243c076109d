"""
Field values and column kinds.

The archive stores every column with a numeric kind code. Those codes are
modelled by ColumnKind; the decoded values they produce are tagged with the
narrower FieldKind (the eight packed-bool column kinds all decode to BOOL).
"""

import math
import struct
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Optional, Union


class FieldKind(Enum):
    """Tag carried by every decoded FieldValue."""
    STRING = "string"
    BOOL = "bool"
    INT8 = "i8"
    UINT8 = "u8"
    INT16 = "i16"
    UINT16 = "u16"
    INT32 = "i32"
    UINT32 = "u32"
    INT64 = "i64"
    UINT64 = "u64"
    FLOAT32 = "f32"

    @property
    def is_integer(self) -> bool:
        return self in _INTEGER_KINDS

    @property
    def is_numeric(self) -> bool:
        return self in _INTEGER_KINDS or self is FieldKind.FLOAT32


_INTEGER_KINDS = frozenset({
    FieldKind.INT8, FieldKind.UINT8,
    FieldKind.INT16, FieldKind.UINT16,
    FieldKind.INT32, FieldKind.UINT32,
    FieldKind.INT64, FieldKind.UINT64,
})


class ColumnKind(IntEnum):
    """Column kind codes as they appear in sheet headers."""
    STRING = 0x00
    BOOL = 0x01
    INT8 = 0x02
    UINT8 = 0x03
    INT16 = 0x04
    UINT16 = 0x05
    INT32 = 0x06
    UINT32 = 0x07
    FLOAT32 = 0x09
    INT64 = 0x0A
    UINT64 = 0x0B
    PACKED_BOOL0 = 0x19
    PACKED_BOOL1 = 0x1A
    PACKED_BOOL2 = 0x1B
    PACKED_BOOL3 = 0x1C
    PACKED_BOOL4 = 0x1D
    PACKED_BOOL5 = 0x1E
    PACKED_BOOL6 = 0x1F
    PACKED_BOOL7 = 0x20

    @property
    def field_kind(self) -> FieldKind:
        if self >= ColumnKind.PACKED_BOOL0:
            return FieldKind.BOOL
        return FieldKind[self.name]

    @property
    def packed_bit(self) -> Optional[int]:
        """Bit index for packed-bool columns, None otherwise."""
        if self >= ColumnKind.PACKED_BOOL0:
            return self - ColumnKind.PACKED_BOOL0
        return None

    @property
    def struct_format(self) -> str:
        """Big-endian struct format used to read this column from row data."""
        if self >= ColumnKind.PACKED_BOOL0:
            return ">B"
        return _STRUCT_FORMATS[self]


_STRUCT_FORMATS = {
    ColumnKind.STRING: ">I",  # offset into the row's string block
    ColumnKind.BOOL: ">B",
    ColumnKind.INT8: ">b",
    ColumnKind.UINT8: ">B",
    ColumnKind.INT16: ">h",
    ColumnKind.UINT16: ">H",
    ColumnKind.INT32: ">i",
    ColumnKind.UINT32: ">I",
    ColumnKind.FLOAT32: ">f",
    ColumnKind.INT64: ">q",
    ColumnKind.UINT64: ">Q",
}


def shortest_float32(value: float) -> float:
    """
    Return the shortest decimal that reads back as the same 32-bit float.

    Values unpacked from 4-byte floats carry binary noise once widened to a
    Python float (0.1 becomes 0.10000000149011612); this trims that noise so
    the value prints the way it was authored.
    """
    if math.isnan(value) or math.isinf(value):
        return value
    packed = struct.pack(">f", value)
    for precision in range(1, 10):
        candidate = float(f"{value:.{precision}g}")
        if struct.pack(">f", candidate) == packed:
            return candidate
    return value


@dataclass(frozen=True)
class FieldValue:
    """A single decoded cell, tagged with its kind."""
    kind: FieldKind
    value: Union[str, bool, int, float]

    # =========================================================================
    # Constructors
    # =========================================================================

    @classmethod
    def string(cls, value: str) -> "FieldValue":
        return cls(FieldKind.STRING, value)

    @classmethod
    def boolean(cls, value: bool) -> "FieldValue":
        return cls(FieldKind.BOOL, bool(value))

    @classmethod
    def float32(cls, value: float) -> "FieldValue":
        return cls(FieldKind.FLOAT32, shortest_float32(float(value)))

    @classmethod
    def integer(cls, kind: FieldKind, value: int) -> "FieldValue":
        if not kind.is_integer:
            raise ValueError(f"{kind.value} is not an integer kind")
        return cls(kind, int(value))

    # =========================================================================
    # Accessors
    # =========================================================================

    @property
    def text(self) -> Optional[str]:
        """The string payload, or None for non-text values."""
        if self.kind is FieldKind.STRING:
            return self.value
        return None

    def to_u32(self) -> Optional[int]:
        """
        Coerce a numeric value to an unsigned 32-bit row id.

        Integers wrap modulo 2**32 (so -1 becomes 0xFFFFFFFF), floats are
        truncated toward zero and saturate at the u32 bounds. Text and bool
        values have no index and yield None.
        """
        if self.kind.is_integer:
            return self.value & 0xFFFFFFFF
        if self.kind is FieldKind.FLOAT32:
            if math.isnan(self.value):
                return 0
            return int(min(max(self.value, 0.0), float(0xFFFFFFFF)))
        return None

    def __str__(self) -> str:
        if self.kind is FieldKind.BOOL:
            return "true" if self.value else "false"
        return str(self.value)

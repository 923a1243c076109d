"""
Row records.

A row is addressed by (sheet, row id) and exposes its cells through
``field(index)``, where ``index`` is the position of the column in the sheet
header's column list. Two implementations exist: ExcelRow decodes cells
lazily from the raw row bytes, MemoryRow serves pre-built values.
"""

import struct
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Sequence

from xivextract.excel.fields import ColumnKind, FieldKind, FieldValue
from xivextract.excel.sestring import decode_sestring


@dataclass(frozen=True)
class RawColumn:
    """One column definition from a sheet header."""
    kind: ColumnKind
    offset: int  # byte offset inside the fixed-size part of a row

    @property
    def field_kind(self) -> FieldKind:
        return self.kind.field_kind


class RowRecord(ABC):
    """Base class for a single sheet row."""

    sheet: str
    row_id: int

    @abstractmethod
    def field(self, index: int) -> FieldValue:
        """Decode the cell in column ``index``."""

    @abstractmethod
    def __len__(self) -> int:
        """Number of columns in the row."""

    def __repr__(self):
        return f"{type(self).__name__}({self.sheet}#{self.row_id})"


class ExcelRow(RowRecord):
    """
    A row backed by raw sheet data.

    The row block is laid out as a fixed-size part (``fixed_size`` bytes, one
    slot per column at the column's byte offset) followed by a block of
    NUL-terminated strings. String columns store a big-endian u32 offset
    relative to the start of that string block. All numbers are big-endian.
    """

    def __init__(self, sheet: str, row_id: int, columns: Sequence[RawColumn],
                 data: bytes, fixed_size: int):
        self.sheet = sheet
        self.row_id = row_id
        self.columns = columns
        self.data = data
        self.fixed_size = fixed_size

    def __len__(self) -> int:
        return len(self.columns)

    def field(self, index: int) -> FieldValue:
        column = self.columns[index]
        (raw,) = struct.unpack_from(column.kind.struct_format, self.data, column.offset)

        if column.kind is ColumnKind.STRING:
            return FieldValue.string(self._read_string(raw))

        bit = column.kind.packed_bit
        if bit is not None:
            return FieldValue.boolean(raw & (1 << bit))
        if column.kind is ColumnKind.BOOL:
            return FieldValue.boolean(raw)
        if column.kind is ColumnKind.FLOAT32:
            return FieldValue.float32(raw)
        return FieldValue.integer(column.field_kind, raw)

    def _read_string(self, relative_offset: int) -> str:
        start = self.fixed_size + relative_offset
        end = self.data.find(b"\x00", start)
        if end < 0:
            end = len(self.data)
        return decode_sestring(self.data[start:end])


class MemoryRow(RowRecord):
    """A row whose cells are already decoded."""

    def __init__(self, sheet: str, row_id: int, values: List[FieldValue]):
        self.sheet = sheet
        self.row_id = row_id
        self.values = list(values)

    def __len__(self) -> int:
        return len(self.values)

    def field(self, index: int) -> FieldValue:
        return self.values[index]

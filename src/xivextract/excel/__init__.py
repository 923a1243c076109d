"""
xivextract.excel - Sheet cell model

Typed cell values, raw column definitions, row records and SeString text
decoding.
"""

from xivextract.excel.fields import ColumnKind, FieldKind, FieldValue, shortest_float32
from xivextract.excel.rows import ExcelRow, MemoryRow, RawColumn, RowRecord
from xivextract.excel.sestring import SeStringError, decode_sestring

__all__ = [
    "ColumnKind",
    "FieldKind",
    "FieldValue",
    "shortest_float32",
    "RawColumn",
    "RowRecord",
    "ExcelRow",
    "MemoryRow",
    "SeStringError",
    "decode_sestring",
]

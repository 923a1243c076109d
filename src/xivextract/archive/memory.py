"""
In-memory archive.

Holds sheets as already-decoded values. Used by the test suite and by code
that embeds the extractor over data it has loaded some other way.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Sequence

from xivextract.archive.base import ArchiveReader
from xivextract.errors import RowNotFound, SheetNotFound
from xivextract.excel.fields import FieldValue
from xivextract.excel.rows import MemoryRow, RawColumn, RowRecord


@dataclass
class MemorySheet:
    name: str
    columns: List[RawColumn]
    rows: Dict[int, List[FieldValue]] = field(default_factory=dict)


class MemoryArchive(ArchiveReader):
    """
    Archive whose contents are supplied programmatically.

    Usage:
        archive = MemoryArchive("2024.06.18.0000.0000")
        archive.add_sheet("Status", columns, {1: [FieldValue.string("Heavy")]})
        archive.add_resource("ui/icon/010000/010401_hr1.tex", tex_bytes)
    """

    def __init__(self, version: str = "2024.06.18.0000.0000"):
        self._version = version
        self._sheets: Dict[str, MemorySheet] = {}
        self._resources: Dict[str, bytes] = {}

    def add_sheet(self, name: str, columns: Sequence[RawColumn],
                  rows: Dict[int, List[FieldValue]]) -> MemorySheet:
        sheet = MemorySheet(name, list(columns), dict(rows))
        self._sheets[name] = sheet
        return sheet

    def add_resource(self, path: str, data: bytes) -> None:
        self._resources[path] = data

    # =========================================================================
    # ArchiveReader
    # =========================================================================

    def version(self) -> str:
        return self._version

    def resource(self, path: str) -> bytes:
        try:
            return self._resources[path]
        except KeyError:
            raise FileNotFoundError(path) from None

    def columns(self, sheet: str) -> List[RawColumn]:
        return list(self._sheet(sheet).columns)

    def row(self, sheet: str, row_id: int) -> RowRecord:
        data = self._sheet(sheet)
        if row_id not in data.rows:
            raise RowNotFound(sheet, row_id)
        return MemoryRow(sheet, row_id, data.rows[row_id])

    def rows(self, sheet: str) -> Iterator[RowRecord]:
        data = self._sheet(sheet)
        return (MemoryRow(sheet, row_id, data.rows[row_id]) for row_id in sorted(data.rows))

    def _sheet(self, name: str) -> MemorySheet:
        try:
            return self._sheets[name]
        except KeyError:
            raise SheetNotFound(name) from None

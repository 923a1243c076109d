"""
Archive reader interface.

The extractor never touches game files directly; everything it needs from an
installation goes through these five calls.
"""

from abc import ABC, abstractmethod
from typing import Iterator, List

from xivextract.excel.rows import RawColumn, RowRecord


class ArchiveReader(ABC):
    """Read access to a game's sheets and files."""

    @abstractmethod
    def version(self) -> str:
        """Game version string, e.g. ``2024.06.18.0000.0000``."""

    @abstractmethod
    def resource(self, path: str) -> bytes:
        """
        Read a raw file by its archive path.

        Raises:
            FileNotFoundError: no file exists at ``path``
        """

    @abstractmethod
    def columns(self, sheet: str) -> List[RawColumn]:
        """
        Column definitions of a sheet, in header order.

        Raises:
            SheetNotFound
        """

    @abstractmethod
    def row(self, sheet: str, row_id: int) -> RowRecord:
        """
        Fetch a single row.

        Raises:
            SheetNotFound
            RowNotFound
        """

    @abstractmethod
    def rows(self, sheet: str) -> Iterator[RowRecord]:
        """
        Iterate every row of a sheet in ascending row id order.

        Raises:
            SheetNotFound
        """

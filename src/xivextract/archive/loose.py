"""
Loose-file archive.

Reads sheets and textures from a directory of files already extracted from
the game's packed archives, keeping their archive paths:

    <root>/ffxivgame.ver
    <root>/exd/Action.exh
    <root>/exd/Action_0_en.exd
    <root>/ui/icon/000000/000405_hr1.tex

Archive paths are case-insensitive; a lower-cased path is tried when the
path as given does not exist.
"""

import logging
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple

from xivextract.archive.base import ArchiveReader
from xivextract.archive.exd import (
    Language,
    Page,
    SheetHeader,
    SheetVariant,
    header_path,
    page_path,
    parse_header,
    parse_page,
)
from xivextract.errors import GameNotFound, RowNotFound, SheetNotFound, UnsupportedSheet
from xivextract.excel.rows import ExcelRow, RawColumn, RowRecord

logger = logging.getLogger(__name__)

VERSION_FILE = "ffxivgame.ver"


class LooseArchive(ArchiveReader):
    """
    Archive over a directory of extracted game files.

    Args:
        root: directory containing ``ffxivgame.ver`` and the extracted files
        language: preferred language for sheets that are localised

    Raises:
        GameNotFound: ``root`` has no version file
    """

    def __init__(self, root: Path, language: Language = Language.ENGLISH):
        self.root = Path(root)
        self.language = language
        version_file = self.root / VERSION_FILE
        if not version_file.is_file():
            raise GameNotFound(str(self.root))

        self._version = version_file.read_text(encoding="ascii").strip()
        self._headers: Dict[str, SheetHeader] = {}
        self._pages: Dict[Tuple[str, int], Dict[int, bytes]] = {}
        logger.info(f"Opened game files at {self.root} (version {self._version})")

    # =========================================================================
    # ArchiveReader
    # =========================================================================

    def version(self) -> str:
        return self._version

    def resource(self, path: str) -> bytes:
        resolved = self._locate(path)
        if resolved is None:
            raise FileNotFoundError(path)
        return resolved.read_bytes()

    def columns(self, sheet: str) -> List[RawColumn]:
        return list(self._header(sheet).columns)

    def row(self, sheet: str, row_id: int) -> RowRecord:
        header = self._header(sheet)
        for page in header.pages:
            if row_id in page:
                rows = self._page(sheet, header, page)
                if row_id in rows:
                    return ExcelRow(sheet, row_id, header.columns, rows[row_id], header.fixed_size)
                break
        raise RowNotFound(sheet, row_id)

    def rows(self, sheet: str) -> Iterator[RowRecord]:
        header = self._header(sheet)
        return self._iter_rows(sheet, header)

    # =========================================================================
    # Internals
    # =========================================================================

    def _iter_rows(self, sheet: str, header: SheetHeader) -> Iterator[RowRecord]:
        for page in sorted(header.pages, key=lambda p: p.start_id):
            rows = self._page(sheet, header, page)
            for row_id in sorted(rows):
                yield ExcelRow(sheet, row_id, header.columns, rows[row_id], header.fixed_size)

    def _locate(self, path: str) -> Optional[Path]:
        for candidate in (path, path.lower()):
            full = self.root / candidate
            if full.is_file():
                return full
        return None

    def _header(self, sheet: str) -> SheetHeader:
        if sheet in self._headers:
            return self._headers[sheet]

        path = self._locate(header_path(sheet))
        if path is None:
            raise SheetNotFound(sheet)

        header = parse_header(path.read_bytes())
        if header.variant != SheetVariant.DEFAULT:
            raise UnsupportedSheet(sheet)

        logger.debug(f"Read header for {sheet}: {len(header.columns)} columns, {len(header.pages)} pages")
        self._headers[sheet] = header
        return header

    def _language_for(self, sheet: str, header: SheetHeader) -> Language:
        if self.language in header.languages:
            return self.language
        if Language.NONE in header.languages or not header.languages:
            return Language.NONE
        raise SheetNotFound(sheet)

    def _page(self, sheet: str, header: SheetHeader, page: Page) -> Dict[int, bytes]:
        key = (sheet, page.start_id)
        if key in self._pages:
            return self._pages[key]

        language = self._language_for(sheet, header)
        path = self._locate(page_path(sheet, page.start_id, language))
        if path is None:
            raise SheetNotFound(sheet)

        rows = parse_page(path.read_bytes())
        self._pages[key] = rows
        return rows

"""
Sheet header (.exh) and sheet page (.exd) file parsing.

Both formats are big-endian.

EXH layout:
    0x00  magic "EXHF"
    0x04  u16 version
    0x06  u16 fixed row size
    0x08  u16 column count
    0x0A  u16 page count
    0x0C  u16 language count
    0x0E  u16 (unused)
    0x10  u8  (unused)
    0x11  u8  variant (1 = default, 2 = sub-rows)
    0x12  u16 (unused)
    0x14  u32 row count
    0x18  8 bytes (unused)
    0x20  columns:   column count x (u16 kind, u16 offset)
          pages:     page count x (u32 first row id, u32 row count)
          languages: language count x (u8 language, u8 padding)

EXD layout:
    0x00  magic "EXDF"
    0x04  u16 version
    0x06  u16 (unused)
    0x08  u32 index size in bytes
    0x0C  u32 data size in bytes
    0x10  16 bytes (unused)
    0x20  index: (index size / 8) x (u32 row id, u32 file offset)
    rows, each: u32 data size, u16 sub-row count, data
"""

import struct
from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, List, Tuple

from xivextract.excel.fields import ColumnKind
from xivextract.excel.rows import RawColumn

EXH_MAGIC = b"EXHF"
EXD_MAGIC = b"EXDF"

EXH_HEADER = struct.Struct(">4sHHHHHHBBHI8x")
EXD_HEADER = struct.Struct(">4sHHII16x")
COLUMN = struct.Struct(">HH")
PAGE = struct.Struct(">II")
INDEX_ENTRY = struct.Struct(">II")
ROW_HEADER = struct.Struct(">IH")


class SheetFormatError(ValueError):
    """A sheet header or page file is malformed."""


class Language(IntEnum):
    NONE = 0
    JAPANESE = 1
    ENGLISH = 2
    GERMAN = 3
    FRENCH = 4
    CHINESE_SIMPLIFIED = 5
    CHINESE_TRADITIONAL = 6
    KOREAN = 7

    @property
    def suffix(self) -> str:
        return LANGUAGE_SUFFIXES[self]

    @classmethod
    def from_code(cls, code: str) -> "Language":
        """Look up a language by its file suffix ("en", "ja", ...)."""
        for language, suffix in LANGUAGE_SUFFIXES.items():
            if suffix == code.lower():
                return language
        raise ValueError(f"Unknown language code {code!r}")


LANGUAGE_SUFFIXES = {
    Language.NONE: "",
    Language.JAPANESE: "ja",
    Language.ENGLISH: "en",
    Language.GERMAN: "de",
    Language.FRENCH: "fr",
    Language.CHINESE_SIMPLIFIED: "chs",
    Language.CHINESE_TRADITIONAL: "cht",
    Language.KOREAN: "ko",
}


class SheetVariant(IntEnum):
    DEFAULT = 1
    SUBROWS = 2


@dataclass(frozen=True)
class Page:
    start_id: int
    row_count: int

    def __contains__(self, row_id: int) -> bool:
        return self.start_id <= row_id < self.start_id + self.row_count


@dataclass(frozen=True)
class SheetHeader:
    fixed_size: int
    variant: int
    row_count: int
    columns: List[RawColumn]
    pages: List[Page]
    languages: List[Language]


def parse_header(data: bytes) -> SheetHeader:
    """Parse the contents of an .exh file."""
    if len(data) < EXH_HEADER.size:
        raise SheetFormatError("Sheet header is truncated")

    (magic, _version, fixed_size, column_count, page_count, language_count,
     _, _, variant, _, row_count) = EXH_HEADER.unpack_from(data, 0)
    if magic != EXH_MAGIC:
        raise SheetFormatError(f"Bad sheet header magic {magic!r}")

    pos = EXH_HEADER.size
    try:
        columns = []
        for _ in range(column_count):
            kind, offset = COLUMN.unpack_from(data, pos)
            columns.append(RawColumn(ColumnKind(kind), offset))
            pos += COLUMN.size

        pages = []
        for _ in range(page_count):
            pages.append(Page(*PAGE.unpack_from(data, pos)))
            pos += PAGE.size

        languages = []
        for _ in range(language_count):
            languages.append(Language(data[pos]))
            pos += 2
    except (struct.error, IndexError) as e:
        raise SheetFormatError(f"Sheet header is truncated: {e}") from e
    except ValueError as e:
        raise SheetFormatError(f"Sheet header has an unknown column or language code: {e}") from e

    return SheetHeader(fixed_size, variant, row_count, columns, pages, languages)


def parse_page(data: bytes) -> Dict[int, bytes]:
    """
    Parse the contents of an .exd file.

    Returns:
        Mapping of row id to that row's data block
    """
    if len(data) < EXD_HEADER.size:
        raise SheetFormatError("Sheet page is truncated")

    magic, _version, _, index_size, _data_size = EXD_HEADER.unpack_from(data, 0)
    if magic != EXD_MAGIC:
        raise SheetFormatError(f"Bad sheet page magic {magic!r}")

    rows: Dict[int, bytes] = {}
    try:
        entries: List[Tuple[int, int]] = [
            INDEX_ENTRY.unpack_from(data, EXD_HEADER.size + i * INDEX_ENTRY.size)
            for i in range(index_size // INDEX_ENTRY.size)
        ]
        for row_id, offset in entries:
            size, _subrows = ROW_HEADER.unpack_from(data, offset)
            start = offset + ROW_HEADER.size
            rows[row_id] = data[start:start + size]
    except struct.error as e:
        raise SheetFormatError(f"Sheet page is truncated: {e}") from e

    return rows


def page_path(sheet: str, start_id: int, language: Language) -> str:
    if language is Language.NONE:
        return f"exd/{sheet}_{start_id}.exd"
    return f"exd/{sheet}_{start_id}_{language.suffix}.exd"


def header_path(sheet: str) -> str:
    return f"exd/{sheet}.exh"

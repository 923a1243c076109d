"""
xivextract.archive - Game file access

ArchiveReader is the only way the extractor reads game data. LooseArchive
reads extracted files from a directory; MemoryArchive holds data supplied in
code.
"""

from xivextract.archive.base import ArchiveReader
from xivextract.archive.exd import Language, SheetFormatError
from xivextract.archive.loose import LooseArchive
from xivextract.archive.memory import MemoryArchive

__all__ = [
    "ArchiveReader",
    "Language",
    "SheetFormatError",
    "LooseArchive",
    "MemoryArchive",
]

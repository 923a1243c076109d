"""
xivextract - FFXIV game data extractor

Reads sheets and icons from extracted game files, projects rows through
versioned schemas, follows links between sheets and writes the results as
JSON or PNG.
"""

__version__ = "0.1.0"
__author__ = "xivextract contributors"

from xivextract.errors import ExtractError
from xivextract.extractor import Extractor

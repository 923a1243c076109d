"""
xivextract.sheets - Record extraction

Curated sheet registry, row projection, cross-sheet links, text search and
action listings.
"""

from xivextract.sheets.actions import Role, job_actions, role_actions
from xivextract.sheets.links import LinkJoiner
from xivextract.sheets.projector import RecordProjector, project_columns, read_field, read_named
from xivextract.sheets.registry import (
    Column,
    LinkColumn,
    LinkSource,
    LinkSpec,
    SheetKind,
    SheetSpec,
    SkipIf,
    get_sheet_spec,
)
from xivextract.sheets.search import SearchMatcher

__all__ = [
    # Registry
    "Column",
    "LinkColumn",
    "LinkSource",
    "LinkSpec",
    "SheetKind",
    "SheetSpec",
    "SkipIf",
    "get_sheet_spec",
    # Projection
    "RecordProjector",
    "project_columns",
    "read_field",
    "read_named",
    "LinkJoiner",
    "SearchMatcher",
    # Actions
    "Role",
    "job_actions",
    "role_actions",
]

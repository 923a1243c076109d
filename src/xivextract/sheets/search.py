"""
Full-table text search.

Scans every row of a sheet, in ascending row id order, looking for a
substring in the sheet's searchable columns.

Matching rules:
    - matching is case-sensitive plain containment (``query in text``)
    - columns are tried in their declared order and only the first matching
      column of a row is reported
    - non-text cells never match
"""

import logging
from typing import List, Optional

from xivextract.archive.base import ArchiveReader
from xivextract.errors import ColumnNotFound
from xivextract.results import SearchMatch
from xivextract.schema.models import FieldDefinition, FieldLayout
from xivextract.sheets.projector import read_field
from xivextract.sheets.registry import SheetSpec

logger = logging.getLogger(__name__)


class SearchMatcher:
    """
    Searches one sheet.

    The identifier column (printed with every match) comes from the spec,
    else the schema's display field, else the first schema field. The
    searched columns come from the spec, else every schema field.
    """

    def __init__(self, archive: ArchiveReader, layout: FieldLayout,
                 spec: Optional[SheetSpec] = None):
        self.archive = archive
        self.layout = layout
        self.spec = spec

    @property
    def identifier(self) -> FieldDefinition:
        if self.spec is not None:
            name = self.spec.identifier
        elif self.layout.display_field:
            name = self.layout.display_field
        elif len(self.layout):
            name = self.layout.fields[0].name
        else:
            raise ColumnNotFound(self.layout.sheet, "<identifier>")
        return self._definition(name)

    @property
    def columns(self) -> List[FieldDefinition]:
        if self.spec is not None and self.spec.search_columns:
            return [self._definition(name) for name in self.spec.search_columns]
        return list(self.layout)

    def search(self, query: str) -> List[SearchMatch]:
        """
        Find every row whose searchable columns contain ``query``.

        Returns:
            Matches in ascending row id order; empty when nothing matched
        """
        identifier = self.identifier
        columns = self.columns
        matches: List[SearchMatch] = []

        for row in self.archive.rows(self.layout.sheet):
            for column in columns:
                value = read_field(row, column)
                text = value.text
                if text is None or query not in text:
                    continue

                if column.index == identifier.index:
                    matches.append(SearchMatch(row.row_id, value))
                else:
                    name = read_field(row, identifier)
                    matches.append(SearchMatch(row.row_id, name, column.name, value))
                break

        logger.debug(f"Search for {query!r} in {self.layout.sheet}: {len(matches)} matches")
        return matches

    def _definition(self, name: str) -> FieldDefinition:
        definition = self.layout.get(name)
        if definition is None:
            raise ColumnNotFound(self.layout.sheet, name)
        return definition

"""
Schema resolution.

Binds a provider's SheetSchema to the archive's column list for the same
sheet, producing the FieldLayout the projector reads rows through. Field
offsets move between game versions, so the binding is redone per version
rather than kept as constants.
"""

import logging
from typing import Dict, Optional, Sequence, Tuple

from xivextract.archive.base import ArchiveReader
from xivextract.errors import ColumnNotFound, UnsupportedSheet
from xivextract.excel.rows import RawColumn
from xivextract.schema.models import ColumnOrder, FieldDefinition, FieldLayout, SheetSchema
from xivextract.schema.providers import SchemaProvider

logger = logging.getLogger(__name__)


def build_layout(schema: SheetSchema, columns: Sequence[RawColumn]) -> FieldLayout:
    """
    Bind schema fields to raw columns.

    With ColumnOrder.INDEX the schema's indices address ``columns`` directly.
    With ColumnOrder.OFFSET they address ``columns`` sorted by byte offset
    (ties keep header order); each resulting definition still carries the
    header position, since that is what rows are read by.

    Raises:
        UnsupportedSheet: the schema is not a flat record
        ColumnNotFound: a schema field indexes past the last column
    """
    if not schema.is_flat:
        raise UnsupportedSheet(schema.sheet)

    ordered = list(enumerate(columns))
    if schema.order is ColumnOrder.OFFSET:
        ordered.sort(key=lambda pair: pair[1].offset)

    definitions = []
    for schema_field in schema.fields:
        if schema_field.index >= len(ordered):
            raise ColumnNotFound(schema.sheet, schema_field.name)
        header_index, column = ordered[schema_field.index]
        definitions.append(FieldDefinition(
            name=schema_field.name,
            index=header_index,
            kind=column.field_kind,
            offset=column.offset,
        ))

    return FieldLayout(schema.sheet, definitions, display_field=schema.display_field)


class SchemaResolver:
    """
    Resolves FieldLayouts for one archive.

    Layouts are built on first use and kept for the lifetime of the resolver.

    Args:
        provider: schema source
        archive: archive whose column lists the schemas are bound to
        version: schema version to use; defaults to the archive's version
    """

    def __init__(self, provider: SchemaProvider, archive: ArchiveReader,
                 version: Optional[str] = None):
        self.provider = provider
        self.archive = archive
        self.version = version or archive.version()
        self._layouts: Dict[Tuple[str, str], FieldLayout] = {}

    def layout(self, sheet: str, refresh: bool = False) -> FieldLayout:
        """
        Get the FieldLayout for ``sheet``.

        Raises:
            VersionNotFound: no schema for this resolver's version
            SheetNotFound: the sheet is missing from the schema or the archive
            UnsupportedSheet: the schema is not a flat record
        """
        key = (self.version, sheet)
        if not refresh and key in self._layouts:
            return self._layouts[key]

        schema = self.provider.schema(self.version, sheet, refresh=refresh)
        columns = self.archive.columns(sheet)
        layout = build_layout(schema, columns)
        logger.debug(f"Resolved {sheet} for {self.version}: {len(layout)} fields over {len(columns)} columns")

        self._layouts[key] = layout
        return layout

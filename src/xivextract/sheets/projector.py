"""
Record projection.

Turns a raw row into an ordered name -> value mapping using a sheet's
FieldLayout and, when the sheet is curated, its SheetSpec.
"""

from collections import OrderedDict
from typing import Iterable, Optional, Tuple

from xivextract.errors import ColumnNotFound, FieldKindMismatch
from xivextract.excel.fields import FieldValue
from xivextract.excel.rows import RowRecord
from xivextract.schema.models import FieldDefinition, FieldLayout
from xivextract.sheets.registry import SheetSpec


def read_field(row: RowRecord, definition: FieldDefinition) -> FieldValue:
    """
    Read one cell and check it carries the kind its column declares.

    Raises:
        FieldKindMismatch
    """
    value = row.field(definition.index)
    if value.kind is not definition.kind:
        raise FieldKindMismatch(row.sheet, definition.name, definition.kind.value, value.kind.value)
    return value


def read_named(row: RowRecord, layout: FieldLayout, name: str) -> FieldValue:
    """
    Read a cell by its schema name.

    Raises:
        ColumnNotFound
        FieldKindMismatch
    """
    definition = layout.get(name)
    if definition is None:
        raise ColumnNotFound(layout.sheet, name)
    return read_field(row, definition)


def project_columns(row: RowRecord, layout: FieldLayout,
                    columns: Iterable[Tuple[str, str]]) -> "OrderedDict[str, FieldValue]":
    """
    Project ``(schema name, output key)`` pairs, in the order given.

    Raises:
        ColumnNotFound: a name is missing from the layout
    """
    result: "OrderedDict[str, FieldValue]" = OrderedDict()
    for name, key in columns:
        result[key] = read_named(row, layout, name)
    return result


class RecordProjector:
    """Projects rows of one sheet."""

    def __init__(self, layout: FieldLayout, spec: Optional[SheetSpec] = None):
        self.layout = layout
        self.spec = spec

    def project(self, row: RowRecord) -> "OrderedDict[str, FieldValue]":
        """
        Project a row.

        With a spec, exactly the spec's columns are emitted, in the spec's
        order and under their aliases. Without one, every schema field is
        emitted under its schema name, in schema order.
        """
        if self.spec is None:
            result: "OrderedDict[str, FieldValue]" = OrderedDict()
            for definition in self.layout:
                result.setdefault(definition.name, read_field(row, definition))
            return result

        return project_columns(row, self.layout, ((c.name, c.key) for c in self.spec.columns))

"""
Schema data model.

A SheetSchema is what a schema provider knows about a sheet: logical field
names and the column index each one names. A FieldLayout is the resolved form
the projector works with, binding each name to the archive's actual column.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from xivextract.excel.fields import FieldKind


class ColumnOrder(Enum):
    """How schema field indices map onto the archive's column list."""

    # Index N is the N-th column in header order
    INDEX = "index"

    # Index N is the N-th column after sorting the header by byte offset
    OFFSET = "offset"


@dataclass(frozen=True)
class SchemaField:
    """One field as declared by a schema definition."""
    name: str
    index: int
    nested: bool = False  # repeated or grouped definitions


@dataclass(frozen=True)
class SheetSchema:
    """A provider's definition of one sheet for one game version."""
    sheet: str
    version: str
    fields: List[SchemaField]
    order: ColumnOrder = ColumnOrder.INDEX
    display_field: Optional[str] = None

    @property
    def is_flat(self) -> bool:
        return not any(f.nested for f in self.fields)


@dataclass(frozen=True)
class FieldDefinition:
    """A schema field bound to a concrete archive column."""
    name: str
    index: int        # accessor key for RowRecord.field()
    kind: FieldKind
    offset: int       # byte offset of the column inside the row


@dataclass
class FieldLayout:
    """Ordered, name-addressable field list for one sheet."""
    sheet: str
    fields: List[FieldDefinition]
    display_field: Optional[str] = None
    _by_name: Dict[str, FieldDefinition] = field(default_factory=dict, init=False, repr=False)

    def __post_init__(self):
        # First definition wins when a schema repeats a name
        for definition in self.fields:
            self._by_name.setdefault(definition.name, definition)

    def get(self, name: str) -> Optional[FieldDefinition]:
        return self._by_name.get(name)

    def __contains__(self, name: str) -> bool:
        return name in self._by_name

    def __iter__(self):
        return iter(self.fields)

    def __len__(self) -> int:
        return len(self.fields)

    @property
    def names(self) -> List[str]:
        return [f.name for f in self.fields]

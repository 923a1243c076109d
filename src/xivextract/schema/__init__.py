"""
xivextract.schema - Versioned sheet schemas

Schema providers read per-version sheet definitions from disk; the resolver
binds them to an archive's column lists.
"""

from xivextract.schema.models import (
    ColumnOrder,
    FieldDefinition,
    FieldLayout,
    SchemaField,
    SheetSchema,
)
from xivextract.schema.providers import (
    LATEST_ALIASES,
    DirectorySchemaProvider,
    MalformedDefinition,
    ExdSchemaProvider,
    SaintCoinachProvider,
    SchemaProvider,
    create_provider,
)
from xivextract.schema.resolver import SchemaResolver, build_layout

__all__ = [
    "ColumnOrder",
    "FieldDefinition",
    "FieldLayout",
    "SchemaField",
    "SheetSchema",
    "LATEST_ALIASES",
    "SchemaProvider",
    "DirectorySchemaProvider",
    "MalformedDefinition",
    "ExdSchemaProvider",
    "SaintCoinachProvider",
    "create_provider",
    "SchemaResolver",
    "build_layout",
]

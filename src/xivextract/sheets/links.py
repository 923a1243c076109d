"""
Cross-sheet links.

Merges columns of related sheets into a projected record, following the
LinkSpecs declared on the source sheet.
"""

import logging
from collections import OrderedDict

from xivextract.archive.base import ArchiveReader
from xivextract.errors import NoIndex
from xivextract.excel.fields import FieldValue
from xivextract.excel.rows import RowRecord
from xivextract.schema.models import FieldLayout
from xivextract.schema.resolver import SchemaResolver
from xivextract.sheets.projector import project_columns, read_named
from xivextract.sheets.registry import LinkSpec, SheetSpec

logger = logging.getLogger(__name__)


class LinkJoiner:
    """Evaluates a sheet's links against one source row at a time."""

    def __init__(self, archive: ArchiveReader, resolver: SchemaResolver):
        self.archive = archive
        self.resolver = resolver

    def join(self, row: RowRecord, layout: FieldLayout, spec: SheetSpec,
             result: "OrderedDict[str, FieldValue]") -> "OrderedDict[str, FieldValue]":
        """
        Apply every link of ``spec`` to ``result``, in declaration order.

        A link whose skip condition holds is left out without error. Keys
        pulled in by a later link replace the same keys from earlier ones.

        Raises:
            ColumnNotFound: a source or target column is missing
            NoIndex: a source key column is not numeric
            SheetNotFound, RowNotFound: the target row does not exist
        """
        for link in spec.links:
            if link.skip_if is not None:
                current = read_named(row, layout, link.skip_if.column)
                if link.skip_if.holds(current):
                    logger.debug(f"Skipping link {row.sheet} -> {link.sheet}: {link.skip_if.column} is {current}")
                    continue

            target_id = self.target_row_id(row, layout, link)
            target_row = self.archive.row(link.sheet, target_id)
            target_layout = self.resolver.layout(link.sheet)

            linked = project_columns(
                target_row,
                target_layout,
                ((c.source, c.target) for c in link.columns),
            )
            result.update(linked)

        return result

    @staticmethod
    def target_row_id(row: RowRecord, layout: FieldLayout, link: LinkSpec) -> int:
        """
        Resolve the id of the row a link points at.

        Raises:
            ColumnNotFound
            NoIndex: the key column holds text or a bool
        """
        if link.source.column is None:
            return row.row_id

        value = read_named(row, layout, link.source.column)
        target_id = value.to_u32()
        if target_id is None:
            raise NoIndex(row.sheet, link.source.column)
        return target_id

"""
Tests for cross-sheet links.
"""

from collections import OrderedDict

import pytest

from xivextract.errors import NoIndex, RowNotFound
from xivextract.excel import FieldKind, FieldValue
from xivextract.sheets import (
    Column,
    LinkColumn,
    LinkJoiner,
    LinkSource,
    LinkSpec,
    SheetKind,
    SheetSpec,
    SkipIf,
)


def join(game_archive, resolver, sheet, row_id, spec):
    layout = resolver.layout(sheet)
    row = game_archive.row(sheet, row_id)
    return LinkJoiner(game_archive, resolver).join(row, layout, spec, OrderedDict())


class TestLinks:
    """Pulling columns from related rows."""

    def test_same_id_link(self, game_archive, resolver):
        values = join(game_archive, resolver, "Action", 119, SheetKind.ACTION.spec)
        assert values["Description"].value == "Deals unaspected damage with a potency of 140."

    def test_field_link(self, game_archive, resolver):
        values = join(game_archive, resolver, "Action", 16533, SheetKind.ACTION.spec)
        assert values["ClassJobAbbreviation"] == FieldValue.string("WHM")

    def test_links_in_declared_order(self, game_archive, resolver):
        values = join(game_archive, resolver, "Action", 119, SheetKind.ACTION.spec)
        assert list(values) == ["Description", "ClassJobAbbreviation"]

    def test_later_link_overwrites_key(self, game_archive, resolver):
        """A key written by two links takes the later value but keeps its first position."""
        spec = SheetSpec(
            identifier="Name",
            columns=(Column("Name"),),
            links=(
                LinkSpec(
                    sheet="ClassJob",
                    source=LinkSource.field("ClassJob"),
                    columns=(LinkColumn("Name", "Summary"), LinkColumn("Abbreviation", "Abbr")),
                ),
                LinkSpec(
                    sheet="ActionTransient",
                    columns=(LinkColumn("Description", "Summary"),),
                ),
            ),
        )
        values = join(game_archive, resolver, "Action", 16533, spec)
        assert list(values) == ["Summary", "Abbr"]
        assert values["Summary"].value == "Deals unaspected damage with a potency of 290."
        assert values["Abbr"].value == "WHM"

    def test_skip_condition(self, game_archive, resolver):
        """Actions with ClassJob -1 have no ClassJob link."""
        values = join(game_archive, resolver, "Action", 7, SheetKind.ACTION.spec)
        assert "ClassJobAbbreviation" not in values
        assert values["Description"].value == "Attacks a target."

    def test_skip_on_zero_content_type(self, game_archive, resolver):
        values = join(game_archive, resolver, "ContentFinderCondition", 0,
                      SheetKind.CONTENT_FINDER_CONDITION.spec)
        assert "ContentTypeName" not in values

    def test_content_type_name(self, game_archive, resolver):
        values = join(game_archive, resolver, "ContentFinderCondition", 4,
                      SheetKind.CONTENT_FINDER_CONDITION.spec)
        assert values["ContentTypeName"].value == "Dungeons"

    def test_missing_target_row(self, game_archive, resolver):
        with pytest.raises(RowNotFound):
            join(game_archive, resolver, "Action", 20000, SheetKind.ACTION.spec)

    def test_skip_requires_same_kind(self):
        """A skip value only matches a cell of the same kind."""
        skip = SkipIf("ClassJob", FieldValue.integer(FieldKind.INT8, -1))
        assert skip.holds(FieldValue.integer(FieldKind.INT8, -1))
        assert not skip.holds(FieldValue.integer(FieldKind.INT16, -1))
        assert not skip.holds(FieldValue.integer(FieldKind.INT8, 0))


class TestTargetRowId:
    """Resolving the id a link points at."""

    def test_text_key_has_no_index(self, game_archive, resolver):
        spec = SheetSpec(
            identifier="Name",
            columns=(Column("Name"),),
            links=(LinkSpec(
                sheet="ClassJob",
                source=LinkSource.field("Name"),
                columns=(LinkColumn("Name", "JobName"),),
            ),),
        )
        with pytest.raises(NoIndex) as exc:
            join(game_archive, resolver, "Action", 119, spec)
        assert str(exc.value) == "Column Action::Name cannot be coerced to a u32"

    def test_negative_key_wraps(self, game_archive, resolver):
        """A -1 key with no skip condition looks up row 0xFFFFFFFF."""
        layout = resolver.layout("Action")
        row = game_archive.row("Action", 7)
        link = LinkSpec(sheet="ClassJob", source=LinkSource.field("ClassJob"),
                        columns=(LinkColumn("Name", "JobName"),))
        assert LinkJoiner.target_row_id(row, layout, link) == 0xFFFFFFFF

    def test_same_id(self, game_archive, resolver):
        layout = resolver.layout("Action")
        row = game_archive.row("Action", 120)
        link = LinkSpec(sheet="ActionTransient", source=LinkSource.ID, columns=())
        assert LinkJoiner.target_row_id(row, layout, link) == 120

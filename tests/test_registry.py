"""
Tests for the curated sheet registry.

Every column a spec names must exist in the schema the registry was written
against, or extraction of that sheet fails with ColumnNotFound.
"""

import pytest

from xivextract.excel import FieldKind
from xivextract.sheets import SheetKind, get_sheet_spec

GAME_VERSION = "2024.06.18.0000.0000"


def schema_names(provider, sheet):
    return {f.name for f in provider.schema(GAME_VERSION, sheet).fields}


class TestRegistryAgainstSchema:
    """Registry column names resolve in the fixture schemas."""

    @pytest.mark.parametrize("kind", list(SheetKind))
    def test_columns_exist(self, kind, exd_provider):
        names = schema_names(exd_provider, kind.sheet)
        missing = [c for c in kind.spec.column_names if c not in names]
        assert missing == []

    @pytest.mark.parametrize("kind", list(SheetKind))
    def test_identifier_and_search_columns_exist(self, kind, exd_provider):
        names = schema_names(exd_provider, kind.sheet)
        assert kind.spec.identifier in names
        assert all(c in names for c in kind.spec.search_columns)

    @pytest.mark.parametrize("kind", list(SheetKind))
    def test_link_columns_exist(self, kind, exd_provider):
        source_names = schema_names(exd_provider, kind.sheet)
        for link in kind.spec.links:
            target_names = schema_names(exd_provider, link.sheet)
            assert all(c.source in target_names for c in link.columns)
            if link.source.column is not None:
                assert link.source.column in source_names
            if link.skip_if is not None:
                assert link.skip_if.column in source_names


class TestLookup:

    def test_known_sheet(self):
        assert get_sheet_spec("Action") is SheetKind.ACTION.spec

    def test_unknown_sheet(self):
        assert get_sheet_spec("Item") is None

    def test_from_sheet(self):
        assert SheetKind.from_sheet("ContentFinderCondition") is SheetKind.CONTENT_FINDER_CONDITION
        assert SheetKind.from_sheet("Nothing") is None


class TestSpecs:
    """Shape of the curated specs."""

    def test_action_links(self):
        links = SheetKind.ACTION.spec.links
        assert [link.sheet for link in links] == ["ActionTransient", "ClassJob"]
        assert links[0].source.column is None
        assert links[1].source.column == "ClassJob"

    def test_action_skip_no_job(self):
        skip = SheetKind.ACTION.spec.links[1].skip_if
        assert skip.value.kind is FieldKind.INT8
        assert skip.value.value == -1

    def test_duty_code_alias(self):
        keys = [c.key for c in SheetKind.CONTENT_FINDER_CONDITION.spec.columns]
        assert "DutyCode" in keys
        assert "ShortCode" not in keys

"""
Known sheet registry.

Every sheet the extractor has curated output for is a member of SheetKind,
carrying its SheetSpec: which columns to print (optionally renamed), which
related sheets to pull extra columns from, and which columns a text search
looks at. Sheets without an entry are dumped whole.

Column names follow the schema naming of the game version the fixtures under
tests/fixtures/schemas are frozen at; test_registry checks them against it.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple

from xivextract.excel.fields import FieldKind, FieldValue


@dataclass(frozen=True)
class Column:
    """A projected column, optionally printed under another name."""
    name: str
    alias: Optional[str] = None

    @property
    def key(self) -> str:
        return self.alias or self.name


@dataclass(frozen=True)
class LinkSource:
    """
    How a link finds its target row.

    With no ``column`` the target row has the same id as the source row;
    otherwise the numeric value of ``column`` in the source row is the id.
    """
    column: Optional[str] = None

    @classmethod
    def field(cls, column: str) -> "LinkSource":
        return cls(column)


# Target row shares the source row's id
LinkSource.ID = LinkSource()


@dataclass(frozen=True)
class LinkColumn:
    """A column of the target sheet and the key it is printed under."""
    source: str
    target: str


@dataclass(frozen=True)
class SkipIf:
    """Skip a link when the source row's ``column`` equals ``value``."""
    column: str
    value: FieldValue

    def holds(self, actual: FieldValue) -> bool:
        return actual.kind is self.value.kind and actual.value == self.value.value


@dataclass(frozen=True)
class LinkSpec:
    """Pulls columns of a related sheet into a record."""
    sheet: str
    columns: Tuple[LinkColumn, ...]
    source: LinkSource = LinkSource.ID
    skip_if: Optional[SkipIf] = None


@dataclass(frozen=True)
class SheetSpec:
    """Curated output definition for one sheet."""
    identifier: str
    columns: Tuple[Column, ...]
    links: Tuple[LinkSpec, ...] = ()
    search_columns: Tuple[str, ...] = ()  # empty = every column

    @property
    def column_names(self) -> Tuple[str, ...]:
        return tuple(c.name for c in self.columns)


def _columns(*names: str) -> Tuple[Column, ...]:
    return tuple(Column(n) for n in names)


# =========================================================================
# Curated sheets
# =========================================================================

ACTION = SheetSpec(
    identifier="Name",
    columns=_columns(
        "Name",
        "Icon",
        "ActionCategory",
        "ClassJob",
        "ClassJobLevel",
        "IsRoleAction",
        "CanTargetSelf",
        "CanTargetParty",
        "CanTargetFriendly",
        "CanTargetHostile",
        "CanTargetDead",
        "TargetArea",
        "CastType",
        "BehaviourType",
        "Range",
        "EffectRange",
        "ActionCombo",
        "PreservesCombo",
        "Cast100ms",
        "Recast100ms",
        "CooldownGroup",
        "MaxCharges",
        "AttackType",
        "Aspect",
        "ClassJobCategory",
        "IsPlayerAction",
    ),
    links=(
        LinkSpec(
            sheet="ActionTransient",
            columns=(LinkColumn("Description", "Description"),),
        ),
        LinkSpec(
            sheet="ClassJob",
            source=LinkSource.field("ClassJob"),
            columns=(LinkColumn("Abbreviation", "ClassJobAbbreviation"),),
            # -1 marks actions that belong to no class or job
            skip_if=SkipIf("ClassJob", FieldValue.integer(FieldKind.INT8, -1)),
        ),
    ),
    search_columns=("Name",),
)

STATUS = SheetSpec(
    identifier="Name",
    columns=_columns(
        "Name",
        "Description",
        "Icon",
        "MaxStacks",
        "StatusCategory",
        "HitEffect",
        "Transfiguration",
        "IsGaze",
        "CanDispel",
        "InflictedByActor",
        "IsPermanent",
    ),
    search_columns=("Name", "Description"),
)

CONTENT_FINDER_CONDITION = SheetSpec(
    identifier="Name",
    columns=(
        Column("Name"),
        Column("NameShort"),
        Column("TerritoryType"),
        Column("ClassJobLevelRequired"),
        Column("ClassJobLevelSync"),
        Column("ItemLevelRequired"),
        Column("ItemLevelSync"),
        Column("AllowUndersized"),
        Column("AllowExplorerMode"),
        Column("HighEndDuty"),
        Column("ShortCode", alias="DutyCode"),
        Column("ContentType"),
        Column("Image"),
        Column("Icon"),
    ),
    links=(
        LinkSpec(
            sheet="ContentType",
            source=LinkSource.field("ContentType"),
            columns=(LinkColumn("Name", "ContentTypeName"),),
            skip_if=SkipIf("ContentType", FieldValue.integer(FieldKind.UINT8, 0)),
        ),
    ),
    search_columns=("Name", "ShortCode"),
)

CLASS_JOB = SheetSpec(
    identifier="Name",
    columns=_columns(
        "Name",
        "Abbreviation",
        "ClassJobCategory",
        "ClassJobParent",
        "JobIndex",
        "Role",
        "IsLimitedJob",
    ),
    search_columns=("Name", "Abbreviation"),
)


class SheetKind(Enum):
    """The closed set of sheets with curated output."""

    ACTION = ("Action", ACTION)
    STATUS = ("Status", STATUS)
    CONTENT_FINDER_CONDITION = ("ContentFinderCondition", CONTENT_FINDER_CONDITION)
    CLASS_JOB = ("ClassJob", CLASS_JOB)

    def __init__(self, sheet: str, spec: SheetSpec):
        self.sheet = sheet
        self.spec = spec

    @classmethod
    def from_sheet(cls, sheet: str) -> Optional["SheetKind"]:
        return _BY_SHEET.get(sheet)


_BY_SHEET: Dict[str, SheetKind] = {kind.sheet: kind for kind in SheetKind}


def get_sheet_spec(sheet: str) -> Optional[SheetSpec]:
    """Get the curated spec for a sheet, or None if it is dumped whole."""
    kind = SheetKind.from_sheet(sheet)
    return kind.spec if kind else None

"""
Pytest configuration and shared fixtures.
"""

import struct
import sys
from pathlib import Path

import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from xivextract.archive import Language, MemoryArchive
from xivextract.archive.exd import (
    COLUMN,
    EXD_HEADER,
    EXD_MAGIC,
    EXH_HEADER,
    EXH_MAGIC,
    INDEX_ENTRY,
    PAGE,
    ROW_HEADER,
)
from xivextract.excel import ColumnKind, FieldKind, FieldValue, RawColumn
from xivextract.extractor import Extractor
from xivextract.icons.texture import TEX_HEADER, TextureFormat
from xivextract.schema import ExdSchemaProvider, SaintCoinachProvider, SchemaResolver

GAME_VERSION = "2024.06.18.0000.0000"


# =============================================================================
# SHEET DEFINITIONS
# =============================================================================
# Column order here matches tests/fixtures/schemas/<GAME_VERSION>/<Sheet>.yml.

SHEET_COLUMNS = {
    "Action": [
        ("Name", ColumnKind.STRING),
        ("Icon", ColumnKind.UINT16),
        ("VFX", ColumnKind.UINT16),
        ("ActionCategory", ColumnKind.UINT8),
        ("ClassJob", ColumnKind.INT8),
        ("ClassJobLevel", ColumnKind.UINT8),
        ("IsRoleAction", ColumnKind.BOOL),
        ("CanTargetSelf", ColumnKind.BOOL),
        ("CanTargetParty", ColumnKind.BOOL),
        ("CanTargetFriendly", ColumnKind.BOOL),
        ("CanTargetHostile", ColumnKind.BOOL),
        ("CanTargetDead", ColumnKind.BOOL),
        ("TargetArea", ColumnKind.BOOL),
        ("CastType", ColumnKind.UINT8),
        ("BehaviourType", ColumnKind.UINT8),
        ("Range", ColumnKind.INT8),
        ("EffectRange", ColumnKind.UINT8),
        ("ActionCombo", ColumnKind.UINT32),
        ("PreservesCombo", ColumnKind.BOOL),
        ("Cast100ms", ColumnKind.UINT16),
        ("Recast100ms", ColumnKind.UINT16),
        ("CooldownGroup", ColumnKind.UINT8),
        ("MaxCharges", ColumnKind.UINT8),
        ("AttackType", ColumnKind.INT8),
        ("Aspect", ColumnKind.UINT8),
        ("ClassJobCategory", ColumnKind.UINT8),
        ("IsPlayerAction", ColumnKind.BOOL),
    ],
    "ActionTransient": [
        ("Description", ColumnKind.STRING),
    ],
    "ClassJob": [
        ("Name", ColumnKind.STRING),
        ("Abbreviation", ColumnKind.STRING),
        ("ClassJobCategory", ColumnKind.UINT8),
        ("ClassJobParent", ColumnKind.UINT8),
        ("JobIndex", ColumnKind.INT8),
        ("Role", ColumnKind.UINT8),
        ("IsLimitedJob", ColumnKind.BOOL),
    ],
    "Status": [
        ("Name", ColumnKind.STRING),
        ("Description", ColumnKind.STRING),
        ("Icon", ColumnKind.UINT32),
        ("MaxStacks", ColumnKind.UINT8),
        ("StatusCategory", ColumnKind.UINT8),
        ("HitEffect", ColumnKind.UINT8),
        ("Transfiguration", ColumnKind.UINT16),
        ("IsGaze", ColumnKind.BOOL),
        ("CanDispel", ColumnKind.BOOL),
        ("InflictedByActor", ColumnKind.BOOL),
        ("IsPermanent", ColumnKind.BOOL),
    ],
    "ContentFinderCondition": [
        ("Name", ColumnKind.STRING),
        ("NameShort", ColumnKind.STRING),
        ("TerritoryType", ColumnKind.UINT16),
        ("ClassJobLevelRequired", ColumnKind.UINT8),
        ("ClassJobLevelSync", ColumnKind.UINT8),
        ("ItemLevelRequired", ColumnKind.UINT16),
        ("ItemLevelSync", ColumnKind.UINT16),
        ("AllowUndersized", ColumnKind.BOOL),
        ("AllowExplorerMode", ColumnKind.BOOL),
        ("HighEndDuty", ColumnKind.BOOL),
        ("ShortCode", ColumnKind.STRING),
        ("ContentType", ColumnKind.UINT8),
        ("Image", ColumnKind.UINT32),
        ("Icon", ColumnKind.UINT32),
    ],
    "ContentType": [
        ("Name", ColumnKind.STRING),
        ("Icon", ColumnKind.UINT32),
    ],
    "Item": [
        ("Singular", ColumnKind.STRING),
        ("Name", ColumnKind.STRING),
        ("Description", ColumnKind.STRING),
        ("Level", ColumnKind.UINT16),
        ("BaseParam[0]", ColumnKind.UINT8),
        ("BaseParam[1]", ColumnKind.UINT8),
    ],
    "Quest": [
        ("Name", ColumnKind.STRING),
        ("Instruction0", ColumnKind.STRING),
        ("Argument0", ColumnKind.UINT32),
        ("Instruction1", ColumnKind.STRING),
        ("Argument1", ColumnKind.UINT32),
    ],
}


SHEET_ROWS = {
    "Action": {
        7: {"Name": "attack", "ClassJob": -1, "CanTargetHostile": True, "Range": -1,
            "ClassJobCategory": 1, "IsPlayerAction": True},
        119: {"Name": "Stone", "Icon": 405, "ActionCategory": 2, "ClassJob": 6, "ClassJobLevel": 1,
              "CanTargetHostile": True, "Range": 25, "Cast100ms": 15, "Recast100ms": 25,
              "CooldownGroup": 58, "MaxCharges": 0, "AttackType": 5, "Aspect": 7,
              "ClassJobCategory": 6, "IsPlayerAction": True},
        120: {"Name": "Cure", "Icon": 406, "ActionCategory": 2, "ClassJob": 6, "ClassJobLevel": 2,
              "CanTargetSelf": True, "CanTargetParty": True, "CanTargetFriendly": True,
              "Range": 30, "Cast100ms": 15, "Recast100ms": 25, "ClassJobCategory": 6,
              "IsPlayerAction": True},
        7531: {"Name": "Rampart", "ClassJob": -1, "ClassJobLevel": 8, "IsRoleAction": True,
               "CanTargetSelf": True, "Recast100ms": 900, "ClassJobCategory": 113,
               "IsPlayerAction": True},
        7541: {"Name": "Second Wind", "ClassJob": -1, "ClassJobLevel": 8, "IsRoleAction": True,
               "CanTargetSelf": True, "Recast100ms": 1200, "ClassJobCategory": 161,
               "IsPlayerAction": True},
        7561: {"Name": "Swiftcast", "ClassJob": -1, "ClassJobLevel": 18, "IsRoleAction": True,
               "CanTargetSelf": True, "Recast100ms": 600, "ClassJobCategory": 120,
               "IsPlayerAction": True},
        7571: {"Name": "Rescue", "ClassJob": -1, "ClassJobLevel": 48, "IsRoleAction": True,
               "CanTargetParty": True, "Recast100ms": 1200, "ClassJobCategory": 117,
               "IsPlayerAction": True},
        16533: {"Name": "Glare", "ClassJob": 24, "ClassJobLevel": 72, "CanTargetHostile": True,
                "Range": 25, "Cast100ms": 15, "Recast100ms": 25, "ClassJobCategory": 25,
                "IsPlayerAction": True},
        20000: {"Name": "Broken Link", "ClassJob": 99},
    },
    "ActionTransient": {
        7: {"Description": "Attacks a target."},
        119: {"Description": "Deals unaspected damage with a potency of 140."},
        120: {"Description": "Restores target's HP.\nCure Potency: 500"},
        7531: {"Description": "Reduces damage taken by 20%."},
        7541: {"Description": "Instantly restores own HP."},
        7561: {"Description": "Next spell is cast immediately."},
        7571: {"Description": "Draws target party member to your side."},
        16533: {"Description": "Deals unaspected damage with a potency of 290."},
        20000: {"Description": ""},
    },
    "ClassJob": {
        0: {"Name": "adventurer", "Abbreviation": "ADV", "ClassJobCategory": 30, "JobIndex": -1},
        1: {"Name": "gladiator", "Abbreviation": "GLA", "ClassJobCategory": 30,
            "ClassJobParent": 1, "JobIndex": -1, "Role": 1},
        6: {"Name": "conjurer", "Abbreviation": "CNJ", "ClassJobCategory": 31,
            "ClassJobParent": 6, "JobIndex": -1, "Role": 4},
        19: {"Name": "paladin", "Abbreviation": "PLD", "ClassJobCategory": 30,
             "ClassJobParent": 1, "JobIndex": 1, "Role": 1},
        24: {"Name": "white mage", "Abbreviation": "WHM", "ClassJobCategory": 31,
             "ClassJobParent": 6, "JobIndex": 6, "Role": 4},
    },
    "Status": {
        1: {"Name": "Petrification", "Description": "Stone-like rigidity is preventing all actions.",
            "Icon": 215001, "MaxStacks": 0, "StatusCategory": 2, "IsGaze": True, "CanDispel": True},
        158: {"Name": "Regen", "Description": "Regenerating HP over time.", "Icon": 212502,
              "StatusCategory": 1, "InflictedByActor": True},
        159: {"Name": "Protect", "Description": "Damage taken is reduced.", "Icon": 210503,
              "StatusCategory": 1, "IsPermanent": False},
        160: {"Name": "Medica II", "Description": "Regen effect from Medica II.", "Icon": 212502,
              "StatusCategory": 1},
    },
    "ContentFinderCondition": {
        0: {"Name": ""},
        4: {"Name": "Sastasha", "NameShort": "", "TerritoryType": 1036, "ClassJobLevelRequired": 15,
            "ClassJobLevelSync": 16, "ShortCode": "d01", "ContentType": 2, "Image": 112001,
            "Icon": 61801},
        30: {"Name": "the \"Unending\" Coil", "ShortCode": "r05", "ContentType": 5,
             "HighEndDuty": True, "AllowUndersized": False, "Icon": 61802},
    },
    "ContentType": {
        2: {"Name": "Dungeons", "Icon": 61801},
        5: {"Name": "Raids", "Icon": 61802},
    },
    "Item": {
        1: {"Singular": "gil", "Name": "Gil", "Description": "The currency of Eorzea.", "Level": 1},
        4551: {"Singular": "potion", "Name": "Potion", "Description": "Restores HP.", "Level": 1,
               "BaseParam[0]": 1, "BaseParam[1]": 2},
    },
    "Quest": {
        65536: {"Name": "Close to Home"},
    },
}


def make_cell(kind: ColumnKind, value) -> FieldValue:
    """Build a FieldValue for a column, defaulting missing values to zero/empty."""
    field_kind = kind.field_kind
    if field_kind is FieldKind.STRING:
        return FieldValue.string(value or "")
    if field_kind is FieldKind.BOOL:
        return FieldValue.boolean(bool(value))
    if field_kind is FieldKind.FLOAT32:
        return FieldValue.float32(value or 0.0)
    return FieldValue.integer(field_kind, value or 0)


def add_sheet(archive: MemoryArchive, name: str, columns, rows) -> None:
    """
    Add a sheet to a MemoryArchive.

    ``columns`` is a list of (name, ColumnKind); each column is laid out after
    the previous one. ``rows`` maps row id to {column name: value}.
    """
    raw_columns = []
    offset = 0
    for _, kind in columns:
        raw_columns.append(RawColumn(kind, offset))
        offset += struct.calcsize(kind.struct_format)

    built = {}
    for row_id, values in rows.items():
        built[row_id] = [make_cell(kind, values.get(column)) for column, kind in columns]
    archive.add_sheet(name, raw_columns, built)


# =============================================================================
# PATH FIXTURES
# =============================================================================

@pytest.fixture
def fixtures_dir():
    """Path to test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def schema_dir(fixtures_dir):
    """Root of the EXDSchema fixture definitions."""
    return fixtures_dir / "schemas"


@pytest.fixture
def saintcoinach_dir(fixtures_dir):
    """Root of the SaintCoinach fixture definitions."""
    return fixtures_dir / "saintcoinach"


# =============================================================================
# ARCHIVE FIXTURES
# =============================================================================

@pytest.fixture
def sheet_builder():
    """The add_sheet helper, for tests that build their own sheets."""
    return add_sheet


@pytest.fixture
def game_archive():
    """MemoryArchive holding every fixture sheet."""
    archive = MemoryArchive(GAME_VERSION)
    for name, columns in SHEET_COLUMNS.items():
        add_sheet(archive, name, columns, SHEET_ROWS[name])
    return archive


@pytest.fixture
def exd_provider(schema_dir):
    return ExdSchemaProvider(schema_dir)


@pytest.fixture
def saintcoinach_provider(saintcoinach_dir):
    return SaintCoinachProvider(saintcoinach_dir)


@pytest.fixture
def resolver(exd_provider, game_archive):
    return SchemaResolver(exd_provider, game_archive)


@pytest.fixture
def extractor(game_archive, exd_provider):
    return Extractor(game_archive, exd_provider)


# =============================================================================
# GAME FILE BUILDERS
# =============================================================================

def build_exh(columns, pages, languages, fixed_size, variant=1) -> bytes:
    """Build .exh bytes. ``columns`` is (kind, offset) pairs, ``pages`` is (start, count) pairs."""
    row_count = sum(count for _, count in pages)
    data = EXH_HEADER.pack(
        EXH_MAGIC, 3, fixed_size, len(columns), len(pages), len(languages),
        0, 0, variant, 0, row_count,
    )
    for kind, offset in columns:
        data += COLUMN.pack(int(kind), offset)
    for start, count in pages:
        data += PAGE.pack(start, count)
    for language in languages:
        data += bytes([int(language), 0])
    return data


def build_exd(rows) -> bytes:
    """Build .exd bytes from {row id: row data block}."""
    index_size = len(rows) * INDEX_ENTRY.size
    base = EXD_HEADER.size + index_size
    index = b""
    body = b""
    for row_id, block in sorted(rows.items()):
        index += INDEX_ENTRY.pack(row_id, base + len(body))
        body += ROW_HEADER.pack(len(block), 1) + block
    return EXD_HEADER.pack(EXD_MAGIC, 2, 0, index_size, len(body)) + index + body


def build_tex(format_tag: int, width: int, height: int, payload: bytes) -> bytes:
    """Build a single-mip .tex file."""
    surfaces = [TEX_HEADER.size] + [0] * 12
    return TEX_HEADER.pack(0, format_tag, width, height, 1, 1, 0, 0, 0, *surfaces) + payload


# Spell sheet: Name (string), Level (u16), IsAoE/IsInstant (packed bools), Speed (f32)
SPELL_COLUMNS = [
    (ColumnKind.STRING, 0),
    (ColumnKind.UINT16, 4),
    (ColumnKind.PACKED_BOOL0, 6),
    (ColumnKind.PACKED_BOOL2, 6),
    (ColumnKind.FLOAT32, 8),
]
SPELL_FIXED_SIZE = 12


def spell_row(name: bytes, level: int, flags: int, speed: float) -> bytes:
    return struct.pack(">IHBxf", 0, level, flags, speed) + name + b"\x00"


SPELL_ROWS = {
    0: spell_row(b"Fire", 2, 0b000, 2.5),
    1: spell_row(b"Fira", 26, 0b001, 2.5),
    2: spell_row(b"Blizzard", 1, 0b100, 0.1),
    3: spell_row(b"Fire\x02\x10\x01\x03Line two", 40, 0b101, 0.0),
}

SPELL_SCHEMA = """\
name: Spell
displayField: Name
fields:
  - name: Name
  - name: Level
  - name: IsAoE
  - name: IsInstant
  - name: Speed
"""

WHITE_BC1_BLOCK = b"\xff\xff\x00\x00\x00\x00\x00\x00"


@pytest.fixture
def loose_game_dir(tmp_path):
    """
    A directory of extracted game files: the Spell sheet (English) and
    icon 405 as a 4x4 white DXT1 texture.
    """
    game = tmp_path / "game"
    (game / "exd").mkdir(parents=True)
    (game / "ffxivgame.ver").write_text(GAME_VERSION + "\n", encoding="ascii")
    (game / "exd" / "Spell.exh").write_bytes(
        build_exh(SPELL_COLUMNS, [(0, 4)], [Language.ENGLISH], SPELL_FIXED_SIZE)
    )
    (game / "exd" / "Spell_0_en.exd").write_bytes(build_exd(SPELL_ROWS))

    icon_dir = game / "ui" / "icon" / "000000"
    icon_dir.mkdir(parents=True)
    (icon_dir / "000405_hr1.tex").write_bytes(
        build_tex(TextureFormat.DXT1, 4, 4, WHITE_BC1_BLOCK)
    )
    return game


@pytest.fixture
def loose_schema_dir(tmp_path):
    """EXDSchema definitions for the Spell sheet."""
    root = tmp_path / "schemas"
    (root / GAME_VERSION).mkdir(parents=True)
    (root / GAME_VERSION / "Spell.yml").write_text(SPELL_SCHEMA, encoding="utf-8")
    return root

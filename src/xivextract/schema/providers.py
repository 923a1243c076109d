"""
Schema providers.

Schemas are read from a local directory laid out as

    <root>/<game version>/<Sheet>.json    (SaintCoinach definitions)
    <root>/<game version>/<Sheet>.yml     (EXDSchema definitions)

Fetching or refreshing that directory from upstream is not handled here; a
provider only reads what is on disk. ``refresh=True`` drops the in-process
copy of a sheet and reads it from disk again.

Both formats allow repeated and grouped definitions. They are flattened into
indexed names (``Name[0]``, ``Name[1]``, ``Group[0].Member``) so the resolved
layout is always a flat list of named columns.
"""

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml

from xivextract.errors import SheetNotFound, VersionNotFound
from xivextract.schema.models import ColumnOrder, SchemaField, SheetSchema

logger = logging.getLogger(__name__)

# Version identifiers that select the newest schema available
LATEST_ALIASES = ("HEAD", "latest")


class UnsupportedDefinition(ValueError):
    """A definition uses a structure the flattener does not understand."""


class MalformedDefinition(ValueError):
    """A definition is missing a required key or has the wrong shape."""


class SchemaProvider(ABC):
    """Supplies per-version sheet schemas."""

    @abstractmethod
    def schema(self, version: str, sheet: str, refresh: bool = False) -> SheetSchema:
        """
        Get the schema of ``sheet`` for game ``version``.

        Raises:
            VersionNotFound: no schema exists for the version
            SheetNotFound: the version's schema has no such sheet
        """

    @abstractmethod
    def versions(self) -> List[str]:
        """All versions this provider has schemas for, oldest first."""


class DirectorySchemaProvider(SchemaProvider):
    """Base class for providers backed by one file per sheet."""

    suffixes: Tuple[str, ...] = ()
    order: ColumnOrder = ColumnOrder.INDEX

    def __init__(self, root: Path):
        self.root = Path(root)
        self._cache: Dict[Tuple[str, str], SheetSchema] = {}

    def versions(self) -> List[str]:
        if not self.root.is_dir():
            return []
        return sorted(p.name for p in self.root.iterdir() if p.is_dir())

    def resolve_version(self, version: str) -> str:
        """Map a version identifier (or a latest alias) to a schema directory name."""
        if version in LATEST_ALIASES:
            available = self.versions()
            if not available:
                raise VersionNotFound(version)
            return available[-1]
        if not (self.root / version).is_dir():
            raise VersionNotFound(version)
        return version

    def schema(self, version: str, sheet: str, refresh: bool = False) -> SheetSchema:
        resolved = self.resolve_version(version)
        key = (resolved, sheet)

        if not refresh and key in self._cache:
            return self._cache[key]

        path = self._find_sheet_file(self.root / resolved, sheet)
        if path is None:
            raise SheetNotFound(sheet)

        logger.debug(f"Loading schema for {sheet} from {path}")
        with open(path, "r", encoding="utf-8") as f:
            text = f.read()

        schema = self.parse(sheet, resolved, text)
        self._cache[key] = schema
        return schema

    def _find_sheet_file(self, version_dir: Path, sheet: str) -> Optional[Path]:
        for suffix in self.suffixes:
            candidate = version_dir / f"{sheet}{suffix}"
            if candidate.is_file():
                return candidate
        return None

    @abstractmethod
    def parse(self, sheet: str, version: str, text: str) -> SheetSchema:
        """Parse one sheet definition file."""


# =========================================================================
# SaintCoinach (index-ordered JSON)
# =========================================================================

class SaintCoinachProvider(DirectorySchemaProvider):
    """
    Reads SaintCoinach-style JSON definitions.

    Each definition names the header column it describes through ``index``
    (0 when omitted), so columns are addressed in header order.

        {
          "sheet": "Action",
          "defaultColumn": "Name",
          "definitions": [
            {"name": "Name"},
            {"index": 2, "name": "Icon"},
            {"index": 3, "type": "repeat", "count": 2, "definition": {"name": "Cost"}}
          ]
        }
    """

    suffixes = (".json",)
    order = ColumnOrder.INDEX

    def parse(self, sheet: str, version: str, text: str) -> SheetSchema:
        try:
            data = json.loads(text)
        except ValueError as e:
            raise MalformedDefinition(f"invalid JSON in {sheet} ({version}): {e}") from e
        definitions = data.get("definitions") if isinstance(data, dict) else None
        if not isinstance(definitions, list):
            return SheetSchema(sheet, version, [SchemaField(sheet, 0, nested=True)], self.order)

        fields: List[SchemaField] = []
        try:
            for definition in definitions:
                index = definition.get("index", 0)
                fields.extend(self._flatten(definition, index, ""))
        except UnsupportedDefinition as e:
            logger.debug(f"Schema for {sheet} is not flat: {e}")
            return SheetSchema(sheet, version, [SchemaField(sheet, 0, nested=True)], self.order)
        except (KeyError, TypeError, AttributeError) as e:
            raise MalformedDefinition(f"bad definition in {sheet} ({version}): {e!r}") from e

        return SheetSchema(
            sheet=sheet,
            version=version,
            fields=fields,
            order=self.order,
            display_field=data.get("defaultColumn"),
        )

    def _flatten(self, definition: Dict[str, Any], index: int, suffix: str) -> List[SchemaField]:
        kind = definition.get("type")

        if kind is None:
            name = definition.get("name")
            if not name:
                return []
            return [SchemaField(f"{name}{suffix}", index)]

        if kind == "repeat":
            inner = definition["definition"]
            size = self._size(inner)
            result = []
            for i in range(definition["count"]):
                result.extend(self._flatten(inner, index + i * size, f"{suffix}[{i}]"))
            return result

        if kind == "group":
            result = []
            for member in definition["members"]:
                result.extend(self._flatten(member, index, suffix))
                index += self._size(member)
            return result

        raise UnsupportedDefinition(f"unknown definition type {kind!r}")

    def _size(self, definition: Dict[str, Any]) -> int:
        kind = definition.get("type")
        if kind is None:
            return 1
        if kind == "repeat":
            return definition["count"] * self._size(definition["definition"])
        if kind == "group":
            return sum(self._size(m) for m in definition["members"])
        raise UnsupportedDefinition(f"unknown definition type {kind!r}")


# =========================================================================
# EXDSchema (offset-ordered YAML)
# =========================================================================

class ExdSchemaProvider(DirectorySchemaProvider):
    """
    Reads EXDSchema-style YAML definitions.

    Fields are listed in order with no explicit index; the N-th field names
    the N-th column once the header's columns are sorted by byte offset.

        name: Action
        displayField: Name
        fields:
          - name: Name
          - name: Icon
            type: icon
          - name: Cost
            type: array
            count: 2
    """

    suffixes = (".yml", ".yaml")
    order = ColumnOrder.OFFSET

    SCALAR_TYPES = frozenset({"scalar", "link", "icon", "modelId", "color"})

    def parse(self, sheet: str, version: str, text: str) -> SheetSchema:
        data = yaml.safe_load(text)
        raw_fields = data.get("fields") if isinstance(data, dict) else None
        if not isinstance(raw_fields, list):
            return SheetSchema(sheet, version, [SchemaField(sheet, 0, nested=True)], self.order)

        fields: List[SchemaField] = []
        index = 0
        try:
            for raw in raw_fields:
                fields.extend(self._flatten(raw, index, ""))
                index += self._size(raw)
        except UnsupportedDefinition as e:
            logger.debug(f"Schema for {sheet} is not flat: {e}")
            return SheetSchema(sheet, version, [SchemaField(sheet, 0, nested=True)], self.order)
        except (KeyError, TypeError, AttributeError) as e:
            raise MalformedDefinition(f"bad field in {sheet} ({version}): {e!r}") from e

        return SheetSchema(
            sheet=sheet,
            version=version,
            fields=fields,
            order=self.order,
            display_field=data.get("displayField"),
        )

    def _flatten(self, raw: Dict[str, Any], index: int, prefix: str) -> List[SchemaField]:
        kind = raw.get("type", "scalar")
        name = raw.get("name") or f"Unknown{index}"

        if kind in self.SCALAR_TYPES:
            return [SchemaField(f"{prefix}{name}", index)]

        if kind == "array":
            members = raw.get("fields")
            result = []
            if not members:
                for i in range(raw["count"]):
                    result.append(SchemaField(f"{prefix}{name}[{i}]", index + i))
                return result

            size = sum(self._size(m) for m in members)
            for i in range(raw["count"]):
                position = index + i * size
                for member in members:
                    if member.get("name"):
                        result.extend(self._flatten(member, position, f"{prefix}{name}[{i}]."))
                    else:
                        # Unnamed single member: the element itself
                        result.append(SchemaField(f"{prefix}{name}[{i}]", position))
                    position += self._size(member)
            return result

        raise UnsupportedDefinition(f"unknown field type {kind!r}")

    def _size(self, raw: Dict[str, Any]) -> int:
        kind = raw.get("type", "scalar")
        if kind in self.SCALAR_TYPES:
            return 1
        if kind == "array":
            members = raw.get("fields")
            element = sum(self._size(m) for m in members) if members else 1
            return raw["count"] * element
        raise UnsupportedDefinition(f"unknown field type {kind!r}")


PROVIDERS = {
    "saintcoinach": SaintCoinachProvider,
    "exdschema": ExdSchemaProvider,
}


def create_provider(schema_format: str, root: Path) -> DirectorySchemaProvider:
    """Build a provider by format name ("exdschema" or "saintcoinach")."""
    try:
        provider_class = PROVIDERS[schema_format.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown schema format {schema_format!r}; expected one of {', '.join(PROVIDERS)}"
        ) from None
    return provider_class(root)

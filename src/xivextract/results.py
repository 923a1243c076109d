"""
Result types returned by the Extractor.

Each one has a ``write(out, pretty)`` method, so the CLI writes any of them
the same way. Icons write PNG bytes; everything else writes text.
"""

from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Any, BinaryIO, List, Optional, TextIO, Union

from xivextract.excel.fields import FieldValue
from xivextract.icons.encoder import encode_png
from xivextract.render import Renderable, camel_key, field_to_json, fields_to_json


@dataclass
class Record(Renderable):
    """One projected row, with linked columns merged in."""
    sheet: str
    row_id: int
    values: "OrderedDict[str, FieldValue]" = field(default_factory=OrderedDict)

    def __getitem__(self, key: str) -> FieldValue:
        return self.values[key]

    def __contains__(self, key: str) -> bool:
        return key in self.values

    def keys(self) -> List[str]:
        return list(self.values)

    def to_json(self) -> Any:
        return fields_to_json(self.values)


@dataclass(frozen=True)
class SearchMatch:
    """
    A row matched by a text search.

    ``column``/``value`` name the matching column when it is not the sheet's
    identifier column.
    """
    row_id: int
    name: FieldValue
    column: Optional[str] = None
    value: Optional[FieldValue] = None

    def to_json(self) -> Any:
        data: "OrderedDict[str, Any]" = OrderedDict()
        data["id"] = self.row_id
        data["name"] = field_to_json(self.name)
        if self.column is not None and self.value is not None:
            data["match"] = OrderedDict([(camel_key(self.column), field_to_json(self.value))])
        return data


@dataclass
class SearchResults(Renderable):
    sheet: str
    query: str
    matches: List[SearchMatch] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.matches)

    def __iter__(self):
        return iter(self.matches)

    @property
    def row_ids(self) -> List[int]:
        return [m.row_id for m in self.matches]

    def to_json(self) -> Any:
        return [m.to_json() for m in self.matches]


@dataclass
class ActionList(Renderable):
    """Action row ids, or action names when names were requested."""
    items: List[Union[int, str]] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.items)

    def to_json(self) -> Any:
        return list(self.items)


@dataclass
class Icon:
    """A decoded icon; written out as a PNG file."""
    icon_id: int
    path: str
    width: int
    height: int
    rgba: bytes

    def png(self) -> bytes:
        return encode_png(self.rgba, self.width, self.height)

    def write(self, out: BinaryIO, pretty: bool = False) -> None:
        out.write(self.png())


@dataclass
class GameVersion:
    """A game version string, written as a single line of text."""
    version: str

    def write(self, out: TextIO, pretty: bool = False) -> None:
        out.write(self.version + "\n")

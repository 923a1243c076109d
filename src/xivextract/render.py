"""
Text rendering of extraction results.

Two forms are produced: compact (no insignificant whitespace) and pretty
(two-space indentation). Both end with a newline. Strings are JSON-escaped,
so new lines and double quotes come out as ``\\n`` and ``\\"``; non-ASCII text
is written as-is.
"""

import json
import math
from abc import ABC, abstractmethod
from collections import OrderedDict
from typing import Any, Mapping, TextIO

from xivextract.excel.fields import FieldKind, FieldValue

INDENT = 2


def camel_key(key: str) -> str:
    """Lower-case the first character of an output key."""
    if not key:
        return key
    return key[0].lower() + key[1:]


def field_to_json(value: FieldValue) -> Any:
    """
    Convert a FieldValue to the plain Python value json renders natively.

    JSON has no NaN or infinity, so non-finite floats become the strings
    "NaN", "Infinity" and "-Infinity".
    """
    if value.kind is FieldKind.BOOL:
        return bool(value.value)
    if value.kind is FieldKind.FLOAT32 and not math.isfinite(value.value):
        if math.isnan(value.value):
            return "NaN"
        return "Infinity" if value.value > 0 else "-Infinity"
    return value.value


def fields_to_json(values: Mapping[str, FieldValue]) -> "OrderedDict[str, Any]":
    """Convert an ordered name -> value mapping, camel-casing the keys."""
    return OrderedDict((camel_key(k), field_to_json(v)) for k, v in values.items())


def dumps(data: Any, pretty: bool = False) -> str:
    """Render plain data in compact or pretty form, with a trailing newline."""
    if pretty:
        text = json.dumps(data, ensure_ascii=False, indent=INDENT)
    else:
        text = json.dumps(data, ensure_ascii=False, separators=(",", ":"))
    return text + "\n"


def render_field(value: FieldValue) -> str:
    """Render a single value without a trailing newline."""
    return json.dumps(field_to_json(value), ensure_ascii=False)


class Renderable(ABC):
    """A result that can be written in compact or pretty form."""

    @abstractmethod
    def to_json(self) -> Any:
        """Plain-data form of the result."""

    def render(self, pretty: bool = False) -> str:
        return dumps(self.to_json(), pretty=pretty)

    def write(self, out: TextIO, pretty: bool = False) -> None:
        out.write(self.render(pretty=pretty))

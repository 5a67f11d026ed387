"""Column descriptors and per-type cell parsers for Athena result sets.

Athena returns every cell as text. Each column reported in the result set
metadata is bound once to a parser kind, and every cell of that column is
converted through the parser registered for that kind.
"""

import json
import math
import re
from dataclasses import dataclass
from datetime import datetime, tzinfo
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from dateutil import parser as date_parser
from dateutil import tz

from .exceptions import (
    InvalidDateError,
    InvalidJsonError,
    InvalidNumberError,
    UnsupportedColumnTypeError,
)

Number = Union[int, float]

# Athena spellings accepted as boolean true; anything else is false
TRUE_VALUES = frozenset({"true", "TRUE", "t", "T", "yes", "YES", "1"})

ARRAY_SEPARATOR = ", "

# Missing date fields are filled from here, never from today
DEFAULT_DATE = datetime(1970, 1, 1)

# Zone ID after a timestamp, e.g. "UTC" or "America/New_York"
ZONE_SUFFIX = re.compile(
    r"^(?P<moment>.*\S)\s+(?P<zone>[A-Za-z][A-Za-z0-9_+-]*(?:/[A-Za-z0-9_+-]+)*)$"
)

INFINITY_SPELLINGS = frozenset({"Infinity", "+Infinity", "-Infinity"})


class ColumnType(str, Enum):
    """Column type tags reported by Athena in ResultSetMetadata."""

    INTEGER = "integer"
    TINYINT = "tinyint"
    SMALLINT = "smallint"
    BIGINT = "bigint"
    FLOAT = "float"
    DOUBLE = "double"
    DECIMAL = "decimal"
    CHAR = "char"
    VARCHAR = "varchar"
    STRING = "string"
    BOOLEAN = "boolean"
    DATE = "date"
    TIMESTAMP = "timestamp"
    TIMESTAMP_WITH_TZ = "timestamp with time zone"
    ARRAY = "array"
    JSON = "json"
    BINARY = "binary"
    MAP = "map"
    STRUCT = "struct"


class ParserKind(Enum):
    """Conversion applied to the cells of a column."""

    NUMBER = "number"
    STRING = "string"
    BOOLEAN = "boolean"
    DATE = "date"
    ARRAY = "array"
    JSON = "json"


def _to_number(value: str) -> Optional[Number]:
    """Return value as int or float, or None when it is not numeric."""
    if not isinstance(value, str) or "_" in value:
        return None

    try:
        return int(value)
    except ValueError:
        pass

    try:
        result = float(value)
    except ValueError:
        return None

    if math.isnan(result):
        return None
    if math.isinf(result) and value.strip() not in INFINITY_SPELLINGS:
        return None
    return result


def split_zone(value: str) -> Tuple[str, Optional[tzinfo]]:
    """Separate a trailing zone ID from a timestamp.

    Returns the timestamp text and the resolved zone. When there is no
    suffix, or it does not name a known zone, the text comes back whole
    with no zone.
    """
    match = ZONE_SUFFIX.match(value.strip()) if isinstance(value, str) else None
    if match:
        zone = tz.gettz(match.group("zone"))
        if zone is not None:
            return match.group("moment"), zone
    return value, None


def parse_number(value: str) -> Number:
    """Parse an Athena numeric cell.

    Raises:
        InvalidNumberError: If the text is not numeric
    """
    result = _to_number(value)
    if result is None:
        raise InvalidNumberError(value)
    return result


def parse_string(value: str) -> str:
    return value


def parse_boolean(value: str) -> bool:
    """Return True only for the truthy spellings Athena emits.

    Everything else, including malformed input, is False.
    """
    return value in TRUE_VALUES


def parse_date(value: str) -> datetime:
    """Parse a date, timestamp or timestamp with time zone cell.

    Raises:
        InvalidDateError: If the text is not a recognisable date
    """
    text, zone = split_zone(value)
    try:
        result = date_parser.parse(text, default=DEFAULT_DATE)
    except (ValueError, OverflowError, TypeError):
        raise InvalidDateError(value)

    if zone is not None and result.tzinfo is None:
        result = result.replace(tzinfo=zone)
    return result


def parse_array(value: Optional[str]) -> List[Union[Number, str]]:
    """Parse Athena's array rendering, e.g. ``[1, 2, foo]``.

    Elements that look numeric become numbers, the rest stay strings.
    """
    if not value:
        return []

    if value.startswith("[") and value.endswith("]"):
        value = value[1:-1]

    if value == "":
        return []

    result = []
    for item in value.split(ARRAY_SEPARATOR):
        number = _to_number(item)
        result.append(item if number is None else number)
    return result


def parse_json(value: str) -> Any:
    """Strictly decode a JSON cell.

    Raises:
        InvalidJsonError: If the text is not valid JSON
    """
    try:
        return json.loads(value)
    except (TypeError, ValueError) as e:
        raise InvalidJsonError(value, original_error=e)


PARSERS: Dict[ParserKind, Callable[[str], Any]] = {
    ParserKind.NUMBER: parse_number,
    ParserKind.STRING: parse_string,
    ParserKind.BOOLEAN: parse_boolean,
    ParserKind.DATE: parse_date,
    ParserKind.ARRAY: parse_array,
    ParserKind.JSON: parse_json,
}

# Binary, map and struct are deliberately absent
TYPE_PARSERS: Dict[ColumnType, ParserKind] = {
    ColumnType.INTEGER: ParserKind.NUMBER,
    ColumnType.TINYINT: ParserKind.NUMBER,
    ColumnType.SMALLINT: ParserKind.NUMBER,
    ColumnType.BIGINT: ParserKind.NUMBER,
    ColumnType.FLOAT: ParserKind.NUMBER,
    ColumnType.DOUBLE: ParserKind.NUMBER,
    ColumnType.DECIMAL: ParserKind.NUMBER,
    ColumnType.CHAR: ParserKind.STRING,
    ColumnType.VARCHAR: ParserKind.STRING,
    ColumnType.STRING: ParserKind.STRING,
    ColumnType.BOOLEAN: ParserKind.BOOLEAN,
    ColumnType.DATE: ParserKind.DATE,
    ColumnType.TIMESTAMP: ParserKind.DATE,
    ColumnType.TIMESTAMP_WITH_TZ: ParserKind.DATE,
    ColumnType.ARRAY: ParserKind.ARRAY,
    ColumnType.JSON: ParserKind.JSON,
}


def parser_kind_for(column_type: str, column_name: Optional[str] = None) -> ParserKind:
    """Resolve the parser kind for an Athena column type tag.

    Args:
        column_type: Type tag as reported by Athena (case-insensitive)
        column_name: Column name, used only for error reporting

    Raises:
        UnsupportedColumnTypeError: For binary, map, struct and unknown tags
    """
    normalized = (column_type or "").strip().lower()
    try:
        return TYPE_PARSERS[ColumnType(normalized)]
    except (KeyError, ValueError):
        raise UnsupportedColumnTypeError(column_type, column_name)


@dataclass(frozen=True)
class Column:
    """A result column: the key used on each record and its parser kind."""

    name: str
    kind: ParserKind

    def parse(self, value: str) -> Any:
        return PARSERS[self.kind](value)

    @classmethod
    def from_metadata(cls, column_info: Mapping[str, Any]) -> "Column":
        """Build a column from one Athena ``ColumnInfo`` entry."""
        name = column_info["Name"]
        return cls(name=name, kind=parser_kind_for(column_info.get("Type"), name))


def columns_from_metadata(column_info: Iterable[Mapping[str, Any]]) -> List[Column]:
    """Bind every column of a result set, failing on the first unsupported type."""
    return [Column.from_metadata(info) for info in column_info]

"""Bind parameters into SQL text before it is sent to Athena.

Supported placeholders:

    $1, $2 ...                       positional (list, tuple or single value)
    ${name} $(name) $<name> $[name] $/name/   named (mapping, dotted paths allowed)

Either form accepts a modifier: ``^`` or ``:raw`` for raw text, ``~`` or
``:name`` for a quoted identifier, ``:json`` for a JSON literal and ``:csv``
for a comma-separated value list.
"""

import json
import math
import re
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Mapping, Optional, Sequence

from .exceptions import FormattingError

MODIFIERS = r"(\^|~|:raw|:name|:json|:csv)"

POSITIONAL_PATTERN = re.compile(r"\$(\d+)" + MODIFIERS + r"?")

NAMED_PATTERN = re.compile(
    r"\$(?:\{([^}]*)\}|\(([^)]*)\)|<([^>]*)>|\[([^\]]*)\]|/([^/]*)/)"
)

NAMED_BODY_PATTERN = re.compile(r"^\s*([\w$]+(?:\.[\w$]+)*)\s*" + MODIFIERS + r"?\s*$")


def quote_string(value: str) -> str:
    return "'" + value.replace("'", "''") + "'"


def quote_identifier(value: Any) -> str:
    text = str(value)
    if text == "*":
        return text
    return '"' + text.replace('"', '""') + '"'


def format_value(value: Any) -> str:
    """Render a Python value as an Athena SQL literal."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, Decimal)):
        return str(value)
    if isinstance(value, float):
        if math.isfinite(value):
            return repr(value)
        return quote_string(str(value))
    if isinstance(value, str):
        return quote_string(value)
    if isinstance(value, datetime):
        return quote_string(value.isoformat(sep=" "))
    if isinstance(value, date):
        return quote_string(value.isoformat())
    if isinstance(value, (list, tuple)):
        return "array[" + ",".join(format_value(item) for item in value) + "]"
    if isinstance(value, Mapping):
        return quote_string(json.dumps(value, default=str))

    raise FormattingError(f"Unsupported parameter type: {type(value).__name__}")


def _apply_modifier(value: Any, modifier: Optional[str]) -> str:
    if modifier in ("^", ":raw"):
        return "null" if value is None else str(value)
    if modifier in ("~", ":name"):
        return quote_identifier(value)
    if modifier == ":json":
        return quote_string(json.dumps(value, default=str))
    if modifier == ":csv":
        if isinstance(value, (list, tuple)):
            return ",".join(format_value(item) for item in value)
        return format_value(value)
    return format_value(value)


def _lookup(parameters: Mapping[str, Any], path: str) -> Any:
    current: Any = parameters
    for part in path.split("."):
        if isinstance(current, Mapping) and part in current:
            current = current[part]
        else:
            raise FormattingError(f"Property '{path}' doesn't exist.")
    return current


def _format_positional(sql: str, values: Sequence[Any]) -> str:
    def replace(match):
        index = int(match.group(1))
        if index < 1 or index > len(values):
            raise FormattingError(f"Variable ${index} out of range.")
        return _apply_modifier(values[index - 1], match.group(2))

    return POSITIONAL_PATTERN.sub(replace, sql)


def _format_named(sql: str, parameters: Mapping[str, Any]) -> str:
    def replace(match):
        body = next(group for group in match.groups() if group is not None)
        parsed = NAMED_BODY_PATTERN.match(body)
        if not parsed:
            raise FormattingError(f"Invalid variable name: '{body}'")
        return _apply_modifier(_lookup(parameters, parsed.group(1)), parsed.group(2))

    return NAMED_PATTERN.sub(replace, sql)


def format_query(sql: str, parameters: Any = None) -> str:
    """Substitute parameters into ``sql``.

    Args:
        sql: SQL text with placeholders
        parameters: Mapping for named placeholders, list/tuple for
            positional ones, or a single value for ``$1``

    Returns:
        SQL text ready for execution

    Raises:
        FormattingError: If a placeholder has no matching parameter
    """
    if parameters is None:
        return sql
    if isinstance(parameters, Mapping):
        return _format_named(sql, parameters)
    if isinstance(parameters, (list, tuple)):
        return _format_positional(sql, parameters)
    return _format_positional(sql, [parameters])

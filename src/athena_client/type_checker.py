"""Heuristic typing for cells that arrive without a schema.

CSV exports written by Athena to S3 carry no column types, so each cell is
typed from its shape alone. Checks run in a fixed order: array, object,
date, number, and finally the original string.
"""

import json
import math
import re
from datetime import datetime
from typing import Any, Optional, Union

from dateutil.parser import isoparse

from .column import split_zone
from .exceptions import InvalidJsonError

# ISO-8601 shapes only; "42" must stay a number while "2024" is a date.
# Athena appends a zone ID to timestamp with time zone values.
DATE_PATTERN = re.compile(
    r"^\d{4}(-\d{2}(-\d{2})?)?"
    r"([T ]\d{2}:\d{2}(:\d{2}(\.\d+)?)?)?"
    r"(Z|[+-]\d{2}(:?\d{2})?)?"
    r"( [A-Za-z][A-Za-z0-9_+-]*(/[A-Za-z0-9_+-]+)*)?$"
)


class TypeChecker:
    """Infer and apply a type to a single raw text value."""

    def __init__(self, value: str):
        self.value = value

    def parse(self) -> Any:
        if self.is_array():
            return self._parse_json()
        if self.is_object():
            return self._parse_json()

        date = self._to_date()
        if date is not None:
            return date

        number = self._to_number()
        if number is not None:
            return number

        return self.value

    def is_array(self) -> bool:
        return self.value.startswith("[") and self.value.endswith("]")

    def is_object(self) -> bool:
        return self.value.startswith("{") and self.value.endswith("}")

    def is_date(self) -> bool:
        return self._to_date() is not None

    def is_number(self) -> bool:
        return self._to_number() is not None

    def _parse_json(self) -> Any:
        try:
            return json.loads(self.value)
        except ValueError as e:
            raise InvalidJsonError(self.value, original_error=e)

    def _to_date(self) -> Optional[datetime]:
        if not DATE_PATTERN.match(self.value):
            return None
        text, zone = split_zone(self.value)
        try:
            result = isoparse(text)
        except (ValueError, OverflowError):
            return None

        if zone is not None and result.tzinfo is None:
            result = result.replace(tzinfo=zone)
        return result

    def _to_number(self) -> Optional[Union[int, float]]:
        text = self.value.strip()
        if not text or "_" in text:
            return None
        try:
            return int(text)
        except ValueError:
            pass
        try:
            result = float(text)
        except ValueError:
            return None
        return result if math.isfinite(result) else None


def infer_value(value: Optional[str]) -> Any:
    """Type a raw value; None passes through untouched."""
    if value is None:
        return None
    return TypeChecker(value).parse()

# src/schemarecord/core/validation.py
"""Validation rule chain with error accumulation.

Rules never raise for a failed check - they append a human-readable message
and return False. A record is valid when its error list is empty. Checking
validity does not run any rules; entities invoke rules explicitly, usually
from a lifecycle hook such as before_validate.
"""

import re
from collections.abc import Sequence
from typing import TYPE_CHECKING

from schemarecord.contracts.errors import UnknownPropertyError

if TYPE_CHECKING:
    from schemarecord.core.record import Record


def humanize(column: str) -> str:
    """'first_name' -> 'First name'."""
    text = column.replace("_", " ")
    return text[:1].upper() + text[1:]


class ValidationEngine:
    """Accumulates validation errors for one record."""

    def __init__(self, record: "Record") -> None:
        self._record = record
        self._errors: list[str] = []

    @property
    def errors(self) -> list[str]:
        return list(self._errors)

    def add_error(self, message: str) -> None:
        self._errors.append(message)

    def clear(self) -> None:
        self._errors.clear()

    def is_valid(self) -> bool:
        return not self._errors

    def _value(self, column: str) -> object:
        if column not in self._record.column_names:
            raise UnknownPropertyError(f"Property {column} does not exist")
        return self._record.get(column)

    def _fail(self, message: str) -> bool:
        self.add_error(message)
        return False

    def presence(self, column: str, message: str | None = None) -> bool:
        """Fail if the value is None or the empty string."""
        value = self._value(column)
        if value is None or value == "":
            return self._fail(message or f"{humanize(column)} cannot be empty")
        return True

    def uniqueness(self, column: str | Sequence[str], message: str | None = None) -> bool:
        """Fail if another row has the same value(s).

        The record's own row is excluded by primary key when the key is set,
        so an unchanged stored record is never reported as a duplicate of itself.
        """
        columns = [column] if isinstance(column, str) else list(column)
        pairs = {name: self._value(name) for name in columns}
        if self._record.find_duplicate_exists(pairs):
            label = humanize(" and ".join(columns))
            return self._fail(message or f"{label} is not unique")
        return True

    def length(self, column: str, min_length: int, max_length: int | None = None, message: str | None = None) -> bool:
        """Fail if the string length is outside [min_length, max_length].

        With no max_length, only the minimum is enforced. None counts as "".
        """
        value = self._value(column)
        length = len("" if value is None else str(value))
        if max_length is not None and not min_length <= length <= max_length:
            return self._fail(message or f"{humanize(column)} must be between {min_length} and {max_length} characters")
        if length < min_length:
            return self._fail(message or f"{humanize(column)} must be at least {min_length} characters")
        return True

    def foreign_key_exists(self, column: str, message: str | None = None) -> bool:
        """Fail unless a related row exists via the column's foreign key.

        A column that carries no foreign key also fails.
        """
        if self._record.column_metadata(column).foreign_key is not None and self._record.related_exists(column):
            return True
        return self._fail(message or f"{column} foreign key is not valid")

    def regex(self, column: str, pattern: str | re.Pattern[str], message: str | None = None) -> bool:
        """Fail unless the value (as text) contains a match for pattern."""
        value = self._value(column)
        text = "" if value is None else str(value)
        if re.search(pattern, text) is None:
            return self._fail(message or f"{humanize(column)} is invalid")
        return True

"""Form helpers: describe editable fields and assign untrusted form input.

Protected fields are never written from form input. Foreign-key columns are
left out of generated field lists (they cannot be rendered as plain inputs).
"""

import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from schemarecord.contracts.type_normalization import UnifiedType, is_checkbox_type, is_integer_type, unify_data_type

if TYPE_CHECKING:
    from schemarecord.core.record import Record

_NON_DIGITS = re.compile(r"[^0-9]")


@dataclass(frozen=True, slots=True)
class FormField:
    """One editable column, ready for rendering."""

    name: str
    table: str
    data_type: str
    unified_type: UnifiedType
    value: Any
    max_length: int | None
    nullable: bool
    is_checkbox: bool


def _display_default(default_value: str | None) -> str:
    if default_value is None:
        return ""
    text = default_value.strip()
    if len(text) >= 2 and text[0] == text[-1] == "'":
        return text[1:-1].replace("''", "'")
    return text


def describe_form_fields(record: "Record") -> dict[str, FormField]:
    """Return editable fields: every column except foreign keys and protected fields.

    The value is the current value, falling back to the column default, then "".
    """
    fields: dict[str, FormField] = {}
    for name in record.column_names:
        meta = record.column_metadata(name)
        if meta.foreign_key is not None or name in record.protected:
            continue
        value = record.get(name)
        fields[name] = FormField(
            name=name,
            table=record.table,
            data_type=meta.data_type,
            unified_type=unify_data_type(meta.data_type),
            value=value if value is not None else _display_default(meta.default_value),
            max_length=meta.max_length,
            nullable=not meta.not_null,
            is_checkbox=is_checkbox_type(meta.data_type),
        )
    return fields


def assign_form_fields(record: "Record", form: Mapping[str, Any]) -> None:
    """Bulk-assign untrusted form input.

    - Protected fields are skipped.
    - Checkbox-like columns become True when the key is present, else False.
    - Integer columns keep only digits ("1,024 " -> 1024); no digits -> None.
    - Everything else is stripped text. Absent keys leave the column untouched.
    """
    for name in record.column_names:
        if name in record.protected:
            continue
        meta = record.column_metadata(name)
        if is_checkbox_type(meta.data_type):
            record.set(name, name in form)
            continue
        if name not in form or form[name] is None:
            continue
        raw = str(form[name]).strip()
        if is_integer_type(meta.data_type):
            digits = _NON_DIGITS.sub("", raw)
            record.set(name, int(digits) if digits else None)
        else:
            record.set(name, raw)

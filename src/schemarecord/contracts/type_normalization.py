"""Vendor type classification.

The catalog stores the driver's own type name. These helpers classify it for
generic handling (form rendering, boolean coercion) without forcing a unified
taxonomy onto the stored metadata.
"""

from __future__ import annotations

import re
from typing import Any, Literal

UnifiedType = Literal["character", "text", "binary", "date", "datetime", "numeric", "unknown"]

# Vendor type name -> unified classification.
_TYPE_ASSOCIATIONS: dict[str, UnifiedType] = {
    "string": "character",
    "char": "character",
    "character": "character",
    "varchar": "character",
    "nvarchar": "character",
    "nchar": "character",
    "tinyblob": "character",
    "tinytext": "character",
    "enum": "character",
    "set": "character",
    "uuid": "character",
    "text": "text",
    "longtext": "text",
    "mediumtext": "text",
    "clob": "text",
    "image": "binary",
    "blob": "binary",
    "longblob": "binary",
    "mediumblob": "binary",
    "bytea": "binary",
    "varbinary": "binary",
    "binary": "binary",
    "year": "date",
    "date": "date",
    "time": "datetime",
    "datetime": "datetime",
    "timestamp": "datetime",
    "timestamptz": "datetime",
    "int": "numeric",
    "int2": "numeric",
    "int4": "numeric",
    "int8": "numeric",
    "integer": "numeric",
    "bigint": "numeric",
    "mediumint": "numeric",
    "smallint": "numeric",
    "tinyint": "numeric",
    "serial": "numeric",
    "bigserial": "numeric",
    "float": "numeric",
    "float4": "numeric",
    "float8": "numeric",
    "real": "numeric",
    "double": "numeric",
    "decimal": "numeric",
    "numeric": "numeric",
    "dec": "numeric",
    "fixed": "numeric",
    "bool": "numeric",
    "boolean": "numeric",
}

BOOLEAN_TYPES: frozenset[str] = frozenset({"bool", "boolean"})
INTEGER_TYPES: frozenset[str] = frozenset({"int", "int2", "int4", "int8", "integer", "bigint", "mediumint", "smallint", "serial", "bigserial"})
# Rendered as checkboxes in forms: presence of the field means True.
CHECKBOX_TYPES: frozenset[str] = BOOLEAN_TYPES | {"tinyint"}

# Row values treated as True for boolean columns. Strings compare case-insensitively.
TRUTHY_MARKERS: frozenset[str] = frozenset({"t", "true", "1", "y", "yes"})


def base_type_name(type_name: str) -> str:
    """Lower-case a vendor type and strip size/modifiers ("VARCHAR(20)" -> "varchar")."""
    normalized = type_name.strip().lower()
    if normalized.startswith("character varying"):
        return "varchar"
    if normalized.startswith("double precision"):
        return "double"
    if normalized.startswith("timestamp with time zone"):
        return "timestamptz"
    return re.split(r"[\s(]", normalized, maxsplit=1)[0]


def unify_data_type(data_type_name: str) -> UnifiedType:
    """Map a vendor type name onto one unified classification.

    Args:
        data_type_name: Database type name, e.g. "varchar" or "INT4"

    Returns:
        One of character, text, binary, date, datetime, numeric, unknown
    """
    return _TYPE_ASSOCIATIONS.get(base_type_name(data_type_name), "unknown")


def is_boolean_type(data_type: str) -> bool:
    return base_type_name(data_type) in BOOLEAN_TYPES


def is_integer_type(data_type: str) -> bool:
    return base_type_name(data_type) in INTEGER_TYPES


def is_checkbox_type(data_type: str) -> bool:
    return base_type_name(data_type) in CHECKBOX_TYPES


def coerce_boolean(value: Any) -> bool | None:
    """Coerce a driver value for a boolean column.

    None stays None (unset). bools pass through. Everything else is True
    only when it matches a truthy marker.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value == 1
    return str(value).strip().lower() in TRUTHY_MARKERS

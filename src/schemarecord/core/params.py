"""Placeholder translation from qmark to a DBAPI paramstyle.

Statements are built with ``?`` placeholders regardless of dialect. The
gateway translates them to the driver's paramstyle right before execution.
Question marks inside quoted literals or identifiers are left alone.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

_QUOTES = frozenset({"'", '"', "`"})


def _placeholder_positions(sql: str) -> list[int]:
    positions: list[int] = []
    quote: str | None = None
    i = 0
    while i < len(sql):
        ch = sql[i]
        if quote is not None:
            if ch == quote:
                # Doubled quote is an escaped quote, stay inside
                if i + 1 < len(sql) and sql[i + 1] == quote:
                    i += 2
                    continue
                quote = None
        elif ch in _QUOTES:
            quote = ch
        elif ch == "?":
            positions.append(i)
        i += 1
    return positions


def count_placeholders(sql: str) -> int:
    """Count qmark placeholders outside quoted text."""
    return len(_placeholder_positions(sql))


def translate_qmark_params(sql: str, params: Sequence[Any], paramstyle: str) -> tuple[str, tuple[Any, ...] | dict[str, Any]]:
    """Translate a qmark statement for a driver's paramstyle.

    Args:
        sql: Statement using ``?`` placeholders
        params: Positional parameters, one per placeholder
        paramstyle: DBAPI paramstyle (qmark, format, pyformat, numeric, named)

    Returns:
        (sql, params) ready for the driver. params is a dict for "named".

    Raises:
        ValueError: If the placeholder count does not match len(params),
            or the paramstyle is unknown
    """
    positions = _placeholder_positions(sql)
    if len(positions) != len(params):
        raise ValueError(f"Statement has {len(positions)} placeholders but {len(params)} parameters were given.")

    if paramstyle == "qmark":
        return sql, tuple(params)

    if paramstyle not in {"format", "pyformat", "numeric", "named"}:
        raise ValueError(f"Unsupported paramstyle: {paramstyle}")

    parts: list[str] = []
    last = 0
    for index, pos in enumerate(positions, start=1):
        chunk = sql[last:pos]
        if paramstyle in {"format", "pyformat"} and params:
            chunk = chunk.replace("%", "%%")
        parts.append(chunk)
        if paramstyle in {"format", "pyformat"}:
            parts.append("%s")
        elif paramstyle == "numeric":
            parts.append(f":{index}")
        else:
            parts.append(f":p{index}")
        last = pos + 1
    tail = sql[last:]
    if paramstyle in {"format", "pyformat"} and params:
        tail = tail.replace("%", "%%")
    parts.append(tail)

    translated = "".join(parts)
    if paramstyle == "named":
        return translated, {f"p{index}": value for index, value in enumerate(params, start=1)}
    return translated, tuple(params)

# src/schemarecord/core/finders.py
"""Parser for dynamic finder and accessor names.

Names such as ``find_by_name_and_email`` are parsed once into a structured
FinderCall. Nothing downstream matches method-name strings: records execute
the FinderCall through the explicit column-pair API.

Grammar (lower-snake-case, case-sensitive):
    find_all_as_array_by_<col>[_and_<col>]...
    find_all_by_<col>[_and_<col>]...
    find_by_<col>[_and_<col>]...
    get_<col>
    set_<col>
"""

import re
from dataclasses import dataclass
from enum import StrEnum
from functools import lru_cache

from schemarecord.contracts.errors import MissingParametersError, UnknownMethodError

_SUFFIX = re.compile(r"[a-z0-9_]+")
_COLUMN_SEPARATOR = "_and_"


class FinderKind(StrEnum):
    """What a parsed dynamic name does."""

    FIND_BY = "find_by"
    FIND_ALL_BY = "find_all_by"
    FIND_ALL_AS_ARRAY_BY = "find_all_as_array_by"
    GET = "get"
    SET = "set"


# Longest prefix first: "find_all_as_array_by_" must win over "find_all_by_"
_PREFIXES: tuple[tuple[str, FinderKind], ...] = (
    ("find_all_as_array_by_", FinderKind.FIND_ALL_AS_ARRAY_BY),
    ("find_all_by_", FinderKind.FIND_ALL_BY),
    ("find_by_", FinderKind.FIND_BY),
    ("get_", FinderKind.GET),
    ("set_", FinderKind.SET),
)


@dataclass(frozen=True, slots=True)
class FinderCall:
    """Structured form of a dynamic name: the operation and its column tokens."""

    kind: FinderKind
    columns: tuple[str, ...]

    @property
    def is_finder(self) -> bool:
        return self.kind in (FinderKind.FIND_BY, FinderKind.FIND_ALL_BY, FinderKind.FIND_ALL_AS_ARRAY_BY)

    def bind(self, args: tuple[object, ...]) -> dict[str, object]:
        """Pair column tokens with positional arguments, one to one.

        Raises:
            MissingParametersError: If the argument count differs from the column count
        """
        if len(args) != len(self.columns):
            raise MissingParametersError(
                f"{self.kind.value}_{_COLUMN_SEPARATOR.join(self.columns)} expects {len(self.columns)} argument(s), got {len(args)}"
            )
        return dict(zip(self.columns, args, strict=True))


@lru_cache(maxsize=512)
def parse_finder_name(name: str) -> FinderCall:
    """Parse a dynamic method name.

    Accessor names (get_/set_) keep their suffix as one column token, so a
    column such as ``brand_and_model`` is still reachable through them.

    Raises:
        MissingParametersError: If a known prefix has no (or an empty) column part
        UnknownMethodError: If the name matches no pattern
    """
    for prefix, kind in _PREFIXES:
        if not name.startswith(prefix):
            continue
        suffix = name[len(prefix) :]
        if not suffix:
            raise MissingParametersError(f"Property not specified in [{name}]")
        if not _SUFFIX.fullmatch(suffix):
            raise UnknownMethodError(f"Call to unknown method [{name}]")
        if kind in (FinderKind.GET, FinderKind.SET):
            return FinderCall(kind, (suffix,))
        columns = tuple(suffix.split(_COLUMN_SEPARATOR))
        if any(not column for column in columns):
            raise MissingParametersError(f"Empty column name in [{name}]")
        return FinderCall(kind, columns)
    raise UnknownMethodError(f"Call to unknown method [{name}]")

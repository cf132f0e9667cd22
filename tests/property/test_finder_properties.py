# tests/property/test_finder_properties.py
"""Property tests: finder names parse back to the columns they were built from."""

from hypothesis import given
from hypothesis import strategies as st

from schemarecord.core.finders import FinderKind, parse_finder_name
from tests.property.settings import QUICK_SETTINGS, STANDARD_SETTINGS

# Snake-case column names with no bare "and" segment (that is the separator)
column_names = st.from_regex(r"[a-z][a-z0-9]{0,8}(_[a-z][a-z0-9]{0,8}){0,2}", fullmatch=True).filter(lambda name: "and" not in name.split("_"))

finder_prefixes = st.sampled_from(
    [
        ("find_by_", FinderKind.FIND_BY),
        ("find_all_by_", FinderKind.FIND_ALL_BY),
        ("find_all_as_array_by_", FinderKind.FIND_ALL_AS_ARRAY_BY),
    ]
)


@given(prefix=finder_prefixes, columns=st.lists(column_names, min_size=1, max_size=4))
@STANDARD_SETTINGS
def test_finder_columns_round_trip(prefix: tuple[str, FinderKind], columns: list[str]) -> None:
    text, kind = prefix
    call = parse_finder_name(text + "_and_".join(columns))
    assert call.kind is kind
    assert call.columns == tuple(columns)


@given(columns=st.lists(column_names, min_size=1, max_size=4))
@STANDARD_SETTINGS
def test_bind_pairs_positionally(columns: list[str]) -> None:
    call = parse_finder_name("find_by_" + "_and_".join(columns))
    args = tuple(range(len(columns)))
    bound = call.bind(args)
    # Repeated column names collapse to the last argument
    assert bound == dict(zip(columns, args, strict=True))


@given(column=st.from_regex(r"[a-z0-9_]+", fullmatch=True))
@QUICK_SETTINGS
def test_accessors_keep_whole_suffix(column: str) -> None:
    assert parse_finder_name("get_" + column).columns == (column,)
    assert parse_finder_name("set_" + column).columns == (column,)

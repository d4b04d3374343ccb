"""
Property-based tests for the hstore parser using Hypothesis.
"""

from hypothesis import given
from hypothesis import strategies as st

from pg_hstore import HStorePair, parse, to_ordered_map
from tests.util import serialize_pairs

# anything goes inside quotes
keys = st.text()
values = st.none() | st.text()
pair_lists = st.lists(st.builds(HStorePair, keys, values), max_size=10)

# characters that can appear in an unquoted token
word_chars = st.characters(
    exclude_characters='"=,',
    exclude_categories=("Zs", "Zl", "Zp", "Cc", "Cs"),
)
words = st.text(word_chars, min_size=1).filter(lambda w: w.upper() != "NULL")


@given(pairs=pair_lists)
def test_quoted_roundtrip(pairs: list[HStorePair]) -> None:
    """
    Serialized pairs parse back to the same pairs, in order.
    """
    raw = serialize_pairs(pairs)
    assert list(parse(raw)) == pairs


@given(pairs=pair_lists)
def test_reparse_is_stable(pairs: list[HStorePair]) -> None:
    """
    Parsing, serializing and parsing again gives the same result.
    """
    first = list(parse(serialize_pairs(pairs)))
    second = list(parse(serialize_pairs(first)))
    assert first == second


@given(items=st.lists(st.tuples(words, words | st.just("NULL")), max_size=10))
def test_unquoted_tokens(items: list[tuple[str, str]]) -> None:
    """
    Unquoted tokens come back exactly as written, except for the NULL sentinel.
    """
    raw = ",".join(f"{k}=>{v}" for k, v in items)
    expected = [HStorePair(k, None if v == "NULL" else v) for k, v in items]
    assert list(parse(raw)) == expected


@given(pairs=pair_lists)
def test_map_matches_pairs(pairs: list[HStorePair]) -> None:
    """
    The map contains the last value of every key.
    """
    expected: dict[str, str | None] = {}
    for pair in pairs:
        expected[pair.key] = pair.value

    assert to_ordered_map(serialize_pairs(pairs)) == expected

"""
Tests for the command suggestion list.
"""

from editor.commands import ALL_COMMANDS
from editor.suggestions import suggest


def test_prefix_s():
    """Only names starting with the query, in declaration order, capped at 8."""
    result = suggest("s")

    assert all(name.startswith("s") for name in result)
    assert len(result) <= 8
    for name in ('sqrt', 'sub', 'sum', 'sin'):
        assert name in result
    assert result == [name for name in ALL_COMMANDS if name.startswith("s")][:8]


def test_case_insensitive():
    assert suggest("FR") == ['frac']


def test_empty_query():
    assert suggest("") == []


def test_no_match():
    assert suggest("zzz") == []


def test_cap():
    """A broad query is truncated to the limit."""
    names = ["a%d" % i for i in range(20)]
    assert suggest("a", commands=names) == names[:8]
    assert suggest("a", limit=3, commands=names) == names[:3]

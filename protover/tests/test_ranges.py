from __future__ import annotations

import itertools

import pytest

from protover.constants import VERSION_MAX
from protover.errors import IntegerOutOfRange, InvalidRange, MalformedInput
from protover.ranges import (
    ProtocolEntry,
    ProtocolSet,
    VersionRange,
    is_valid_name,
    merge_into,
    merge_ranges,
    ranges_support,
    subtract_ranges,
)


def R(low: int, high: int | None = None) -> VersionRange:
    return VersionRange(low, low if high is None else high)


# ---- VersionRange -------------------------------------------------------------

def test_range_bounds_are_validated():
    with pytest.raises(InvalidRange):
        VersionRange(3, 1)
    with pytest.raises(IntegerOutOfRange):
        VersionRange(-1, 2)
    with pytest.raises(IntegerOutOfRange):
        VersionRange(0, VERSION_MAX + 1)
    with pytest.raises(MalformedInput):
        VersionRange("1", 2)  # type: ignore[arg-type]
    assert VersionRange(0, VERSION_MAX).size == VERSION_MAX + 1


def test_range_relations():
    assert R(1, 3).contains(3) and not R(1, 3).contains(4)
    assert R(1, 3).overlaps(R(3, 5))
    assert not R(1, 2).overlaps(R(3, 4))
    assert R(1, 2).adjacent(R(3, 4)) and R(3, 4).adjacent(R(1, 2))
    assert not R(1, 2).adjacent(R(4, 5))
    assert R(1, 2).merge(R(3, 4)) == R(1, 4)
    with pytest.raises(ValueError):
        R(1, 2).merge(R(4, 5))


def test_range_str():
    assert str(R(7)) == "7"
    assert str(R(1, 4)) == "1-4"


# ---- merge --------------------------------------------------------------------

def test_merge_adjacent_ranges_collapse():
    e = ProtocolEntry("Link")
    e = merge_into(merge_into(e, R(1, 2)), R(3, 4))
    assert e.ranges == (R(1, 4),)


def test_merge_keeps_gaps():
    e = merge_into(merge_into(ProtocolEntry("Link"), R(1, 2)), R(4, 5))
    assert e.ranges == (R(1, 2), R(4, 5))


def test_merge_is_order_independent():
    inserted = [R(10, 12), R(1, 2), R(3), R(5, 8), R(7, 9), R(20)]
    expected = (R(1, 3), R(5, 12), R(20))
    for perm in itertools.permutations(inserted):
        e = ProtocolEntry("Link")
        for r in perm:
            e = merge_into(e, r)
        assert e.ranges == expected


def test_merge_ranges_swallows_contained():
    assert merge_ranges([R(1, 10), R(2, 3), R(4)]) == (R(1, 10),)
    assert merge_ranges([]) == ()


def test_merge_at_version_max():
    assert merge_ranges([R(VERSION_MAX), R(0, VERSION_MAX - 1)]) == (R(0, VERSION_MAX),)


def test_entry_constructor_canonicalizes():
    e = ProtocolEntry("Foo", (R(5), R(1, 2), R(3), R(2)))
    assert e.ranges == (R(1, 3), R(5))
    assert e.versions_count() == 4
    assert e.max_version() == 5
    assert ProtocolEntry("Foo").max_version() is None


def test_entry_rejects_bad_names():
    for bad in ("", "Li=nk", "Li,nk", "Li-nk", "Li nk", "Li\tnk"):
        with pytest.raises(MalformedInput):
            ProtocolEntry(bad)


# ---- support & subtraction ---------------------------------------------------

@pytest.mark.parametrize(
    "version,expected",
    [(0, False), (1, True), (2, True), (3, False), (4, False), (5, True), (7, True), (8, False)],
)
def test_ranges_support(version, expected):
    e = ProtocolEntry("Link", (R(1, 2), R(5, 7)))
    assert ranges_support(e, version) is expected
    assert e.supports(version) is expected


def test_ranges_support_empty_entry():
    assert not ranges_support(ProtocolEntry("Link"), 0)


def test_subtract_ranges():
    assert subtract_ranges([R(1, 10)], [R(3, 4), R(8, 20)]) == (R(1, 2), R(5, 7))
    assert subtract_ranges([R(1, 10)], []) == (R(1, 10),)
    assert subtract_ranges([R(1, 10)], [R(0, 11)]) == ()
    assert subtract_ranges([R(5), R(1)], [R(1)]) == (R(5),)


# ---- ProtocolSet --------------------------------------------------------------

def test_protocol_set_merges_and_sorts():
    ps = ProtocolSet(
        [
            ProtocolEntry("Link", (R(3),)),
            ProtocolEntry("Cons", (R(1),)),
            ProtocolEntry("Link", (R(1, 2),)),
        ]
    )
    assert list(ps) == ["Cons", "Link"]
    assert ps["Link"].ranges == (R(1, 3),)
    assert len(ps) == 2
    assert ps.supports("Link", 2) and not ps.supports("Wombat", 1)


def test_protocol_set_drops_empty_entries():
    assert len(ProtocolSet([ProtocolEntry("Foo")])) == 0
    assert ProtocolSet.empty() == ProtocolSet()


def test_protocol_set_from_pairs_and_union():
    a = ProtocolSet.from_pairs([("Link", R(1)), ("Link", R(2))])
    b = ProtocolSet.from_pairs([("Link", R(3)), ("Foo", R(9))])
    u = a.union(b)
    assert u["Link"].ranges == (R(1, 3),)
    assert u["Foo"].ranges == (R(9),)
    assert u == ProtocolSet.from_pairs([("Foo", R(9)), ("Link", R(1, 3))])


def test_names_are_case_sensitive():
    ps = ProtocolSet.from_pairs([("link", R(1)), ("Link", R(2))])
    assert list(ps) == ["Link", "link"]


def test_is_valid_name():
    assert is_valid_name("HSIntro")
    assert is_valid_name("Wombat_2")
    assert not is_valid_name("")
    assert not is_valid_name("a b")

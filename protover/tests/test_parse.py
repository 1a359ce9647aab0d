from __future__ import annotations

import pytest

from protover.errors import (
    EmptyInput,
    ErrorCode,
    IntegerOutOfRange,
    InvalidRange,
    MalformedEntry,
    MalformedInput,
)
from protover.parse import (
    parse_entry,
    parse_protocol_list,
    parse_version,
    parse_version_spec,
    parse_version_token,
)
from protover.ranges import VersionRange


def test_parse_simple_list():
    ps = parse_protocol_list("Link=1-4 LinkAuth=1,3 Cons=1")
    assert list(ps) == ["Cons", "Link", "LinkAuth"]
    assert ps["Link"].ranges == (VersionRange(1, 4),)
    assert ps["LinkAuth"].ranges == (VersionRange(1, 1), VersionRange(3, 3))


def test_parse_empty_is_empty_set():
    assert len(parse_protocol_list("")) == 0
    assert len(parse_protocol_list("   ")) == 0


def test_parse_require_nonempty():
    with pytest.raises(EmptyInput):
        parse_protocol_list("", require_nonempty=True)
    with pytest.raises(EmptyInput):
        parse_protocol_list(" \t ", require_nonempty=True)
    assert len(parse_protocol_list("Link=1", require_nonempty=True)) == 1


def test_repeated_names_merge():
    ps = parse_protocol_list("Link=1 Cons=1 Link=2-3 Link=7")
    assert ps["Link"].ranges == (VersionRange(1, 3), VersionRange(7, 7))


def test_whitespace_runs_between_entries():
    ps = parse_protocol_list("  Link=1\t\tCons=2 \n")
    assert list(ps) == ["Cons", "Link"]


def test_unknown_names_pass_through():
    ps = parse_protocol_list("Wombat=9 FutureThing=1-3")
    assert list(ps) == ["FutureThing", "Wombat"]


def test_leading_zeros_are_accepted():
    assert parse_version("007") == 7


@pytest.mark.parametrize(
    "text,exc",
    [
        ("Link=3-1", InvalidRange),
        ("=1", MalformedInput),
        ("Link1,2", MalformedInput),
        ("Link=1=2", MalformedInput),
        ("Link=", MalformedInput),
        ("Link=1,", MalformedInput),
        ("Link=,1", MalformedInput),
        ("Link=a", MalformedInput),
        ("Link=+1", MalformedInput),
        ("Link=1_0", MalformedInput),
        ("Link=-1", MalformedInput),
        ("Link=1-", MalformedInput),
        ("Link=1-2-3", MalformedInput),
        ("Li-nk=1", MalformedInput),
        ("Li,nk=1", MalformedInput),
        ("Link=4294967296", IntegerOutOfRange),
        ("Link=1-4294967296", IntegerOutOfRange),
        ("Link=1 Cons", MalformedInput),
        ("Link= 1", MalformedInput),
    ],
)
def test_parse_rejects(text, exc):
    with pytest.raises(exc):
        parse_protocol_list(text)


def test_malformed_anywhere_aborts_whole_parse():
    with pytest.raises(MalformedInput) as ei:
        parse_protocol_list("Cons=1 Link=1-2 Relay=2-1 Desc=1")
    assert isinstance(ei.value, InvalidRange)
    assert ei.value.context["entry"] == "Relay=2-1"
    assert ei.value.code == ErrorCode.INVALID_RANGE


def test_error_hierarchy():
    assert MalformedEntry is MalformedInput
    assert issubclass(InvalidRange, MalformedInput)
    assert issubclass(IntegerOutOfRange, MalformedInput)
    assert issubclass(MalformedInput, ValueError)


def test_non_string_input_is_malformed():
    with pytest.raises(MalformedInput):
        parse_protocol_list(None)  # type: ignore[arg-type]


def test_version_max_is_accepted():
    ps = parse_protocol_list("Link=4294967295")
    assert ps["Link"].ranges == (VersionRange(4294967295, 4294967295),)


def test_token_and_spec_helpers():
    assert parse_version_token("3") == VersionRange(3, 3)
    assert parse_version_token("2-5") == VersionRange(2, 5)
    assert parse_version_spec("5,1-2") == (VersionRange(5, 5), VersionRange(1, 2))
    e = parse_entry("HSDir=2,1")
    assert e.name == "HSDir" and e.ranges == (VersionRange(1, 2),)
    with pytest.raises(IntegerOutOfRange) as ei:
        parse_version("4294967296")
    assert ei.value.context["value"] == 4294967296


def test_oversized_numbers_are_out_of_range():
    huge = "9" * 5000
    with pytest.raises(IntegerOutOfRange) as ei:
        parse_protocol_list(f"Link={huge}")
    assert len(ei.value.context["token"]) < 64
    with pytest.raises(IntegerOutOfRange):
        parse_protocol_list(f"Link=1-{huge}")
    with pytest.raises(IntegerOutOfRange):
        parse_version("0" * 5000 + "42949672950")


def test_long_leading_zero_padding():
    padded = "0" * 5000 + "1"
    assert parse_version(padded) == 1
    assert parse_protocol_list(f"Link={padded}")["Link"].ranges == (VersionRange(1, 1),)
    assert parse_version("0" * 5000) == 0

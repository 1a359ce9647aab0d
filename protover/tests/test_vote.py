from __future__ import annotations

import itertools

import pytest
from hypothesis import given, strategies as st

from protover.encode import canonicalize
from protover.vote import compute_vote, tally_ballots

from . import ballots_example_path, protocol_lists


def test_threshold_two_of_three():
    assert compute_vote(["Link=1-2", "Link=1-3", "Link=2"], 2) == "Link=1-2"


def test_unknown_names_are_voted_like_any_other():
    assert compute_vote(["Foo=1", "Foo=1"], 2) == "Foo=1"
    assert compute_vote(["Wombat=9 Link=1", "Wombat=9"], 2) == "Wombat=9"


def test_malformed_ballot_does_not_poison_the_vote():
    assert compute_vote(["Link=1-2", "this is !!", "Link=1-2"], 2) == "Link=1-2"


def test_malformed_ballot_counts_as_empty_voter():
    assert compute_vote(["Link=1-2", "Link=2-1", "Link=1-2"], 3) == ""


def test_oversized_number_counts_as_empty_ballot():
    huge = "9" * 5000
    assert compute_vote(["Link=1-2", f"Link={huge}", "Link=1-2"], 2) == "Link=1-2"
    assert compute_vote(["Link=1-2", f"Link=1-{huge}", "Link=1-2"], 3) == ""


def test_zero_padded_ballot_is_counted():
    padded = "0" * 5000 + "1"
    assert compute_vote(["Link=1-2", f"Link={padded}", "Link=1-2"], 2) == "Link=1-2"
    assert compute_vote(["Link=1-2", f"Link={padded}", "Link=1-2"], 3) == "Link=1"


def test_threshold_above_ballot_count():
    assert compute_vote(["Link=1", "Link=1"], 3) == ""


def test_threshold_zero_or_negative_is_union():
    ballots = ["Link=1-2", "Cons=1", "Link=5"]
    assert compute_vote(ballots, 0) == "Cons=1 Link=1-2,5"
    assert compute_vote(ballots, -3) == compute_vote(ballots, 1)


def test_no_ballots():
    assert compute_vote([], 1) == ""
    assert compute_vote([], 0) == ""


def test_ranges_touching_across_ballots_merge():
    assert compute_vote(["Link=1-2", "Link=3-4"], 1) == "Link=1-4"


def test_repeated_entry_in_one_ballot_counts_once():
    assert compute_vote(["Link=1 Link=1", "Cons=1"], 2) == ""


def test_huge_ranges_are_not_expanded():
    ballots = ["Link=1-4294967295", "Link=100-4294967295", "Link=0-200"]
    assert compute_vote(ballots, 2) == "Link=1-4294967295"
    assert compute_vote(ballots, 3) == "Link=100-200"


def test_ballot_order_does_not_matter():
    ballots = ["Link=1-3 Cons=1", "Link=2-5", "Cons=1-2 Link=3", "Relay=2", "garbage"]
    expected = compute_vote(ballots, 2)
    assert expected == "Cons=1 Link=2-3"
    for perm in itertools.permutations(ballots):
        assert compute_vote(list(perm), 2) == expected


def test_fixture_ballots():
    ballots = ballots_example_path().read_text(encoding="utf-8").splitlines()
    assert compute_vote(ballots, 2) == "Cons=1-2 Desc=1-2 Link=1-4 Relay=1-2 Wombat=7"
    assert compute_vote(ballots, 3) == "Cons=1 Desc=1-2 Link=3-4 Relay=2"


def test_tally_events():
    events = tally_ballots(["Link=1-2", "Link=2", "bogus"])
    assert events == {"Link": {1: 1, 2: 1, 3: -2}}


@given(st.lists(protocol_lists(), max_size=5))
def test_threshold_one_is_canonical_union(ballots):
    assert compute_vote(ballots, 1) == canonicalize(" ".join(ballots))


@given(protocol_lists())
def test_single_ballot_vote_is_its_canonical_form(ballot):
    assert compute_vote([ballot], 1) == canonicalize(ballot)
    assert compute_vote([ballot, ballot], 2) == canonicalize(ballot)


@pytest.mark.parametrize("threshold", [1, 2, 3, 4])
def test_result_shrinks_as_threshold_grows(threshold):
    ballots = ["Link=1-5", "Link=2-4", "Link=3", "Link=3-9"]
    expected = {1: "Link=1-9", 2: "Link=2-5", 3: "Link=3-4", 4: "Link=3"}
    assert compute_vote(ballots, threshold) == expected[threshold]

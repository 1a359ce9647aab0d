"""
Threshold voting over protocol lists.

Each authority submits one ballot (a protocol list). A (name, version) pair is
in the result iff at least `threshold` ballots cover it. Names are opaque
here: the voter never consults the recognized-type table, which is what lets
the network vote in a subprotocol before every implementation knows it.

Determinism notes
-----------------
- Ballots are parsed independently. A malformed ballot counts as an empty one
  and does not affect how the others are counted.
- Coverage is counted with an endpoint sweep over each name's ranges, so the
  cost is independent of how many versions a range spans.
- The result depends only on the multiset of ballots and the threshold.
"""

from __future__ import annotations

from collections import defaultdict
from typing import DefaultDict, Dict, Iterable, List

from .encode import encode_protocol_list
from .errors import MalformedInput
from .logging import get_logger
from .parse import parse_protocol_list
from .ranges import ProtocolEntry, ProtocolSet, VersionRange

log = get_logger(__name__)


def _covered_at_least(events: Dict[int, int], threshold: int) -> List[VersionRange]:
    """Ranges where the running coverage count is >= threshold."""
    out: List[VersionRange] = []
    points = sorted(events)
    count = 0
    for here, nxt in zip(points, points[1:]):
        count += events[here]
        if count >= threshold:
            out.append(VersionRange(here, nxt - 1))
    return out


def tally_ballots(ballots: Iterable[str]) -> Dict[str, Dict[int, int]]:
    """
    Parse ballots into per-name coverage events {name: {point: delta}}.

    A ballot covering [low, high] contributes +1 at low and -1 at high + 1.
    Malformed ballots contribute nothing.
    """
    events: DefaultDict[str, DefaultDict[int, int]] = defaultdict(lambda: defaultdict(int))
    for idx, ballot in enumerate(ballots):
        try:
            protocols = parse_protocol_list(ballot)
        except MalformedInput as e:
            log.debug("ignoring malformed ballot", extra={"ballot": idx, "error": e.to_dict()})
            continue
        for entry in protocols.entries():
            for r in entry.ranges:
                events[entry.name][r.low] += 1
                events[entry.name][r.high + 1] -= 1
    return {name: dict(ev) for name, ev in events.items()}


def compute_vote(ballots: Iterable[str], threshold: int) -> str:
    """
    Return the canonical list of every protocol version listed by at least
    `threshold` ballots.

    A threshold of 0 or less yields the union of all ballots; a threshold above
    the number of ballots yields "".
    """
    needed = max(int(threshold), 1)
    result: List[ProtocolEntry] = []
    for name, events in tally_ballots(ballots).items():
        ranges = _covered_at_least(events, needed)
        if ranges:
            result.append(ProtocolEntry(name, tuple(ranges)))
    return encode_protocol_list(ProtocolSet(result))


__all__ = ["tally_ballots", "compute_vote"]

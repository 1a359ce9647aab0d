"""
Version ranges, protocol entries and protocol sets.

This module is deliberately *pure* and holds the interval algebra every other
component builds on:

- VersionRange  : inclusive [low, high] over 32-bit unsigned versions.
- ProtocolEntry : a protocol name plus its canonical tuple of ranges.
- ProtocolSet   : an immutable name -> ProtocolEntry mapping, iterated by name.

Canonical form
--------------
An entry's ranges are sorted ascending by `low` and no two of them overlap or
touch (``a.high + 1 == b.low`` merges a and b). The invariant is established
in ``ProtocolEntry.__post_init__``, so every entry that exists is canonical;
there is no separate normalization pass. Because merging is a union, the
final ranges depend only on the multiset of inserted ranges, never on the
insertion order.
"""

from __future__ import annotations

import bisect
from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple

from .constants import FORBIDDEN_NAME_CHARS, VERSION_MAX
from .errors import IntegerOutOfRange, InvalidRange, MalformedInput


# -----------------------------
# Ranges
# -----------------------------

@dataclass(frozen=True, order=True)
class VersionRange:
    """All integers in [low, high] (inclusive)."""
    low: int
    high: int

    def __post_init__(self) -> None:
        for bound in (self.low, self.high):
            if isinstance(bound, bool) or not isinstance(bound, int):
                raise MalformedInput(f"version bound must be an integer, got {type(bound).__name__}")
            if bound < 0 or bound > VERSION_MAX:
                raise IntegerOutOfRange.for_value(bound)
        if self.low > self.high:
            raise InvalidRange.for_bounds(self.low, self.high)

    @classmethod
    def single(cls, version: int) -> "VersionRange":
        return cls(version, version)

    @property
    def size(self) -> int:
        return self.high - self.low + 1

    @property
    def is_single(self) -> bool:
        return self.low == self.high

    def contains(self, version: int) -> bool:
        return self.low <= version <= self.high

    def overlaps(self, other: "VersionRange") -> bool:
        return self.low <= other.high and other.low <= self.high

    def adjacent(self, other: "VersionRange") -> bool:
        """True iff the two ranges touch without overlapping."""
        return self.high + 1 == other.low or other.high + 1 == self.low

    def mergeable(self, other: "VersionRange") -> bool:
        return self.overlaps(other) or self.adjacent(other)

    def merge(self, other: "VersionRange") -> "VersionRange":
        if not self.mergeable(other):
            raise ValueError(f"cannot merge disjoint ranges {self} and {other}")
        return VersionRange(min(self.low, other.low), max(self.high, other.high))

    def __str__(self) -> str:
        return str(self.low) if self.is_single else f"{self.low}-{self.high}"


def merge_ranges(ranges: Iterable[VersionRange]) -> Tuple[VersionRange, ...]:
    """Return the canonical (sorted, merged, non-adjacent) form of `ranges`."""
    out: List[VersionRange] = []
    for r in sorted(ranges):
        if out and r.low <= out[-1].high + 1:
            if r.high > out[-1].high:
                out[-1] = VersionRange(out[-1].low, r.high)
            continue
        out.append(r)
    return tuple(out)


def subtract_ranges(
    ranges: Sequence[VersionRange],
    remove: Sequence[VersionRange],
) -> Tuple[VersionRange, ...]:
    """
    Return the parts of `ranges` not covered by `remove`.

    Both inputs may be in any order; the result is canonical.
    """
    remaining = list(merge_ranges(ranges))
    for cut in merge_ranges(remove):
        nxt: List[VersionRange] = []
        for r in remaining:
            if not r.overlaps(cut):
                nxt.append(r)
                continue
            if r.low < cut.low:
                nxt.append(VersionRange(r.low, cut.low - 1))
            if r.high > cut.high:
                nxt.append(VersionRange(cut.high + 1, r.high))
        remaining = nxt
    return tuple(remaining)


# -----------------------------
# Entries
# -----------------------------

def is_valid_name(name: str) -> bool:
    """A protocol name is a non-empty token with no '=', ',', '-' or whitespace."""
    if not isinstance(name, str) or not name:
        return False
    return not any(ch in FORBIDDEN_NAME_CHARS or ch.isspace() for ch in name)


@dataclass(frozen=True)
class ProtocolEntry:
    """A protocol name plus its canonical ranges."""
    name: str
    ranges: Tuple[VersionRange, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if not is_valid_name(self.name):
            raise MalformedInput(f"invalid protocol name {self.name!r}", entry=self.name)
        object.__setattr__(self, "ranges", merge_ranges(self.ranges))

    def supports(self, version: int) -> bool:
        return ranges_support(self, version)

    def with_range(self, r: VersionRange) -> "ProtocolEntry":
        return merge_into(self, r)

    def versions_count(self) -> int:
        return sum(r.size for r in self.ranges)

    def max_version(self) -> Optional[int]:
        return self.ranges[-1].high if self.ranges else None


def merge_into(entry: ProtocolEntry, r: VersionRange) -> ProtocolEntry:
    """Insert `r` into `entry`, merging overlapping or adjacent ranges."""
    return ProtocolEntry(entry.name, entry.ranges + (r,))


def ranges_support(entry: ProtocolEntry, version: int) -> bool:
    """True iff `version` falls inside one of the entry's ranges."""
    idx = bisect.bisect_right(entry.ranges, version, key=lambda r: r.low) - 1
    return idx >= 0 and entry.ranges[idx].high >= version


# -----------------------------
# Sets
# -----------------------------

class ProtocolSet(Mapping[str, ProtocolEntry]):
    """
    Immutable mapping of protocol name -> ProtocolEntry, ordered by name.

    Entries contributed under the same name are merged; entries left with no
    ranges are dropped, so a set never advertises an empty protocol.
    """

    __slots__ = ("_entries",)

    def __init__(self, entries: Iterable[ProtocolEntry] = ()) -> None:
        acc: Dict[str, List[VersionRange]] = {}
        for e in entries:
            acc.setdefault(e.name, []).extend(e.ranges)
        self._entries: Dict[str, ProtocolEntry] = {
            name: ProtocolEntry(name, tuple(acc[name]))
            for name in sorted(acc)
            if acc[name]
        }

    @classmethod
    def from_pairs(cls, pairs: Iterable[Tuple[str, VersionRange]]) -> "ProtocolSet":
        """Build a set from (name, range) pairs."""
        return cls(ProtocolEntry(name, (r,)) for name, r in pairs)

    @classmethod
    def empty(cls) -> "ProtocolSet":
        return cls(())

    def __getitem__(self, name: str) -> ProtocolEntry:
        return self._entries[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def entries(self) -> Tuple[ProtocolEntry, ...]:
        return tuple(self._entries.values())

    def supports(self, name: str, version: int) -> bool:
        entry = self._entries.get(name)
        return entry is not None and ranges_support(entry, version)

    def union(self, other: "ProtocolSet") -> "ProtocolSet":
        return ProtocolSet(self.entries() + other.entries())

    def __repr__(self) -> str:
        body = ", ".join(
            f"{e.name}={','.join(str(r) for r in e.ranges)}" for e in self._entries.values()
        )
        return f"ProtocolSet({body})"


__all__ = [
    "VersionRange",
    "ProtocolEntry",
    "ProtocolSet",
    "merge_ranges",
    "subtract_ranges",
    "merge_into",
    "ranges_support",
    "is_valid_name",
]

"""
protover.tests helpers

- Registers Hypothesis profiles (local/ci).
- Fixture loaders: supported_example_path(), ballots_example_path().
- Hypothesis strategies for canonical and messy protocol lists.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import List

from hypothesis import settings, strategies as st

from protover.constants import VERSION_MAX

# ----- Paths -----
HERE = Path(__file__).resolve()
PKG_ROOT = HERE.parents[1]          # .../protover
FIXTURES = PKG_ROOT / "fixtures"

# ----- Hypothesis profiles -----
settings.register_profile("local", settings(max_examples=60, deadline=None))
settings.register_profile("ci", settings(max_examples=300, deadline=None))
settings.load_profile(os.environ.get("HYPOTHESIS_PROFILE") or ("ci" if os.environ.get("CI") else "local"))


# ----- Fixture helpers -----
def supported_example_path() -> Path:
    p = FIXTURES / "supported.example.yaml"
    if not p.exists():
        raise FileNotFoundError(f"Fixture missing: {p}")
    return p


def ballots_example_path() -> Path:
    p = FIXTURES / "ballots.example.txt"
    if not p.exists():
        raise FileNotFoundError(f"Fixture missing: {p}")
    return p


# ----- Strategies -----
names = st.text(
    alphabet=st.characters(min_codepoint=0x21, max_codepoint=0x7E, blacklist_characters="=,-"),
    min_size=1,
    max_size=10,
)
# Keep most versions small so ranges collide and merge often.
versions = st.one_of(st.integers(0, 40), st.integers(0, VERSION_MAX))


@st.composite
def tokens(draw) -> str:
    low = draw(versions)
    if draw(st.booleans()):
        return str(low)
    high = draw(st.integers(low, min(VERSION_MAX, low + draw(st.integers(0, 50)))))
    return f"{low}-{high}"


@st.composite
def protocol_lists(draw) -> str:
    """Valid but not necessarily canonical lists: unsorted, overlapping, repeated names."""
    entries: List[str] = []
    for _ in range(draw(st.integers(0, 6))):
        spec = ",".join(draw(st.lists(tokens(), min_size=1, max_size=5)))
        entries.append(f"{draw(names)}={spec}")
    sep = draw(st.sampled_from([" ", "  ", "\t", " \n "]))
    return sep.join(entries)


__all__ = [
    "HERE",
    "PKG_ROOT",
    "FIXTURES",
    "supported_example_path",
    "ballots_example_path",
    "names",
    "versions",
    "tokens",
    "protocol_lists",
]

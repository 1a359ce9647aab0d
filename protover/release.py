"""
Dotted release identifiers and their ordering.

Accepted shapes (optionally prefixed by "Tor " and followed by free-form
platform text after whitespace):

    0.2.7.5
    0.2.9.1-alpha
    Tor 0.2.9.1-alpha on Linux

Ordering compares (major, minor, micro, patchlevel). The status tag does not
take part, so 0.2.9.3-alpha and 0.2.9.3 are the same release for the purposes
of legacy capability inference.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Optional

from .errors import MalformedInput

_release_re = re.compile(
    r"^(?:Tor\s+)?v?"
    r"(?P<maj>\d+)\.(?P<min>\d+)\.(?P<mic>\d+)(?:\.(?P<pat>\d+))?"
    r"(?:-(?P<tag>[0-9A-Za-z][0-9A-Za-z.\-]*))?"
    r"(?:\s.*)?$",
    re.DOTALL,
)


@dataclass(frozen=True, order=True)
class ReleaseVersion:
    major: int
    minor: int
    micro: int
    patchlevel: int = 0
    tag: Optional[str] = field(default=None, compare=False)

    def __str__(self) -> str:
        base = f"{self.major}.{self.minor}.{self.micro}.{self.patchlevel}"
        return f"{base}-{self.tag}" if self.tag else base


def parse_release_version(text: str) -> ReleaseVersion:
    """Parse a release identifier. Raises MalformedInput if it does not look like one."""
    m = _release_re.match(text.strip()) if isinstance(text, str) else None
    if m is None:
        raise MalformedInput(f"not a release version: {text!r}", token=str(text))
    return ReleaseVersion(
        major=int(m.group("maj")),
        minor=int(m.group("min")),
        micro=int(m.group("mic")),
        patchlevel=int(m.group("pat") or 0),
        tag=m.group("tag"),
    )


def compare_versions(a: str, b: str) -> int:
    """Return -1, 0 or 1 as release `a` is older than, equal to, or newer than `b`."""
    va, vb = parse_release_version(a), parse_release_version(b)
    return (va > vb) - (va < vb)


def version_as_new_as(version: str, cutoff: str) -> bool:
    """True iff `version` is the same release as `cutoff` or newer."""
    return compare_versions(version, cutoff) >= 0


__all__ = ["ReleaseVersion", "parse_release_version", "compare_versions", "version_as_new_as"]

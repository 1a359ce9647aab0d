"""
Capability inference for releases that predate self-advertisement.

Old peers never published a protocol list, so authorities guess one from the
release they run. The breakpoints live in `protover.constants`; this is a pure
lookup and is not configurable at runtime.
"""

from __future__ import annotations

from typing import Callable, Optional, Sequence, Tuple

from .constants import LEGACY_BREAKPOINTS
from .logging import get_logger
from .release import compare_versions

log = get_logger(__name__)

Comparator = Callable[[str, str], int]


def compute_for_old_version(
    version: str,
    *,
    compare: Optional[Comparator] = None,
    breakpoints: Sequence[Tuple[str, str]] = LEGACY_BREAKPOINTS,
) -> str:
    """
    Return the capability string implied by release `version`.

    Picks the latest breakpoint the release is as new as; "" before the first
    breakpoint and from the first self-advertising release on. The comparator
    signals an unparseable release by raising ValueError, which also yields "".
    """
    cmp = compare or compare_versions
    implied = ""
    try:
        for boundary, caps in breakpoints:
            if cmp(version, boundary) < 0:
                break
            implied = caps
    except ValueError:
        log.debug("cannot infer protocols for unparseable release", extra={"release": version})
        return ""
    return implied


infer_for_legacy_version = compute_for_old_version


__all__ = ["compute_for_old_version", "infer_for_legacy_version"]

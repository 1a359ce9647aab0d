"""
Protocol-version constants shared by the parser, the local support table and
legacy inference.

The default support table and the legacy breakpoints are consensus-visible:
changing them changes what this node advertises and what authorities assume
about old peers. Append, do not rewrite.
"""
from __future__ import annotations

from typing import Final, Tuple


__all__ = [
    # Grammar
    "VERSION_MAX",
    "ENTRY_SEPARATOR",
    "NAME_VALUE_SEPARATOR",
    "TOKEN_SEPARATOR",
    "RANGE_SEPARATOR",
    "FORBIDDEN_NAME_CHARS",
    # Named versions
    "PROTOVER_HSDIR_V3",
    "PROTOVER_HS_INTRO_V3",
    # Local support table
    "DEFAULT_SUPPORTED_PROTOCOLS",
    # Legacy inference
    "FIRST_VERSION_TO_ADVERTISE_PROTOCOLS",
    "LEGACY_BREAKPOINTS",
]

# ---- Grammar -----------------------------------------------------------------

# Versions are 32-bit unsigned on the wire.
VERSION_MAX: Final[int] = 2**32 - 1

ENTRY_SEPARATOR: Final[str] = " "
NAME_VALUE_SEPARATOR: Final[str] = "="
TOKEN_SEPARATOR: Final[str] = ","
RANGE_SEPARATOR: Final[str] = "-"

# Whitespace is rejected separately via str.isspace().
FORBIDDEN_NAME_CHARS: Final[frozenset[str]] = frozenset(
    NAME_VALUE_SEPARATOR + TOKEN_SEPARATOR + RANGE_SEPARATOR
)

# ---- Named versions ------------------------------------------------------------

# HSDir version that signifies support for v3 onion-service descriptors.
PROTOVER_HSDIR_V3: Final[int] = 2
# HSIntro version that signifies v3 introduction-point support.
PROTOVER_HS_INTRO_V3: Final[int] = 4

# ---- Local support table -------------------------------------------------------

# What this implementation natively speaks. One entry per recognized type.
DEFAULT_SUPPORTED_PROTOCOLS: Final[Tuple[str, ...]] = (
    "Cons=1-2",
    "Desc=1-2",
    "DirCache=1-2",
    "HSDir=1-2",
    "HSIntro=3-4",
    "HSRend=1-2",
    "Link=1-4",
    "LinkAuth=1,3",
    "Microdesc=1-2",
    "Relay=1-2",
)

# ---- Legacy inference ----------------------------------------------------------

# The first release that put "proto" lines in its own descriptors. Peers at or
# after this release advertise for themselves; nothing is inferred for them.
FIRST_VERSION_TO_ADVERTISE_PROTOCOLS: Final[str] = "0.2.9.3-alpha"

# Ascending (boundary, implied capability string).
LEGACY_BREAKPOINTS: Final[Tuple[Tuple[str, str], ...]] = (
    (
        "0.2.4.19",
        "Cons=1 Desc=1 DirCache=1 HSDir=1 HSIntro=3 HSRend=1 "
        "Link=1-4 LinkAuth=1 Microdesc=1 Relay=1-2",
    ),
    (
        "0.2.7.5",
        "Cons=1-2 Desc=1-2 DirCache=1 HSDir=1 HSIntro=3 HSRend=1 "
        "Link=1-4 LinkAuth=1 Microdesc=1-2 Relay=1-2",
    ),
    (
        "0.2.9.1-alpha",
        "Cons=1-2 Desc=1-2 DirCache=1 HSDir=1 HSIntro=3 HSRend=1-2 "
        "Link=1-4 LinkAuth=1 Microdesc=1-2 Relay=1-2",
    ),
    (FIRST_VERSION_TO_ADVERTISE_PROTOCOLS, ""),
)

"""
Recognized subprotocol types and their canonical names.

Protocol identity on the wire is a plain string: entries for names we do not
recognize are parsed, encoded and voted on like any other. `ProtocolType` is
only consulted where *native* support must be checked (the local support
table, `is_supported_here`, `all_supported`).

Ordinals are stable: companion implementations that exchange the type as an
integer rely on them. Do not renumber. Only append at the end.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Dict, Optional, Union


class ProtocolType(IntEnum):
    """Recognized subprotocols (stable ordinals)."""

    LINK = 0
    LINKAUTH = 1
    RELAY = 2
    DIRCACHE = 3
    HSDIR = 4
    HSINTRO = 5
    HSREND = 6
    DESC = 7
    MICRODESC = 8
    CONS = 9

    @property
    def canonical_name(self) -> str:
        return _NAME_BY_TYPE[self]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.canonical_name


# Canonical names are case-sensitive on the wire.
_NAME_BY_TYPE: Dict[ProtocolType, str] = {
    ProtocolType.LINK: "Link",
    ProtocolType.LINKAUTH: "LinkAuth",
    ProtocolType.RELAY: "Relay",
    ProtocolType.DIRCACHE: "DirCache",
    ProtocolType.HSDIR: "HSDir",
    ProtocolType.HSINTRO: "HSIntro",
    ProtocolType.HSREND: "HSRend",
    ProtocolType.DESC: "Desc",
    ProtocolType.MICRODESC: "Microdesc",
    ProtocolType.CONS: "Cons",
}
_TYPE_BY_NAME: Dict[str, ProtocolType] = {v: k for k, v in _NAME_BY_TYPE.items()}

ProtocolTypeLike = Union[ProtocolType, int, str]


def protocol_type_name(pt: ProtocolType | int) -> str:
    """Return the canonical wire name for a ProtocolType (or its ordinal)."""
    return _NAME_BY_TYPE[protocol_type_from_ordinal(pt)]


def protocol_type_from_name(name: str) -> Optional[ProtocolType]:
    """
    Look up a recognized type by its exact canonical name.

    Returns None for names we do not recognize; that is a normal runtime case
    for peer-supplied lists, not an error.
    """
    return _TYPE_BY_NAME.get(name)


def protocol_type_from_ordinal(value: int) -> ProtocolType:
    """Translate a stable ordinal into a ProtocolType. Raises ValueError if unknown."""
    try:
        return ProtocolType(int(value))
    except ValueError as e:
        raise ValueError(f"unknown protocol type ordinal: {value!r}") from e


def coerce_protocol_type(value: ProtocolTypeLike) -> ProtocolType:
    """
    Accept a ProtocolType, an ordinal, or a canonical name.

    Unrecognized values are a caller error and raise ValueError.
    """
    if isinstance(value, ProtocolType):
        return value
    if isinstance(value, str):
        pt = protocol_type_from_name(value)
        if pt is None:
            raise ValueError(f"unknown protocol type name: {value!r}")
        return pt
    if isinstance(value, bool):
        raise ValueError(f"not a protocol type: {value!r}")
    return protocol_type_from_ordinal(value)


__all__ = [
    "ProtocolType",
    "ProtocolTypeLike",
    "protocol_type_name",
    "protocol_type_from_name",
    "protocol_type_from_ordinal",
    "coerce_protocol_type",
]

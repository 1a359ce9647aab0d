"""
Local support table: which subprotocol versions this implementation speaks.

The table is injected configuration (defaults in `protover.constants`, or a
YAML file via `protover.config`). It is validated once when installed;
a misconfigured table is a startup error (`ConfigError`), never a request-time
condition.

Process-wide cache
------------------
`get_supported_protocols()` returns the canonical string of the active table.
It is built lazily, at most once, under a lock (double-checked), and is
read-only afterwards. `free_all()` releases it; the next call rebuilds it.
Installing a new table with `set_support_table()` drops the cached string too.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Dict, Iterable, Mapping, Optional, Tuple, Union

from .constants import DEFAULT_SUPPORTED_PROTOCOLS, NAME_VALUE_SEPARATOR
from .encode import encode_protocol_list
from .errors import ConfigError, MalformedInput
from .logging import get_logger
from .parse import parse_version_spec
from .ranges import ProtocolEntry, ProtocolSet, VersionRange, ranges_support
from .types import ProtocolType, ProtocolTypeLike, coerce_protocol_type, protocol_type_from_name

log = get_logger(__name__)

SpecLike = Union[str, int, Iterable[Union[str, int]]]


@dataclass(frozen=True)
class SupportTable:
    """Immutable mapping ProtocolType -> canonical ProtocolEntry."""
    entries: Mapping[ProtocolType, ProtocolEntry]

    # ---- constructors ----

    @classmethod
    def from_strings(cls, lines: Iterable[str]) -> "SupportTable":
        """Build from `Name=spec` lines (one recognized type per line)."""
        table: Dict[str, str] = {}
        for line in lines:
            name, sep, spec = line.strip().partition(NAME_VALUE_SEPARATOR)
            if not sep:
                raise ConfigError(f"malformed support entry {line!r}")
            if name in table:
                raise ConfigError(f"duplicate support entry for {name}", protocol=name)
            table[name] = spec
        return cls.from_mapping(table)

    @classmethod
    def from_mapping(cls, table: Mapping[str, SpecLike]) -> "SupportTable":
        """
        Build from {name: spec}, where spec is a version-spec string ("1-2,4"),
        a single integer, or a list of integers / spec strings.

        Within one protocol the listed ranges must not overlap; overlap means
        the table was edited by hand and is probably wrong.
        """
        out: Dict[ProtocolType, ProtocolEntry] = {}
        for name, spec in table.items():
            pt = _recognized(str(name))
            ranges = _ranges_from_spec(str(name), spec)
            _reject_overlaps(str(name), ranges)
            out[pt] = ProtocolEntry(pt.canonical_name, ranges)
        return cls(out)

    @classmethod
    def default(cls) -> "SupportTable":
        return cls.from_strings(DEFAULT_SUPPORTED_PROTOCOLS)

    # ---- queries ----

    def supports(self, pt: ProtocolTypeLike, version: int) -> bool:
        entry = self.entries.get(coerce_protocol_type(pt))
        return entry is not None and ranges_support(entry, version)

    def entry_for(self, name: str) -> Optional[ProtocolEntry]:
        pt = protocol_type_from_name(name)
        return None if pt is None else self.entries.get(pt)

    def as_protocol_set(self) -> ProtocolSet:
        return ProtocolSet(self.entries.values())

    def encode(self) -> str:
        return encode_protocol_list(self.as_protocol_set())


def _recognized(name: str) -> ProtocolType:
    pt = protocol_type_from_name(name)
    if pt is None:
        raise ConfigError(f"unknown protocol type {name!r} in support table", protocol=name)
    return pt


def _ranges_from_spec(name: str, spec: SpecLike) -> Tuple[VersionRange, ...]:
    if isinstance(spec, bool):
        raise ConfigError(f"invalid version spec for {name}: {spec!r}", protocol=name)
    items = [spec] if isinstance(spec, (str, int)) else list(spec)
    if not items:
        raise ConfigError(f"empty version spec for {name}", protocol=name)
    out = []
    try:
        for item in items:
            if isinstance(item, bool):
                raise ConfigError(f"invalid version for {name}: {item!r}", protocol=name)
            if isinstance(item, int):
                out.append(VersionRange(item, item))
            else:
                out.extend(parse_version_spec(str(item), entry=name))
    except MalformedInput as e:
        raise ConfigError(f"invalid version spec for {name}: {spec!r}", protocol=name, cause=e) from e
    return tuple(out)


def _reject_overlaps(name: str, ranges: Tuple[VersionRange, ...]) -> None:
    ordered = sorted(ranges)
    for a, b in zip(ordered, ordered[1:]):
        if a.overlaps(b):
            raise ConfigError(
                f"overlapping ranges {a} and {b} for {name}",
                protocol=name,
            )


# -----------------------------
# Process-wide state
# -----------------------------

_lock = threading.Lock()
_table: Optional[SupportTable] = None
_supported_string: Optional[str] = None


def _active_table_locked() -> SupportTable:
    global _table
    if _table is None:
        _table = SupportTable.default()
    return _table


def get_support_table() -> SupportTable:
    table = _table
    if table is not None:
        return table
    with _lock:
        return _active_table_locked()


def set_support_table(table: Optional[SupportTable]) -> None:
    """Install `table` as the local table (None restores the defaults)."""
    global _table, _supported_string
    with _lock:
        _table = table
        _supported_string = None
    if table is not None:
        log.info("installed protocol support table", extra={"protocols": len(table.entries)})


def get_supported_protocols() -> str:
    """Canonical string of everything this implementation supports (cached)."""
    global _supported_string
    cached = _supported_string
    if cached is not None:
        return cached
    with _lock:
        if _supported_string is None:
            _supported_string = _active_table_locked().encode()
            log.info("built supported-protocols string", extra={"supported": _supported_string})
        return _supported_string


supported_protocols_string = get_supported_protocols


def free_all() -> None:
    """Release the cached supported-protocols string."""
    global _supported_string
    with _lock:
        _supported_string = None


__all__ = [
    "SupportTable",
    "get_support_table",
    "set_support_table",
    "get_supported_protocols",
    "supported_protocols_string",
    "free_all",
]

"""
protover - versioned subprotocol advertisement and voting.

Participants describe the subprotocol versions they speak as a canonical
string ("Cons=1-2 Link=1-4 LinkAuth=1,3 ..."), compare those strings with
their own support table, and authorities vote them into network-wide
required/recommended lists.

Public API:
- parse_protocol_list / encode_protocol_list : the exchangeable string format
- is_supported_here / supported_protocols_string : the local support table
- list_supports / all_supported : checks against peer-supplied lists
- compute_vote : threshold consensus over ballots
- infer_for_legacy_version : capabilities of releases that predate advertisement
- free_all : release the cached supported-protocols string
"""

from __future__ import annotations

from .encode import canonicalize, encode_protocol_list
from .errors import (
    ConfigError,
    EmptyInput,
    ErrorCode,
    IntegerOutOfRange,
    InvalidRange,
    MalformedEntry,
    MalformedInput,
    ProtoverError,
)
from .legacy import compute_for_old_version, infer_for_legacy_version
from .parse import parse_protocol_list
from .query import (
    all_supported,
    is_supported_here,
    list_supports,
    protocol_list_supports_protocol,
    protocol_list_supports_protocol_or_later,
)
from .ranges import ProtocolEntry, ProtocolSet, VersionRange, merge_into, ranges_support
from .supported import (
    SupportTable,
    free_all,
    get_support_table,
    get_supported_protocols,
    set_support_table,
    supported_protocols_string,
)
from .types import ProtocolType, protocol_type_from_name, protocol_type_name
from .version import __version__
from .vote import compute_vote

__all__ = [
    "__version__",
    # model
    "VersionRange",
    "ProtocolEntry",
    "ProtocolSet",
    "ProtocolType",
    "merge_into",
    "ranges_support",
    "protocol_type_name",
    "protocol_type_from_name",
    # codec
    "parse_protocol_list",
    "encode_protocol_list",
    "canonicalize",
    # local table
    "SupportTable",
    "get_support_table",
    "set_support_table",
    "get_supported_protocols",
    "supported_protocols_string",
    "free_all",
    # queries
    "is_supported_here",
    "list_supports",
    "protocol_list_supports_protocol",
    "protocol_list_supports_protocol_or_later",
    "all_supported",
    # voting & legacy
    "compute_vote",
    "compute_for_old_version",
    "infer_for_legacy_version",
    # errors
    "ErrorCode",
    "ProtoverError",
    "MalformedInput",
    "MalformedEntry",
    "IntegerOutOfRange",
    "InvalidRange",
    "EmptyInput",
    "ConfigError",
]

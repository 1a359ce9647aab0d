"""
Package version and a summary of the wire format this build speaks.

`__version__` is the source version. `installed_version()` asks the package
registry, which differs from the source version for editable or local builds.
`version_info()` is what `protover version` prints: enough for an operator to
tell which release they are on and what it advertises.

Not to be confused with `protover.release`, which orders the *peer* release
identifiers used by legacy capability inference.
"""

from __future__ import annotations

import platform
from functools import lru_cache
from importlib.metadata import PackageNotFoundError, version as _dist_version
from typing import Any, Dict, Optional

from .constants import FIRST_VERSION_TO_ADVERTISE_PROTOCOLS, VERSION_MAX
from .supported import get_supported_protocols

# Bump when the canonical encoding or voting behavior changes.
__version__ = "0.1.0"

_DIST_NAME = "protover"


@lru_cache(maxsize=1)
def installed_version() -> Optional[str]:
    """Version recorded by the installer, or None when running from a source tree."""
    try:
        return _dist_version(_DIST_NAME)
    except PackageNotFoundError:
        return None


def version_info() -> Dict[str, Any]:
    return {
        "module": "protover",
        "version": __version__,
        "installed": installed_version(),
        "python": platform.python_version(),
        "version_max": VERSION_MAX,
        "first_advertising_release": FIRST_VERSION_TO_ADVERTISE_PROTOCOLS,
        "supported": get_supported_protocols(),
    }


__all__ = ["__version__", "installed_version", "version_info"]

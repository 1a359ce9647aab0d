"""
protover.config
===============

Configuration for the protocol-version stack. Reads environment variables,
applies defaults, and exposes `load_config()` returning a frozen
`ProtoverConfig`. The local support table can additionally be loaded from a
YAML file.

Env prefix: PROTOVER_

- PROTOVER_SUPPORTED_FILE=/etc/protover/supported.yaml
- PROTOVER_LOG_LEVEL=DEBUG
- PROTOVER_LOG_FORMAT=json        (json|text; unset = auto by TTY)

Support table YAML
------------------
    version: 1
    protocols:
      Link: "1-4"
      LinkAuth: [1, 3]
      Relay: "1-2"
      HSIntro: 3-4

Every value is a version spec string, a single integer, or a list of integers
and spec strings. Unknown protocol names are rejected; the local table only
describes what this implementation natively speaks.
"""
from __future__ import annotations

import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml

from .errors import ConfigError
from .logging import get_logger
from .supported import SupportTable, set_support_table

log = get_logger(__name__)

SUPPORTED_TABLE_SCHEMA_VERSION = 1
_LOG_FORMATS = ("json", "text")


# ---------- parsing helpers ----------------------------------------------------

def _getenv(name: str, default: str | None = None) -> str | None:
    v = os.getenv(name)
    if v is None:
        return default
    v = v.strip()
    return v or default


def _expanduser(path: str | None) -> str | None:
    return os.path.expanduser(path) if path else None


# ---------- dataclass ----------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ProtoverConfig:
    # Optional YAML support table replacing the built-in defaults
    supported_file: Optional[str] = None

    # Logging
    log_level: str = "INFO"
    log_format: Optional[str] = None  # None => decide by TTY

    def to_dict(self) -> dict:
        return asdict(self)


# ---------- loaders ------------------------------------------------------------

def load_config() -> ProtoverConfig:
    """Load configuration from environment variables."""
    log_format = _getenv("PROTOVER_LOG_FORMAT")
    if log_format is not None:
        log_format = log_format.lower()
        if log_format not in _LOG_FORMATS:
            log.warning("ignoring unknown PROTOVER_LOG_FORMAT", extra={"value": log_format})
            log_format = None

    return ProtoverConfig(
        supported_file=_expanduser(_getenv("PROTOVER_SUPPORTED_FILE")),
        log_level=(_getenv("PROTOVER_LOG_LEVEL", "INFO") or "INFO").upper(),
        log_format=log_format,
    )


def parse_support_table_document(doc: Any, *, path: Optional[str] = None) -> SupportTable:
    """Validate an already-decoded YAML/JSON document and build a SupportTable."""
    if not isinstance(doc, Mapping):
        raise ConfigError("support table must be a map/object", path=path)

    version = doc.get("version", SUPPORTED_TABLE_SCHEMA_VERSION)
    if version != SUPPORTED_TABLE_SCHEMA_VERSION:
        raise ConfigError(
            f"unsupported support table version {version!r}",
            path=path,
            context={"expected": SUPPORTED_TABLE_SCHEMA_VERSION},
        )

    protocols = doc.get("protocols")
    if not isinstance(protocols, Mapping) or not protocols:
        raise ConfigError("support table needs a non-empty 'protocols' map", path=path)

    try:
        return SupportTable.from_mapping({str(k): v for k, v in protocols.items()})
    except ConfigError as e:
        if path is not None:
            e.context.setdefault("path", path)
        raise


def load_support_table_file(path: str | Path) -> SupportTable:
    """Read and validate a YAML support table."""
    p = Path(path).expanduser()
    try:
        with p.open("r", encoding="utf-8") as f:
            doc = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"cannot read support table: {e}", path=str(p), cause=e) from e
    except yaml.YAMLError as e:
        raise ConfigError(f"support table is not valid YAML: {e}", path=str(p), cause=e) from e
    return parse_support_table_document(doc, path=str(p))


def apply_config(cfg: ProtoverConfig) -> Optional[SupportTable]:
    """
    Install the support table named by `cfg` (if any) as the process-wide table.

    Returns the installed table, or None when the defaults stay in effect.
    """
    if not cfg.supported_file:
        return None
    table = load_support_table_file(cfg.supported_file)
    set_support_table(table)
    return table


def configure_from_env() -> ProtoverConfig:
    """load_config() + apply_config(); returns the config that was applied."""
    cfg = load_config()
    apply_config(cfg)
    return cfg


__all__ = [
    "ProtoverConfig",
    "SUPPORTED_TABLE_SCHEMA_VERSION",
    "load_config",
    "parse_support_table_document",
    "load_support_table_file",
    "apply_config",
    "configure_from_env",
]

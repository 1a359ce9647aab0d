#!/usr/bin/env python3
"""
protover.cli.main
=================

Operator/developer tool for protocol-version strings.

Usage
-----
# What do we support?
python -m protover.cli.main supported
python -m protover.cli.main supported --table

# Canonical form of a (possibly messy) list
python -m protover.cli.main canonicalize "Link=3,1-2 Cons=1"

# Would we be able to serve a peer that requires these?
python -m protover.cli.main check "Link=1-5 HSDir=2"

# Does a peer's list include a given version?
python -m protover.cli.main supports "Link=1-4 Relay=2" Relay 2

# Authority vote (threshold 2 over three ballots, or one ballot per line)
python -m protover.cli.main vote -t 2 "Link=1-2" "Link=1-3" "Link=2"
python -m protover.cli.main vote -t 5 --file ballots.txt

# Inferred capabilities of an old release
python -m protover.cli.main legacy 0.2.7.5

Global options
--------------
--supported-file  YAML support table to install first (env PROTOVER_SUPPORTED_FILE)
--log-level       Log level for stderr diagnostics (env PROTOVER_LOG_LEVEL)
--json/--text     Log format (env PROTOVER_LOG_FORMAT)
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import List, Optional

import typer
from rich import box
from rich.console import Console
from rich.table import Table

from protover import logging as plog
from protover.config import ProtoverConfig, apply_config, load_config
from protover.encode import canonicalize as _canonicalize
from protover.errors import ConfigError, MalformedInput
from protover.legacy import compute_for_old_version
from protover.parse import parse_protocol_list
from protover.query import all_supported, protocol_list_supports_protocol
from protover.supported import get_support_table, get_supported_protocols
from protover.types import ProtocolTypeLike, coerce_protocol_type
from protover.version import version_info
from protover.vote import compute_vote

app = typer.Typer(
    name="protover",
    help="Inspect, check and vote on subprotocol version lists.",
    no_args_is_help=True,
    add_completion=False,
)

_err = Console(stderr=True, highlight=False)


# ----------------- helpers -----------------

def _protocol_type_arg(value: str) -> ProtocolTypeLike:
    """Accept a canonical name ('Link') or a stable ordinal ('0')."""
    try:
        return coerce_protocol_type(int(value) if value.isdigit() else value)
    except ValueError as e:
        raise typer.BadParameter(str(e)) from e


def _read_ballots(path: Path) -> List[str]:
    if str(path) == "-":
        text = sys.stdin.read()
    else:
        text = path.read_text(encoding="utf-8")
    # One ballot per line; a blank line is a voter with an empty ballot.
    return text.splitlines()


# ----------------- CLI -----------------

@app.callback()
def main_callback(
    supported_file: Optional[Path] = typer.Option(
        None,
        "--supported-file",
        help="YAML support table to use instead of the built-in one",
        envvar="PROTOVER_SUPPORTED_FILE",
    ),
    log_level: str = typer.Option(
        "WARNING",
        "--log-level",
        help="Log level for diagnostics on stderr",
        envvar="PROTOVER_LOG_LEVEL",
    ),
    json_logs: Optional[bool] = typer.Option(
        None,
        "--json/--text",
        help="Log format (default: decided by PROTOVER_LOG_FORMAT / TTY)",
    ),
) -> None:
    env = load_config()
    log_format = env.log_format if json_logs is None else ("json" if json_logs else "text")
    cfg = ProtoverConfig(
        supported_file=str(supported_file) if supported_file else None,
        log_level=log_level.upper(),
        log_format=log_format,
    )
    plog.configure_from_config(cfg, stream=sys.stderr)
    try:
        apply_config(cfg)
    except ConfigError as e:
        _err.print(f"[red]error:[/red] {e.message}")
        raise typer.Exit(2)


@app.command("supported")
def supported(
    table: bool = typer.Option(False, "--table", help="Render as a table instead of the canonical string"),
) -> None:
    """Print the protocols this implementation supports."""
    if not table:
        typer.echo(get_supported_protocols())
        return
    t = Table(title="Supported protocols", box=box.SIMPLE)
    t.add_column("Ordinal", justify="right")
    t.add_column("Protocol")
    t.add_column("Versions", overflow="fold")
    for pt, entry in sorted(get_support_table().entries.items()):
        t.add_row(str(int(pt)), entry.name, ",".join(str(r) for r in entry.ranges))
    Console().print(t)


@app.command("canonicalize")
def canonicalize(text: str = typer.Argument(..., help="Protocol list to canonicalize")) -> None:
    """Print the canonical encoding of a protocol list."""
    try:
        typer.echo(_canonicalize(text))
    except MalformedInput as e:
        _err.print(f"[red]malformed:[/red] {e.message}")
        raise typer.Exit(2)


@app.command("check")
def check(text: str = typer.Argument(..., help="Protocol list a peer requires")) -> None:
    """Check that we support everything in a list; prints what is missing."""
    ok, missing = all_supported(text)
    if ok:
        _err.print("[green]all supported[/green]")
        return
    typer.echo(missing)
    raise typer.Exit(1)


@app.command("supports")
def supports(
    text: str = typer.Argument(..., help="Protocol list advertised by a peer"),
    protocol: str = typer.Argument(..., help="Protocol type name (e.g. Link) or ordinal"),
    version: int = typer.Argument(..., min=0, help="Version to look for"),
) -> None:
    """Exit 0 if the list includes PROTOCOL=VERSION, 1 otherwise."""
    pt = _protocol_type_arg(protocol)
    if not protocol_list_supports_protocol(text, pt, version):
        raise typer.Exit(1)


@app.command("vote")
def vote(
    ballots: Optional[List[str]] = typer.Argument(None, help="One protocol list per voter"),
    threshold: int = typer.Option(..., "--threshold", "-t", help="Minimum number of ballots per version"),
    file: Optional[Path] = typer.Option(None, "--file", "-f", help="Read ballots from a file, one per line ('-' for stdin)"),
    as_json: bool = typer.Option(False, "--json-output", help="Print a JSON object with inputs and result"),
) -> None:
    """Compute the consensus protocol list over a set of ballots."""
    all_ballots = list(ballots or [])
    if file is not None:
        all_ballots.extend(_read_ballots(file))
    result = compute_vote(all_ballots, threshold)
    if as_json:
        rejected = []
        for idx, ballot in enumerate(all_ballots):
            try:
                parse_protocol_list(ballot)
            except MalformedInput:
                rejected.append(idx)
        typer.echo(json.dumps(
            {"ballots": len(all_ballots), "threshold": threshold, "rejected": rejected, "result": result},
            separators=(",", ":"),
        ))
        return
    typer.echo(result)


@app.command("legacy")
def legacy(release: str = typer.Argument(..., help="Release identifier, e.g. 0.2.7.5")) -> None:
    """Print the protocols inferred for a release that predates advertisement."""
    typer.echo(compute_for_old_version(release))


@app.command("version")
def version() -> None:
    """Print package version information."""
    typer.echo(json.dumps(version_info(), separators=(",", ":")))


def main() -> int:
    app()
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())

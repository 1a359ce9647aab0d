"""
protover command-line tools.

Modules
-------
- main: the `protover` Typer app. Entrypoint: :func:`main.main`.
"""

from __future__ import annotations

from .main import app, main

__all__ = ["app", "main"]

"""Entry point for `python -m buildgraph`.

Usage:
    python -m buildgraph analyze inventory.yaml
    uv run python -m buildgraph images inventory.yaml ns/name
"""

from __future__ import annotations

from buildgraph.cli import cli

cli(prog_name="buildgraph")

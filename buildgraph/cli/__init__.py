"""buildgraph command-line interface.

Exposes:
    cli -- Click group entry point (registered as ``buildgraph`` script).
"""

from buildgraph.cli.main import cli

__all__ = ["cli"]

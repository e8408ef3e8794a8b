"""buildgraph: structural analysis of build and image stream dependencies."""

__version__ = "0.1.0"

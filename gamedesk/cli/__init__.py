"""GameDesk command-line interface.

Exposes:
    cli -- Click group entry point (registered as ``gamedesk`` script).
"""

from gamedesk.cli.main import cli

__all__ = ["cli"]

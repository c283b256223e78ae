"""wisereader: a terminal reader for the Readwise Reader inbox.

The navigation engine lives in ``wisereader.reader``, document rendering in
``wisereader.render`` and the full-screen shell in ``wisereader.runtime``.
``main`` runs the command line without importing the shell up front.
"""

from __future__ import annotations


def main(argv=None) -> None:
    from .cli import main as cli_main

    cli_main(argv)


__all__ = ["main"]

# File: daogen/__main__.py
"""
daogen — Module entry point.

Allows running the generator directly via::

    python -m daogen -c database.properties -o ./generated

This module simply delegates to the CLI entry point defined in ``daogen.cli``.
"""

from __future__ import annotations


def main() -> None:
    """Delegate to the CLI main function."""
    from daogen.cli import cli_main
    cli_main()


if __name__ == "__main__":
    main()

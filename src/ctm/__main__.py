"""Allow ``python -m ctm``."""

from __future__ import annotations

from ctm.cli.main import cli

if __name__ == "__main__":
    cli()

"""Command line interface for ctm."""

from __future__ import annotations

from ctm.cli.main import cli

__all__ = ["cli"]

"""Jinja2 environment shared by the report writers."""

from __future__ import annotations

from jinja2.sandbox import SandboxedEnvironment


def create_environment(*, autoescape: bool) -> SandboxedEnvironment:
    """Create the template environment.

    Args:
        autoescape: Escape HTML in rendered values (HTML reports only).
    """
    return SandboxedEnvironment(
        trim_blocks=True,
        lstrip_blocks=True,
        autoescape=autoescape,
        keep_trailing_newline=True,
    )


__all__ = ["create_environment"]

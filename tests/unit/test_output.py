"""Unit tests for ctm.cli.output."""

from __future__ import annotations

from pathlib import Path

import pytest

from ctm.cli import output


class TestOutput:
    """Tests for console helpers."""

    def test_messages(self, capsys: pytest.CaptureFixture[str]) -> None:
        output.set_no_color(True)

        output.success("Reports written")
        output.error("Run failed")
        output.warning("2 items not tested")
        output.info("plain")

        out = capsys.readouterr().out
        assert "✓ Reports written" in out
        assert "✗ Run failed" in out
        assert "⚠ 2 items not tested" in out
        assert "plain" in out

    def test_no_color_console(self) -> None:
        console = output.create_console(no_color=True)

        assert console.no_color

    def test_markup_in_messages_is_printed_literally(self, capsys: pytest.CaptureFixture[str]) -> None:
        output.set_no_color(True)

        output.error("Cannot read source file out/[bold]x.java")

        assert "out/[bold]x.java" in capsys.readouterr().out

    def test_report_paths(self, capsys: pytest.CaptureFixture[str]) -> None:
        output.set_no_color(True)

        output.report_paths([Path("out/ctm_report_all.html"), Path("out/ctm_report_all.json")])

        lines = capsys.readouterr().out.splitlines()
        assert lines == ["  out/ctm_report_all.html", "  out/ctm_report_all.json"]


class TestRunSummary:
    """Tests for the closing summary line."""

    @pytest.mark.parametrize(
        ("total", "failed", "expected"),
        [
            (0, 0, "⚠ No backlog items traced to automated tests"),
            (4, 1, "⚠ 1 of 4 backlog items are not successfully tested"),
            (3, 0, "✓ All 3 backlog items successfully tested"),
        ],
    )
    def test_summary(
        self, total: int, failed: int, expected: str, capsys: pytest.CaptureFixture[str]
    ) -> None:
        output.set_no_color(True)

        output.run_summary(total, failed)

        assert expected in capsys.readouterr().out

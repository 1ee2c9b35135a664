"""Traceability report writers (JSON, HTML and Markdown)."""

from __future__ import annotations

from ctm.reporting.html_report import render_html_report, write_html_report
from ctm.reporting.json_report import build_json_report, render_json_report, write_json_report
from ctm.reporting.links import issue_url, results_url
from ctm.reporting.markdown_report import render_markdown_report, write_markdown_report

__all__ = [
    "build_json_report",
    "issue_url",
    "render_html_report",
    "render_json_report",
    "render_markdown_report",
    "results_url",
    "write_html_report",
    "write_json_report",
    "write_markdown_report",
]

"""HTML traceability report."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, timezone
from pathlib import Path

import structlog

from ctm.config import CtmConfig
from ctm.reporting.links import issue_url
from ctm.reporting.templating import create_environment
from ctm.traces.builder import count_successful_traces
from ctm.traces.models import Trace

logger = structlog.get_logger(__name__)

HTML_TEMPLATE = """\
<html>
<head>
  <title>Full Software Requirement Test Report</title>
  <meta name="author" content="Continuous Traceability Monitor">
  <style>
    body { font-family: Arial, Verdana; }
    table { border-collapse: collapse; }
    h2, h3 { color: #666666; }
    th { border-top: 1px solid #ddd; }
    th, td {
      padding: 12px;
      text-align: left;
      border-bottom: 1px solid #ddd;
      border-right: 1px solid #ddd;
    }
    tr:nth-child(even) { background-color: #f2f2f2; }
    .nobullets { list-style-type: none; padding-left: 0; padding-bottom: 0; margin: 0; }
    .notok { background-color: #ffe5e5; padding: 5px; }
    .ok { background-color: #e1f5a9; padding: 5px; }
    .green { color: #4FB810; }
    .red { color: #E35500; }
  </style>
</head>
<body>
  <h1>Full Software Requirement Test Report</h1>
{% if version %}
  <h2>Program: <i>{{ program }}</i>&nbsp;&nbsp;&nbsp;Delivery: <i>{{ version }}</i></h2>
{% endif %}
  <div><h3>Total number of requirements: {{ rows | length }}<br/>
    Total number of successful requirements: <span class="{{ 'green' if successful == rows | length else 'red' }}">{{ successful }}</span></h3></div>
  <p><div style="color:#666666"><i>Snapshot taken: {{ timestamp }}</i></div></p>
  <hr/>
  <table>
    <tr>
      <th>#</th>
      <th>Backlog ID</th>
      <th>Test Mapping</th>
    </tr>
{% for row in rows %}
    <tr>
      <td>{{ loop.index }}</td>
      <td><a href="{{ row.link }}" target="_blank">{% if row.trace.successful %}{{ row.trace.backlog_item.id }}{% else %}<span class="notok">{{ row.trace.backlog_item.id }}</span>{% endif %}</a></td>
      <td><div><ul class="nobullets">
{% if row.trace.is_missing %}
        <li class="notok"><b>Missing</b></li>
{% endif %}
{% for test in row.trace.trace_tests %}
        <li class="{{ 'ok' if test.passed else 'notok' }}"><b>{{ 'OK' if test.passed else 'not OK' }}</b>: {% if test.source_file %}<a href="{{ test.source_file }}" target="_blank">{{ test.full_name }}</a>{% else %}{{ test.full_name }}{% endif %}</li>
{% endfor %}
      </ul></div></td>
    </tr>
{% endfor %}
  </table>
{% if not rows %}
  <div><h2><center><span class="red"><b>No issues traced to automated tests yet.</b></span></center></h2></div>
{% endif %}
</body>
</html>
"""


def render_html_report(
    traces: Sequence[Trace],
    config: CtmConfig,
    *,
    full_report: bool = True,
    snapshot: datetime | None = None,
) -> str:
    """Render traces as an HTML page.

    Args:
        traces: Traces to list, one table row each.
        config: Run configuration, used for links and the delivery header.
        full_report: If False, show the delivery program and version.
        snapshot: Timestamp printed on the page; defaults to now (UTC).

    Returns:
        The HTML document.
    """
    snapshot = snapshot or datetime.now(timezone.utc)
    template = create_environment(autoescape=True).from_string(HTML_TEMPLATE)
    return template.render(
        rows=[{"trace": trace, "link": issue_url(trace.backlog_item, config)} for trace in traces],
        successful=count_successful_traces(traces),
        program="" if full_report else config.delivery.program,
        version="" if full_report else config.delivery.version,
        timestamp=snapshot.strftime("%a, %d %b %Y %H:%M:%S UTC"),
    )


def write_html_report(
    path: Path | str,
    traces: Sequence[Trace],
    config: CtmConfig,
    *,
    full_report: bool = True,
) -> Path:
    """Write the HTML report and return its path."""
    path = Path(path)
    path.write_text(render_html_report(traces, config, full_report=full_report), encoding="utf-8")
    logger.info("html_report_written", path=str(path), traces=len(traces))
    return path


__all__ = ["HTML_TEMPLATE", "render_html_report", "write_html_report"]

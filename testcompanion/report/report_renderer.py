"""
Report rendering for testing sessions.

Renders a session in one of four formats. Every format lists the same
sections in the same order: title, areas, start, duration, testers, task
breakdown, charter/opportunity, attached files, test notes, bugs, issues,
then a generated-at footer.
"""

from __future__ import annotations

import html
import json
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any

from ..formatting import duration_category, format_duration, format_report_timestamp
from ..session_schema import SessionModel

AREA_SEPARATOR = " > "

_RULE = "=" * 60
_THIN_RULE = "-" * 60
_TEXT_INDENT = " " * 21


class ExportFormat(Enum):
    """Supported export formats."""

    PLAIN_TEXT = "text"
    MARKDOWN = "markdown"
    HTML = "html"
    JSON = "json"

    @property
    def extension(self) -> str:
        return _EXTENSIONS[self]

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]


_EXTENSIONS = {
    ExportFormat.PLAIN_TEXT: ".txt",
    ExportFormat.MARKDOWN: ".md",
    ExportFormat.HTML: ".html",
    ExportFormat.JSON: ".json",
}

_DISPLAY_NAMES = {
    ExportFormat.PLAIN_TEXT: "Plain Text (.txt)",
    ExportFormat.MARKDOWN: "Markdown (.md)",
    ExportFormat.HTML: "HTML (.html)",
    ExportFormat.JSON: "JSON (.json)",
}


def escape_html(value: str) -> str:
    """Escape ``&``, ``<``, ``>`` and ``"``."""
    return html.escape(value, quote=False).replace('"', "&quot;")


def area_path(model: SessionModel) -> str:
    return AREA_SEPARATOR.join(model.area_selections)


def render_report(
    model: SessionModel,
    active_duration: timedelta,
    format: ExportFormat = ExportFormat.PLAIN_TEXT,
    generated_at: datetime | None = None,
) -> str:
    """
    Render a session report.

    Args:
        model: Session to render
        active_duration: Accumulated active time to report
        format: Output format
        generated_at: Footer timestamp (default: now, UTC)

    Returns:
        Report text
    """
    generated = format_report_timestamp(generated_at or datetime.now(timezone.utc))

    if format == ExportFormat.MARKDOWN:
        return _render_markdown(model, active_duration, generated)
    if format == ExportFormat.HTML:
        return _render_html(model, active_duration, generated)
    if format == ExportFormat.JSON:
        return _render_json(model, active_duration, generated)
    return _render_plain_text(model, active_duration, generated)


def _indented(text: str) -> list[str]:
    return [_TEXT_INDENT + line.rstrip("\r") for line in text.split("\n")]


def _render_plain_text(model: SessionModel, duration: timedelta, generated: str) -> str:
    lines = [
        _RULE,
        "              TESTING SESSION REPORT",
        _RULE,
        "",
        f"Title: {model.title}",
        "",
        "Areas Covered:",
    ]
    if model.area_selections:
        lines.append(f"  {area_path(model)}")
    lines += [
        "",
        f"Start: {model.start_time}",
        "",
        f"Duration: {format_duration(duration)} ({duration_category(duration).value})",
        "",
        f"Tester(s): {model.tester_names}",
        "",
        "Task Breakdown:",
        f"  Session Setup:                 {model.session_setup_percent:.1f}%",
        f"  Test Design & Execution:       {model.test_design_execution_percent:.1f}%",
        f"  Bug Investigation & Reporting: {model.bug_investigation_percent:.1f}%",
        "",
        f"Charter: {model.charter_percent:.1f}%  |  Opportunity: {model.opportunity_percent:.1f}%",
        "",
        "Attached Files:",
    ]
    if not model.attached_files:
        lines.append("  (none)")
    for number, path in enumerate(model.attached_files, start=1):
        lines.append(f"  [{number}] {path}")
    lines += [
        "",
        "Test Notes:",
        _THIN_RULE,
        model.test_notes,
        _THIN_RULE,
        "",
        _RULE,
        f"BUGS ({len(model.bugs)})",
        _RULE,
    ]
    for number, bug in enumerate(model.bugs, start=1):
        lines += [
            "",
            f"  Bug #{number}:",
            f"    Title:           {bug.title}",
            "    Description:",
            *_indented(bug.description),
            "    Result:",
            *_indented(bug.result),
            "    Expected Result:",
            *_indented(bug.expected_result),
        ]
        if bug.related_files:
            lines.append(f"    Related Files:   {', '.join(bug.related_files)}")
        lines.append(_THIN_RULE)
    lines += [
        "",
        _RULE,
        f"ISSUES ({len(model.issues)})",
        _RULE,
    ]
    for number, issue in enumerate(model.issues, start=1):
        lines += [
            "",
            f"  Issue #{number}:",
            f"    Title:           {issue.title}",
            "    Description:",
            *_indented(issue.description),
            _THIN_RULE,
        ]
    lines += [
        "",
        _RULE,
        f"Report generated: {generated}",
        _RULE,
    ]
    return "\n".join(lines) + "\n"


def _render_markdown(model: SessionModel, duration: timedelta, generated: str) -> str:
    lines = [
        "# Testing Session Report",
        "",
        f"## {model.title}",
        "",
        "| Field | Value |",
        "|-------|-------|",
        f"| **Areas** | {area_path(model)} |",
        f"| **Start** | {model.start_time} |",
        f"| **Duration** | {format_duration(duration)} ({duration_category(duration).value}) |",
        f"| **Tester(s)** | {model.tester_names} |",
        "",
        "### Task Breakdown",
        "",
        "| Task | % |",
        "|------|---|",
        f"| Session Setup | {model.session_setup_percent:.1f}% |",
        f"| Test Design & Execution | {model.test_design_execution_percent:.1f}% |",
        f"| Bug Investigation & Reporting | {model.bug_investigation_percent:.1f}% |",
        "",
        f"**Charter:** {model.charter_percent:.1f}% | **Opportunity:** {model.opportunity_percent:.1f}%",
        "",
        "### Attached Files",
        "",
    ]
    if not model.attached_files:
        lines.append("_(none)_")
    lines += [f"- `{path}`" for path in model.attached_files]
    lines += [
        "",
        "### Test Notes",
        "",
        model.test_notes,
        "",
        "---",
        "",
        f"### Bugs ({len(model.bugs)})",
        "",
    ]
    for number, bug in enumerate(model.bugs, start=1):
        lines += [
            f"#### Bug #{number}: {bug.title}",
            "",
            "**Description:**",
            bug.description,
            "",
            "**Result:**",
            bug.result,
            "",
            "**Expected Result:**",
            bug.expected_result,
        ]
        if bug.related_files:
            files = ", ".join(f"`{path}`" for path in bug.related_files)
            lines += ["", f"**Related Files:** {files}"]
        lines.append("")
    lines += [
        "---",
        "",
        f"### Issues ({len(model.issues)})",
        "",
    ]
    for number, issue in enumerate(model.issues, start=1):
        lines += [
            f"#### Issue #{number}: {issue.title}",
            "",
            issue.description,
            "",
        ]
    lines += [
        "---",
        f"_Report generated: {generated}_",
    ]
    return "\n".join(lines) + "\n"


_HTML_STYLE = """\
body{font-family:system-ui,sans-serif;max-width:900px;margin:2em auto;padding:0 1em;color:#222}
h1{border-bottom:2px solid #333}h2,h3{margin-top:1.5em}
table{border-collapse:collapse;width:100%}th,td{border:1px solid #ccc;padding:6px 10px;text-align:left}th{background:#f5f5f5}
.bug{border-left:4px solid #e44;padding:0.5em 1em;margin:1em 0;background:#fff8f8}
.issue{border-left:4px solid #f80;padding:0.5em 1em;margin:1em 0;background:#fffbf0}
pre{background:#f5f5f5;padding:1em;overflow-x:auto;white-space:pre-wrap}"""


def _render_html(model: SessionModel, duration: timedelta, generated: str) -> str:
    e = escape_html
    lines = [
        "<!DOCTYPE html>",
        '<html><head><meta charset="utf-8"/>',
        f"<title>Session Report - {e(model.title)}</title>",
        "<style>",
        _HTML_STYLE,
        "</style></head><body>",
        "<h1>Testing Session Report</h1>",
        f"<h2>{e(model.title)}</h2>",
        "<table><tbody>",
        f"<tr><th>Areas</th><td>{e(area_path(model))}</td></tr>",
        f"<tr><th>Start</th><td>{e(model.start_time)}</td></tr>",
        f"<tr><th>Duration</th><td>{format_duration(duration)} ({duration_category(duration).value})</td></tr>",
        f"<tr><th>Tester(s)</th><td>{e(model.tester_names)}</td></tr>",
        "</tbody></table>",
        "<h3>Task Breakdown</h3>",
        "<table><thead><tr><th>Task</th><th>%</th></tr></thead><tbody>",
        f"<tr><td>Session Setup</td><td>{model.session_setup_percent:.1f}%</td></tr>",
        f"<tr><td>Test Design &amp; Execution</td><td>{model.test_design_execution_percent:.1f}%</td></tr>",
        f"<tr><td>Bug Investigation &amp; Reporting</td><td>{model.bug_investigation_percent:.1f}%</td></tr>",
        "</tbody></table>",
        f"<p><strong>Charter:</strong> {model.charter_percent:.1f}% | "
        f"<strong>Opportunity:</strong> {model.opportunity_percent:.1f}%</p>",
        "<h3>Attached Files</h3>",
    ]
    if not model.attached_files:
        lines.append("<p><em>(none)</em></p>")
    else:
        lines.append("<ul>")
        lines += [f"<li><code>{e(path)}</code></li>" for path in model.attached_files]
        lines.append("</ul>")
    lines += [
        "<h3>Test Notes</h3>",
        f"<pre>{e(model.test_notes)}</pre>",
        f"<h3>Bugs ({len(model.bugs)})</h3>",
    ]
    for number, bug in enumerate(model.bugs, start=1):
        lines += [
            '<div class="bug">',
            f"<h4>Bug #{number}: {e(bug.title)}</h4>",
            f"<p><strong>Description:</strong></p><pre>{e(bug.description)}</pre>",
            f"<p><strong>Result:</strong></p><pre>{e(bug.result)}</pre>",
            f"<p><strong>Expected Result:</strong></p><pre>{e(bug.expected_result)}</pre>",
        ]
        if bug.related_files:
            files = ", ".join(f"<code>{e(path)}</code>" for path in bug.related_files)
            lines.append(f"<p><strong>Related Files:</strong> {files}</p>")
        lines.append("</div>")
    lines.append(f"<h3>Issues ({len(model.issues)})</h3>")
    for number, issue in enumerate(model.issues, start=1):
        lines += [
            '<div class="issue">',
            f"<h4>Issue #{number}: {e(issue.title)}</h4>",
            f"<pre>{e(issue.description)}</pre>",
            "</div>",
        ]
    lines += [
        f"<hr/><p><em>Report generated: {generated}</em></p>",
        "</body></html>",
    ]
    return "\n".join(lines) + "\n"


def report_to_dict(model: SessionModel, duration: timedelta, generated: str) -> dict[str, Any]:
    """Build the exported JSON document. Key order is part of the format."""
    return {
        "title": model.title,
        "areas": list(model.area_selections),
        "start": model.start_time,
        "duration": format_duration(duration),
        "durationCategory": duration_category(duration).value,
        "testers": model.tester_names,
        "taskBreakdown": {
            "sessionSetup": model.session_setup_percent,
            "testDesignExecution": model.test_design_execution_percent,
            "bugInvestigationReporting": model.bug_investigation_percent,
        },
        "charter": model.charter_percent,
        "opportunity": model.opportunity_percent,
        "attachedFiles": list(model.attached_files),
        "testNotes": model.test_notes,
        "bugs": [
            {
                "title": bug.title,
                "description": bug.description,
                "result": bug.result,
                "expectedResult": bug.expected_result,
                "relatedFiles": list(bug.related_files),
            }
            for bug in model.bugs
        ],
        "issues": [
            {"title": issue.title, "description": issue.description}
            for issue in model.issues
        ],
        "reportGenerated": generated,
    }


def _render_json(model: SessionModel, duration: timedelta, generated: str) -> str:
    return json.dumps(report_to_dict(model, duration, generated), indent=2, ensure_ascii=False)


__all__ = [
    "AREA_SEPARATOR",
    "ExportFormat",
    "area_path",
    "escape_html",
    "render_report",
    "report_to_dict",
]

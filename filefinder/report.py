"""Render a sealed scan report as JSON or Markdown."""

from __future__ import annotations

from filefinder.scan.models import ScanReport, SearchConfig
from filefinder.utils.cli_output import json_response

REPORT_SCHEMA_ID = "search_report"
REPORT_SCHEMA_VERSION = 1


def render_json(report: ScanReport) -> str:
    """Serialize every report field under a schema-stamped envelope."""
    return json_response(
        REPORT_SCHEMA_ID,
        REPORT_SCHEMA_VERSION,
        **report.model_dump(mode="json"),
    )


def render_markdown(report: ScanReport, config: SearchConfig) -> str:
    """Human-readable report: query summary, run statistics, then matches."""
    lines: list[str] = ["# FileFinder results", ""]

    lines.append(f"- Base dir: `{config.root}`")
    if config.name is not None:
        lines.append(f"- Name query: `{config.name}`")
    if config.content is not None:
        lines.append(f"- Content regex: `{config.content.pattern}`")
    if config.extensions:
        lines.append(f"- Extensions: `{','.join(sorted(config.extensions))}`")
    elif config.content is not None:
        lines.append("- Extensions: *(default text set for content search)*")
    pdf_state = "enabled" if config.include_pdf else "disabled"
    lines.append(f"- PDF content search: `{pdf_state}`")

    lines += ["", "## Run statistics"]
    stats = [
        ("Files discovered", report.files_discovered),
        ("Files scanned for content (text)", report.files_scanned_text),
        ("Files scanned for content (pdf)", report.files_scanned_pdf),
        ("Skipped (non-text)", report.files_skipped_non_text),
        ("Skipped (too large)", report.files_skipped_too_large),
        ("Skipped (non-UTF8)", report.files_skipped_non_utf8),
        ("Skipped (pdf disabled)", report.files_skipped_not_pdf),
        ("Skipped (extension filter)", report.files_skipped_extension),
        ("Skipped (unreadable text)", report.files_skipped_unreadable_text),
        ("Skipped (unreadable pdf)", report.files_skipped_unreadable_pdf),
        ("Errors", report.errors_total),
        ("Enumeration errors", report.enumeration_errors),
        ("Matches total", report.matches_total),
    ]
    lines += [f"- {label}: **{value}**" for label, value in stats]
    if config.limit:
        lines.append(f"- Matches printed: **{report.matches_printed}** (limit = {config.limit})")
    else:
        lines.append(f"- Matches printed: **{report.matches_printed}**")
    lines.append(f"- Elapsed: **{report.elapsed_ms} ms**")

    lines += ["", "## Matches", ""]
    if not report.results:
        lines += ["*No matches.*", ""]
    for result in report.results:
        lines.append(f"### `{result.path}`")
        lines.append(f"- matched_name: `{str(result.matched_name).lower()}`")
        lines.append(f"- matched_content: `{str(result.matched_content).lower()}`")
        if result.snippet is not None:
            lines.append(f"- snippet: `{result.snippet}`")
        lines.append("")

    return "\n".join(lines).rstrip("\n") + "\n"

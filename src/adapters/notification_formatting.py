"""Shared notification formatting helpers.

Keeping formatting here prevents drift between adapters that need markup.
"""

from __future__ import annotations

import html


def _format_markdown(summary: str, body: str) -> str:
    def escape_md(value: str) -> str:
        for ch in r"*[`_":
            value = value.replace(ch, f"\\{ch}")
        return value

    lines = [f"*{escape_md(summary)}*", ""]
    lines.extend(escape_md(line) for line in body.splitlines())
    return "\n".join(lines)


def _format_html(summary: str, body: str) -> str:
    lines = [f"<b>{html.escape(summary)}</b>", ""]
    lines.extend(html.escape(line) for line in body.splitlines())
    return "\n".join(lines)


def format_notification(summary: str, body: str, mode: str) -> str:
    """Return the notification formatted for the requested mode."""

    if mode == "markdown":
        return _format_markdown(summary, body)
    if mode == "html":
        return _format_html(summary, body)
    raise ValueError(f"Unsupported notification format: {mode}")

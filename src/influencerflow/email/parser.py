"""Inbound email body handling.

Provides helpers for:
- Reducing an HTML body to plain text when a reply has no text part
- Extracting only the latest reply from a multi-message email thread
"""

from __future__ import annotations

import html
import re

from mailparser_reply import EmailReplyParser  # type: ignore[import-untyped]

_DROP_BLOCKS = re.compile(r"<(script|style|head)\b[^>]*>.*?</\1\s*>", re.IGNORECASE | re.DOTALL)
_LINE_BREAKS = re.compile(r"<br\s*/?>|</(p|div|li|tr|h[1-6])\s*>", re.IGNORECASE)
_TAGS = re.compile(r"<[^>]+>")
_BLANK_RUNS = re.compile(r"\n\s*\n\s*\n+")


def html_to_text(html_body: str) -> str:
    """Strip an HTML body down to readable plain text.

    Block-level closing tags and ``<br>`` become newlines, remaining tags are
    removed and entities are unescaped.

    Args:
        html_body: The HTML content of the email.

    Returns:
        The plain-text rendering, trimmed.
    """
    text = _DROP_BLOCKS.sub("", html_body)
    text = _LINE_BREAKS.sub("\n", text)
    text = _TAGS.sub("", text)
    text = html.unescape(text)
    lines = [line.strip() for line in text.splitlines()]
    return _BLANK_RUNS.sub("\n\n", "\n".join(lines)).strip()


def extract_latest_reply(full_body: str) -> str:
    """Extract only the latest reply text from an email thread body.

    Uses ``mail-parser-reply`` to strip quoted content, signature blocks,
    and forwarded message headers, returning only the new content from the
    most recent reply.

    If the parser returns an empty string (e.g. the entire message was
    detected as quoted content), the original ``full_body`` is returned
    as a fallback.

    Args:
        full_body: The full text body of the email (may contain quoted
            replies, signatures, etc.).

    Returns:
        The extracted latest reply text, or the original body if
        extraction yields nothing.
    """
    parsed: str = EmailReplyParser(languages=["en"]).parse_reply(text=full_body)
    if not parsed or not parsed.strip():
        return full_body
    return parsed


def reply_body(text: str | None, html_body: str | None) -> str:
    """The latest reply of an inbound email, preferring its plain-text part."""
    body = text if text and text.strip() else html_to_text(html_body or "")
    if not body:
        return ""
    return extract_latest_reply(body)

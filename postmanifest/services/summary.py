from __future__ import annotations

import re
from typing import Any, Mapping

from markdown_it import MarkdownIt


_markdown = MarkdownIt("commonmark").enable("table").enable("strikethrough")

MAX_SUMMARY_LENGTH = 160


def extract_summary(meta: Mapping[str, Any], body: str) -> str:
    summary = meta.get("summary") or meta.get("description")
    if isinstance(summary, str) and summary.strip():
        return summary.strip()

    plain = re.sub(r"\s+", " ", _first_paragraph_text(body)).strip()
    if len(plain) <= MAX_SUMMARY_LENGTH:
        return plain
    return f"{plain[:MAX_SUMMARY_LENGTH].rstrip()}..."


def _first_paragraph_text(body: str) -> str:
    tokens = _markdown.parse(body)
    for index, token in enumerate(tokens):
        if token.type != "paragraph_open" or index + 1 >= len(tokens):
            continue
        inline = tokens[index + 1]
        # Paragraphs nested in lists or quotes are not a post's lead.
        if token.level != 0 or not inline.children:
            continue
        return "".join(_child_text(child) for child in inline.children)
    return ""


def _child_text(token) -> str:
    if token.type in ("text", "code_inline"):
        return token.content
    if token.type in ("softbreak", "hardbreak"):
        return " "
    if token.type == "image":
        return "".join(_child_text(child) for child in token.children or [])
    return ""

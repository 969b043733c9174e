"""Markdown-to-HTML conversion for post bodies."""

import markdown

_EXTENSIONS = ["fenced_code", "tables"]


def render_markdown(text: str) -> str:
    return markdown.markdown(text, extensions=_EXTENSIONS)

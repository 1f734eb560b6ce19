"""
Markdown rendering for task, backlog, follow-up and note content
"""

import markdown

# GitHub-flavoured subset with single newlines rendered as <br>
MARKDOWN_EXTENSIONS = ["fenced_code", "tables", "sane_lists", "nl2br"]


def render_markdown(text: str) -> str:
    """Render markdown text to HTML"""
    return markdown.markdown(text, extensions=MARKDOWN_EXTENSIONS)


def render_optional(text: str | None) -> str | None:
    """Render markdown, mapping empty content to None"""
    return render_markdown(text) if text else None

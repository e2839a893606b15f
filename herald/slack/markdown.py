"""Convert GitHub release notes from Markdown to Slack mrkdwn.

Release notes are parsed as CommonMark (plus strikethrough and tables)
with ``markdown-it-py`` and the syntax tree is rendered using Slack's
dialect:

- headings become bold lines (``*Heading*``)
- ``**strong**`` becomes ``*strong*`` and ``*em*`` becomes ``_em_``
- ``~~struck~~`` becomes ``~struck~``
- ``[text](url)`` becomes ``<url|text>``
- list items are prefixed with ``•`` or their number; nested lists are
  indented under their parent item
- fenced and indented code keep triple backticks
- raw HTML (including comments) is dropped

Usage
-----
>>> convert_markdown("## Fixes\\n\\n- **core**: no more crash")
'*Fixes*\\n\\n• *core*: no more crash'

"""

from __future__ import annotations

import typing as typ

from markdown_it import MarkdownIt
from markdown_it.tree import SyntaxTreeNode

_PARSER = MarkdownIt("commonmark").enable(["strikethrough", "table"])

_BULLET = "• "
_BLOCK_SEPARATOR = "\n\n"

_INLINE_WRAPPERS: dict[str, str] = {
    "strong": "*",
    "em": "_",
    "s": "~",
}

# Node types with no Slack rendering.
_DROPPED = frozenset({"html_block", "html_inline"})


def _escape(text: str) -> str:
    """Escape the three characters Slack reserves for control sequences."""
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def _render_inline_children(node: SyntaxTreeNode) -> str:
    return "".join(_render_inline(child) for child in node.children)


def _render_link(node: SyntaxTreeNode) -> str:
    href = str(node.attrs.get("href", ""))
    label = _render_inline_children(node)
    if not label or label == href:
        return f"<{href}>"
    return f"<{href}|{label}>"


def _render_image(node: SyntaxTreeNode) -> str:
    src = str(node.attrs.get("src", ""))
    alt = _escape(node.content)
    return f"<{src}|{alt}>" if alt else f"<{src}>"


def _render_inline(node: SyntaxTreeNode) -> str:  # noqa: PLR0911 - one branch per node type
    kind = node.type
    if kind == "text":
        return _escape(node.content)
    if kind in {"softbreak", "hardbreak"}:
        return "\n"
    if kind == "code_inline":
        return f"`{_escape(node.content)}`"
    if kind in _INLINE_WRAPPERS:
        marker = _INLINE_WRAPPERS[kind]
        return f"{marker}{_render_inline_children(node)}{marker}"
    if kind == "link":
        return _render_link(node)
    if kind == "image":
        return _render_image(node)
    if kind in _DROPPED:
        return ""
    if node.children:
        return _render_inline_children(node)
    return _escape(node.content)


def _inline_content(node: SyntaxTreeNode) -> str:
    """Render the ``inline`` child of a paragraph, heading or table cell."""
    return "".join(_render_inline_children(child) for child in node.children)


def _indent_continuation(text: str, prefix: str) -> str:
    """Prefix the first line of *text* and align the remaining lines."""
    padding = " " * len(prefix)
    first, *rest = text.split("\n")
    lines = [f"{prefix}{first}"]
    lines.extend(f"{padding}{line}" if line else line for line in rest)
    return "\n".join(lines)


def _render_list(node: SyntaxTreeNode) -> str:
    ordered = node.type == "ordered_list"
    start = int(typ.cast("int", node.attrs.get("start", 1))) if ordered else 1
    items: list[str] = []
    for offset, item in enumerate(node.children):
        prefix = f"{start + offset}. " if ordered else _BULLET
        body = "\n".join(
            rendered
            for rendered in (_render_block(child) for child in item.children)
            if rendered
        )
        items.append(_indent_continuation(body, prefix))
    return "\n".join(items)


def _render_blockquote(node: SyntaxTreeNode) -> str:
    inner = _render_blocks(node.children)
    return "\n".join(f"> {line}" if line else ">" for line in inner.split("\n"))


def _render_table(node: SyntaxTreeNode) -> str:
    rows: list[str] = []
    for section in node.children:  # thead / tbody
        for row in section.children:
            cells = (_inline_content(cell) for cell in row.children)
            rows.append(" | ".join(cells))
    return "\n".join(rows)


def _render_block(node: SyntaxTreeNode) -> str:  # noqa: PLR0911 - one branch per node type
    kind = node.type
    if kind == "paragraph":
        return _inline_content(node)
    if kind == "heading":
        text = _inline_content(node)
        return f"*{text}*" if text else ""
    if kind in {"bullet_list", "ordered_list"}:
        return _render_list(node)
    if kind in {"fence", "code_block"}:
        return f"```\n{_escape(node.content)}```"
    if kind == "blockquote":
        return _render_blockquote(node)
    if kind == "hr":
        return "---"
    if kind == "table":
        return _render_table(node)
    if kind in _DROPPED:
        return ""
    return _render_blocks(node.children)


def _render_blocks(nodes: typ.Sequence[SyntaxTreeNode]) -> str:
    rendered = (_render_block(node) for node in nodes)
    return _BLOCK_SEPARATOR.join(block for block in rendered if block)


def convert_markdown(text: str) -> str:
    """Return *text* rewritten from Markdown into Slack mrkdwn.

    Parameters
    ----------
    text : str
        Markdown source, typically GitHub release notes.

    Returns
    -------
    str
        Slack mrkdwn with trailing whitespace removed.

    """
    root = SyntaxTreeNode(_PARSER.parse(text))
    return _render_blocks(root.children).rstrip()


__all__ = ["convert_markdown"]

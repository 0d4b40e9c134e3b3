"""Render structured blocks to display markup"""

from html import escape

from answerkit.core.blocks import BlockDocument
from answerkit.core.highlight import block_language
from answerkit.core.models import Block, BlockType


def render_text(block: Block) -> str:
    return f"<p>{escape(block.content, quote=False)}</p>" if block.content else ""


def render_code(block: Block) -> str:
    lang = block_language(block)
    return f'<pre><code class="language-{lang}">{escape(block.content, quote=False)}</code></pre>'


def render_image(block: Block) -> str:
    """Image plus optional caption; an image block with no payload renders nothing."""
    if not block.content:
        return ""
    out = f'<p><img src="{escape(block.content)}"></p>'
    if block.caption:
        out += f"<p><em>{escape(block.caption, quote=False)}</em></p>"
    return out


def render_table(block: Block) -> str:
    """First row is the header; blank header cells are labelled by column number."""
    rows = block.table_data or []
    if not rows:
        return ""
    head = "".join(
        f"<th>{escape(cell or f'Column {n + 1}', quote=False)}</th>" for n, cell in enumerate(rows[0])
    )
    body = "".join(
        "<tr>" + "".join(f"<td>{escape(cell, quote=False)}</td>" for cell in row) + "</tr>"
        for row in rows[1:]
    )
    return f"<table><thead><tr>{head}</tr></thead><tbody>{body}</tbody></table>"


RENDERERS = {
    BlockType.text: render_text,
    BlockType.code: render_code,
    BlockType.image: render_image,
    BlockType.table: render_table,
}


def build_body(document: BlockDocument) -> str:
    """Concatenate per-block markup in document order, skipping blocks that render empty."""
    parts = (RENDERERS[b.type](b) for b in document)
    return "\n".join(p for p in parts if p)

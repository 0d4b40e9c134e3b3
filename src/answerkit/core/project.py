"""Plain-text projection of markup or block content for validation and search indexing"""

import re
from typing import Iterable, Union

from bs4 import BeautifulSoup

from answerkit.core.models import Block, BlockType, Projection


_WS_RE = re.compile(r"\s+")

# Elements whose boundaries separate words even when the markup has no whitespace there.
_BOUNDARY_TAGS = (
    "p", "div", "br", "li", "ul", "ol", "pre", "blockquote",
    "h1", "h2", "h3", "h4", "h5", "h6",
    "table", "thead", "tbody", "tr", "th", "td", "img",
)


def collapse(text: str) -> str:
    """Collapse every whitespace run (newlines included) to one space and trim."""
    return _WS_RE.sub(" ", text).strip()


def markup_text(markup: str) -> str:
    """Strip tags and decode entities, keeping element boundaries as whitespace."""
    if not markup:
        return ""
    soup = BeautifulSoup(markup, "html.parser")
    for node in soup.find_all(_BOUNDARY_TAGS):
        node.insert_before(" ")
        node.insert_after(" ")
    return soup.get_text()


def _block_parts(blocks: Iterable[Block]) -> Iterable[str]:
    for block in blocks:
        if block.type in (BlockType.text, BlockType.code):
            yield block.content
        elif block.type == BlockType.image:
            if block.caption:
                yield block.caption
        elif block.type == BlockType.table:
            for row in block.table_data or []:
                yield from row


def project(content: Union[str, Iterable[Block], None]) -> Projection:
    """Project markup (str) or structured blocks (BlockDocument or Block sequence) to plain text."""
    if content is None:
        raw = ""
    elif isinstance(content, str):
        raw = markup_text(content)
    else:
        raw = " ".join(_block_parts(content))
    text = collapse(raw)
    return Projection(text=text, word_count=len(text.split()), char_count=len(text))

"""Assign a highlighting language to every code block in canonical markup"""

import logging
import re
from dataclasses import dataclass

from bs4 import BeautifulSoup, Tag

from answerkit.core.models import DEFAULT_LANGUAGE, Block, BlockType


logger = logging.getLogger(__name__)

HIGHLIGHT_CLASS = "hljs"
_LANGUAGE_RE = re.compile(r"^language-([a-z0-9_+#-]+)$")


@dataclass(frozen=True)
class CodeNode:
    language: str
    text: str


def _tagged_language(node: Tag):
    for cls in node.get("class") or []:
        m = _LANGUAGE_RE.match(cls)
        if m:
            return m.group(1)
    return None


def _code_child(pre: Tag, soup: BeautifulSoup) -> Tag:
    """Return the <code> under pre, wrapping pre's children in one if it has none."""
    code = pre.find("code")
    if code is not None:
        return code
    code = soup.new_tag("code")
    for child in list(pre.contents):
        code.append(child.extract())
    pre.append(code)
    return code


def _resolve(pre: Tag, code: Tag, default: str) -> str:
    return _tagged_language(code) or _tagged_language(pre) or default


def block_language(block: Block, default: str = DEFAULT_LANGUAGE) -> str:
    """Language for a structured code block (its language field, else the default)."""
    if block.type == BlockType.code and block.language is not None:
        return block.language.value
    return default


def find_code_nodes(markup: str, default: str = DEFAULT_LANGUAGE) -> list[CodeNode]:
    """List every <pre> code target in document order with its resolved language."""
    if not markup:
        return []
    soup = BeautifulSoup(markup, "html.parser")
    nodes = []
    for pre in soup.find_all("pre"):
        code = pre.find("code")
        nodes.append(CodeNode(
            language=_resolve(pre, code if code is not None else pre, default),
            text=pre.get_text(),
        ))
    return nodes


def dispatch(markup: str, default: str = DEFAULT_LANGUAGE) -> str:
    """Mark each code block with its language for the highlighter. Idempotent; text is untouched."""
    if not markup or "<pre" not in markup:
        return markup or ""
    soup = BeautifulSoup(markup, "html.parser")
    pres = soup.find_all("pre")
    for pre in pres:
        code = _code_child(pre, soup)
        language = _resolve(pre, code, default)
        others = [c for c in (code.get("class") or [])
                  if c != HIGHLIGHT_CLASS and not _LANGUAGE_RE.match(c)]
        code["class"] = [f"language-{language}", *others, HIGHLIGHT_CLASS]
        code["data-language"] = language
    logger.debug("Dispatched %d code block(s) for highlighting", len(pres))
    return str(soup)

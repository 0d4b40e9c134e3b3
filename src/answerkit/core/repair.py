"""Repair of pasted code that a WYSIWYG import split into one paragraph per line

Scans the top-level siblings of the parsed markup with a two-state machine:

  SCANNING  looking for a code-line paragraph (a <p> whose only child is <code>)
  IN_RUN    collecting the code text of consecutive code-line paragraphs

When a run closes, its paragraphs are replaced by a single
<pre><code class="language-java"> block whose text is the collected lines
joined by newlines. Quill code-block containers (one <div> per line) are folded
into the same canonical block. Nothing nested below the top level is touched.
"""

import logging
from enum import Enum
from functools import lru_cache

from bs4 import BeautifulSoup, NavigableString, Tag

from answerkit.core.models import DEFAULT_LANGUAGE


logger = logging.getLogger(__name__)

QUILL_CONTAINER_CLASS = "ql-code-block-container"
QUILL_LINE_CLASS = "ql-code-block"


class State(str, Enum):
    SCANNING = "scanning"
    IN_RUN = "in_run"


def _is_blank(node) -> bool:
    return isinstance(node, NavigableString) and not node.strip()


def is_code_line_paragraph(node) -> bool:
    """True for <p> whose entire content is exactly one <code> element."""
    if not isinstance(node, Tag) or node.name != "p":
        return False
    children = list(node.children)
    return len(children) == 1 and isinstance(children[0], Tag) and children[0].name == "code"


def _is_quill_container(node) -> bool:
    return isinstance(node, Tag) and node.name == "div" and QUILL_CONTAINER_CLASS in (node.get("class") or [])


def _code_block(soup: BeautifulSoup, lines: list[str], language: str) -> Tag:
    """Build the canonical <pre><code class="language-..."> block."""
    pre = soup.new_tag("pre")
    code = soup.new_tag("code", attrs={"class": f"language-{language}"})
    code.string = "\n".join(lines)
    pre.append(code)
    return pre


def _quill_lines(container: Tag, default_language: str) -> tuple[list[str], str]:
    """Return (lines, language) for a Quill code-block container."""
    lines, language = [], default_language
    for line in container.find_all("div", class_=QUILL_LINE_CLASS):
        text = line.get_text()
        lines.append("" if not text.strip() else text)
        tag = line.get("data-language")
        if tag and tag != "plain":
            language = tag
    return lines, language


def merge_code_lines(siblings: list, soup: BeautifulSoup, language: str = DEFAULT_LANGUAGE) -> tuple[list, int]:
    """Return (replacement sibling list, number of blocks produced) for a flat sibling list."""
    out: list = []
    buffer: list[str] = []
    pending_blank: list = []
    state = State.SCANNING
    merged = 0

    def _close_run() -> None:
        nonlocal state, merged
        out.append(_code_block(soup, buffer[:], language))
        logger.debug("Merged %d code-line paragraph(s) into one code block", len(buffer))
        buffer.clear()
        merged += 1
        state = State.SCANNING

    for node in siblings:
        if state == State.IN_RUN:
            if is_code_line_paragraph(node):
                buffer.append(node.code.get_text())
                pending_blank.clear()
                continue
            if _is_blank(node):
                pending_blank.append(node)
                continue
            _close_run()
            out.extend(pending_blank)
            pending_blank.clear()

        if is_code_line_paragraph(node):
            buffer.append(node.code.get_text())
            state = State.IN_RUN
        elif _is_quill_container(node):
            lines, lang = _quill_lines(node, language)
            out.append(_code_block(soup, lines, lang))
            logger.debug("Folded Quill code container (%d line(s), %s)", len(lines), lang)
            merged += 1
        else:
            out.append(node)

    if state == State.IN_RUN:
        _close_run()
        out.extend(pending_blank)
    return out, merged


@lru_cache(maxsize=512)
def repair(markup: str, language: str = DEFAULT_LANGUAGE) -> str:
    """Merge code-line paragraph runs into code blocks. Returns markup unchanged when nothing matches."""
    if not markup or "<" not in markup:
        return markup or ""
    soup = BeautifulSoup(markup, "html.parser")
    siblings = list(soup.contents)
    replacement, merged = merge_code_lines(siblings, soup, language)
    if not merged:
        return markup

    for node in siblings:
        node.extract()
    for node in replacement:
        soup.append(node)
    return str(soup)

"""Shared fixtures for core unit tests"""

import pytest

from answerkit.core.blocks import BlockDocument
from answerkit.core.models import BlockType


# What a WYSIWYG paste of a three-line snippet degrades into.
DEGRADED_MARKUP = (
    "<p>Declare and return:</p>"
    "<p><code>int a;</code></p>"
    "<p><code>a = 1;</code></p>"
    "<p><code>return a;</code></p>"
    "<p>Done.</p>"
)

QUILL_MARKUP = (
    '<div class="ql-code-block-container" spellcheck="false">'
    '<div class="ql-code-block" data-language="python">def f():</div>'
    '<div class="ql-code-block" data-language="python"><br></div>'
    '<div class="ql-code-block" data-language="python">    return 1</div>'
    "</div>"
)


@pytest.fixture(name="degraded")
def degraded_fixture():
    return DEGRADED_MARKUP


@pytest.fixture(name="quill")
def quill_fixture():
    return QUILL_MARKUP


@pytest.fixture(name="doc")
def doc_fixture():
    """One block of every type: text, code, image, table."""
    doc = BlockDocument.new()
    for t in (BlockType.code, BlockType.image, BlockType.table):
        doc = doc.add_block(t)
    text, code, image, table = (b.id for b in doc)
    doc = doc.update_block(text, content="Use a HashMap.")
    doc = doc.update_block(code, content="Map<String, Integer> m = new HashMap<>();")
    doc = doc.update_block(image, content="data:image/png;base64,AAAA", caption="Bucket layout")
    doc = doc.set_table_cell(table, 0, 0, "Op")
    doc = doc.set_table_cell(table, 0, 1, "Cost")
    doc = doc.set_table_cell(table, 1, 0, "get")
    doc = doc.set_table_cell(table, 1, 1, "O(1)")
    return doc

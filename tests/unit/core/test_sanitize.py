"""Unit tests for core/sanitize.py"""

import pytest
from bs4 import BeautifulSoup

from answerkit.core.sanitize import sanitize


def _tags(markup: str) -> set[str]:
    return {t.name for t in BeautifulSoup(markup, "html.parser").find_all(True)}


def test_script_element_removed_with_content():
    """script elements and their text never survive."""
    out = sanitize("<p>Hi</p><script>alert('x')</script>")
    assert "<script" not in out
    assert "alert" not in out
    assert "Hi" in out


def test_event_handler_attribute_removed():
    """onclick and other handlers are stripped; the element stays."""
    out = sanitize('<p onclick="steal()">Click</p>')
    assert "onclick" not in out
    assert "steal" not in out
    assert out == "<p>Click</p>"


@pytest.mark.parametrize("markup", [
    "<style>p{color:red}</style><p>x</p>",
    '<iframe src="https://evil.example"></iframe><p>x</p>',
    "<object data='x.swf'></object><p>x</p>",
])
def test_active_content_dropped(markup):
    """style, iframe, and object are removed entirely."""
    out = sanitize(markup)
    assert _tags(out) == {"p"}
    assert "evil" not in out and "color" not in out


def test_disallowed_wrapper_unwrapped():
    """Tags outside the allow-list are unwrapped, keeping their text."""
    out = sanitize("<div><span>kept</span></div>")
    assert out == "kept"


def test_allowed_structure_preserved():
    """Allow-listed elements come through untouched."""
    markup = (
        "<h1>T</h1><h2>S</h2><blockquote>q</blockquote>"
        "<ul><li><strong>a</strong></li></ul><ol><li><em>b</em></li></ol>"
        "<p><code>x</code></p>"
    )
    assert sanitize(markup) == markup


def test_h3_not_allowed():
    """Only heading levels 1 and 2 are allowed."""
    assert "<h3>" not in sanitize("<h3>Deep</h3>")


def test_table_kept():
    out = sanitize("<table><thead><tr><th>A</th></tr></thead><tbody><tr><td>1</td></tr></tbody></table>")
    assert {"table", "thead", "tbody", "tr", "th", "td"} <= _tags(out)


def test_language_class_on_code_kept():
    """A single language-<id> class on code is the only class allowed."""
    out = sanitize('<pre><code class="language-python">print(1)</code></pre>')
    assert 'class="language-python"' in out


@pytest.mark.parametrize("markup", [
    '<pre><code class="hljs">x</code></pre>',
    '<pre><code class="language-java evil">x</code></pre>',
    '<p class="language-java">x</p>',
])
def test_other_classes_stripped(markup):
    assert "class=" not in sanitize(markup)


def test_style_and_data_attributes_stripped():
    out = sanitize('<p style="color:red" data-x="1">t</p>')
    assert out == "<p>t</p>"


def test_link_href_kept_javascript_dropped():
    assert 'href="https://example.com"' in sanitize('<a href="https://example.com">ok</a>')
    assert "javascript" not in sanitize('<a href="javascript:alert(1)">bad</a>')


def test_data_uri_allowed_for_images_only():
    img = sanitize('<img src="data:image/png;base64,AAAA">')
    assert 'src="data:image/png;base64,AAAA"' in img
    link = sanitize('<a href="data:text/html;base64,PHNjcmlwdD4=">x</a>')
    assert "data:" not in link
    html_img = sanitize('<img src="data:text/html;base64,PHNjcmlwdD4=">')
    assert "data:" not in html_img


def test_img_alt_and_handlers_stripped():
    out = sanitize('<img src="https://example.com/a.png" alt="a" onerror="x()">')
    assert "onerror" not in out
    assert "alt=" not in out
    assert 'src="https://example.com/a.png"' in out


@pytest.mark.parametrize("markup", [
    "<p>Hello <b>bold</b> & <i>it</i></p>",
    "<script>x</script><p onclick='y'>a < b</p>",
    '<pre><code class="language-sql">SELECT * FROM t WHERE a &lt; 3;</code></pre>',
    "<table><tr><td>1</td></tr></table>",
    "<!-- note --><p>x</p>",
    "plain text with 5 > 3",
    "<table><p><li>",
    "<table><p>hi</p></table>",
])
def test_idempotent(markup):
    """sanitize(sanitize(x)) == sanitize(x)."""
    once = sanitize(markup)
    assert sanitize(once) == once


def test_empty_input():
    assert sanitize("") == ""


def test_comments_removed():
    assert "note" not in sanitize("<!-- note --><p>x</p>")

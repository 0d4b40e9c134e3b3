"""Allow-list markup sanitizer applied before storage and again before rendering"""

import logging
import re
from functools import lru_cache

from bleach.sanitizer import Cleaner
from bs4 import BeautifulSoup


logger = logging.getLogger(__name__)

ALLOWED_TAGS = frozenset({
    "p", "em", "strong", "code", "pre",
    "ul", "ol", "li",
    "table", "thead", "tbody", "tr", "th", "td",
    "img", "a", "h1", "h2", "blockquote",
})

ALLOWED_PROTOCOLS = frozenset({"http", "https", "mailto", "data"})

# Dropped together with their content; every other disallowed tag is unwrapped.
DROP_WITH_CONTENT = ("script", "style", "iframe", "object", "embed", "noscript", "template")

LANGUAGE_CLASS_RE = re.compile(r"^language-[a-z0-9_+#-]+$")
DATA_IMAGE_RE = re.compile(r"^data:image/[a-z0-9.+-]+[;,]", re.IGNORECASE)
_DROP_RE = re.compile(r"<\s*(%s)\b" % "|".join(DROP_WITH_CONTENT), re.IGNORECASE)
MAX_PASSES = 4


def _allow_attribute(tag: str, name: str, value: str) -> bool:
    """bleach attribute filter: src on img, href on a, and a single language class on code."""
    if tag == "img" and name == "src":
        return not value.strip().lower().startswith("data:") or bool(DATA_IMAGE_RE.match(value.strip()))
    if tag == "a" and name == "href":
        return not value.strip().lower().startswith("data:")
    if tag == "code" and name == "class":
        return bool(LANGUAGE_CLASS_RE.match(value))
    return False


def _drop_active_content(markup: str) -> str:
    """Remove script-like elements including their text, which bleach would otherwise keep."""
    soup = BeautifulSoup(markup, "html.parser")
    dropped = soup.find_all(DROP_WITH_CONTENT)
    for node in dropped:
        node.decompose()
    logger.debug("Dropped %d script-like element(s)", len(dropped))
    return str(soup)


_CLEANER = Cleaner(
    tags=ALLOWED_TAGS,
    attributes=_allow_attribute,
    protocols=ALLOWED_PROTOCOLS,
    strip=True,
    strip_comments=True,
)


@lru_cache(maxsize=512)
def sanitize(markup: str) -> str:
    """Return markup reduced to the allow-list. Pure, idempotent, never raises on content."""
    if not markup:
        return ""
    if _DROP_RE.search(markup):
        markup = _drop_active_content(markup)
    # Misnested markup (e.g. <table><p><li>) is rebuilt differently on each parse
    # until it settles; only a settled result is returned.
    cleaned = _CLEANER.clean(markup)
    for _ in range(MAX_PASSES):
        again = _CLEANER.clean(cleaned)
        if again == cleaned:
            break
        cleaned = again
    else:
        logger.warning("Sanitized markup did not settle after %d passes", MAX_PASSES)
    return cleaned

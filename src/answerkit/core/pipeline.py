"""Pipeline step functions: storage preparation, rendering, validation, and indexing"""

import logging
from typing import Union

from answerkit.core.blocks import BlockDocument, from_json
from answerkit.core.highlight import dispatch
from answerkit.core.models import DEFAULT_LANGUAGE, AnswerContent, Projection, ValidationResult
from answerkit.core.project import project
from answerkit.core.render import build_body
from answerkit.core.repair import repair
from answerkit.core.sanitize import sanitize


logger = logging.getLogger(__name__)

EDITOR_PLACEHOLDER = "<p>Start writing your answer here...</p>"
MIN_ANSWER_CHARS = 10


def prepare_markup(raw: str, language: str = DEFAULT_LANGUAGE) -> str:
    """Raw WYSIWYG output -> canonical markup for storage (repair, then sanitize)."""
    return sanitize(repair(raw or "", language))


def render_markup(stored: str, language: str = DEFAULT_LANGUAGE) -> str:
    """Stored markup -> display markup. Re-sanitizes even though storage was already sanitized."""
    return dispatch(sanitize(stored or ""), language)


def render_blocks(document: Union[BlockDocument, str], language: str = DEFAULT_LANGUAGE) -> str:
    """Block document (or its stored JSON) -> display markup."""
    if not isinstance(document, BlockDocument):
        document = from_json(document)
    return dispatch(sanitize(build_body(document)), language)


def render_answer(content: AnswerContent, language: str = DEFAULT_LANGUAGE) -> str:
    """Render whichever representation is stored; blocks win when both are present."""
    if content.has_blocks:
        return render_blocks(content.blocks, language)
    if content.has_markup:
        return render_markup(content.markup, language)
    return ""


def index_text(content: AnswerContent) -> Projection:
    """Projection used for the denormalized search field and minimum-length checks."""
    if content.has_blocks:
        return project(from_json(content.blocks))
    return project(sanitize(content.markup or ""))


def validate_submission(
    question: str,
    answer: Union[AnswerContent, str, None],
    min_chars: int = MIN_ANSWER_CHARS,
    ) -> ValidationResult:
    """Pass/fail with a user-facing reason. A plain string answer is treated as WYSIWYG markup."""
    if not question or not question.strip():
        return ValidationResult(ok=False, reason="Question is required")

    if answer is None or isinstance(answer, str):
        answer = AnswerContent(markup=prepare_markup(answer or ""))

    projected = index_text(answer)
    chars = projected.char_count
    if chars == 0 or projected.text == project(EDITOR_PLACEHOLDER).text:
        return ValidationResult(ok=False, reason="Answer is required")
    if chars < min_chars:
        logger.debug("Rejected answer: %d projected chars < %d", chars, min_chars)
        return ValidationResult(ok=False, reason=f"Answer must be at least {min_chars} characters")
    return ValidationResult(ok=True)

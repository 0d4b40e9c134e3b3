"""Question persistence: save with index projection, lookup, listing, and text search"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import or_
from sqlmodel import Session, select

from answerkit.core.models import DEFAULT_LANGUAGE, AnswerContent
from answerkit.core.pipeline import index_text, prepare_markup
from answerkit.core.utils.hashing import answer_hash
from answerkit.crud.models import Difficulty, Question


_FIELDS = ("category", "difficulty", "question", "tags", "created_by")


def get_question(session: Session, question_id: UUID) -> Question | None:
    """Return the Question with the given id, or None if not found."""
    return session.get(Question, question_id)


def list_questions(
    session: Session,
    category: Optional[str] = None,
    difficulty: Optional[Difficulty] = None,
    ) -> list[Question]:
    """Return questions, newest first, optionally filtered by category and difficulty."""
    stmt = select(Question)
    if category:
        stmt = stmt.where(Question.category == category)
    if difficulty:
        stmt = stmt.where(Question.difficulty == Difficulty(difficulty))
    return list(session.exec(stmt.order_by(Question.created_at.desc())).all())


def search_questions(session: Session, term: str) -> list[Question]:
    """Case-insensitive substring match on the question text and the answer's plain-text index."""
    term = term.strip()
    if not term:
        return list_questions(session)
    pattern = f"%{term}%"
    stmt = select(Question).where(or_(
        Question.question.ilike(pattern),
        Question.answer_text.ilike(pattern),
    ))
    return list(session.exec(stmt.order_by(Question.created_at.desc())).all())


def save_question(
    session: Session,
    data: dict,
    question_id: UUID | None = None,
    language: str = DEFAULT_LANGUAGE,
    ) -> tuple[Question, str]:
    """Create or update a question from submitted fields plus an AnswerContent under 'answer'.

    Markup answers are repaired and sanitized before storage; block JSON is stored as given.
    Returns (question, status) where status is 'created', 'updated', or 'unchanged'.
    Flushes but does not commit; caller controls the transaction.
    Raises ValueError if question_id is given but not found.
    """
    content: AnswerContent = data["answer"]
    markup = prepare_markup(content.markup, language) if content.markup is not None else None
    blocks = content.blocks
    stored = AnswerContent(markup=markup, blocks=blocks)
    projection = index_text(stored)
    digest = answer_hash(markup, blocks)
    fields = {k: data[k] for k in _FIELDS if k in data}
    if "difficulty" in fields:
        fields["difficulty"] = Difficulty(fields["difficulty"])

    if question_id is not None:
        q = get_question(session, question_id)
        if q is None:
            raise ValueError(f"Question {question_id} not found")
        if q.hash == digest and all(getattr(q, k) == v for k, v in fields.items()):
            return q, "unchanged"
        for k, v in fields.items():
            setattr(q, k, v)
        q.answer_markup, q.answer_blocks, q.hash = markup, blocks, digest
        q.answer_text, q.answer_words = projection.text, projection.word_count
        q.updated_at = datetime.now()
        session.add(q)
        session.flush()
        return q, "updated"

    q = Question(
        **fields,
        answer_markup=markup,
        answer_blocks=blocks,
        answer_text=projection.text,
        answer_words=projection.word_count,
        hash=digest,
    )
    session.add(q)
    session.flush()
    return q, "created"


def delete_question(session: Session, question_id: UUID) -> bool:
    """Delete a question. Returns False when it does not exist."""
    q = get_question(session, question_id)
    if q is None:
        return False
    session.delete(q)
    session.flush()
    return True


def stored_answer(q: Question) -> AnswerContent:
    """The answer payloads exactly as stored."""
    return AnswerContent(markup=q.answer_markup, blocks=q.answer_blocks)

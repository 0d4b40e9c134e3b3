"""CLI command implementations"""

import logging
import mimetypes
from pathlib import Path
from typing import Annotated, Optional

import typer
from sqlmodel import Session, SQLModel

from answerkit.config import Settings, load_config
from answerkit.core.blocks import from_json, to_json
from answerkit.core.images import ImageRejected
from answerkit.core.models import AnswerContent
from answerkit.core.pipeline import index_text, prepare_markup, render_answer, validate_submission
from answerkit.crud.database import init_db, make_engine
from answerkit.crud.models import Difficulty
from answerkit.crud.questions import save_question, search_questions


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None) -> Settings:
    """Load config with standard CLI error handling and apply its log level."""
    try:
        settings = load_config(overrides=overrides)
    except ValueError as e:
        _fail(str(e))
    logging.basicConfig(level=settings.log_level, format="%(levelname)s %(name)s: %(message)s")
    return settings


def _read(path: str) -> str:
    try:
        return Path(path).read_text(encoding="utf-8")
    except OSError as e:
        _fail(f"Cannot read {path}", e)


def _content(path: str, blocks: bool) -> AnswerContent:
    raw = _read(path)
    return AnswerContent(blocks=raw) if blocks else AnswerContent(markup=raw)


BlocksOpt = Annotated[bool, typer.Option("--blocks", help="Treat the file as a JSON block array")]


def clean_cmd(
    path: Annotated[str, typer.Argument(help="Raw editor markup file")],
    language: Annotated[Optional[str], typer.Option("--language", help="Language for repaired code")] = None,
    ):
    """Repair and sanitize editor markup; print the storage-ready result."""
    settings = _settings(overrides={"default_language": language})
    typer.echo(prepare_markup(_read(path), settings.default_language))


def render_cmd(
    path: Annotated[str, typer.Argument(help="Stored answer file")],
    blocks: BlocksOpt = False,
    ):
    """Print display markup for a stored answer (re-sanitized, code blocks dispatched)."""
    settings = _settings()
    typer.echo(render_answer(_content(path, blocks), settings.default_language))


def stats_cmd(
    path: Annotated[str, typer.Argument(help="Stored answer file")],
    blocks: BlocksOpt = False,
    ):
    """Print the plain-text projection's word and character counts."""
    _settings()
    projection = index_text(_content(path, blocks))
    typer.echo(f"words={projection.word_count} chars={projection.char_count}")


def validate_cmd(
    question: Annotated[str, typer.Argument(help="Question text")],
    path: Annotated[str, typer.Argument(help="Raw answer file")],
    blocks: BlocksOpt = False,
    min_chars: Annotated[Optional[int], typer.Option("--min-chars", help="Min projected answer length")] = None,
    ):
    """Check a submission; exits 1 with the reason when it is rejected."""
    settings = _settings(overrides={"min_answer_chars": min_chars})
    content = _content(path, blocks)
    answer = content if blocks else content.markup
    result = validate_submission(question, answer, settings.min_answer_chars)
    if not result.ok:
        _fail(result.reason)
    typer.echo("OK")


def attach_cmd(
    path: Annotated[str, typer.Argument(help="Block document JSON file")],
    image: Annotated[str, typer.Argument(help="Image file to embed")],
    caption: Annotated[Optional[str], typer.Option("--caption", help="Image caption")] = None,
    ):
    """Append an image block holding IMAGE to the document; print the updated JSON."""
    settings = _settings()
    doc = from_json(_read(path))
    try:
        data = Path(image).read_bytes()
    except OSError as e:
        _fail(f"Cannot read {image}", e)
    mime_type, _ = mimetypes.guess_type(image)

    doc = doc.add_block("image")
    block_id = doc.blocks[-1].id
    try:
        doc = doc.set_image(block_id, data, mime_type or "", max_bytes=settings.max_image_bytes)
    except ImageRejected as e:
        _fail(str(e))
    if caption:
        doc = doc.update_block(block_id, caption=caption)
    typer.echo(to_json(doc))


def init_cmd(
    reset: Annotated[bool, typer.Option("--reset", help="Drop and recreate all tables")] = False,
    ):
    """Initialize database schema. Use --reset to clear existing data."""
    settings = _settings()
    engine = make_engine(settings.db_url)
    if reset:
        SQLModel.metadata.drop_all(engine)
        typer.echo("Existing data cleared.")
    init_db(engine)
    typer.echo(f"Database initialized at: {settings.db_url}")


def add_cmd(
    path: Annotated[str, typer.Argument(help="Answer file (markup, or JSON blocks with --blocks)")],
    question: Annotated[str, typer.Option("--question", "-q", help="Question text")],
    category: Annotated[str, typer.Option("--category", help="Question category")] = "Core Java",
    difficulty: Annotated[Difficulty, typer.Option("--difficulty", help="Easy, Medium or Hard")] = Difficulty.medium,
    tags: Annotated[str, typer.Option("--tags", help="Comma-separated tags")] = "",
    blocks: BlocksOpt = False,
    ):
    """Validate and store a question with its answer."""
    settings = _settings()
    content = _content(path, blocks)
    if blocks:
        # normalize ids/defaults the way the block editor would before saving
        content = AnswerContent(blocks=to_json(from_json(content.blocks)))

    result = validate_submission(question, content if blocks else content.markup, settings.min_answer_chars)
    if not result.ok:
        _fail(result.reason)

    engine = make_engine(settings.db_url)
    init_db(engine)
    try:
        with Session(engine) as session:
            q, status = save_question(session, {
                "question": question.strip(), "category": category,
                "difficulty": difficulty, "tags": tags, "answer": content,
            }, language=settings.default_language)
            session.commit()
            typer.echo(f"{status}: {q.id}")
    except Exception as e:
        _fail("Save failed", e)


def search_cmd(
    term: Annotated[str, typer.Argument(help="Text to look for in questions and answers")],
    ):
    """List stored questions whose question or answer text contains TERM."""
    settings = _settings()
    engine = make_engine(settings.db_url)
    init_db(engine)
    with Session(engine) as session:
        found = search_questions(session, term)
        if not found:
            typer.echo("No matching questions.")
            raise typer.Exit(1)
        for q in found:
            typer.echo(f"{q.id}  [{q.category}/{q.difficulty.value}]  {q.question}")

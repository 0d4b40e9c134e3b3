"""Shared fixtures for crud unit tests"""

import pytest
from sqlmodel import SQLModel, Session

from answerkit.core.models import AnswerContent
from answerkit.crud.database import init_db, make_engine
from answerkit.crud.questions import save_question


@pytest.fixture(name="engine")
def engine_fixture():
    """In-memory SQLite engine with all tables created."""
    engine = make_engine("sqlite://")
    init_db(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture(name="session")
def session_fixture(engine):
    """Fresh session per test; changes are not committed."""
    with Session(engine) as s:
        yield s


def _make_data(**overrides) -> dict:
    data = {
        "question": "What is a HashMap?",
        "category": "Core Java",
        "difficulty": "Medium",
        "tags": "collections, maps",
        "answer": AnswerContent(markup="<p>A hash table keyed by <code>hashCode()</code>.</p>"),
    }
    data.update(overrides)
    return data


@pytest.fixture(name="make_data")
def make_data_fixture():
    """Factory for minimal submitted question fields with a markup answer."""
    return _make_data


@pytest.fixture(name="saved")
def saved_fixture(session):
    """A markup-answer Question persisted to the session."""
    q, _ = save_question(session, _make_data())
    return q

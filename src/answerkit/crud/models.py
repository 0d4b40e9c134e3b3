"""Database table definitions for interview questions and their stored answers"""

from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import Column, DateTime, String, Text
from sqlmodel import Field, SQLModel


class Difficulty(str, Enum):
    easy = "Easy"
    medium = "Medium"
    hard = "Hard"


class Question(SQLModel, table=True):
    """An interview question with its answer in either stored representation.

    answer_markup and answer_blocks are kept verbatim; answer_text and answer_words
    are the denormalized plain-text projection used for search.
    """
    __tablename__ = "questions"
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    category: str = Field(..., index=True, nullable=False)
    difficulty: Difficulty = Field(default=Difficulty.medium, index=True, nullable=False)
    question: str = Field(..., sa_column=Column(Text, nullable=False))
    tags: str = Field(default="", description="Comma-separated tag list as entered")
    answer_markup: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    answer_blocks: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    answer_text: str = Field(default="", sa_column=Column(Text, nullable=False))
    answer_words: int = Field(default=0, nullable=False)
    hash: str = Field(..., sa_column=Column(String(64), nullable=False))
    created_by: Optional[str] = Field(default=None, index=True)
    created_at: datetime = Field(default_factory=datetime.now, sa_column=Column(DateTime(timezone=False), nullable=False))
    updated_at: datetime = Field(default_factory=datetime.now, sa_column=Column(DateTime(timezone=False), nullable=False))

    @property
    def tag_list(self) -> list[str]:
        return [t.strip() for t in self.tags.split(",") if t.strip()]

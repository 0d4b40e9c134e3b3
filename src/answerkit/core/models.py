"""Content models shared by the repair, projection, block, and render pipeline"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


logger = logging.getLogger(__name__)

DEFAULT_LANGUAGE = "java"


class BlockType(str, Enum):
    """Closed set of structured content block kinds"""
    text = "text"
    code = "code"
    image = "image"
    table = "table"


class CodeLanguage(str, Enum):
    """Languages offered by the block editor's code selector"""
    java = "java"
    javascript = "javascript"
    python = "python"
    sql = "sql"
    bash = "bash"
    json = "json"


class Direction(str, Enum):
    up = "up"
    down = "down"


def new_block_id() -> str:
    return uuid4().hex


def empty_table(rows: int = 2, cols: int = 2) -> list[list[str]]:
    return [["" for _ in range(cols)] for _ in range(rows)]


class Block(BaseModel):
    """One unit of a structured answer; type-specific fields are normalized on validation.

    language is kept only on code blocks (default java), table_data only on table
    blocks (default 2x2, padded to a rectangle), caption only on image blocks.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(default_factory=new_block_id)
    type: BlockType
    content: str = ""
    language: Optional[CodeLanguage] = None
    table_data: Optional[list[list[str]]] = Field(default=None, alias="tableData")
    caption: Optional[str] = None

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, v):
        # block editors have used timestamps as ids
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v or new_block_id()

    @field_validator("content", mode="before")
    @classmethod
    def _coerce_content(cls, v):
        if v is None:
            return ""
        # legacy editors stored numeric snippets unquoted
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("language", mode="before")
    @classmethod
    def _known_language(cls, v):
        if v is None or isinstance(v, CodeLanguage):
            return v
        if isinstance(v, str) and v in CodeLanguage._value2member_map_:
            return v
        logger.warning("Unknown code language %r, using %s", v, DEFAULT_LANGUAGE)
        return DEFAULT_LANGUAGE

    @field_validator("table_data", mode="before")
    @classmethod
    def _stringify_cells(cls, v):
        if not isinstance(v, list):
            return v
        return [
            ["" if c is None else str(c) for c in row] if isinstance(row, list) else row
            for row in v
        ]

    @model_validator(mode="before")
    @classmethod
    def _normalize_for_type(cls, data):
        if not isinstance(data, dict):
            return data
        data = dict(data)
        block_type = data.get("type")

        if block_type == BlockType.code:
            if data.get("language") is None:
                data["language"] = DEFAULT_LANGUAGE
        else:
            data.pop("language", None)

        rows = data.pop("tableData", None)
        snake = data.pop("table_data", None)
        if rows is None:
            rows = snake
        if block_type == BlockType.table:
            if isinstance(rows, list):
                rows = rows or empty_table()
                width = max((len(r) for r in rows if isinstance(r, list)), default=0) or 1
                rows = [list(r) + [""] * (width - len(r)) if isinstance(r, list) else r for r in rows]
            data["tableData"] = empty_table() if rows is None else rows

        if block_type != BlockType.image:
            data.pop("caption", None)
        return data

    def to_wire(self) -> dict:
        """Dict in the stored JSON shape (camelCase tableData, absent optionals omitted)."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class Projection(BaseModel):
    """Plain-text view of rich content used for validation and search indexing."""
    text: str
    word_count: int
    char_count: int


class ValidationResult(BaseModel):
    ok: bool
    reason: Optional[str] = None


@dataclass(frozen=True)
class AnswerContent:
    """Stored answer payloads; either may be absent and callers branch on which is present."""
    markup: Optional[str] = None
    blocks: Optional[str] = None

    @property
    def has_blocks(self) -> bool:
        return bool(self.blocks and self.blocks.strip())

    @property
    def has_markup(self) -> bool:
        return bool(self.markup and self.markup.strip())

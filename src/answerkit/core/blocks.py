"""Structured answer document: an ordered, never-empty sequence of typed blocks

Every operation returns a new BlockDocument and leaves the receiver untouched,
so an editor session can hold one value and swap it wholesale on each edit.
Operations that cannot apply (unknown id, boundary move, out-of-range cell,
last block, last table row) return the document unchanged.
"""

import json
import logging
from dataclasses import dataclass, replace
from typing import Iterator, Optional

from pydantic import ValidationError

from answerkit.core.images import MAX_IMAGE_BYTES, encode_image
from answerkit.core.models import Block, BlockType, Direction, new_block_id


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BlockDocument:
    blocks: tuple[Block, ...]

    def __post_init__(self):
        if not self.blocks:
            raise ValueError("BlockDocument requires at least one block")

    @classmethod
    def new(cls) -> "BlockDocument":
        """Default document for an answer with no prior content: one empty text block."""
        return cls(blocks=(Block(type=BlockType.text),))

    def __iter__(self) -> Iterator[Block]:
        return iter(self.blocks)

    def __len__(self) -> int:
        return len(self.blocks)

    def index_of(self, block_id: str) -> Optional[int]:
        for i, b in enumerate(self.blocks):
            if b.id == block_id:
                return i
        return None

    def get(self, block_id: str) -> Optional[Block]:
        i = self.index_of(block_id)
        return None if i is None else self.blocks[i]

    def _with_block(self, index: int, block: Block) -> "BlockDocument":
        blocks = list(self.blocks)
        blocks[index] = block
        return replace(self, blocks=tuple(blocks))

    def _table(self, block_id: str) -> tuple[Optional[int], Optional[Block]]:
        i = self.index_of(block_id)
        if i is None or self.blocks[i].type != BlockType.table:
            return None, None
        return i, self.blocks[i]

    # --- block operations ---

    def add_block(self, block_type: BlockType | str) -> "BlockDocument":
        """Append a block with type defaults (code: java, table: 2x2 empty)."""
        block = Block(id=self._fresh_id(), type=BlockType(block_type))
        return replace(self, blocks=self.blocks + (block,))

    def update_block(self, block_id: str, **fields) -> "BlockDocument":
        """Merge fields into the matching block and re-validate it. The id is never changed."""
        i = self.index_of(block_id)
        if i is None:
            return self
        fields.pop("id", None)
        if "tableData" in fields:
            fields["table_data"] = fields.pop("tableData")
        merged = {**self.blocks[i].model_dump(), **fields}
        return self._with_block(i, Block.model_validate(merged))

    def delete_block(self, block_id: str) -> "BlockDocument":
        if len(self.blocks) == 1:
            return self
        i = self.index_of(block_id)
        if i is None:
            return self
        return replace(self, blocks=self.blocks[:i] + self.blocks[i + 1:])

    def move_block(self, block_id: str, direction: Direction | str) -> "BlockDocument":
        i = self.index_of(block_id)
        if i is None:
            return self
        j = i - 1 if Direction(direction) == Direction.up else i + 1
        if j < 0 or j >= len(self.blocks):
            return self
        blocks = list(self.blocks)
        blocks[i], blocks[j] = blocks[j], blocks[i]
        return replace(self, blocks=tuple(blocks))

    def set_image(self, block_id: str, data: bytes, mime_type: str,
                  max_bytes: int = MAX_IMAGE_BYTES) -> "BlockDocument":
        """Embed an uploaded image as a data: URI. Raises ImageRejected for bad uploads."""
        i = self.index_of(block_id)
        if i is None or self.blocks[i].type != BlockType.image:
            return self
        uri = encode_image(data, mime_type, max_bytes)
        return self._with_block(i, self.blocks[i].model_copy(update={"content": uri}))

    # --- table operations ---
    # Each one rewrites whole rows so every row keeps the same width.

    def set_table_cell(self, block_id: str, row: int, col: int, value: str) -> "BlockDocument":
        i, block = self._table(block_id)
        if block is None:
            return self
        data = block.table_data
        if not (0 <= row < len(data) and 0 <= col < len(data[row])):
            return self
        table = [list(r) for r in data]
        table[row][col] = "" if value is None else str(value)
        return self._with_block(i, block.model_copy(update={"table_data": table}))

    def add_table_row(self, block_id: str) -> "BlockDocument":
        i, block = self._table(block_id)
        if block is None:
            return self
        cols = len(block.table_data[0])
        table = [list(r) for r in block.table_data] + [[""] * cols]
        return self._with_block(i, block.model_copy(update={"table_data": table}))

    def add_table_column(self, block_id: str) -> "BlockDocument":
        i, block = self._table(block_id)
        if block is None:
            return self
        table = [list(r) + [""] for r in block.table_data]
        return self._with_block(i, block.model_copy(update={"table_data": table}))

    def delete_table_row(self, block_id: str, row: int) -> "BlockDocument":
        i, block = self._table(block_id)
        if block is None or len(block.table_data) <= 1:
            return self
        if not 0 <= row < len(block.table_data):
            return self
        table = [list(r) for n, r in enumerate(block.table_data) if n != row]
        return self._with_block(i, block.model_copy(update={"table_data": table}))

    def _fresh_id(self) -> str:
        taken = {b.id for b in self.blocks}
        block_id = new_block_id()
        while block_id in taken:
            block_id = new_block_id()
        return block_id


def to_json(document: BlockDocument) -> str:
    """Serialize to the stored JSON array shape."""
    return json.dumps([b.to_wire() for b in document.blocks], ensure_ascii=False)


def _wrap_raw(raw: str) -> BlockDocument:
    return BlockDocument(blocks=(Block(type=BlockType.text, content=raw),))


def from_json(raw: Optional[str]) -> BlockDocument:
    """Rebuild a document from stored JSON, falling back to one text block holding the raw input.

    Invalid JSON or a non-array value is wrapped verbatim; array items that are not valid
    blocks are skipped; duplicate ids are re-issued.
    """
    if not raw:
        return BlockDocument.new()
    try:
        data = json.loads(raw)
    except (ValueError, RecursionError):
        logger.warning("Stored blocks are not valid JSON; wrapping as a text block")
        return _wrap_raw(raw)
    if not isinstance(data, list):
        logger.warning("Stored blocks are %s, not an array; wrapping as a text block", type(data).__name__)
        return _wrap_raw(raw)

    blocks: list[Block] = []
    seen: set[str] = set()
    for n, item in enumerate(data):
        try:
            block = Block.model_validate(item)
        except ValidationError as e:
            logger.warning("Skipping invalid stored block #%d: %s", n, e.error_count())
            continue
        if block.id in seen:
            block = block.model_copy(update={"id": new_block_id()})
        seen.add(block.id)
        blocks.append(block)

    if not blocks:
        return BlockDocument.new()
    return BlockDocument(blocks=tuple(blocks))

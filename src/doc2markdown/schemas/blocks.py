"""
Block models for the Feishu docx block tree.

A document is delivered by the API as a flat list of block records linked by
``parent_id`` / ``children``. Each record carries exactly one payload selected
by its integer ``block_type``; every type gets its own model class and
``parse_block`` picks the class from the type code.
"""

from enum import IntEnum
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from doc2markdown.exceptions import BlockTreeError

AUTO_SEQUENCE = "auto"
MAX_HEADING_LEVEL = 5


class BlockType(IntEnum):
    """Block type codes understood by the renderer"""
    ROOT = 1
    TEXT = 2
    HEADING = 4
    BULLET = 12
    ORDERED = 13
    CALLOUT = 19
    COLUMN_CONTAINER = 24
    COLUMN = 25
    IMAGE = 27
    TABLE = 31
    TABLE_CELL = 32
    BLOCKQUOTE = 34


class TextElementStyle(BaseModel):
    """Inline style flags of a text run"""
    bold: bool = False
    inline_code: bool = False
    italic: bool = False
    strikethrough: bool = False
    underline: bool = False


class TextRun(BaseModel):
    """Run of text sharing one style"""
    content: str = ""
    text_element_style: TextElementStyle = Field(default_factory=TextElementStyle)


class TextElement(BaseModel):
    """Inline element; only text runs produce output"""
    text_run: Optional[TextRun] = None


class TextPayload(BaseModel):
    """Inline content shared by text, heading and list blocks"""
    elements: List[TextElement] = Field(default_factory=list)


class OrderedStyle(BaseModel):
    align: int = 1
    sequence: Optional[str] = Field(None, description="Explicit marker or 'auto'")


class OrderedPayload(TextPayload):
    style: OrderedStyle = Field(default_factory=OrderedStyle)


class ImagePayload(BaseModel):
    """Image descriptor referencing a drive media token"""
    token: str = Field(..., description="Media resource token")
    width: int = 0
    height: int = 0
    scale: float = 1.0
    align: int = 2


class MergeInfo(BaseModel):
    col_span: int = 1
    row_span: int = 1


class TableProperty(BaseModel):
    column_size: int = 0
    row_size: int = 0
    header_row: bool = False
    merge_info: List[MergeInfo] = Field(default_factory=list)


class TablePayload(BaseModel):
    """Table layout: row-major cell ids plus dimensions"""
    model_config = ConfigDict(populate_by_name=True)

    cells: List[str] = Field(default_factory=list)
    table_property: TableProperty = Field(default_factory=TableProperty, alias="property")


class Block(BaseModel):
    """Base class for all blocks"""
    block_id: str = Field(..., description="Block id, unique within a document")
    block_type: int = Field(..., description="Type code selecting the payload")
    parent_id: Optional[str] = Field(None, description="Id of the owning block")
    children: List[str] = Field(default_factory=list, description="Child ids in render order")

    @property
    def has_children(self) -> bool:
        return bool(self.children)


class RootBlock(Block):
    """Document page block; owns the top-level blocks"""


class TextBlock(Block):
    text: Optional[TextPayload] = None


class HeadingBlock(Block):
    """
    Heading block.

    The API stores the content in one of the ``heading1``..``heading5`` slots;
    the first populated slot determines the level.
    """
    level: Optional[int] = Field(None, ge=1, le=MAX_HEADING_LEVEL)
    heading: Optional[TextPayload] = None

    @model_validator(mode="before")
    @classmethod
    def _pick_heading_slot(cls, data: Any) -> Any:
        if not isinstance(data, dict) or data.get("level") is not None:
            return data
        for level in range(1, MAX_HEADING_LEVEL + 1):
            payload = data.get(f"heading{level}")
            if payload:
                return {**data, "level": level, "heading": payload}
        return data


class BulletBlock(Block):
    bullet: Optional[TextPayload] = None


class OrderedBlock(Block):
    ordered: Optional[OrderedPayload] = None

    @property
    def sequence(self) -> Optional[str]:
        if self.ordered is None:
            return None
        return self.ordered.style.sequence


class ImageBlock(Block):
    image: Optional[ImagePayload] = None


class TableBlock(Block):
    table: Optional[TablePayload] = None


class TableCellBlock(Block):
    pass


class ColumnContainerBlock(Block):
    """Grid of columns; rendered as a one-row table"""


class ColumnBlock(Block):
    """Single column of a column container"""


class CalloutBlock(Block):
    pass


class QuoteBlock(Block):
    quote: Optional[TextPayload] = None


class UnknownBlock(Block):
    """Any block type without a renderer; keeps structure only"""


_BLOCK_CLASSES = {
    BlockType.ROOT: RootBlock,
    BlockType.TEXT: TextBlock,
    BlockType.HEADING: HeadingBlock,
    BlockType.BULLET: BulletBlock,
    BlockType.ORDERED: OrderedBlock,
    BlockType.CALLOUT: CalloutBlock,
    BlockType.COLUMN_CONTAINER: ColumnContainerBlock,
    BlockType.COLUMN: ColumnBlock,
    BlockType.IMAGE: ImageBlock,
    BlockType.TABLE: TableBlock,
    BlockType.TABLE_CELL: TableCellBlock,
    BlockType.BLOCKQUOTE: QuoteBlock,
}


def parse_block(raw: Dict[str, Any]) -> Block:
    """
    Build the typed block for one raw API record.

    Args:
        raw: Block record as returned by the blocks endpoint

    Returns:
        Block subclass matching ``block_type`` (UnknownBlock otherwise)
    """
    block_class = _BLOCK_CLASSES.get(raw.get("block_type"), UnknownBlock)
    return block_class.model_validate(raw)


def is_ordered_item(block: Optional[Block]) -> bool:
    """True for an ordered list item carrying its ordered payload"""
    return isinstance(block, OrderedBlock) and block.ordered is not None


class BlockMap(Mapping[str, Block]):
    """
    Read-only mapping from block id to block for one document.

    Built once per conversion from the flat item list and discarded
    afterwards.
    """

    def __init__(self, blocks: Iterable[Block]):
        self._blocks: Dict[str, Block] = {block.block_id: block for block in blocks}

    @classmethod
    def from_items(cls, items: Iterable[Dict[str, Any]]) -> "BlockMap":
        """
        Parse raw API records into a block map.

        Args:
            items: Raw block records

        Returns:
            BlockMap keyed by ``block_id``
        """
        return cls(parse_block(item) for item in items)

    def __getitem__(self, block_id: str) -> Block:
        return self._blocks[block_id]

    def __iter__(self) -> Iterator[str]:
        return iter(self._blocks)

    def __len__(self) -> int:
        return len(self._blocks)

    @property
    def root(self) -> Block:
        """
        The document root: the root-typed block without a parent.

        Raises:
            BlockTreeError: If the document has no root block
        """
        for block in self._blocks.values():
            if block.block_type == BlockType.ROOT and not block.parent_id:
                return block
        raise BlockTreeError("Document has no root block")


"""Schemas package exports"""

from doc2markdown.schemas.blocks import (
    AUTO_SEQUENCE,
    Block,
    BlockMap,
    BlockType,
    BulletBlock,
    CalloutBlock,
    ColumnBlock,
    ColumnContainerBlock,
    HeadingBlock,
    ImageBlock,
    ImagePayload,
    OrderedBlock,
    QuoteBlock,
    RootBlock,
    TableBlock,
    TableCellBlock,
    TablePayload,
    TextBlock,
    TextElementStyle,
    TextPayload,
    TextRun,
    UnknownBlock,
    is_ordered_item,
    parse_block,
)
from doc2markdown.schemas.tasks import BatchResult, DocumentMetadata, DocumentTask

__all__ = [
    "AUTO_SEQUENCE",
    "Block",
    "BlockMap",
    "BlockType",
    "BulletBlock",
    "CalloutBlock",
    "ColumnBlock",
    "ColumnContainerBlock",
    "HeadingBlock",
    "ImageBlock",
    "ImagePayload",
    "OrderedBlock",
    "QuoteBlock",
    "RootBlock",
    "TableBlock",
    "TableCellBlock",
    "TablePayload",
    "TextBlock",
    "TextElementStyle",
    "TextPayload",
    "TextRun",
    "UnknownBlock",
    "is_ordered_item",
    "parse_block",
    "BatchResult",
    "DocumentMetadata",
    "DocumentTask",
]

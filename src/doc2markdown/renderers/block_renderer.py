"""
Recursive block tree to Markdown renderer.

Each block contributes its own content (dispatched on block type) followed by
its children in document order, or by its flattened table for tables and
column containers.
"""

from typing import Callable, Dict, Mapping, Optional

from loguru import logger

from doc2markdown.renderers.inline import plain_text, render_elements
from doc2markdown.renderers.sequence import resolve_sequence
from doc2markdown.renderers.table import flatten_table, table_layout_for
from doc2markdown.schemas.blocks import (
    AUTO_SEQUENCE,
    Block,
    BlockMap,
    BlockType,
    BulletBlock,
    CalloutBlock,
    HeadingBlock,
    ImageBlock,
    OrderedBlock,
    QuoteBlock,
    TextBlock,
)

# (document_id, image token) -> URL embedded in the Markdown
ImageResolver = Callable[[str, str], str]

INDENT_UNIT = "\t"
QUOTE_PREFIX = "> "

# Text placed after each rendered child, keyed by the parent's type.
_CHILD_SEPARATORS: Dict[int, str] = {
    BlockType.COLUMN: "<br>",
    BlockType.TABLE_CELL: "",
    BlockType.BLOCKQUOTE: "",
}


def prefix_lines(text: str, prefix: str) -> str:
    """Prefix every line of ``text``, including a trailing empty one."""
    return "\n".join(f"{prefix}{line}" for line in text.split("\n"))


class BlockTreeRenderer:
    """
    Renders a document's block tree into one Markdown string.

    Rendering is a sequential depth-first walk; the image resolver is the
    only call out of the renderer and is invoked once per image block, in
    document order.
    """

    def __init__(self, image_resolver: Optional[ImageResolver] = None):
        """
        Initialize renderer.

        Args:
            image_resolver: Maps (document_id, image token) to the URL to embed.
                Without one, the raw token is embedded.
        """
        self.image_resolver = image_resolver
        self._own_content = {
            BlockType.TEXT: self._render_text,
            BlockType.HEADING: self._render_heading,
            BlockType.BULLET: self._render_bullet,
            BlockType.ORDERED: self._render_ordered,
            BlockType.IMAGE: self._render_image,
            BlockType.BLOCKQUOTE: self._render_quote,
        }

    def render_document(self, document_id: str, block_map: BlockMap) -> str:
        """
        Render a whole document starting from its root block.

        Args:
            document_id: Document id, passed through to the image resolver
            block_map: All blocks of the document

        Returns:
            Markdown text
        """
        return self.render(document_id, block_map.root, block_map, 0, 0)

    def render(
        self,
        document_id: str,
        block: Optional[Block],
        block_map: Mapping[str, Block],
        depth: int,
        sibling_order: int,
    ) -> str:
        """
        Render one block and its subtree.

        Args:
            document_id: Document id, passed through to the image resolver
            block: Block to render; None renders as an empty placeholder
            block_map: All blocks of the document
            depth: Nesting depth (root = 0)
            sibling_order: Zero-based position among siblings

        Returns:
            Markdown fragment for the subtree
        """
        if block is None:
            return ""

        render_own = self._own_content.get(block.block_type)
        output = render_own(document_id, block, block_map, depth, sibling_order) if render_own else ""

        if isinstance(block, (BulletBlock, OrderedBlock)) and block.has_children:
            output += "\n"

        layout = table_layout_for(block)
        if layout is not None:
            output += flatten_table(
                layout,
                lambda cell_id: self._render_cell(document_id, cell_id, block_map),
            )
        else:
            output += self._render_children(document_id, block, block_map, depth)

        if isinstance(block, CalloutBlock):
            output = prefix_lines(output, QUOTE_PREFIX)
        return output

    def _render_children(self, document_id: str, block: Block, block_map: Mapping[str, Block], depth: int) -> str:
        separator = _CHILD_SEPARATORS.get(block.block_type, "\n")
        parts = []
        for index, child_id in enumerate(block.children):
            child = block_map.get(child_id)
            if child is None:
                logger.debug(f"Block {block.block_id} references missing child {child_id}")
            parts.append(self.render(document_id, child, block_map, depth + 1, index))
            parts.append(separator)
        return "".join(parts)

    def _render_cell(self, document_id: str, cell_id: str, block_map: Mapping[str, Block]) -> Optional[str]:
        cell = block_map.get(cell_id)
        if cell is None:
            logger.debug(f"Table cell {cell_id} missing from block map")
            return None
        return self.render(document_id, cell, block_map, 0, 0)

    # ------------------------------------------------------------------ own content

    def _render_text(self, document_id, block: TextBlock, block_map, depth, sibling_order) -> str:
        return render_elements(block.text)

    def _render_heading(self, document_id, block: HeadingBlock, block_map, depth, sibling_order) -> str:
        if block.level is None:
            return ""
        return f"{'#' * block.level} {plain_text(block.heading)}\n"

    def _render_bullet(self, document_id, block: BulletBlock, block_map, depth, sibling_order) -> str:
        if block.bullet is None:
            return ""
        return "* " + render_elements(block.bullet)

    def _render_ordered(self, document_id, block: OrderedBlock, block_map, depth, sibling_order) -> str:
        if block.ordered is None:
            return ""
        sequence = block.sequence
        if not sequence or sequence == AUTO_SEQUENCE:
            parent = block_map.get(block.parent_id) if block.parent_id else None
            sibling_ids = parent.children if parent else []
            sequence = resolve_sequence(block.block_id, sibling_ids, block_map, depth, sibling_order)
        indent = INDENT_UNIT * max(depth - 1, 0)
        return f"{indent}{sequence}. {render_elements(block.ordered)}"

    def _render_image(self, document_id, block: ImageBlock, block_map, depth, sibling_order) -> str:
        if block.image is None:
            return ""
        url = block.image.token
        if self.image_resolver is not None:
            url = self.image_resolver(document_id, block.image.token)
        return f"![image]({url})"

    def _render_quote(self, document_id, block: QuoteBlock, block_map, depth, sibling_order) -> str:
        return QUOTE_PREFIX + render_elements(block.quote)

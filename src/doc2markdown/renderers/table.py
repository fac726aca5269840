"""
Table and column layout flattening.

Tables arrive as a row-major list of cell block ids plus column/row counts.
Column containers have no table payload; they are flattened as a one-row
table whose cells are their children.
"""

from dataclasses import dataclass, field
from typing import Callable, List, Optional

from doc2markdown.schemas.blocks import Block, ColumnContainerBlock, TableBlock

CellRenderer = Callable[[str], Optional[str]]


@dataclass
class TableLayout:
    """Grid shape and row-major cell ids"""

    column_size: int
    row_size: int
    cells: List[str] = field(default_factory=list)

    def cell_id(self, index: int) -> Optional[str]:
        return self.cells[index] if index < len(self.cells) else None


def table_layout_for(block: Block) -> Optional[TableLayout]:
    """
    Layout to flatten for ``block``, if it renders as a table.

    Args:
        block: Any block

    Returns:
        TableLayout for tables and column containers, None otherwise
    """
    if isinstance(block, TableBlock) and block.table is not None:
        prop = block.table.table_property
        return TableLayout(prop.column_size, prop.row_size, list(block.table.cells))
    if isinstance(block, ColumnContainerBlock):
        return TableLayout(len(block.children), 1, list(block.children))
    return None


def separator_row(column_size: int) -> str:
    return "|---" * column_size + "|\n"


def flatten_table(layout: TableLayout, render_cell: CellRenderer) -> str:
    """
    Render a table layout as pipe-delimited Markdown rows.

    A separator row follows the first row. Cells whose id is missing render
    as empty content.

    Args:
        layout: Table shape and cell ids
        render_cell: Renders one cell id; returns None when the block is absent

    Returns:
        Markdown table text, empty when the table has no columns
    """
    if layout.column_size <= 0:
        return ""

    rows: List[str] = []
    cell_index = 0
    for row in range(layout.row_size):
        parts = ["| "]
        for column in range(layout.column_size):
            cell_id = layout.cell_id(cell_index)
            cell_index += 1
            content = render_cell(cell_id) if cell_id is not None else None
            parts.append(content or "")
            parts.append(" |\n" if column == layout.column_size - 1 else " | ")
        rows.append("".join(parts))
        if row == 0:
            rows.append(separator_row(layout.column_size))
    return "".join(rows)

"""
Tests for table and column layout flattening.
"""

from doc2markdown.renderers.table import TableLayout, flatten_table, separator_row, table_layout_for
from doc2markdown.schemas.blocks import BlockMap, parse_block


def echo_cell(cell_id):
    return cell_id.upper()


class TestFlattenTable:
    """Tests for flatten_table."""

    def test_three_by_two(self):
        """Test two data rows with one separator after the first row."""
        layout = TableLayout(3, 2, ["a", "b", "c", "d", "e", "f"])
        result = flatten_table(layout, echo_cell)

        assert result == (
            "| A | B | C |\n"
            "|---|---|---|\n"
            "| D | E | F |\n"
        )
        assert result.count("|---|---|---|") == 1

    def test_zero_columns(self):
        """Test a table without columns renders empty."""
        assert flatten_table(TableLayout(0, 5, ["a"]), echo_cell) == ""

    def test_missing_cells_render_empty(self):
        """Test cells past the end or unknown to the renderer are empty."""
        layout = TableLayout(2, 2, ["a", "gone", "c"])
        result = flatten_table(layout, lambda cid: None if cid == "gone" else cid)

        assert result == "| a |  |\n|---|---|\n| c |  |\n"

    def test_separator_row(self):
        """Test separator row shape."""
        assert separator_row(1) == "|---|\n"


class TestTableLayoutFor:
    """Tests for picking the layout of a block."""

    def test_table_block(self, blocks):
        """Test table payload dimensions are used."""
        block = parse_block(blocks.table("tbl", ["c1", "c2"], column_size=2, row_size=1))
        layout = table_layout_for(block)

        assert layout == TableLayout(2, 1, ["c1", "c2"])

    def test_column_container(self, blocks):
        """Test column containers become a one-row table of their children."""
        block = parse_block(blocks.column_container("grid", ["col1", "col2", "col3"]))
        layout = table_layout_for(block)

        assert layout.column_size == 3
        assert layout.row_size == 1
        assert layout.cells == ["col1", "col2", "col3"]

    def test_other_blocks(self, blocks):
        """Test non-table blocks have no layout."""
        block_map = BlockMap.from_items([blocks.root(), blocks.text("t1", "x")])
        assert table_layout_for(block_map["t1"]) is None
        assert table_layout_for(block_map.root) is None

"""
pytest configuration and shared fixtures.
"""

import pytest
from typing import Any, Dict, List, Optional, Sequence, Union

from doc2markdown.schemas.blocks import BlockMap, BlockType

Run = Union[str, tuple]


class BlockFactory:
    """Builds raw block records shaped like the docx blocks endpoint output."""

    def __init__(self, root_id: str = "doc1"):
        self.root_id = root_id

    @staticmethod
    def elements(*runs: Run) -> Dict[str, Any]:
        """Text payload from plain strings or (content, style dict) tuples."""
        elements = []
        for run in runs:
            content, style = (run, {}) if isinstance(run, str) else run
            elements.append({"text_run": {"content": content, "text_element_style": style}})
        return {"elements": elements}

    def _block(self, block_id: str, block_type: int, parent_id: Optional[str],
               children: Sequence[str] = (), **payload) -> Dict[str, Any]:
        record = {
            "block_id": block_id,
            "block_type": int(block_type),
            "parent_id": self.root_id if parent_id is None else parent_id,
            "children": list(children),
        }
        record.update(payload)
        return record

    def root(self, children: Sequence[str] = ()) -> Dict[str, Any]:
        return {
            "block_id": self.root_id,
            "block_type": int(BlockType.ROOT),
            "parent_id": "",
            "children": list(children),
            "page": self.elements("Document title"),
        }

    def text(self, block_id: str, *runs: Run, parent_id: Optional[str] = None,
             children: Sequence[str] = ()) -> Dict[str, Any]:
        return self._block(block_id, BlockType.TEXT, parent_id, children, text=self.elements(*runs))

    def heading(self, block_id: str, level: int, *runs: Run, parent_id: Optional[str] = None) -> Dict[str, Any]:
        return self._block(
            block_id, BlockType.HEADING, parent_id, **{f"heading{level}": self.elements(*runs)}
        )

    def bullet(self, block_id: str, *runs: Run, parent_id: Optional[str] = None,
               children: Sequence[str] = ()) -> Dict[str, Any]:
        return self._block(block_id, BlockType.BULLET, parent_id, children, bullet=self.elements(*runs))

    def ordered(self, block_id: str, content: str, sequence: str = "auto",
                parent_id: Optional[str] = None, children: Sequence[str] = ()) -> Dict[str, Any]:
        payload = self.elements(content)
        payload["style"] = {"align": 1, "sequence": sequence}
        return self._block(block_id, BlockType.ORDERED, parent_id, children, ordered=payload)

    def image(self, block_id: str, token: str, parent_id: Optional[str] = None) -> Dict[str, Any]:
        return self._block(
            block_id, BlockType.IMAGE, parent_id,
            image={"token": token, "width": 640, "height": 480, "align": 2},
        )

    def table(self, block_id: str, cells: Sequence[str], column_size: int, row_size: int,
              parent_id: Optional[str] = None) -> Dict[str, Any]:
        return self._block(
            block_id, BlockType.TABLE, parent_id, cells,
            table={
                "cells": list(cells),
                "property": {"column_size": column_size, "row_size": row_size},
            },
        )

    def table_cell(self, block_id: str, children: Sequence[str], parent_id: str) -> Dict[str, Any]:
        return self._block(block_id, BlockType.TABLE_CELL, parent_id, children, table_cell={})

    def column_container(self, block_id: str, children: Sequence[str],
                         parent_id: Optional[str] = None) -> Dict[str, Any]:
        return self._block(block_id, BlockType.COLUMN_CONTAINER, parent_id, children, grid={"column_size": len(children)})

    def column(self, block_id: str, children: Sequence[str], parent_id: str) -> Dict[str, Any]:
        return self._block(block_id, BlockType.COLUMN, parent_id, children, grid_column={"width_ratio": 50})

    def callout(self, block_id: str, children: Sequence[str], parent_id: Optional[str] = None) -> Dict[str, Any]:
        return self._block(block_id, BlockType.CALLOUT, parent_id, children, callout={"emoji_id": "bulb"})

    def quote(self, block_id: str, *runs: Run, parent_id: Optional[str] = None,
              children: Sequence[str] = ()) -> Dict[str, Any]:
        return self._block(block_id, BlockType.BLOCKQUOTE, parent_id, children, quote=self.elements(*runs))

    def unknown(self, block_id: str, block_type: int = 999, parent_id: Optional[str] = None,
                children: Sequence[str] = ()) -> Dict[str, Any]:
        return self._block(block_id, block_type, parent_id, children)


@pytest.fixture
def blocks() -> BlockFactory:
    """Factory for raw block records"""
    return BlockFactory()


@pytest.fixture
def sample_document_items(blocks) -> List[Dict[str, Any]]:
    """A document touching every rendered block type"""
    return [
        blocks.root(children=["h1", "t1", "b1", "o1", "o2", "o3", "tbl", "img1", "q1", "co1"]),
        blocks.heading("h1", 2, "Title"),
        blocks.text("t1", "Hello ", ("world", {"bold": True})),
        blocks.bullet("b1", "item"),
        blocks.ordered("o1", "first", sequence="1"),
        blocks.ordered("o2", "second"),
        blocks.ordered("o3", "third"),
        blocks.table("tbl", ["tc1", "tc2", "tc3", "tc4"], column_size=2, row_size=2),
        blocks.table_cell("tc1", ["x1"], parent_id="tbl"),
        blocks.table_cell("tc2", ["x2"], parent_id="tbl"),
        blocks.table_cell("tc3", ["x3"], parent_id="tbl"),
        blocks.table_cell("tc4", ["x4"], parent_id="tbl"),
        blocks.text("x1", "A", parent_id="tc1"),
        blocks.text("x2", "B", parent_id="tc2"),
        blocks.text("x3", "C", parent_id="tc3"),
        blocks.text("x4", "D", parent_id="tc4"),
        blocks.image("img1", "imgtok"),
        blocks.quote("q1", "quoted"),
        blocks.callout("co1", ["ct1"]),
        blocks.text("ct1", "note", parent_id="co1"),
    ]


@pytest.fixture
def sample_block_map(sample_document_items) -> BlockMap:
    """Block map of the sample document"""
    return BlockMap.from_items(sample_document_items)


@pytest.fixture
def sample_markdown() -> str:
    """Expected Markdown of the sample document without an image resolver"""
    return (
        "## Title\n\n"
        "Hello **world**\n"
        "* item\n"
        "1. first\n"
        "2. second\n"
        "3. third\n"
        "| A | B |\n"
        "|---|---|\n"
        "| C | D |\n"
        "\n"
        "![image](imgtok)\n"
        "> quoted\n"
        "> note\n"
        "> \n"
    )

"""Renderers package exports"""

from doc2markdown.renderers.block_renderer import BlockTreeRenderer, ImageResolver, prefix_lines
from doc2markdown.renderers.inline import plain_text, render_elements, render_text_run
from doc2markdown.renderers.sequence import (
    advance_sequence,
    default_sequence,
    find_run_head,
    resolve_sequence,
)
from doc2markdown.renderers.table import TableLayout, flatten_table, table_layout_for

__all__ = [
    "BlockTreeRenderer",
    "ImageResolver",
    "prefix_lines",
    "plain_text",
    "render_elements",
    "render_text_run",
    "advance_sequence",
    "default_sequence",
    "find_run_head",
    "resolve_sequence",
    "TableLayout",
    "flatten_table",
    "table_layout_for",
]

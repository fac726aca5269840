"""
Ordered list sequence resolution.

Feishu stores either an explicit marker ("3", "c", "C") or the sentinel
"auto" on ordered list items. For "auto" items the marker is derived from the
head of the run of ordered siblings the item belongs to.
"""

import re
import string
from typing import Mapping, Optional, Sequence

from doc2markdown.schemas.blocks import AUTO_SEQUENCE, Block, is_ordered_item

_DECIMAL_RE = re.compile(r"[0-9]+")
_LETTERS_RE = re.compile(r"[a-zA-Z]+")
_UPPER_RE = re.compile(r"[A-Z]+")
_ALPHABET = string.ascii_lowercase


def default_sequence(depth: int) -> str:
    """
    First marker of a list nested at ``depth``.

    Depth 3 yields "i", which ``advance_sequence`` then treats as a letter,
    not a Roman numeral.
    """
    if depth == 2:
        return "a"
    if depth == 3:
        return "i"
    return "1"


def letters_to_number(letters: str) -> int:
    """Bijective base-26 value of a lowercase letter string (a=1, z=26, aa=27)."""
    value = 0
    for char in letters:
        value = value * 26 + _ALPHABET.index(char) + 1
    return value


def number_to_letters(value: int) -> str:
    """Inverse of ``letters_to_number`` for value >= 1."""
    letters = ""
    while value > 0:
        value, remainder = divmod(value - 1, 26)
        letters = _ALPHABET[remainder] + letters
    return letters


def advance_sequence(sequence: str, distance: int, depth: int) -> str:
    """
    Move a list marker ``distance`` positions forward.

    Args:
        sequence: Marker of the run head (decimal or letters)
        distance: Number of positions to advance
        depth: Nesting depth, used for the fallback marker

    Returns:
        Advanced marker; letters keep their case
    """
    if _DECIMAL_RE.fullmatch(sequence):
        return str(int(sequence) + distance)

    if _LETTERS_RE.fullmatch(sequence):
        value = letters_to_number(sequence.lower()) + distance
        if value < 1:
            return default_sequence(depth)
        advanced = number_to_letters(value)
        return advanced.upper() if _UPPER_RE.fullmatch(sequence) else advanced

    return default_sequence(depth)


def find_run_head(index: int, sibling_ids: Sequence[str], block_map: Mapping[str, Block]) -> int:
    """
    Index of the first item of the ordered run ending at ``index``.

    Scans backward from ``index - 1``; the nearest sibling that is not an
    ordered item (unknown ids included) bounds the run.
    """
    head = index
    while head > 0 and is_ordered_item(block_map.get(sibling_ids[head - 1])):
        head -= 1
    return head


def resolve_sequence(
    block_id: str,
    sibling_ids: Sequence[str],
    block_map: Mapping[str, Block],
    depth: int,
    sibling_order: int,
) -> str:
    """
    Marker for an ordered item whose declared sequence is "auto".

    Args:
        block_id: Id of the item being rendered
        sibling_ids: Children of the item's parent, in order
        block_map: All blocks of the document
        depth: Nesting depth of the item
        sibling_order: Position of the item among its rendered siblings

    Returns:
        Marker text without the trailing ". "
    """
    try:
        index = list(sibling_ids).index(block_id)
    except ValueError:
        return default_sequence(depth)

    head_index = find_run_head(index, sibling_ids, block_map)
    head = block_map.get(sibling_ids[head_index])
    head_sequence: Optional[str] = head.sequence if is_ordered_item(head) else None
    if not head_sequence or head_sequence == AUTO_SEQUENCE:
        return default_sequence(depth)
    return advance_sequence(head_sequence, sibling_order - head_index, depth)

"""Header parsing for skill-check response sheets.

Header cells after the three metadata columns look like
``Category[note]:SubCategory``, e.g. ``"Programming[Languages]:Python"``.
Parsing yields the sub-category labels and, per category, where its rows
start in the pivoted table and how many there are.

The scan stops at the first empty or malformed cell. Everything after it is
ignored, even well-formed cells, so the first non-category question ends
the category block.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from skillchart.constants import HEADER_SEPARATORS, METADATA_COLUMNS

_SEPARATORS = re.compile(HEADER_SEPARATORS)


@dataclass
class Category:
    """Row range of one skill category in the pivoted table.

    Attributes:
        offset: 1-based sheet row of the first sub-item
        count: Number of sub-items
    """

    offset: int
    count: int = 0

    @property
    def last_row(self) -> int:
        return self.offset + self.count - 1


@dataclass
class ParsedHeader:
    """Rewritten header and the category map, in first-seen order."""

    header: List[Any]
    categories: Dict[str, Category] = field(default_factory=dict)


def is_empty_cell(value: Any) -> bool:
    return value is None or value == ""


def split_category_cell(cell: str) -> Optional[List[str]]:
    """Split a ``Category[...]:SubCategory`` cell into its three tokens.

    Empty fragments are dropped before stripping, so a whitespace-only
    fragment still counts as a token.

    Returns:
        ``[category, middle, sub_category]`` or None if the cell does not
        split into exactly three tokens

    Examples:
        >>> split_category_cell("Design[1]: UI")
        ['Design', '1', 'UI']
        >>> split_category_cell("Free comment") is None
        True
    """
    tokens = [part.strip() for part in _SEPARATORS.split(cell) if len(part) != 0]
    if len(tokens) != 3:
        return None
    return tokens


def parse_header(header: Sequence[Any]) -> ParsedHeader:
    """Parse the response sheet header row.

    Args:
        header: Header row as read from the sheet, trailing empties allowed

    Returns:
        ParsedHeader whose ``header`` keeps the metadata cells and replaces
        each parsed cell with its sub-category label, and whose
        ``categories`` maps category name to its row range

    Examples:
        >>> parsed = parse_header(["ts", "org", "name", "X[1]:a", "X[1]:b", "Y[2]:c", ""])
        >>> parsed.categories
        {'X': Category(offset=4, count=2), 'Y': Category(offset=6, count=1)}
    """
    parsed = ParsedHeader(header=[])

    for index, cell in enumerate(header):
        if index < METADATA_COLUMNS:
            parsed.header.append(cell)
            continue

        if is_empty_cell(cell):
            break

        tokens = split_category_cell(str(cell))
        if tokens is None:
            break

        name, _, sub_category = tokens
        parsed.header.append(sub_category)

        category = parsed.categories.get(name)
        if category is None:
            category = parsed.categories[name] = Category(offset=index + 1)
        category.count += 1

    return parsed

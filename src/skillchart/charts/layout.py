"""Row arithmetic for the chart sheet.

The sheet is laid out on logical rows (table rows 1..n, a chart every
``spacing`` rows from ``start_row``). Page breaks then insert blank rows
before fixed sheet rows, in order, so that no chart is cut in half when the
sheet is printed to PDF. Everything at or below an insertion point moves
down; a range that straddles one grows.
"""

from typing import List, Sequence, Tuple

from skillchart.config.schema import ChartLayout


def physical_row(row: int, page_breaks: Sequence[Tuple[int, int]]) -> int:
    """Map a logical row to its sheet row after the page-break insertions.

    Examples:
        >>> physical_row(57, [(58, 3), (115, 3)])
        57
        >>> physical_row(58, [(58, 3), (115, 3)])
        61
        >>> physical_row(112, [(58, 3), (115, 3)])
        118
    """
    for before, count in page_breaks:
        if row >= before:
            row += count
    return row


def chart_anchor_rows(chart_count: int, layout: ChartLayout) -> List[int]:
    """Sheet rows where each chart's top-left corner goes."""
    return [
        physical_row(layout.start_row + index * layout.spacing, layout.page_breaks)
        for index in range(chart_count)
    ]

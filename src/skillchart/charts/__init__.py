from .layout import chart_anchor_rows, physical_row
from .workbook import WorkbookChartRenderer, coerce_score

__all__ = [
    "chart_anchor_rows",
    "physical_row",
    "WorkbookChartRenderer",
    "coerce_score",
]

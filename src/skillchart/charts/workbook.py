"""Build the per-respondent chart workbook with openpyxl.

The Sheets API cannot create radar charts, so the spreadsheet is built as an
.xlsx workbook and uploaded to Drive with conversion to Google Sheets,
which keeps the radar charts bound to their cell ranges.
"""

import io
import re
from typing import Any, Dict, Optional, Sequence

from openpyxl import Workbook
from openpyxl.chart import RadarChart, Reference
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from skillchart.charts.layout import chart_anchor_rows, physical_row
from skillchart.config.schema import ChartLayout
from skillchart.core.logging import get_logger
from skillchart.survey.header import Category
from skillchart.survey.record import ChartRow

logger = get_logger(__name__)

_INT = re.compile(r"^[+-]?\d+$")
_FLOAT = re.compile(r"^[+-]?(\d+\.\d*|\.\d+)$")

# Worksheet titles are limited to 31 characters and a few forbidden symbols
_SHEET_TITLE_FORBIDDEN = re.compile(r"[\[\]:*?/\\]")


def coerce_score(value: Any) -> Any:
    """Turn numeric strings into numbers so the chart can plot them.

    Form submission events deliver every answer as a string.

    Examples:
        >>> coerce_score("4")
        4
        >>> coerce_score(" 3.5 ")
        3.5
        >>> coerce_score("ACME")
        'ACME'
    """
    if not isinstance(value, str):
        return value
    text = value.strip()
    if _INT.match(text):
        return int(text)
    if _FLOAT.match(text):
        return float(text)
    return value


def sheet_title(title: str) -> str:
    cleaned = _SHEET_TITLE_FORBIDDEN.sub(" ", title).strip()
    return cleaned[:31] or "Sheet1"


class WorkbookChartRenderer:
    """Chart sheet as an .xlsx workbook: table in A:B, radar charts in C."""

    def __init__(self, layout: Optional[ChartLayout] = None):
        self.layout = layout or ChartLayout()

    def render(
        self, rows: Sequence[ChartRow], categories: Dict[str, Category], title: str
    ) -> bytes:
        workbook = Workbook()
        sheet = workbook.active
        sheet.title = sheet_title(title)
        workbook.properties.title = title

        self._write_table(sheet, rows)

        anchors = chart_anchor_rows(len(categories), self.layout)
        column = get_column_letter(self.layout.column)
        for (name, category), anchor in zip(categories.items(), anchors):
            sheet.add_chart(self._radar_chart(sheet, name, category), f"{column}{anchor}")
            logger.debug(
                "Chart '{}' rows {}-{} at {}{}",
                name,
                category.offset,
                category.last_row,
                column,
                anchor,
            )

        buffer = io.BytesIO()
        workbook.save(buffer)
        return buffer.getvalue()

    def _write_table(self, sheet: Worksheet, rows: Sequence[ChartRow]) -> None:
        for logical, row in enumerate(rows, start=1):
            target = physical_row(logical, self.layout.page_breaks)
            sheet.cell(row=target, column=1, value=row.label)
            sheet.cell(row=target, column=2, value=coerce_score(row.value))
        sheet.column_dimensions["A"].width = 28

    def _radar_chart(
        self, sheet: Worksheet, name: str, category: Category
    ) -> RadarChart:
        first = physical_row(category.offset, self.layout.page_breaks)
        last = physical_row(category.last_row, self.layout.page_breaks)

        chart = RadarChart()
        chart.type = "marker"
        chart.title = name
        chart.legend = None
        chart.width = self.layout.width_cm
        chart.height = self.layout.height_cm

        data = Reference(sheet, min_col=2, min_row=first, max_row=last)
        labels = Reference(sheet, min_col=1, min_row=first, max_row=last)
        chart.add_data(data, titles_from_data=False)
        chart.set_categories(labels)

        chart.y_axis.scaling.min = self.layout.v_min
        chart.y_axis.scaling.max = self.layout.v_max
        chart.y_axis.delete = False
        chart.x_axis.delete = False
        return chart

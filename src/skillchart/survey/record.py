"""Pivot a response record into the (label, value) rows of a chart sheet.

Charts can only bind to column data, so each answer becomes one row:
the header label in column A, the answer in column B.
"""

from typing import Any, List, NamedTuple, Sequence

from skillchart.constants import MAX_ARTIFACT_NAME_LENGTH
from skillchart.errors import RecordError
from skillchart.survey.header import is_empty_cell


class ChartRow(NamedTuple):
    label: Any
    value: Any


def has_answers(record: Sequence[Any]) -> bool:
    """False for a record that holds nothing but its first cell.

    Rows read from a sheet range are padded with empty strings, so trailing
    empties are ignored.
    """
    length = len(record)
    while length and is_empty_cell(record[length - 1]):
        length -= 1
    return length > 1


def pivot_record(header: Sequence[Any], record: Sequence[Any]) -> List[ChartRow]:
    """Pair every record cell with its header label.

    Stops at the first empty record cell. Cells beyond the parsed header get
    an empty label.
    """
    rows: List[ChartRow] = []
    for index, value in enumerate(record):
        if is_empty_cell(value):
            break
        label = header[index] if index < len(header) else ""
        rows.append(ChartRow(label, value))
    return rows


def derive_artifact_name(
    rows: Sequence[ChartRow], max_length: int = MAX_ARTIFACT_NAME_LENGTH
) -> str:
    """Name the respondent's spreadsheet "<organization> <person>".

    Args:
        rows: Pivoted rows; rows 1 and 2 hold organization and person
        max_length: Names are cut to this many characters

    Raises:
        RecordError: If the record stops before the person cell
    """
    if len(rows) < 3:
        raise RecordError(
            f"Record has no organization/person cells: {[row.value for row in rows]}"
        )
    return f"{rows[1].value} {rows[2].value}"[:max_length]

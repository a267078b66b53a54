from __future__ import annotations

import csv
import json
import os
import sys
from pathlib import Path
from typing import Any, Iterable, List, Optional, Tuple

from skillchart.errors import ValidationError


def _json_dump(data: Any) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


def resolve_output_path(path_value: str | Path | None) -> Path | None:
    if path_value is None:
        return None
    return Path(path_value).expanduser().resolve()


def ensure_paths_exist(paths: Iterable[Path | None]) -> None:
    for path in paths:
        if path is None:
            continue
        path.parent.mkdir(parents=True, exist_ok=True)


def write_json_outputs(
    *,
    payload: Any,
    out_path: str | Path | None = None,
    emit_stdout: bool = False,
) -> Path | None:
    out_resolved = resolve_output_path(out_path)
    ensure_paths_exist([out_resolved])

    if out_resolved is not None:
        out_resolved.write_text(_json_dump(payload), encoding="utf-8")

    if emit_stdout:
        print(_json_dump(payload).rstrip(os.linesep))

    return out_resolved


def exit_with_message(message: str, *, code: int = 0) -> None:
    stream = sys.stderr if code else sys.stdout
    stream.write(message + os.linesep)
    stream.flush()
    raise SystemExit(code)


def parse_row_spec(spec: str) -> List[int]:
    """Expand a row selection like ``"2-4,7"`` into sheet row numbers.

    Rows keep the order they were given in; duplicates are dropped.

    Examples:
        >>> parse_row_spec("2-4,7")
        [2, 3, 4, 7]
    """
    rows: List[int] = []
    for part in spec.split(","):
        part = part.strip()
        if not part:
            continue
        try:
            if "-" in part:
                start_text, end_text = part.split("-", 1)
                start, end = int(start_text), int(end_text)
                if start > end:
                    raise ValidationError(f"Descending row range: '{part}'")
                selected = range(start, end + 1)
            else:
                selected = [int(part)]
        except ValueError as exc:
            raise ValidationError(f"Invalid row selection: '{part}'") from exc

        for row in selected:
            if row < 1:
                raise ValidationError(f"Row numbers start at 1: '{part}'")
            if row not in rows:
                rows.append(row)
    return rows


def read_csv_responses(
    path: Path, rows: Optional[List[int]] = None
) -> Tuple[List[str], List[List[str]]]:
    """Read a CSV export of the responses sheet.

    Args:
        path: CSV file, first line is the header
        rows: 1-based line numbers to keep (line 1 is the header); all if None

    Returns:
        Tuple of (header, records)
    """
    with open(path, "r", encoding="utf-8-sig", newline="") as handle:
        lines = list(csv.reader(handle))

    if not lines:
        raise ValidationError(f"CSV file is empty: {path}")

    header, records = lines[0], lines[1:]
    if rows is not None:
        records = [lines[row - 1] for row in rows if 1 < row <= len(lines)]
    return header, records


def load_event_values(path: Path | str) -> List[Any]:
    """Read the ``values`` list of a form-submit event JSON document."""
    source = sys.stdin if str(path) == "-" else open(path, "r", encoding="utf-8")
    try:
        event = json.load(source)
    finally:
        if source is not sys.stdin:
            source.close()

    values = event.get("values") if isinstance(event, dict) else event
    if not isinstance(values, list):
        raise ValidationError("Event JSON must be a list or an object with a 'values' list")
    return values

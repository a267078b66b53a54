"""Pure survey transformations: header parsing, record pivot, links merge."""

from .header import Category, ParsedHeader, parse_header
from .links import LinkRow, make_link_formula, reconcile_links
from .record import ChartRow, derive_artifact_name, has_answers, pivot_record

__all__ = [
    "Category",
    "ParsedHeader",
    "parse_header",
    "LinkRow",
    "make_link_formula",
    "reconcile_links",
    "ChartRow",
    "derive_artifact_name",
    "has_answers",
    "pivot_record",
]

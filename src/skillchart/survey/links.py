"""Links index rows: HYPERLINK formulas and the last-write-wins merge."""

from typing import Iterable, List, NamedTuple, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from skillchart.host.base import CreateOutcome


class LinkRow(NamedTuple):
    text: str
    url: Optional[str]


def _quote(value: str) -> str:
    return value.replace('"', '""')


def make_link_formula(title: str, url: str) -> str:
    """Build a ``=HYPERLINK("url","title")`` cell formula.

    Double quotes inside either argument are doubled.

    Examples:
        >>> make_link_formula("ACME Taro", "https://example.com")
        '=HYPERLINK("https://example.com","ACME Taro")'
    """
    return f'=HYPERLINK("{_quote(url)}","{_quote(title)}")'


def to_cell(row: LinkRow) -> str:
    """Cell content for a links sheet row; rows without URL stay plain text."""
    if row.url:
        return make_link_formula(row.text, row.url)
    return row.text


def reconcile_links(
    existing: Iterable[LinkRow], outcomes: Iterable["CreateOutcome"]
) -> List[LinkRow]:
    """Merge freshly created artifacts into the existing links rows.

    Rows with neither display text nor URL are dropped; a URL row with empty
    text is kept. For each outcome, rows named like one of the artifacts it
    superseded are removed before the new artifact's row is appended.
    """
    rows = [row for row in existing if row.text or row.url]
    for outcome in outcomes:
        superseded = {stale.name for stale in outcome.superseded}
        if superseded:
            rows = [row for row in rows if row.text not in superseded]
        rows.append(LinkRow(outcome.created.name, outcome.created.url))
    return rows

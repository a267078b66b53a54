"""Links index sheet maintenance."""

from typing import List, Sequence

from skillchart.core.logging import get_logger
from skillchart.host.base import CreateOutcome, DocumentStore
from skillchart.survey.links import LinkRow, reconcile_links

logger = get_logger(__name__)


class LinksIndex:
    """The links sheet of the responses spreadsheet, rewritten on every run."""

    def __init__(self, store: DocumentStore, sheet_name: str):
        self.store = store
        self.sheet_name = sheet_name

    def reconcile(self, outcomes: Sequence[CreateOutcome]) -> List[LinkRow]:
        """Merge the outcomes into the sheet and return the rows written."""
        existing = self.store.read_links(self.sheet_name) or []
        rows = reconcile_links(existing, outcomes)
        self.store.write_links(self.sheet_name, rows)
        logger.info(
            "Links sheet '{}' now lists {} spreadsheet(s)", self.sheet_name, len(rows)
        )
        return rows

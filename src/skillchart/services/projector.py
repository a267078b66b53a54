"""Record-to-chart-sheet projection.

One response record becomes one spreadsheet named after the respondent.
A spreadsheet with the same name is trashed first, so each respondent has
at most one live chart spreadsheet.
"""

from typing import Any, Optional, Sequence

from skillchart.constants import MAX_ARTIFACT_NAME_LENGTH, MIME_GOOGLE_SHEETS
from skillchart.core.logging import get_logger
from skillchart.host.base import ChartRenderer, CreateOutcome, DocumentStore, FileIndex
from skillchart.survey.header import ParsedHeader
from skillchart.survey.record import derive_artifact_name, has_answers, pivot_record

logger = get_logger(__name__)


class ChartSheetProjector:
    """Creates the per-respondent chart spreadsheet."""

    def __init__(
        self,
        store: DocumentStore,
        files: FileIndex,
        renderer: ChartRenderer,
        *,
        max_name_length: int = MAX_ARTIFACT_NAME_LENGTH,
        editors: Sequence[str] = (),
    ):
        self.store = store
        self.files = files
        self.renderer = renderer
        self.max_name_length = max_name_length
        self.editors = list(editors)

    def create(
        self, folder_id: str, parsed: ParsedHeader, record: Sequence[Any]
    ) -> Optional[CreateOutcome]:
        """Create the chart spreadsheet for one record.

        Args:
            folder_id: Drive folder receiving the spreadsheet
            parsed: Parsed header of the responses sheet
            record: One response row

        Returns:
            The created spreadsheet and the ones it replaced, or None for a
            record without answers

        Raises:
            RecordError: If the record has no organization/person cells
        """
        if not has_answers(record):
            logger.debug("Skipping record without answers: {}", list(record))
            return None

        rows = pivot_record(parsed.header, record)
        name = derive_artifact_name(rows, self.max_name_length)

        superseded = self.files.search(name, MIME_GOOGLE_SHEETS)
        for stale in superseded:
            logger.info("Trashing previous spreadsheet '{}' ({})", stale.name, stale.id)
            self.files.trash(stale)

        workbook = self.renderer.render(rows, parsed.categories, name)
        created = self.store.create_spreadsheet(name, workbook, folder_id)
        logger.info("Created spreadsheet '{}' ({})", created.name, created.url)

        if self.editors:
            self.files.share(created, self.editors)
            logger.debug("Granted edit access to {}", ", ".join(self.editors))

        return CreateOutcome(name=name, created=created, superseded=superseded)

"""Run orchestration: the menu action and the form-submit trigger.

Business logic only; the click commands in ``skillchart.cli`` build the
workflow with ``connect_workflow`` and call into it.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from skillchart.charts.workbook import WorkbookChartRenderer
from skillchart.config.schema import RunConfig, resolve_run_config
from skillchart.config.settings import SkillChartSettings
from skillchart.constants import METADATA_COLUMNS
from skillchart.core.logging import get_logger, log_operation
from skillchart.errors import ConfigurationError, HeaderError
from skillchart.host.base import (
    ChartRenderer,
    CreateOutcome,
    DocumentStore,
    FileIndex,
    Notifier,
)
from skillchart.services.export import PdfExporter
from skillchart.services.links import LinksIndex
from skillchart.services.projector import ChartSheetProjector
from skillchart.survey.header import parse_header
from skillchart.survey.record import has_answers

logger = get_logger(__name__)


@dataclass
class RunReport:
    """What one run created."""

    outcomes: List[CreateOutcome] = field(default_factory=list)
    pdf_urls: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "spreadsheets": [
                {
                    "name": outcome.name,
                    "url": outcome.created.url,
                    "replaced": [stale.url for stale in outcome.superseded],
                }
                for outcome in self.outcomes
            ],
            "pdf_urls": list(self.pdf_urls),
        }


class SkillChartWorkflow:
    """Creates chart spreadsheets, PDFs and links for response records."""

    def __init__(
        self,
        store: DocumentStore,
        files: FileIndex,
        config: RunConfig,
        *,
        renderer: Optional[ChartRenderer] = None,
        notifier: Optional[Notifier] = None,
        sheet_index: int = 0,
    ):
        if config.policy.notify_on_submit and notifier is None:
            raise ConfigurationError("Notifications are enabled but no notifier is set")

        self.store = store
        self.files = files
        self.config = config
        self.notifier = notifier
        self.sheet_index = sheet_index
        self.projector = ChartSheetProjector(
            store,
            files,
            renderer or WorkbookChartRenderer(config.layout),
            max_name_length=config.max_name_length,
            editors=config.editors if config.policy.share_with_editors else (),
        )
        self.exporter = PdfExporter(store, files, config.pdf)
        self.links = LinksIndex(store, config.links_sheet)
        self._folder_id: Optional[str] = None

    @property
    def folder_id(self) -> str:
        """Configured folder, or the auto-created one."""
        if self._folder_id is None:
            if self.config.folder_id:
                self._folder_id = self.config.folder_id
            elif self.config.policy.auto_folder:
                self._folder_id = self.files.ensure_folder(
                    self.config.folder_name, self.config.folder_parent_id
                )
            else:
                raise ConfigurationError("No target folder configured")
        return self._folder_id

    def create_radar_charts(
        self,
        records: Sequence[Sequence[Any]],
        header: Optional[Sequence[Any]] = None,
    ) -> RunReport:
        """Create chart spreadsheets (and PDFs) for the records.

        Records without answers are skipped. When nothing was created the
        links sheet is left untouched.

        Args:
            records: Response rows
            header: Header row matching the records; read from the
                responses sheet when omitted

        Raises:
            HeaderError: If the header lacks the three metadata cells
        """
        if header is None:
            header = self.store.read_header(self.sheet_index)
        logger.debug("header: {}", header)
        logger.debug("records: {}", [list(record) for record in records])
        if len(header) < METADATA_COLUMNS:
            raise HeaderError(
                f"Header needs timestamp, organization and person cells: {list(header)}"
            )

        parsed = parse_header(header)
        logger.debug(
            "categories: {}",
            {name: (c.offset, c.count) for name, c in parsed.categories.items()},
        )

        report = RunReport()
        for record in records:
            # Only records with answers may resolve (and create) the folder
            if not has_answers(record):
                logger.debug("Skipping record without answers: {}", list(record))
                continue
            outcome = self.projector.create(self.folder_id, parsed, record)
            if outcome is not None:
                report.outcomes.append(outcome)

        if not report.outcomes:
            logger.info("No records with answers, nothing created")
            return report

        if self.config.policy.export_pdf:
            for outcome in report.outcomes:
                report.pdf_urls.append(self.exporter.export(self.folder_id, outcome))

        self.links.reconcile(report.outcomes)
        return report

    def on_submit(self, values: Sequence[Any]) -> RunReport:
        """Handle one form submission and notify about it.

        The notification links the PDF, or the spreadsheet when PDF export
        is disabled.
        """
        with log_operation("Processing submission", values=len(values)):
            report = self.create_radar_charts([values])

        if not self.config.policy.notify_on_submit:
            return report
        if not report.outcomes:
            logger.warning("Submission had no answers, no notification sent")
            return report

        link = report.pdf_urls[0] if report.pdf_urls else report.outcomes[0].created.url
        self.notifier.notify(str(values[1]), str(values[2]), link)
        return report


def connect_workflow(settings: SkillChartSettings) -> SkillChartWorkflow:
    """Wire the Google and Slack implementations from settings."""
    from skillchart.host.google import GoogleDocumentStore, GoogleDriveIndex, GoogleServices
    from skillchart.host.slack import SlackNotifier

    services = GoogleServices.connect(settings)
    store = GoogleDocumentStore(services, settings.spreadsheet_id)
    files = GoogleDriveIndex(services)
    config = resolve_run_config(settings, store)

    notifier = None
    if config.policy.notify_on_submit:
        notifier = SlackNotifier(
            config.slack_webhook, config.notify_template, retry=services.retry
        )

    return SkillChartWorkflow(
        store,
        files,
        config,
        notifier=notifier,
        sheet_index=settings.source_sheet_index,
    )

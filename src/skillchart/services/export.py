"""PDF export of the chart spreadsheets."""

from typing import Optional

from skillchart.config.schema import PdfExportOptions
from skillchart.constants import MIME_PDF
from skillchart.core.logging import get_logger, log_operation
from skillchart.host.base import CreateOutcome, DocumentStore, FileIndex

logger = get_logger(__name__)


def pdf_name(artifact_name: str) -> str:
    return f"{artifact_name}.pdf"


class PdfExporter:
    """Exports a created spreadsheet and files the PDF next to it.

    Like the spreadsheets, PDFs are replaced by name: any live PDF with the
    same name is trashed before the new one is stored.
    """

    def __init__(
        self,
        store: DocumentStore,
        files: FileIndex,
        options: Optional[PdfExportOptions] = None,
    ):
        self.store = store
        self.files = files
        self.options = options or PdfExportOptions()

    def delete_existing(self, name: str) -> int:
        stale_files = self.files.search(name, MIME_PDF)
        for stale in stale_files:
            self.files.trash(stale)
        return len(stale_files)

    def export(self, folder_id: str, outcome: CreateOutcome) -> str:
        """Export ``outcome.created`` as PDF into the folder.

        Returns:
            Download URL of the stored PDF
        """
        name = pdf_name(outcome.name)
        removed = self.delete_existing(name)
        if removed:
            logger.info("Trashed {} previous PDF(s) named '{}'", removed, name)

        with log_operation("Exporting PDF", name=name):
            data = self.store.export_pdf(outcome.created, self.options)
            stored = self.files.upload(name, data, MIME_PDF, folder_id)

        return stored.download_url or stored.url

"""Capability interfaces over the document host.

The services only talk to these protocols; ``host.google`` and
``host.slack`` provide the Google Drive/Sheets and Slack implementations.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol, Sequence

from skillchart.config.schema import PdfExportOptions
from skillchart.survey.header import Category
from skillchart.survey.links import LinkRow
from skillchart.survey.record import ChartRow


@dataclass
class StoredFile:
    """A file on the host."""

    id: str
    name: str
    url: str
    download_url: Optional[str] = None


@dataclass
class CreateOutcome:
    """A created chart spreadsheet and the same-named ones it replaced."""

    name: str
    created: StoredFile
    superseded: List[StoredFile] = field(default_factory=list)


class DocumentStore(Protocol):
    """Spreadsheet contents: responses, variables, links, new documents."""

    def read_header(self, sheet_index: int) -> List[Any]: ...

    def read_records(
        self, sheet_index: int, rows: Optional[Sequence[int]] = None
    ) -> List[List[Any]]: ...

    def read_variables(self, sheet_name: str) -> Dict[str, str]: ...

    def read_editors(self, sheet_name: str) -> List[str]: ...

    def read_links(self, sheet_name: str) -> Optional[List[LinkRow]]: ...

    def write_links(self, sheet_name: str, rows: List[LinkRow]) -> None: ...

    def create_spreadsheet(
        self, name: str, workbook: bytes, folder_id: str
    ) -> StoredFile: ...

    def export_pdf(self, file: StoredFile, options: PdfExportOptions) -> bytes: ...


class FileIndex(Protocol):
    """File search, trash, upload, folders and sharing."""

    def search(self, name: str, mime_type: str) -> List[StoredFile]: ...

    def trash(self, file: StoredFile) -> None: ...

    def upload(
        self, name: str, data: bytes, mime_type: str, folder_id: str
    ) -> StoredFile: ...

    def ensure_folder(self, name: str, parent_id: Optional[str] = None) -> str: ...

    def share(self, file: StoredFile, emails: Sequence[str]) -> None: ...


class ChartRenderer(Protocol):
    """Builds the chart workbook uploaded as the respondent's spreadsheet."""

    def render(
        self, rows: Sequence[ChartRow], categories: Dict[str, Category], title: str
    ) -> bytes: ...


class Notifier(Protocol):
    def notify(self, organization: str, person: str, link: str) -> None: ...

"""Shared fixtures: an in-memory host standing in for Drive and Sheets."""

import itertools
from dataclasses import dataclass
from typing import Dict, List, Optional

import pytest

from skillchart.config.schema import RunConfig, RunPolicy
from skillchart.constants import MIME_FOLDER, MIME_GOOGLE_SHEETS, MIME_PDF
from skillchart.host.base import StoredFile
from skillchart.survey.links import LinkRow

HEADER = [
    "Timestamp",
    "Organization",
    "Name",
    "Programming[Skill]:Python",
    "Programming[Skill]:SQL",
    "Design[Skill]:UI",
    "Design[Skill]:UX",
    "Design[Skill]:Illustration",
    "Management[Skill]:Planning",
    "Comments",
]

RECORD = ["2024/04/01 10:00:00", "ACME", "Taro Yamada", "4", "3", "2", "5", "1", "3", "Thanks"]


@dataclass
class FakeFile:
    stored: StoredFile
    mime_type: str
    folder_id: Optional[str]
    data: bytes = b""
    trashed: bool = False


class FakeHost:
    """DocumentStore and FileIndex backed by dicts."""

    def __init__(self, header=None, records=None):
        self.header = list(HEADER if header is None else header)
        self.records = [list(record) for record in (records or [])]
        self.variables: Dict[str, Dict[str, str]] = {}
        self.editors: Dict[str, List[str]] = {}
        self.link_sheets: Dict[str, List[LinkRow]] = {}
        self.files: Dict[str, FakeFile] = {}
        self.shared: Dict[str, List[str]] = {}
        self.exported: List[str] = []
        self._ids = itertools.count(1)

    def _add(self, name, mime_type, folder_id, data=b"") -> StoredFile:
        file_id = f"file{next(self._ids)}"
        stored = StoredFile(
            id=file_id,
            name=name,
            url=f"https://drive.test/{file_id}/view",
            download_url=f"https://drive.test/{file_id}/download"
            if mime_type == MIME_PDF
            else None,
        )
        self.files[file_id] = FakeFile(stored, mime_type, folder_id, data)
        return stored

    def live(self, mime_type: Optional[str] = None) -> List[FakeFile]:
        return [
            f
            for f in self.files.values()
            if not f.trashed and (mime_type is None or f.mime_type == mime_type)
        ]

    # DocumentStore

    def read_header(self, sheet_index):
        return list(self.header)

    def read_records(self, sheet_index, rows=None):
        if rows is None:
            return [list(r) for r in self.records]
        return [list(self.records[row - 2]) for row in rows]

    def read_variables(self, sheet_name):
        return dict(self.variables.get(sheet_name, {}))

    def read_editors(self, sheet_name):
        return list(self.editors.get(sheet_name, []))

    def read_links(self, sheet_name):
        rows = self.link_sheets.get(sheet_name)
        return None if rows is None else list(rows)

    def write_links(self, sheet_name, rows):
        self.link_sheets[sheet_name] = list(rows)

    def create_spreadsheet(self, name, workbook, folder_id):
        return self._add(name, MIME_GOOGLE_SHEETS, folder_id, workbook)

    def export_pdf(self, file, options):
        self.exported.append(file.id)
        return b"%PDF-1.4 " + file.id.encode()

    # FileIndex

    def search(self, name, mime_type):
        return [
            f.stored
            for f in self.live(mime_type)
            if f.stored.name == name
        ]

    def trash(self, file):
        self.files[file.id].trashed = True

    def upload(self, name, data, mime_type, folder_id):
        return self._add(name, mime_type, folder_id, data)

    def ensure_folder(self, name, parent_id=None):
        for f in self.live(MIME_FOLDER):
            if f.stored.name == name and f.folder_id == parent_id:
                return f.stored.id
        return self._add(name, MIME_FOLDER, parent_id).id

    def share(self, file, emails):
        self.shared.setdefault(file.id, []).extend(emails)


class FakeNotifier:
    def __init__(self):
        self.messages = []

    def notify(self, organization, person, link):
        self.messages.append((organization, person, link))


@pytest.fixture
def host():
    return FakeHost(records=[RECORD])


@pytest.fixture
def notifier():
    return FakeNotifier()


@pytest.fixture
def run_config():
    return RunConfig(policy=RunPolicy.from_profile("pdf"), folder_id="folder-1")

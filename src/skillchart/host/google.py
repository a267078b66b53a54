"""Google Drive / Google Sheets implementation of the host capabilities.

gspread handles plain cell values; the Drive v3 and Sheets v4 discovery
clients handle what gspread does not cover (file search and trash, xlsx
conversion on upload, hyperlink metadata, permissions). The PDF export goes
through an AuthorizedSession because it is not an API endpoint.
"""

import io
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

import gspread
from google.auth.transport.requests import AuthorizedSession, Request
from google.oauth2.credentials import Credentials as UserCredentials
from google.oauth2.service_account import Credentials as ServiceAccountCredentials
from googleapiclient.discovery import build
from googleapiclient.http import MediaIoBaseUpload
import requests

from skillchart.config.schema import PdfExportOptions
from skillchart.config.settings import SkillChartSettings
from skillchart.constants import (
    EXPORT_URL,
    MIME_FOLDER,
    MIME_GOOGLE_SHEETS,
    MIME_XLSX,
    SCOPES,
    SPREADSHEET_URL,
)
from skillchart.core.logging import get_logger
from skillchart.errors import ConfigurationError, ExportError, HostError
from skillchart.host.base import StoredFile
from skillchart.net.network import RetryConfig, fetch_bytes
from skillchart.survey.links import LinkRow, to_cell

logger = get_logger(__name__)

FILE_FIELDS = "id, name, webViewLink, webContentLink"


def load_credentials(settings: SkillChartSettings):
    """Load service-account or authorized-user credentials.

    ``auth_mode="auto"`` prefers the service account key when it exists.
    An expired user token is refreshed and written back.

    Raises:
        ConfigurationError: If no usable credential file is found
    """
    mode = settings.auth_mode

    if mode in {"auto", "service_account"} and settings.credentials_file.exists():
        logger.debug("Using service account {}", settings.credentials_file)
        return ServiceAccountCredentials.from_service_account_file(
            str(settings.credentials_file), scopes=SCOPES
        )

    if mode == "service_account":
        raise ConfigurationError(
            f"Missing service account file: {settings.credentials_file}\n"
            "Set SKILLCHART_CREDENTIALS_FILE to your JSON key path."
        )

    if not settings.token_file.exists():
        raise ConfigurationError(
            f"No credentials found: neither {settings.credentials_file} "
            f"nor {settings.token_file} exists"
        )

    creds = UserCredentials.from_authorized_user_file(str(settings.token_file), SCOPES)
    if not creds.valid and creds.expired and creds.refresh_token:
        creds.refresh(Request())
        settings.token_file.write_text(creds.to_json(), encoding="utf-8")
    if not creds.valid:
        raise ConfigurationError(f"Token in {settings.token_file} is not valid")
    return creds


def escape_query_value(value: str) -> str:
    """Escape a string literal for a Drive search query."""
    return value.replace("\\", "\\\\").replace("'", "\\'")


def quote_sheet_name(name: str) -> str:
    return "'" + name.replace("'", "''") + "'"


def _stored_file(item: Dict[str, Any]) -> StoredFile:
    return StoredFile(
        id=item["id"],
        name=item.get("name", ""),
        url=item.get("webViewLink") or SPREADSHEET_URL.format(spreadsheet_id=item["id"]),
        download_url=item.get("webContentLink"),
    )


@dataclass
class GoogleServices:
    """Authorized clients shared by the store and the index."""

    gspread_client: gspread.Client
    drive: Any
    sheets: Any
    session: requests.Session
    retry: RetryConfig

    @classmethod
    def connect(cls, settings: SkillChartSettings) -> "GoogleServices":
        creds = load_credentials(settings)
        return cls(
            gspread_client=gspread.authorize(creds),
            drive=build("drive", "v3", credentials=creds, cache_discovery=False),
            sheets=build("sheets", "v4", credentials=creds, cache_discovery=False),
            session=AuthorizedSession(creds),
            retry=RetryConfig.from_settings(settings),
        )

    def create_file(
        self,
        name: str,
        data: bytes,
        *,
        upload_mime_type: str,
        target_mime_type: str,
        folder_id: str,
    ) -> StoredFile:
        """Upload bytes into a folder; Drive converts when the MIME types differ."""
        media = MediaIoBaseUpload(
            io.BytesIO(data), mimetype=upload_mime_type, resumable=False
        )
        item = (
            self.drive.files()
            .create(
                body={"name": name, "mimeType": target_mime_type, "parents": [folder_id]},
                media_body=media,
                fields=FILE_FIELDS,
                supportsAllDrives=True,
            )
            .execute()
        )
        return _stored_file(item)


class GoogleDocumentStore:
    """DocumentStore over the responses spreadsheet and Drive."""

    def __init__(self, services: GoogleServices, spreadsheet_id: str):
        if not spreadsheet_id:
            raise ConfigurationError(
                "No spreadsheet id: set SKILLCHART_SPREADSHEET_ID"
            )
        self.services = services
        self.spreadsheet_id = spreadsheet_id
        self._spreadsheet: Optional[gspread.Spreadsheet] = None

    @property
    def spreadsheet(self) -> gspread.Spreadsheet:
        if self._spreadsheet is None:
            self._spreadsheet = self.services.gspread_client.open_by_key(
                self.spreadsheet_id
            )
        return self._spreadsheet

    def _worksheet(self, sheet_index: int) -> gspread.Worksheet:
        worksheet = self.spreadsheet.get_worksheet(sheet_index)
        if worksheet is None:
            raise HostError(f"Spreadsheet has no sheet at index {sheet_index}")
        return worksheet

    def _find_worksheet(self, name: str) -> Optional[gspread.Worksheet]:
        try:
            return self.spreadsheet.worksheet(name)
        except gspread.WorksheetNotFound:
            return None

    def read_header(self, sheet_index: int) -> List[Any]:
        return self._worksheet(sheet_index).row_values(1)

    def read_records(
        self, sheet_index: int, rows: Optional[Sequence[int]] = None
    ) -> List[List[Any]]:
        """Read response rows by 1-based sheet row number, or all of them."""
        values = self._worksheet(sheet_index).get_all_values()
        if rows is None:
            return values[1:]

        records = []
        for row in rows:
            if row == 1:
                logger.warning("Row 1 is the header row, skipping it")
                continue
            if row > len(values):
                logger.warning("Row {} is past the last response, skipping it", row)
                continue
            records.append(values[row - 1])
        return records

    def read_variables(self, sheet_name: str) -> Dict[str, str]:
        """Labelled rows (label in column A, value in B); first label wins."""
        worksheet = self._find_worksheet(sheet_name)
        if worksheet is None:
            logger.warning("No '{}' sheet in the responses spreadsheet", sheet_name)
            return {}
        variables: Dict[str, str] = {}
        for row in worksheet.get_all_values():
            if len(row) >= 2 and row[0]:
                variables.setdefault(row[0], row[1])
        return variables

    def read_editors(self, sheet_name: str) -> List[str]:
        worksheet = self._find_worksheet(sheet_name)
        if worksheet is None:
            return []
        return [
            value.strip() for value in worksheet.col_values(1) if "@" in value
        ]

    def read_links(self, sheet_name: str) -> Optional[List[LinkRow]]:
        """Display text and link target of column A, None if the sheet is missing."""
        if self._find_worksheet(sheet_name) is None:
            return None

        response = (
            self.services.sheets.spreadsheets()
            .get(
                spreadsheetId=self.spreadsheet_id,
                ranges=[f"{quote_sheet_name(sheet_name)}!A:A"],
                fields="sheets.data.rowData.values(formattedValue,hyperlink)",
            )
            .execute()
        )
        rows: List[LinkRow] = []
        for sheet in response.get("sheets", []):
            for grid in sheet.get("data", []):
                for row_data in grid.get("rowData", []):
                    cells = row_data.get("values") or [{}]
                    cell = cells[0]
                    rows.append(
                        LinkRow(cell.get("formattedValue", ""), cell.get("hyperlink"))
                    )
        return rows

    def write_links(self, sheet_name: str, rows: List[LinkRow]) -> None:
        """Replace the links sheet contents, creating it as the second tab."""
        worksheet = self._find_worksheet(sheet_name)
        if worksheet is None:
            logger.info("Creating '{}' sheet", sheet_name)
            worksheet = self.spreadsheet.add_worksheet(
                title=sheet_name, rows=max(len(rows), 100), cols=1, index=1
            )

        worksheet.clear()
        if not rows:
            return
        if len(rows) > worksheet.row_count:
            worksheet.resize(rows=len(rows))
        worksheet.update(
            range_name=f"A1:A{len(rows)}",
            values=[[to_cell(row)] for row in rows],
            value_input_option="USER_ENTERED",
        )

    def create_spreadsheet(
        self, name: str, workbook: bytes, folder_id: str
    ) -> StoredFile:
        return self.services.create_file(
            name,
            workbook,
            upload_mime_type=MIME_XLSX,
            target_mime_type=MIME_GOOGLE_SHEETS,
            folder_id=folder_id,
        )

    def export_pdf(self, file: StoredFile, options: PdfExportOptions) -> bytes:
        """Export the first sheet of a spreadsheet as PDF."""
        meta = (
            self.services.sheets.spreadsheets()
            .get(spreadsheetId=file.id, fields="sheets.properties.sheetId")
            .execute()
        )
        sheets = meta.get("sheets", [])
        if not sheets:
            raise ExportError(f"Spreadsheet '{file.name}' has no sheets")
        gid = sheets[0]["properties"]["sheetId"]

        url = EXPORT_URL.format(spreadsheet_id=file.id, gid=gid) + options.to_query()
        try:
            return fetch_bytes(self.services.session, url, config=self.services.retry)
        except requests.RequestException as exc:
            raise ExportError(f"PDF export of '{file.name}' failed: {exc}") from exc


class GoogleDriveIndex:
    """FileIndex over Google Drive."""

    def __init__(self, services: GoogleServices):
        self.services = services

    def _list(self, query: str) -> List[StoredFile]:
        files: List[StoredFile] = []
        page_token = None
        while True:
            response = (
                self.services.drive.files()
                .list(
                    q=query,
                    fields=f"nextPageToken, files({FILE_FIELDS})",
                    pageToken=page_token,
                    supportsAllDrives=True,
                    includeItemsFromAllDrives=True,
                )
                .execute()
            )
            files.extend(_stored_file(item) for item in response.get("files", []))
            page_token = response.get("nextPageToken")
            if not page_token:
                return files

    def search(self, name: str, mime_type: str) -> List[StoredFile]:
        """Live (not trashed) files with exactly this name and type."""
        query = (
            f"name = '{escape_query_value(name)}' and trashed = false "
            f"and mimeType = '{mime_type}'"
        )
        return self._list(query)

    def trash(self, file: StoredFile) -> None:
        self.services.drive.files().update(
            fileId=file.id, body={"trashed": True}, supportsAllDrives=True
        ).execute()

    def upload(
        self, name: str, data: bytes, mime_type: str, folder_id: str
    ) -> StoredFile:
        return self.services.create_file(
            name,
            data,
            upload_mime_type=mime_type,
            target_mime_type=mime_type,
            folder_id=folder_id,
        )

    def ensure_folder(self, name: str, parent_id: Optional[str] = None) -> str:
        """Id of the named folder, created (under ``parent_id``) if missing."""
        query = (
            f"name = '{escape_query_value(name)}' and trashed = false "
            f"and mimeType = '{MIME_FOLDER}'"
        )
        if parent_id:
            query += f" and '{escape_query_value(parent_id)}' in parents"
        existing = self._list(query)
        if existing:
            return existing[0].id

        body: Dict[str, Any] = {"name": name, "mimeType": MIME_FOLDER}
        if parent_id:
            body["parents"] = [parent_id]
        folder = (
            self.services.drive.files()
            .create(body=body, fields="id", supportsAllDrives=True)
            .execute()
        )
        logger.info("Created folder '{}' ({})", name, folder["id"])
        return folder["id"]

    def share(self, file: StoredFile, emails: Sequence[str]) -> None:
        for email in emails:
            self.services.drive.permissions().create(
                fileId=file.id,
                body={"type": "user", "role": "writer", "emailAddress": email},
                sendNotificationEmail=False,
                supportsAllDrives=True,
            ).execute()

"""Shared constants for SkillChart."""

# Google Drive MIME types
MIME_GOOGLE_SHEETS = "application/vnd.google-apps.spreadsheet"
MIME_FOLDER = "application/vnd.google-apps.folder"
MIME_PDF = "application/pdf"
MIME_XLSX = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

# OAuth scopes needed for Drive search/trash/upload and Sheets read/write
SCOPES = [
    "https://www.googleapis.com/auth/spreadsheets",
    "https://www.googleapis.com/auth/drive",
]

SPREADSHEET_URL = "https://docs.google.com/spreadsheets/d/{spreadsheet_id}"
EXPORT_URL = SPREADSHEET_URL + "/export?gid={gid}"

# First three header cells are metadata: timestamp, organization, person
METADATA_COLUMNS = 3

# Per-respondent spreadsheet titles are cut to this many characters
MAX_ARTIFACT_NAME_LENGTH = 100

# Separators of "Category[...]:SubCategory" header cells
HEADER_SEPARATORS = r"\[|\]|:"

"""Configuration Schema

Pydantic models for the explicit run configuration handed to the workflow.
``resolve_run_config`` merges settings with the labelled rows of the
"variables" sheet and the "editors" sheet of the responses spreadsheet.
"""

from typing import TYPE_CHECKING, Dict, List, Optional, Tuple

from loguru import logger
from pydantic import BaseModel, Field, field_validator

from skillchart.errors import ConfigurationError

if TYPE_CHECKING:
    from skillchart.config.settings import SkillChartSettings
    from skillchart.host.base import DocumentStore


class PdfExportOptions(BaseModel):
    """Query options of the spreadsheet PDF export URL."""

    size: str = Field("A4", description="Paper size")
    portrait: bool = Field(True, description="True: portrait, False: landscape")
    scale: int = Field(
        2, ge=1, le=4, description="1=100%, 2=fit width, 3=fit height, 4=fit page"
    )
    fit_width: bool = Field(True, description="Fit the page width to the paper")
    top_margin: float = Field(0.40, ge=0)
    right_margin: float = Field(0.50, ge=0)
    bottom_margin: float = Field(0.40, ge=0)
    left_margin: float = Field(0.50, ge=0)
    horizontal_alignment: str = Field("CENTER")
    vertical_alignment: str = Field("TOP")
    print_title: bool = Field(False, description="Print the spreadsheet name")
    sheet_names: bool = Field(False, description="Print sheet names")
    gridlines: bool = Field(False, description="Print gridlines")
    frozen_rows: bool = Field(False, description="Repeat frozen rows")
    frozen_columns: bool = Field(False, description="Repeat frozen columns")

    def to_query(self) -> str:
        """Render the options as the query suffix appended to the export URL."""

        def flag(value: bool) -> str:
            return "true" if value else "false"

        params: List[Tuple[str, str]] = [
            ("exportFormat", "pdf"),
            ("format", "pdf"),
            ("size", self.size),
            ("portrait", flag(self.portrait)),
            ("scale", str(self.scale)),
            ("fitw", flag(self.fit_width)),
            ("top_margin", f"{self.top_margin:.2f}"),
            ("right_margin", f"{self.right_margin:.2f}"),
            ("bottom_margin", f"{self.bottom_margin:.2f}"),
            ("left_margin", f"{self.left_margin:.2f}"),
            ("horizontal_alignment", self.horizontal_alignment),
            ("vertical_alignment", self.vertical_alignment),
            ("printtitle", flag(self.print_title)),
            ("sheetnames", flag(self.sheet_names)),
            ("gridlines", flag(self.gridlines)),
            ("fzr", flag(self.frozen_rows)),
            ("fzc", flag(self.frozen_columns)),
        ]
        return "".join(f"&{key}={value}" for key, value in params)


class ChartLayout(BaseModel):
    """Placement of the radar charts on the per-respondent sheet."""

    start_row: int = Field(4, ge=1, description="Sheet row of the first chart")
    spacing: int = Field(18, ge=1, description="Rows between chart anchors")
    column: int = Field(3, ge=1, description="Sheet column of the charts (C)")
    v_min: float = Field(0, description="Radial axis minimum")
    v_max: float = Field(5, description="Radial axis maximum")
    width_cm: float = Field(15.0, gt=0)
    height_cm: float = Field(9.0, gt=0)
    page_breaks: List[Tuple[int, int]] = Field(
        default_factory=lambda: [(58, 3), (115, 3)],
        description="(before_row, count) blank rows inserted for PDF pagination",
    )

    @field_validator("page_breaks")
    @classmethod
    def validate_page_breaks(cls, v):
        for before, count in v:
            if before < 1 or count < 0:
                raise ValueError(f"Invalid page break: ({before}, {count})")
        return v


class RunPolicy(BaseModel):
    """What happens around each created spreadsheet."""

    export_pdf: bool = True
    notify_on_submit: bool = False
    share_with_editors: bool = False
    auto_folder: bool = False

    @classmethod
    def from_profile(cls, profile: str, **overrides: Optional[bool]) -> "RunPolicy":
        """Start from a named preset and apply the non-None overrides."""
        if profile not in PROFILES:
            raise ConfigurationError(
                f"Unknown profile: {profile}. Must be one of {sorted(PROFILES)}"
            )
        values = PROFILES[profile].model_dump()
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)


PROFILES: Dict[str, RunPolicy] = {
    # Menu run: file into the configured folder, export PDFs, keep links
    "pdf": RunPolicy(export_pdf=True),
    # Same, plus a webhook message for each form submission
    "notify": RunPolicy(export_pdf=True, notify_on_submit=True),
    # Auto-created folder, editors get edit access, no PDF
    "share": RunPolicy(export_pdf=False, share_with_editors=True, auto_folder=True),
}


class RunConfig(BaseModel):
    """Explicit configuration of one run."""

    policy: RunPolicy = Field(default_factory=RunPolicy)
    folder_id: Optional[str] = None
    folder_name: str = "Skill Check Charts"
    folder_parent_id: Optional[str] = None
    slack_webhook: Optional[str] = None
    editors: List[str] = Field(default_factory=list)
    max_name_length: int = 100
    links_sheet: str = "links"
    notify_template: str = "{organization} {person} {link}"
    pdf: PdfExportOptions = Field(default_factory=PdfExportOptions)
    layout: ChartLayout = Field(default_factory=ChartLayout)


def resolve_run_config(
    settings: "SkillChartSettings", store: "DocumentStore"
) -> RunConfig:
    """Merge settings with the variables/editors sheets into a RunConfig.

    Explicit settings win. Sheets are only read for values the policy needs.

    Raises:
        ConfigurationError: If the folder id or webhook the policy needs is
            configured nowhere.
    """
    policy = RunPolicy.from_profile(
        settings.profile,
        export_pdf=settings.export_pdf,
        notify_on_submit=settings.notify_on_submit,
        share_with_editors=settings.share_with_editors,
    )

    variables: Optional[Dict[str, str]] = None

    def variable(label: str) -> Optional[str]:
        nonlocal variables
        if variables is None:
            variables = store.read_variables(settings.variables_sheet)
        return variables.get(label) or None

    folder_id = settings.folder_id
    if folder_id is None and not policy.auto_folder:
        folder_id = variable(settings.folder_id_label)
        if folder_id is None:
            raise ConfigurationError(
                f"No folder id: set SKILLCHART_FOLDER_ID or add a "
                f"'{settings.folder_id_label}' row to the "
                f"'{settings.variables_sheet}' sheet"
            )

    slack_webhook = settings.slack_webhook
    if slack_webhook is None and policy.notify_on_submit:
        slack_webhook = variable(settings.webhook_label)
        if slack_webhook is None:
            raise ConfigurationError(
                f"No webhook: set SKILLCHART_SLACK_WEBHOOK or add a "
                f"'{settings.webhook_label}' row to the "
                f"'{settings.variables_sheet}' sheet"
            )

    editors = settings.editor_list
    if not editors and policy.share_with_editors:
        editors = store.read_editors(settings.editors_sheet)
        if not editors:
            logger.warning(
                "Editor sharing enabled but no editors found in '{}'",
                settings.editors_sheet,
            )

    return RunConfig(
        policy=policy,
        folder_id=folder_id,
        folder_name=settings.folder_name,
        folder_parent_id=settings.folder_parent_id,
        slack_webhook=slack_webhook,
        editors=editors,
        max_name_length=settings.max_name_length,
        links_sheet=settings.links_sheet,
        notify_template=settings.notify_template,
    )

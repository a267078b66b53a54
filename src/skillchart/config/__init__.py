from .settings import SkillChartSettings, load_settings
from .schema import (
    ChartLayout,
    PdfExportOptions,
    RunConfig,
    RunPolicy,
    resolve_run_config,
)

__all__ = [
    "SkillChartSettings",
    "load_settings",
    "ChartLayout",
    "PdfExportOptions",
    "RunConfig",
    "RunPolicy",
    "resolve_run_config",
]

"""Exception hierarchy for SkillChart.

Host failures are not retried or rolled back: they surface as one of these
types (or the underlying client error) and end the run.
"""


class SkillChartError(Exception):
    """Base exception for all SkillChart errors."""

    pass


class ConfigurationError(SkillChartError):
    """Missing or invalid configuration (settings, variables sheet, editors)."""

    pass


class ValidationError(SkillChartError):
    """Malformed input data."""

    pass


class HeaderError(ValidationError):
    """Response sheet header cannot be used (e.g. fewer than three cells)."""

    pass


class RecordError(ValidationError):
    """A response record lacks the organization/person cells."""

    pass


class HostError(SkillChartError):
    """Google Drive / Sheets call failed."""

    pass


class ExportError(HostError):
    """PDF export request failed."""

    pass


class NotificationError(SkillChartError):
    """Webhook notification could not be delivered."""

    pass

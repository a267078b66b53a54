"""CLI command handlers.

Each handler takes plain parameters and returns a Result, so the click
commands stay thin and the handlers can be tested without a CLI context.
"""

from pathlib import Path
from typing import Any, List, Optional

from skillchart.cli.common import read_csv_responses
from skillchart.config.settings import SkillChartSettings
from skillchart.errors import ConfigurationError
from skillchart.net.network import RetryConfig
from skillchart.result import Result, try_operation
from skillchart.services.workflow import connect_workflow
from skillchart.survey.header import parse_header


def _connect_store(settings: SkillChartSettings):
    from skillchart.host.google import GoogleDocumentStore, GoogleServices

    return GoogleDocumentStore(GoogleServices.connect(settings), settings.spreadsheet_id)


def handle_create(
    settings: SkillChartSettings,
    rows: Optional[List[int]] = None,
    csv_path: Optional[Path] = None,
) -> Result:
    """Create chart spreadsheets for selected rows (the menu action).

    Args:
        settings: Loaded settings
        rows: 1-based row numbers; all responses if None
        csv_path: Read header and records from a CSV export instead

    Returns:
        Result containing the run report dict
    """

    def run_create():
        workflow = connect_workflow(settings)
        if csv_path is not None:
            header, records = read_csv_responses(csv_path, rows)
            report = workflow.create_radar_charts(records, header=header)
        else:
            records = workflow.store.read_records(settings.source_sheet_index, rows)
            report = workflow.create_radar_charts(records)
        return report.to_dict()

    return try_operation(run_create)


def handle_submit(settings: SkillChartSettings, values: List[Any]) -> Result:
    """Process one form submission and send the notification."""

    def run_submit():
        workflow = connect_workflow(settings)
        return workflow.on_submit(values).to_dict()

    return try_operation(run_submit)


def handle_header(
    settings: SkillChartSettings, csv_path: Optional[Path] = None
) -> Result:
    """Parse the responses header and describe the categories."""

    def run_header():
        if csv_path is not None:
            header, _ = read_csv_responses(csv_path)
        else:
            header = _connect_store(settings).read_header(settings.source_sheet_index)

        parsed = parse_header(header)
        return {
            "header": [str(cell) for cell in parsed.header],
            "categories": {
                name: {"offset": category.offset, "count": category.count}
                for name, category in parsed.categories.items()
            },
        }

    return try_operation(run_header)


def handle_notifications_test(settings: SkillChartSettings) -> Result:
    """Send a sample message to the configured webhook."""

    def send_test_notification():
        from skillchart.host.slack import SlackNotifier

        webhook = settings.slack_webhook
        if webhook is None and settings.spreadsheet_id:
            variables = _connect_store(settings).read_variables(settings.variables_sheet)
            webhook = variables.get(settings.webhook_label) or None
        if webhook is None:
            raise ConfigurationError("No webhook configured")

        notifier = SlackNotifier(
            webhook, settings.notify_template, retry=RetryConfig.from_settings(settings)
        )
        notifier.notify("SkillChart", "Test", "https://example.com/skillchart.pdf")
        return {"status": "completed"}

    return try_operation(send_test_notification)

"""Command line entry point.

Replaces the spreadsheet menu ("create") and the form-submit trigger
("submit") of the hosted script.
"""

from pathlib import Path
from typing import Optional, Tuple

import click
from pydantic import ValidationError as SettingsValidationError

from skillchart import __version__
from skillchart.cli.common import (
    exit_with_message,
    load_event_values,
    parse_row_spec,
    write_json_outputs,
)
from skillchart.cli.handlers import (
    handle_create,
    handle_header,
    handle_notifications_test,
    handle_submit,
)
from skillchart.config.settings import load_settings
from skillchart.core.logging import setup_logging
from skillchart.errors import ValidationError
from skillchart.result import Result

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def _finish(result: Result, json_out: Optional[Path], *, echo_json: bool = False) -> None:
    if not result["ok"]:
        exit_with_message(f"Error: {result['error']}", code=1)
    write_json_outputs(payload=result["value"], out_path=json_out, emit_stdout=echo_json)


def _echo_report(report: dict) -> None:
    if not report["spreadsheets"]:
        click.echo("No records with answers, nothing created.")
        return
    for sheet in report["spreadsheets"]:
        click.echo(f"Created {sheet['name']}: {sheet['url']}")
        for stale in sheet["replaced"]:
            click.echo(f"  replaced {stale}")
    for url in report["pdf_urls"]:
        click.echo(f"PDF: {url}")


@click.group()
@click.version_option(__version__, prog_name="skillchart")
@click.option(
    "--env-file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Read settings from this .env file.",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    help="Override SKILLCHART_LOG_LEVEL.",
)
@click.option(
    "--profile",
    type=click.Choice(["pdf", "notify", "share"]),
    help="Filing/export/notification preset.",
)
@click.pass_context
def cli(ctx, env_file, log_level, profile):
    """Radar chart spreadsheets and PDFs for skill-check responses."""
    try:
        settings = load_settings(
            env_file,
            log_level=log_level.upper() if log_level else None,
            profile=profile,
        )
    except SettingsValidationError as exc:
        raise click.ClickException(f"Invalid settings:\n{exc}")

    setup_logging(settings)
    ctx.obj = settings


@cli.command()
@click.option("--rows", "row_spec", help='Sheet rows to process, e.g. "2-4,7".')
@click.option("--all", "all_rows", is_flag=True, help="Process every response row.")
@click.option(
    "--csv",
    "csv_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Read responses from a CSV export instead of the sheet.",
)
@click.option(
    "--json-out", type=click.Path(dir_okay=False, path_type=Path), help="Write the report as JSON."
)
@click.pass_obj
def create(settings, row_spec, all_rows, csv_path, json_out):
    """Create chart spreadsheets for selected response rows."""
    if bool(row_spec) == all_rows:
        raise click.UsageError("Pass exactly one of --rows or --all.")

    try:
        rows = parse_row_spec(row_spec) if row_spec else None
    except ValidationError as exc:
        raise click.BadParameter(str(exc), param_hint="--rows")

    result = handle_create(settings, rows=rows, csv_path=csv_path)
    if result["ok"]:
        _echo_report(result["value"])
    _finish(result, json_out)


@cli.command()
@click.argument("values", nargs=-1)
@click.option(
    "--event",
    "event_path",
    type=click.Path(allow_dash=True, dir_okay=False),
    help='Form-submit event JSON ({"values": [...]}), "-" for stdin.',
)
@click.option(
    "--json-out", type=click.Path(dir_okay=False, path_type=Path), help="Write the report as JSON."
)
@click.pass_obj
def submit(settings, values: Tuple[str, ...], event_path, json_out):
    """Process one form submission given as VALUES or an event file."""
    if bool(values) == bool(event_path):
        raise click.UsageError("Pass either VALUES or --event.")

    if event_path:
        try:
            record = load_event_values(event_path)
        except (ValidationError, ValueError, OSError) as exc:
            raise click.BadParameter(str(exc), param_hint="--event")
    else:
        record = list(values)

    result = handle_submit(settings, record)
    if result["ok"]:
        _echo_report(result["value"])
    _finish(result, json_out)


@cli.command()
@click.option(
    "--csv",
    "csv_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Parse the header of a CSV export instead of the sheet.",
)
@click.option(
    "--json-out", type=click.Path(dir_okay=False, path_type=Path), help="Also write to this file."
)
@click.pass_obj
def header(settings, csv_path, json_out):
    """Print the skill categories found in the responses header."""
    _finish(handle_header(settings, csv_path=csv_path), json_out, echo_json=True)


@cli.command("notify-test")
@click.pass_obj
def notify_test(settings):
    """Send a sample notification to the webhook."""
    result = handle_notifications_test(settings)
    if result["ok"]:
        click.echo("Notification dispatched (check the chat channel).")
    _finish(result, None)


def main() -> None:
    cli(prog_name="skillchart")


if __name__ == "__main__":
    main()

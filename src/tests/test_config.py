"""Tests for run policy profiles and run config resolution."""

import pytest

from skillchart.config.schema import (
    PROFILES,
    ChartLayout,
    PdfExportOptions,
    RunPolicy,
    resolve_run_config,
)
from skillchart.config.settings import SkillChartSettings
from skillchart.errors import ConfigurationError

from conftest import FakeHost


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)


class CountingHost(FakeHost):
    def __init__(self):
        super().__init__()
        self.reads = []

    def read_variables(self, sheet_name):
        self.reads.append(sheet_name)
        return super().read_variables(sheet_name)

    def read_editors(self, sheet_name):
        self.reads.append(sheet_name)
        return super().read_editors(sheet_name)


class TestPdfExportOptions:
    def test_default_query(self):
        assert PdfExportOptions().to_query() == (
            "&exportFormat=pdf&format=pdf&size=A4&portrait=true&scale=2&fitw=true"
            "&top_margin=0.40&right_margin=0.50&bottom_margin=0.40&left_margin=0.50"
            "&horizontal_alignment=CENTER&vertical_alignment=TOP"
            "&printtitle=false&sheetnames=false&gridlines=false&fzr=false&fzc=false"
        )

    def test_landscape(self):
        query = PdfExportOptions(portrait=False, gridlines=True).to_query()

        assert "&portrait=false" in query
        assert "&gridlines=true" in query

    def test_invalid_scale(self):
        with pytest.raises(ValueError):
            PdfExportOptions(scale=5)


class TestChartLayout:
    def test_defaults(self):
        layout = ChartLayout()

        assert (layout.start_row, layout.spacing, layout.column) == (4, 18, 3)
        assert (layout.v_min, layout.v_max) == (0, 5)
        assert layout.page_breaks == [(58, 3), (115, 3)]

    def test_invalid_page_break(self):
        with pytest.raises(ValueError):
            ChartLayout(page_breaks=[(0, 3)])


class TestRunPolicy:
    def test_profiles(self):
        assert PROFILES["pdf"] == RunPolicy(export_pdf=True)
        assert PROFILES["notify"].notify_on_submit is True
        assert PROFILES["share"].auto_folder is True
        assert PROFILES["share"].export_pdf is False

    def test_overrides(self):
        policy = RunPolicy.from_profile("share", export_pdf=True, notify_on_submit=None)

        assert policy.export_pdf is True
        assert policy.notify_on_submit is False
        assert policy.share_with_editors is True

    def test_unknown_profile(self):
        with pytest.raises(ConfigurationError, match="Unknown profile"):
            RunPolicy.from_profile("email")

    def test_profiles_are_not_mutated(self):
        RunPolicy.from_profile("pdf", export_pdf=False)

        assert PROFILES["pdf"].export_pdf is True


class TestResolveRunConfig:
    def test_settings_win_over_sheet(self):
        store = CountingHost()
        store.variables["variables"] = {"Folder ID": "from-sheet"}

        config = resolve_run_config(SkillChartSettings(folder_id="from-env"), store)

        assert config.folder_id == "from-env"
        assert store.reads == []

    def test_folder_from_variables_sheet(self):
        store = CountingHost()
        store.variables["variables"] = {"Folder ID": "from-sheet"}

        config = resolve_run_config(SkillChartSettings(), store)

        assert config.folder_id == "from-sheet"
        assert config.policy == PROFILES["pdf"]

    def test_missing_folder(self):
        with pytest.raises(ConfigurationError, match="No folder id"):
            resolve_run_config(SkillChartSettings(), CountingHost())

    def test_auto_folder_needs_no_folder_id(self):
        store = CountingHost()

        config = resolve_run_config(SkillChartSettings(profile="share"), store)

        assert config.folder_id is None
        assert config.folder_name == "Skill Check Charts"

    def test_webhook_from_variables_sheet(self):
        store = CountingHost()
        store.variables["variables"] = {
            "Folder ID": "f",
            "Slack Webhook": "https://hooks.example.com/x",
        }

        config = resolve_run_config(SkillChartSettings(profile="notify"), store)

        assert config.slack_webhook == "https://hooks.example.com/x"
        assert store.reads == ["variables"]

    def test_missing_webhook(self):
        store = CountingHost()
        store.variables["variables"] = {"Folder ID": "f", "Slack Webhook": ""}

        with pytest.raises(ConfigurationError, match="No webhook"):
            resolve_run_config(SkillChartSettings(profile="notify"), store)

    def test_webhook_not_needed_without_notify(self):
        config = resolve_run_config(SkillChartSettings(folder_id="f"), CountingHost())

        assert config.slack_webhook is None

    def test_custom_labels(self):
        store = CountingHost()
        store.variables["config"] = {"Ordner": "f"}

        config = resolve_run_config(
            SkillChartSettings(variables_sheet="config", folder_id_label="Ordner"), store
        )

        assert config.folder_id == "f"

    def test_editors_from_sheet(self):
        store = CountingHost()
        store.editors["editors"] = ["lead@example.com"]

        config = resolve_run_config(SkillChartSettings(profile="share"), store)

        assert config.editors == ["lead@example.com"]

    def test_editors_from_settings(self):
        store = CountingHost()
        store.editors["editors"] = ["sheet@example.com"]

        config = resolve_run_config(
            SkillChartSettings(profile="share", editors="env@example.com"), store
        )

        assert config.editors == ["env@example.com"]
        assert store.reads == []

    def test_editors_not_read_without_sharing(self):
        store = CountingHost()

        resolve_run_config(SkillChartSettings(folder_id="f"), store)

        assert "editors" not in store.reads

    def test_carries_sheet_and_name_settings(self):
        config = resolve_run_config(
            SkillChartSettings(folder_id="f", links_sheet="index", max_name_length=20),
            CountingHost(),
        )

        assert config.links_sheet == "index"
        assert config.max_name_length == 20

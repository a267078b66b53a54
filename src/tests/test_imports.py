"""Every module imports, and the docstring examples of the pure modules hold."""

import doctest
import importlib
import pkgutil

import pytest

import skillchart

MODULES = sorted(
    info.name
    for info in pkgutil.walk_packages(skillchart.__path__, prefix="skillchart.")
    if info.name != "skillchart.__main__"
)

DOCTESTED = [
    "skillchart.charts.layout",
    "skillchart.charts.workbook",
    "skillchart.cli.common",
    "skillchart.survey.header",
    "skillchart.survey.links",
]


def test_modules_found():
    assert "skillchart.survey.links" in MODULES
    assert "skillchart.host.google" in MODULES


@pytest.mark.parametrize("name", MODULES)
def test_module_imports(name):
    importlib.import_module(name)


@pytest.mark.parametrize("name", DOCTESTED)
def test_docstring_examples(name):
    results = doctest.testmod(importlib.import_module(name))

    assert results.attempted > 0
    assert results.failed == 0

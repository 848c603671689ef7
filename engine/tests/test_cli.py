"""Tests for the chart command-line entry point."""

from __future__ import annotations

import json

import pytest

from astro_engine.__main__ import main

BASE_ARGS = ["--date", "2000-01-01T12:00:00", "--lat", "51.5074", "--lon", "-0.1278"]


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in ("SWISSEPH_EPHE_PATH", "ASTRO_HOUSE_SYSTEM", "ASTRO_SPEED_STEP_DAYS", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


def test_prints_chart_json(capsys):
    assert main(BASE_ARGS) == 0

    output = json.loads(capsys.readouterr().out)
    chart = output["chart"]
    assert len(chart["planets"]) == 10
    assert len(chart["houses"]) == 12
    assert chart["house_system"] == "whole_sign"
    assert chart["planets"][0]["name"] == "Sun"
    assert chart["planets"][0]["zodiac_sign"]["sign"] == "Capricorn"
    assert chart["date"].startswith("2000-01-01T12:00:00")
    assert "aspects" not in output


def test_house_system_and_aspects(capsys):
    assert main([*BASE_ARGS, "--house-system", "P", "--tz", "1", "--aspects"]) == 0

    output = json.loads(capsys.readouterr().out)
    assert output["chart"]["house_system"] == "placidus"
    assert output["chart"]["location"]["timezone"] == 1.0
    assert isinstance(output["aspects"], list)
    for aspect in output["aspects"]:
        assert {"planet1", "planet2", "type", "orb", "exact", "influence"} <= aspect.keys()


def test_house_system_default_from_environment(monkeypatch, capsys):
    monkeypatch.setenv("ASTRO_HOUSE_SYSTEM", "equal")

    assert main(BASE_ARGS) == 0

    assert json.loads(capsys.readouterr().out)["chart"]["house_system"] == "equal"


@pytest.mark.parametrize(
    "argv",
    [
        [*BASE_ARGS, "--house-system", "koch"],
        ["--date", "yesterday", "--lat", "0", "--lon", "0"],
        ["--lat", "0", "--lon", "0"],
    ],
)
def test_bad_arguments_exit_with_usage_error(argv):
    with pytest.raises(SystemExit) as excinfo:
        main(argv)

    assert excinfo.value.code == 2


def test_invalid_coordinates_return_error_code(capsys):
    assert main(["--date", "2000-01-01T12:00:00", "--lat", "95", "--lon", "0"]) == 1

    assert capsys.readouterr().out == ""

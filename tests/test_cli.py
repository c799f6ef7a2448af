from __future__ import annotations

import calendar
import json
import os
from datetime import date
from pathlib import Path

import pytest
from typer.testing import CliRunner

from corvee_core.cli import app
from corvee_core.errors import UsageError, ValidationError

runner = CliRunner()


@pytest.fixture
def base_args(tmp_path: Path, monkeypatch) -> list[str]:
    for key in list(os.environ):
        if key.startswith("CORVEE_"):
            monkeypatch.delenv(key)
    return ["--config", str(tmp_path / "config.toml")]


def _days(month: int) -> int:
    return calendar.monthrange(date.today().year, month)[1]


def test_tasks_list_shows_seed_catalog(base_args: list[str]) -> None:
    result = runner.invoke(app, [*base_args, "--format", "json", "tasks", "list"])
    assert result.exit_code == 0, result.output
    assert [row["name"] for row in json.loads(result.output)] == ["Sol", "Vaisselle", "Lessives"]


def test_people_search(base_args: list[str]) -> None:
    result = runner.invoke(app, [*base_args, "people", "list", "--search", "bo", "--format", "json"])
    assert result.exit_code == 0, result.output
    assert [row["name"] for row in json.loads(result.output)] == ["Bob"]


def test_distribute_prints_every_assignment(base_args: list[str]) -> None:
    result = runner.invoke(app, [*base_args, "distribute", "--month", "April", "--format", "json"])
    assert result.exit_code == 0, result.output
    rows = json.loads(result.output)
    assert len(rows) == _days(4) * 3
    assert rows[0]["date"].endswith("-04-01")
    assert rows[0]["task"] == "Lessives"
    assert rows[0]["person"] == "Alice"


def test_totals_table(base_args: list[str]) -> None:
    result = runner.invoke(app, [*base_args, "totals", "--month", "2"])
    assert result.exit_code == 0, result.output
    lines = result.output.splitlines()
    assert lines[0].split(" | ")[0].strip() == "person_id"
    assert {line.split("|")[1].strip() for line in lines[2:]} == {"Alice", "Bob", "Charlie"}


def test_calendar_marks_absences_from_roster(base_args: list[str], tmp_path: Path) -> None:
    year = date.today().year
    roster = tmp_path / "roster.json"
    roster.write_text(
        json.dumps(
            {
                "people": [
                    {"id": 1, "name": "Alice", "absences": [{"start": f"{year}-03-01", "end": f"{year}-03-31"}]},
                    {"id": 4, "name": "Dana"},
                ],
                "tasks": [{"name": "Sol", "weight": 1}],
            }
        ),
        encoding="utf-8",
    )

    result = runner.invoke(app, [*base_args, "--roster", str(roster), "--locale", "en-US", "calendar", "--month", "March"])

    assert result.exit_code == 0, result.output
    assert "Alice absent" in result.output
    assert "Sol - Dana" in result.output
    assert "Sol - Alice" not in result.output
    assert " 01 Mar" in result.output


def test_roster_export(base_args: list[str], tmp_path: Path) -> None:
    target = tmp_path / "out" / "roster.json"
    result = runner.invoke(app, [*base_args, "--locale", "en-US", "roster", "export", str(target)])
    assert result.exit_code == 0, result.output
    assert "Roster exported" in result.output
    data = json.loads(target.read_text(encoding="utf-8"))
    assert [person["name"] for person in data["people"]] == ["Alice", "Bob", "Charlie"]


def test_config_show_reads_file(base_args: list[str], tmp_path: Path) -> None:
    (tmp_path / "config.toml").write_text("[tasks]\nmax_weight = 6\n", encoding="utf-8")
    result = runner.invoke(app, [*base_args, "config", "show", "--format", "json"])
    assert result.exit_code == 0, result.output
    rows = {row["key"]: row["value"] for row in json.loads(result.output)}
    assert rows["max_weight"] == 6


def test_unknown_month_raises_validation_error(base_args: list[str]) -> None:
    result = runner.invoke(app, [*base_args, "distribute", "--month", "Thermidor"])
    assert isinstance(result.exception, ValidationError)


def test_unknown_format_is_a_usage_error(base_args: list[str]) -> None:
    result = runner.invoke(app, [*base_args, "--format", "xml", "tasks", "list"])
    assert isinstance(result.exception, UsageError)


def test_serve_starts_from_cli_roster_and_locale(base_args: list[str], tmp_path: Path, monkeypatch) -> None:
    roster = tmp_path / "roster.json"
    roster.write_text(json.dumps({"people": [{"id": 7, "name": "Dana"}], "tasks": []}), encoding="utf-8")
    started: dict = {}

    def fake_run(web_app, **kwargs) -> None:
        started["app"] = web_app
        started.update(kwargs)

    monkeypatch.setattr("uvicorn.run", fake_run)
    result = runner.invoke(app, [*base_args, "--roster", str(roster), "--locale", "en-US", "serve", "--port", "8123"])

    assert result.exit_code == 0, result.output
    container = started["app"].state.container
    assert [person.name for person in container.service.list_people()] == ["Dana"]
    assert container.config.general.default_locale == "en-US"
    assert started["port"] == 8123

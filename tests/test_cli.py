"""Tests for the command-line entry point."""

import json

import polars as pl
import pytest

from table_verifier import CheckResult, FailureKind, Phase, RunReport, TableReport, cli


def make_run_report(passed=True):
    table = TableReport(page_name="Workunits")
    phase = table.add_phase(Phase.HEADERS)
    if passed:
        phase.add(CheckResult.ok(Phase.HEADERS, "WUID"))
    else:
        phase.add(CheckResult.fail(Phase.HEADERS, "WUID", FailureKind.ELEMENT_NOT_FOUND))
    return RunReport(tables=[table], completed=True)


@pytest.fixture
def suite(tmp_path):
    path = tmp_path / "suite.json"
    path.write_text(
        json.dumps(
            [
                {
                    "schema": "workunits",
                    "page_name": "Workunits",
                    "url": "esp/files/index.html#/workunits",
                    "fixture": "workunits.json",
                }
            ]
        ),
        encoding="utf-8",
    )
    return path


@pytest.fixture
def fake_run(monkeypatch):
    """Replace logging setup and the browser run; record what they receive."""
    calls = {"configs": [], "report": make_run_report()}

    def configure_logging(config):
        calls["configs"].append(config)
        return []

    def run_suite(cases, config):
        calls["cases"] = cases
        calls["run_config"] = config
        return calls["report"]

    monkeypatch.setattr(cli, "configure_logging", configure_logging)
    monkeypatch.setattr(cli, "run_suite", run_suite)
    return calls


def test_schemas_lists_bundled_schema(capsys):
    assert cli.main(["schemas"]) == 0
    assert "workunits: WUID, Owner, Job Name" in capsys.readouterr().out


def test_run_prints_summary(suite, fake_run, capsys):
    assert cli.main(["run", str(suite)]) == 0

    out = capsys.readouterr().out
    assert "Workunits" in out
    assert [c.page_name for c in fake_run["cases"]] == ["Workunits"]


def test_run_applies_overrides(suite, fake_run, tmp_path):
    cli.main(
        [
            "run",
            str(suite),
            "--base-url",
            "http://example.test:8010",
            "--headed",
            "--log-level",
            "detail",
            "--log-dir",
            str(tmp_path / "logs"),
        ]
    )

    config = fake_run["run_config"]
    assert config.base_url == "http://example.test:8010"
    assert not config.headless
    assert config.log_level == "detail"
    assert fake_run["configs"] == [config]


def test_failures_do_not_change_exit_code_without_strict(suite, fake_run):
    fake_run["report"] = make_run_report(passed=False)
    assert cli.main(["run", str(suite)]) == 0


def test_strict_exit_code(suite, fake_run):
    fake_run["report"] = make_run_report(passed=False)
    assert cli.main(["run", str(suite), "--strict"]) == 1


def test_report_csv(suite, fake_run, tmp_path):
    report_path = tmp_path / "report.csv"

    cli.main(["run", str(suite), "--report", str(report_path)])

    df = pl.read_csv(report_path)
    assert df["subject"].to_list() == ["WUID"]
    assert df["passed"].to_list() == [True]


def test_unloadable_suite(tmp_path, fake_run, capsys):
    assert cli.main(["run", str(tmp_path / "missing.json")]) == 2
    assert "Cannot load suite" in capsys.readouterr().err

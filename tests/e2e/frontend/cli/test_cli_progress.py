"""End-to-end tests of the ``pvtrack`` progress commands."""

import json
import re

import pytest

# pylint: disable=magic-value-comparison


def test_help_lists_commands(invoke):
    result = invoke("--help")
    assert result.exit_code == 0
    for command in ("status", "units", "show", "toggle", "activity", "rebuild", "watch"):
        assert command in result.output


def test_version(invoke):
    result = invoke("--version")
    assert result.exit_code == 0
    assert "0.1.0" in result.output


def test_status_of_fresh_store(invoke):
    result = invoke("status")
    assert result.exit_code == 0, result.output
    assert "Overall completion: 0%" in result.stdout
    assert "0 of 64 PV units completed" in result.stdout


def test_toggle_then_show(invoke):
    result = invoke("toggle", "PV05", "1")
    assert result.exit_code == 0, result.output
    assert "PV05 test-1 is now In Progress." in result.output

    result = invoke("show", "5", "--json")
    assert result.exit_code == 0, result.output
    data = json.loads(result.stdout)
    assert data["unitId"] == "05"
    assert data["completionPercentage"] == 0
    assert len(data["tests"]) == 20
    assert data["tests"][0] == {
        "id": "test-1",
        "name": "TRST_TVSS01: Equipment Hard Tag",
        "status": "in-progress",
    }


def test_show_renders_a_table(invoke):
    result = invoke("show", "PV12")
    assert result.exit_code == 0, result.output
    assert "PV12: 0% complete" in result.stdout
    assert "test-20" in result.stdout


def test_completed_test_moves_unit_and_overall_progress(invoke):
    invoke("toggle", "05", "test-3")
    invoke("toggle", "05", "test-3")

    units = json.loads(invoke("units", "--json").stdout)
    unit = next(u for u in units if u["unitId"] == "05")
    assert unit["completionPercentage"] == 5
    assert unit["status"] == "in-progress"
    assert unit["completedTestCount"] == 1
    assert len(units) == 64

    status = json.loads(invoke("status", "--json").stdout)
    assert status == {
        "totalUnits": 64,
        "completedUnits": 0,
        "inProgressUnits": 1,
        "notStartedUnits": 63,
        "overallPercentage": 0,
    }


def test_units_table(invoke):
    result = invoke("units")
    assert result.exit_code == 0, result.output
    assert "PV01" in result.stdout
    assert "PV64" in result.stdout


def test_activity_feed(invoke):
    assert invoke("activity").stdout.strip() == "No recent activity"

    invoke("toggle", "7", "2")
    invoke("toggle", "7", "2")

    result = invoke("activity")
    lines = result.stdout.strip().splitlines()
    assert re.match(r"PV07 updated: TestID #2 marked as complete \(\d+m ago\)", lines[0])
    assert lines[1].startswith("PV07 updated: TestID #2 marked as in progress")

    entries = json.loads(invoke("activity", "--json").stdout)
    assert [e["newStatus"] for e in entries] == ["completed", "in-progress"]
    assert entries[0]["testId"] == "test-2"


@pytest.mark.parametrize("test", ["99", "²"])
def test_toggle_unknown_test_changes_nothing(invoke, test):
    result = invoke("toggle", "05", test)
    assert result.exit_code == 0, result.output
    assert "nothing changed" in result.output
    assert invoke("activity", "--json").stdout.strip() == "[]"


def test_toggle_unknown_unit_is_a_usage_error(invoke):
    result = invoke("toggle", "PV65", "1")
    assert result.exit_code == 2
    assert "PV65" in result.output


def test_rebuild(invoke):
    invoke("toggle", "01", "1")
    result = invoke("rebuild")
    assert result.exit_code == 0, result.output
    assert "Rebuilt 64 units" in result.output


def test_watch_single_iteration(invoke):
    result = invoke("watch", "--iterations", "1", "--interval", "0")
    assert result.exit_code == 0, result.output
    assert "Overall completion: 0%" in result.stdout
    assert "No recent activity" in result.stdout


def test_total_units_option(invoke):
    units = json.loads(invoke("--total-units", "3", "units", "--json").stdout)
    assert [u["label"] for u in units] == ["PV01", "PV02", "PV03"]

    result = invoke("units", "--json", env={"PVTRACK_TOTAL_UNITS": "2"})
    assert len(json.loads(result.stdout)) == 2


def test_memory_store_starts_empty_every_run(invoke):
    invoke("--store-url", "memory://", "toggle", "01", "1")
    result = invoke("--store-url", "memory://", "activity", "--json")
    assert json.loads(result.stdout) == []


def test_unusable_store_url(invoke):
    result = invoke("--store-url", "nosuchdb://nowhere", "status")
    assert result.exit_code == 1
    assert "Cannot open store" in result.output


def test_verbose_shows_handler_logging(invoke):
    result = invoke("-v", "toggle", "05", "1")
    assert result.exit_code == 0, result.output
    assert "is now in-progress" in result.output


def test_default_hides_info_logging(invoke):
    result = invoke("toggle", "05", "1")
    assert result.exit_code == 0, result.output
    assert "is now in-progress" not in result.output

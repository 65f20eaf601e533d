"""
Tests for the Typer command line in mock mode.
"""

from datetime import timedelta

import pendulum
from typer.testing import CliRunner

from barberslots.cli.app import app

runner = CliRunner()

WEDNESDAY = 2
SUNDAY = 6


def test_slots_lists_available_times(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    result = runner.invoke(app, ["slots", "leon", "2024-02-07", "--service", "hot-towel-shave", "--mock"])

    assert result.exit_code == 0, result.output
    assert "09:00" in result.output
    assert "11:30" in result.output
    assert "2:00 PM" in result.output


def test_slots_on_day_off(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    result = runner.invoke(app, ["slots", "leon", "2024-02-04", "-s", "signature-cut", "--mock"])

    assert result.exit_code == 0, result.output
    assert "does not work" in result.output


def test_unknown_stylist_exits_with_error(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    result = runner.invoke(app, ["slots", "nobody", "2024-02-07", "-s", "signature-cut", "--mock"])

    assert result.exit_code == 1
    assert "Unknown stylist" in result.output


def _next_weekday(weekday: int) -> str:
    """ISO date of the next given weekday (Monday=0) strictly after today in the shop timezone."""
    today = pendulum.now("America/Edmonton").date()
    days_ahead = (weekday - today.weekday()) % 7 or 7
    return (today + timedelta(days=days_ahead)).isoformat()


def _book(date: str, time: str, *customer: str):
    return runner.invoke(
        app,
        ["book", "leon", date, time, "--service", "signature-cut", *(customer or CUSTOMER), "--mock"],
    )


CUSTOMER = ("--name", "Sam", "--email", "sam@example.com", "--phone", "+1 403-555-0199")


def test_book_confirms_open_slot(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    result = runner.invoke(
        app,
        [
            "book", "leon", _next_weekday(WEDNESDAY), "14:00",
            "--service", "signature-cut",
            "--add-on", "beard-trim",
            *CUSTOMER,
            "--mock",
        ],
    )

    assert result.exit_code == 0, result.output
    assert "Booking confirmed" in result.output
    assert "BRG-" in result.output


def test_book_time_inside_break_is_rejected(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    result = _book(_next_weekday(WEDNESDAY), "10:30")

    assert result.exit_code == 1
    assert "not available" in result.output
    assert "Booking confirmed" not in result.output


def test_book_off_grid_time_is_rejected(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    result = _book(_next_weekday(WEDNESDAY), "14:07")

    assert result.exit_code == 1
    assert "not available" in result.output


def test_book_on_day_off_is_rejected(tmp_path, monkeypatch):
    """Leon never works Sundays, so 03:00 must not be confirmed."""
    monkeypatch.chdir(tmp_path)

    result = _book(_next_weekday(SUNDAY), "03:00")

    assert result.exit_code == 1
    assert "does not work" in result.output
    assert "BRG-" not in result.output


def test_book_past_date_is_rejected(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    result = _book("2024-02-07", "14:00")

    assert result.exit_code == 1
    assert "in the past" in result.output


def test_book_invalid_customer_is_rejected(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    result = _book(
        _next_weekday(WEDNESDAY), "14:00",
        "--name", "", "--email", "not-an-email", "--phone", "abc",
    )

    assert result.exit_code == 1
    assert "full name" in result.output
    assert "Booking confirmed" not in result.output


def test_remote_mode_requires_credentials(tmp_path, monkeypatch):
    (tmp_path / "config.yaml").write_text("timezone: America/Edmonton\n", encoding="utf-8")
    monkeypatch.chdir(tmp_path)

    result = runner.invoke(app, ["services"])

    assert result.exit_code == 1
    assert "supabase_url" in result.output

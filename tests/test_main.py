import json
from datetime import datetime

import pytest

import main
from config import Settings


@pytest.fixture
def settings(tmp_path):
    return Settings(
        data_file=tmp_path / "habits-data.json",
        user_name="Ana",
        reminder_interval=5,
        demo_data=True,
        log_file=tmp_path / "logs" / "test.log",
    )


@pytest.fixture
def app(mocker, settings):
    mocker.patch("main.load_settings", return_value=settings)
    mocker.patch("main.setup_logger")
    return {
        "manager": mocker.patch("main.HabitManager"),
        "reminder": mocker.patch("main.HabitReminder"),
    }


def read(path):
    return json.loads(path.read_text(encoding="utf-8"))


def test_first_run_seeds_demo_habits_and_runs_menu(app, settings):
    main.main([])

    doc = read(settings.data_file)
    assert doc["user"]["name"] == "Ana"
    assert len(doc["habits"]) == 3
    app["manager"].return_value.show_menu.assert_called_once()
    app["reminder"].assert_called_once()
    assert app["reminder"].call_args.kwargs["interval_seconds"] == 5
    app["reminder"].return_value.start.assert_called_once()
    app["reminder"].return_value.stop.assert_called_once()


def test_no_demo_and_no_reminder(app, settings):
    main.main(["--no-demo", "--no-reminder"])

    assert read(settings.data_file)["habits"] == []
    app["reminder"].return_value.start.assert_not_called()
    app["reminder"].return_value.stop.assert_called_once()


def test_data_file_option_overrides_settings(app, tmp_path):
    other = tmp_path / "other.json"
    main.main(["--data-file", str(other), "--no-demo"])
    assert other.exists()


def test_reset_clears_existing_habits(app, settings):
    settings.data_file.write_text(json.dumps({
        "user": {"name": "Ana", "createdAt": "2024-01-01T00:00:00"},
        "habits": [{"id": "x", "name": "Old", "targetFrequency": 2, "completions": []}],
    }), encoding="utf-8")

    main.main(["--reset", "--no-demo"])

    doc = read(settings.data_file)
    assert doc["habits"] == []
    assert datetime.fromisoformat(doc["user"]["createdAt"]).year >= 2025


def test_unreadable_file_is_not_overwritten_with_demo_data(app, settings):
    settings.data_file.write_text("{corrupt", encoding="utf-8")

    main.main([])

    assert settings.data_file.read_text(encoding="utf-8") == "{corrupt"
    app["manager"].return_value.show_menu.assert_called_once()


def test_reminder_stopped_when_menu_crashes(app):
    app["manager"].return_value.show_menu.side_effect = RuntimeError("boom")
    with pytest.raises(RuntimeError):
        main.main(["--no-demo"])
    app["reminder"].return_value.stop.assert_called_once()

import random
import sys
import threading
from datetime import date, timedelta
from unittest.mock import MagicMock

import pytest

from habit import Habit
from reminder import HabitReminder

TODAY = date(2025, 11, 11)


class FakeTracker:
    def __init__(self, habits):
        self.habits = habits


@pytest.fixture
def lines():
    return []


def make_reminder(habits, lines, **kwargs):
    return HabitReminder(FakeTracker(habits), output=lines.append, rng=random.Random(7), **kwargs)


def test_no_habits_no_reminder(lines):
    reminder = make_reminder([], lines)
    assert reminder.pick_habit(TODAY) is None
    assert reminder.show_reminder(TODAY) is None
    assert lines == []


def test_prefers_habits_short_of_target(lines):
    done = Habit("Water", target_frequency=1, completions={TODAY})
    pending = Habit("Gym", target_frequency=3)
    reminder = make_reminder([done, pending], lines)

    picks = {reminder.pick_habit(TODAY).name for _ in range(20)}

    assert picks == {"Gym"}


def test_falls_back_to_any_habit_when_all_on_track(lines):
    habits = [Habit(name, target_frequency=1, completions={TODAY}) for name in ("A", "B")]
    reminder = make_reminder(habits, lines)
    assert reminder.pick_habit(TODAY) in habits


def test_pick_does_not_mutate_habits(lines):
    habits = [Habit("A"), Habit("B")]
    reminder = make_reminder(habits, lines)
    reminder.show_reminder(TODAY)
    assert [h.name for h in habits] == ["A", "B"]
    assert all(not h.completions for h in habits)


def test_show_reminder_prints_name_and_status(lines):
    reminder = make_reminder([Habit("Read", target_frequency=5)], lines)

    habit = reminder.show_reminder(TODAY)

    assert habit.name == "Read"
    text = "\n".join(lines)
    assert 'REMINDER: Don\'t forget "Read"!' in text
    assert "(Status: active)" in text


def test_start_is_idempotent_and_stop_shuts_down(lines, mocker):
    scheduler_cls = mocker.patch("reminder.BackgroundScheduler")
    scheduler = scheduler_cls.return_value
    scheduler.running = True
    reminder = make_reminder([], lines, interval_seconds=3)

    reminder.start()
    reminder.start()

    scheduler_cls.assert_called_once()
    scheduler.add_job.assert_called_once()
    assert scheduler.add_job.call_args[0][0] == reminder.show_reminder
    scheduler.start.assert_called_once()
    assert reminder.running is True

    reminder.stop()
    scheduler.shutdown.assert_called_once_with(wait=False)
    assert reminder.running is False


def test_stop_without_start_is_harmless(lines):
    reminder = make_reminder([], lines)
    reminder.stop()
    assert reminder.running is False


def test_real_scheduler_lifecycle(lines):
    with make_reminder([Habit("A")], lines, interval_seconds=60) as reminder:
        assert reminder.running is True
    assert reminder.running is False


def test_scheduled_job_uses_configured_interval(lines, mocker):
    scheduler_cls = mocker.patch("reminder.BackgroundScheduler")
    reminder = make_reminder([], lines, interval_seconds=15)
    reminder.start()

    trigger = scheduler_cls.return_value.add_job.call_args[0][1]
    assert trigger.interval.total_seconds() == 15
    reminder.stop()


def test_stop_on_context_exit_after_error(lines, mocker):
    mocker.patch("reminder.BackgroundScheduler", return_value=MagicMock(running=True))
    reminder = make_reminder([], lines)
    with pytest.raises(RuntimeError):
        with reminder:
            raise RuntimeError("boom")
    assert reminder.running is False


def test_reminder_reads_while_menu_adds_completions(lines):
    start = date(2015, 1, 1)
    habit = Habit("Read", target_frequency=3,
                  completions={start + timedelta(days=n) for n in range(2000)})
    reminder = make_reminder([habit], lines)
    errors = []
    stop = threading.Event()

    def remind():
        while not stop.is_set():
            try:
                reminder.show_reminder(TODAY)
                habit.current_streak(TODAY)
            except RuntimeError as e:
                errors.append(str(e))

    old_interval = sys.getswitchinterval()
    sys.setswitchinterval(1e-6)
    worker = threading.Thread(target=remind)
    worker.start()
    try:
        for n in range(20000):
            habit.mark_complete(TODAY - timedelta(days=n))
    finally:
        stop.set()
        worker.join()
        sys.setswitchinterval(old_interval)

    assert errors == []
    assert len(habit.completions) >= 20000

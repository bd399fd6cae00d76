# reminder.py
import logging
import random
from datetime import date
from typing import Callable, Optional

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from habit import Habit

logger = logging.getLogger(__name__)

REMINDER_INTERVAL = 10  # seconds
REMINDER_JOB_ID = "habit_reminder"


class HabitReminder:
    """Periodically prints a nudge for one of the tracker's habits."""

    def __init__(
        self,
        tracker,
        interval_seconds: int = REMINDER_INTERVAL,
        output: Callable[[str], None] = print,
        rng: Optional[random.Random] = None,
    ):
        self.tracker = tracker
        self.interval_seconds = interval_seconds
        self.output = output
        self.rng = rng or random.Random()
        self._scheduler: Optional[BackgroundScheduler] = None

    @property
    def running(self) -> bool:
        return self._scheduler is not None and self._scheduler.running

    def pick_habit(self, today: date) -> Optional[Habit]:
        """Prefer habits still short of their weekly target; fall back to any habit."""
        habits = list(self.tracker.habits)
        if not habits:
            return None
        pending = [h for h in habits if not h.is_on_track_this_week(today)]
        return self.rng.choice(pending or habits)

    def show_reminder(self, today: Optional[date] = None) -> Optional[Habit]:
        today = today or date.today()
        habit = self.pick_habit(today)
        if habit is None:
            return None
        self.output("\n" + "=" * 50)
        self.output(f'REMINDER: Don\'t forget "{habit.name}"! (Status: {habit.status(today)})')
        self.output("=" * 50 + "\n")
        return habit

    def start(self) -> None:
        if self.running:
            return
        self._scheduler = BackgroundScheduler(daemon=True)
        self._scheduler.add_job(
            self.show_reminder,
            IntervalTrigger(seconds=self.interval_seconds),
            id=REMINDER_JOB_ID,
            max_instances=1,
            coalesce=True,
        )
        self._scheduler.start()
        logger.info("Reminder started (every %ss)", self.interval_seconds)

    def stop(self) -> None:
        if self._scheduler is None:
            return
        if self._scheduler.running:
            self._scheduler.shutdown(wait=False)
        self._scheduler = None
        logger.info("Reminder stopped")

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.stop()
        return False

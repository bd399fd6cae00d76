# habit_tracker.py
import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Union

from habit import (
    DEFAULT_CATEGORY,
    DEFAULT_TARGET_FREQUENCY,
    Habit,
    UserProfile,
    parse_timestamp,
)
from local_storage import LocalHabitStorage, StorageError

logger = logging.getLogger(__name__)

HabitRef = Union[int, str]

DEMO_HABITS = (
    ("Drink 8 glasses of water", 7, "Health"),
    ("Read for 30 minutes", 5, "Learning"),
    ("Light exercise", 3, "Health"),
)


class HabitValidationError(ValueError):
    """Raised when a habit cannot be created from the given input."""


class HabitFilter(str, Enum):
    ALL = "all"
    ACTIVE = "active"
    COMPLETED = "completed"


class FilterOutcome(Enum):
    MATCHED = "matched"
    PARTIAL_PROGRESS = "partial_progress"
    NOTHING_TO_SHOW = "nothing_to_show"


class CompletionStatus(Enum):
    RECORDED = "recorded"
    ALREADY_DONE = "already_done"
    NOT_FOUND = "not_found"


@dataclass
class CompletionResult:
    status: CompletionStatus
    habit: Optional[Habit] = None

    @property
    def ok(self) -> bool:
        return self.status is CompletionStatus.RECORDED


@dataclass
class FilterResult:
    habits: List[Habit]
    outcome: FilterOutcome = FilterOutcome.MATCHED


@dataclass
class SummaryStats:
    total: int
    completed_this_week: int
    active: int
    days_joined: int
    habit_names: List[str] = field(default_factory=list)
    total_targets: int = 0
    highest_target: Optional[Habit] = None


class HabitTracker:
    """Owns the user profile and the habit list; every change is saved right away."""

    def __init__(
        self,
        storage: LocalHabitStorage,
        user: Optional[UserProfile] = None,
        habits: Optional[Iterable[Habit]] = None,
    ):
        self.storage = storage
        self.user = user or UserProfile()
        self.habits: List[Habit] = list(habits or [])

    # -------------------------
    # CRUD
    # -------------------------
    def add_habit(
        self,
        name: str,
        target_frequency: int = DEFAULT_TARGET_FREQUENCY,
        category: Optional[str] = DEFAULT_CATEGORY,
    ) -> Habit:
        """
        Create a habit, append it and save.
        Raises HabitValidationError for an empty name or a target below 1.
        """
        name = (name or "").strip()
        if not name:
            raise HabitValidationError("Habit name cannot be empty.")
        if isinstance(target_frequency, bool) or not isinstance(target_frequency, int):
            raise HabitValidationError("Target per week must be a whole number.")
        if target_frequency < 1:
            raise HabitValidationError("Target per week must be at least 1.")

        habit = Habit(
            name=name,
            target_frequency=target_frequency,
            category=(category or "").strip() or DEFAULT_CATEGORY,
        )
        self.habits.append(habit)
        logger.info("Added habit %s (%r, target %d/week)", habit.id, habit.name, target_frequency)
        self.save()
        return habit

    def find_habit(self, ref: HabitRef) -> Optional[Habit]:
        """Resolve a 0-based position (int) or a habit id (anything else)."""
        if isinstance(ref, int) and not isinstance(ref, bool):
            if 0 <= ref < len(self.habits):
                return self.habits[ref]
            return None
        for habit in self.habits:
            if str(habit.id) == str(ref):
                return habit
        return None

    def complete_habit(self, ref: HabitRef, today: Optional[date] = None) -> CompletionResult:
        habit = self.find_habit(ref)
        if habit is None:
            logger.info("Complete requested for unknown habit %r", ref)
            return CompletionResult(CompletionStatus.NOT_FOUND)

        today = today or date.today()
        recorded = habit.mark_complete(today)
        self.save()
        if not recorded:
            return CompletionResult(CompletionStatus.ALREADY_DONE, habit)
        logger.info("Habit %s completed for %s", habit.id, today.isoformat())
        return CompletionResult(CompletionStatus.RECORDED, habit)

    def delete_habit(self, ref: HabitRef) -> bool:
        habit = self.find_habit(ref)
        if habit is None:
            return False
        self.habits.remove(habit)
        logger.info("Deleted habit %s (%r)", habit.id, habit.name)
        self.save()
        return True

    def clear_all(self, now: Optional[datetime] = None) -> None:
        self.habits = []
        self.user = UserProfile(
            name=self.user.name,
            created_at=now or datetime.now().replace(microsecond=0),
        )
        logger.info("Cleared all habits")
        self.save()

    def seed_demo_habits(self) -> bool:
        """Add a few sample habits when there are none yet."""
        if self.habits:
            return False
        for name, target, category in DEMO_HABITS:
            self.add_habit(name, target, category)
        return True

    # -------------------------
    # Views
    # -------------------------
    def habit_names(self) -> List[str]:
        return [h.name for h in self.habits]

    def filtered_habits(
        self, habit_filter: Union[HabitFilter, str] = HabitFilter.ALL, today: Optional[date] = None
    ) -> FilterResult:
        habit_filter = HabitFilter(habit_filter)
        today = today or date.today()

        if habit_filter is HabitFilter.ALL:
            return FilterResult(list(self.habits))
        if habit_filter is HabitFilter.ACTIVE:
            return FilterResult([h for h in self.habits if not h.is_on_track_this_week(today)])

        on_track = [h for h in self.habits if h.is_on_track_this_week(today)]
        if on_track:
            return FilterResult(on_track)
        partial = [h for h in self.habits if h.weekly_completions(today)]
        if partial:
            return FilterResult(partial, FilterOutcome.PARTIAL_PROGRESS)
        return FilterResult([], FilterOutcome.NOTHING_TO_SHOW)

    def summary_stats(
        self, today: Optional[date] = None, now: Optional[datetime] = None
    ) -> SummaryStats:
        today = today or date.today()
        total = len(self.habits)
        completed = sum(1 for h in self.habits if h.is_on_track_this_week(today))

        highest = None
        if self.habits:
            top = max(h.target_frequency for h in self.habits)
            highest = next(h for h in self.habits if h.target_frequency == top)

        return SummaryStats(
            total=total,
            completed_this_week=completed,
            active=total - completed,
            days_joined=self.user.days_joined(now),
            habit_names=self.habit_names(),
            total_targets=sum(h.target_frequency for h in self.habits),
            highest_target=highest,
        )

    # -------------------------
    # Persistence
    # -------------------------
    def to_document(self) -> Dict[str, Any]:
        return {
            "user": self.user.to_dict(),
            "habits": [h.to_dict() for h in self.habits],
        }

    def from_document(self, document: Dict[str, Any]) -> None:
        """Replace profile and habits from a stored document.

        Everything is parsed before anything is assigned, so a malformed
        document leaves the tracker untouched.
        """
        user_data = document.get("user") or {}
        if not isinstance(user_data, dict):
            raise TypeError("'user' must be an object")
        raw_habits = document.get("habits") or []
        if not isinstance(raw_habits, list):
            raise TypeError("'habits' must be a list")

        name = user_data.get("name") or self.user.name
        created_at = (
            parse_timestamp(user_data["createdAt"])
            if user_data.get("createdAt")
            else self.user.created_at
        )
        habits = [Habit.from_dict(h) for h in raw_habits]
        seen = set()
        for habit in habits:
            key = str(habit.id)
            if key in seen:
                raise ValueError(f"Duplicate habit id {habit.id!r}")
            seen.add(key)

        self.user = UserProfile(name=str(name), created_at=created_at)
        self.habits = habits

    def load(self) -> bool:
        """Read the data file into the tracker.

        A missing file is created from the current state. Returns False when the
        file exists but could not be used; the in-memory state is then unchanged.
        """
        if not self.storage.exists():
            logger.info("No data file at %s, creating one", self.storage.storage_file)
            self.save()
            return True
        try:
            self.from_document(self.storage.read())
        except (StorageError, ValueError, TypeError, KeyError) as e:
            logger.error("Failed to load habit data: %s", e)
            return False
        logger.info("Loaded %d habits from %s", len(self.habits), self.storage.storage_file)
        return True

    def save(self) -> bool:
        try:
            self.storage.write(self.to_document())
        except StorageError as e:
            logger.error("Failed to save habit data: %s", e)
            return False
        return True

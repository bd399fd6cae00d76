# habit.py
import uuid
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Any, Dict, Iterable, List, Optional, Set, Union

DAYS_IN_WEEK = 7
DEFAULT_TARGET_FREQUENCY = 7
DEFAULT_CATEGORY = "General"
DEFAULT_USER_NAME = "User"

STATUS_ON_TRACK = "on track"
STATUS_ACTIVE = "active"


def _now() -> datetime:
    return datetime.now().replace(microsecond=0)


def parse_timestamp(value: Any) -> datetime:
    """Parse an ISO-8601 timestamp from the data file (a trailing 'Z' is accepted)."""
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str) or not value:
        raise ValueError(f"Invalid timestamp: {value!r}")
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def _parse_completions(raw: Optional[Iterable[Any]]) -> Set[date]:
    if raw is None:
        return set()
    if isinstance(raw, (str, bytes, dict)):
        raise TypeError("completions must be a list of YYYY-MM-DD dates")
    dates = set()
    for item in raw:
        if isinstance(item, datetime):
            dates.add(item.date())
        elif isinstance(item, date):
            dates.add(item)
        else:
            dates.add(date.fromisoformat(str(item)[:10]))
    return dates


@dataclass
class Habit:
    """A recurring activity with a weekly completion target."""

    name: str
    target_frequency: int = DEFAULT_TARGET_FREQUENCY
    completions: Set[date] = field(default_factory=set)
    category: str = DEFAULT_CATEGORY
    id: Union[int, str] = field(default_factory=lambda: uuid.uuid4().hex)
    created_at: datetime = field(default_factory=_now)

    def __post_init__(self):
        # duplicates collapse here, whatever was handed in
        self.completions = _parse_completions(self.completions)
        if not self.category:
            self.category = DEFAULT_CATEGORY

    # ---------- mutation ----------
    def mark_complete(self, today: date) -> bool:
        """Record a completion for ``today``. Returns False if it was already recorded."""
        if today in self.completions:
            return False
        self.completions.add(today)
        return True

    # ---------- derived queries ----------
    def weekly_completions(self, today: date) -> List[date]:
        """Completions inside the 7-day window ending at ``today`` (inclusive)."""
        window_start = today - timedelta(days=DAYS_IN_WEEK - 1)
        # tuple() snapshots the set; the reminder thread reads while the menu adds
        return sorted(d for d in tuple(self.completions) if window_start <= d <= today)

    def is_on_track_this_week(self, today: date) -> bool:
        return len(self.weekly_completions(today)) >= self.target_frequency

    def progress_percentage(self, today: date) -> int:
        if self.target_frequency <= 0:
            return 0
        done = len(self.weekly_completions(today))
        pct = (100 * done) // self.target_frequency
        return min(100, max(0, pct))

    def status(self, today: date) -> str:
        return STATUS_ON_TRACK if self.is_on_track_this_week(today) else STATUS_ACTIVE

    def current_streak(self, today: date) -> int:
        """Consecutive completed days walking back from ``today``; 0 if today is missing."""
        streak = 0
        expected = today
        for completed_on in sorted(tuple(self.completions), reverse=True):
            if completed_on > today:
                continue
            if completed_on != expected:
                break
            streak += 1
            expected -= timedelta(days=1)
        return streak

    # ---------- document conversion ----------
    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "targetFrequency": self.target_frequency,
            "completions": [d.isoformat() for d in sorted(self.completions)],
            "createdAt": self.created_at.isoformat(),
            "category": self.category,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Habit":
        """Build a Habit from a stored document entry.

        Raises ValueError / TypeError / KeyError when the entry is malformed.
        """
        if not isinstance(data, dict):
            raise TypeError(f"Habit entry must be an object, got {type(data).__name__}")

        target = data.get("targetFrequency", DEFAULT_TARGET_FREQUENCY)
        if isinstance(target, bool) or not isinstance(target, int):
            raise ValueError(f"targetFrequency must be a whole number, got {target!r}")
        if target < 1:
            raise ValueError(f"targetFrequency must be at least 1, got {target}")

        name = str(data["name"]).strip()
        if not name:
            raise ValueError("Habit name cannot be empty")

        kwargs: Dict[str, Any] = {
            "name": name,
            "target_frequency": target,
            "completions": _parse_completions(data.get("completions")),
            "category": data.get("category") or DEFAULT_CATEGORY,
        }
        if data.get("id") is not None:
            kwargs["id"] = data["id"]
        if data.get("createdAt"):
            kwargs["created_at"] = parse_timestamp(data["createdAt"])
        return cls(**kwargs)


@dataclass
class UserProfile:
    name: str = DEFAULT_USER_NAME
    created_at: datetime = field(default_factory=_now)

    def update_name(self, new_name: Optional[str]) -> None:
        if new_name and new_name.strip():
            self.name = new_name.strip()

    def days_joined(self, now: Optional[datetime] = None) -> int:
        """Whole days since the profile was created, never negative."""
        if now is None:
            now = datetime.now(self.created_at.tzinfo)
        elif (now.tzinfo is None) != (self.created_at.tzinfo is None):
            # stored timestamps may be UTC ('Z') while the clock is naive local time
            now = now.replace(tzinfo=self.created_at.tzinfo)
        return max(0, (now - self.created_at).days)

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "createdAt": self.created_at.isoformat()}

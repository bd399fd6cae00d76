from datetime import date

from habit import DEFAULT_CATEGORY, DEFAULT_TARGET_FREQUENCY
from habit_tracker import (
    CompletionStatus,
    FilterOutcome,
    HabitFilter,
    HabitTracker,
    HabitValidationError,
)

PROGRESS_BAR_WIDTH = 10
LINE = "=" * 50


def progress_bar(percentage, width=PROGRESS_BAR_WIDTH):
    """ASCII bar like '███░░░░░░░ 30%'."""
    filled = round(percentage / 100 * width)
    filled = min(width, max(0, filled))
    return "█" * filled + "░" * (width - filled) + f" {percentage}%"


class HabitManager:
    """Menu-driven shell around a HabitTracker."""

    MENU = (
        ("1", "View profile"),
        ("2", "View all habits"),
        ("3", "View active habits"),
        ("4", "View completed habits"),
        ("5", "Add a new habit"),
        ("6", "Mark habit complete (today)"),
        ("7", "Delete habit"),
        ("8", "View statistics"),
        ("9", "Loop demo"),
        ("0", "Exit"),
    )

    def __init__(self, tracker: HabitTracker, input_func=input, output=print):
        self.tracker = tracker
        self.input = input_func
        self.print = output

    def ask(self, prompt):
        return self.input(prompt).strip()

    # ---------- views ----------
    def view_profile(self):
        today = date.today()
        user = self.tracker.user
        stats = self.tracker.summary_stats(today=today)
        self.print(LINE)
        self.print("PROFILE")
        self.print(LINE)
        self.print(f"Name             : {user.name}")
        self.print(f"Joined           : {user.created_at.date().isoformat()} ({stats.days_joined} days)")
        self.print(f"Total habits     : {stats.total}")
        self.print(f"On track this week: {stats.completed_this_week}")
        self.print(f"Active this week : {stats.active}")
        self.print(LINE + "\n")

    def print_habits(self, habits, today):
        for idx, h in enumerate(habits, start=1):
            done = len(h.weekly_completions(today))
            pct = h.progress_percentage(today)
            self.print(f"{idx}. [{h.status(today)}] {h.name}")
            self.print(f"   Target: {h.target_frequency}x/week  | Category: {h.category}")
            self.print(f"   Progress: {done}/{h.target_frequency} ({pct}%)")
            self.print(f"   Progress Bar: {progress_bar(pct)}")
            self.print(f"   Streak: {self._days(h.current_streak(today))}")
            self.print("")

    def view_habits(self, habit_filter=HabitFilter.ALL, today=None):
        today = today or date.today()
        result = self.tracker.filtered_habits(habit_filter, today=today)

        if result.outcome is FilterOutcome.NOTHING_TO_SHOW:
            self.print("No habit has been completed or has progress this week yet.")
            return result
        if result.outcome is FilterOutcome.PARTIAL_PROGRESS:
            self.print("No habit reached its target this week. "
                       "Showing habits with some progress this week:\n")
        if not result.habits:
            self.print("No habits to show yet.")
            return result

        self.print_habits(result.habits, today)
        return result

    def view_stats(self):
        stats = self.tracker.summary_stats(today=date.today())
        highest = stats.highest_target
        self.print("--- Statistics ---")
        self.print(f"Total habits       : {stats.total}")
        self.print(f"On track this week : {stats.completed_this_week}")
        self.print(f"Active this week   : {stats.active}")
        self.print(f"Habit names        : {', '.join(stats.habit_names) or '-'}")
        self.print(f"Total target/week  : {stats.total_targets}")
        self.print("Habit with highest target: "
                   + (f"{highest.name} ({highest.target_frequency})" if highest else "-"))
        self.print("--- End Statistics ---\n")

    def loop_demo(self):
        today = date.today()
        habits = self.tracker.habits

        self.print("--- While Loop Demo ---")
        i = 0
        while i < len(habits):
            self.print(f"{i + 1}. {habits[i].name} - {habits[i].status(today)}")
            i += 1
        self.print("--- End While Demo ---\n")

        self.print("--- For Loop Demo ---")
        for i in range(len(habits)):
            self.print(f"{i + 1}. {habits[i].name} - Target {habits[i].target_frequency}/week")
        self.print("--- End For Demo ---\n")

    # ---------- actions ----------
    def add_habit(self):
        name = self.ask("Habit name: ")
        target_raw = self.ask("Target per week (number): ")
        category = self.ask("Category (optional): ") or DEFAULT_CATEGORY

        if not name:
            self.print("❌ Name cannot be empty.")
            return None

        try:
            target = int(target_raw)
        except ValueError:
            target = DEFAULT_TARGET_FREQUENCY
        if target < 1:
            target = DEFAULT_TARGET_FREQUENCY

        try:
            habit = self.tracker.add_habit(name, target, category)
        except HabitValidationError as e:
            self.print(f"❌ {e}")
            return None
        self.print(f"✅ Added habit: {habit.name} (Target {habit.target_frequency}/week)")
        return habit

    def _pick_position(self, prompt):
        """Show all habits and read a 1-based number; returns a 0-based position or None."""
        if not self.tracker.habits:
            self.print("No habits yet. Add one first.")
            return None
        self.view_habits(HabitFilter.ALL)
        raw = self.ask(prompt)
        try:
            return int(raw) - 1
        except ValueError:
            self.print("❌ Please enter a habit number.")
            return None

    def mark_done(self):
        position = self._pick_position("Number of the habit to mark complete today: ")
        if position is None:
            return None

        result = self.tracker.complete_habit(position, today=date.today())
        if result.status is CompletionStatus.NOT_FOUND:
            self.print("❌ Habit not found.")
        elif result.status is CompletionStatus.ALREADY_DONE:
            self.print(f"⚠️ '{result.habit.name}' is already marked complete for today.")
        else:
            self.print(f"✅ '{result.habit.name}' marked complete for today!")
        return result

    def delete_habit(self):
        position = self._pick_position("Number of the habit to delete: ")
        if position is None:
            return False

        confirmed = self.ask("Are you sure? (y/n): ").lower()
        if confirmed != "y":
            self.print("Cancelled.")
            return False

        deleted = self.tracker.delete_habit(position)
        self.print("✅ Habit deleted." if deleted else "❌ Could not delete (invalid number).")
        return deleted

    # ---------- menu loop ----------
    def show_menu(self):
        actions = {
            "1": self.view_profile,
            "2": lambda: self.view_habits(HabitFilter.ALL),
            "3": lambda: self.view_habits(HabitFilter.ACTIVE),
            "4": lambda: self.view_habits(HabitFilter.COMPLETED),
            "5": self.add_habit,
            "6": self.mark_done,
            "7": self.delete_habit,
            "8": self.view_stats,
            "9": self.loop_demo,
        }

        while True:
            self.print(LINE)
            self.print("🌱 HABIT TRACKER - MAIN MENU")
            self.print(LINE)
            for key, label in self.MENU:
                self.print(f"{key}. {label}")
            self.print(LINE)

            try:
                choice = self.ask("Choose an option (0-9): ")
                if choice == "0":
                    break
                action = actions.get(choice)
                if action is None:
                    self.print("Invalid choice. Enter a number from 0 to 9.")
                else:
                    action()
                self.ask("\nPress Enter to return to the menu...")
            except (EOFError, KeyboardInterrupt):
                self.print("")
                break

        self.tracker.save()
        self.print("Goodbye! See you tomorrow.")

    @staticmethod
    def _days(n):
        return f"{n} day" if n == 1 else f"{n} days"

import argparse
import logging

from config import load_settings
from habit import UserProfile
from habit_manager import HabitManager
from habit_tracker import HabitTracker
from local_storage import LocalHabitStorage
from logger import setup_logger
from reminder import HabitReminder

logger = logging.getLogger(__name__)


def build_parser():
    parser = argparse.ArgumentParser(description="Track your habits from the terminal.")
    parser.add_argument("--data-file", help="Path of the JSON data file (overrides HABIT_DATA_FILE)")
    parser.add_argument("--no-reminder", action="store_true", help="Do not show periodic reminders")
    parser.add_argument("--no-demo", action="store_true", help="Do not add sample habits to an empty tracker")
    parser.add_argument("--reset", action="store_true", help="Delete all habits and restart the profile")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    settings = load_settings()
    setup_logger(settings.log_file, settings.log_level)

    storage = LocalHabitStorage(args.data_file or settings.data_file)
    tracker = HabitTracker(storage, user=UserProfile(name=settings.user_name))
    loaded = tracker.load()

    print("=" * 50)
    print("      WELCOME TO HABIT TRACKER CLI")
    print("=" * 50 + "\n")
    if not loaded:
        print(f"⚠️ Could not read {storage.storage_file}; starting with an empty session.")

    if args.reset:
        tracker.clear_all()
        print("All habits cleared.")

    # never seed over a data file we failed to read
    if loaded and settings.demo_data and not args.no_demo and tracker.seed_demo_habits():
        print("Demo habits added (your list was empty).")

    reminder = HabitReminder(tracker, interval_seconds=settings.reminder_interval)
    if not args.no_reminder:
        reminder.start()
    try:
        HabitManager(tracker).show_menu()
    finally:
        reminder.stop()
        logger.info("Session ended")


if __name__ == "__main__":
    main()

import logging

import pytest

from logger import setup_logger


@pytest.fixture
def root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers = handlers
    root.setLevel(level)


def test_setup_logger_writes_to_file(tmp_path, root_logger):
    log_file = tmp_path / "logs" / "habit_tracker.log"

    setup_logger(log_file, "DEBUG")
    logging.getLogger("habit_tracker").info("Added habit %s", "abc")
    for handler in root_logger.handlers:
        handler.flush()

    assert root_logger.level == logging.DEBUG
    assert "[INFO] habit_tracker: Added habit abc" in log_file.read_text(encoding="utf-8")
    assert logging.getLogger("apscheduler").level == logging.WARNING

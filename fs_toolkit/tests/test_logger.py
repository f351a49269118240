from __future__ import annotations

import io
import json
import logging
from pathlib import Path

from fs_toolkit.config import WalkRequest
from fs_toolkit.files import copy_file_safe
from fs_toolkit.logger import configure_logging, get_logger, log_event
from fs_toolkit.walker import read_directory


def _read_events(log_file: Path, logger: logging.Logger) -> list[dict]:
    for handler in logger.handlers:
        handler.flush()
    lines = log_file.read_text(encoding="utf-8").strip().splitlines()
    return [json.loads(line) for line in lines]


def test_log_event_sanitizes_home_directory(tmp_path: Path) -> None:
    log_file = tmp_path / "fs.log"
    logger = configure_logging(log_file, level=logging.INFO)
    sensitive_path = Path.home() / "Documents" / "secret.txt"
    log_event(
        logger,
        level=logging.INFO,
        action="test",
        message="Processing",
        extra={"path": str(sensitive_path)},
    )
    payload = _read_events(log_file, logger)[-1]
    assert payload["path"].startswith("~/")
    assert payload["action"] == "test"
    assert payload["level"] == "INFO"


def test_safe_copy_emits_structured_event(tmp_path: Path) -> None:
    log_file = tmp_path / "logs" / "fs.log"
    logger = configure_logging(log_file, level=logging.DEBUG)
    source = tmp_path / "a.txt"
    source.write_text("data", encoding="utf-8")
    (tmp_path / "b.txt").touch()

    result = copy_file_safe(source, tmp_path / "b.txt", 3)

    events = _read_events(log_file, logger)
    actions = [event["action"] for event in events]
    assert "probe.renamed" in actions
    assert actions[-1] == "copy.safe"
    assert events[-1]["destination"].endswith(result.name)


def test_debug_events_are_dropped_below_level(tmp_path: Path) -> None:
    log_file = tmp_path / "quiet.log"
    logger = configure_logging(log_file, level=logging.WARNING)
    log_event(logger, level=logging.DEBUG, action="noise", message="ignored")
    log_event(logger, level=logging.WARNING, action="kept", message="kept")

    assert [event["action"] for event in _read_events(log_file, logger)] == ["kept"]


def test_copy_and_walk_events_carry_size_and_duration(tmp_path: Path) -> None:
    log_file = tmp_path / "sizes.log"
    logger = configure_logging(log_file, level=logging.DEBUG)
    source = tmp_path / "data" / "a.txt"
    source.parent.mkdir()
    source.write_text("12345", encoding="utf-8")

    copy_file_safe(source, tmp_path / "a.txt", 0)
    read_directory(source.parent, WalkRequest())

    events = {event["action"]: event for event in _read_events(log_file, logger)}
    assert events["copy.safe"]["bytes"] == 5
    assert events["walk.done"]["files"] == 1
    assert events["walk.done"]["ms"] >= 0


def test_reconfiguring_replaces_handler_and_resets_child_levels() -> None:
    get_logger("walker").setLevel(logging.ERROR)
    first = io.StringIO()
    second = io.StringIO()

    configure_logging(level=logging.INFO, stream=first)
    logger = configure_logging(level=logging.INFO, stream=second)
    log_event(get_logger("walker"), level=logging.INFO, action="walk.note", message="hello")

    assert len(logger.handlers) == 1
    assert first.getvalue() == ""
    assert json.loads(second.getvalue().strip())["action"] == "walk.note"

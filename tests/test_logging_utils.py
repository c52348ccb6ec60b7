import json
import logging
from pathlib import Path

from football_news.config import LoggingConfig
from football_news.logging_utils import LOGGER_NAME, get_logger, log_event, setup_logging


def test_jsonl_file_log_includes_event_fields(tmp_path: Path) -> None:
    cfg = LoggingConfig(level="debug", console=False, file=True, format="jsonl")
    logger = setup_logging(cfg, log_dir=tmp_path)
    try:
        log_event(get_logger("fetch"), "Feed fetch failed", level=logging.WARNING, event="fetch_failed", attempts=2)
        for handler in logger.handlers:
            handler.flush()

        [line] = (tmp_path / cfg.filename).read_text(encoding="utf-8").splitlines()
        payload = json.loads(line)
    finally:
        for handler in logger.handlers:
            handler.close()
        logger.handlers = []

    assert payload["level"] == "WARNING"
    assert payload["logger"] == f"{LOGGER_NAME}.fetch"
    assert payload["message"] == "Feed fetch failed"
    assert payload["event"] == "fetch_failed"
    assert payload["attempts"] == 2
    assert "msg" not in payload and "args" not in payload and "lineno" not in payload


def test_unknown_level_defaults_to_info(tmp_path: Path) -> None:
    logger = setup_logging(LoggingConfig(level="chatty", console=False), log_dir=tmp_path)

    assert logger.level == logging.INFO

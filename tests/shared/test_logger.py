"""
🧪 test_logger.py — ініціалізація логування

Перевіряє:
- JSON-файл містить контекст lookup (sku, url, status_code)
- Розділ `logging` конфігу керує хендлерами та приглушенням
- Повторна ініціалізація не дублює хендлери
"""

import json
import logging
from logging.handlers import TimedRotatingFileHandler

import pytest

from catalog_bridge.shared.utils.logger import (
    LOG_NAME,
    LoggingConfig,
    get_logger,
    init_logging,
    init_logging_from_config,
)


@pytest.fixture(autouse=True)
def cleanup_handlers():
    yield
    root = logging.getLogger(LOG_NAME)
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()


def test_json_file_contains_lookup_context(tmp_path):
    log_file = tmp_path / "logs" / "bridge.log"
    root = init_logging(LoggingConfig(console=False, json=True, file=str(log_file)))

    get_logger("resolver").info(
        "resolved",
        extra={"sku": "CO-T309012", "url": "https://tiger.nl/x/", "status_code": 200},
    )
    for handler in root.handlers:
        handler.flush()

    records = [json.loads(line) for line in log_file.read_text(encoding="utf-8").splitlines()]
    resolved = next(record for record in records if record["message"] == "resolved")
    assert resolved["sku"] == "CO-T309012"
    assert resolved["url"] == "https://tiger.nl/x/"
    assert resolved["status_code"] == 200
    assert resolved["name"] == f"{LOG_NAME}.resolver"


def test_config_section_drives_handlers_and_suppress(tmp_path):
    root = init_logging_from_config(
        {"level": "debug", "file": str(tmp_path / "bridge.log"), "console": False, "suppress": {"httpx": "ERROR"}}
    )

    assert root.level == logging.DEBUG
    assert [type(handler) for handler in root.handlers] == [TimedRotatingFileHandler]
    assert logging.getLogger("httpx").level == logging.ERROR
    assert logging.getLogger("httpcore").level == logging.WARNING


def test_reinit_replaces_handlers():
    init_logging(LoggingConfig(console=True, file=None))
    root = init_logging(LoggingConfig(console=True, file=None))

    assert len(root.handlers) == 1


def test_from_mapping_defaults():
    cfg = LoggingConfig.from_mapping(None)

    assert cfg.level == "INFO"
    assert cfg.file == "logs/catalog_bridge.log"
    assert cfg.suppress["httpx"] == "WARNING"


def test_get_logger_prefix():
    assert get_logger().name == LOG_NAME
    assert get_logger("cache").name == f"{LOG_NAME}.cache"

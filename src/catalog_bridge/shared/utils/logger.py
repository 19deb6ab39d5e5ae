# 📜 catalog_bridge/shared/utils/logger.py
"""
📜 Схема логування рушія зіставлення каталогів.

🔹 Налаштування беруться з розділу `logging` конфігурації (див. `build_resolver`).
🔹 Консоль — короткий формат; файл (опційно) — текст або JSON з полями lookup (sku, url, status_code…).
🔹 HTTP-бібліотеки (httpx/httpcore) приглушені, щоб не дублювати логи транспорту.
"""
from __future__ import annotations

# 🔠 Системні імпорти
import json									# 📦 JSON-рядки логів
import logging									# 🪵 Логери Python
import sys									# 🧵 stdout
import threading								# 🔒 Захист ініціалізації
from dataclasses import dataclass, field					# 🧱 DTO-конфіг логування
from logging.handlers import TimedRotatingFileHandler			# 📁 Добова ротація файлу
from pathlib import Path								# 📂 Каталог для лог-файлу
from typing import Any, Dict, Mapping, Optional, Tuple		# 🧰 Типи

LOG_NAME: str = "catalog_bridge"					# 🏷️ Базовий префікс логерів
FILE_FORMAT: str = "%(asctime)s [%(levelname)s] %(name)s:%(lineno)d - %(message)s"
CONSOLE_FORMAT: str = "[%(levelname).1s] %(message)s"
DEFAULT_SUPPRESS: Dict[str, str] = {"httpx": "WARNING", "httpcore": "WARNING"}

# 🔎 Поля, які модулі рушія передають через `extra=` (див. AppError.to_log_extra)
CONTEXT_FIELDS: Tuple[str, ...] = (
    "sku",
    "url",
    "status_code",
    "error_code",
    "details",
    "deadline_s",
)

_lock = threading.Lock()


@dataclass
class LoggingConfig:
    """Налаштування логування; `file=None` вимикає файловий вивід."""

    level: str = "INFO"
    console: bool = True
    json: bool = False
    file: Optional[str] = "logs/catalog_bridge.log"
    backup_count: int = 7							# ♻️ Скільки добових файлів зберігати
    suppress: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_SUPPRESS))

    @classmethod
    def from_mapping(cls, node: Optional[Mapping[str, Any]]) -> "LoggingConfig":
        """🧾 Будує конфіг з розділу `logging` (відсутні ключі → дефолти)."""
        node = node or {}
        defaults = cls()
        return cls(
            level=str(node.get("level") or defaults.level).upper(),
            console=bool(node.get("console", defaults.console)),
            json=bool(node.get("json", defaults.json)),
            file=node.get("file", defaults.file) or None,
            backup_count=int(node.get("backup_count", defaults.backup_count)),
            suppress={**DEFAULT_SUPPRESS, **(node.get("suppress") or {})},
        )


class JsonFormatter(logging.Formatter):
    """Один JSON-обʼєкт на рядок: базові поля + контекст lookup."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "time": self.formatTime(record, datefmt="%Y-%m-%d %H:%M:%S"),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
        }
        for key in CONTEXT_FIELDS:
            if hasattr(record, key):
                payload[key] = getattr(record, key)
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def _level(value: str) -> int:
    return getattr(logging, str(value).upper(), logging.INFO)


def init_logging(cfg: Optional[LoggingConfig] = None) -> logging.Logger:
    """Перевстановлює хендлери логера `LOG_NAME` за конфігом."""
    cfg = cfg or LoggingConfig()
    with _lock:
        root_logger = logging.getLogger(LOG_NAME)
        root_logger.setLevel(_level(cfg.level))
        for handler in list(root_logger.handlers):			# 🧹 Повторний виклик не дублює вивід
            root_logger.removeHandler(handler)
            handler.close()

        if cfg.console:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
            root_logger.addHandler(console_handler)

        if cfg.file:
            Path(cfg.file).parent.mkdir(parents=True, exist_ok=True)
            file_handler = TimedRotatingFileHandler(
                cfg.file, when="midnight", backupCount=cfg.backup_count, encoding="utf-8"
            )
            file_handler.setFormatter(JsonFormatter() if cfg.json else logging.Formatter(FILE_FORMAT))
            root_logger.addHandler(file_handler)

        for name, level in cfg.suppress.items():
            logging.getLogger(name).setLevel(_level(level))

        root_logger.info(
            "✅ Logging initialized | level=%s console=%s json=%s file=%s",
            cfg.level,
            "ON" if cfg.console else "OFF",
            "ON" if cfg.json else "OFF",
            cfg.file or "-",
        )
        return root_logger


def init_logging_from_config(node: Optional[Mapping[str, Any]]) -> logging.Logger:
    """Ініціалізує логування з розділу `logging` ConfigService."""
    return init_logging(LoggingConfig.from_mapping(node))


def get_logger(suffix: Optional[str] = None) -> logging.Logger:
    """Дочірній логер із префіксом `LOG_NAME`."""
    return logging.getLogger(LOG_NAME if not suffix else f"{LOG_NAME}.{suffix}")

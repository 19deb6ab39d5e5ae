# ⚙️ config_service.py
"""
⚙️ config_service.py — Сервіс для доступу до статичної конфігурації рушія.

🔹 Клас `ConfigService`:
- Завантажує конфігурацію з .env та config.yaml.
- Надає єдиний метод .get() для доступу до будь-якого параметра за крапковим ключем.
- Працює як Singleton (тести скидають його через `reset()`).
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
import yaml                                  # 📦 YAML-парсинг
from dotenv import load_dotenv              # 🔐 Завантаження змінних із .env

# 🔠 Системні імпорти
import logging                              # 🧾 Логування
import os                                   # 📁 Доступ до змінних середовища
from pathlib import Path                    # 📁 Побудова шляху до файлів
from typing import Any, Callable, Dict, Optional, Union  # 🧩 Типізація

# 🧩 Внутрішні модулі проєкту
from catalog_bridge.shared.utils.logger import LOG_NAME  # 🏷️ Базове імʼя логера

logger = logging.getLogger(f"{LOG_NAME}.config")

DEFAULT_CONFIG_PATH = Path(__file__).parent / "config.yaml"  # 📘 Дефолтний YAML поруч із модулем
DEFAULT_RATE_LIMIT_MS = 150                 # 🚦 Толерантність зовнішнього сайту

ENV_KEYS: Dict[str, str] = {
    "tiger_nl.rate_limit_ms": "TIGER_RATE_LIMIT_MS",
    "tiger_nl.base_url": "TIGER_BASE_URL",
    "cache.path": "TIGER_CACHE_PATH",
}                                           # 🔐 Крапковий ключ → змінна середовища


# ============================
# ⚙️ СЕРВІС ДОСТУПУ ДО КОНФІГІВ
# ============================
class ConfigService:
    """
    ⚙️ Надає доступ до всіх статичних конфігураційних параметрів проєкту.
    Працює як Singleton — конфігурація зчитується лише один раз.
    """

    _instance: Optional["ConfigService"] = None  # 🧩 Singleton-екземпляр
    _config: Dict[str, Any]                  # 📦 Обʼєднана конфігурація зі всіх джерел

    def __new__(cls, config_path: Optional[Union[str, Path]] = None) -> "ConfigService":
        if cls._instance is None:
            instance = super().__new__(cls)
            instance._config = {}
            instance._load_all_configs(Path(config_path) if config_path else DEFAULT_CONFIG_PATH)
            cls._instance = instance
            logger.debug("🔄 Singleton ConfigService створено і конфігурація завантажена")
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """♻️ Скидає singleton (для тестів та перезавантаження)."""
        cls._instance = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ConfigService":
        """🧪 Будує незалежний екземпляр зі словника (поза singleton)."""
        instance = super().__new__(cls)
        instance._config = {}
        instance._deep_update(instance._config, data or {})
        return instance

    def _load_all_configs(self, yaml_path: Path) -> None:
        """
        📥 Завантажує всі джерела конфігурації в один словник.
        Пріоритет: config.yaml → змінні середовища (.env) перекривають YAML.
        """
        try:
            with open(yaml_path, "r", encoding="utf-8") as f:
                self._deep_update(self._config, yaml.safe_load(f) or {})
        except (FileNotFoundError, yaml.YAMLError) as e:
            logger.warning("⚠️ Не вдалося завантажити %s: %s", yaml_path, e)

        load_dotenv()                        # 🔐 Ініціалізує змінні середовища з файлу .env
        env_vars = {key: os.getenv(env) for key, env in ENV_KEYS.items() if os.getenv(env)}
        self._deep_update(self._config, self._unflatten_dict(env_vars))

        logger.info("✅ Конфігурацію успішно завантажено.")

    def get(self, key: str, default: Any = None, cast: Optional[Callable[[Any], Any]] = None) -> Any:
        """
        🔑 Отримує значення конфігурації за ключем (наприклад: 'tiger_nl.rate_limit_ms').

        Args:
            key (str): Ключ у форматі з крапкою.
            default (Any): Значення за замовчуванням, якщо ключ не знайдено.
            cast: Опційне приведення типу; при невдачі повертається default.
        """
        value: Any = self._config
        for part in key.split("."):
            if isinstance(value, dict) and part in value:
                value = value[part]
            else:
                return default
        if cast is None or value is None:
            return value
        try:
            return cast(value)
        except (TypeError, ValueError):
            logger.warning("⚠️ Ключ '%s' має некоректне значення %r, беремо дефолт.", key, value)
            return default

    # ===============================
    # 🚦 ПАРАМЕТРИ РУШІЯ
    # ===============================
    def rate_limit_ms(self) -> int:
        """🚦 Єдиний зовнішньо налаштовуваний параметр рушія (мс між запитами)."""
        value = self.get("tiger_nl.rate_limit_ms", DEFAULT_RATE_LIMIT_MS, cast=int)
        if value is None or value <= 0:
            return DEFAULT_RATE_LIMIT_MS
        return int(value)

    # ===============================
    # 🔧 ДОПОМІЖНІ МЕТОДИ ЗЛИТТЯ КОНФІГІВ
    # ===============================
    @staticmethod
    def _unflatten_dict(d: Dict[str, Any]) -> Dict[str, Any]:
        """
        🔁 Перетворює ключі з крапками в ієрархічний словник.
        'tiger_nl.base_url' → {'tiger_nl': {'base_url': ...}}
        """
        result: Dict[str, Any] = {}
        for key, value in d.items():
            parts = key.split(".")
            d_ref = result
            for part in parts[:-1]:
                d_ref = d_ref.setdefault(part, {})
            d_ref[parts[-1]] = value
        return result

    def _deep_update(self, source: Dict[str, Any], overrides: Dict[str, Any]) -> None:
        """🔁 Рекурсивно обʼєднує два словника (оновлення значень)."""
        for key, value in overrides.items():
            if isinstance(value, dict) and isinstance(source.get(key), dict):
                self._deep_update(source[key], value)
            else:
                source[key] = value

# ⚙️ catalog_bridge/config/__init__.py
"""
⚙️ Пакет Config — централізована конфігурація та збирання рушія.

- `ConfigService` читає config.yaml та .env.
- `build_resolver` створює явні екземпляри транспорту, кешу та резолвера.
"""

from .config_service import DEFAULT_RATE_LIMIT_MS, ConfigService
from .container import build_resolver

__all__ = [
    "ConfigService",
    "DEFAULT_RATE_LIMIT_MS",
    "build_resolver",
]

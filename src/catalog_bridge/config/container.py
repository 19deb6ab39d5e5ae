# 🧩 catalog_bridge/config/container.py
"""
🧩 Збирання рушія з конфігурації: явні екземпляри замість глобального стану.

Кожен резолвер отримує власний кеш і транспорт, тож тести та паралельні прогони не ділять стан.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
import httpx													# 🌐 Опційний транспорт для тестів

# 🔠 Системні імпорти
import logging													# 🧾 Логування збирання
from datetime import timedelta									# ⏳ TTL кешу
from typing import Optional										# 🧰 Типи

# 🧩 Внутрішні модулі проєкту
from catalog_bridge.config.config_service import ConfigService	# ⚙️ Конфігурація
from catalog_bridge.infrastructure.catalog.resolver import CatalogResolver	# 🔍 Оркестратор lookup
from catalog_bridge.infrastructure.http.catalog_transport import (	# 🌐 HTTP до каталогу
    DEFAULT_BASE_URL,
    DEFAULT_TIMEOUT_S,
    CatalogTransport,
)
from catalog_bridge.infrastructure.http.rate_limiter import RateLimiter	# 🚦 Темп запитів
from catalog_bridge.shared.cache.resolution_cache import DEFAULT_CACHE_PATH, ResolutionCache	# 💾 Кеш результатів
from catalog_bridge.shared.utils.logger import LOG_NAME, init_logging_from_config	# 🧾 Схема логування

logger = logging.getLogger(f"{LOG_NAME}.container")


async def build_resolver(
    config: Optional[ConfigService] = None,
    *,
    http_transport: Optional[httpx.AsyncBaseTransport] = None,
) -> CatalogResolver:
    """🚀 Створює `CatalogResolver` з підвантаженим кешем."""
    cfg = config or ConfigService()
    logging_node = cfg.get("logging")
    if logging_node:
        init_logging_from_config(logging_node)	# 🧾 Розділ logging є лише у повному конфігу
    rate_limiter = RateLimiter(cfg.rate_limit_ms())
    transport = CatalogTransport(
        cfg.get("tiger_nl.base_url", DEFAULT_BASE_URL),
        rate_limiter,
        timeout_s=cfg.get("tiger_nl.timeout_s", DEFAULT_TIMEOUT_S, cast=float),
        transport=http_transport,
    )
    cache = await ResolutionCache.open(
        cfg.get("cache.path", DEFAULT_CACHE_PATH),
        timedelta(hours=cfg.get("cache.ttl_hours", 24, cast=float)),
    )
    logger.info("🧩 Resolver зібрано (rate_limit=%d мс)", cfg.rate_limit_ms())
    return CatalogResolver(transport, cache)

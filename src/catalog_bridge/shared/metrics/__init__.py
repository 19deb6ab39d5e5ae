# 📊 catalog_bridge/shared/metrics/__init__.py
"""
📊 Лічильники Prometheus для рушія зіставлення каталогів.

🔹 LOOKUPS_TOTAL — підсумки lookup за результатом (cache_hit, resolved, exhausted…).
🔹 HTTP_REQUESTS_TOTAL — запити до каталогу за методом і результатом.
🔹 CACHE_WRITE_FAILURES — невдалі спроби write-through знімка кешу.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
from prometheus_client import Counter							# 📈 Лічильники

# 🔠 Системні імпорти
import logging													# 🧾 Логування збоїв метрик

# 🧩 Внутрішні модулі проєкту
from catalog_bridge.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.metrics")

LOOKUPS_TOTAL = Counter(
    "catalog_lookups_total",
    "Lookup results by outcome",
    ["outcome"],
)
HTTP_REQUESTS_TOTAL = Counter(
    "catalog_http_requests_total",
    "Outbound catalog requests by method and outcome",
    ["method", "outcome"],
)
CACHE_WRITE_FAILURES = Counter(
    "catalog_cache_write_failures_total",
    "Failed write-through persistence attempts",
)


def inc_lookup(outcome: str) -> None:
    """🔢 Інкрементує лічильник lookup (метрики не ламають пайплайн)."""
    try:
        LOOKUPS_TOTAL.labels(outcome=outcome).inc()
    except ValueError:
        logger.debug("⚠️ Не вдалося оновити метрику lookup=%s", outcome)


def inc_http(method: str, outcome: str) -> None:
    try:
        HTTP_REQUESTS_TOTAL.labels(method=method, outcome=outcome).inc()
    except ValueError:
        logger.debug("⚠️ Не вдалося оновити HTTP-метрику %s/%s", method, outcome)


def inc_cache_write_failure() -> None:
    CACHE_WRITE_FAILURES.inc()


__all__ = [
    "CACHE_WRITE_FAILURES",
    "HTTP_REQUESTS_TOTAL",
    "LOOKUPS_TOTAL",
    "inc_cache_write_failure",
    "inc_http",
    "inc_lookup",
]

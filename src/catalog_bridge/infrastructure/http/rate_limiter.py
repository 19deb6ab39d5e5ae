# 🚦 catalog_bridge/infrastructure/http/rate_limiter.py
"""
🚦 RateLimiter — мінімальний інтервал між будь-якими двома вихідними запитами рушія.

🔹 `wait()` є єдиною точкою, де корутина може чекати на темп чужих запитів.
🔹 Відмітка «останнього запиту» оновлюється під `asyncio.Lock`, тож паралельні задачі стають у чергу.
🔹 Не падає: лише затримує.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import asyncio													# 🧵 Lock та sleep
import logging													# 🧾 Логування пауз
import time														# ⏱️ Монотонний годинник
from typing import Awaitable, Callable, Optional				# 🧰 Типи

# 🧩 Внутрішні модулі проєкту
from catalog_bridge.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.rate_limiter")

DEFAULT_MIN_INTERVAL_MS = 150									# 🚦 Толерантність зовнішнього сайту


class RateLimiter:
    """🚦 Гарантує щонайменше `min_interval` між послідовними `wait()`."""

    def __init__(
        self,
        min_interval_ms: int = DEFAULT_MIN_INTERVAL_MS,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        if min_interval_ms is None or int(min_interval_ms) <= 0:
            min_interval_ms = DEFAULT_MIN_INTERVAL_MS
        self.min_interval_s = int(min_interval_ms) / 1000.0		# ⏱️ Інтервал у секундах
        self._clock = clock
        self._sleep = sleep
        self._lock = asyncio.Lock()
        self._last: Optional[float] = None						# 🕰️ Коли повернувся попередній wait()

    async def wait(self) -> None:
        async with self._lock:
            if self._last is not None:
                remaining = self.min_interval_s - (self._clock() - self._last)
                if remaining > 0:
                    logger.debug("🚦 Пауза %.3f с перед запитом", remaining)
                    await self._sleep(remaining)
            self._last = self._clock()

# 🌐 catalog_bridge/infrastructure/http/catalog_transport.py
"""
🌐 CatalogTransport — HTTP-клієнт зовнішнього каталогу з обмеженням темпу.

🔹 Кожен GET/HEAD спершу проходить через спільний `RateLimiter`.
🔹 Працює поверх одного `httpx.AsyncClient` з таймаутом на запит і редіректами.
🔹 Транспортні збої → `CatalogUnavailableError`, неуспішний статус сторінки → `CatalogStatusError`.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
import httpx													# 🌐 HTTP-клієнт

# 🔠 Системні імпорти
import logging													# 🧾 Логування запитів
from dataclasses import dataclass								# 🧱 DTO відповіді
from typing import Any, Dict, Optional							# 🧰 Типи
from urllib.parse import urljoin								# 🔗 Абсолютні URL

# 🧩 Внутрішні модулі проєкту
from catalog_bridge.errors import CatalogStatusError, CatalogUnavailableError
from catalog_bridge.infrastructure.http.rate_limiter import RateLimiter
from catalog_bridge.shared.metrics import inc_http
from catalog_bridge.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.transport")

DEFAULT_BASE_URL = "https://tiger.nl"
DEFAULT_TIMEOUT_S = 30.0
DEFAULT_HEADERS: Dict[str, str] = {
    "User-Agent": "Mozilla/5.0 (compatible; CatalogBridge/1.0)",
    "Accept": "text/html,application/xhtml+xml,*/*;q=0.8",
}


@dataclass(frozen=True)
class CatalogResponse:
    """📬 Мінімальна відповідь каталогу."""

    url: str
    status_code: int
    text: str

    @property
    def ok(self) -> bool:
        return self.status_code == 200


class CatalogTransport:
    """🌐 Rate-limited GET/HEAD до зовнішнього каталогу."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        rate_limiter: Optional[RateLimiter] = None,
        *,
        timeout_s: float = DEFAULT_TIMEOUT_S,
        client: Optional[httpx.AsyncClient] = None,
        headers: Optional[Dict[str, str]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.rate_limiter = rate_limiter or RateLimiter()
        self.timeout_s = float(timeout_s)
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            headers={**DEFAULT_HEADERS, **(headers or {})},
            timeout=httpx.Timeout(self.timeout_s),
            follow_redirects=True,
            transport=transport,
        )
        logger.debug(
            "⚙️ CatalogTransport init base=%s timeout=%.1fs interval=%.3fs",
            self.base_url,
            self.timeout_s,
            self.rate_limiter.min_interval_s,
        )

    async def __aenter__(self) -> "CatalogTransport":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    def absolute(self, path: str) -> str:
        """🔗 Перетворює шлях сайту на абсолютний URL."""
        if path.startswith(("http://", "https://")):
            return path
        return urljoin(self.base_url + "/", path.lstrip("/"))

    # ================================
    # 📡 ЗАПИТИ
    # ================================
    async def get(self, url: str) -> CatalogResponse:
        """📥 GET без перевірки статусу; транспортний збій піднімає `CatalogUnavailableError`."""
        await self.rate_limiter.wait()
        try:
            response = await self._client.get(url)
        except httpx.HTTPError as exc:
            inc_http("GET", "transport_error")
            logger.warning("⚠️ GET %s не вдався: %s", url, exc, extra={"url": url})
            raise CatalogUnavailableError(f"GET {url} failed", url=url, details=str(exc)) from exc
        inc_http("GET", str(response.status_code))
        logger.debug("📡 GET %s → %s", url, response.status_code)
        return CatalogResponse(url=str(response.url), status_code=response.status_code, text=response.text)

    async def fetch_page(self, url: str) -> str:
        """📄 HTML сторінки; статус ≠ 200 піднімає `CatalogStatusError`."""
        response = await self.get(url)
        if not response.ok:
            raise CatalogStatusError(url, response.status_code)
        return response.text

    async def head(self, url: str) -> int:
        """🔎 HEAD без тіла, повертає статус."""
        await self.rate_limiter.wait()
        try:
            response = await self._client.head(url)
        except httpx.HTTPError as exc:
            inc_http("HEAD", "transport_error")
            logger.debug("⚠️ HEAD %s не вдався: %s", url, exc)
            raise CatalogUnavailableError(f"HEAD {url} failed", url=url, details=str(exc)) from exc
        inc_http("HEAD", str(response.status_code))
        return response.status_code

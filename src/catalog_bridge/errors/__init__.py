# 🚨 catalog_bridge/errors/__init__.py
"""
🚨 Ієрархія винятків рушія зіставлення каталогів.

🔹 `CatalogFetchError` — сторінку не вдалося отримати (мережа або статус ≠ 200).
🔹 `CatalogUnavailableError` — немає жодної HTTP-відповіді (DNS, timeout, refused).
🔹 `LookupDeadlineExceeded` — зовнішній бюджет часу на lookup вичерпано.
🔹 Кожен виняток уміє віддати `to_log_extra()` для `logger.extra`.
"""

from __future__ import annotations

# 🔠 Системні імпорти
from typing import Dict, Optional									# 📐 Типізація


# ================================
# ⚠️ КОДИ ПОМИЛОК
# ================================
class ErrorCode:
    """⚠️ Категорії помилок для логів і метрик."""

    FETCH = "fetch_error"											# 📄 Сторінку не отримано
    STATUS = "http_status"											# 🔢 Неуспішний HTTP-статус
    NETWORK = "network_error"										# 🌐 Мережевий збій
    DEADLINE = "deadline_exceeded"									# ⏰ Вичерпано бюджет часу
    CACHE = "cache_error"											# 💾 Збій кешу
    UNKNOWN = "unknown_error"										# ❓ Резервний код


# ================================
# 🧠 БАЗОВІ ВИНЯТКИ
# ================================
class AppError(Exception):
    """🧠 Базовий виняток застосунку."""

    code: str = ErrorCode.UNKNOWN

    def __init__(self, message: str, *, details: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    def to_log_extra(self) -> Dict[str, object]:
        """📦 Формує словник для logger.extra."""
        extra: Dict[str, object] = {"error_code": self.code}
        if self.details:
            extra["details"] = self.details
        return extra


class CatalogError(AppError):
    """🏛️ Помилки взаємодії із зовнішнім каталогом."""


class CatalogFetchError(CatalogError):
    """📄 Сторінку каталогу не вдалося отримати."""

    code = ErrorCode.FETCH

    def __init__(self, message: str, *, url: Optional[str] = None, details: Optional[str] = None) -> None:
        super().__init__(message, details=details)
        self.url = url												# 🔗 URL, де сталася помилка

    def to_log_extra(self) -> Dict[str, object]:
        extra = super().to_log_extra()
        if self.url:
            extra["url"] = self.url
        return extra


class CatalogStatusError(CatalogFetchError):
    """🔢 Сторінка відповіла неуспішним статусом."""

    code = ErrorCode.STATUS

    def __init__(self, url: str, status_code: int) -> None:
        super().__init__(f"page returned status {status_code}", url=url)
        self.status_code = status_code								# 🔢 HTTP-код відповіді

    def to_log_extra(self) -> Dict[str, object]:
        extra = super().to_log_extra()
        extra["status_code"] = self.status_code
        return extra


class CatalogUnavailableError(CatalogFetchError):
    """🌐 Транспортний збій: відповіді від хоста немає взагалі."""

    code = ErrorCode.NETWORK


class LookupDeadlineExceeded(CatalogError):
    """⏰ Lookup перервано зовнішнім бюджетом часу."""

    code = ErrorCode.DEADLINE

    def __init__(self, sku: str, deadline_s: float) -> None:
        super().__init__(f"lookup for {sku!r} exceeded {deadline_s:.2f}s")
        self.sku = sku
        self.deadline_s = deadline_s

    def to_log_extra(self) -> Dict[str, object]:
        extra = super().to_log_extra()
        extra.update({"sku": self.sku, "deadline_s": self.deadline_s})
        return extra


class CacheError(AppError):
    """💾 Збій читання/запису знімка кешу."""

    code = ErrorCode.CACHE


# ================================
# 📤 ПУБЛІЧНИЙ API
# ================================
__all__ = [
    "ErrorCode",
    "AppError",
    "CatalogError",
    "CatalogFetchError",
    "CatalogStatusError",
    "CatalogUnavailableError",
    "LookupDeadlineExceeded",
    "CacheError",
]

# 📦 catalog_bridge/domain/models.py
"""
📦 Доменні сутності рушія зіставлення каталогів.

🔹 `ResolvedProduct` — знайдена сторінка зовнішнього каталогу та її зображення.
🔹 `CacheEntry` — позитивний або негативний результат lookup з міткою часу.
🔹 `EnhancedProduct` та супутні DTO — сторона споживача, що додає зображення до товару.
"""

from __future__ import annotations

# 🔠 Системні імпорти
from dataclasses import dataclass, field						# 🧱 DTO
from datetime import datetime, timedelta, timezone			# ⏱️ Мітки часу та TTL
from enum import Enum										# 🏷️ Стан lookup
from typing import Any, Dict, List, Optional					# 🧰 Типи


def utcnow() -> datetime:
    """⏱️ Поточний час у UTC (aware)."""
    return datetime.now(timezone.utc)


def _uniq_keep_order(values: List[str]) -> List[str]:
    seen: set[str] = set()
    result: List[str] = []
    for value in values:
        if value and value not in seen:
            seen.add(value)
            result.append(value)
    return result


# ================================
# 🏷️ РЕЗУЛЬТАТ ЗІСТАВЛЕННЯ
# ================================
@dataclass
class ResolvedProduct:
    """🏷️ Сторінка зовнішнього каталогу, знайдена для внутрішнього SKU."""

    name: str													# 🏷️ Інформаційна мітка lookup
    url: str													# 🔗 Сторінка товару
    image_urls: List[str] = field(default_factory=list)			# 🖼️ У порядку появи на сторінці

    def __post_init__(self) -> None:
        self.image_urls = _uniq_keep_order(list(self.image_urls))	# ♻️ Без дублікатів, порядок зберігається

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "url": self.url, "image_urls": list(self.image_urls)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ResolvedProduct":
        return cls(
            name=str(data.get("name") or ""),
            url=str(data["url"]),
            image_urls=[str(url) for url in data.get("image_urls") or []],
        )


# ================================
# 💾 ЗАПИС КЕШУ
# ================================
@dataclass
class CacheEntry:
    """
    💾 Результат lookup для одного SKU.

    Рівно одне з двох: або `product` присутній (hit), або `not_found` істинний (miss).
    """

    sku: str
    product: Optional[ResolvedProduct] = None
    not_found: bool = False
    cached_at: datetime = field(default_factory=utcnow)

    def __post_init__(self) -> None:
        if (self.product is not None) == bool(self.not_found):
            raise ValueError(f"cache entry for {self.sku!r} must be either a hit or a confirmed miss")
        if self.cached_at.tzinfo is None:
            self.cached_at = self.cached_at.replace(tzinfo=timezone.utc)

    @classmethod
    def hit(cls, sku: str, product: ResolvedProduct, cached_at: Optional[datetime] = None) -> "CacheEntry":
        return cls(sku=sku, product=product, not_found=False, cached_at=cached_at or utcnow())

    @classmethod
    def miss(cls, sku: str, cached_at: Optional[datetime] = None) -> "CacheEntry":
        return cls(sku=sku, product=None, not_found=True, cached_at=cached_at or utcnow())

    def is_fresh(self, ttl: timedelta, now: Optional[datetime] = None) -> bool:
        """⏳ Чи запис ще в межах TTL."""
        now = now or utcnow()
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)	# 🕰️ Наївний час вважаємо UTC, як і cached_at
        return (now - self.cached_at) < ttl

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"sku": self.sku}
        if self.product is not None:
            payload["product"] = self.product.to_dict()
        if self.not_found:
            payload["not_found"] = True
        payload["cached_at"] = self.cached_at.isoformat()
        return payload

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CacheEntry":
        raw_product = data.get("product")
        product = ResolvedProduct.from_dict(raw_product) if raw_product else None
        return cls(
            sku=str(data["sku"]),
            product=product,
            not_found=bool(data.get("not_found", False)),
            cached_at=datetime.fromisoformat(str(data["cached_at"])),
        )


# ================================
# 🔁 СТАН LOOKUP
# ================================
class LookupState(str, Enum):
    """🔁 Стани машини lookup."""

    CACHE_CHECK = "cache_check"
    PROBING = "probing"
    RESOLVED = "resolved"
    EXHAUSTED = "exhausted"


@dataclass(frozen=True)
class LookupOutcome:
    """🧾 Діагностичний підсумок одного lookup."""

    sku: str
    state: LookupState
    product: Optional[ResolvedProduct] = None
    from_cache: bool = False
    candidates_tried: int = 0

    @property
    def found(self) -> bool:
        return self.product is not None


# ================================
# 🛍️ СТОРОНА СПОЖИВАЧА
# ================================
@dataclass
class ProductImage:
    source_url: str
    position: int
    status: str = "pending"
    source: str = ""


@dataclass
class Enhancement:
    source: str
    action: str
    details: str
    fields_added: List[str] = field(default_factory=list)
    timestamp: datetime = field(default_factory=utcnow)
    success: bool = True


@dataclass
class EnhancedProduct:
    """🛍️ Внутрішній товар, до якого додаються зображення з каталогу."""

    sku: str
    title: str = ""
    images: List[ProductImage] = field(default_factory=list)
    enhancements: List[Enhancement] = field(default_factory=list)
    matched_url: str = ""
    match_score: float = 0.0
    updated_at: Optional[datetime] = None


@dataclass
class EnhancementResult:
    product: EnhancedProduct
    fields_updated: List[str] = field(default_factory=list)
    images_added: int = 0
    success: bool = False
    error: Optional[str] = None

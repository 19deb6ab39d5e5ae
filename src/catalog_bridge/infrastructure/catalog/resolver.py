# 🔍 catalog_bridge/infrastructure/catalog/resolver.py
"""
🔍 CatalogResolver — зіставлення внутрішнього SKU зі сторінкою зовнішнього каталогу.

🔹 CACHE_CHECK: свіжий запис кешу (hit або підтверджений miss) завершує lookup без мережі.
🔹 PROBING: кандидати ID перебираються по черзі; для кожного перебираються сторінки категорій за типами товару.
🔹 Перший кандидат із непорожнім перевіреним списком зображень виграє і кешується.
🔹 EXHAUSTED: кандидати скінчились → негативний запис у кеш, повертається None (це не помилка).
🔹 Якщо перший кандидат не отримав жодної HTTP-відповіді, транспортна помилка піднімається до викликача.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import asyncio	# ⏰ Бюджет часу на lookup
import logging	# 🧾 Логування сценаріїв
from dataclasses import dataclass, field	# 🧱 Статистика проб
from typing import Any, Callable, Iterable, List, Optional	# 🧰 Типізація

# 🧩 Внутрішні модулі проєкту
from catalog_bridge.domain.candidates import SkuCandidateGenerator
from catalog_bridge.domain.models import LookupOutcome, LookupState, ResolvedProduct
from catalog_bridge.errors import (
    CatalogFetchError,
    CatalogUnavailableError,
    LookupDeadlineExceeded,
)
from catalog_bridge.infrastructure.http.catalog_transport import CatalogTransport
from catalog_bridge.infrastructure.parsers.page_extractor import CatalogPageExtractor
from catalog_bridge.shared.cache.resolution_cache import ResolutionCache
from catalog_bridge.shared.metrics import inc_lookup
from catalog_bridge.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.resolver")

NameMatcher = Callable[[Optional[str], str], bool]	# 🧮 (назва, URL сторінки) → чи це той самий товар


@dataclass
class _ProbeStats:
    """📊 Що сталося з мережею під час проб одного кандидата/lookup."""

    responses: int = 0
    first_unreachable: Optional[CatalogUnavailableError] = None
    errors: List[CatalogFetchError] = field(default_factory=list)

    def record(self, exc: CatalogFetchError) -> None:
        self.errors.append(exc)
        if isinstance(exc, CatalogUnavailableError):
            if self.first_unreachable is None:
                self.first_unreachable = exc
        else:
            self.responses += 1	# статус ≠ 200, але хост відповів


class CatalogResolver:
    """🔍 Оркестратор: кеш → кандидати → транспорт/екстрактор → кеш."""

    def __init__(
        self,
        transport: CatalogTransport,
        cache: ResolutionCache,
        generator: Optional[SkuCandidateGenerator] = None,
        extractor: Optional[CatalogPageExtractor] = None,
        *,
        name_matcher: Optional[NameMatcher] = None,
    ) -> None:
        self._transport = transport
        self._cache = cache
        self._generator = generator or SkuCandidateGenerator()
        self._extractor = extractor or CatalogPageExtractor(transport)
        self._name_matcher = name_matcher

    @property
    def cache(self) -> ResolutionCache:
        return self._cache

    @property
    def generator(self) -> SkuCandidateGenerator:
        return self._generator

    async def __aenter__(self) -> "CatalogResolver":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._transport.aclose()

    # ================================
    # 🤝 ПУБЛІЧНИЙ КОНТРАКТ
    # ================================
    async def lookup(
        self,
        sku: str,
        name: Optional[str] = None,
        *,
        deadline_s: Optional[float] = None,
    ) -> Optional[ResolvedProduct]:
        """🔍 Повертає знайдений товар або None («не знайдено» не є помилкою)."""
        outcome = await self.lookup_outcome(sku, name, deadline_s=deadline_s)
        return outcome.product

    async def lookup_outcome(
        self,
        sku: str,
        name: Optional[str] = None,
        *,
        deadline_s: Optional[float] = None,
    ) -> LookupOutcome:
        """🧾 Те саме, що `lookup`, але з діагностикою стану."""
        if deadline_s is None:
            return await self._lookup(sku, name)
        try:
            return await asyncio.wait_for(self._lookup(sku, name), timeout=deadline_s)
        except asyncio.TimeoutError as exc:
            logger.warning("⏰ Lookup %s перервано бюджетом %.2f с", sku, deadline_s)
            inc_lookup("deadline")
            raise LookupDeadlineExceeded(sku, deadline_s) from exc

    async def _lookup(self, sku: str, name: Optional[str]) -> LookupOutcome:
        cached, found = self._cache.get(sku)
        if found:
            state = LookupState.RESOLVED if cached is not None else LookupState.EXHAUSTED
            inc_lookup("cache_hit" if cached is not None else "cache_negative")
            logger.debug("♻️ Кеш для %s: %s", sku, state.value)
            return LookupOutcome(sku=sku, state=state, product=cached, from_cache=True)

        candidates = self._generator.generate(sku)
        base_path = self._generator.category_path(name)
        product_types = self._generator.product_types()
        logger.info("🔍 Lookup %s: %d кандидат(ів), base=%s", sku, len(candidates), base_path)

        for index, catalog_id in enumerate(candidates, start=1):
            stats = _ProbeStats()
            product = await self._probe(catalog_id, base_path, product_types, name, stats)
            if product is not None:
                await self._cache.put(sku, product)
                inc_lookup("resolved")
                logger.info("✅ %s → %s (%d зображень)", sku, product.url, len(product.image_urls))
                return LookupOutcome(
                    sku=sku,
                    state=LookupState.RESOLVED,
                    product=product,
                    candidates_tried=index,
                )
            if index == 1 and stats.responses == 0 and stats.first_unreachable is not None:
                inc_lookup("unreachable")
                logger.error("❌ Каталог недоступний під час lookup %s", sku, extra=stats.first_unreachable.to_log_extra())
                raise stats.first_unreachable

        await self._cache.put(sku, None)
        inc_lookup("exhausted")
        logger.info("🪣 %s не знайдено серед %d кандидатів", sku, len(candidates))
        return LookupOutcome(sku=sku, state=LookupState.EXHAUSTED, candidates_tried=len(candidates))

    # ================================
    # 🎯 ПРОБИ КАНДИДАТІВ
    # ================================
    async def find_by_id(
        self,
        catalog_id: str,
        base_path: str,
        product_types: Iterable[str],
        name: Optional[str] = None,
    ) -> Optional[ResolvedProduct]:
        """🎯 Шукає ID на сторінках категорій кожного типу товару."""
        return await self._probe(catalog_id, base_path, list(product_types), name, _ProbeStats())

    async def find_by_id_direct(
        self,
        catalog_id: str,
        base_path: str,
        product_types: Iterable[str],
        name: Optional[str] = None,
    ) -> Optional[ResolvedProduct]:
        """⚡ Пробує збудовані URL сторінок HEAD-запитом, далі пошук по категоріях."""
        types = list(product_types)
        for product_type in types:
            for slug in (f"{catalog_id}-{product_type}", f"{catalog_id}-{product_type.replace('-', ' ')}"):
                product_url = self._transport.absolute(f"{base_path}{product_type}/{slug}/")
                try:
                    status = await self._transport.head(product_url)
                except CatalogUnavailableError:
                    continue
                if status != 200:
                    continue
                product = await self._scrape(product_url, catalog_id, name, _ProbeStats())
                if product is not None:
                    return product
        return await self.find_by_id(catalog_id, base_path, types, name)

    async def find_by_name(self, product_name: str) -> Optional[ResolvedProduct]:
        """🔎 Discovery за назвою; зображення не перевіряються."""
        return await self._extractor.discover(product_name)

    async def _probe(
        self,
        catalog_id: str,
        base_path: str,
        product_types: List[str],
        name: Optional[str],
        stats: _ProbeStats,
    ) -> Optional[ResolvedProduct]:
        for product_type in product_types:
            category_url = self._transport.absolute(f"{base_path}{product_type}/")
            try:
                product_url = await self._extractor.find_on_category_page(
                    category_url, base_path, product_type, catalog_id
                )
            except CatalogFetchError as exc:
                stats.record(exc)
                logger.debug("⚠️ Категорія %s пропущена: %s", category_url, exc)
                continue
            stats.responses += 1
            if not product_url:
                continue

            product = await self._scrape(product_url, catalog_id, name, stats)
            if product is not None:
                return product
        return None

    async def _scrape(
        self,
        product_url: str,
        catalog_id: str,
        name: Optional[str],
        stats: _ProbeStats,
    ) -> Optional[ResolvedProduct]:
        if self._name_matcher is not None and not self._name_matcher(name, product_url):
            logger.info("🚫 %s відхилено перевіркою назви '%s'", product_url, name)
            return None
        try:
            images = await self._extractor.scrape_images_validated(product_url)
        except CatalogFetchError as exc:
            stats.record(exc)
            logger.debug("⚠️ Сторінка %s не прочиталась: %s", product_url, exc)
            return None
        if not images:
            logger.debug("🪣 %s без перевірених зображень", product_url)
            return None
        return ResolvedProduct(name=name or catalog_id, url=product_url, image_urls=images)

# 🛍️ catalog_bridge/infrastructure/catalog/enhancer.py
"""
🛍️ ImageEnhancer — додає до внутрішнього товару зображення, знайдені в зовнішньому каталозі.

🔹 Порядок зображень каталогу задає позиції нових зображень (після вже наявних).
🔹 Не дублює URL, що вже є в товарі, і пропускає перші N, якщо N зображень з цього джерела вже додано.
🔹 Пакетний режим працює послідовно і перестає брати нові SKU, коли вичерпано бюджет часу.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import logging	# 🧾 Логування
import time	# ⏱️ Бюджет пакетного прогону
from typing import Iterable, List, Optional	# 🧰 Типи

# 🧩 Внутрішні модулі проєкту
from catalog_bridge.domain.models import (
    EnhancedProduct,
    Enhancement,
    EnhancementResult,
    ProductImage,
    utcnow,
)
from catalog_bridge.errors import CatalogError
from catalog_bridge.infrastructure.catalog.resolver import CatalogResolver
from catalog_bridge.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.enhancer")

DEFAULT_SOURCE = "tiger_nl"


class ImageEnhancer:
    """🛍️ Застосовує `ResolvedProduct.image_urls` до списку зображень товару."""

    def __init__(self, resolver: CatalogResolver, source: str = DEFAULT_SOURCE) -> None:
        self._resolver = resolver
        self._source = source

    async def enhance(self, product: EnhancedProduct) -> EnhancementResult:
        result = EnhancementResult(product=product)
        try:
            resolved = await self._resolver.lookup(product.sku, product.title)
        except CatalogError as exc:
            logger.warning("⚠️ Lookup %s не вдався: %s", product.sku, exc, extra=exc.to_log_extra())
            result.error = f"failed to lookup product: {exc}"
            return result

        if resolved is None:
            result.error = "product not found in external catalog"
            return result

        existing_from_source = sum(1 for image in product.images if image.source == self._source)
        known_urls = {image.source_url for image in product.images}
        start_position = len(product.images)
        added = 0

        for index, image_url in enumerate(resolved.image_urls):
            if index < existing_from_source or image_url in known_urls:
                continue
            added += 1
            product.images.append(
                ProductImage(
                    source_url=image_url,
                    position=start_position + added,
                    status="pending",
                    source=self._source,
                )
            )
            known_urls.add(image_url)

        product.matched_url = resolved.url
        product.match_score = 1.0	# прямий збіг за SKU
        if added:
            product.enhancements.append(
                Enhancement(
                    source=self._source,
                    action="images_added",
                    details=f"Added {added} new images ({resolved.url})",
                    fields_added=["images"],
                )
            )
        else:
            product.enhancements.append(
                Enhancement(
                    source=self._source,
                    action="images_checked",
                    details=f"No new images found ({resolved.url})",
                )
            )
        product.updated_at = utcnow()

        result.fields_updated = ["images"]
        result.images_added = added
        result.success = True
        logger.info("🛍️ %s: +%d зображень", product.sku, added)
        return result

    async def enhance_many(
        self,
        products: Iterable[EnhancedProduct],
        *,
        budget_s: Optional[float] = None,
    ) -> List[EnhancementResult]:
        """📦 Послідовний прогін; після вичерпання бюджету нові lookup не починаються."""
        started = time.monotonic()
        results: List[EnhancementResult] = []
        for product in products:
            if budget_s is not None and time.monotonic() - started >= budget_s:
                logger.warning("⏰ Бюджет %.1f с вичерпано, оброблено %d товар(ів)", budget_s, len(results))
                break
            results.append(await self.enhance(product))
        return results

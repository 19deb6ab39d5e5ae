"""
🧪 test_image_enhancer.py — додавання зображень каталогу до внутрішнього товару

Перевіряє:
- Позиції нових зображень після наявних
- Пропуск уже доданих з цього джерела та відомих URL
- «Не знайдено» та помилку lookup як error у результаті
- Бюджет пакетного прогону
"""

from typing import Dict, List, Optional

import pytest

from catalog_bridge.domain.models import EnhancedProduct, ProductImage, ResolvedProduct
from catalog_bridge.errors import CatalogUnavailableError
from catalog_bridge.infrastructure.catalog.enhancer import ImageEnhancer

PAGE = "https://tiger.nl/producten/badkameraccessoires/haak/309530746-boston-haak/"
IMAGES = [f"https://tiger.nl/pim/528_{suffix}" for suffix in ("a1", "b2", "c3")]


class _StubResolver:
    """Резолвер з наперед заданими відповідями за SKU."""

    def __init__(self, results: Dict[str, object]) -> None:
        self.results = results
        self.calls: List[str] = []

    async def lookup(self, sku: str, name: Optional[str] = None, **_: object) -> Optional[ResolvedProduct]:
        self.calls.append(sku)
        result = self.results.get(sku)
        if isinstance(result, Exception):
            raise result
        return result


def _resolved() -> ResolvedProduct:
    return ResolvedProduct(name="Boston", url=PAGE, image_urls=list(IMAGES))


@pytest.mark.asyncio
async def test_enhance_appends_images_after_existing():
    product = EnhancedProduct(
        sku="CO-T309512",
        title="Boston krok",
        images=[ProductImage(source_url="https://shop.example/own.jpg", position=1, source="shop")],
    )
    enhancer = ImageEnhancer(_StubResolver({"CO-T309512": _resolved()}))

    result = await enhancer.enhance(product)

    assert result.success and result.error is None
    assert result.images_added == 3
    assert [image.position for image in product.images] == [1, 2, 3, 4]
    assert [image.source_url for image in product.images[1:]] == IMAGES
    assert all(image.source == "tiger_nl" and image.status == "pending" for image in product.images[1:])
    assert product.matched_url == PAGE
    assert product.match_score == 1.0
    assert product.enhancements[-1].action == "images_added"
    assert product.updated_at is not None


@pytest.mark.asyncio
async def test_enhance_skips_already_imported_and_known_urls():
    product = EnhancedProduct(
        sku="CO-T309512",
        images=[
            ProductImage(source_url="https://tiger.nl/pim/528_old", position=1, source="tiger_nl"),
            ProductImage(source_url=IMAGES[2], position=2, source="shop"),
        ],
    )
    enhancer = ImageEnhancer(_StubResolver({"CO-T309512": _resolved()}))

    result = await enhancer.enhance(product)

    # перше зображення каталогу вважається вже імпортованим, третє вже є в товарі
    assert result.images_added == 1
    assert product.images[-1].source_url == IMAGES[1]
    assert product.images[-1].position == 3


@pytest.mark.asyncio
async def test_enhance_without_new_images_records_check():
    product = EnhancedProduct(
        sku="CO-T309512",
        images=[ProductImage(source_url=url, position=i, source="shop") for i, url in enumerate(IMAGES, 1)],
    )
    enhancer = ImageEnhancer(_StubResolver({"CO-T309512": _resolved()}))

    result = await enhancer.enhance(product)

    assert result.success and result.images_added == 0
    assert product.enhancements[-1].action == "images_checked"
    assert len(product.images) == 3


@pytest.mark.asyncio
async def test_enhance_not_found_is_reported_as_error():
    product = EnhancedProduct(sku="CO-UNKNOWN999")
    enhancer = ImageEnhancer(_StubResolver({}))

    result = await enhancer.enhance(product)

    assert result.success is False
    assert result.error == "product not found in external catalog"
    assert product.images == [] and product.enhancements == []


@pytest.mark.asyncio
async def test_enhance_lookup_failure_is_reported_as_error():
    product = EnhancedProduct(sku="CO-T309012")
    failure = CatalogUnavailableError("GET https://tiger.nl/ failed", url="https://tiger.nl/")
    enhancer = ImageEnhancer(_StubResolver({"CO-T309012": failure}))

    result = await enhancer.enhance(product)

    assert result.success is False
    assert result.error.startswith("failed to lookup product:")


@pytest.mark.asyncio
async def test_enhance_many_processes_in_order():
    resolver = _StubResolver({"CO-T1": _resolved()})
    enhancer = ImageEnhancer(resolver)

    results = await enhancer.enhance_many([EnhancedProduct(sku="CO-T1"), EnhancedProduct(sku="CO-T2")])

    assert resolver.calls == ["CO-T1", "CO-T2"]
    assert [result.success for result in results] == [True, False]


@pytest.mark.asyncio
async def test_enhance_many_stops_when_budget_spent():
    resolver = _StubResolver({"CO-T1": _resolved()})
    enhancer = ImageEnhancer(resolver)

    results = await enhancer.enhance_many([EnhancedProduct(sku="CO-T1")], budget_s=0)

    assert results == []
    assert resolver.calls == []

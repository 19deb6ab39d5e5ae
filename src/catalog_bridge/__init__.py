# 🔗 catalog_bridge/__init__.py
"""
🔗 catalog_bridge — зіставлення внутрішніх SKU зі сторінками зовнішнього каталогу без пошукового API.

Публічний API: `CatalogResolver.lookup(sku, name)` та збирання через `build_resolver()`.
"""

from catalog_bridge.config import ConfigService, build_resolver
from catalog_bridge.domain import ResolvedProduct, SkuCandidateGenerator
from catalog_bridge.infrastructure.catalog import CatalogResolver, ImageEnhancer

__all__ = [
    "CatalogResolver",
    "ConfigService",
    "ImageEnhancer",
    "ResolvedProduct",
    "SkuCandidateGenerator",
    "build_resolver",
]

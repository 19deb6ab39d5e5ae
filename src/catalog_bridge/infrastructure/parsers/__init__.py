# 🖼️ catalog_bridge/infrastructure/parsers/__init__.py
from .page_extractor import (
    CatalogPageExtractor,
    build_search_url,
    extract_image_urls,
    find_product_url,
    find_product_url_for_id,
)

__all__ = [
    "CatalogPageExtractor",
    "build_search_url",
    "extract_image_urls",
    "find_product_url",
    "find_product_url_for_id",
]

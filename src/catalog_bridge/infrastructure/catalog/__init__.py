# 🔍 catalog_bridge/infrastructure/catalog/__init__.py
from .enhancer import ImageEnhancer
from .resolver import CatalogResolver

__all__ = ["CatalogResolver", "ImageEnhancer"]

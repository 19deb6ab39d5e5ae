# 📦 catalog_bridge/domain/__init__.py
"""
📦 Доменний шар: моделі та чистий генератор кандидатів.
"""

from .candidates import COLOR_SUFFIX_MAP, SkuCandidateGenerator
from .models import (
    CacheEntry,
    EnhancedProduct,
    Enhancement,
    EnhancementResult,
    LookupOutcome,
    LookupState,
    ProductImage,
    ResolvedProduct,
)

__all__ = [
    "COLOR_SUFFIX_MAP",
    "CacheEntry",
    "EnhancedProduct",
    "Enhancement",
    "EnhancementResult",
    "LookupOutcome",
    "LookupState",
    "ProductImage",
    "ResolvedProduct",
    "SkuCandidateGenerator",
]

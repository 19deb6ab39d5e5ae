# 💾 catalog_bridge/shared/cache/__init__.py
from .resolution_cache import DEFAULT_CACHE_PATH, DEFAULT_TTL, ResolutionCache

__all__ = ["DEFAULT_CACHE_PATH", "DEFAULT_TTL", "ResolutionCache"]

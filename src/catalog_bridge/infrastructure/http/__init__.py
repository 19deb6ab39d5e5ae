# 🌐 catalog_bridge/infrastructure/http/__init__.py
from .catalog_transport import CatalogResponse, CatalogTransport
from .rate_limiter import RateLimiter

__all__ = ["CatalogResponse", "CatalogTransport", "RateLimiter"]

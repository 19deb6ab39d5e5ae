# tests/conftest.py
import sys
import time
from pathlib import Path
from typing import Dict, List, Optional, Set, Tuple

import httpx
import pytest

# Додаємо src у sys.path, щоб працював імпорт "catalog_bridge.…" без встановлення пакета
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from catalog_bridge.infrastructure.http.catalog_transport import CatalogTransport  # noqa: E402
from catalog_bridge.infrastructure.http.rate_limiter import RateLimiter  # noqa: E402

BASE_URL = "https://tiger.nl"


# ──────────────────────────────────────────────────────────────────────────────
#                          🔧 Фейковий зовнішній каталог
# ──────────────────────────────────────────────────────────────────────────────
class FakeCatalog:
    """Віддає заздалегідь задані сторінки за шляхом; усе інше — 404."""

    def __init__(self) -> None:
        self.pages: Dict[str, Tuple[int, str]] = {}
        self.live_images: Set[str] = set()
        self.requests: List[Tuple[str, str]] = []
        self.dispatched_at: List[float] = []
        self.offline = False

    def add_page(self, path: str, html: str, status: int = 200) -> None:
        self.pages[path] = (status, html)

    def add_image(self, path: str) -> None:
        self.live_images.add(path)

    @property
    def calls(self) -> int:
        return len(self.requests)

    def handler(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        self.requests.append((request.method, path))
        self.dispatched_at.append(time.monotonic())
        if self.offline:
            raise httpx.ConnectError("connection refused", request=request)
        if request.method == "HEAD":
            return httpx.Response(200 if path in self.live_images else 404)
        status, html = self.pages.get(path, (404, "<html>not found</html>"))
        return httpx.Response(status, text=html)


def product_page(*fragments: str) -> str:
    body = "".join(f'<img src="{fragment}">' for fragment in fragments)
    return f"<html><body>{body}</body></html>"


def category_page(*paths: str) -> str:
    links = "".join(f'<a href="{path}">item</a>' for path in paths)
    return f"<html><body><div class='grid'>{links}</div></body></html>"


@pytest.fixture
def fake_catalog() -> FakeCatalog:
    return FakeCatalog()


@pytest.fixture
def make_transport(fake_catalog: FakeCatalog):
    def _make(min_interval_ms: int = 1, catalog: Optional[FakeCatalog] = None) -> CatalogTransport:
        source = catalog or fake_catalog
        return CatalogTransport(
            BASE_URL,
            RateLimiter(min_interval_ms),
            timeout_s=5,
            transport=httpx.MockTransport(source.handler),
        )

    return _make

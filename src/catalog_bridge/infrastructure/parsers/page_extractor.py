# 🖼️ catalog_bridge/infrastructure/parsers/page_extractor.py
"""
🖼️ CatalogPageExtractor — пошук сторінок товару та зображень у HTML зовнішнього каталогу.

🔹 Discovery: на сторінці категорії знаходить посилання виду `/{section}/{type}/{id}-{slug}/`.
🔹 Extraction: збирає PIM-зображення (CDN, апгрейд до 1200×1200) та медіа-файли без іконок/логотипів.
🔹 Обидва патерни ділять один `seen`, тож актив, знайдений двічі, потрапляє у список один раз.
🔹 Validated-шлях перевіряє кожне зображення HEAD-запитом; discovery-шлях цього не робить.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
from bs4 import BeautifulSoup									# 🥣 Розбір посилань зі сторінки категорії

# 🔠 Системні імпорти
import logging													# 🧾 Логування
import re														# 🧪 Структурні патерни
from typing import Final, List, Optional, Pattern, Tuple		# 🧰 Типи
from urllib.parse import urlencode, urlparse					# 🔗 Побудова та розбір URL

# 🧩 Внутрішні модулі проєкту
from catalog_bridge.domain.candidates import DEFAULT_BASE_PATH
from catalog_bridge.domain.models import ResolvedProduct
from catalog_bridge.errors import CatalogUnavailableError
from catalog_bridge.infrastructure.http.catalog_transport import CatalogTransport
from catalog_bridge.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.parsers.page_extractor")

PIM_PATTERN: Final[Pattern[str]] = re.compile(r"/pim/528_[a-f0-9-]+")
MEDIA_PATTERN: Final[Pattern[str]] = re.compile(r"/media/[a-z0-9]+/[^\"'\s]+?\.(?:jpg|jpeg|png|webp)")
PIM_QUERY: Final[str] = "?width=1200&height=1200&format=jpg&quality=90"	# 🔍 Канонічна висока роздільність
MEDIA_EXCLUDE: Final[Tuple[str, ...]] = ("icon", "logo")				# 🚫 Не товарні активи

CATEGORY_KEYWORDS: Final[Tuple[Tuple[str, str], ...]] = (
    ("toalettrullholder", "toiletrolhouder"),
    ("toilet roll", "toiletrolhouder"),
    ("toalettbørste", "toiletborstel"),
    ("toilet brush", "toiletborstel"),
    ("håndklestang", "handdoekhouder"),
    ("towel rail", "handdoekhouder"),
    ("towel bar", "handdoekhouder"),
    ("krok", "haak"),
    ("hook", "haak"),
    ("dusjkurv", "douchekorf"),
    ("shower caddy", "douchekorf"),
    ("speil", "spiegel"),
    ("mirror", "spiegel"),
)
SERIES_KEYWORDS: Final[Tuple[Tuple[str, str], ...]] = (
    ("boston", "productserie-boston"),
    ("urban", "productserie-urban"),
    ("2-store", "productserie-2-store"),
    ("carv", "productserie-carv"),
    ("tune", "productserie-tune"),
    ("impuls", "productserie-impuls"),
    ("nomad", "productserie-nomad"),
    ("items", "productserie-items"),
)


def _product_link_pattern(base_path: str) -> Pattern[str]:
    return re.compile(re.escape(base_path) + r"[^\"'/\s]+/\d+-[^\"'/\s]+/")


def _asset_key(fragment: str) -> str:
    """🔑 Ідентичність активу: PIM-ідентифікатор, якщо він є у шляху, інакше сам шлях."""
    match = PIM_PATTERN.search(fragment)
    return match.group(0) if match else fragment


# ================================
# 🧪 ЧИСТІ ФУНКЦІЇ НАД HTML
# ================================
def find_product_url(html: str, base_path: str = DEFAULT_BASE_PATH) -> str:
    """🔗 Перший шлях сторінки товару на сторінці категорії, або порожній рядок."""
    pattern = _product_link_pattern(base_path)
    soup = BeautifulSoup(html or "", "html.parser")
    for anchor in soup.find_all("a", href=True):
        path = urlparse(str(anchor["href"])).path
        match = pattern.search(path)
        if match:
            return match.group(0)
    # посилання можуть жити у вбудованому JSON, а не в <a>
    match = pattern.search(html or "")
    return match.group(0) if match else ""


def find_product_url_for_id(html: str, base_path: str, product_type: str, catalog_id: str) -> str:
    """🎯 Шлях сторінки конкретного ID у межах типу товару."""
    pattern = re.compile(
        re.escape(f"{base_path}{product_type}/{catalog_id}") + r"-[^\"'/\s]+/"
    )
    match = pattern.search(html or "")
    return match.group(0) if match else ""


def extract_image_urls(html: str, base_url: str) -> List[str]:
    """🖼️ Усі зображення товару у порядку появи, без дублікатів."""
    base = base_url.rstrip("/")
    seen: set[str] = set()
    images: List[str] = []

    for match in PIM_PATTERN.finditer(html or ""):
        key = _asset_key(match.group(0))
        if key in seen:
            continue
        seen.add(key)
        images.append(f"{base}{match.group(0)}{PIM_QUERY}")

    for match in MEDIA_PATTERN.finditer(html or ""):
        fragment = match.group(0)
        key = _asset_key(fragment)
        if key in seen or any(token in fragment for token in MEDIA_EXCLUDE):
            continue
        seen.add(key)
        images.append(f"{base}{fragment}")

    logger.debug("🖼️ Знайдено %d зображень", len(images))
    return images


def build_search_url(base_url: str, product_name: str) -> str:
    """🔎 URL сторінки категорії з фільтрами серії/типу за ключовими словами назви."""
    name_lower = (product_name or "").lower()
    category = next((cat for keyword, cat in CATEGORY_KEYWORDS if keyword in name_lower), "")
    series = next((ser for keyword, ser in SERIES_KEYWORDS if keyword in name_lower), "")

    url = f"{base_url.rstrip('/')}{DEFAULT_BASE_PATH}"
    params = [(key, value) for key, value in (("productserie", series), ("category", category)) if value]
    if params:
        url += "?" + urlencode(params)
    return url


# ================================
# 🌐 ОПЕРАЦІЇ З ЗАПИТАМИ
# ================================
class CatalogPageExtractor:
    """🌐 Операції над сторінками каталогу через rate-limited транспорт."""

    def __init__(self, transport: CatalogTransport) -> None:
        self._transport = transport

    async def validate_url(self, url: str) -> bool:
        """✅ HEAD-перевірка: True лише на статус 200."""
        try:
            return await self._transport.head(url) == 200
        except CatalogUnavailableError:
            return False

    async def scrape_images(self, product_url: str) -> List[str]:
        """🖼️ Зображення сторінки без перевірки доступності (discovery-шлях)."""
        html = await self._transport.fetch_page(product_url)
        return extract_image_urls(html, self._transport.base_url)

    async def scrape_images_validated(self, product_url: str) -> List[str]:
        """🖼️ Лише ті зображення, що відповіли 200 на HEAD."""
        html = await self._transport.fetch_page(product_url)
        valid: List[str] = []
        for image_url in extract_image_urls(html, self._transport.base_url):
            if await self.validate_url(image_url):
                valid.append(image_url)
            else:
                logger.debug("🚫 Зображення недоступне: %s", image_url)
        return valid

    async def find_on_category_page(
        self,
        category_url: str,
        base_path: str,
        product_type: str,
        catalog_id: str,
    ) -> Optional[str]:
        """🎯 Абсолютний URL товару з ID на сторінці категорії, або None."""
        html = await self._transport.fetch_page(category_url)
        path = find_product_url_for_id(html, base_path, product_type, catalog_id)
        return self._transport.absolute(path) if path else None

    async def discover(self, product_name: str) -> Optional[ResolvedProduct]:
        """
        🔎 Пошук за назвою через сторінку категорії.

        Результат не перевірений: зображення не проходять HEAD-валідацію.
        """
        search_url = build_search_url(self._transport.base_url, product_name)
        html = await self._transport.fetch_page(search_url)
        path = find_product_url(html)
        if not path:
            logger.info("🔎 Товар не знайдено за назвою '%s'", product_name)
            return None
        product_url = self._transport.absolute(path)
        images = await self.scrape_images(product_url)
        return ResolvedProduct(name=product_name, url=product_url, image_urls=images)

# 🔢 catalog_bridge/domain/candidates.py
"""
🔢 SkuCandidateGenerator — евристичне перетворення внутрішнього SKU у кандидати ID зовнішнього каталогу.

🔹 Чиста функція: без I/O, детермінована, однаковий вхід → однаковий впорядкований вихід.
🔹 Правила виведені емпірично зі схем SKU обох каталогів (див. приклади нижче).
🔹 Ранжування немає: резолвер перебирає кандидатів лінійно, перший живий виграє.

Приклади:
    CO-T309012 → 309030346 (Boston, тримач туалетного паперу)
    CO-T309512 → 309530746 (Boston, гачок)
    CO-T317312 → 1317330746 (Urban, йоржик)
"""

from __future__ import annotations

# 🔠 Системні імпорти
from typing import Dict, Final, Iterable, List, Optional, Tuple	# 🧰 Типи

VENDOR_PREFIX: Final[str] = "CO-"								# 🏷️ Внутрішній префікс постачальника
TYPE_PREFIX: Final[str] = "T"									# 🔤 Літера типу серії
DIRECT_SERIES_PREFIX: Final[str] = "800"						# 🔢 Cooper/800xxx — прямий числовий ID
BASE_WIDTH: Final[int] = 4										# 📏 Ширина базового сегмента
INFIX: Final[str] = "30"										# 🔗 5-та цифра «1» стає «3» + «0»
URBAN_PREFIX: Final[str] = "1"									# 🏙️ Серія Urban має провідну «1»

COLOR_SUFFIX_MAP: Final[Dict[str, str]] = {
    "12": "746",												# ⚫ чорний
    "32": "946",												# 🔘 матова нержавійка
    "33": "346",												# 🪞 хром
    "01": "146",												# ⚪ білий
    "41": "341",												# 🪞 хром (варіант)
    "46": "146",												# ⚪ білий (варіант)
}

PROBE_SUFFIXES: Final[Tuple[str, ...]] = ("746", "346", "946", "146")	# 🎨 Порядок перебору кольорів

DEFAULT_BASE_PATH: Final[str] = "/producten/badkameraccessoires/"
UNIVERSAL_HOOKS_PATH: Final[str] = "/en/products/universal-hooks/"
UNIVERSAL_HOOKS_SERIES: Final[Tuple[str, ...]] = ("baseline", "basic", "twin", "rhino", "cats")

PRODUCT_TYPES: Final[Tuple[str, ...]] = (
    "toiletrolhouder",
    "toiletborstel-met-houder",
    "handdoekhouder",
    "haak",
    "douchemand",
    "zeepdispenser",
    "reserve-toiletrolhouder",
    "planchet",
    "bekerhouder",
    "badgreep",
    "spiegel",
    "accessoireset",
    "douchehaak",
    "schroefhaak",
    "opbergmand",
    "adhesive-hook",
    "screw-hook",
    "suction-hook",
    "door-hook",
)


def _dedupe(values: Iterable[str]) -> List[str]:
    seen: set[str] = set()
    ordered: List[str] = []
    for value in values:
        if value not in seen:
            seen.add(value)
            ordered.append(value)
    return ordered


class SkuCandidateGenerator:
    """🔢 Генерує впорядкований список кандидатів ID для внутрішнього SKU."""

    def __init__(self, probe_suffixes: Tuple[str, ...] = PROBE_SUFFIXES) -> None:
        self._suffixes = tuple(probe_suffixes)

    def generate(self, sku: str) -> List[str]:
        cleaned = (sku or "").strip()
        if cleaned.startswith(VENDOR_PREFIX):
            cleaned = cleaned[len(VENDOR_PREFIX):]

        # Числовий SKU вже живе у плоскому просторі ID каталогу
        if not cleaned.startswith(TYPE_PREFIX):
            return [cleaned]

        digits = cleaned[len(TYPE_PREFIX):]
        if digits.startswith(DIRECT_SERIES_PREFIX) or len(digits) < 6:
            return [digits]

        base = digits[:BASE_WIDTH]
        family = digits[:3] + digits[3:5]

        candidates: List[str] = [base + INFIX + suffix for suffix in self._suffixes]
        candidates += [family + INFIX + suffix for suffix in self._suffixes]
        candidates += [URBAN_PREFIX + family + INFIX + suffix for suffix in self._suffixes]
        candidates.append(digits)
        return _dedupe(candidates)

    @staticmethod
    def external_color_suffix(sku: str) -> Optional[str]:
        """🎨 Зовнішній 3-значний суфікс кольору за останніми двома цифрами SKU (якщо відомий)."""
        tail = (sku or "").strip()[-2:]
        return COLOR_SUFFIX_MAP.get(tail)

    @staticmethod
    def category_path(product_name: Optional[str]) -> str:
        """🗂️ Базовий шлях категорії за назвою серії."""
        name_lower = (product_name or "").lower()
        if any(series in name_lower for series in UNIVERSAL_HOOKS_SERIES):
            return UNIVERSAL_HOOKS_PATH
        return DEFAULT_BASE_PATH

    @staticmethod
    def product_types() -> List[str]:
        return list(PRODUCT_TYPES)

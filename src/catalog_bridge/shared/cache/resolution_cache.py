# 💾 catalog_bridge/shared/cache/resolution_cache.py
"""
💾 ResolutionCache — персистентний TTL-кеш результатів зіставлення SKU.

🔹 Зберігає як позитивні (знайдено), так і негативні (підтверджено відсутність) результати.
🔹 Write-through: після кожного `put()` повний знімок записується на диск до повернення.
🔹 Відсутній або пошкоджений знімок = порожній кеш (лише попередження в лог).
🔹 Читання без lock (атомарні в межах event loop), записи серіалізуються через `asyncio.Lock`.

Масштабування: повний перезапис знімка лінійний за розміром кешу; для сотень–тисяч SKU
це прийнятно, на більших обсягах варто перейти на append-only журнал з компакцією.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
import aiofiles	# 📄 Асинхронне читання/запис JSON-файлу

# 🔠 Системні імпорти
import asyncio	# 🔐 Lock для записів
import json	# 📄 Серіалізація знімка
import logging	# 🧾 Логування операцій
import os	# 🔀 Атомарний replace
from datetime import datetime, timedelta	# ⏳ TTL
from pathlib import Path	# 📁 Шлях до знімка
from typing import Callable, Dict, List, Optional, Tuple, Union	# 🧰 Типи

# 🧩 Внутрішні модулі проєкту
from catalog_bridge.domain.models import CacheEntry, ResolvedProduct, utcnow
from catalog_bridge.errors import CacheError
from catalog_bridge.shared.metrics import inc_cache_write_failure
from catalog_bridge.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.cache")

DEFAULT_CACHE_PATH = "output/.tiger-cache.json"	# 🗂️ Фіксований відносний шлях
DEFAULT_TTL = timedelta(hours=24)	# ⏳ Термін придатності запису


class ResolutionCache:
    """💾 SKU → останній результат lookup, з TTL і write-through збереженням."""

    def __init__(
        self,
        path: Union[str, Path] = DEFAULT_CACHE_PATH,
        ttl: timedelta = DEFAULT_TTL,
        *,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._path = Path(path)
        self._ttl = ttl
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}
        self._write_lock = asyncio.Lock()
        logger.info("💾 ResolutionCache init (file=%s, ttl=%s)", self._path, self._ttl)

    @classmethod
    async def open(
        cls,
        path: Union[str, Path] = DEFAULT_CACHE_PATH,
        ttl: timedelta = DEFAULT_TTL,
        *,
        clock: Callable[[], datetime] = utcnow,
    ) -> "ResolutionCache":
        """🚀 Створює кеш і одразу підвантажує знімок."""
        cache = cls(path, ttl, clock=clock)
        await cache.load()
        return cache

    @property
    def path(self) -> Path:
        return self._path

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, sku: object) -> bool:
        return sku in self._entries

    # ================================
    # 📥 ЗАВАНТАЖЕННЯ
    # ================================
    async def load(self) -> None:
        """📥 Читає знімок; будь-яка проблема → порожній кеш."""
        try:
            entries = await self._read_snapshot()
        except CacheError as exc:
            logger.warning("⚠️ Знімок кешу пошкоджено (%s). Стартуємо з порожнього кешу.", exc)
            entries = []
        self._entries = {entry.sku: entry for entry in entries}
        logger.info("📖 Кеш завантажено: %d запис(ів).", len(self._entries))

    async def _read_snapshot(self) -> List[CacheEntry]:
        try:
            async with aiofiles.open(self._path, "r", encoding="utf-8") as file_handle:
                content = await file_handle.read()
        except FileNotFoundError:
            logger.info("📄 Файл кешу не знайдено, перший запуск.")
            return []
        except OSError as exc:
            raise CacheError("cache snapshot unreadable", details=str(exc)) from exc

        if not content.strip():
            return []
        try:
            raw = json.loads(content)
        except json.JSONDecodeError as exc:
            raise CacheError("cache snapshot is not valid JSON", details=str(exc)) from exc
        if not isinstance(raw, list):
            raise CacheError("cache snapshot must be a JSON array")

        entries: List[CacheEntry] = []
        for item in raw:
            try:
                entries.append(CacheEntry.from_dict(item))
            except (KeyError, TypeError, ValueError) as exc:
                logger.warning("⚠️ Пропускаємо некоректний запис кешу: %s", exc)
        return entries

    # ================================
    # 🔎 ЧИТАННЯ
    # ================================
    def get(self, sku: str) -> Tuple[Optional[ResolvedProduct], bool]:
        """
        🔎 Повертає `(product, found)`.

        (product, True) — свіжий hit; (None, True) — свіже підтвердження відсутності;
        (None, False) — запису немає або TTL вичерпано.
        """
        entry = self._entries.get(sku)
        if entry is None or not entry.is_fresh(self._ttl, self._clock()):
            return None, False
        return entry.product, True

    def entry(self, sku: str) -> Optional[CacheEntry]:
        """🧾 Сирий запис (включно із застарілими)."""
        return self._entries.get(sku)

    # ================================
    # 📝 ЗАПИС
    # ================================
    async def put(self, sku: str, product: Optional[ResolvedProduct]) -> CacheEntry:
        """📝 Upsert і негайний запис повного знімка."""
        now = self._clock()
        entry = CacheEntry.hit(sku, product, now) if product is not None else CacheEntry.miss(sku, now)
        async with self._write_lock:
            # памʼять оновлюється лише після flush: перерваний put нічого не лишає
            entries = {**self._entries, sku: entry}
            await self._flush_locked(entries)
            self._entries = entries
        logger.debug("📝 Кеш оновлено: %s (not_found=%s)", sku, entry.not_found)
        return entry

    async def clear(self) -> None:
        """🧹 Очищає кеш і перезаписує знімок."""
        async with self._write_lock:
            await self._flush_locked({})
            self._entries = {}

    async def _flush_locked(self, entries: Dict[str, CacheEntry]) -> None:
        payload = json.dumps(
            [entry.to_dict() for entry in entries.values()],
            indent=2,
            ensure_ascii=False,
        )
        tmp_path = self._path.with_name(self._path.name + ".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(tmp_path, "w", encoding="utf-8") as file_handle:
                await file_handle.write(payload)
            os.replace(tmp_path, self._path)	# 🔀 Атомарно підміняємо
        except OSError:
            # запис у памʼяті лишається, наступний успішний flush його збереже
            inc_cache_write_failure()
            logger.exception("❌ Не вдалося зберегти кеш у файл: %s", self._path)
            try:
                if tmp_path.exists():
                    tmp_path.unlink()
            except OSError:
                logger.debug("⚠️ Не вдалося прибрати %s", tmp_path)

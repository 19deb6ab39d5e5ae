"""
🧪 test_resolution_cache.py — персистентний TTL-кеш результатів

Перевіряє:
- Hit / підтверджений miss / відсутність
- TTL: застарілий запис ігнорується
- Write-through: знімок на диску після кожного put і відновлення при load
- Пошкоджений або відсутній знімок → порожній кеш
- Збій запису не втрачає результат у памʼяті
"""

import json
from datetime import datetime, timedelta, timezone

import pytest

from catalog_bridge.domain.models import CacheEntry, ResolvedProduct
from catalog_bridge.shared.cache.resolution_cache import ResolutionCache


class _Clock:
    def __init__(self):
        self.now = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self):
        return self.now


def _product():
    return ResolvedProduct(
        name="Boston",
        url="https://tiger.nl/producten/x/1-a/",
        image_urls=["https://tiger.nl/pim/528_aa", "https://tiger.nl/pim/528_aa", "https://tiger.nl/pim/528_bb"],
    )


@pytest.mark.asyncio
async def test_put_and_get_hit_and_miss(tmp_path):
    cache = await ResolutionCache.open(tmp_path / "cache.json")

    await cache.put("CO-T1", _product())
    await cache.put("CO-T2", None)

    product, found = cache.get("CO-T1")
    assert found is True
    assert product.image_urls == ["https://tiger.nl/pim/528_aa", "https://tiger.nl/pim/528_bb"]

    assert cache.get("CO-T2") == (None, True)
    assert cache.get("CO-T3") == (None, False)
    assert len(cache) == 2 and "CO-T2" in cache


@pytest.mark.asyncio
async def test_expired_entry_is_treated_as_absent(tmp_path):
    clock = _Clock()
    cache = ResolutionCache(tmp_path / "cache.json", timedelta(hours=24), clock=clock)

    await cache.put("CO-T1", _product())
    clock.now += timedelta(hours=23, minutes=59)
    assert cache.get("CO-T1")[1] is True

    clock.now += timedelta(minutes=2)
    assert cache.get("CO-T1") == (None, False)
    assert cache.entry("CO-T1") is not None


@pytest.mark.asyncio
async def test_naive_clock_is_treated_as_utc(tmp_path):
    now = [datetime(2026, 1, 1, 12, 0)]
    cache = ResolutionCache(tmp_path / "cache.json", timedelta(hours=24), clock=lambda: now[0])

    await cache.put("CO-T1", None)
    assert cache.get("CO-T1") == (None, True)

    now[0] += timedelta(hours=25)
    assert cache.get("CO-T1") == (None, False)


@pytest.mark.asyncio
async def test_write_through_snapshot_survives_reload(tmp_path):
    path = tmp_path / "nested" / "cache.json"
    cache = await ResolutionCache.open(path)

    await cache.put("CO-T1", _product())
    await cache.put("CO-T2", None)

    raw = json.loads(path.read_text(encoding="utf-8"))
    assert isinstance(raw, list) and len(raw) == 2
    miss = next(item for item in raw if item["sku"] == "CO-T2")
    assert miss["not_found"] is True and "product" not in miss

    reloaded = await ResolutionCache.open(path)
    product, found = reloaded.get("CO-T1")
    assert found and product.url == "https://tiger.nl/producten/x/1-a/"
    assert reloaded.get("CO-T2") == (None, True)


@pytest.mark.asyncio
async def test_missing_snapshot_is_empty(tmp_path):
    cache = await ResolutionCache.open(tmp_path / "absent.json")
    assert len(cache) == 0


@pytest.mark.asyncio
async def test_corrupt_snapshot_is_empty(tmp_path):
    path = tmp_path / "cache.json"
    path.write_text("{not json", encoding="utf-8")

    cache = await ResolutionCache.open(path)

    assert len(cache) == 0


@pytest.mark.asyncio
async def test_malformed_entries_are_skipped(tmp_path):
    path = tmp_path / "cache.json"
    good = CacheEntry.miss("CO-OK").to_dict()
    path.write_text(json.dumps([good, {"sku": "CO-BAD"}, {"sku": "CO-BOTH", "not_found": True,
                                                        "product": {"url": "u"}, "cached_at": good["cached_at"]}]),
                    encoding="utf-8")

    cache = await ResolutionCache.open(path)

    assert "CO-OK" in cache
    assert "CO-BAD" not in cache and "CO-BOTH" not in cache


@pytest.mark.asyncio
async def test_write_failure_keeps_in_memory_result(tmp_path):
    blocked = tmp_path / "blocked"
    blocked.mkdir()
    cache = ResolutionCache(blocked)

    await cache.put("CO-T1", _product())

    assert cache.get("CO-T1")[1] is True
    assert blocked.is_dir()


@pytest.mark.asyncio
async def test_clear_persists_empty_snapshot(tmp_path):
    path = tmp_path / "cache.json"
    cache = await ResolutionCache.open(path)
    await cache.put("CO-T1", None)

    await cache.clear()

    assert json.loads(path.read_text(encoding="utf-8")) == []
    assert len(cache) == 0


def test_cache_entry_rejects_hit_and_miss_together():
    with pytest.raises(ValueError):
        CacheEntry(sku="CO-T1", product=_product(), not_found=True)
    with pytest.raises(ValueError):
        CacheEntry(sku="CO-T1", product=None, not_found=False)

from __future__ import annotations

import hashlib
import json
import threading
import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Generic, TypeVar

from app.village_nav.core.metrics import metrics
from app.village_nav.domain.models import (
    NavigationGroup,
    NavigationItem,
    PermissionValidationResult,
    RoleNavigationMap,
    UserPermissionContext,
)

T = TypeVar("T")

ENTRY_SIZE_ESTIMATE_BYTES = 1024


@dataclass
class CacheEntry(Generic[T]):
    data: T
    timestamp: float
    ttl_seconds: float
    hits: int = 0


@dataclass(frozen=True)
class CacheStats:
    size: int
    max_size: int
    hit_rate: float
    total_hits: int
    oldest_entry: datetime | None
    newest_entry: datetime | None


@dataclass(frozen=True)
class CacheManagerStats:
    config: CacheStats
    items: CacheStats
    permissions: CacheStats
    groups: CacheStats
    total_memory_usage: int


class CacheKeyGenerator:
    @staticmethod
    def navigation_config(role: str) -> str:
        return f"nav_config_{role}"

    @classmethod
    def filtered_items(cls, role: str, permissions: Iterable[str]) -> str:
        return f"nav_filtered_{role}_{cls.fingerprint(sorted(permissions))}"

    @classmethod
    def permission_check(cls, item_id: str, context: UserPermissionContext) -> str:
        context_hash = cls.fingerprint(
            {
                "role": context.role,
                "permissions": sorted(context.permissions),
                "tenant_id": context.tenant_id,
            }
        )
        return f"perm_check_{item_id}_{context_hash}"

    @staticmethod
    def grouped_items(role: str, group_id: str | None = None) -> str:
        return f"nav_grouped_{role}_{group_id}" if group_id else f"nav_grouped_{role}_all"

    @staticmethod
    def fingerprint(payload: object) -> str:
        payload_bytes = json.dumps(payload, sort_keys=True, default=str).encode("utf-8")
        return hashlib.sha256(payload_bytes).hexdigest()[:16]


class NavigationCache(Generic[T]):
    """Bounded TTL cache with LRU-equivalent eviction.

    Reads move an entry to the most-recent position; writes purge expired
    entries and then evict the oldest remaining key when full. Expiry is only
    checked lazily, on read or on the next write.
    """

    def __init__(
        self,
        max_size: int = 100,
        default_ttl_seconds: float = 300.0,
        now: Callable[[], float] | None = None,
    ) -> None:
        self.max_size = max_size
        self.default_ttl_seconds = default_ttl_seconds
        self._now = now or time.time
        self._entries: dict[str, CacheEntry[T]] = {}
        self._lock = threading.RLock()

    def get(self, key: str) -> T | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if self._is_expired(entry, self._now()):
                del self._entries[key]
                return None
            entry.hits += 1
            del self._entries[key]
            self._entries[key] = entry
            return entry.data

    def set(self, key: str, data: T, ttl_seconds: float | None = None) -> None:
        with self._lock:
            self._cleanup()
            if len(self._entries) >= self.max_size and self._entries:
                oldest_key = next(iter(self._entries))
                del self._entries[oldest_key]
            self._entries[key] = CacheEntry(
                data=data,
                timestamp=self._now(),
                ttl_seconds=self.default_ttl_seconds if ttl_seconds is None else ttl_seconds,
            )

    def has(self, key: str) -> bool:
        return self.get(key) is not None

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def keys(self) -> list[str]:
        with self._lock:
            return list(self._entries.keys())

    def __len__(self) -> int:
        return len(self._entries)

    def get_stats(self) -> CacheStats:
        with self._lock:
            entries = list(self._entries.values())
        size = len(entries)
        total_hits = sum(entry.hits for entry in entries)
        timestamps = [entry.timestamp for entry in entries]
        # Hit rate is hits over hits plus resident entries, not over misses.
        hit_rate = total_hits / (total_hits + size) if total_hits > 0 else 0.0
        return CacheStats(
            size=size,
            max_size=self.max_size,
            hit_rate=hit_rate,
            total_hits=total_hits,
            oldest_entry=_to_datetime(min(timestamps)) if timestamps else None,
            newest_entry=_to_datetime(max(timestamps)) if timestamps else None,
        )

    def _cleanup(self) -> None:
        now = self._now()
        stale_keys = [key for key, entry in self._entries.items() if self._is_expired(entry, now)]
        for key in stale_keys:
            del self._entries[key]

    @staticmethod
    def _is_expired(entry: CacheEntry[T], now: float) -> bool:
        return now - entry.timestamp > entry.ttl_seconds


class NavigationCacheManager:
    def __init__(
        self,
        *,
        enabled: bool = True,
        max_config_entries: int = 10,
        max_item_entries: int = 50,
        max_permission_entries: int = 200,
        ttl_seconds: float = 300.0,
        permission_ttl_seconds: float = 120.0,
        now: Callable[[], float] | None = None,
    ) -> None:
        self.is_enabled = enabled
        self.permission_ttl_seconds = permission_ttl_seconds
        self.config_cache: NavigationCache[RoleNavigationMap] = NavigationCache(max_config_entries, ttl_seconds, now)
        self.items_cache: NavigationCache[tuple[NavigationItem, ...]] = NavigationCache(
            max_item_entries, ttl_seconds, now
        )
        self.permission_cache: NavigationCache[PermissionValidationResult] = NavigationCache(
            max_permission_entries, ttl_seconds, now
        )
        self.groups_cache: NavigationCache[tuple[NavigationGroup, ...]] = NavigationCache(
            max_config_entries, ttl_seconds, now
        )
        self._lock = threading.RLock()

    @classmethod
    def from_settings(cls, settings, now: Callable[[], float] | None = None) -> NavigationCacheManager:
        return cls(
            enabled=settings.NAV_CACHE_ENABLED,
            max_config_entries=settings.NAV_CACHE_MAX_CONFIG_ENTRIES,
            max_item_entries=settings.NAV_CACHE_MAX_ITEM_ENTRIES,
            max_permission_entries=settings.NAV_CACHE_MAX_PERMISSION_ENTRIES,
            ttl_seconds=settings.NAV_CACHE_TTL_SECONDS,
            permission_ttl_seconds=settings.NAV_PERMISSION_CACHE_TTL_SECONDS,
            now=now,
        )

    def cache_navigation_config(self, role: str, config: RoleNavigationMap) -> None:
        if not self.is_enabled:
            return
        with self._lock:
            self.config_cache.set(CacheKeyGenerator.navigation_config(role), config)

    def get_cached_navigation_config(self, role: str) -> RoleNavigationMap | None:
        if not self.is_enabled:
            return None
        with self._lock:
            return self._lookup("config", self.config_cache, CacheKeyGenerator.navigation_config(role))

    def cache_filtered_items(
        self,
        role: str,
        permissions: Iterable[str],
        items: Iterable[NavigationItem],
    ) -> None:
        if not self.is_enabled:
            return
        with self._lock:
            self.items_cache.set(CacheKeyGenerator.filtered_items(role, permissions), tuple(items))

    def get_cached_filtered_items(
        self,
        role: str,
        permissions: Iterable[str],
    ) -> tuple[NavigationItem, ...] | None:
        if not self.is_enabled:
            return None
        with self._lock:
            return self._lookup("items", self.items_cache, CacheKeyGenerator.filtered_items(role, permissions))

    def cache_permission_check(
        self,
        item_id: str,
        context: UserPermissionContext,
        result: PermissionValidationResult,
    ) -> None:
        if not self.is_enabled:
            return
        with self._lock:
            self.permission_cache.set(
                CacheKeyGenerator.permission_check(item_id, context),
                result,
                self.permission_ttl_seconds,
            )

    def get_cached_permission_check(
        self,
        item_id: str,
        context: UserPermissionContext,
    ) -> PermissionValidationResult | None:
        if not self.is_enabled:
            return None
        with self._lock:
            return self._lookup(
                "permissions",
                self.permission_cache,
                CacheKeyGenerator.permission_check(item_id, context),
            )

    def cache_navigation_groups(self, role: str, groups: Iterable[NavigationGroup]) -> None:
        if not self.is_enabled:
            return
        with self._lock:
            self.groups_cache.set(CacheKeyGenerator.grouped_items(role), tuple(groups))

    def get_cached_navigation_groups(self, role: str) -> tuple[NavigationGroup, ...] | None:
        if not self.is_enabled:
            return None
        with self._lock:
            return self._lookup("groups", self.groups_cache, CacheKeyGenerator.grouped_items(role))

    def invalidate_role(self, role: str) -> None:
        with self._lock:
            for key in (CacheKeyGenerator.navigation_config(role), CacheKeyGenerator.grouped_items(role)):
                self.config_cache.delete(key)
                self.groups_cache.delete(key)
            # Item keys only carry a permission hash, so the whole cache goes.
            self.items_cache.clear()

    def invalidate_user(self, user_id: str) -> None:
        # Permission check keys are not scoped by user.
        with self._lock:
            self.permission_cache.clear()

    def clear_all(self) -> None:
        with self._lock:
            self.config_cache.clear()
            self.items_cache.clear()
            self.permission_cache.clear()
            self.groups_cache.clear()

    def get_stats(self) -> CacheManagerStats:
        with self._lock:
            config = self.config_cache.get_stats()
            items = self.items_cache.get_stats()
            permissions = self.permission_cache.get_stats()
            groups = self.groups_cache.get_stats()
        total_entries = config.size + items.size + permissions.size + groups.size
        return CacheManagerStats(
            config=config,
            items=items,
            permissions=permissions,
            groups=groups,
            total_memory_usage=total_entries * ENTRY_SIZE_ESTIMATE_BYTES,
        )

    def set_enabled(self, enabled: bool) -> None:
        self.is_enabled = enabled
        if not enabled:
            self.clear_all()

    @staticmethod
    def _lookup(name: str, cache: NavigationCache[Any], key: str) -> Any:
        value = cache.get(key)
        metrics.record_cache_lookup(cache=name, hit=value is not None)
        return value


def memoize(
    fn: Callable[..., T],
    cache: NavigationCache[T],
    key_fn: Callable[..., str],
    ttl_seconds: float | None = None,
) -> Callable[..., T]:
    def wrapper(*args, **kwargs) -> T:
        key = key_fn(*args, **kwargs)
        cached = cache.get(key)
        if cached is not None:
            return cached
        result = fn(*args, **kwargs)
        cache.set(key, result, ttl_seconds)
        return result

    return wrapper


def _to_datetime(timestamp: float) -> datetime:
    return datetime.fromtimestamp(timestamp, tz=timezone.utc)

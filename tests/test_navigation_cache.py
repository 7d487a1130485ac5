from app.village_nav.domain.models import PermissionValidationResult, UserPermissionContext
from app.village_nav.domain.navigation_config import NAVIGATION_CONFIG
from app.village_nav.services.cache import CacheKeyGenerator, NavigationCache, NavigationCacheManager, memoize


class FakeClock:
    def __init__(self, start: float = 1_000.0) -> None:
        self.value = start

    def __call__(self) -> float:
        return self.value

    def advance(self, seconds: float) -> None:
        self.value += seconds


def test_set_then_get_returns_value():
    cache = NavigationCache(max_size=3, default_ttl_seconds=10, now=FakeClock())
    cache.set("a", 1)
    assert cache.get("a") == 1
    assert cache.has("a")


def test_entry_expires_after_ttl_and_is_removed():
    clock = FakeClock()
    cache = NavigationCache(max_size=3, default_ttl_seconds=10, now=clock)
    cache.set("a", "value", ttl_seconds=5)

    clock.advance(5)
    assert cache.get("a") == "value"

    clock.advance(0.5)
    assert cache.get("a") is None
    assert cache.keys() == []


def test_expired_entries_are_purged_on_write():
    clock = FakeClock()
    cache = NavigationCache(max_size=3, default_ttl_seconds=1, now=clock)
    cache.set("old", 1)
    clock.advance(2)
    cache.set("new", 2)
    assert cache.keys() == ["new"]


def test_overflow_evicts_first_inserted_key():
    cache = NavigationCache(max_size=3, default_ttl_seconds=60, now=FakeClock())
    for key in ("a", "b", "c", "d"):
        cache.set(key, key)
    assert cache.keys() == ["b", "c", "d"]
    assert cache.get("a") is None


def test_read_exempts_key_from_eviction():
    cache = NavigationCache(max_size=3, default_ttl_seconds=60, now=FakeClock())
    for key in ("a", "b", "c"):
        cache.set(key, key)
    assert cache.get("a") == "a"
    cache.set("d", "d")
    assert cache.keys() == ["c", "a", "d"]
    assert cache.get("b") is None


def test_delete_and_clear():
    cache = NavigationCache(max_size=3, now=FakeClock())
    cache.set("a", 1)
    assert cache.delete("a") is True
    assert cache.delete("a") is False
    cache.set("b", 2)
    cache.clear()
    assert len(cache) == 0


def test_stats_use_hits_over_hits_plus_size():
    clock = FakeClock()
    cache = NavigationCache(max_size=5, now=clock)
    assert cache.get_stats().hit_rate == 0.0

    cache.set("a", 1)
    clock.advance(1)
    cache.set("b", 2)
    cache.get("a")
    cache.get("a")
    cache.get("b")
    cache.get("missing")

    stats = cache.get_stats()
    assert stats.size == 2
    assert stats.max_size == 5
    assert stats.total_hits == 3
    assert stats.hit_rate == 3 / 5
    assert stats.oldest_entry.timestamp() == 1_000.0
    assert stats.newest_entry.timestamp() == 1_001.0


def test_key_generator_is_order_independent():
    assert CacheKeyGenerator.navigation_config("superadmin") == "nav_config_superadmin"
    assert CacheKeyGenerator.filtered_items("r", ["b", "a"]) == CacheKeyGenerator.filtered_items("r", ["a", "b"])
    assert CacheKeyGenerator.grouped_items("r") == "nav_grouped_r_all"
    assert CacheKeyGenerator.grouped_items("r", "main") == "nav_grouped_r_main"

    first = UserPermissionContext(role="r", permissions=("x", "y"), tenant_id="t1")
    second = UserPermissionContext(role="r", permissions=("y", "x"), tenant_id="t1")
    other_tenant = UserPermissionContext(role="r", permissions=("x", "y"), tenant_id="t2")
    assert CacheKeyGenerator.permission_check("i", first) == CacheKeyGenerator.permission_check("i", second)
    assert CacheKeyGenerator.permission_check("i", first) != CacheKeyGenerator.permission_check("i", other_tenant)
    assert CacheKeyGenerator.permission_check("i", first).startswith("perm_check_i_")


def test_manager_round_trips_each_cache():
    manager = NavigationCacheManager(now=FakeClock())
    role_map = NAVIGATION_CONFIG["admin_officer"]
    context = UserPermissionContext(role="admin_officer", permissions=role_map.permissions)
    result = PermissionValidationResult(allowed=True, reason="User has required permission")

    manager.cache_navigation_config("admin_officer", role_map)
    manager.cache_filtered_items("admin_officer", context.permissions, role_map.items)
    manager.cache_permission_check("fees", context, result)
    manager.cache_navigation_groups("admin_officer", role_map.groups)

    assert manager.get_cached_navigation_config("admin_officer") is role_map
    assert manager.get_cached_filtered_items("admin_officer", reversed(context.permissions)) == role_map.items
    assert manager.get_cached_permission_check("fees", context) == result
    assert manager.get_cached_navigation_groups("admin_officer") == role_map.groups

    stats = manager.get_stats()
    assert stats.total_memory_usage == 4 * 1024
    assert stats.config.total_hits == 1


def test_permission_checks_use_their_own_ttl():
    clock = FakeClock()
    manager = NavigationCacheManager(ttl_seconds=300, permission_ttl_seconds=120, now=clock)
    context = UserPermissionContext(role="household_head")
    manager.cache_permission_check("rules", context, PermissionValidationResult(allowed=False))
    manager.cache_navigation_config("household_head", NAVIGATION_CONFIG["household_head"])

    clock.advance(121)
    assert manager.get_cached_permission_check("rules", context) is None
    assert manager.get_cached_navigation_config("household_head") is not None


def test_invalidate_role_is_coarse_for_items():
    manager = NavigationCacheManager(now=FakeClock())
    for role in ("admin_head", "admin_officer"):
        role_map = NAVIGATION_CONFIG[role]
        manager.cache_navigation_config(role, role_map)
        manager.cache_navigation_groups(role, role_map.groups)
        manager.cache_filtered_items(role, role_map.permissions, role_map.items)

    manager.invalidate_role("admin_head")

    assert manager.get_cached_navigation_config("admin_head") is None
    assert manager.get_cached_navigation_groups("admin_head") is None
    assert manager.get_cached_navigation_config("admin_officer") is not None
    assert len(manager.items_cache) == 0


def test_invalidate_user_clears_all_permission_checks():
    manager = NavigationCacheManager(now=FakeClock())
    context = UserPermissionContext(role="household_head", user_id="someone-else")
    manager.cache_permission_check("rules", context, PermissionValidationResult(allowed=True))
    manager.invalidate_user("u-1")
    assert len(manager.permission_cache) == 0


def test_disabled_manager_stores_nothing():
    manager = NavigationCacheManager(now=FakeClock())
    manager.cache_navigation_config("superadmin", NAVIGATION_CONFIG["superadmin"])
    manager.set_enabled(False)
    assert len(manager.config_cache) == 0

    manager.cache_navigation_config("superadmin", NAVIGATION_CONFIG["superadmin"])
    assert manager.get_cached_navigation_config("superadmin") is None
    assert len(manager.config_cache) == 0


def test_memoize_caches_results():
    calls = []

    def load(role: str) -> str:
        calls.append(role)
        return role.upper()

    cache = NavigationCache(max_size=2, now=FakeClock())
    cached_load = memoize(load, cache, key_fn=lambda role: f"upper_{role}")
    assert cached_load("a") == "A"
    assert cached_load("a") == "A"
    assert calls == ["a"]

from app.village_nav.core.config import Settings
from app.village_nav.services.analytics import NavigationAnalytics
from app.village_nav.services.cache import NavigationCacheManager


def test_settings_defaults(monkeypatch):
    monkeypatch.delenv("NAV_CACHE_ENABLED", raising=False)
    settings = Settings(_env_file=None)
    assert settings.APP_NAME == "VILLAGE-NAV"
    assert settings.NAV_CACHE_TTL_SECONDS == 300
    assert settings.NAV_PERMISSION_CACHE_TTL_SECONDS == 120
    assert settings.NAV_BREADCRUMB_MAX_ITEMS == 6
    assert settings.NAV_LOG_ACCESS is False
    assert settings.NAV_ANALYTICS_ENABLED is True
    assert settings.NAV_ANALYTICS_MAX_EVENTS == 1000


def test_settings_read_from_environment(monkeypatch):
    monkeypatch.setenv("NAV_CACHE_ENABLED", "false")
    monkeypatch.setenv("NAV_CACHE_MAX_ITEM_ENTRIES", "7")
    monkeypatch.setenv("ENVIRONMENT", "development")
    settings = Settings(_env_file=None)
    assert settings.NAV_CACHE_ENABLED is False
    assert settings.NAV_CACHE_MAX_ITEM_ENTRIES == 7
    assert settings.debug is True


def test_cache_manager_from_settings(monkeypatch):
    monkeypatch.setenv("NAV_CACHE_MAX_PERMISSION_ENTRIES", "3")
    monkeypatch.setenv("NAV_PERMISSION_CACHE_TTL_SECONDS", "5")
    manager = NavigationCacheManager.from_settings(Settings(_env_file=None))
    assert manager.permission_cache.max_size == 3
    assert manager.permission_ttl_seconds == 5


def test_analytics_from_settings(monkeypatch):
    monkeypatch.setenv("NAV_ANALYTICS_ENABLED", "false")
    analytics = NavigationAnalytics.from_settings(Settings(_env_file=None))
    assert analytics.is_enabled is False

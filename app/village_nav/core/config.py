from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env")

    APP_NAME: str = "VILLAGE-NAV"
    ENVIRONMENT: str = "production"
    SECRET_KEY: str = "change-me"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    NAV_CACHE_ENABLED: bool = True
    NAV_CACHE_TTL_SECONDS: float = 300
    NAV_PERMISSION_CACHE_TTL_SECONDS: float = 120
    NAV_CACHE_MAX_CONFIG_ENTRIES: int = 10
    NAV_CACHE_MAX_ITEM_ENTRIES: int = 100
    NAV_CACHE_MAX_PERMISSION_ENTRIES: int = 500
    NAV_BREADCRUMB_MAX_ITEMS: int = 6
    NAV_LOG_ACCESS: bool = False
    NAV_ANALYTICS_ENABLED: bool = True
    NAV_ANALYTICS_MAX_EVENTS: int = 1000
    METRICS_ENABLED: bool = True

    @property
    def debug(self) -> bool:
        return self.ENVIRONMENT.lower() == "development"


settings = Settings()

from datetime import timedelta
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
	# Rates backend
	API_BASE: str | None = None
	BACKEND_URL: str | None = None
	RUNTIME_ORIGIN: str | None = None
	PUBLIC_API_BASE: str = 'https://api.exchangerate.host'
	HTTP_TIMEOUT_MS: int = 12000

	# Cache
	REDIS_URL: str = ''
	RATES_CACHE_TTL_HOURS: int = 24
	CACHE_DISABLED: bool = False

	DEFAULT_BASE_CURRENCY: str = 'USD'

	# Application
	APP_NAME: str = 'Daily Rates Hub'
	DEBUG: bool = False
	LOG_LEVEL: str = 'INFO'
	LOG_JSON: bool = False

	model_config = SettingsConfigDict(env_file='.env', case_sensitive=False, extra='ignore')

	@property
	def rates_cache_ttl(self) -> timedelta:
		return timedelta(hours=self.RATES_CACHE_TTL_HOURS)


@lru_cache
def get_settings() -> Settings:
	return Settings()

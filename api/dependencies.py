import logging
from typing import Annotated

from fastapi import Depends

from application.services import ConversionService, CurrencyService, RatesController
from config.settings import get_settings
from infrastructure.cache.key_value import InMemoryKeyValueStore, KeyValueStore, RedisKeyValueStore
from infrastructure.cache.rates_cache import RatesCacheStore
from infrastructure.endpoints.resolver import EndpointResolver
from infrastructure.http.client import HttpClient
from infrastructure.providers import RatesProvider

logger = logging.getLogger(__name__)


class AppDependencies:
	"""Container for application-wide singleton dependencies."""

	store: KeyValueStore | None = None
	controller: RatesController | None = None


deps = AppDependencies()


def init_dependencies() -> None:
	"""Initialize all singleton dependencies. Called at app startup."""
	logger.info('Initializing dependencies...')
	settings = get_settings()

	resolver = EndpointResolver(
		primary_url=settings.API_BASE,
		secondary_url=settings.BACKEND_URL,
		runtime_origin=settings.RUNTIME_ORIGIN,
		fallback_base=settings.PUBLIC_API_BASE,
	)
	provider = RatesProvider(
		http_client=HttpClient(timeout_ms=settings.HTTP_TIMEOUT_MS),
		resolver=resolver,
		timeout_ms=settings.HTTP_TIMEOUT_MS,
	)
	logger.info(f'Rates backend: {provider.api_base}')

	if settings.REDIS_URL:
		deps.store = RedisKeyValueStore.from_url(settings.REDIS_URL)
	else:
		deps.store = InMemoryKeyValueStore()

	deps.controller = RatesController(
		provider=provider,
		cache=RatesCacheStore(deps.store, ttl=settings.rates_cache_ttl),
		base=settings.DEFAULT_BASE_CURRENCY,
		use_cache=not settings.CACHE_DISABLED,
	)
	logger.info('Dependencies initialized')


async def bootstrap() -> None:
	"""Initial rates load. Called after init_dependencies() at startup."""
	if deps.controller is None:
		raise RuntimeError('Dependencies not initialized. Call init_dependencies() first.')

	view = await deps.controller.load()
	logger.info(f'Bootstrap complete: {view.status.value} for {view.base}')


async def cleanup_dependencies() -> None:
	logger.info('Cleaning up dependencies...')

	if deps.controller:
		await deps.controller.close()
	if isinstance(deps.store, RedisKeyValueStore):
		deps.store.close()

	logger.info('Cleanup complete')


def get_rates_controller() -> RatesController:
	if deps.controller is None:
		raise RuntimeError('Rates controller not initialized')
	return deps.controller


def get_conversion_service(
	controller: Annotated[RatesController, Depends(get_rates_controller)],
) -> ConversionService:
	return ConversionService(controller)


def get_currency_service(
	controller: Annotated[RatesController, Depends(get_rates_controller)],
) -> CurrencyService:
	return CurrencyService(controller)

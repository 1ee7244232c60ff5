import asyncio
import contextlib
import logging
from collections.abc import Callable
from dataclasses import replace

from domain.exceptions.rates import TransportError
from domain.models.rates import (
	DEFAULT_BASE_CURRENCY,
	CurrencySymbol,
	DailyRates,
	RatesPayload,
	RatesStatus,
	RatesView,
	normalize_currency_code,
)
from domain.time import now_ms
from infrastructure.cache.rates_cache import RatesCacheStore
from infrastructure.providers.rates_provider import RatesProvider

logger = logging.getLogger(__name__)

Listener = Callable[[RatesView], None]


class RatesController:
	"""Owns the rates view for the selected base currency.

	The view moves through IDLE -> LOADING -> READY | ERROR and is only ever
	replaced as a whole, so a snapshot never mixes two bases. Only one fetch
	cycle runs at a time for the selected base; each base selection starts a
	new generation, and results belonging to an older generation are dropped.
	"""

	def __init__(
		self,
		provider: RatesProvider,
		cache: RatesCacheStore,
		base: str = DEFAULT_BASE_CURRENCY,
		use_cache: bool = True,
		clock: Callable[[], int] = now_ms,
	):
		self.provider = provider
		self.cache = cache
		self.use_cache = use_cache
		self.clock = clock

		self._base = normalize_currency_code(base)
		self._state = RatesView.idle(self._base)
		self._listeners: list[Listener] = []
		self._generation = 0
		self._in_flight: int | None = None

	@property
	def selected_base(self) -> str:
		return self._base

	@property
	def is_fetching(self) -> bool:
		return self._in_flight is not None and self._in_flight == self._generation

	def get_state(self) -> RatesView:
		return self._state

	def subscribe(self, listener: Listener) -> Callable[[], None]:
		self._listeners.append(listener)

		def unsubscribe() -> None:
			with contextlib.suppress(ValueError):
				self._listeners.remove(listener)

		return unsubscribe

	def _transition(self, state: RatesView) -> None:
		self._state = state
		for listener in list(self._listeners):
			try:
				listener(state)
			except Exception:
				logger.exception(f'Rates listener {listener!r} failed')

	async def load(self, force: bool = False) -> RatesView:
		if self.is_fetching:
			logger.debug(f'Rates fetch for {self._base} already in flight, skipping')
			return self._state

		generation = self._generation
		base = self._base

		if not force and self.use_cache:
			cached = self.cache.read(base)
			if cached is not None:
				self._transition(RatesView.from_payload(cached))
				return self._state

		self._in_flight = generation
		self._transition(replace(self._state, status=RatesStatus.LOADING, error=None))
		try:
			symbols, daily = await self._fetch_fresh(base)
			payload = RatesPayload(
				base=daily.base or base,
				date=daily.date,
				rates=daily.rates,
				symbols=symbols,
				last_updated=self.clock(),
			)
			payload = self.cache.write(base, payload)

			if generation != self._generation:
				logger.info(f'Dropping {base} rates, base is now {self._base}')
				return self._state

			logger.info(f'Loaded {len(payload.rates)} rates for {payload.base} from {self.provider.name}')
			self._transition(RatesView.from_payload(payload))

		except TransportError as e:
			self._fail(generation, base, str(e))
		except Exception as e:
			logger.exception(f'Unexpected failure loading rates for {base}')
			self._fail(generation, base, str(e) or e.__class__.__name__)
		finally:
			if self._in_flight == generation:
				self._in_flight = None

		return self._state

	async def refresh(self) -> RatesView:
		return await self.load(force=True)

	async def select_base(self, base: str) -> RatesView:
		base = normalize_currency_code(base)
		if base == self._base:
			return self._state

		logger.info(f'Base currency changed {self._base} -> {base}')
		self._generation += 1
		self._base = base
		self._transition(RatesView.idle(base))
		return await self.load(force=False)

	async def _fetch_fresh(self, base: str) -> tuple[dict[str, CurrencySymbol], DailyRates]:
		try:
			async with asyncio.TaskGroup() as tg:
				symbols_task = tg.create_task(self.provider.get_symbols())
				rates_task = tg.create_task(self.provider.get_daily_rates(base))
		except ExceptionGroup as group:
			raise group.exceptions[0]

		return symbols_task.result(), rates_task.result()

	def _fail(self, generation: int, base: str, message: str) -> None:
		if generation != self._generation:
			logger.info(f'Ignoring failed {base} fetch, base is now {self._base}')
			return

		logger.error(f'Loading rates for {base} failed: {message}')
		# previous data for this base stays visible next to the error
		self._transition(replace(self._state, status=RatesStatus.ERROR, error=message))

	async def close(self) -> None:
		await self.provider.close()

import json
import logging
from collections.abc import Callable
from dataclasses import replace
from datetime import timedelta

from domain.models.rates import DEFAULT_BASE_CURRENCY, CurrencySymbol, RatesPayload
from domain.time import now_ms
from infrastructure.cache.key_value import KeyValueStore

logger = logging.getLogger(__name__)

DEFAULT_TTL = timedelta(hours=24)


class RatesCacheStore:
	"""One merged rates snapshot per base currency, valid for ``ttl``.

	Reads and writes are best-effort: an unreadable, stale or missing record
	is reported as absent, and a failed write is logged and dropped.
	"""

	KEY_PREFIX = 'rates:daily:v1:'

	def __init__(
		self,
		store: KeyValueStore,
		ttl: timedelta = DEFAULT_TTL,
		clock: Callable[[], int] = now_ms,
	):
		self.store = store
		self.ttl = ttl
		self.clock = clock
		self._last_stamps: dict[str, int] = {}

	@property
	def ttl_ms(self) -> int:
		return int(self.ttl.total_seconds() * 1000)

	def _make_key(self, base: str | None) -> str:
		return f'{self.KEY_PREFIX}{(base or DEFAULT_BASE_CURRENCY).upper()}'

	def is_fresh(self, last_updated: int) -> bool:
		return self.clock() - last_updated < self.ttl_ms

	def read(self, base: str | None) -> RatesPayload | None:
		key = self._make_key(base)
		try:
			raw = self.store.read(key)
		except Exception as e:
			logger.warning(f'Cache read for {key} failed: {e}')
			return None

		if not raw:
			logger.debug(f'Cache read for {key}: MISS')
			return None

		payload = self._deserialize(raw)
		if payload is None:
			logger.debug(f'Cache read for {key}: unreadable record')
			return None

		if not self.is_fresh(payload.last_updated):
			logger.debug(f'Cache read for {key}: STALE')
			return None

		logger.debug(f'Cache read for {key}: HIT')
		return payload

	def write(self, base: str | None, payload: RatesPayload) -> RatesPayload:
		"""Persist ``payload`` under the key for ``base`` and return it freshly stamped."""
		key = self._make_key(base)
		stamp = max(self.clock(), self._last_stamps.get(key, 0), self._stored_stamp(key))
		stamped = replace(payload, last_updated=stamp)

		try:
			self.store.write(key, self._serialize(stamped))
		except Exception as e:
			logger.warning(f'Cache write for {key} failed, continuing without it: {e}')
			return stamped

		self._last_stamps[key] = stamp
		logger.debug(f'Cache write for {key} at {stamp}')
		return stamped

	def _stored_stamp(self, key: str) -> int:
		"""``lastUpdated`` of the record already under ``key``, which another process may have written."""
		try:
			raw = self.store.read(key)
		except Exception as e:
			logger.warning(f'Cache read for {key} failed before write: {e}')
			return 0

		payload = self._deserialize(raw) if raw else None
		return payload.last_updated if payload else 0

	@staticmethod
	def _serialize(payload: RatesPayload) -> str:
		return json.dumps(
			{
				'base': payload.base,
				'date': payload.date,
				'rates': payload.rates,
				'symbols': {
					code: {'code': symbol.code, 'description': symbol.description}
					for code, symbol in payload.symbols.items()
				},
				'lastUpdated': payload.last_updated,
			}
		)

	@staticmethod
	def _deserialize(raw: str) -> RatesPayload | None:
		try:
			data = json.loads(raw)
			last_updated = data['lastUpdated']
			if isinstance(last_updated, bool) or not isinstance(last_updated, int):
				return None
			date = data.get('date')

			return RatesPayload(
				base=str(data['base']).upper(),
				date=date if isinstance(date, str) and date else None,
				rates={str(code).upper(): float(rate) for code, rate in (data.get('rates') or {}).items()},
				symbols={
					str(code).upper(): CurrencySymbol(
						code=str(info.get('code') or code).upper(),
						description=str(info.get('description') or ''),
					)
					for code, info in (data.get('symbols') or {}).items()
				},
				last_updated=last_updated,
			)
		except (ValueError, TypeError, KeyError, AttributeError):
			return None

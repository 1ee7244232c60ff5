import logging
import math
from typing import Any

from domain.models.rates import DEFAULT_BASE_CURRENCY, CurrencySymbol, DailyRates
from infrastructure.endpoints.resolver import EndpointResolver
from infrastructure.http.client import DEFAULT_TIMEOUT_MS, HttpClient
from infrastructure.http.urls import join_url

logger = logging.getLogger(__name__)


def _normalize_code(value: Any) -> str | None:
	if isinstance(value, str) and value.strip():
		return value.strip().upper()
	return None


def _normalize_date(value: Any) -> str | None:
	if isinstance(value, str) and value.strip():
		return value.strip()
	return None


def _normalize_rates(raw: Any) -> dict[str, float]:
	if not isinstance(raw, dict):
		return {}

	rates: dict[str, float] = {}
	for code, value in raw.items():
		code = _normalize_code(code)
		if code is None or isinstance(value, bool) or not isinstance(value, int | float):
			continue
		if math.isfinite(value) and value > 0:
			rates[code] = float(value)
	return rates


def _normalize_symbols(raw: Any) -> dict[str, CurrencySymbol]:
	if not isinstance(raw, dict):
		return {}

	symbols: dict[str, CurrencySymbol] = {}
	for key, info in raw.items():
		if isinstance(info, dict):
			code = _normalize_code(info.get('code')) or _normalize_code(key)
			description = info.get('description') or info.get('name') or ''
		elif isinstance(info, str):
			code = _normalize_code(key)
			description = info
		else:
			continue

		if code is not None:
			symbols[code] = CurrencySymbol(code=code, description=str(description))
	return symbols


class RatesProvider:
	"""Fetches symbols and latest rates from an exchangerate.host compatible API.

	Responses come in a couple of shapes depending on the backend; both are
	normalized here. A shape we do not recognise yields empty data rather than
	an error, only transport failures from ``HttpClient`` propagate.
	"""

	LATEST_PATH = '/latest'
	SYMBOLS_PATH = '/symbols'

	def __init__(
		self,
		http_client: HttpClient,
		resolver: EndpointResolver,
		timeout_ms: int = DEFAULT_TIMEOUT_MS,
	):
		self.http_client = http_client
		self.resolver = resolver
		self.timeout_ms = timeout_ms
		self.api_base = resolver.resolve()

	@property
	def name(self) -> str:
		if self.resolver.is_public_fallback(self.api_base):
			return 'exchangerate.host'
		return self.api_base

	async def get_daily_rates(self, base: str | None = None) -> DailyRates:
		base = _normalize_code(base) or DEFAULT_BASE_CURRENCY
		url = join_url(self.api_base, self.LATEST_PATH)
		data = await self.http_client.get(url, timeout_ms=self.timeout_ms, query={'base': base})

		if isinstance(data, dict):
			if data.get('rates') and data.get('base'):
				return DailyRates(
					base=_normalize_code(data['base']) or base,
					date=_normalize_date(data.get('date')),
					rates=_normalize_rates(data['rates']),
				)

			nested = data.get('data')
			if isinstance(nested, dict) and nested.get('rates'):
				return DailyRates(
					base=_normalize_code(nested.get('base')) or base,
					date=_normalize_date(nested.get('date')),
					rates=_normalize_rates(nested['rates']),
				)

		logger.warning(f'Unrecognised latest rates response from {self.name}, using empty rates')
		return DailyRates(base=base, date=None, rates={})

	async def get_symbols(self) -> dict[str, CurrencySymbol]:
		url = join_url(self.api_base, self.SYMBOLS_PATH)
		data = await self.http_client.get(url, timeout_ms=self.timeout_ms)

		if isinstance(data, dict):
			if isinstance(data.get('symbols'), dict):
				return _normalize_symbols(data['symbols'])

			nested = data.get('data')
			if isinstance(nested, dict) and nested.get('symbols'):
				return _normalize_symbols(nested['symbols'])

		logger.warning(f'Unrecognised symbols response from {self.name}, using empty symbols')
		return {}

	async def close(self) -> None:
		await self.http_client.close()

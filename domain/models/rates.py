from dataclasses import dataclass, field
from enum import Enum

from domain.exceptions.rates import InvalidCurrencyError

DEFAULT_BASE_CURRENCY = 'USD'


def normalize_currency_code(code: str | None) -> str:
	"""Uppercase a three letter currency code, rejecting anything else."""
	if not isinstance(code, str):
		raise InvalidCurrencyError(f'Currency code must be a string, got {type(code).__name__}')
	normalized = code.strip().upper()
	if len(normalized) != 3 or not normalized.isalpha() or not normalized.isascii():
		raise InvalidCurrencyError(f'Invalid currency code: {code!r}')
	return normalized


@dataclass(frozen=True)
class CurrencySymbol:
	code: str
	description: str


@dataclass(frozen=True)
class DailyRates:
	"""Latest rates for one base currency, normalized from the backend response."""

	base: str
	date: str | None
	rates: dict[str, float]


@dataclass(frozen=True)
class RatesPayload:
	"""Symbols and rates merged into one snapshot.

	``rates`` is relative to ``base`` and carries no entry for the base itself.
	``last_updated`` is epoch milliseconds.
	"""

	base: str
	date: str | None
	rates: dict[str, float]
	symbols: dict[str, CurrencySymbol]
	last_updated: int


@dataclass(frozen=True)
class ConversionRequest:
	amount: float
	from_currency: str
	to_currency: str


@dataclass(frozen=True)
class ConversionResult:
	from_currency: str
	to_currency: str
	amount: float
	converted_amount: float
	exchange_rate: float
	base: str
	date: str | None
	last_updated: int | None


class RatesStatus(Enum):
	IDLE = 'idle'
	LOADING = 'loading'
	READY = 'ready'
	ERROR = 'error'


@dataclass(frozen=True)
class RatesView:
	"""Read-only snapshot of the rates controller state."""

	status: RatesStatus
	base: str
	date: str | None = None
	rates: dict[str, float] = field(default_factory=dict)
	symbols: dict[str, CurrencySymbol] = field(default_factory=dict)
	error: str | None = None
	last_updated: int | None = None

	@property
	def loading(self) -> bool:
		return self.status is RatesStatus.LOADING

	@classmethod
	def idle(cls, base: str) -> 'RatesView':
		return cls(status=RatesStatus.IDLE, base=base)

	@classmethod
	def from_payload(cls, payload: RatesPayload) -> 'RatesView':
		return cls(
			status=RatesStatus.READY,
			base=payload.base,
			date=payload.date,
			rates=dict(payload.rates),
			symbols=dict(payload.symbols),
			last_updated=payload.last_updated,
		)

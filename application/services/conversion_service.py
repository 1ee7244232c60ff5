import math
from collections.abc import Mapping
from numbers import Real

from application.services.rates_controller import RatesController
from domain.models.rates import DEFAULT_BASE_CURRENCY, ConversionRequest, ConversionResult


def _is_finite_number(value) -> bool:
	return isinstance(value, Real) and not isinstance(value, bool) and math.isfinite(value)


def convert(
	amount: float,
	from_currency: str,
	to_currency: str,
	rates: Mapping[str, float] | None,
	base: str = DEFAULT_BASE_CURRENCY,
) -> float | None:
	"""Convert ``amount`` between two currencies through ``base``.

	``rates`` maps codes to units per one unit of ``base``. Returns ``None``
	when the amount is not a finite number or either rate is unknown.
	"""
	if not _is_finite_number(amount):
		return None

	source = (from_currency or '').upper()
	target = (to_currency or '').upper()
	base = (base or '').upper()

	if source == target:
		return amount

	def rate(code: str) -> float | None:
		if code == base:
			return 1.0
		value = (rates or {}).get(code)
		if _is_finite_number(value) and value > 0:
			return value
		return None

	from_rate = rate(source)
	to_rate = rate(target)
	if from_rate is None or to_rate is None:
		return None

	in_base = amount if source == base else amount / from_rate
	return in_base if target == base else in_base * to_rate


class ConversionService:
	def __init__(self, controller: RatesController):
		self.controller = controller

	def convert(self, request: ConversionRequest) -> ConversionResult | None:
		view = self.controller.get_state()
		converted = convert(request.amount, request.from_currency, request.to_currency, view.rates, view.base)
		if converted is None:
			return None

		return ConversionResult(
			from_currency=request.from_currency.upper(),
			to_currency=request.to_currency.upper(),
			amount=request.amount,
			converted_amount=converted,
			exchange_rate=convert(1.0, request.from_currency, request.to_currency, view.rates, view.base),
			base=view.base,
			date=view.date,
			last_updated=view.last_updated,
		)

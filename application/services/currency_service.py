from dataclasses import dataclass

from application.services.rates_controller import RatesController
from domain.exceptions.rates import InvalidCurrencyError
from domain.models.rates import normalize_currency_code


@dataclass(frozen=True)
class CurrencyOption:
	value: str
	label: str


class CurrencyService:
	def __init__(self, controller: RatesController):
		self.controller = controller

	def get_currency_options(self) -> list[CurrencyOption]:
		"""Unique options sorted by code, built from the loaded symbols."""
		options: dict[str, CurrencyOption] = {}
		for key, symbol in self.controller.get_state().symbols.items():
			code = (symbol.code or key or '').upper()
			if not code or code in options:
				continue
			label = f'{code} - {symbol.description}' if symbol.description else code
			options[code] = CurrencyOption(value=code, label=label)

		return [options[code] for code in sorted(options)]

	def get_supported_currencies(self) -> list[str]:
		view = self.controller.get_state()
		return sorted(set(view.symbols) | set(view.rates) | {view.base})

	def validate_currency(self, code: str) -> str:
		"""Normalize ``code``; once symbols are loaded it must also be one of them."""
		code = normalize_currency_code(code)
		symbols = self.controller.get_state().symbols
		if symbols and code not in symbols:
			raise InvalidCurrencyError(f'Currency {code} is not supported')
		return code

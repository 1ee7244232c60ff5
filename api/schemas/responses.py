from pydantic import BaseModel, ConfigDict, Field

from application.services import CurrencyOption
from domain.models.rates import ConversionResult, RatesView


class CurrencySymbolSchema(BaseModel):
	code: str
	description: str


class RatesStateResponse(BaseModel):
	status: str = Field(..., description='idle, loading, ready or error')
	base: str = Field(..., description='Currency the rates are relative to')
	date: str | None = Field(None, description='Rates date reported by the backend')
	rates: dict[str, float] = Field(default_factory=dict, description='Units per one unit of base')
	symbols: dict[str, CurrencySymbolSchema] = Field(default_factory=dict)
	loading: bool = False
	error: str | None = None
	last_updated: int | None = Field(None, description='Epoch milliseconds of the last refresh')

	@classmethod
	def from_view(cls, view: RatesView) -> 'RatesStateResponse':
		return cls(
			status=view.status.value,
			base=view.base,
			date=view.date,
			rates=view.rates,
			symbols={
				code: CurrencySymbolSchema(code=symbol.code, description=symbol.description)
				for code, symbol in view.symbols.items()
			},
			loading=view.loading,
			error=view.error,
			last_updated=view.last_updated,
		)

	model_config = ConfigDict(
		json_schema_extra={
			'example': {
				'status': 'ready',
				'base': 'USD',
				'date': '2024-01-01',
				'rates': {'EUR': 0.9, 'GBP': 0.8},
				'symbols': {'EUR': {'code': 'EUR', 'description': 'Euro'}},
				'loading': False,
				'error': None,
				'last_updated': 1704067200000,
			}
		}
	)


class CurrencyOptionSchema(BaseModel):
	value: str
	label: str


class CurrencyOptionsResponse(BaseModel):
	currencies: list[CurrencyOptionSchema] = Field(description='Currency options sorted by code')

	@classmethod
	def from_options(cls, options: list[CurrencyOption]) -> 'CurrencyOptionsResponse':
		return cls(currencies=[CurrencyOptionSchema(value=o.value, label=o.label) for o in options])


class SupportedCurrenciesResponse(BaseModel):
	currencies: list[str] = Field(description='Codes from the symbols, the rates table and the base, sorted')


class ConversionResponse(BaseModel):
	from_currency: str = Field(..., description='Source currency code')
	to_currency: str = Field(..., description='Target currency code')
	amount: float = Field(..., description='Original amount requested')
	converted_amount: float = Field(..., description='Converted amount')
	exchange_rate: float = Field(..., description='Units of target per one unit of source')
	base: str = Field(..., description='Base currency the conversion went through')
	date: str | None = None
	last_updated: int | None = None

	@classmethod
	def from_result(cls, result: ConversionResult) -> 'ConversionResponse':
		return cls(
			from_currency=result.from_currency,
			to_currency=result.to_currency,
			amount=result.amount,
			converted_amount=result.converted_amount,
			exchange_rate=result.exchange_rate,
			base=result.base,
			date=result.date,
			last_updated=result.last_updated,
		)

	model_config = ConfigDict(
		json_schema_extra={
			'example': {
				'from_currency': 'USD',
				'to_currency': 'EUR',
				'amount': 10.0,
				'converted_amount': 9.0,
				'exchange_rate': 0.9,
				'base': 'USD',
				'date': '2024-01-01',
				'last_updated': 1704067200000,
			}
		}
	)

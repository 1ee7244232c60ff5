from .requests import SelectBaseRequest
from .responses import (
	ConversionResponse,
	CurrencyOptionSchema,
	CurrencyOptionsResponse,
	CurrencySymbolSchema,
	RatesStateResponse,
	SupportedCurrenciesResponse,
)

__all__ = [
	'ConversionResponse',
	'CurrencyOptionSchema',
	'CurrencyOptionsResponse',
	'CurrencySymbolSchema',
	'RatesStateResponse',
	'SelectBaseRequest',
	'SupportedCurrenciesResponse',
]

from .conversion_service import ConversionService, convert
from .currency_service import CurrencyOption, CurrencyService
from .rates_controller import RatesController

__all__ = ['ConversionService', 'CurrencyOption', 'CurrencyService', 'RatesController', 'convert']

from .rates_provider import RatesProvider

__all__ = ['RatesProvider']

import math
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Path, status

from api.dependencies import get_conversion_service, get_currency_service, get_rates_controller
from api.schemas import (
	ConversionResponse,
	CurrencyOptionsResponse,
	RatesStateResponse,
	SelectBaseRequest,
	SupportedCurrenciesResponse,
)
from application.services import ConversionService, CurrencyService, RatesController
from domain.models.rates import ConversionRequest

router = APIRouter(prefix='/api', tags=['rates'])


@router.get(
	'/rates',
	response_model=RatesStateResponse,
	status_code=status.HTTP_200_OK,
	summary='Current rates state',
)
async def get_rates(
	controller: Annotated[RatesController, Depends(get_rates_controller)],
) -> RatesStateResponse:
	return RatesStateResponse.from_view(controller.get_state())


@router.post(
	'/rates/refresh',
	response_model=RatesStateResponse,
	status_code=status.HTTP_200_OK,
	summary='Reload rates, bypassing the cache',
)
async def refresh_rates(
	controller: Annotated[RatesController, Depends(get_rates_controller)],
) -> RatesStateResponse:
	view = await controller.refresh()
	return RatesStateResponse.from_view(view)


@router.put(
	'/rates/base',
	response_model=RatesStateResponse,
	status_code=status.HTTP_200_OK,
	summary='Select the base currency',
)
async def select_base(
	request: SelectBaseRequest,
	controller: Annotated[RatesController, Depends(get_rates_controller)],
	currency_service: Annotated[CurrencyService, Depends(get_currency_service)],
) -> RatesStateResponse:
	base = currency_service.validate_currency(request.base)
	view = await controller.select_base(base)
	return RatesStateResponse.from_view(view)


@router.get(
	'/currencies',
	response_model=CurrencyOptionsResponse,
	status_code=status.HTTP_200_OK,
	summary='List currency options',
)
async def get_currencies(
	service: Annotated[CurrencyService, Depends(get_currency_service)],
) -> CurrencyOptionsResponse:
	return CurrencyOptionsResponse.from_options(service.get_currency_options())


@router.get(
	'/currencies/supported',
	response_model=SupportedCurrenciesResponse,
	status_code=status.HTTP_200_OK,
	summary='List supported currency codes',
)
async def get_supported_currencies(
	service: Annotated[CurrencyService, Depends(get_currency_service)],
) -> SupportedCurrenciesResponse:
	return SupportedCurrenciesResponse(currencies=service.get_supported_currencies())


@router.get(
	'/convert/{from_currency}/{to_currency}/{amount}',
	response_model=ConversionResponse,
	status_code=status.HTTP_200_OK,
	summary='Convert currency amount',
)
async def convert_currency(
	from_currency: Annotated[str, Path(min_length=3, max_length=3)],
	to_currency: Annotated[str, Path(min_length=3, max_length=3)],
	amount: float,
	service: Annotated[ConversionService, Depends(get_conversion_service)],
) -> ConversionResponse:
	from_currency = from_currency.upper()
	to_currency = to_currency.upper()

	if not math.isfinite(amount):
		raise HTTPException(
			status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
			detail=f'Amount must be a finite number, got {amount}',
		)

	result = service.convert(ConversionRequest(amount, from_currency, to_currency))
	if result is None:
		raise HTTPException(
			status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
			detail=f'No rate available to convert {from_currency} to {to_currency}',
		)
	return ConversionResponse.from_result(result)

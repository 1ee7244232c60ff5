import asyncio
import contextlib
import json
import logging
from collections.abc import Mapping
from typing import Any

import httpx

from domain.exceptions.rates import HttpStatusError, NetworkError, RequestTimeoutError
from infrastructure.http.urls import with_query

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_MS = 12000


class HttpClient:
	"""Thin GET wrapper over ``httpx.AsyncClient`` with a per-request deadline.

	Every failure leaves this class as one of three errors: ``RequestTimeoutError``
	when the deadline passes, ``HttpStatusError`` for non-2xx responses and
	``NetworkError`` for everything else.
	"""

	def __init__(self, client: httpx.AsyncClient | None = None, timeout_ms: int = DEFAULT_TIMEOUT_MS):
		self.timeout_ms = timeout_ms
		self._owns_client = client is None
		self._client = client or httpx.AsyncClient(
			headers={'accept': 'application/json'},
			timeout=httpx.Timeout(timeout_ms / 1000),
			follow_redirects=True,
		)

	async def get(
		self,
		url: str,
		*,
		timeout_ms: int | None = None,
		query: Mapping[str, Any] | None = None,
		headers: Mapping[str, str] | None = None,
	) -> Any:
		timeout_ms = self.timeout_ms if timeout_ms is None else timeout_ms
		full_url = with_query(url, query)
		request_headers = {'Accept': 'application/json', **(headers or {})}

		try:
			# httpx's own timeouts share the request budget instead of its 5s default
			async with asyncio.timeout(timeout_ms / 1000):
				response = await self._client.get(
					full_url,
					headers=request_headers,
					timeout=httpx.Timeout(timeout_ms / 1000),
				)
			return self._parse_body(response)

		except HttpStatusError as e:
			logger.warning(f'GET {full_url} returned {e.status}: {e.detail or e.reason}')
			raise
		except (TimeoutError, httpx.TimeoutException) as e:
			logger.error(f'GET {full_url} timed out after {timeout_ms}ms')
			raise RequestTimeoutError(full_url, timeout_ms) from e
		except Exception as e:
			logger.error(f'GET {full_url} failed: {e.__class__.__name__}: {e}')
			raise NetworkError(e) from e

	def _parse_body(self, response: httpx.Response) -> Any:
		content_type = response.headers.get('content-type', '')
		is_json = 'application/json' in content_type

		if not response.is_success:
			raise HttpStatusError(
				response.status_code,
				self._error_detail(response, is_json),
				response.reason_phrase,
			)

		if is_json:
			return response.json()
		return response.text

	@staticmethod
	def _error_detail(response: httpx.Response, is_json: bool) -> str | None:
		if is_json:
			with contextlib.suppress(ValueError):
				body = response.json()
				if isinstance(body, dict):
					message = body.get('message') or body.get('error')
					if message:
						return str(message)
				return json.dumps(body)
			return None

		with contextlib.suppress(Exception):
			return response.text[:500] or None
		return None

	async def close(self) -> None:
		if self._owns_client:
			await self._client.aclose()

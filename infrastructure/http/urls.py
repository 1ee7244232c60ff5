from collections.abc import Mapping
from typing import Any
from urllib.parse import urlencode


def strip_trailing_slash(value: str) -> str:
	return value.rstrip('/')


def join_url(base: str, path: str) -> str:
	"""Join a base URL and a path with exactly one slash between them."""
	path = path or ''
	if not path.startswith('/'):
		path = f'/{path}'
	return f'{strip_trailing_slash(base or "")}{path}'


def with_query(url: str, query: Mapping[str, Any] | None) -> str:
	"""Append query parameters to ``url``, skipping ``None`` values."""
	if not query:
		return url

	params = []
	for key, value in query.items():
		if value is None:
			continue
		if isinstance(value, bool):
			value = 'true' if value else 'false'
		params.append((key, str(value)))

	encoded = urlencode(params)
	if not encoded:
		return url
	separator = '&' if '?' in url else '?'
	return f'{url}{separator}{encoded}'

import logging

from infrastructure.http.urls import strip_trailing_slash

logger = logging.getLogger(__name__)

PUBLIC_API_BASE = 'https://api.exchangerate.host'


def _clean(value: str | None) -> str | None:
	if isinstance(value, str) and value.strip():
		return value.strip()
	return None


class EndpointResolver:
	"""Picks the base URL the rates backend is reached at.

	Preference order is the primary URL, the secondary URL, then the caller's
	own origin. A configured primary URL is used as given. Otherwise, when the
	candidate is just the caller's origin (no separate backend), or nothing
	usable is configured at all, the public API is used instead.
	"""

	def __init__(
		self,
		primary_url: str | None = None,
		secondary_url: str | None = None,
		runtime_origin: str | None = None,
		fallback_base: str = PUBLIC_API_BASE,
	):
		self.primary_url = primary_url
		self.secondary_url = secondary_url
		self.runtime_origin = runtime_origin
		self.fallback_base = fallback_base

	def resolve(self) -> str:
		try:
			return self._resolve()
		except Exception:
			logger.exception('Endpoint resolution failed, using the public API')
			return self.fallback_base

	def _resolve(self) -> str:
		primary = _clean(self.primary_url)
		if primary:
			return primary

		origin = _clean(self.runtime_origin)
		candidate = _clean(self.secondary_url)
		if candidate is None and origin is not None:
			logger.warning(
				f'No backend URL configured, falling back to the runtime origin {origin}'
			)
			candidate = origin

		if candidate is None:
			return self.fallback_base

		if origin is not None and strip_trailing_slash(candidate) == strip_trailing_slash(origin):
			logger.info(f'{candidate} is the runtime origin, using {self.fallback_base}')
			return self.fallback_base

		return candidate

	def is_public_fallback(self, url: str) -> bool:
		return strip_trailing_slash(url).startswith(strip_trailing_slash(self.fallback_base))

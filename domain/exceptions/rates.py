class RatesError(Exception):
	pass


class InvalidCurrencyError(RatesError):
	pass


class TransportError(RatesError):
	"""A request to the rates backend did not produce a usable response."""


class RequestTimeoutError(TransportError):
	def __init__(self, url: str, timeout_ms: int):
		super().__init__(f'Request timed out after {timeout_ms}ms: {url}')
		self.url = url
		self.timeout_ms = timeout_ms


class HttpStatusError(TransportError):
	def __init__(self, status: int, detail: str | None = None, reason: str = ''):
		message = f'Request failed: {status} {reason}'.rstrip()
		if detail:
			message += f' - {detail}'
		super().__init__(message)
		self.status = status
		self.detail = detail
		self.reason = reason


class NetworkError(TransportError):
	def __init__(self, cause: BaseException):
		super().__init__(str(cause) or cause.__class__.__name__)
		self.cause = cause


class PersistenceError(RatesError):
	"""Key-value storage is unavailable or rejected a write."""

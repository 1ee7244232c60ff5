from typing import Protocol

from redis import Redis, RedisError

from domain.exceptions.rates import PersistenceError


class KeyValueStore(Protocol):
	def read(self, key: str) -> str | None: ...

	def write(self, key: str, value: str) -> None: ...


class InMemoryKeyValueStore:
	def __init__(self):
		self._data: dict[str, str] = {}

	def read(self, key: str) -> str | None:
		return self._data.get(key)

	def write(self, key: str, value: str) -> None:
		self._data[key] = value


class RedisKeyValueStore:
	"""Key-value store on a synchronous redis client.

	Records carry their own timestamp and are checked on read, so keys are
	written without an expiry.
	"""

	def __init__(self, redis_client: Redis):
		self.redis = redis_client

	@classmethod
	def from_url(cls, redis_url: str) -> 'RedisKeyValueStore':
		return cls(Redis.from_url(redis_url, decode_responses=True))

	def read(self, key: str) -> str | None:
		try:
			value = self.redis.get(key)
		except RedisError as e:
			raise PersistenceError(f'Redis read failed for {key}: {e}') from e
		if isinstance(value, bytes):
			return value.decode('utf-8')
		return value

	def write(self, key: str, value: str) -> None:
		try:
			self.redis.set(key, value)
		except RedisError as e:
			raise PersistenceError(f'Redis write failed for {key}: {e}') from e

	def close(self) -> None:
		self.redis.close()

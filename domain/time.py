import time


def now_ms() -> int:
	"""Current wall-clock time as epoch milliseconds."""
	return int(time.time() * 1000)

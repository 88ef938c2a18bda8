from __future__ import annotations

import math
import threading
import time
from typing import Callable, Dict, List, Optional

from fastapi import Request

from .errors import TooManyRequests


_limiters: List["RateLimiter"] = []


class RateLimiter:
	"""In-memory sliding-window limiter keyed by client IP, used as a FastAPI dependency.

	With ``skip_successful`` the route calls :meth:`release` once the request
	succeeds, so only failed attempts count toward the limit.
	"""

	def __init__(
		self,
		max_requests: int,
		window_seconds: int,
		message: str,
		*,
		skip_successful: bool = False,
		clock: Callable[[], float] = time.monotonic,
	) -> None:
		self.max_requests = max_requests
		self.window_seconds = window_seconds
		self.message = message
		self.skip_successful = skip_successful
		self._clock = clock
		self._hits: Dict[str, List[float]] = {}
		self._lock = threading.Lock()
		self._last_sweep = clock()
		_limiters.append(self)

	@staticmethod
	def client_key(request: Request) -> str:
		return request.client.host if request.client else "unknown"

	def _live(self, key: str, now: float) -> List[float]:
		return [t for t in self._hits.get(key, ()) if now - t < self.window_seconds]

	def _sweep(self, now: float) -> None:
		# Forget clients with nothing left in the window; runs at most once per window
		if now - self._last_sweep < self.window_seconds:
			return
		self._last_sweep = now
		for key in list(self._hits):
			timestamps = self._live(key, now)
			if timestamps:
				self._hits[key] = timestamps
			else:
				del self._hits[key]

	def hit(self, key: str) -> float:
		"""Count one request for ``key`` and return its timestamp, or raise TooManyRequests."""
		now = self._clock()
		with self._lock:
			self._sweep(now)
			timestamps = self._live(key, now)
			if len(timestamps) >= self.max_requests:
				self._hits[key] = timestamps
				retry_after = max(1, math.ceil(self.window_seconds - (now - timestamps[0])))
				raise TooManyRequests(self.message, retry_after=retry_after)
			timestamps.append(now)
			self._hits[key] = timestamps
			return now

	def forget(self, key: str, stamp: float) -> None:
		with self._lock:
			timestamps = self._hits.get(key)
			if timestamps and stamp in timestamps:
				timestamps.remove(stamp)
				if not timestamps:
					del self._hits[key]

	def release(self, request: Request) -> None:
		"""Uncount the hit this request made, leaving other requests from the same IP counted."""
		if not self.skip_successful:
			return
		stamp = getattr(request.state, "rate_limit_hits", {}).pop(self, None)
		if stamp is not None:
			self.forget(self.client_key(request), stamp)

	def reset(self, key: Optional[str] = None) -> None:
		with self._lock:
			if key is None:
				self._hits.clear()
			else:
				self._hits.pop(key, None)

	async def __call__(self, request: Request) -> None:
		stamp = self.hit(self.client_key(request))
		if self.skip_successful:
			if not hasattr(request.state, "rate_limit_hits"):
				request.state.rate_limit_hits = {}
			request.state.rate_limit_hits[self] = stamp


def reset_all() -> None:
	for limiter in _limiters:
		limiter.reset()


api_limiter = RateLimiter(100, 60, "Too many requests, please try again later.")

auth_limiter = RateLimiter(
	5,
	15 * 60,
	"Too many login attempts, please try again after 15 minutes.",
	skip_successful=True,
)

signup_limiter = RateLimiter(
	5,
	60 * 60,
	"Too many accounts created from this IP, please try again after an hour.",
)

# Each AI request is a paid upstream call
ai_limiter = RateLimiter(10, 60, "Too many AI requests, please wait a moment before trying again.")

"""Async client for the KIDOAI Tutor API.

One :class:`Session` holds the bearer token and the signed-in profile. Reads
are de-duplicated by purpose: while a ``profile`` fetch is in flight, a second
caller asking for the profile awaits the same request instead of sending
another one. A 401 from any call evicts the session.
"""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, Dict, Optional

import httpx


DEFAULT_TIMEOUT = 10.0
AI_TIMEOUT = 30.0


class ApiError(Exception):
	def __init__(self, status_code: Optional[int], message: str, details: Any = None) -> None:
		super().__init__(message)
		self.status_code = status_code
		self.message = message
		self.details = details


class Session:
	def __init__(self, token: Optional[str] = None, user: Optional[dict] = None) -> None:
		self.token = token
		self.user = user

	@property
	def authenticated(self) -> bool:
		return bool(self.token)

	def store(self, token: str, user: Optional[dict]) -> None:
		self.token = token
		self.user = user

	def clear(self) -> None:
		self.token = None
		self.user = None


def get_error_message(exc: Exception) -> str:
	if isinstance(exc, httpx.TimeoutException):
		return "Request timed out. Please check your connection and try again."
	if isinstance(exc, ApiError):
		if exc.message:
			return exc.message
		if exc.details:
			return ", ".join(str(d.get("msg", "")) for d in exc.details)
	return str(exc) or "An unexpected error occurred"


class KidoClient:
	def __init__(
		self,
		base_url: str = "http://localhost:3030",
		*,
		session: Optional[Session] = None,
		timeout: float = DEFAULT_TIMEOUT,
		on_unauthorized: Optional[Callable[[], None]] = None,
		transport: Optional[httpx.AsyncBaseTransport] = None,
	) -> None:
		self.session = session or Session()
		self.on_unauthorized = on_unauthorized
		self._client = httpx.AsyncClient(base_url=base_url, timeout=timeout, transport=transport)
		self._inflight: Dict[str, asyncio.Task] = {}

	async def aclose(self) -> None:
		await self._client.aclose()

	async def __aenter__(self) -> "KidoClient":
		return self

	async def __aexit__(self, *exc_info: Any) -> None:
		await self.aclose()

	async def _request(self, method: str, path: str, *, timeout: Optional[float] = None, **kwargs: Any) -> dict:
		headers = {}
		if self.session.token:
			headers["Authorization"] = f"Bearer {self.session.token}"
		request_kwargs: Dict[str, Any] = {"headers": headers, **kwargs}
		if timeout is not None:
			request_kwargs["timeout"] = timeout
		r = await self._client.request(method, path, **request_kwargs)
		if r.status_code == 401:
			self.session.clear()
			if self.on_unauthorized is not None:
				self.on_unauthorized()
		if r.is_error:
			try:
				body = r.json()
			except ValueError:
				body = {}
			raise ApiError(r.status_code, body.get("message", r.reason_phrase), body.get("details"))
		return r.json()

	async def _once(self, purpose: str, factory: Callable[[], Awaitable[dict]]) -> dict:
		task = self._inflight.get(purpose)
		if task is None:
			task = asyncio.ensure_future(factory())
			self._inflight[purpose] = task
			task.add_done_callback(lambda t: self._forget(purpose, t))
		return await asyncio.shield(task)

	def _forget(self, purpose: str, task: asyncio.Task) -> None:
		if self._inflight.get(purpose) is task:
			del self._inflight[purpose]

	def _get(self, purpose: str, path: str, **kwargs: Any) -> Awaitable[dict]:
		return self._once(purpose, lambda: self._request("GET", path, **kwargs))

	def _remember(self, data: dict) -> dict:
		user = dict(data.get("user") or {})
		token = data.get("token") or user.pop("token", None)
		user.pop("token", None)
		if token:
			self.session.store(token, user)
		return data

	# auth

	async def signup(self, name: str, email: str, password: str) -> dict:
		data = await self._request("POST", "/user/signup", json={"name": name, "email": email, "password": password})
		return self._remember(data)

	async def login(self, email: str, password: str) -> dict:
		data = await self._request("PUT", "/user/login", json={"email": email, "password": password})
		return self._remember(data)

	async def verify_google(self, id_token: str) -> dict:
		# Sign-in buttons can fire twice; only one verification goes out
		data = await self._once(
			"auth:google",
			lambda: self._request("POST", "/user/auth/google", json={"token": id_token}),
		)
		return self._remember(data)

	def logout(self) -> None:
		self.session.clear()

	# profile and progress

	def profile(self) -> Awaitable[dict]:
		return self._get("profile", "/user/profile")

	async def edit_profile(self, **changes: Any) -> dict:
		return await self._request("PUT", "/user/editProfile", json={k: v for k, v in changes.items() if v is not None})

	async def verify_password(self, password: str) -> dict:
		return await self._request("PUT", "/user/verifyPassword", json={"password": password})

	async def submit_answer(self, answer: str, is_valid: bool) -> dict:
		return await self._request("POST", "/user/submit", json={"answer": answer, "isValid": is_valid})

	def answers(self) -> Awaitable[dict]:
		return self._get("answers", "/user/answers")

	def stats(self) -> Awaitable[dict]:
		return self._get("stats", "/user/stats")

	# public data

	def dashboard(self) -> Awaitable[dict]:
		return self._get("dashboard", "/user/dashboard")

	def leaderboard(self, limit: int = 10, offset: int = 0) -> Awaitable[dict]:
		return self._get(f"leaderboard:{limit}:{offset}", "/user/leaderboard", params={"limit": limit, "offset": offset})

	def quiz_question(self) -> Awaitable[dict]:
		return self._get("quiz", "/user/getAiQuizz", timeout=AI_TIMEOUT)

	def speech_challenge(self) -> Awaitable[dict]:
		return self._get("speech", "/user/sound", timeout=AI_TIMEOUT)

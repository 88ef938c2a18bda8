from __future__ import annotations
import httpx
from typing import Any, Dict, List, Optional
from .settings import settings


class AIServiceNotConfigured(RuntimeError):
	pass


class AIServiceError(RuntimeError):
	pass


class ChatClient:
	"""Minimal client for an OpenAI-compatible chat completions endpoint."""

	def __init__(
		self,
		api_key: Optional[str] = None,
		*,
		base_url: Optional[str] = None,
		model: Optional[str] = None,
		timeout: Optional[float] = None,
		transport: Optional[httpx.AsyncBaseTransport] = None,
	) -> None:
		self.api_key = api_key or settings.ai_api_token
		if not self.api_key:
			raise AIServiceNotConfigured("API_TOKEN is not configured")
		self.model = model or settings.ai_model
		self.base_url = (base_url or settings.ai_base_url).rstrip("/") + "/chat/completions"
		self._headers = {
			"Authorization": f"Bearer {self.api_key}",
			"Content-Type": "application/json",
		}
		self._client = httpx.AsyncClient(
			timeout=timeout if timeout is not None else settings.ai_timeout_seconds,
			transport=transport,
		)

	async def complete(
		self,
		messages: List[Dict[str, str]],
		*,
		temperature: float = 0.7,
		max_tokens: Optional[int] = None,
	) -> str:
		payload: Dict[str, Any] = {
			"model": self.model,
			"messages": messages,
			"temperature": temperature,
		}
		if max_tokens is not None:
			payload["max_tokens"] = max_tokens
		# One upstream call per request; callers decide whether to try again
		try:
			r = await self._client.post(self.base_url, headers=self._headers, json=payload)
			r.raise_for_status()
		except httpx.HTTPStatusError as http_err:
			raise AIServiceError(f"AI service returned {http_err.response.status_code}") from http_err
		except httpx.RequestError as net_err:
			raise AIServiceError(f"AI service request failed: {net_err}") from net_err
		try:
			data = r.json()
			return data["choices"][0]["message"]["content"] or ""
		except (ValueError, KeyError, IndexError, TypeError) as exc:
			raise AIServiceError(f"Unexpected AI response: {r.text[:200]}") from exc

	async def complete_system(self, prompt: str, **kwargs: Any) -> str:
		return await self.complete([{"role": "system", "content": prompt}], **kwargs)

	async def aclose(self) -> None:
		await self._client.aclose()

"""Error taxonomy and the handlers that turn every failure into one JSON envelope.

Routes raise; nothing catches locally. Every error leaves the app as
``{"error": true, "message": ..., "details": ...}`` with ``details`` present
only when there is something to report.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from .settings import settings


logger = logging.getLogger(__name__)


class APIError(Exception):
	status_code: int = 500
	default_message: str = "Internal server error"

	def __init__(self, message: Optional[str] = None, details: Any = None, headers: Optional[dict] = None) -> None:
		self.message = message or self.default_message
		super().__init__(self.message)
		self.details = details
		self.headers = headers


class BadRequest(APIError):
	status_code = 400
	default_message = "Bad request"


class Unauthorized(APIError):
	status_code = 401
	default_message = "Unauthorized access"


class Forbidden(APIError):
	status_code = 403
	default_message = "Access forbidden"


class NotFound(APIError):
	status_code = 404
	default_message = "Resource not found"


class Conflict(APIError):
	status_code = 409
	default_message = "Resource already exists"


class TooManyRequests(APIError):
	status_code = 429
	default_message = "Too many requests, please try again later."

	def __init__(self, message: Optional[str] = None, retry_after: int = 60) -> None:
		super().__init__(message, headers={"Retry-After": str(retry_after)})
		self.retry_after = retry_after


class Internal(APIError):
	status_code = 500
	default_message = "Internal server error"


def error_body(message: str, details: Any = None, **extra: Any) -> dict:
	body: dict = {"error": True, "message": message}
	if details:
		body["details"] = details
	body.update(extra)
	return body


def _log(request: Request, status_code: int, message: str) -> None:
	logger.warning("%s %s -> %s %s", request.method, request.url.path, status_code, message)


async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
	_log(request, exc.status_code, exc.message)
	extra = {}
	if isinstance(exc, TooManyRequests):
		extra["retryAfter"] = exc.retry_after
	return JSONResponse(
		status_code=exc.status_code,
		content=error_body(exc.message, exc.details, **extra),
		headers=exc.headers,
	)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
	details = []
	for err in exc.errors():
		loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
		msg = str(err.get("msg", "Invalid value"))
		# pydantic prefixes messages raised from validators
		if msg.startswith("Value error, "):
			msg = msg[len("Value error, "):]
		details.append({"field": ".".join(loc), "msg": msg})
	_log(request, 400, "Validation failed")
	return JSONResponse(status_code=400, content=error_body("Validation failed", details))


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
	_log(request, 409, "Resource already exists")
	return JSONResponse(status_code=409, content=error_body("Resource already exists"))


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
	if exc.status_code == 404:
		message = f"Route {request.url.path} not found"
	else:
		message = str(exc.detail)
	_log(request, exc.status_code, message)
	return JSONResponse(status_code=exc.status_code, content=error_body(message), headers=getattr(exc, "headers", None))


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
	logger.exception("Unhandled error on %s %s", request.method, request.url.path)
	body = error_body("Internal server error")
	if settings.is_development:
		body["originalError"] = str(exc)
	return JSONResponse(status_code=500, content=body)


def register_error_handlers(app: FastAPI) -> None:
	app.add_exception_handler(APIError, api_error_handler)
	app.add_exception_handler(RequestValidationError, validation_error_handler)
	app.add_exception_handler(IntegrityError, integrity_error_handler)
	app.add_exception_handler(StarletteHTTPException, http_exception_handler)
	app.add_exception_handler(Exception, unhandled_error_handler)

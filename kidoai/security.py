"""Password hashing, bearer tokens and the credential variants a user may hold."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional, Union

from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext

from .settings import settings


logging.getLogger('passlib').setLevel(logging.ERROR)
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=settings.bcrypt_rounds)

_BCRYPT_MAX_BYTES = 72
_DURATION_RE = re.compile(r"^\s*(\d+)\s*([smhd]?)\s*$")
_DURATION_UNITS = {"": 1, "s": 1, "m": 60, "h": 3600, "d": 86400}


@dataclass(frozen=True)
class PasswordAuth:
	hash: str


@dataclass(frozen=True)
class OAuthAuth:
	external_id: str


Credential = Union[PasswordAuth, OAuthAuth]


@dataclass(frozen=True)
class TokenClaims:
	user_id: int
	email: str


class InvalidToken(Exception):
	pass


class TokenExpired(InvalidToken):
	pass


def _truncate(password: str) -> str:
	# bcrypt ignores everything past 72 bytes; newer backends refuse it outright
	password_bytes = password.encode('utf-8')
	if len(password_bytes) > _BCRYPT_MAX_BYTES:
		password_bytes = password_bytes[:_BCRYPT_MAX_BYTES]
	return password_bytes.decode('utf-8', errors='ignore')


def hash_password(plain_password: str) -> str:
	return pwd_context.hash(_truncate(plain_password))


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
	if not hashed_password:
		return False
	return pwd_context.verify(_truncate(plain_password), hashed_password)


def parse_duration(value: str) -> timedelta:
	"""Parse expiry strings in the ``7d`` / ``12h`` / ``30m`` / ``45s`` form.

	A bare number is read as seconds.
	"""
	match = _DURATION_RE.match(str(value))
	if not match:
		raise ValueError(f"Invalid duration: {value!r}")
	amount, unit = match.groups()
	return timedelta(seconds=int(amount) * _DURATION_UNITS[unit])


def issue_token(user_id: int, email: str, expires_delta: Optional[timedelta] = None) -> str:
	secret = settings.jwt_secret
	if not secret:
		raise RuntimeError("JWT_SECRET is not defined in environment variables")
	now = datetime.now(timezone.utc)
	delta = expires_delta if expires_delta is not None else parse_duration(settings.jwt_expires_in)
	payload = {"id": user_id, "email": email, "iat": now, "exp": now + delta}
	return jwt.encode(payload, secret, algorithm=settings.jwt_algorithm)


def verify_token(token: str) -> TokenClaims:
	secret = settings.jwt_secret
	if not secret:
		raise RuntimeError("JWT_SECRET is not defined in environment variables")
	try:
		payload = jwt.decode(token, secret, algorithms=[settings.jwt_algorithm])
	except ExpiredSignatureError as exc:
		raise TokenExpired("Token expired") from exc
	except JWTError as exc:
		raise InvalidToken("Invalid token") from exc
	user_id = payload.get("id")
	email = payload.get("email")
	if user_id is None or email is None:
		raise InvalidToken("Invalid token")
	return TokenClaims(user_id=int(user_id), email=str(email))

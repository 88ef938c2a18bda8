from __future__ import annotations
import re
from typing import Literal, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


NAME_RE = re.compile(r"^[a-zA-Z\s'-]+$")
EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PASSWORD_RE = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)")

Difficulty = Literal["easy", "medium", "hard"]


def _check_name(value: str) -> str:
	value = value.strip()
	if not value:
		raise ValueError("Name is required")
	if not 2 <= len(value) <= 50:
		raise ValueError("Name must be between 2 and 50 characters")
	if not NAME_RE.match(value):
		raise ValueError("Name can only contain letters, spaces, hyphens, and apostrophes")
	return value


def _check_email(value: str) -> str:
	value = value.strip().lower()
	if not value:
		raise ValueError("Email is required")
	if not EMAIL_RE.match(value):
		raise ValueError("Invalid email address")
	return value


def _check_password(value: str) -> str:
	if not value:
		raise ValueError("Password is required")
	if len(value) < 8:
		raise ValueError("Password must be at least 8 characters long")
	if not PASSWORD_RE.match(value):
		raise ValueError("Password must contain at least one uppercase letter, one lowercase letter, and one number")
	return value


class SignupRequest(BaseModel):
	name: str
	email: str
	password: str

	@field_validator("name")
	@classmethod
	def validate_name(cls, value: str) -> str:
		return _check_name(value)

	@field_validator("email")
	@classmethod
	def validate_email(cls, value: str) -> str:
		return _check_email(value)

	@field_validator("password")
	@classmethod
	def validate_password(cls, value: str) -> str:
		return _check_password(value)


class LoginRequest(BaseModel):
	email: str
	password: str

	@field_validator("email")
	@classmethod
	def validate_email(cls, value: str) -> str:
		return _check_email(value)

	@field_validator("password")
	@classmethod
	def validate_password(cls, value: str) -> str:
		if not value:
			raise ValueError("Password is required")
		return value


class GoogleAuthRequest(BaseModel):
	token: Optional[str] = None


class EditProfileRequest(BaseModel):
	name: Optional[str] = None
	password: Optional[str] = None
	difficulty: Optional[Difficulty] = None

	@field_validator("name")
	@classmethod
	def validate_name(cls, value: Optional[str]) -> Optional[str]:
		return None if value is None else _check_name(value)

	@field_validator("password")
	@classmethod
	def validate_password(cls, value: Optional[str]) -> Optional[str]:
		return None if value is None else _check_password(value)


class VerifyPasswordRequest(BaseModel):
	password: Optional[str] = None


class AnswerRequest(BaseModel):
	model_config = ConfigDict(populate_by_name=True)

	answer: str
	is_valid: bool = Field(alias="isValid")

	@field_validator("answer")
	@classmethod
	def validate_answer(cls, value: str) -> str:
		value = value.strip()
		if not value:
			raise ValueError("Answer is required")
		return value

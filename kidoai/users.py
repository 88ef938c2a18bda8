"""Persistence helpers for user records.

Password hashing happens here, explicitly, before anything is written; the
models carry no save hooks.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from .models import Answer, User
from .security import hash_password


POINTS_PER_CORRECT_ANSWER = 10


def normalize_email(email: str) -> str:
	return (email or "").strip().lower()


def public_user(user: User) -> dict:
	return {
		"id": user.id,
		"name": user.name,
		"email": user.email,
		"difficulty": user.difficulty,
		"score": user.score,
	}


def answer_dict(answer: Answer) -> dict:
	return {
		"id": answer.id,
		"answer": answer.answer,
		"isValid": answer.is_valid,
		"timestamp": answer.timestamp.isoformat() if answer.timestamp else None,
	}


def get_user(db: Session, user_id: int) -> Optional[User]:
	return db.get(User, user_id)


def find_by_email(db: Session, email: str) -> Optional[User]:
	return db.scalars(select(User).where(User.email == normalize_email(email))).first()


def find_by_email_or_google_id(db: Session, email: str, google_id: str) -> Optional[User]:
	# An account already bound to this Google id wins over a bare email match
	user = db.scalars(select(User).where(User.google_id == google_id)).first()
	if user is not None:
		return user
	return find_by_email(db, email)


def create_user(
	db: Session,
	*,
	name: str,
	email: str,
	password: Optional[str] = None,
	google_id: Optional[str] = None,
	difficulty: str = "easy",
	last_login: Optional[datetime] = None,
) -> User:
	if not password and not google_id:
		raise ValueError("a password or a Google id is required")
	user = User(
		name=name.strip(),
		email=normalize_email(email),
		password_hash=hash_password(password) if password else None,
		google_id=google_id,
		difficulty=difficulty,
		score=0,
		is_active=True,
		last_login=last_login,
	)
	db.add(user)
	db.commit()
	db.refresh(user)
	return user


def update_user(
	db: Session,
	user: User,
	*,
	name: Optional[str] = None,
	password: Optional[str] = None,
	difficulty: Optional[str] = None,
	google_id: Optional[str] = None,
	last_login: Optional[datetime] = None,
) -> User:
	"""Apply the given changes and commit once. ``None`` leaves a field as it is."""
	if name:
		user.name = name.strip()
	if difficulty:
		user.difficulty = difficulty
	if password:
		user.password_hash = hash_password(password)
	if google_id:
		user.google_id = google_id
	if last_login is not None:
		user.last_login = last_login
	db.add(user)
	db.commit()
	db.refresh(user)
	return user


def submit_answer(db: Session, user: User, answer: str, is_valid: bool) -> User:
	# Score is read, incremented and written back on the loaded row; two
	# concurrent submissions for one user can lose an increment.
	user.answers.append(Answer(answer=answer.strip(), is_valid=is_valid, timestamp=datetime.utcnow()))
	if is_valid:
		user.score += POINTS_PER_CORRECT_ANSWER
	db.add(user)
	db.commit()
	db.refresh(user)
	return user

from __future__ import annotations
from datetime import datetime
from typing import List, Optional
from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship
from .db import Base
from .security import Credential, OAuthAuth, PasswordAuth


DIFFICULTIES = ("easy", "medium", "hard")


class User(Base):
	__tablename__ = "users"
	__table_args__ = (
		# Usable accounts need a password, a Google identity, or both
		CheckConstraint("password_hash IS NOT NULL OR google_id IS NOT NULL", name="ck_users_has_credential"),
		CheckConstraint("score >= 0", name="ck_users_score_non_negative"),
	)

	id = Column(Integer, primary_key=True, index=True)
	name = Column(String(50), nullable=False)
	email = Column(String(256), unique=True, index=True, nullable=False)
	password_hash = Column(String(256), nullable=True)
	google_id = Column(String(256), unique=True, index=True, nullable=True)
	difficulty = Column(String(16), default="easy", nullable=False)
	score = Column(Integer, default=0, nullable=False, index=True)
	is_active = Column(Boolean, default=True, nullable=False)
	last_login = Column(DateTime, nullable=True)
	created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
	updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

	# Append-only, chronological by insertion
	answers = relationship(
		"Answer",
		back_populates="user",
		order_by="Answer.id",
		cascade="all, delete-orphan",
		lazy="selectin",
	)

	@property
	def credentials(self) -> List[Credential]:
		creds: List[Credential] = []
		if self.password_hash:
			creds.append(PasswordAuth(hash=self.password_hash))
		if self.google_id:
			creds.append(OAuthAuth(external_id=self.google_id))
		return creds

	@property
	def password_credential(self) -> Optional[PasswordAuth]:
		for cred in self.credentials:
			if isinstance(cred, PasswordAuth):
				return cred
		return None

	@property
	def is_oauth_only(self) -> bool:
		return self.password_credential is None and self.google_id is not None


class Answer(Base):
	__tablename__ = "answers"

	id = Column(Integer, primary_key=True, index=True)
	user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
	answer = Column(Text, nullable=False)
	is_valid = Column(Boolean, default=False, nullable=False)
	timestamp = Column(DateTime, default=datetime.utcnow, nullable=False)

	user = relationship("User", back_populates="answers")

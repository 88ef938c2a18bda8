from __future__ import annotations
from typing import Any, Dict, List, Sequence
from sqlalchemy import select
from sqlalchemy.orm import Session

from .models import User
from .stats import accuracy, compute_stats


DASHBOARD_LIMIT = 50
DEFAULT_LEADERBOARD_LIMIT = 10


def _ranked_query():
	# id breaks score ties so repeated reads give the same order
	return select(User).where(User.is_active.is_(True)).order_by(User.score.desc(), User.id.asc())


def rank_entries(users: Sequence[User], offset: int = 0) -> List[Dict[str, Any]]:
	"""Turn users already sorted by score into numbered leaderboard rows.

	Ranks are absolute: with ``offset`` set to the rows skipped, the first entry
	is ranked ``offset + 1``, so pages of one board never reuse a rank.
	"""
	entries: List[Dict[str, Any]] = []
	for position, user in enumerate(users, start=1):
		stats = compute_stats(user.answers)
		entries.append({
			"rank": offset + position,
			"name": user.name,
			"score": user.score,
			"difficulty": user.difficulty,
			"accuracy": accuracy(stats.correct_answers, stats.total_answers, ndigits=1),
		})
	return entries


def get_leaderboard(db: Session, limit: int = DEFAULT_LEADERBOARD_LIMIT, offset: int = 0) -> List[Dict[str, Any]]:
	users = db.scalars(_ranked_query().offset(offset).limit(limit)).all()
	return rank_entries(users, offset=offset)


def get_dashboard_users(db: Session, limit: int = DASHBOARD_LIMIT) -> List[Dict[str, Any]]:
	users = db.scalars(_ranked_query().limit(limit)).all()
	return [{"name": u.name, "score": u.score, "difficulty": u.difficulty} for u in users]

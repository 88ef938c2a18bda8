"""Derived progress for a user: accuracy, streak and earned badges.

Everything here is recomputed from the stored answer log and score on each
request; nothing derived is persisted.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Callable, Dict, List, Sequence


@dataclass(frozen=True)
class Stats:
	total_answers: int
	correct_answers: int
	incorrect_answers: int
	accuracy: float
	streak: int

	def to_dict(self) -> Dict[str, Any]:
		return {
			"totalAnswers": self.total_answers,
			"correctAnswers": self.correct_answers,
			"incorrectAnswers": self.incorrect_answers,
			"accuracy": self.accuracy,
			"streak": self.streak,
		}


@dataclass(frozen=True)
class Badge:
	id: str
	name: str
	description: str
	icon: str
	requirement: int


BADGES: List[Badge] = [
	Badge("first_answer", "First Step", "Answer your first question", "🎯", 1),
	Badge("perfect_streak", "Perfect!", "Get 10 correct answers in a row", "⭐", 10),
	Badge("dedicated", "Dedicated Learner", "Answer 50 questions", "📚", 50),
	Badge("century", "Century", "Reach 100 points", "💯", 100),
	Badge("master", "Quiz Master", "Reach 1000 points", "🏆", 1000),
]

# Each badge measures something different; ids not listed here are score thresholds.
_BadgeRule = Callable[[Badge, Stats, int], bool]
_BADGE_RULES: Dict[str, _BadgeRule] = {
	"first_answer": lambda badge, stats, score: stats.total_answers >= 1,
	"perfect_streak": lambda badge, stats, score: stats.streak >= badge.requirement,
	"dedicated": lambda badge, stats, score: stats.total_answers >= badge.requirement,
}


def _score_rule(badge: Badge, stats: Stats, score: int) -> bool:
	return score >= badge.requirement


def _is_valid(answer: Any) -> bool:
	if isinstance(answer, dict):
		return bool(answer.get("is_valid", answer.get("isValid")))
	return bool(answer.is_valid)


def current_streak(answers: Sequence[Any]) -> int:
	streak = 0
	for answer in reversed(answers):
		if not _is_valid(answer):
			break
		streak += 1
	return streak


def accuracy(correct: int, total: int, ndigits: int = 2) -> float:
	if total <= 0:
		return 0.0
	# Halves round up
	quantum = Decimal(1).scaleb(-ndigits)
	return float(Decimal(correct / total * 100).quantize(quantum, rounding=ROUND_HALF_UP))


def compute_stats(answers: Sequence[Any]) -> Stats:
	"""Summarise an answer log given in chronological order.

	Items may be ORM ``Answer`` rows or plain dicts with ``is_valid``/``isValid``.
	"""
	total = len(answers)
	correct = sum(1 for a in answers if _is_valid(a))
	return Stats(
		total_answers=total,
		correct_answers=correct,
		incorrect_answers=total - correct,
		accuracy=accuracy(correct, total),
		streak=current_streak(answers),
	)


def earned_badges(stats: Stats, score: int, catalog: Sequence[Badge] = BADGES) -> List[Badge]:
	return [b for b in catalog if _BADGE_RULES.get(b.id, _score_rule)(b, stats, score)]


def badge_dict(badge: Badge) -> Dict[str, Any]:
	return asdict(badge)


def user_stats(user) -> Dict[str, Any]:
	stats = compute_stats(user.answers)
	data = stats.to_dict()
	data["badges"] = [badge_dict(b) for b in earned_badges(stats, user.score)]
	return data

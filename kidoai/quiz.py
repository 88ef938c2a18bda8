"""Prompts and response parsing for the AI quiz and speech challenges."""

from __future__ import annotations

import json
import re
from typing import Any, Dict, Optional

from .ai_client import ChatClient


QUIZ_PROMPT = """You are a language teacher creating quizzes for students.
Create 1 question in Spanish with its translation hint.
Return ONLY valid JSON in this exact format:
[{"text": "¿Question in Spanish?", "hint": "English hint", "options": [{"id": "1", "text": "Option 1", "isCorrect": false}, {"id": "2", "text": "Option 2", "isCorrect": true}, {"id": "3", "text": "Option 3", "isCorrect": false}, {"id": "4", "text": "Option 4", "isCorrect": false}]}]
Make sure exactly one option has isCorrect: true."""

SPEECH_PROMPT = """You are a language teacher. Generate a short, clear English sentence (maximum 8 words) for speech practice.
Return ONLY the sentence, no quotes, no explanation, just the plain sentence."""

_FENCED_JSON = re.compile(r"```json([\s\S]*?)```")
_QUOTES = re.compile(r"['\"]")


class QuizFormatError(ValueError):
	pass


def extract_json(text: str) -> Optional[Any]:
	"""Parse JSON from a model reply, preferring a fenced ```json block.

	Returns ``None`` when neither the block nor the raw text parses.
	"""
	match = _FENCED_JSON.search(text or "")
	if match:
		try:
			return json.loads(match.group(1).strip())
		except ValueError:
			pass
	try:
		return json.loads((text or "").strip())
	except ValueError:
		return None


def parse_quiz_question(raw: str) -> Dict[str, Any]:
	data = extract_json(raw)
	if isinstance(data, list):
		data = data[0] if data else None
	if not isinstance(data, dict):
		raise QuizFormatError("no JSON question in response")
	options = data.get("options")
	if not data.get("text") or not isinstance(options, list) or len(options) != 4:
		raise QuizFormatError("question must have text and exactly 4 options")
	if not all(isinstance(o, dict) for o in options):
		raise QuizFormatError("options must be objects")
	if sum(1 for o in options if o.get("isCorrect") is True) != 1:
		raise QuizFormatError("exactly one option must be correct")
	return {
		"text": str(data["text"]),
		"hint": str(data.get("hint", "")),
		"options": [
			{"id": str(o.get("id", i + 1)), "text": str(o.get("text", "")), "isCorrect": o.get("isCorrect") is True}
			for i, o in enumerate(options)
		],
	}


def clean_sentence(raw: str) -> Dict[str, Any]:
	sentence = _QUOTES.sub("", (raw or "").strip())
	return {"sentence": sentence, "wordCount": len(sentence.split(" "))}


async def get_quiz_question(client: ChatClient) -> Dict[str, Any]:
	raw = await client.complete_system(QUIZ_PROMPT, temperature=0.7, max_tokens=500)
	return parse_quiz_question(raw)


async def get_speech_challenge(client: ChatClient) -> Dict[str, Any]:
	raw = await client.complete_system(SPEECH_PROMPT, temperature=0.7, max_tokens=50)
	return clean_sentence(raw)

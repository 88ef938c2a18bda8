import asyncio
import json

import httpx
import pytest

from kidoai.ai_client import AIServiceError, AIServiceNotConfigured, ChatClient
from kidoai.settings import settings
from kidoai.quiz import (
	QuizFormatError,
	clean_sentence,
	extract_json,
	get_quiz_question,
	get_speech_challenge,
	parse_quiz_question,
)


QUESTION = [{
	"text": "¿Qué color es el cielo?",
	"hint": "What colour is the sky?",
	"options": [
		{"id": "1", "text": "Rojo", "isCorrect": False},
		{"id": "2", "text": "Azul", "isCorrect": True},
		{"id": "3", "text": "Verde", "isCorrect": False},
		{"id": "4", "text": "Negro", "isCorrect": False},
	],
}]


def _completion(content: str) -> dict:
	return {"choices": [{"message": {"role": "assistant", "content": content}}]}


def _client(handler) -> ChatClient:
	return ChatClient("test-key", base_url="https://ai.test", model="test-model", transport=httpx.MockTransport(handler))


def test_extract_json_prefers_fenced_block() -> None:
	text = "Here you go:\n```json\n{\"a\": 1}\n```\nEnjoy!"

	assert extract_json(text) == {"a": 1}


def test_extract_json_falls_back_to_raw_text() -> None:
	assert extract_json('  [{"a": 1}]  ') == [{"a": 1}]


def test_extract_json_returns_none_for_prose() -> None:
	assert extract_json("Sorry, I cannot help with that.") is None
	assert extract_json("```json\nnot json\n```") is None


def test_parse_quiz_question_takes_first_item_of_list() -> None:
	question = parse_quiz_question(json.dumps(QUESTION))

	assert question["text"] == "¿Qué color es el cielo?"
	assert len(question["options"]) == 4
	assert [o["isCorrect"] for o in question["options"]] == [False, True, False, False]


def test_parse_quiz_question_rejects_two_correct_options() -> None:
	bad = json.loads(json.dumps(QUESTION))
	bad[0]["options"][0]["isCorrect"] = True

	with pytest.raises(QuizFormatError):
		parse_quiz_question(json.dumps(bad))


def test_parse_quiz_question_rejects_wrong_option_count() -> None:
	bad = json.loads(json.dumps(QUESTION))
	bad[0]["options"] = bad[0]["options"][:3]

	with pytest.raises(QuizFormatError):
		parse_quiz_question(json.dumps(bad))


def test_parse_quiz_question_rejects_empty_list() -> None:
	with pytest.raises(QuizFormatError):
		parse_quiz_question("[]")


def test_clean_sentence_strips_quotes_and_counts_words() -> None:
	assert clean_sentence('  "I love to read books"\n') == {"sentence": "I love to read books", "wordCount": 5}
	assert clean_sentence("The cat's hat")["sentence"] == "The cats hat"


def test_client_requires_api_key(monkeypatch) -> None:
	monkeypatch.setattr(settings, "ai_api_token", None)

	with pytest.raises(AIServiceNotConfigured):
		ChatClient()


def test_get_quiz_question_sends_one_system_prompt() -> None:
	seen = []

	def handler(request: httpx.Request) -> httpx.Response:
		seen.append(request)
		body = json.loads(request.content)
		assert body["model"] == "test-model"
		assert body["messages"][0]["role"] == "system"
		assert body["max_tokens"] == 500
		return httpx.Response(200, json=_completion("```json\n" + json.dumps(QUESTION) + "\n```"))

	async def run():
		client = _client(handler)
		try:
			return await get_quiz_question(client)
		finally:
			await client.aclose()

	question = asyncio.run(run())

	assert len(seen) == 1
	assert str(seen[0].url) == "https://ai.test/chat/completions"
	assert seen[0].headers["authorization"] == "Bearer test-key"
	assert question["hint"] == "What colour is the sky?"


def test_get_speech_challenge_cleans_reply() -> None:
	def handler(request: httpx.Request) -> httpx.Response:
		return httpx.Response(200, json=_completion("'Practice makes perfect'"))

	async def run():
		client = _client(handler)
		try:
			return await get_speech_challenge(client)
		finally:
			await client.aclose()

	assert asyncio.run(run()) == {"sentence": "Practice makes perfect", "wordCount": 3}


def test_upstream_error_is_not_retried() -> None:
	calls = []

	def handler(request: httpx.Request) -> httpx.Response:
		calls.append(request)
		return httpx.Response(503, json={"error": "busy"})

	async def run():
		client = _client(handler)
		try:
			await client.complete_system("hi")
		finally:
			await client.aclose()

	with pytest.raises(AIServiceError):
		asyncio.run(run())
	assert len(calls) == 1


def test_malformed_completion_is_an_ai_error() -> None:
	def handler(request: httpx.Request) -> httpx.Response:
		return httpx.Response(200, json={"unexpected": True})

	async def run():
		client = _client(handler)
		try:
			await client.complete_system("hi")
		finally:
			await client.aclose()

	with pytest.raises(AIServiceError):
		asyncio.run(run())

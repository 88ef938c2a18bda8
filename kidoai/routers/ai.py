import logging

from fastapi import APIRouter, Depends

from ..ai_client import AIServiceError, AIServiceNotConfigured, ChatClient
from ..errors import Internal
from ..quiz import QuizFormatError, get_quiz_question, get_speech_challenge
from ..ratelimit import ai_limiter

router = APIRouter(tags=["ai"], dependencies=[Depends(ai_limiter)])

logger = logging.getLogger(__name__)


def get_chat_client() -> ChatClient:
	try:
		return ChatClient()
	except AIServiceNotConfigured:
		raise Internal("AI service not configured")


@router.get("/getAiQuizz")
async def ai_quiz():
	client = get_chat_client()
	try:
		return await get_quiz_question(client)
	except AIServiceError as exc:
		logger.warning("Quiz generation failed upstream: %s", exc)
		raise Internal("AI service unavailable")
	except QuizFormatError as exc:
		logger.warning("Quiz generation returned unusable output: %s", exc)
		raise Internal("Failed to generate question")
	finally:
		await client.aclose()


@router.get("/sound")
async def speech_challenge():
	client = get_chat_client()
	try:
		challenge = await get_speech_challenge(client)
	except AIServiceError as exc:
		logger.warning("Speech challenge failed upstream: %s", exc)
		raise Internal("AI service unavailable")
	finally:
		await client.aclose()
	if not challenge["sentence"]:
		raise Internal("Failed to generate sentence")
	return challenge

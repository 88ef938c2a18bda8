from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..db import get_db
from ..errors import BadRequest, Unauthorized
from ..models import User
from ..schemas import AnswerRequest, EditProfileRequest, VerifyPasswordRequest
from ..security import verify_password
from ..stats import user_stats
from .. import users
from .auth import get_current_user

router = APIRouter(tags=["profile"])


@router.get("/profile")
def get_profile(user: User = Depends(get_current_user)):
	return {
		"error": False,
		"user": {
			**users.public_user(user),
			"answers": [users.answer_dict(a) for a in user.answers],
			"googleId": user.google_id,
			"createdAt": user.created_at.isoformat() if user.created_at else None,
			"stats": user_stats(user),
		},
	}


@router.put("/editProfile")
def edit_profile(req: EditProfileRequest, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
	user = users.update_user(db, user, name=req.name, password=req.password, difficulty=req.difficulty)
	return {
		"error": False,
		"message": "Profile updated successfully",
		"user": {
			"id": user.id,
			"name": user.name,
			"email": user.email,
			"difficulty": user.difficulty,
		},
	}


@router.put("/verifyPassword")
def verify_user_password(req: VerifyPasswordRequest, user: User = Depends(get_current_user)):
	if not req.password:
		raise BadRequest("Password is required")
	if user.password_credential is None:
		raise BadRequest("This account uses Google sign-in and has no password")
	if not verify_password(req.password, user.password_hash):
		raise Unauthorized("Incorrect password")
	return {"error": False, "message": "Password verified"}


@router.get("/stats")
def get_stats(user: User = Depends(get_current_user)):
	return {
		"error": False,
		"stats": {
			**user_stats(user),
			"score": user.score,
			"difficulty": user.difficulty,
			"memberSince": user.created_at.isoformat() if user.created_at else None,
		},
	}


@router.post("/submit")
def submit(req: AnswerRequest, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
	user = users.submit_answer(db, user, req.answer, req.is_valid)
	return {
		"error": False,
		"message": "Correct! +10 points" if req.is_valid else "Not quite right. Keep trying!",
		"score": user.score,
		"totalAnswers": len(user.answers),
	}


@router.get("/answers")
@router.get("/answers/{answer_id}", include_in_schema=False)
def get_answers(user: User = Depends(get_current_user)):
	answers = [users.answer_dict(a) for a in user.answers]
	return {
		"error": False,
		"message": "Answers found" if answers else "No answers yet",
		"answers": answers,
		"stats": user_stats(user),
	}

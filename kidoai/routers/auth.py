from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from ..db import get_db
from ..errors import BadRequest, Conflict, Unauthorized
from ..google_auth import verify_google_token
from ..models import User
from ..ratelimit import auth_limiter, signup_limiter
from ..schemas import GoogleAuthRequest, LoginRequest, SignupRequest
from ..security import InvalidToken, TokenExpired, issue_token, verify_password, verify_token
from .. import users

router = APIRouter(tags=["auth"])

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user(
	credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
	db: Session = Depends(get_db),
) -> User:
	if credentials is None or not credentials.credentials:
		raise Unauthorized("Access denied. No token provided.")
	try:
		claims = verify_token(credentials.credentials)
	except TokenExpired:
		raise Unauthorized("Token expired. Please login again.")
	except InvalidToken:
		raise Unauthorized("Invalid token.")
	user = users.get_user(db, claims.user_id)
	if user is None:
		raise Unauthorized("User no longer exists.")
	if not user.is_active:
		raise Unauthorized("User account is deactivated.")
	return user


def authenticate_user(db: Session, email: str, password: str) -> User:
	user = users.find_by_email(db, email)
	# Google-only accounts get the same answer as a wrong password
	if user is None or not user.is_active or user.is_oauth_only:
		raise Unauthorized("Invalid email or password")
	if not verify_password(password, user.password_hash):
		raise Unauthorized("Invalid email or password")
	return user


@router.post("/signup", status_code=201, dependencies=[Depends(signup_limiter)])
def signup(req: SignupRequest, db: Session = Depends(get_db)):
	if users.find_by_email(db, req.email):
		raise Conflict("An account with this email already exists")
	user = users.create_user(db, name=req.name, email=req.email, password=req.password)
	token = issue_token(user.id, user.email)
	return {
		"error": False,
		"message": "Account created successfully",
		"user": {**users.public_user(user), "token": token},
		"token": token,
	}


@router.put("/login", dependencies=[Depends(auth_limiter)])
def login(req: LoginRequest, request: Request, db: Session = Depends(get_db)):
	user = authenticate_user(db, req.email, req.password)
	user = users.update_user(db, user, last_login=datetime.utcnow())
	auth_limiter.release(request)
	token = issue_token(user.id, user.email)
	return {
		"error": False,
		"message": "Login successful",
		"user": {**users.public_user(user), "token": token},
		"token": token,
	}


@router.post("/auth/google", dependencies=[Depends(auth_limiter)])
def google_auth(req: GoogleAuthRequest, request: Request, db: Session = Depends(get_db)):
	if not req.token:
		raise BadRequest("Google token is required")
	identity = verify_google_token(req.token)
	now = datetime.utcnow()
	user = users.find_by_email_or_google_id(db, identity.email, identity.google_id)
	if user is None:
		user = users.create_user(
			db,
			name=identity.name[:50],
			email=identity.email,
			google_id=identity.google_id,
			difficulty="easy",
			last_login=now,
		)
	else:
		# Linking keeps any existing password hash untouched
		user = users.update_user(
			db,
			user,
			google_id=None if user.google_id else identity.google_id,
			last_login=now,
		)
	auth_limiter.release(request)
	token = issue_token(user.id, user.email)
	return {
		"error": False,
		"message": "Authentication successful",
		"token": token,
		"user": users.public_user(user),
	}

from dataclasses import dataclass

from google.auth import exceptions as google_exceptions
from google.auth.transport import requests
from google.oauth2 import id_token

from .errors import Internal, Unauthorized
from .settings import settings


@dataclass(frozen=True)
class GoogleIdentity:
	email: str
	name: str
	google_id: str


def verify_google_token(token: str) -> GoogleIdentity:
	if not settings.google_client_id:
		raise Internal("Google sign-in is not configured")
	try:
		idinfo = id_token.verify_oauth2_token(token, requests.Request(), settings.google_client_id)
	except (ValueError, google_exceptions.GoogleAuthError) as exc:
		raise Unauthorized("Invalid Google token") from exc
	email = idinfo.get("email")
	google_id = idinfo.get("sub")
	if not email or not google_id:
		raise Unauthorized("Invalid Google token")
	name = idinfo.get("name") or email.split("@", 1)[0]
	return GoogleIdentity(email=email, name=name, google_id=google_id)

import logging
from datetime import datetime, timezone

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from .db import init_db
from .errors import register_error_handlers
from .ratelimit import api_limiter
from .settings import settings, validate_runtime_config
from .routers import ai, auth, board, profile

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

app = FastAPI(title="KIDOAI Tutor API", version="1.0.0", dependencies=[Depends(api_limiter)])

app.add_middleware(
	CORSMiddleware,
	allow_origins=list(dict.fromkeys([settings.client_url, "http://localhost:3000", "http://localhost:3001"])),
	allow_credentials=True,
	allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"],
	allow_headers=["Content-Type", "Authorization", "X-Requested-With"],
	expose_headers=["Retry-After"],
	max_age=86400,
)

register_error_handlers(app)

app.include_router(auth.router, prefix="/user")
app.include_router(profile.router, prefix="/user")
app.include_router(board.router, prefix="/user")
app.include_router(ai.router, prefix="/user")


if settings.is_development:
	@app.middleware("http")
	async def log_requests(request: Request, call_next):
		logger.info("%s %s", request.method, request.url.path)
		return await call_next(request)


@app.get("/")
def root():
	return {
		"status": "OK",
		"message": "KIDOAI Tutor API is running",
		"timestamp": datetime.now(timezone.utc).isoformat(),
		"version": app.version,
		"ai_configured": bool(settings.ai_api_token),
	}


@app.on_event("startup")
def startup_event():
	# Refuse to serve without a signing secret
	validate_runtime_config()
	init_db()
	logger.info("KIDOAI Tutor API starting (env=%s, port=%s)", settings.node_env, settings.port)


def run() -> None:
	import uvicorn
	uvicorn.run("kidoai.main:app", host="0.0.0.0", port=settings.port, reload=settings.is_development)

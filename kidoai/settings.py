from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field

class Settings(BaseSettings):
	# Auth configuration
	jwt_secret: str | None = Field(default=None, validation_alias="JWT_SECRET")
	# Accepts "7d", "12h", "30m", "45s" or a bare number of seconds
	jwt_expires_in: str = Field(default="7d", validation_alias="JWT_EXPIRES_IN")
	jwt_algorithm: str = Field(default="HS256", validation_alias="JWT_ALGORITHM")
	bcrypt_rounds: int = Field(default=12, validation_alias="BCRYPT_ROUNDS")

	# Google sign-in
	google_client_id: str | None = Field(default=None, validation_alias="GOOGLE_CLIENT_ID")

	# AI provider (OpenAI-compatible chat completions endpoint)
	ai_api_token: str | None = Field(default=None, validation_alias="API_TOKEN")
	ai_base_url: str = Field(default="https://models.inference.ai.azure.com", validation_alias="AI_BASE_URL")
	ai_model: str = Field(default="gpt-4o", validation_alias="AI_MODEL")
	ai_timeout_seconds: float = Field(default=30.0, validation_alias="AI_TIMEOUT_SECONDS")

	# HTTP
	client_url: str = Field(default="http://localhost:3000", validation_alias="CLIENT_URL")
	port: int = Field(default=3030, validation_alias="PORT")
	node_env: str = Field(default="development", validation_alias="NODE_ENV")

	# Database
	database_url: str | None = Field(default=None, validation_alias="DATABASE_URL")

	# pydantic-settings v2 style config
	model_config = SettingsConfigDict(env_file=".env", extra="ignore")

	@property
	def is_development(self) -> bool:
		return self.node_env.lower() == "development"

settings = Settings()


def validate_runtime_config() -> None:
	if not settings.jwt_secret:
		raise RuntimeError("JWT_SECRET is not defined in environment variables")

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field

class Settings(BaseSettings):
	gemini_api_key: str | None = Field(default=None, validation_alias="GEMINI_API_KEY")
	# Provider can be "vertex" (Vertex AI Express) or "ai_studio" (Generative Language API)
	gemini_provider: str = Field(default="ai_studio", validation_alias="GEMINI_PROVIDER")
	gemini_model: str = Field(default="gemini-2.5-flash", validation_alias="GEMINI_MODEL")
	# Vertex configuration
	vertex_region: str = Field(default="us-central1", validation_alias="GEMINI_VERTEX_REGION")
	vertex_project: str | None = Field(default=None, validation_alias="GEMINI_VERTEX_PROJECT")
	provider_timeout_seconds: float = Field(default=30.0, validation_alias="PROVIDER_TIMEOUT_SECONDS")

	# Language the rubric feedback is written in (the site's students read Turkish)
	feedback_language: str = Field(default="Turkish", validation_alias="FEEDBACK_LANGUAGE")

	# Evaluation client
	evaluate_api_url: str = Field(default="http://localhost:8000", validation_alias="EVALUATE_API_URL")
	evaluate_timeout_seconds: float = Field(default=30.0, validation_alias="EVALUATE_TIMEOUT_SECONDS")

	# Database
	database_url: str | None = Field(default=None, validation_alias="DATABASE_URL")

	log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

	# pydantic-settings v2 style config
	model_config = SettingsConfigDict(env_file=".env", extra="ignore")

settings = Settings()

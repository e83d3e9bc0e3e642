"""Application settings loaded from environment variables via .env file."""

from pathlib import Path

from pydantic import AliasChoices, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings

REPO_ROOT = Path(__file__).resolve().parents[2]
BACKEND_DIR = Path(__file__).resolve().parents[1]


def normalise_llm_provider(value: str) -> str:
    provider = value.strip().lower()
    aliases = {
        "gemini": "google",
        "google-aistudio": "google",
        "google-ai-studio": "google",
        "aistudio": "google",
        "google": "google",
        "openai": "openai",
        "gpt": "openai",
    }
    return aliases.get(provider, provider)


class Settings(BaseSettings):
    # LLM providers
    # `google` talks to the Gemini API (Google AI Studio) with an API key.
    llm_provider: str = "google"
    google_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("google_api_key", "gemini_api_key"),
    )
    llm_model_google: str = "gemini-2.5-flash"
    openai_api_key: str = ""
    llm_model_openai: str = "gpt-5-mini"
    llm_max_output_tokens: int = 8192
    # Whole-exchange deadline; expiry is reported to the user as an upstream failure.
    llm_request_timeout_seconds: float = 60.0

    # Chat
    # When false every exchange is seeded only with the fixed instruction turns.
    chat_forward_history: bool = False
    llm_max_context_tokens: int = 32000

    # CORS
    cors_origins: list[str] = ["*"]

    # Backend
    backend_host: str = "0.0.0.0"
    port: int = 8000
    backend_reload: bool = False
    log_level: str = "INFO"

    # Client
    backend_base_url: str = "http://localhost:8000"

    # Rate limiting
    rate_limit_client_per_minute: int = 20
    rate_limit_global_per_minute: int = 120

    @field_validator("llm_provider", mode="before")
    @classmethod
    def _normalise_llm_provider(cls, value: str) -> str:
        return normalise_llm_provider(str(value))

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalise_log_level(cls, value: str) -> str:
        return str(value).strip().upper()

    @field_validator("backend_base_url", mode="before")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return str(value).strip().rstrip("/")

    model_config = ConfigDict(
        env_file=(str(REPO_ROOT / ".env"), str(BACKEND_DIR / ".env")),
        extra="ignore",
        populate_by_name=True,
    )


settings = Settings()

"""Application configuration."""

from pydantic import model_validator
from pydantic_settings import BaseSettings

_KNOWN_PROVIDERS = {"openai", "ollama", "vllm"}


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Development mode: when False, error details are hidden from clients
    dev_mode: bool = True

    # CORS
    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
        "https://localhost:3000",
        "https://localhost:5173",
    ]

    # LLM provider selection
    llm_provider: str = "openai"

    # OpenAI
    openai_api_key: str = ""
    openai_base_url: str = "https://api.openai.com/v1"
    openai_model: str = "gpt-4o"

    # Ollama (local)
    ollama_base_url: str = "http://localhost:11434/v1"
    ollama_model: str = "llama3.2"

    # vLLM (self-hosted)
    vllm_base_url: str = "http://localhost:8080/v1"
    vllm_model: str = "meta-llama/Llama-3.1-8B-Instruct"
    vllm_api_key: str = ""

    # Streaming completions have no overall deadline, only connect/read gaps
    llm_connect_timeout_seconds: float = 10.0
    llm_read_timeout_seconds: float = 120.0

    # Conversation defaults
    default_target_language: str = "French"
    default_native_language: str = "English"

    # Speech synthesis speaking rate handed to the browser
    speech_rate: float = 0.8

    # Rate Limiting
    rate_limit_llm: int = 20  # per client per minute

    # Logging
    log_level: str = "info"

    @model_validator(mode="after")
    def _validate_provider(self) -> "Settings":
        if self.llm_provider not in _KNOWN_PROVIDERS:
            raise ValueError(
                f"LLM_PROVIDER must be one of {sorted(_KNOWN_PROVIDERS)}, got {self.llm_provider!r}"
            )
        return self

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()

"""Application configuration loaded from .env and environment."""

from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """Load and validate environment variables with type hints and defaults."""

    # LLM APIs
    huggingface_api_key: Optional[str] = None
    support_model_name: str = "meta-llama/Llama-3.1-8B-Instruct"
    search_model_name: str = "Qwen/Qwen2.5-7B-Instruct"

    # Seconds to wait on a single completion request before giving up.
    request_timeout: int = 120

    # Search
    tavily_api_key: Optional[str] = None
    search_max_results: int = 3

    # Logging
    log_level: str = "INFO"

    # LangSmith
    langsmith_tracing: bool = False
    langsmith_endpoint: str = "https://api.smith.langchain.com"
    langsmith_api_key: Optional[str] = None
    langsmith_project: str = "langcorp-agents"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False  # Allow TAVILY_API_KEY or tavily_api_key


# Global settings instance (load once at startup)
settings = Settings()

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    groq_api_key: str = ""
    openai_api_key: str = ""
    anthropic_api_key: str = ""
    agent_model: str = "gpt-4o-mini"
    extraction_model: str = ""  # empty = reuse agent_model for template content extraction
    langfuse_secret_key: str = ""
    langfuse_public_key: str = ""
    langfuse_host: str = "https://us.cloud.langfuse.com"
    store_backend: Literal["firebase", "memory"] = "firebase"
    firebase_database_url: str = ""
    firebase_credentials_path: str = ""
    agent_shared_secret: str = ""
    max_agent_iterations: int = Field(default=2, ge=1, le=10)
    max_agent_iterations_structured: int = Field(default=3, ge=1, le=10)
    log_level: str = "INFO"


settings = Settings()

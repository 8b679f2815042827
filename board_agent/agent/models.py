"""Chat model catalog and provider factory."""

from dataclasses import dataclass

from langchain_anthropic import ChatAnthropic
from langchain_core.language_models import BaseChatModel
from langchain_groq import ChatGroq
from langchain_openai import ChatOpenAI

from board_agent.config import Settings


@dataclass(frozen=True)
class ModelSpec:
    model_id: str
    display_name: str
    provider: str  # "openai" | "groq" | "anthropic"
    api_model_name: str
    temperature: float = 0.2
    is_free: bool = False


SUPPORTED_MODELS: dict[str, ModelSpec] = {
    "gpt-4o-mini": ModelSpec("gpt-4o-mini", "GPT-4o mini", "openai", "gpt-4o-mini"),
    "gpt-4o": ModelSpec("gpt-4o", "GPT-4o", "openai", "gpt-4o"),
    "llama-3.3-70b": ModelSpec(
        "llama-3.3-70b", "Llama 3.3 70B (Groq)", "groq", "llama-3.3-70b-versatile", is_free=True,
    ),
    "claude-haiku": ModelSpec("claude-haiku", "Claude Haiku", "anthropic", "claude-haiku-4-5-20251001"),
    "claude-sonnet": ModelSpec("claude-sonnet", "Claude Sonnet", "anthropic", "claude-sonnet-4-5-20250929"),
}

DEFAULT_MODEL_ID = "gpt-4o-mini"


def get_model_spec(model_id: str) -> ModelSpec:
    if model_id not in SUPPORTED_MODELS:
        raise ValueError(f"Unknown model: {model_id}")
    return SUPPORTED_MODELS[model_id]


def is_model_available(spec: ModelSpec, settings: Settings) -> bool:
    keys = {
        "openai": settings.openai_api_key,
        "groq": settings.groq_api_key,
        "anthropic": settings.anthropic_api_key,
    }
    return bool(keys.get(spec.provider))


def create_llm(spec: ModelSpec, settings: Settings) -> BaseChatModel:
    """Create the LangChain chat model for the given spec.

    Provider clients do not retry on their own; the orchestrator owns the
    single-retry policy.
    """
    if spec.provider == "openai":
        if not settings.openai_api_key:
            raise ValueError("OPENAI_API_KEY is not configured")
        return ChatOpenAI(
            model=spec.api_model_name,
            temperature=spec.temperature,
            api_key=settings.openai_api_key,
            max_retries=0,
        )
    elif spec.provider == "groq":
        if not settings.groq_api_key:
            raise ValueError("GROQ_API_KEY is not configured")
        return ChatGroq(
            model=spec.api_model_name,
            temperature=spec.temperature,
            api_key=settings.groq_api_key,
            max_retries=0,
        )
    elif spec.provider == "anthropic":
        if not settings.anthropic_api_key:
            raise ValueError("ANTHROPIC_API_KEY is not configured")
        return ChatAnthropic(
            model=spec.api_model_name,
            temperature=spec.temperature,
            api_key=settings.anthropic_api_key,
            max_retries=0,
        )
    else:
        raise ValueError(f"Unknown provider: {spec.provider}")

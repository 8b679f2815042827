"""Process-wide collaborators, built once at startup and passed into every command."""

import logging
from dataclasses import dataclass, field

from langchain_core.language_models import BaseChatModel

from board_agent.agent.models import create_llm, get_model_spec
from board_agent.config import Settings
from board_agent.services.store import FirebaseStore, MemoryStore, Store
from board_agent.tracing.cost_tracker import UsageTracker
from board_agent.tracing.setup import RunTracer, init_tracing

logger = logging.getLogger(__name__)


@dataclass
class AgentRuntime:
    settings: Settings
    store: Store
    llm: BaseChatModel
    extraction_llm: BaseChatModel
    model_name: str = ""
    tracer: RunTracer = field(default_factory=RunTracer)
    usage: UsageTracker = field(default_factory=UsageTracker)


def build_store(settings: Settings) -> Store:
    if settings.store_backend == "memory":
        logger.warning("Using the in-memory store; board data will not persist")
        return MemoryStore()
    if not settings.firebase_database_url:
        raise ValueError("FIREBASE_DATABASE_URL is not configured")
    return FirebaseStore(settings.firebase_database_url, settings.firebase_credentials_path)


def build_runtime(settings: Settings) -> AgentRuntime:
    spec = get_model_spec(settings.agent_model)
    llm = create_llm(spec, settings)
    extraction_llm = (
        create_llm(get_model_spec(settings.extraction_model), settings)
        if settings.extraction_model
        else llm
    )
    logger.info("Agent runtime ready (model=%s, store=%s)", spec.model_id, settings.store_backend)
    return AgentRuntime(
        settings=settings,
        store=build_store(settings),
        llm=llm,
        extraction_llm=extraction_llm,
        model_name=spec.api_model_name,
        tracer=init_tracing(settings),
    )

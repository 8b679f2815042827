import asyncio
import functools
import logging
from typing import Any

from langfuse import Langfuse

from board_agent.config import Settings

logger = logging.getLogger(__name__)


def _fire_and_forget(method):
    """Run a tracing call, logging and discarding any failure."""

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        if self.client is None:
            return None
        try:
            return method(self, *args, **kwargs)
        except Exception as e:
            logger.warning("LangFuse %s failed: %s", method.__name__, e)
            return None

    return wrapper


class RunTracer:
    """Thin LangFuse adapter: start a run, end it, and attach feedback scores.

    With no client configured every method is a no-op returning None.
    """

    def __init__(self, client: Langfuse | None = None):
        self.client = client

    @_fire_and_forget
    def start_run(self, name: str, user_id: str, metadata: dict, input: Any = None):
        return self.client.trace(name=name, user_id=user_id, metadata=metadata, input=input)

    @_fire_and_forget
    def end_run(self, run, output: Any = None, error: BaseException | None = None) -> None:
        if run is None:
            return
        if error is not None:
            run.update(output={"error": str(error)}, level="ERROR", status_message=type(error).__name__)
        else:
            run.update(output=output)

    @_fire_and_forget
    def record_feedback(self, run, key: str, score: float) -> None:
        if run is None:
            return
        self.client.score(trace_id=run.id, name=key, value=score)

    def callbacks(self, run) -> list:
        """LangChain callbacks that nest completion calls under ``run``."""
        handler = self._langchain_handler(run)
        return [handler] if handler is not None else []

    @_fire_and_forget
    def _langchain_handler(self, run):
        if run is None:
            return None
        return run.get_langchain_handler()

    async def flush(self) -> None:
        """Send queued events on a worker thread; the client call blocks until sent."""
        if self.client is None:
            return
        try:
            await asyncio.to_thread(self.client.flush)
        except Exception as e:
            logger.warning("LangFuse flush failed: %s", e)


def init_tracing(settings: Settings) -> RunTracer:
    """Build the run tracer; tracing is disabled when LangFuse keys are missing."""
    if settings.langfuse_secret_key and settings.langfuse_public_key:
        client = Langfuse(
            secret_key=settings.langfuse_secret_key,
            public_key=settings.langfuse_public_key,
            host=settings.langfuse_host,
        )
        logger.info("LangFuse tracing enabled (host: %s)", settings.langfuse_host)
        return RunTracer(client)

    logger.warning("LangFuse tracing disabled: keys not set")
    return RunTracer(None)


def shutdown_tracing(tracer: RunTracer) -> None:
    if tracer.client is None:
        return
    try:
        tracer.client.flush()
        tracer.client.shutdown()
    except Exception as e:
        logger.warning("LangFuse shutdown failed: %s", e)
    tracer.client = None

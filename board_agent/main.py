import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

from board_agent.config import settings
from board_agent.routes.agent_routes import router as agent_router
from board_agent.routes.health import router as health_router
from board_agent.runtime import build_runtime
from board_agent.tracing.setup import shutdown_tracing

logger = logging.getLogger(__name__)


class AgentAuthMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request, call_next):
        if request.url.path == "/health":
            return await call_next(request)
        secret = request.headers.get("x-agent-secret", "")
        if secret != settings.agent_shared_secret:
            return JSONResponse(status_code=403, content={"error": "Forbidden"})
        return await call_next(request)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if not settings.agent_shared_secret:
        raise RuntimeError("AGENT_SHARED_SECRET must be set")
    app.state.runtime = build_runtime(settings)
    yield
    shutdown_tracing(app.state.runtime.tracer)


app = FastAPI(title="Board Agent", version="1.0.0", lifespan=lifespan)

app.add_middleware(AgentAuthMiddleware)

app.include_router(health_router)
app.include_router(agent_router, prefix="/agent")

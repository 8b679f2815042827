"""Agent API routes: the interface between the board server and the agent."""

import logging

from fastapi import APIRouter, HTTPException, Request

from board_agent.agent.agent import run_agent_command
from board_agent.agent.models import DEFAULT_MODEL_ID, SUPPORTED_MODELS, is_model_available
from board_agent.errors import InvalidPlan, NotFound, ProviderError
from board_agent.models.schemas import AgentCommandRequest, AgentCommandResponse

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/command", response_model=AgentCommandResponse)
async def handle_command(body: AgentCommandRequest, request: Request):
    """Run a natural language command against a board.

    The agent writes directly to the board store; the response only reports
    whether the command succeeded.
    """
    if not body.command.strip():
        raise HTTPException(status_code=400, detail="Command cannot be empty")

    runtime = request.app.state.runtime
    try:
        result = await run_agent_command(body, runtime)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidPlan as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ProviderError as e:
        logger.error("Agent command failed on board %s: %s", body.board_id, e)
        raise HTTPException(status_code=502, detail=str(e))

    logger.info(
        "Command on board %s finished via %s (%d tool calls)",
        body.board_id, result.route, result.tool_calls,
    )
    return AgentCommandResponse(success=result.success, message=result.message)


@router.get("/models")
async def list_models(request: Request):
    """Return the model catalog, flagging models whose API keys are configured."""
    settings = request.app.state.runtime.settings
    models = [
        {
            "model_id": spec.model_id,
            "display_name": spec.display_name,
            "provider": spec.provider,
            "is_free": spec.is_free,
            "available": is_model_available(spec, settings),
        }
        for spec in SUPPORTED_MODELS.values()
    ]
    return {"models": models, "default": DEFAULT_MODEL_ID, "active": settings.agent_model}

from fastapi import APIRouter, Request

router = APIRouter()


@router.get("/health")
async def health():
    return {"status": "ok", "service": "board-agent"}


@router.get("/agent/usage")
async def get_usage(request: Request):
    return request.app.state.runtime.usage.get_summary()

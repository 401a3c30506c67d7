"""Health endpoint."""

from fastapi import APIRouter, Request

router = APIRouter()


@router.get("/health")
async def health(request: Request):
    pipeline = getattr(request.app.state, "pipeline", None)
    return {
        "status": "ok",
        "backend": pipeline.backend_name if pipeline is not None else "unconfigured",
    }

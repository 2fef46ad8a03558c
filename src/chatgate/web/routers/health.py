from typing import Any

from fastapi import APIRouter

from chatgate.web.deps import AppDep

router = APIRouter(tags=["health"])


@router.get(
    "/health",
    summary="Service health",
    description="Report available API keys, personas, total accounts and active sessions.",
    operation_id="health",
)
async def health(app: AppDep) -> dict[str, Any]:
    return await app.get_health()

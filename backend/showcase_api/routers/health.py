"""Health check endpoint."""

from typing import Annotated

from fastapi import APIRouter, Depends

from showcase_api.dependencies import get_connection_registry
from showcase_api.services.connection_registry import ConnectionRegistry

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(
    registry: Annotated[ConnectionRegistry, Depends(get_connection_registry)],
):
    """Report liveness and the number of registered notification sockets."""
    return {"status": "healthy", "connections": len(registry)}

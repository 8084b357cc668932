import structlog
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from ....application.dtos import ConnectRequestDTO
from ....application.services import ConnectionService
from ....domain.errors import UnknownPlatformError
from ..dependencies import get_connection_service, get_tenant_id

logger = structlog.get_logger()

router = APIRouter(tags=["connections"])


@router.post(
    "/connect",
    summary="Connect a platform",
    description="Store the credentials used to publish to a platform.",
)
async def connect(
    request: ConnectRequestDTO,
    tenant_id: str = Depends(get_tenant_id),
    service: ConnectionService = Depends(get_connection_service),
):
    if not request.platform or not request.credentials:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Platform and credentials required"},
        )

    try:
        platform = await service.connect(tenant_id, request.platform, request.credentials)
    except UnknownPlatformError as e:
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": e.message})

    return {"success": True, "platform": platform.value}


@router.delete("/connect/{platform}", summary="Disconnect a platform")
async def disconnect(
    platform: str,
    tenant_id: str = Depends(get_tenant_id),
    service: ConnectionService = Depends(get_connection_service),
):
    try:
        removed = await service.disconnect(tenant_id, platform)
    except UnknownPlatformError as e:
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": e.message})

    return {"success": True, "platform": removed.value}


@router.get("/connections", summary="List connected platforms")
async def list_connections(
    tenant_id: str = Depends(get_tenant_id),
    service: ConnectionService = Depends(get_connection_service),
) -> dict:
    return {"platforms": await service.connected_platforms(tenant_id)}

"""LinkedIn OAuth endpoints.

Flow:
1. Client asks for the authorization URL and redirects the user
2. LinkedIn redirects back to the client with a code
3. Client posts the code and the state to /linkedin/callback
4. Server checks the state, exchanges the code, confirms the profile,
   stores the token bundle
"""

import httpx
import structlog
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from ....application.dtos import LinkedInCallbackDTO
from ....application.services import ConnectionService
from ....domain.errors import InvalidStateError, PublishError
from ..dependencies import get_connection_service, get_tenant_id

logger = structlog.get_logger()

router = APIRouter(prefix="/linkedin", tags=["linkedin"])


@router.get("/auth", summary="LinkedIn authorization URL")
async def authorization_url(
    tenant_id: str = Depends(get_tenant_id),
    service: ConnectionService = Depends(get_connection_service),
) -> dict:
    auth_url, state = service.linkedin_authorization_url(tenant_id)
    return {"authUrl": auth_url, "state": state}


@router.post("/callback", summary="Complete LinkedIn connection")
async def callback(
    request: LinkedInCallbackDTO,
    tenant_id: str = Depends(get_tenant_id),
    service: ConnectionService = Depends(get_connection_service),
):
    if not request.code:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Authorization code required"},
        )
    if not request.state:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "State required"},
        )

    try:
        profile = await service.complete_linkedin_auth(tenant_id, request.code, request.state)
    except InvalidStateError as e:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": e.message},
        )
    except (PublishError, httpx.HTTPError) as e:
        details = (e.details or e.message) if isinstance(e, PublishError) else str(e)
        logger.error("LinkedIn connection failed", error=details)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Failed to connect to LinkedIn", "details": details},
        )

    return {
        "success": True,
        "message": "LinkedIn connected successfully",
        "profile": profile,
    }

import structlog
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse

from ....application.dtos import (
    STATUS_BY_KIND,
    PostRequestDTO,
    PublishRequestDTO,
    report_to_dict,
    result_to_dict,
)
from ....application.services import PostScheduler, PublishOrchestrator
from ....domain.models import PublishFailure, PublishRequest
from ..dependencies import get_orchestrator, get_post_scheduler, get_tenant_id

logger = structlog.get_logger()

router = APIRouter(tags=["posts"])


@router.post(
    "/post",
    summary="Publish to one platform",
    description="Publish content to a single connected platform.",
)
async def post(
    request: PostRequestDTO,
    tenant_id: str = Depends(get_tenant_id),
    orchestrator: PublishOrchestrator = Depends(get_orchestrator),
):
    if not (request.platform or "").strip() or not (request.content or "").strip():
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Platform and content required"},
        )

    media = request.image.to_media() if request.image else None
    result = await orchestrator.publish_one(tenant_id, request.platform, request.content, media)

    body = result_to_dict(result)
    if isinstance(result, PublishFailure):
        return JSONResponse(status_code=STATUS_BY_KIND[result.error_kind], content=body)
    return body


@router.post(
    "/publish",
    summary="Publish to several platforms",
    description="Publish one piece of content to several platforms, now or at a scheduled time.",
)
async def publish(
    request: PublishRequestDTO,
    tenant_id: str = Depends(get_tenant_id),
    orchestrator: PublishOrchestrator = Depends(get_orchestrator),
    scheduler: PostScheduler = Depends(get_post_scheduler),
):
    try:
        publish_request = PublishRequest(
            platforms=tuple(request.platforms),
            content=request.content or "",
            media=request.image.to_media() if request.image else None,
            scheduled_at=request.scheduled_at,
        )
    except ValueError as e:
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": str(e)})

    if PostScheduler.is_deferred(publish_request):
        scheduled = scheduler.submit(tenant_id, publish_request)
        return JSONResponse(
            status_code=status.HTTP_202_ACCEPTED,
            content={
                "id": scheduled.id,
                "status": scheduled.status.value,
                "runAt": scheduled.run_at.isoformat(),
            },
        )

    report = await orchestrator.publish(tenant_id, publish_request)
    return report_to_dict(report)


@router.get("/scheduled/{post_id}", summary="Get a scheduled post")
async def get_scheduled(
    post_id: str,
    tenant_id: str = Depends(get_tenant_id),
    scheduler: PostScheduler = Depends(get_post_scheduler),
) -> dict:
    scheduled = scheduler.get(post_id)
    if scheduled is None or scheduled.tenant_id != tenant_id:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Scheduled post {post_id} not found",
        )

    body = {
        "id": scheduled.id,
        "status": scheduled.status.value,
        "runAt": scheduled.run_at.isoformat(),
        "platforms": list(scheduled.request.platforms),
    }
    if scheduled.report is not None:
        body.update(report_to_dict(scheduled.report))
    if scheduled.error:
        body["error"] = scheduled.error
    return body


@router.delete("/scheduled/{post_id}", summary="Cancel a scheduled post")
async def cancel_scheduled(
    post_id: str,
    tenant_id: str = Depends(get_tenant_id),
    scheduler: PostScheduler = Depends(get_post_scheduler),
) -> dict:
    scheduled = scheduler.get(post_id)
    if scheduled is None or scheduled.tenant_id != tenant_id:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Scheduled post {post_id} not found",
        )
    return {"id": post_id, "cancelled": scheduler.cancel(post_id)}

from fastapi import APIRouter, Request, Response

from stage_webhook.services.stage_service import process_webhook_stage

router = APIRouter(tags=["webhooks"])


@router.api_route("/api/webhook", methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"])
async def webhook_stage(request: Request) -> Response:
    """Обработка вебхука от ActiveCampaign."""
    return await process_webhook_stage(request)

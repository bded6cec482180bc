from datetime import datetime, timezone

from fastapi import APIRouter

from stage_webhook.core.settings import settings

router = APIRouter(tags=["health"])


@router.get("/api/health")
async def health() -> dict[str, str]:
    """Проверка статуса приложения."""
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "message": "AC Landing Page Stage Webhook is running",
        "version": settings.APP_VERSION,
    }

import json
import logging
from typing import Any

from fastapi import Request, Response, status
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from stage_webhook.core.activecampaign_client import ActiveCampaignClient
from stage_webhook.core.errors import ClientInputError, ConfigurationError, UpstreamUpdateError, WebhookError
from stage_webhook.core.landing_pages import LANDING_PAGES
from stage_webhook.core.payload import extract_contact_id, extract_landing_page
from stage_webhook.core.settings import settings
from stage_webhook.core.stage_resolver import resolve_stage
from stage_webhook.core.utils import extract_slug

logger = logging.getLogger(__name__)


async def _read_payload(request: Request) -> Any:
    """Чтение тела вебхука: JSON или form-urlencoded (формат ActiveCampaign)."""
    content_type = request.headers.get("content-type", "")
    logger.info("Получен вебхук, Content-Type: %s", content_type)

    try:
        if "application/json" in content_type:
            return await request.json()
        form = await request.form()
        return {key: value if isinstance(value, str) else str(value) for key, value in form.items()}
    except (ValueError, StarletteHTTPException) as e:
        logger.warning("Не удалось разобрать тело вебхука: %s", e)
        return {}


async def process_webhook_stage(request: Request) -> Response:
    """Обработка вебхука ActiveCampaign: определение этапа по посадочной странице."""
    if request.method == "OPTIONS":
        return Response(status_code=status.HTTP_200_OK)

    if request.method != "POST":
        return JSONResponse(
            status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
            content={"error": "Method not allowed"},
        )

    try:
        return await _process_webhook_stage_internal(request)
    except WebhookError as e:
        logger.error("Вебхук отклонён: %s", e.error)
        return JSONResponse(status_code=e.status_code, content=e.to_body())
    except Exception as e:
        logger.error("Ошибка обработки вебхука: %s", e, exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error", "message": str(e)},
        )


async def _process_webhook_stage_internal(request: Request) -> Response:
    """Линейная обработка вебхука после проверки метода."""
    if not settings.is_configured:
        logger.error("Не заданы AC_API_URL или AC_API_KEY")
        raise ConfigurationError("Server configuration error")

    data = await _read_payload(request)
    logger.debug("Тело вебхука: %s", json.dumps(data, ensure_ascii=False, default=str))

    contact_id = extract_contact_id(data)
    landing_page = extract_landing_page(data)
    logger.info("Контакт: %s, посадочная страница: %s", contact_id, landing_page)

    if not contact_id:
        raise ClientInputError("No contact ID provided", received=data)

    if not landing_page:
        logger.info("Посадочная страница не передана, пропускаем контакт %s", contact_id)
        return JSONResponse(
            content={
                "success": True,
                "message": "No landing page to process",
                "contactId": contact_id,
            }
        )

    stage = resolve_stage(landing_page, LANDING_PAGES)
    if not stage:
        logger.info("Этап для посадочной страницы не найден: %s", landing_page)
        return JSONResponse(
            content={
                "success": True,
                "message": "Landing page not in mapping",
                "contactId": contact_id,
                "landingPage": landing_page,
            }
        )

    logger.info("Определён этап: %s", stage)

    client = ActiveCampaignClient(settings.AC_API_URL or "", settings.AC_API_KEY or "")
    result = await client.update_contact_field(contact_id, settings.AC_STAGE_FIELD_ID, stage)

    if not result.success:
        error = UpstreamUpdateError.from_result(result)
        logger.error("Не удалось обновить контакт %s: %s", contact_id, error.message)
        return JSONResponse(status_code=error.status_code, content=error.to_body())

    logger.info("Контакт %s обновлён, этап: %s", contact_id, stage)
    return JSONResponse(
        content={
            "success": True,
            "message": "Contact field updated successfully",
            "contactId": contact_id,
            "landingPage": landing_page,
            "slug": extract_slug(landing_page),
            "stage": stage,
        }
    )

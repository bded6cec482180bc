import logging

from fastapi import FastAPI, Request, status  # type: ignore[import-not-found, import-untyped] # pylint: disable=import-error
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from stage_webhook.api import health, webhook_stage
from stage_webhook.core.landing_pages import LANDING_PAGES
from stage_webhook.core.settings import settings

logging.basicConfig(
    level=settings.log_level_value,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="AC Landing Page Stage Webhook", version=settings.APP_VERSION)

app.include_router(health.router)
app.include_router(webhook_stage.router)


@app.exception_handler(StarletteHTTPException)
async def on_http_exception(request: Request, exc: StarletteHTTPException) -> Response:
    """Ответ 405 в формате вебхука для методов, не зарегистрированных в роутере."""
    if exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
        return JSONResponse(status_code=exc.status_code, content={"error": "Method not allowed"})
    return await http_exception_handler(request, exc)


@app.on_event("startup")
async def on_startup() -> None:
    """Проверка конфигурации при старте приложения."""
    logger.info("Таблица посадочных страниц: %s записей", len(LANDING_PAGES))
    if not settings.is_configured:
        logger.warning("AC_API_URL или AC_API_KEY не заданы, вебхук будет отвечать ошибкой конфигурации")

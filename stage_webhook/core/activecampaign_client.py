import logging
from typing import Any

import httpx
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential  # type: ignore[import-untyped]

from stage_webhook.core.settings import settings
from stage_webhook.models.update_result import UpdateResult

logger = logging.getLogger(__name__)


def _decode_body(response: httpx.Response) -> Any:
    """Тело ответа как JSON, либо как текст, если это не JSON."""
    try:
        return response.json()
    except ValueError:
        return response.text or None


class ActiveCampaignClient:
    """Клиент для обновления контактов через ActiveCampaign API v3."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Инициализация клиента ActiveCampaign.

        Args:
            base_url: Базовый URL API (AC_API_URL)
            api_key: API-токен (AC_API_KEY)
            timeout: Таймаут запроса в секундах
            transport: Транспорт httpx (подменяется в тестах)
        """
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout if timeout is not None else settings.AC_TIMEOUT
        self.transport = transport

    def _get_headers(self) -> dict[str, str]:
        return {
            "Api-Token": self.api_key,
            "Content-Type": "application/json",
        }

    @retry(
        retry=retry_if_exception_type(httpx.TransportError),
        stop=stop_after_attempt(settings.AC_UPDATE_ATTEMPTS),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    async def _put(self, url: str, body: dict[str, Any]) -> httpx.Response:
        """PUT-запрос; повторяется только при сетевых ошибках."""
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            return await client.put(url, headers=self._get_headers(), json=body)

    async def update_contact_field(self, contact_id: str | int, field_id: str, value: str) -> UpdateResult:
        """
        Обновление кастомного поля контакта.

        Args:
            contact_id: ID контакта
            field_id: ID кастомного поля
            value: Новое значение поля

        Returns:
            UpdateResult: Тело ответа при успехе или описание ошибки
        """
        url = f"{self.base_url}/contacts/{contact_id}"
        body = {
            "contact": {
                "fieldValues": [
                    {
                        "field": field_id,
                        "value": value,
                    }
                ]
            }
        }

        try:
            response = await self._put(url, body)
        except httpx.HTTPError as e:
            message = str(e) or e.__class__.__name__
            logger.error("Ошибка соединения с ActiveCampaign при обновлении контакта %s: %s", contact_id, message)
            return UpdateResult(success=False, error=message)

        decoded = _decode_body(response)

        if response.is_success:
            logger.info("Обновлено поле %s контакта %s: %s", field_id, contact_id, value)
            return UpdateResult(success=True, status_code=response.status_code, data=decoded)

        logger.error(
            "ActiveCampaign вернул ошибку при обновлении контакта %s: status=%s, body=%s",
            contact_id,
            response.status_code,
            decoded,
        )
        return UpdateResult(
            success=False,
            status_code=response.status_code,
            error=f"ActiveCampaign responded with HTTP {response.status_code}",
            details=decoded,
        )

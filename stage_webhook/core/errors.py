from typing import Any

from fastapi import status

from stage_webhook.models.update_result import UpdateResult


class WebhookError(Exception):
    """Базовая ошибка обработки вебхука, превращаемая в JSON-ответ."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, error: str) -> None:
        super().__init__(error)
        self.error = error

    def to_body(self) -> dict[str, Any]:
        """Тело JSON-ответа."""
        return {"error": self.error}


class ClientInputError(WebhookError):
    """Во входящем вебхуке нет обязательных данных."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, error: str, received: Any = None) -> None:
        super().__init__(error)
        self.received = received

    def to_body(self) -> dict[str, Any]:
        return {"error": self.error, "received": self.received}


class ConfigurationError(WebhookError):
    """Не заданы переменные окружения сервиса."""


class UpstreamUpdateError(WebhookError):
    """ActiveCampaign не принял обновление поля."""

    def __init__(self, error: str, message: str, details: Any = None) -> None:
        super().__init__(error)
        self.message = message
        self.details = details

    @classmethod
    def from_result(cls, result: UpdateResult) -> "UpstreamUpdateError":
        return cls(
            error="Failed to update contact field",
            message=result.error or "Unknown upstream error",
            details=result.details,
        )

    def to_body(self) -> dict[str, Any]:
        body: dict[str, Any] = {"error": self.error, "message": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body

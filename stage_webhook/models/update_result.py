from typing import Any

from pydantic import BaseModel, Field


class UpdateResult(BaseModel):
    """Результат обновления поля контакта в ActiveCampaign."""

    success: bool = Field(..., description="Запрос завершился кодом 2xx")
    data: Any = Field(None, description="Тело успешного ответа")
    error: str | None = Field(None, description="Сообщение об ошибке")
    status_code: int | None = Field(None, description="HTTP-код ответа, если ответ был получен")
    details: Any = Field(None, description="Тело ответа ActiveCampaign при ошибке")

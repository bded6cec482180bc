import logging
from pathlib import Path

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings

load_dotenv()


class Settings(BaseSettings):

    AC_API_URL: str | None = Field(
        default=None,
        description="Базовый URL API ActiveCampaign (например https://account.api-us1.com/api/3)",
    )
    AC_API_KEY: str | None = Field(default=None, description="API-токен ActiveCampaign")
    AC_STAGE_FIELD_ID: str = Field(
        default="272",
        description="ID кастомного поля контакта, в которое пишется этап воронки",
    )
    AC_TIMEOUT: float = Field(default=20.0, description="Таймаут запроса к ActiveCampaign в секундах")
    AC_UPDATE_ATTEMPTS: int = Field(
        default=1,
        ge=1,
        description="Количество попыток при сетевых ошибках (HTTP-ошибки не повторяются)",
    )

    LANDING_PAGES_FILE: str | None = Field(
        default=None,
        description="Путь до JSON-файла с таблицей посадочных страниц (по умолчанию встроенная)",
    )

    LOG_LEVEL: str = Field(default="INFO", description="Уровень логирования")
    APP_VERSION: str = Field(default="1.0.0", description="Версия сервиса для health-check")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    @property
    def log_level_value(self) -> int:
        """Возвращает числовой уровень логирования для logging.basicConfig."""
        return getattr(logging, self.LOG_LEVEL.upper(), logging.INFO)

    @property
    def is_configured(self) -> bool:
        """Заданы ли URL и ключ API ActiveCampaign."""
        return bool(self.AC_API_URL) and bool(self.AC_API_KEY)


settings = Settings()
if settings.LANDING_PAGES_FILE and not Path(settings.LANDING_PAGES_FILE).is_absolute():
    base_path = Path(__file__).parent.parent.parent
    settings.LANDING_PAGES_FILE = str(base_path / settings.LANDING_PAGES_FILE)

import json
import logging
from collections.abc import Mapping
from pathlib import Path
from types import MappingProxyType

from stage_webhook.core.settings import settings

logger = logging.getLogger(__name__)

DEFAULT_LANDING_PAGES_FILE = Path(__file__).parent.parent / "data" / "landing_pages.json"


def load_landing_pages(path: str | Path | None = None) -> Mapping[str, str]:
    """
    Загрузка таблицы посадочных страниц slug -> этап воронки.

    Args:
        path: Путь до JSON-файла (по умолчанию встроенная таблица)

    Returns:
        Mapping[str, str]: Неизменяемая таблица
    """
    source = Path(path) if path else DEFAULT_LANDING_PAGES_FILE

    with source.open(encoding="utf-8") as f:
        raw = json.load(f)

    if not isinstance(raw, dict):
        raise ValueError(f"Таблица посадочных страниц должна быть JSON-объектом: {source}")

    pages = {str(slug): str(stage) for slug, stage in raw.items()}
    logger.info("Загружено %s посадочных страниц из %s", len(pages), source)
    return MappingProxyType(pages)


LANDING_PAGES = load_landing_pages(settings.LANDING_PAGES_FILE)

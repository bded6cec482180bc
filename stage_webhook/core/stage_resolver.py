import logging
from collections.abc import Mapping

from stage_webhook.core.landing_pages import LANDING_PAGES
from stage_webhook.core.utils import extract_slug

logger = logging.getLogger(__name__)


def resolve_stage(url: str | None, mapping: Mapping[str, str] = LANDING_PAGES) -> str | None:
    """
    Определение этапа воронки по URL посадочной страницы.

    Таблица могла заполняться как со слэшем на конце, так и без,
    поэтому slug проверяется в трёх вариантах.

    Args:
        url: URL посадочной страницы
        mapping: Таблица slug -> этап

    Returns:
        str | None: Этап или None, если страница не в таблице
    """
    slug = extract_slug(url)
    if not slug:
        logger.info("Не удалось извлечь slug из URL: %s", url)
        return None

    logger.info('Извлечён slug: "%s"', slug)

    for key in (slug, f"{slug}/", slug.rstrip("/")):
        stage = mapping.get(key)
        if stage:
            return stage

    logger.info('Slug "%s" отсутствует в таблице посадочных страниц', slug)
    return None

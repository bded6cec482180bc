import re

_SCHEME_RE = re.compile(r"^https?://")
_DOMAIN_RE = re.compile(r"^[^/]+/")


def extract_slug(url: str | None) -> str | None:
    """
    Извлечение slug (последнего сегмента пути) из URL посадочной страницы.

    Пример: "www.example.com/greece-work-visa/" -> "greece-work-visa"

    Args:
        url: Полный или частичный URL

    Returns:
        str | None: Slug или None, если путь пустой (в том числе URL только с доменом)
    """
    if not url:
        return None

    clean_url = url.strip()
    clean_url = clean_url.split("#", 1)[0].split("?", 1)[0]
    clean_url = _SCHEME_RE.sub("", clean_url, count=1)

    if not _DOMAIN_RE.match(clean_url):
        return None
    clean_url = _DOMAIN_RE.sub("", clean_url, count=1)

    if clean_url.endswith("/"):
        clean_url = clean_url[:-1]

    segments = clean_url.split("/")
    slug = segments[-1]
    if not slug and len(segments) > 1:
        # Устаревшая ветка: срабатывает только для битых URL вида "a//"
        slug = segments[-2]

    return slug or None

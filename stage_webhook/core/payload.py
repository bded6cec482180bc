from collections.abc import Callable
from typing import Any

Strategy = Callable[[Any], Any]


def flat_key(key: str) -> Strategy:
    """Значение по плоскому ключу формы, например "contact[id]"."""

    def getter(payload: Any) -> Any:
        if not isinstance(payload, dict):
            return None
        return payload.get(key)

    return getter


def nested_path(*path: str) -> Strategy:
    """Значение по пути во вложенном JSON, например ("contact", "fields", "232")."""

    def getter(payload: Any) -> Any:
        current = payload
        for key in path:
            if not isinstance(current, dict):
                return None
            current = current.get(key)
        return current

    return getter


CONTACT_ID_STRATEGIES: list[tuple[str, Strategy]] = [
    ("contact[id]", flat_key("contact[id]")),
    ("contact.id", nested_path("contact", "id")),
]

LANDING_PAGE_STRATEGIES: list[tuple[str, Strategy]] = [
    ("contact[fields][232]", flat_key("contact[fields][232]")),
    ("contact[fields][first_touch_landing_page]", flat_key("contact[fields][first_touch_landing_page]")),
    ("contact[LANDING_PAGE]", flat_key("contact[LANDING_PAGE]")),
    ("contact[FIRST_TOUCH_LANDING_PAGE]", flat_key("contact[FIRST_TOUCH_LANDING_PAGE]")),
    ("landing_page", flat_key("landing_page")),
    ("first_touch_landing_page", flat_key("first_touch_landing_page")),
    ("contact.fields.LANDING_PAGE", nested_path("contact", "fields", "LANDING_PAGE")),
    ("contact.fields.FIRST_TOUCH_LANDING_PAGE", nested_path("contact", "fields", "FIRST_TOUCH_LANDING_PAGE")),
    ("contact.fields[232]", nested_path("contact", "fields", "232")),
    ("contact.fields.first_touch_landing_page", nested_path("contact", "fields", "first_touch_landing_page")),
]


def first_present(payload: Any, strategies: list[tuple[str, Strategy]]) -> tuple[str, Any] | tuple[None, None]:
    """
    Применение стратегий по порядку до первого непустого значения.

    Args:
        payload: Тело вебхука
        strategies: Упорядоченный список (имя, функция)

    Returns:
        Имя сработавшей стратегии и значение, либо (None, None)
    """
    for name, strategy in strategies:
        value = strategy(payload)
        if isinstance(value, str) and not value.strip():
            continue
        if value:
            return name, value
    return None, None


def extract_contact_id(payload: Any) -> Any:
    """Извлечение ID контакта из тела вебхука."""
    return first_present(payload, CONTACT_ID_STRATEGIES)[1]


def extract_landing_page(payload: Any) -> str | None:
    """Извлечение URL посадочной страницы из тела вебхука."""
    value = first_present(payload, LANDING_PAGE_STRATEGIES)[1]
    return str(value) if value is not None else None

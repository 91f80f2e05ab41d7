"""Утилиты для работы с именами схем, методов и полей"""

import json
import re
from typing import List

_URL_CHARS = re.compile(r"[^a-zA-Z0-9]")
_PATH_PARAMETER = re.compile(r"\{([^{}]+)\}")
_IDENTIFIER = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")


def capitalize_first(name: str) -> str:
    """Первая буква в верхний регистр, остальное без изменений"""
    return name[:1].upper() + name[1:]


def lower_first(name: str) -> str:
    """Первая буква в нижний регистр, остальное без изменений"""
    return name[:1].lower() + name[1:]


def strip_url_chars(value: str) -> str:
    """
    Убирает все не буквенно-цифровые символы, делая заглавной
    первую букву каждого сегмента.

    Examples:
        >>> strip_url_chars("widgets/{id}")
        'WidgetsId'
        >>> strip_url_chars("get_widget-by id")
        'GetWidgetById'
    """
    return "".join(capitalize_first(part) for part in _URL_CHARS.split(value))


def strip_suffix(name: str, suffix: str) -> str:
    """Удаляет суффикс только если имя им заканчивается"""
    if suffix and name.endswith(suffix):
        return name[: -len(suffix)]
    return name


def extract_path_parameters(endpoint: str) -> List[str]:
    """
    Имена всех {token} плейсхолдеров шаблона эндпоинта в порядке появления.

    Examples:
        >>> extract_path_parameters("users/{userId}/posts/{postId}")
        ['userId', 'postId']
        >>> extract_path_parameters("users/{user-id}")
        ['user-id']
    """
    return _PATH_PARAMETER.findall(endpoint)


def is_identifier(name: str) -> bool:
    return bool(_IDENTIFIER.match(name))


def ts_property_key(name: str) -> str:
    """Ключ свойства в TypeScript: идентификатор как есть, иначе строковый литерал"""
    return name if is_identifier(name) else json.dumps(name)


def ts_member_access(target: str, name: str) -> str:
    """
    Доступ к полю объекта в TypeScript.

    Examples:
        >>> ts_member_access("dto", "createdAt")
        'dto.createdAt'
        >>> ts_member_access("dto", "created-at")
        'dto["created-at"]'
    """
    if is_identifier(name):
        return f"{target}.{name}"
    return f"{target}[{json.dumps(name)}]"


def ts_string(value: str) -> str:
    """Строковый литерал TypeScript (экранирование как в JSON)"""
    return json.dumps(value)

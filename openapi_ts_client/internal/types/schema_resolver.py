import logging
from typing import Any, Dict, Iterator, Optional, Tuple

import jsonref
from jsonref import JsonRef, JsonRefError

from ...exceptions import SchemaReferenceError

logger = logging.getLogger(__name__)

HTTP_METHODS = ("get", "post", "put", "patch", "delete")


def replace_refs(document: Dict[str, Any]) -> Dict[str, Any]:
    """
    Замена всех {"$ref": ...} узлов документа на ленивые JsonRef прокси.

    Ссылки не разыменовываются до явного обращения, поэтому имя схемы
    всегда доступно через __reference__, а битые ссылки не ломают обход.
    """
    return jsonref.replace_refs(document, lazy_load=True)


def schema_name_from_ref(ref: str) -> str:
    """Имя схемы из JSON pointer: '#/components/schemas/User' -> 'User'"""
    return ref.rsplit("/", 1)[-1]


def split_reference(node: Any) -> Tuple[Any, Optional[str]]:
    """
    Разделение узла на сырое содержимое и имя схемы по $ref.

    Для JsonRef возвращается исходный объект ссылки (с соседними ключами
    вроде nullable) без разыменования.
    """
    # isinstance проверяется до любого обращения к узлу: иначе прокси разыменуется
    if isinstance(node, JsonRef):
        return node.__reference__, schema_name_from_ref(node.__reference__["$ref"])
    if isinstance(node, dict) and isinstance(node.get("$ref"), str):
        return node, schema_name_from_ref(node["$ref"])
    return node, None


def is_resolvable(node: Any) -> bool:
    """Проверка что ссылка указывает на существующий узел документа"""
    if not isinstance(node, JsonRef):
        return True

    try:
        node.__subject__
    except JsonRefError as e:
        ref = node.__reference__["$ref"]
        if "refers directly to itself" in str(e):
            raise SchemaReferenceError(ref) from e
        logger.warning(f"Unresolvable reference {ref}: {e.message}")
        return False
    except RecursionError as e:
        # цепочка ссылок-псевдонимов замкнулась сама на себя
        raise SchemaReferenceError(node.__reference__["$ref"]) from e

    return True


def as_mapping(node: Any) -> Dict[str, Any]:
    """Сырое содержимое узла схемы как словарь (пустой для мусора)"""
    raw, _ = split_reference(node)
    return raw if isinstance(raw, dict) else {}


def deref(node: Any) -> Dict[str, Any]:
    """
    Содержимое структурного узла (path item, operation, requestBody, ...).

    Ссылка разыменовывается если она разрешима, иначе возвращается пустой словарь.
    """
    if isinstance(node, JsonRef):
        return node.__subject__ if is_resolvable(node) else {}
    return node if isinstance(node, dict) else {}


def iter_operations(
    document: Dict[str, Any]
) -> Iterator[Tuple[str, str, Dict[str, Any], Dict[str, Any]]]:
    """
    Обход операций документа в порядке следования.

    Yields:
        (endpoint, method, operation, path_item) для методов из HTTP_METHODS
    """
    for endpoint, path_item in deref(document.get("paths")).items():
        path_item = deref(path_item)
        for method, operation in path_item.items():
            if method not in HTTP_METHODS:
                continue
            yield endpoint, method, deref(operation), path_item

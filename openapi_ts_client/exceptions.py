"""
Исключения генератора TypeScript клиентов
"""


class GeneratorError(Exception):
    """Базовая ошибка генератора"""


class ConfigError(GeneratorError):
    """Ошибка конфигурации - прерывает весь запуск"""

    def __init__(self, message: str, key: str = None):
        self.message = message
        self.key = key
        super().__init__(message)


class DocumentLoadError(GeneratorError):
    """Не удалось загрузить OpenAPI документ - источник пропускается"""

    def __init__(self, message: str, url: str, status_code: int = None):
        self.message = message
        self.url = url
        self.status_code = status_code
        prefix = f"[{status_code}] " if status_code else ""
        super().__init__(f"{prefix}{url}: {message}")


class SchemaError(GeneratorError):
    """Структурная ошибка в схемах документа"""


class SchemaReferenceError(SchemaError):
    """$ref ссылается сам на себя"""

    def __init__(self, reference: str):
        self.reference = reference
        super().__init__(f"Reference {reference} refers directly to itself")

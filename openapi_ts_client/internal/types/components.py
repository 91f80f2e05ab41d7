"""
Классифицированные схемы документа и контекст классификации
"""

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Optional, Set, Tuple, Union

from ...exceptions import SchemaError
from ..utils import capitalize_first
from .descriptors import PropertyDescriptor

NUMERIC_ENUM_TYPES = ("integer", "number", "int32", "int64")


@dataclass(frozen=True)
class EnumComponent:
    name: str
    values: Tuple[Any, ...]
    display_names: Optional[Tuple[str, ...]] = None
    value_type: str = "string"

    @property
    def capitalized_name(self) -> str:
        return capitalize_first(self.name)

    @property
    def is_numeric(self) -> bool:
        return self.value_type in NUMERIC_ENUM_TYPES

    def label(self, index: int) -> str:
        """Отображаемое имя значения: из x-enumNames или само значение"""
        if self.display_names and index < len(self.display_names):
            return str(self.display_names[index])
        return str(self.values[index])


@dataclass(frozen=True)
class ObjectComponent:
    name: str
    required_properties: FrozenSet[str] = frozenset()
    properties: Tuple[PropertyDescriptor, ...] = ()

    @property
    def capitalized_name(self) -> str:
        return capitalize_first(self.name)

    @property
    def dto_name(self) -> str:
        return f"T{self.capitalized_name}Dto"


@dataclass(frozen=True)
class RequestComponent(ObjectComponent):
    @property
    def dto_name(self) -> str:
        return f"T{self.capitalized_name}"


@dataclass(frozen=True)
class ResponseComponent(ObjectComponent):
    pass


@dataclass(frozen=True)
class ModelComponent(ObjectComponent):
    pass


Component = Union[EnumComponent, RequestComponent, ResponseComponent, ModelComponent]


@dataclass
class ClassificationContext:
    """
    Состояние классификации одного OpenAPI документа.

    Создается заново для каждого источника API, поэтому коллекции
    компонентов разных API никогда не смешиваются.
    """

    enum_names: Set[str] = field(default_factory=set)
    request_names: Set[str] = field(default_factory=set)
    response_names: Set[str] = field(default_factory=set)
    # (endpoint, method) -> имя синтетического компонента формы
    form_requests: Dict[Tuple[str, str], str] = field(default_factory=dict)

    enums: Dict[str, EnumComponent] = field(default_factory=dict)
    requests: Dict[str, RequestComponent] = field(default_factory=dict)
    responses: Dict[str, ResponseComponent] = field(default_factory=dict)
    models: Dict[str, ModelComponent] = field(default_factory=dict)

    def add(self, component: Component) -> Component:
        """Регистрация компонента в своей коллекции с проверкой уникальности имени"""
        if self.component(component.name) is not None:
            raise SchemaError(f"Component {component.name} is defined more than once")

        if isinstance(component, EnumComponent):
            self.enums[component.name] = component
        elif isinstance(component, RequestComponent):
            self.requests[component.name] = component
        elif isinstance(component, ResponseComponent):
            self.responses[component.name] = component
        else:
            self.models[component.name] = component

        return component

    def component(self, name: str) -> Optional[Component]:
        for collection in (self.enums, self.requests, self.responses, self.models):
            if name in collection:
                return collection[name]
        return None

    def request_component(self, name: Optional[str]) -> Optional[RequestComponent]:
        return self.requests.get(name) if name else None

    def response_component(self, name: Optional[str]) -> Optional[ResponseComponent]:
        return self.responses.get(name) if name else None

    @property
    def flat_request_names(self) -> FrozenSet[str]:
        """Имена компонентов, которые рендерятся плоским типом T{Name}"""
        return frozenset(self.requests)

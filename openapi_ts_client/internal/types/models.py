"""
Построители структуры TypeScript модуля.

Каждый построитель - pydantic модель, str() которой возвращает готовый
TypeScript текст. Отступы внутри построителей - табуляция.
"""

from typing import Optional, Union

from pydantic import BaseModel, field_validator

from ..utils import ts_property_key


def _indent(text: str, level: int = 1) -> str:
    """Сдвиг всех непустых строк на level табуляций"""
    prefix = "\t" * level
    return "\n".join(prefix + line if line else line for line in text.split("\n"))


class Variable(BaseModel):
    """
    Выражение типа, при наличии wrap_name - generic обертка.

    Examples:
        >>> str(Variable(wrap_name="Promise", value=Variable(wrap_name="TApiClientResult", value="Widget")))
        'Promise<TApiClientResult<Widget>>'
    """

    value: list[Union["Variable", str]] = []
    wrap_name: Optional[str] = None

    @field_validator("value", mode="before")
    def value_check(cls, value):
        _value = value

        if not isinstance(value, list):
            _value = [value]

        return _value

    def __str__(self):
        _value = ", ".join([_.__str__() for _ in self.value])

        if self.wrap_name is None:
            return _value

        return f"{self.wrap_name}<{_value or 'unknown'}>"


class Parameter(BaseModel):
    name: str
    var_type: Optional[Union[Variable, str]] = None
    optional: bool = False

    def __str__(self):
        return (
            self.name
            + ("?" if self.optional else "")
            + (f": {self.var_type}" if self.var_type else "")
        )


class CodeBlock(BaseModel):
    code: str = ""

    def __str__(self):
        return self.code


class PropertySignature(BaseModel):
    """Поле типа или класса: `public name?: Type;`"""

    name: str
    type_expr: str
    optional: bool = False
    modifier: Optional[str] = None

    def __str__(self):
        return (
            (f"{self.modifier} " if self.modifier else "")
            + ts_property_key(self.name)
            + ("?" if self.optional else "")
            + f": {self.type_expr};"
        )


class TypeAlias(BaseModel):
    name: str
    members: list[PropertySignature] = []

    def __str__(self):
        if not self.members:
            return f"export type {self.name} = {{}};"

        return (
            f"export type {self.name} = {{\n"
            + "\n".join(_indent(str(member)) for member in self.members)
            + "\n};"
        )


class EnumMember(BaseModel):
    label: str
    value: str

    def __str__(self):
        return f"{self.label} = {self.value}"


class EnumDeclaration(BaseModel):
    name: str
    members: list[EnumMember] = []

    def __str__(self):
        return (
            f"export enum {self.name} {{\n"
            + ",\n".join(_indent(str(member)) for member in self.members)
            + "\n}"
        )


class Function(BaseModel):
    """Метод класса"""

    name: str
    parameters: list[Parameter] = []
    response: Optional[Union[Variable, str]] = None

    modifier: Optional[str] = "public"
    async_def: bool = False
    generator: bool = False

    code: CodeBlock = CodeBlock()

    def __str__(self) -> str:
        signature = (
            (f"{self.modifier} " if self.modifier else "")
            + ("async " if self.async_def else "")
            + ("*" if self.generator else "")
            + self.name
            + "("
            + ", ".join(map(str, self.parameters))
            + ")"
            + (f": {self.response}" if self.response else "")
        )

        body = str(self.code)
        if not body:
            return signature + " {}"

        return signature + " {\n" + _indent(body) + "\n}"

    def set_code_block(self, code_block: Union["CodeBlock", str]) -> "Function":
        if isinstance(code_block, str):
            code_block = CodeBlock(code=code_block)

        self.code = code_block
        return self


class Class(BaseModel):
    name: str
    inherits: Optional[str] = None

    members: list[PropertySignature] = []
    functions: list[Function] = []

    def __str__(self) -> str:
        sections = []
        if self.members:
            sections.append("\n".join(map(str, self.members)))
        sections.extend(map(str, self.functions))

        return (
            f"export class {self.name}"
            + (f" extends {self.inherits}" if self.inherits else "")
            + " {\n"
            + "\n\n".join(_indent(section) for section in sections)
            + ("\n" if sections else "")
            + "}"
        )

    def add_function(self, function: Union["Function", str], **kwargs) -> "Function":
        if isinstance(function, str):
            function = Function(name=function, **kwargs)

        self.functions.append(function)
        return function

    def add_member(self, member: PropertySignature) -> PropertySignature:
        self.members.append(member)
        return member


Declaration = Union[TypeAlias, EnumDeclaration, Class, CodeBlock]


class CodeFile(BaseModel):
    file_name: str

    comments: list[str] = []
    imports: list[str] = []
    declarations: list[Declaration] = []

    def __str__(self):
        return (
            "\n\n".join(
                filter(
                    bool,
                    [
                        "\n".join(f"// {line}" for line in self.comments),
                        "\n".join(self.imports),
                        "\n\n".join(map(str, self.declarations)),
                    ],
                )
            )
            + "\n"
        )

    def add_declaration(self, declaration: Declaration) -> Declaration:
        self.declarations.append(declaration)
        return declaration

    def add_class(self, cls: Union["Class", str], **kwargs) -> "Class":
        if isinstance(cls, str):
            cls = Class(name=cls, **kwargs)

        self.declarations.append(cls)
        return cls

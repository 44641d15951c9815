"""Declaration model consumed by the generator."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping as MappingOf, Union


@dataclass(frozen=True)
class Named:
    """Unqualified type reference, e.g. ``string`` or ``User``."""

    name: str


@dataclass(frozen=True)
class Qualified:
    """Type from another package, e.g. ``time.Time``."""

    alias: str
    name: str


@dataclass(frozen=True)
class Pointer:
    """Pointer to a type (``*T``)."""

    elem: TypeExpr


@dataclass(frozen=True)
class Sequence:
    """Slice of a type (``[]T``)."""

    elem: TypeExpr


@dataclass(frozen=True)
class Mapping:
    """Map from one type to another (``map[K]V``)."""

    key: TypeExpr
    value: TypeExpr


@dataclass(frozen=True)
class OpaqueType:
    """Type syntax the parser recognizes but the generator does not support.

    ``kind`` is one of ``array``, ``chan``, ``func``, ``generic``,
    ``interface`` or ``struct``; ``text`` is a short rendering used in error messages.
    """

    kind: str
    text: str


TypeExpr = Union[Named, Qualified, Pointer, Sequence, Mapping, OpaqueType]


@dataclass(frozen=True)
class ImportSpec:
    """An import declaration of a source file."""

    path: str
    alias: str | None = None
    line: int = 0

    def __post_init__(self) -> None:
        if not self.path:
            raise ValueError("Import path must not be empty")

    @property
    def effective_alias(self) -> str:
        """Return the alias used to resolve qualified types."""
        if self.alias is not None:
            return self.alias
        return self.path.rsplit("/", 1)[-1]


@dataclass(frozen=True)
class Field:
    """A struct field. An empty name marks an embedded field."""

    name: str
    type: TypeExpr
    tags: MappingOf[str, str] = field(default_factory=dict, hash=False)
    line: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "tags", MappingProxyType(dict(self.tags)))


@dataclass(frozen=True)
class RecordShape:
    """Struct-like declaration body."""

    fields: tuple[Field, ...] = ()


@dataclass(frozen=True)
class OtherShape:
    """Any non-struct declaration body (named basic types, interfaces, ...)."""

    kind: str = "other"


Shape = Union[RecordShape, OtherShape]


@dataclass(frozen=True)
class Declaration:
    """A top-level type declaration."""

    name: str
    shape: Shape
    line: int = 0
    # Declared with a type parameter list, e.g. ``Set[T comparable]``
    generic: bool = False

    @property
    def is_record(self) -> bool:
        return isinstance(self.shape, RecordShape)


@dataclass(frozen=True)
class SourceUnit:
    """A parsed source file: its imports and type declarations in order."""

    package: str
    imports: tuple[ImportSpec, ...] = ()
    declarations: tuple[Declaration, ...] = ()
    path: str | None = None

    def find(self, name: str) -> Declaration | None:
        """Return the declaration named *name*, or None."""
        for decl in self.declarations:
            if decl.name == name:
                return decl
        return None


def render_type_expr(expr: TypeExpr) -> str:
    """Render a source-side type expression in Go syntax."""
    if isinstance(expr, Named):
        return expr.name
    if isinstance(expr, Qualified):
        return f"{expr.alias}.{expr.name}"
    if isinstance(expr, Pointer):
        return "*" + render_type_expr(expr.elem)
    if isinstance(expr, Sequence):
        return "[]" + render_type_expr(expr.elem)
    if isinstance(expr, Mapping):
        return f"map[{render_type_expr(expr.key)}]{render_type_expr(expr.value)}"
    if isinstance(expr, OpaqueType):
        return expr.text
    raise TypeError(f"Not a type expression: {expr!r}")

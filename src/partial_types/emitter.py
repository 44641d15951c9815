"""Generated unit: the partial types of one source file and their Go rendering."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

from partial_types.model import ImportSpec
from partial_types.translate import GoType, qualified_types

HEADER_COMMENT = "Code generated by partial-types. DO NOT EDIT."

# Name of the receiver and mutator parameter in generated methods
RECEIVER = "p"
PARAM = "v"

_GO_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}


def go_quote(value: str) -> str:
    """Quote *value* as a Go interpreted string literal."""
    out = []
    for ch in value:
        if ch in _GO_ESCAPES:
            out.append(_GO_ESCAPES[ch])
        elif ord(ch) < 0x20 or ord(ch) == 0x7F:
            out.append(f"\\x{ord(ch):02x}")
        else:
            out.append(ch)
    return '"' + "".join(out) + '"'


@dataclass(frozen=True)
class PartialTypeDef:
    """``type <name> map[string]any``."""

    name: str
    source_name: str

    def render(self) -> str:
        return (
            f"// {self.name} is a partial type.\n"
            f"type {self.name} map[string]any\n"
        )

    def to_dict(self) -> dict[str, Any]:
        return {"member": "type", "name": self.name, "source": self.source_name}


@dataclass(frozen=True)
class Accessor:
    """Method returning a field's value read from the backing map."""

    receiver: str
    name: str
    key: str
    result: GoType

    def signature(self) -> str:
        return f"func ({RECEIVER} {self.receiver}) {self.name}() {self.result.render()}"

    def render(self) -> str:
        result = self.result.render()
        return (
            f"// {self.name} returns the value of the '{self.key}' field.\n"
            f"{self.signature()} {{\n"
            f"\treturn {RECEIVER}[{go_quote(self.key)}].({result})\n"
            "}\n"
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "member": "accessor",
            "receiver": self.receiver,
            "name": self.name,
            "key": self.key,
            "type": self.result.render(),
        }


@dataclass(frozen=True)
class Mutator:
    """Method storing a field's value in the backing map and returning the receiver."""

    receiver: str
    name: str
    key: str
    param: GoType

    def signature(self) -> str:
        return (
            f"func ({RECEIVER} {self.receiver}) {self.name}"
            f"({PARAM} {self.param.render()}) {self.receiver}"
        )

    def render(self) -> str:
        return (
            f"// {self.name} updates {RECEIVER} with the given {PARAM} "
            f"and returns {RECEIVER} again.\n"
            f"{self.signature()} {{\n"
            f"\t{RECEIVER}[{go_quote(self.key)}] = {PARAM}\n"
            f"\treturn {RECEIVER}\n"
            "}\n"
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "member": "mutator",
            "receiver": self.receiver,
            "name": self.name,
            "key": self.key,
            "type": self.param.render(),
        }


Member = Union[PartialTypeDef, Accessor, Mutator]


def render_import(spec: ImportSpec) -> str:
    if spec.alias is None:
        return go_quote(spec.path)
    return f"{spec.alias} {go_quote(spec.path)}"


@dataclass(frozen=True)
class GeneratedUnit:
    """Output of generating one source unit. Never mutated once built."""

    package: str
    imports: tuple[ImportSpec, ...]
    members: tuple[Member, ...]
    header: tuple[str, ...] = (HEADER_COMMENT,)
    source: str | None = None

    @property
    def type_defs(self) -> list[PartialTypeDef]:
        return [m for m in self.members if isinstance(m, PartialTypeDef)]

    @property
    def accessors(self) -> list[Accessor]:
        return [m for m in self.members if isinstance(m, Accessor)]

    @property
    def mutators(self) -> list[Mutator]:
        return [m for m in self.members if isinstance(m, Mutator)]

    def referenced_imports(self) -> set[tuple[str, str]]:
        """Return the (qualifier, path) pairs used by generated qualified types."""
        used: set[tuple[str, str]] = set()
        for member in self.members:
            if isinstance(member, Accessor):
                go_type = member.result
            elif isinstance(member, Mutator):
                go_type = member.param
            else:
                continue
            used.update((q.qualifier, q.path) for q in qualified_types(go_type))
        return used

    def pruned(self) -> GeneratedUnit:
        """Return a copy keeping only the imports generated code refers to."""
        used = self.referenced_imports()
        imports = tuple(
            spec
            for spec in self.imports
            if (spec.effective_alias, spec.path) in used
        )
        return GeneratedUnit(
            package=self.package,
            imports=imports,
            members=self.members,
            header=self.header,
            source=self.source,
        )

    def render(self) -> str:
        """Render the unit as Go source text."""
        parts = []
        if self.header:
            parts.append("".join(f"// {line}\n" for line in self.header))
        parts.append(f"package {self.package}\n")

        imports = sorted(self.imports, key=lambda s: (s.path, s.alias or ""))
        if len(imports) == 1:
            parts.append(f"import {render_import(imports[0])}\n")
        elif imports:
            lines = "".join(f"\t{render_import(spec)}\n" for spec in imports)
            parts.append(f"import (\n{lines})\n")

        for member in self.members:
            parts.append(member.render())
        return "\n".join(parts)

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable description of the unit."""
        return {
            "source": self.source,
            "package": self.package,
            "imports": [
                {"path": spec.path, "alias": spec.alias} for spec in self.imports
            ],
            "members": [member.to_dict() for member in self.members],
        }

    def __str__(self) -> str:
        return self.render()

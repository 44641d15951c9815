"""Generation of partial map types from struct declarations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

from partial_types.config import GeneratorOptions
from partial_types.emitter import (
    Accessor,
    GeneratedUnit,
    Member,
    Mutator,
    PartialTypeDef,
)
from partial_types.errors import GenerationError, MissingFieldName, UnsupportedTypeShape
from partial_types.imports import ImportTable
from partial_types.log import get_logger
from partial_types.model import Declaration, Field, RecordShape, SourceUnit
from partial_types.translate import translate_type

logger = get_logger(__name__)

MUTATOR_PREFIX = "With"


def walk_records(unit: SourceUnit) -> Iterator[tuple[Declaration, RecordShape]]:
    """Yield every struct declaration of *unit* with its shape, in source order."""
    for decl in unit.declarations:
        if isinstance(decl.shape, RecordShape):
            yield decl, decl.shape


@dataclass(frozen=True)
class FieldKey:
    """Accessor name and map key of a field."""

    accessor: str
    key: str


def resolve_field_key(field: Field, struct_tag: str) -> FieldKey:
    """Compute the accessor name and map key for *field*.

    The key is the value of the *struct_tag* tag up to its first comma, or
    the field name when the tag is absent, has an empty value or is
    disabled. A value like ",omitempty" yields an empty key.
    """
    key = field.name
    value = field.tags.get(struct_tag, "") if struct_tag else ""
    if value:
        key = value.split(",", 1)[0]
    return FieldKey(accessor=field.name, key=key)


class Generator:
    """Builds the partial types of one source unit."""

    def __init__(self, options: GeneratorOptions | None = None) -> None:
        self.options = options or GeneratorOptions()

    def type_name(self, decl: Declaration) -> str:
        return self.options.type_prefix + decl.name

    def type_def(self, decl: Declaration) -> PartialTypeDef:
        """Return the partial type definition for a struct declaration."""
        if not isinstance(decl.shape, RecordShape):
            raise UnsupportedTypeShape(
                "Partial type must be a struct",
                declaration=decl.name,
                line=decl.line,
            )
        if decl.generic:
            raise UnsupportedTypeShape(
                "Generic struct types are not supported",
                declaration=decl.name,
                line=decl.line,
            )
        return PartialTypeDef(name=self.type_name(decl), source_name=decl.name)

    def field_members(
        self, decl: Declaration, field: Field, imports: ImportTable
    ) -> tuple[Accessor, Mutator]:
        """Return the accessor and mutator for one field of *decl*."""
        if not field.name:
            raise MissingFieldName(
                "Field must have a name (embedded fields are not supported)",
                declaration=decl.name,
                line=field.line or decl.line,
            )
        names = resolve_field_key(field, self.options.struct_tag)
        try:
            go_type = translate_type(field.type, imports)
        except GenerationError as exc:
            exc.with_context(declaration=decl.name, field=field.name, line=field.line)
            raise

        receiver = self.type_name(decl)
        return (
            Accessor(receiver=receiver, name=names.accessor, key=names.key, result=go_type),
            Mutator(
                receiver=receiver,
                name=MUTATOR_PREFIX + names.accessor,
                key=names.key,
                param=go_type,
            ),
        )

    def generate(self, unit: SourceUnit) -> GeneratedUnit:
        """Generate the partial types for every struct in *unit*.

        Raises:
            GenerationError: On the first declaration or field that cannot be
                generated; no partial output is returned.
        """
        imports = ImportTable.from_specs(unit.imports)
        members: list[Member] = []

        for decl, shape in walk_records(unit):
            logger.debug(
                "Generating %s for %s (%d fields)",
                self.type_name(decl), decl.name, len(shape.fields),
            )
            members.append(self.type_def(decl))
            for field in shape.fields:
                members.extend(self.field_members(decl, field, imports))

        generated = GeneratedUnit(
            package=self.options.package_name,
            imports=tuple(unit.imports),
            members=tuple(members),
            source=unit.path,
        )
        if self.options.prune_imports:
            generated = generated.pruned()
        return generated


def generate_unit(unit: SourceUnit, options: GeneratorOptions | None = None) -> GeneratedUnit:
    """Generate the partial types of *unit* with *options*."""
    return Generator(options).generate(unit)

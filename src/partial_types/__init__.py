"""Partial Types - generates map-backed partial types for Go structs."""

from partial_types.config import GeneratorOptions, load_options
from partial_types.emitter import Accessor, GeneratedUnit, Mutator, PartialTypeDef
from partial_types.errors import (
    GenerationError,
    MissingFieldName,
    ParseFailure,
    UnresolvedImport,
    UnsupportedTypeShape,
)
from partial_types.generator import (
    FieldKey,
    Generator,
    generate_unit,
    resolve_field_key,
    walk_records,
)
from partial_types.imports import ImportTable
from partial_types.model import (
    Declaration,
    Field,
    ImportSpec,
    Mapping,
    Named,
    OpaqueType,
    OtherShape,
    Pointer,
    Qualified,
    RecordShape,
    Sequence,
    SourceUnit,
)
from partial_types.parsing import GoParser
from partial_types.translate import translate_type

__all__ = [
    # Main API
    "GeneratorOptions",
    "Generator",
    "GoParser",
    "generate_unit",
    "load_options",
    # Core steps
    "walk_records",
    "resolve_field_key",
    "FieldKey",
    "ImportTable",
    "translate_type",
    # Declaration model
    "SourceUnit",
    "ImportSpec",
    "Declaration",
    "RecordShape",
    "OtherShape",
    "Field",
    "Named",
    "Qualified",
    "Pointer",
    "Sequence",
    "Mapping",
    "OpaqueType",
    # Output
    "GeneratedUnit",
    "PartialTypeDef",
    "Accessor",
    "Mutator",
    # Errors
    "GenerationError",
    "ParseFailure",
    "UnsupportedTypeShape",
    "MissingFieldName",
    "UnresolvedImport",
]

__version__ = "0.1.0"

"""Tests for the import table and type translation."""

import pytest

from partial_types.errors import UnresolvedImport, UnsupportedTypeShape
from partial_types.imports import ImportTable
from partial_types.model import (
    ImportSpec,
    Mapping,
    Named,
    OpaqueType,
    Pointer,
    Qualified,
    Sequence,
)
from partial_types.translate import (
    GoIdent,
    GoMap,
    GoPointer,
    GoQualified,
    GoSlice,
    qualified_types,
    translate_type,
)


class TestImportSpec:
    def test_alias_defaults_to_last_segment(self):
        assert ImportSpec(path="github.com/google/uuid").effective_alias == "uuid"

    def test_single_segment_path(self):
        assert ImportSpec(path="time").effective_alias == "time"

    def test_explicit_alias(self):
        assert ImportSpec(path="gopkg.in/yaml.v3", alias="yaml").effective_alias == "yaml"

    def test_empty_path_rejected(self):
        with pytest.raises(ValueError):
            ImportSpec(path="")


class TestImportTable:
    """Tests for alias resolution."""

    def test_lookup_by_last_segment(self):
        table = ImportTable.from_specs([ImportSpec(path="net/http")])
        assert table.lookup("http") == "net/http"

    def test_lookup_by_explicit_alias(self):
        table = ImportTable.from_specs([ImportSpec(path="github.com/google/uuid", alias="gid")])
        assert table.lookup("gid") == "github.com/google/uuid"
        assert "uuid" not in table

    def test_unknown_alias(self):
        table = ImportTable.from_specs([ImportSpec(path="time")])
        with pytest.raises(UnresolvedImport, match="'json'"):
            table.lookup("json")

    def test_first_spec_wins(self):
        table = ImportTable.from_specs(
            [ImportSpec(path="math/rand"), ImportSpec(path="crypto/rand")]
        )
        assert table.lookup("rand") == "math/rand"

    def test_blank_and_dot_imports_do_not_resolve(self):
        table = ImportTable.from_specs(
            [ImportSpec(path="embed", alias="_"), ImportSpec(path="strings", alias=".")]
        )
        assert len(table) == 0
        with pytest.raises(UnresolvedImport):
            table.lookup("_")

    def test_aliases_in_order(self):
        table = ImportTable.from_specs([ImportSpec(path="time"), ImportSpec(path="fmt")])
        assert table.aliases() == ["time", "fmt"]


class TestTranslateType:
    """Tests for structure-preserving type translation."""

    @pytest.fixture
    def imports(self):
        return ImportTable.from_specs(
            [ImportSpec(path="time"), ImportSpec(path="github.com/google/uuid")]
        )

    def test_named(self, imports):
        assert translate_type(Named("int"), imports) == GoIdent("int")

    def test_qualified(self, imports):
        result = translate_type(Qualified("time", "Time"), imports)
        assert result == GoQualified(path="time", name="Time", qualifier="time")
        assert result.render() == "time.Time"

    def test_qualified_with_full_path(self, imports):
        result = translate_type(Qualified("uuid", "UUID"), imports)
        assert result.path == "github.com/google/uuid"
        assert result.render() == "uuid.UUID"

    def test_pointer_to_sequence(self, imports):
        result = translate_type(Pointer(Sequence(Named("int"))), imports)
        assert result == GoPointer(GoSlice(GoIdent("int")))
        assert result.render() == "*[]int"

    def test_mapping(self, imports):
        expr = Mapping(Named("string"), Sequence(Pointer(Qualified("time", "Time"))))
        result = translate_type(expr, imports)
        assert result == GoMap(
            GoIdent("string"),
            GoSlice(GoPointer(GoQualified("time", "Time", "time"))),
        )
        assert result.render() == "map[string][]*time.Time"

    def test_deep_nesting(self, imports):
        expr = Named("int")
        for _ in range(10):
            expr = Pointer(Sequence(expr))
        assert translate_type(expr, imports).render() == "*[]" * 10 + "int"

    def test_unresolved_import_inside_nested_type(self, imports):
        with pytest.raises(UnresolvedImport):
            translate_type(Sequence(Qualified("json", "RawMessage")), imports)

    def test_opaque_type_is_unsupported(self, imports):
        with pytest.raises(UnsupportedTypeShape, match="chan"):
            translate_type(OpaqueType("chan", "chan int"), imports)

    def test_unknown_expression_is_unsupported(self, imports):
        with pytest.raises(UnsupportedTypeShape):
            translate_type("int", imports)  # type: ignore[arg-type]


class TestQualifiedTypes:
    def test_collects_nested_paths(self):
        go_type = GoMap(
            GoQualified("github.com/google/uuid", "UUID", "uuid"),
            GoPointer(GoQualified("time", "Time", "time")),
        )
        assert [q.path for q in qualified_types(go_type)] == ["github.com/google/uuid", "time"]

    def test_no_paths(self):
        assert list(qualified_types(GoSlice(GoIdent("int")))) == []

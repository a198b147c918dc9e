"""Tests for loading schemas from their JSON serialization."""

from __future__ import annotations

import io
import json

import pytest

from rdl_json_schema.loader import load_schema, loads_schema, read_schema
from rdl_json_schema.types import (
    AliasTypeDefinition,
    ArrayTypeDefinition,
    EnumTypeDefinition,
    MapTypeDefinition,
    NumberTypeDefinition,
    StringTypeDefinition,
    StructTypeDefinition,
    UnionTypeDefinition,
)


def _schema(*types, name="Test"):
    return {"name": name, "types": list(types)}


class TestVariantDetection:
    def test_struct(self):
        schema = load_schema(_schema({
            "type": "Struct",
            "name": "Point",
            "comment": "A point",
            "fields": [
                {"name": "x", "type": "Int32"},
                {"name": "y", "type": "Int32", "optional": True, "comment": "why"},
            ],
        }))
        point = schema.types[0]
        assert isinstance(point, StructTypeDefinition)
        assert point.comment == "A point"
        assert [f.name for f in point.fields] == ["x", "y"]
        assert point.fields[0].optional is False
        assert point.fields[1].optional is True
        assert point.fields[1].comment == "why"

    def test_map(self):
        schema = load_schema(_schema(
            {"type": "Map", "name": "Counts", "keys": "String", "items": "Int32"},
        ))
        counts = schema.types[0]
        assert isinstance(counts, MapTypeDefinition)
        assert counts.keys == "String"
        assert counts.items == "Int32"

    def test_array(self):
        schema = load_schema(_schema({"type": "Array", "name": "Names", "items": "String"}))
        assert isinstance(schema.types[0], ArrayTypeDefinition)
        assert schema.types[0].items == "String"

    def test_enum(self):
        schema = load_schema(_schema({
            "type": "Enum",
            "name": "Color",
            "elements": [{"symbol": "RED"}, {"symbol": "GREEN", "comment": "go"}],
        }))
        color = schema.types[0]
        assert isinstance(color, EnumTypeDefinition)
        assert color.symbols == ["RED", "GREEN"]
        assert color.elements[1].comment == "go"

    def test_union(self):
        schema = load_schema(_schema(
            {"type": "Struct", "name": "A", "fields": []},
            {"type": "Union", "name": "U", "variants": ["A", "String"]},
        ))
        assert isinstance(schema.types[1], UnionTypeDefinition)
        assert schema.types[1].variants == ["A", "String"]

    def test_constrained_string(self):
        schema = load_schema(_schema(
            {"type": "String", "name": "Hostname", "pattern": "[a-z.]+", "maxSize": 255},
        ))
        host = schema.types[0]
        assert isinstance(host, StringTypeDefinition)
        assert host.pattern == "[a-z.]+"
        assert host.max_size == 255
        assert host.min_size is None

    def test_unconstrained_string_is_alias(self):
        schema = load_schema(_schema({"type": "String", "name": "Name"}))
        assert isinstance(schema.types[0], AliasTypeDefinition)

    def test_constrained_number(self):
        schema = load_schema(_schema({"type": "Int32", "name": "Port", "min": 1, "max": 65535}))
        port = schema.types[0]
        assert isinstance(port, NumberTypeDefinition)
        assert (port.min, port.max) == (1, 65535)

    def test_numeric_alias(self):
        schema = load_schema(_schema({"type": "Int32", "name": "Age"}))
        assert isinstance(schema.types[0], AliasTypeDefinition)
        assert schema.types[0].supertype == "Int32"

    def test_string_constraints_inherited_through_alias(self):
        """A constrained alias of a string alias is still a string variant."""
        schema = load_schema(_schema(
            {"type": "String", "name": "Name"},
            {"type": "Name", "name": "ShortName", "maxSize": 8},
        ))
        assert isinstance(schema.types[1], StringTypeDefinition)


class TestResolution:
    def test_forward_reference(self):
        """Supertypes declared later in the list are resolved."""
        schema = load_schema(_schema(
            {"type": "Name", "name": "ShortName", "maxSize": 8},
            {"type": "String", "name": "Name", "pattern": "[A-Z].*"},
        ))
        assert [t.name for t in schema.types] == ["ShortName", "Name"]
        assert isinstance(schema.types[0], StringTypeDefinition)

    def test_unresolvable_supertype(self):
        with pytest.raises(ValueError, match="Cannot resolve types"):
            load_schema(_schema({"type": "Missing", "name": "Broken"}))

    def test_self_supertype(self):
        with pytest.raises(ValueError, match="Cannot resolve types"):
            load_schema(_schema({"type": "Loop", "name": "Loop"}))

    def test_unknown_field_type(self):
        with pytest.raises(ValueError, match="unknown types"):
            load_schema(_schema({
                "type": "Struct",
                "name": "Team",
                "fields": [{"name": "players", "type": "Array", "items": "Player"}],
            }))

    def test_duplicate_type(self):
        with pytest.raises(ValueError, match="already defined"):
            load_schema(_schema(
                {"type": "Int32", "name": "Age"},
                {"type": "Int64", "name": "Age"},
            ))

    def test_builtin_name_redefined(self):
        with pytest.raises(ValueError, match="already defined"):
            load_schema(_schema({"type": "String", "name": "String"}))


class TestSchemaEnvelope:
    def test_metadata(self):
        schema = load_schema({
            "name": "Sample",
            "namespace": "com.example",
            "version": 3,
            "comment": "sample schema",
        })
        assert schema.name == "Sample"
        assert schema.namespace == "com.example"
        assert schema.version == 3
        assert schema.comment == "sample schema"
        assert schema.types == []

    def test_null_types(self):
        assert load_schema({"name": "Empty", "types": None}).types == []

    def test_not_an_object(self):
        with pytest.raises(ValueError):
            load_schema([1, 2, 3])

    def test_types_not_a_list(self):
        with pytest.raises(ValueError):
            load_schema({"name": "X", "types": {}})

    def test_type_without_name(self):
        with pytest.raises(ValueError, match="no name"):
            load_schema(_schema({"type": "String"}))

    def test_type_without_supertype(self):
        with pytest.raises(ValueError, match="no supertype"):
            load_schema(_schema({"name": "Orphan"}))

    def test_optional_must_be_boolean(self):
        """A string such as "false" is rejected rather than read as true."""
        with pytest.raises(ValueError, match="optional"):
            load_schema(_schema({
                "type": "Struct",
                "name": "P",
                "fields": [{"name": "x", "type": "Int32", "optional": "false"}],
            }))

    def test_bad_constraint_value(self):
        with pytest.raises(ValueError, match="maxSize"):
            load_schema(_schema({"type": "String", "name": "S", "maxSize": "big"}))

    def test_malformed_json(self):
        with pytest.raises(json.JSONDecodeError):
            loads_schema("{not json")

    def test_read_from_stream(self):
        stream = io.StringIO('{"name": "Empty", "types": []}')
        schema = read_schema(stream)
        assert schema.name == "Empty"
        assert schema.types == []

"""Translate RDL types into JSON Schema (draft-04) definitions."""

from __future__ import annotations

import json
import sys
from typing import IO, Any

from rdl_json_schema.types import (
    BASE_TYPE_NAMES,
    FLOAT_BASE_TYPES,
    AliasTypeDefinition,
    ArrayTypeDefinition,
    BaseType,
    EnumTypeDefinition,
    FieldDefinition,
    MapTypeDefinition,
    NumberTypeDefinition,
    Schema,
    StringTypeDefinition,
    StructTypeDefinition,
    TypeDefinition,
    TypeRegistry,
    UnionTypeDefinition,
)

DRAFT_04 = "http://json-schema.org/draft-04/schema#"
DEFINITIONS_PREFIX = "#/definitions/"


def generate_document(
    schema: Schema,
    base_path: str = "",
    diagnostics: IO[str] | None = None,
) -> dict[str, Any]:
    """Build the JSON Schema document for every type in a schema.

    Args:
        schema: The parsed schema.
        base_path: Reserved. References are always ``#/definitions/<Name>``.
        diagnostics: Stream for advisory lines (default: stderr).

    Returns:
        ``{"$schema": ..., "definitions": {...}}``, with ``definitions`` in
        declaration order and omitted when no type produced a definition.
    """
    registry = TypeRegistry(schema)
    document: dict[str, Any] = {"$schema": DRAFT_04}
    definitions: dict[str, Any] = {}
    for type_def in schema.types:
        fragment = translate_type(registry, type_def, diagnostics)
        if fragment is not None:
            definitions[type_def.name] = fragment
    if definitions:
        document["definitions"] = definitions
    return document


def render_document(document: dict[str, Any]) -> str:
    """Serialize a document with four-space indentation and a trailing newline."""
    return json.dumps(document, indent=4, ensure_ascii=False) + "\n"


def translate_type(
    registry: TypeRegistry,
    type_def: TypeDefinition,
    diagnostics: IO[str] | None = None,
) -> dict[str, Any] | None:
    """Translate one named type into a JSON Schema fragment.

    Returns None for types that need no definition of their own: plain
    string and numeric aliases, and unions (which are reported on the
    diagnostics stream).

    Raises:
        TypeError: If the type is of a kind that has no translation.
    """
    if isinstance(type_def, StructTypeDefinition):
        return _struct_schema(registry, type_def)
    if isinstance(type_def, MapTypeDefinition):
        return _map_schema(registry, type_def)
    if isinstance(type_def, ArrayTypeDefinition):
        return _array_schema(registry, type_def)
    if isinstance(type_def, EnumTypeDefinition):
        return {"enum": type_def.symbols}
    if isinstance(type_def, UnionTypeDefinition):
        print(f"[{type_def.name}: Unions not supported]", file=diagnostics or sys.stderr)
        return None
    if isinstance(type_def, StringTypeDefinition):
        return _string_schema(type_def)
    if isinstance(type_def, NumberTypeDefinition):
        return _number_schema(registry, type_def)

    if isinstance(type_def, AliasTypeDefinition):
        base = registry.base_type(type_def)
        if base == BaseType.STRING or base.is_number:
            return None
        if base == BaseType.STRUCT:
            return {"type": "object"}

    raise TypeError(f"Cannot translate type '{type_def.name}': {type_def!r}")


def _ref(name: str) -> dict[str, Any]:
    return {"$ref": DEFINITIONS_PREFIX + name}


def _is_unnecessary(registry: TypeRegistry, type_def: TypeDefinition) -> bool:
    """Check if a type translates to no definition of its own."""
    if isinstance(type_def, (StringTypeDefinition, NumberTypeDefinition)):
        return not type_def.has_constraints
    if isinstance(type_def, AliasTypeDefinition):
        return registry.base_type(type_def) != BaseType.STRUCT
    return False


def _referable_name(registry: TypeRegistry, name: str) -> str:
    """Follow aliases without a definition until a referable type is reached."""
    type_def = registry.find_type(name)
    while _is_unnecessary(registry, type_def):
        type_def = registry.find_type(type_def.supertype)
    return type_def.name


def _element_schema(registry: TypeRegistry, name: str, with_format: bool) -> dict[str, Any]:
    """Encode the element type of an array or map."""
    name = _referable_name(registry, name)
    if isinstance(registry.find_type(name), UnionTypeDefinition):
        # Unions have no definition to refer to
        return {"type": f"_{name}_"}
    if name == BaseType.STRING.value:
        return {"type": "string"}
    base = BASE_TYPE_NAMES.get(name)
    if base is not None and base.is_integer:
        items: dict[str, Any] = {"type": "integer"}
        if with_format:
            items["format"] = name.lower()
        return items
    return _ref(name)


def _struct_schema(registry: TypeRegistry, type_def: StructTypeDefinition) -> dict[str, Any]:
    st: dict[str, Any] = {}
    properties: dict[str, Any] = {}
    required: list[str] = []
    for f in type_def.fields:
        if not f.optional:
            required.append(f.name)
        properties[f.name] = _field_schema(registry, f)
    st["properties"] = properties
    if required:
        st["required"] = required
    if type_def.comment:
        st["description"] = type_def.comment
    return st


def _field_schema(registry: TypeRegistry, f: FieldDefinition) -> dict[str, Any]:
    """Encode one struct field by the base type of its declared type."""
    declared = registry.find_type(f.type)
    base = registry.base_type(declared)
    prop: dict[str, Any] = {}

    if base == BaseType.ARRAY:
        prop["type"] = "array"
        items = f.items
        if not items and isinstance(declared, ArrayTypeDefinition):
            items = declared.items
        if items:
            # No integer format on array items
            prop["items"] = _element_schema(registry, items, with_format=False)
    elif base == BaseType.STRING:
        target = _referable_name(registry, f.type)
        if target == BaseType.STRING.value:
            prop["type"] = "string"
        else:
            prop.update(_ref(target))
    elif base.is_integer:
        prop["type"] = "integer"
    elif base == BaseType.INT8:
        prop["type"] = "string"
        prop["format"] = "byte"
    elif base in (BaseType.STRUCT, BaseType.ENUM):
        prop.update(_ref(f.type))
    elif base == BaseType.MAP:
        prop["type"] = "object"
        if f.items:
            prop["additionalProperties"] = _element_schema(registry, f.items, with_format=True)
    else:
        # Unhandled base type, left visibly invalid
        prop["type"] = f"_{f.type}_"

    if f.comment:
        prop["description"] = f.comment
    return prop


def _array_schema(registry: TypeRegistry, type_def: ArrayTypeDefinition) -> dict[str, Any]:
    st: dict[str, Any] = {"type": "array"}
    if type_def.items != BaseType.ANY.value:
        st["items"] = _element_schema(registry, type_def.items, with_format=True)
    return st


def _map_schema(registry: TypeRegistry, type_def: MapTypeDefinition) -> dict[str, Any]:
    st: dict[str, Any] = {"type": "object"}
    if type_def.items != BaseType.ANY.value:
        st["additionalProperties"] = _element_schema(registry, type_def.items, with_format=True)
    return st


def _string_schema(type_def: StringTypeDefinition) -> dict[str, Any] | None:
    if not type_def.has_constraints:
        return None
    st: dict[str, Any] = {"type": "string"}
    if type_def.pattern:
        st["pattern"] = type_def.pattern
    if type_def.max_size is not None:
        st["maxLength"] = type_def.max_size
    if type_def.min_size is not None:
        st["minLength"] = type_def.min_size
    if type_def.values:
        st["enum"] = list(type_def.values)
    return st


def _number_schema(
    registry: TypeRegistry, type_def: NumberTypeDefinition
) -> dict[str, Any] | None:
    if not type_def.has_constraints:
        return None
    base = registry.base_type(type_def)
    st: dict[str, Any] = {"type": "number" if base in FLOAT_BASE_TYPES else "integer"}
    if type_def.min is not None:
        st["minimum"] = type_def.min
    if type_def.max is not None:
        st["maximum"] = type_def.max
    return st

"""Load a parsed RDL schema from its JSON serialization."""

from __future__ import annotations

import json
from typing import IO, Any

from rdl_json_schema.types import (
    AliasTypeDefinition,
    ArrayTypeDefinition,
    BaseType,
    EnumElementDefinition,
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

STRING_CONSTRAINT_KEYS = ("pattern", "maxSize", "minSize", "values")
NUMBER_CONSTRAINT_KEYS = ("min", "max")


def read_schema(stream: IO[str]) -> Schema:
    """Read and decode a JSON schema from a text stream."""
    return load_schema(json.load(stream))


def loads_schema(text: str) -> Schema:
    """Decode a JSON schema from a string."""
    return load_schema(json.loads(text))


def load_schema(data: Any) -> Schema:
    """Build a Schema from decoded JSON.

    Types may reference types declared later in the list, so resolution is
    iterative: each pass creates every type whose supertype is already known.
    Declaration order is preserved in the returned schema.
    """
    if not isinstance(data, dict):
        raise ValueError("Schema must be a JSON object")

    types_data = data.get("types") or []
    if not isinstance(types_data, list):
        raise ValueError("Schema 'types' must be a list")

    registry = TypeRegistry()
    to_resolve: dict[str, dict[str, Any]] = {}
    order: list[str] = []
    for spec in types_data:
        name = _type_name(spec)
        if name in to_resolve or name in registry:
            raise ValueError(f"Type '{name}' is already defined")
        to_resolve[name] = spec
        order.append(name)

    max_iterations = len(to_resolve) + 1
    for _ in range(max_iterations):
        if not to_resolve:
            break

        resolved_this_pass = []
        for name, spec in to_resolve.items():
            if spec["type"] not in registry:
                # Supertype not yet resolved
                continue
            registry.register(_create_type_from_spec(name, spec, registry))
            resolved_this_pass.append(name)

        for name in resolved_this_pass:
            del to_resolve[name]

        if not resolved_this_pass and to_resolve:
            raise ValueError(f"Cannot resolve types: {list(to_resolve.keys())}")

    types = [registry.find_type(name) for name in order]
    for type_def in types:
        _check_references(type_def, registry)

    return Schema(
        name=_optional_str(data, "name"),
        types=types,
        namespace=_optional_str(data, "namespace"),
        version=data.get("version"),
        comment=_optional_str(data, "comment"),
    )


def _type_name(spec: Any) -> str:
    if not isinstance(spec, dict):
        raise ValueError(f"Type entry must be a JSON object, got {spec!r}")
    name = spec.get("name")
    if not isinstance(name, str) or not name:
        raise ValueError(f"Type entry has no name: {spec!r}")
    if not isinstance(spec.get("type"), str) or not spec["type"]:
        raise ValueError(f"Type '{name}' has no supertype")
    return name


def _optional_str(spec: dict[str, Any], key: str) -> str:
    value = spec.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"'{key}' must be a string, got {value!r}")
    return value


def _create_type_from_spec(
    name: str, spec: dict[str, Any], registry: TypeRegistry
) -> TypeDefinition:
    """Create a type definition, choosing the variant from the keys present."""
    supertype = spec["type"]
    comment = _optional_str(spec, "comment")

    if "fields" in spec:
        fields = [_field_from_spec(name, fspec) for fspec in spec["fields"] or []]
        return StructTypeDefinition(
            name=name, supertype=supertype, comment=comment, fields=fields
        )
    if "keys" in spec and "items" in spec:
        return MapTypeDefinition(
            name=name,
            supertype=supertype,
            comment=comment,
            keys=_optional_str(spec, "keys") or BaseType.STRING.value,
            items=_optional_str(spec, "items") or BaseType.ANY.value,
        )
    if "items" in spec:
        return ArrayTypeDefinition(
            name=name,
            supertype=supertype,
            comment=comment,
            items=_optional_str(spec, "items") or BaseType.ANY.value,
        )
    if "elements" in spec:
        elements = []
        for el in spec["elements"] or []:
            if not isinstance(el, dict) or not isinstance(el.get("symbol"), str):
                raise ValueError(f"Enum '{name}' has a malformed element: {el!r}")
            elements.append(
                EnumElementDefinition(symbol=el["symbol"], comment=_optional_str(el, "comment"))
            )
        return EnumTypeDefinition(
            name=name, supertype=supertype, comment=comment, elements=elements
        )
    if "variants" in spec:
        variants = list(spec["variants"] or [])
        if not all(isinstance(v, str) for v in variants):
            raise ValueError(f"Union '{name}' has malformed variants: {variants!r}")
        return UnionTypeDefinition(
            name=name, supertype=supertype, comment=comment, variants=variants
        )

    base = registry.find_base_type(supertype)
    if base == BaseType.STRING and any(spec.get(k) is not None for k in STRING_CONSTRAINT_KEYS):
        return StringTypeDefinition(
            name=name,
            supertype=supertype,
            comment=comment,
            pattern=_optional_str(spec, "pattern"),
            max_size=_optional_int(spec, "maxSize"),
            min_size=_optional_int(spec, "minSize"),
            values=list(spec.get("values") or []),
        )
    if base.is_number and any(spec.get(k) is not None for k in NUMBER_CONSTRAINT_KEYS):
        return NumberTypeDefinition(
            name=name,
            supertype=supertype,
            comment=comment,
            min=_optional_number(spec, "min"),
            max=_optional_number(spec, "max"),
        )
    return AliasTypeDefinition(name=name, supertype=supertype, comment=comment)


def _field_from_spec(type_name: str, spec: Any) -> FieldDefinition:
    if not isinstance(spec, dict):
        raise ValueError(f"Struct '{type_name}' has a malformed field: {spec!r}")
    name = spec.get("name")
    ftype = spec.get("type")
    if not isinstance(name, str) or not isinstance(ftype, str):
        raise ValueError(f"Struct '{type_name}' has a malformed field: {spec!r}")
    return FieldDefinition(
        name=name,
        type=ftype,
        optional=_optional_bool(spec, "optional"),
        items=_optional_str(spec, "items"),
        keys=_optional_str(spec, "keys"),
        comment=_optional_str(spec, "comment"),
    )


def _optional_bool(spec: dict[str, Any], key: str) -> bool:
    value = spec.get(key)
    if value is None:
        return False
    if not isinstance(value, bool):
        raise ValueError(f"'{key}' must be a boolean, got {value!r}")
    return value


def _optional_int(spec: dict[str, Any], key: str) -> int | None:
    value = spec.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"'{key}' must be an integer, got {value!r}")
    return value


def _optional_number(spec: dict[str, Any], key: str) -> int | float | None:
    value = spec.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"'{key}' must be a number, got {value!r}")
    return value


def _check_references(type_def: TypeDefinition, registry: TypeRegistry) -> None:
    """Check that every type named by a definition is known to the registry."""
    refs: list[str] = []
    if isinstance(type_def, StructTypeDefinition):
        for f in type_def.fields:
            refs.extend(r for r in (f.type, f.items, f.keys) if r)
    elif isinstance(type_def, (ArrayTypeDefinition, MapTypeDefinition)):
        refs.append(type_def.items)
        if isinstance(type_def, MapTypeDefinition):
            refs.append(type_def.keys)
    elif isinstance(type_def, UnionTypeDefinition):
        refs.extend(type_def.variants)

    missing = [r for r in refs if r not in registry]
    if missing:
        raise ValueError(f"Type '{type_def.name}' refers to unknown types: {missing}")

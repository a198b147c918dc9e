"""rdl-gen-json-schema - export RDL schema types as JSON Schema (draft-04)."""

from rdl_json_schema.generator import generate_document, render_document, translate_type
from rdl_json_schema.loader import load_schema, loads_schema, read_schema
from rdl_json_schema.types import (
    AliasTypeDefinition,
    ArrayTypeDefinition,
    BaseType,
    BaseTypeDefinition,
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

__all__ = [
    # Main API
    "generate_document",
    "render_document",
    "translate_type",
    # Loading
    "load_schema",
    "loads_schema",
    "read_schema",
    # Type definitions
    "Schema",
    "TypeDefinition",
    "BaseType",
    "BaseTypeDefinition",
    "AliasTypeDefinition",
    "ArrayTypeDefinition",
    "MapTypeDefinition",
    "StructTypeDefinition",
    "FieldDefinition",
    "EnumTypeDefinition",
    "EnumElementDefinition",
    "StringTypeDefinition",
    "NumberTypeDefinition",
    "UnionTypeDefinition",
    "TypeRegistry",
]

__version__ = "0.1.0"

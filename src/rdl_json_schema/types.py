"""Type definitions for RDL schemas."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class BaseType(Enum):
    """Built-in base types every RDL type ultimately resolves to."""

    INT8 = "Int8"
    INT16 = "Int16"
    INT32 = "Int32"
    INT64 = "Int64"
    FLOAT32 = "Float32"
    FLOAT64 = "Float64"
    STRING = "String"
    BOOL = "Bool"
    TIMESTAMP = "Timestamp"
    UUID = "UUID"
    SYMBOL = "Symbol"
    ARRAY = "Array"
    MAP = "Map"
    STRUCT = "Struct"
    ENUM = "Enum"
    UNION = "Union"
    ANY = "Any"

    def __str__(self) -> str:
        return self.value

    @property
    def is_integer(self) -> bool:
        """Return whether this base type is a JSON integer (Int8 excluded)."""
        return self in INTEGER_BASE_TYPES

    @property
    def is_number(self) -> bool:
        """Return whether this base type is any numeric type."""
        return self in NUMERIC_BASE_TYPES


# Mapping from RDL spelling to BaseType
BASE_TYPE_NAMES: dict[str, BaseType] = {bt.value: bt for bt in BaseType}

INTEGER_BASE_TYPES = frozenset({BaseType.INT16, BaseType.INT32, BaseType.INT64})

FLOAT_BASE_TYPES = frozenset({BaseType.FLOAT32, BaseType.FLOAT64})

NUMERIC_BASE_TYPES = frozenset(
    {
        BaseType.INT8,
        BaseType.INT16,
        BaseType.INT32,
        BaseType.INT64,
        BaseType.FLOAT32,
        BaseType.FLOAT64,
    }
)


@dataclass
class TypeDefinition:
    """Base class for all type definitions.

    ``supertype`` is the name the type was declared in terms of (the ``type``
    key of the serialized form). Built-in base types have no supertype.
    """

    name: str
    supertype: str = ""
    comment: str = ""

    @property
    def is_base(self) -> bool:
        """Return whether this is one of the built-in base types."""
        return False


@dataclass
class BaseTypeDefinition(TypeDefinition):
    """Type definition wrapping a built-in base type."""

    base: BaseType = BaseType.ANY

    @property
    def is_base(self) -> bool:
        return True


@dataclass
class AliasTypeDefinition(TypeDefinition):
    """Plain alias of another type, with no constraints of its own."""

    pass


@dataclass
class FieldDefinition:
    """Definition of a field within a struct type."""

    name: str
    type: str
    optional: bool = False
    items: str = ""  # element type for Array/Map fields
    keys: str = ""  # key type for Map fields
    comment: str = ""


@dataclass
class StructTypeDefinition(TypeDefinition):
    """Struct type with an ordered list of fields."""

    fields: list[FieldDefinition] = field(default_factory=list)


@dataclass
class ArrayTypeDefinition(TypeDefinition):
    """Named array type (e.g. ``type Names Array<String>``)."""

    items: str = BaseType.ANY.value


@dataclass
class MapTypeDefinition(TypeDefinition):
    """Named map type (e.g. ``type Counts Map<String,Int32>``)."""

    keys: str = BaseType.STRING.value
    items: str = BaseType.ANY.value


@dataclass
class EnumElementDefinition:
    """A single symbol within an enum type."""

    symbol: str
    comment: str = ""


@dataclass
class EnumTypeDefinition(TypeDefinition):
    """Enum type: an ordered set of symbols."""

    elements: list[EnumElementDefinition] = field(default_factory=list)

    @property
    def symbols(self) -> list[str]:
        return [el.symbol for el in self.elements]


@dataclass
class StringTypeDefinition(TypeDefinition):
    """String alias carrying constraints."""

    pattern: str = ""
    max_size: int | None = None
    min_size: int | None = None
    values: list[str] = field(default_factory=list)

    @property
    def has_constraints(self) -> bool:
        return bool(
            self.pattern
            or self.max_size is not None
            or self.min_size is not None
            or self.values
        )


@dataclass
class NumberTypeDefinition(TypeDefinition):
    """Numeric alias carrying range constraints."""

    min: int | float | None = None
    max: int | float | None = None

    @property
    def has_constraints(self) -> bool:
        return self.min is not None or self.max is not None


@dataclass
class UnionTypeDefinition(TypeDefinition):
    """Union type. Parsed but not translated."""

    variants: list[str] = field(default_factory=list)


@dataclass
class Schema:
    """A named, ordered collection of user-defined types."""

    name: str = ""
    types: list[TypeDefinition] = field(default_factory=list)
    namespace: str = ""
    version: int | None = None
    comment: str = ""


class TypeRegistry:
    """Registry of all defined types, built-ins included."""

    def __init__(self, schema: Schema | None = None) -> None:
        self._types: dict[str, TypeDefinition] = {}
        self._register_base_types()
        if schema is not None:
            for type_def in schema.types:
                self.register(type_def)

    def _register_base_types(self) -> None:
        """Register all built-in base types."""
        for bt in BaseType:
            self._types[bt.value] = BaseTypeDefinition(name=bt.value, base=bt)

    def register(self, type_def: TypeDefinition) -> None:
        """Register a type definition."""
        if type_def.name in self._types:
            raise ValueError(f"Type '{type_def.name}' is already defined")
        self._types[type_def.name] = type_def

    def get(self, name: str) -> TypeDefinition | None:
        """Get a type by name."""
        return self._types.get(name)

    def find_type(self, name: str) -> TypeDefinition:
        """Get the declared type for a reference, raising if not found."""
        type_def = self._types.get(name)
        if type_def is None:
            raise KeyError(f"Type '{name}' not found")
        return type_def

    def find_base_type(self, name: str) -> BaseType:
        """Follow the supertype chain of a reference to its base type."""
        seen: set[str] = set()
        type_def = self.find_type(name)
        while not isinstance(type_def, BaseTypeDefinition):
            if type_def.name in seen:
                raise ValueError(f"Type '{name}' has a cyclic supertype chain")
            seen.add(type_def.name)
            type_def = self.find_type(type_def.supertype)
        return type_def.base

    def base_type(self, type_def: TypeDefinition) -> BaseType:
        """Resolve the base type of a definition."""
        if isinstance(type_def, BaseTypeDefinition):
            return type_def.base
        return self.find_base_type(type_def.supertype)

    def list_types(self) -> list[str]:
        """List all registered type names."""
        return list(self._types.keys())

    def __contains__(self, name: str) -> bool:
        return name in self._types

"""In-memory model of compiled interface metadata."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum

METADATA_MAGIC_NUMBER = 0x1DF02ED1

INTERFACE_PROPERTY_ONEWAY = 0x1
METHOD_PROPERTY_ONEWAY = 0x1

ATTR_IN = 0x1
ATTR_OUT = 0x2
ATTR_MASK = 0x3


class MetadataError(Exception):
    """Raised when metadata is malformed or refers to missing entries."""


class TypeKind(IntEnum):
    UNKNOWN = 0
    CHAR = 1
    BOOLEAN = 2
    BYTE = 3
    SHORT = 4
    INTEGER = 5
    LONG = 6
    FLOAT = 7
    DOUBLE = 8
    STRING = 9
    VOID = 10
    SEQUENCEABLE = 11
    INTERFACE = 12
    LIST = 13
    MAP = 14
    ARRAY = 15


@dataclass
class MetaParameter:
    """A method parameter; ``type_index`` points into the component's types."""

    name: str | None = None
    attributes: int = 0
    type_index: int = 0

    def is_in(self) -> bool:
        return self.attributes & ATTR_IN == ATTR_IN

    def is_out(self) -> bool:
        return self.attributes & ATTR_OUT == ATTR_OUT


@dataclass
class MetaMethod:
    """An interface method; ``return_type_index`` points into the types."""

    name: str | None = None
    signature: str | None = None
    properties: int = 0
    return_type_index: int = 0
    parameters: list[MetaParameter] = field(default_factory=list)

    def is_oneway(self) -> bool:
        return self.properties & METHOD_PROPERTY_ONEWAY != 0


@dataclass
class MetaInterface:
    """An interface with its methods."""

    license: str | None = None
    name: str | None = None
    namespace: str | None = None
    properties: int = 0
    methods: list[MetaMethod] = field(default_factory=list)
    external: bool = False

    def is_oneway(self) -> bool:
        return self.properties & INTERFACE_PROPERTY_ONEWAY != 0


@dataclass
class MetaSequenceable:
    """A sequenceable (parcelable) type declaration."""

    name: str | None = None
    namespace: str | None = None


@dataclass
class MetaNamespace:
    """A namespace; indexes point into the component's sequenceables and interfaces."""

    name: str | None = None
    sequenceable_indexes: list[int] = field(default_factory=list)
    interface_indexes: list[int] = field(default_factory=list)
    namespaces: list[MetaNamespace] = field(default_factory=list)


@dataclass
class MetaType:
    """A type entry; ``index`` and ``nested_type_indexes`` refer to other tables."""

    kind: TypeKind = TypeKind.UNKNOWN
    index: int = 0
    nested_type_indexes: list[int] = field(default_factory=list)


@dataclass
class MetaComponent:
    """The root of a metadata tree."""

    name: str | None = None
    namespaces: list[MetaNamespace] = field(default_factory=list)
    sequenceables: list[MetaSequenceable] = field(default_factory=list)
    interfaces: list[MetaInterface] = field(default_factory=list)
    types: list[MetaType] = field(default_factory=list)
    magic: int = METADATA_MAGIC_NUMBER
    size: int = 0
    string_pool_size: int = 0
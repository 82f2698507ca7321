"""Reading of binary metadata blocks back into a metadata tree.

The block layout is the one :mod:`idlmeta.builder` produces. Every pointer
in it is a byte offset from the start of the block; 0 stands for a null
pointer.
"""

from __future__ import annotations

import os
import struct

from .model import (
    METADATA_MAGIC_NUMBER,
    MetaComponent,
    MetadataError,
    MetaInterface,
    MetaMethod,
    MetaNamespace,
    MetaParameter,
    MetaSequenceable,
    MetaType,
    TypeKind,
)

_COMPONENT = struct.Struct("<iiQiiiiQQQQi4xQ")
_NAMESPACE = struct.Struct("<Qiii4xQQQ")
_SEQUENCEABLE = struct.Struct("<QQ")
_INTERFACE = struct.Struct("<QQQIiQ?7x")
_METHOD = struct.Struct("<QQIii4xQ")
_PARAMETER = struct.Struct("<QIi")
_TYPE = struct.Struct("<iii4xQ")
_POINTER = struct.Struct("<Q")
_INT = struct.Struct("<i")


class _BlockReader:
    """Resolves offsets inside one metadata block."""

    def __init__(self, data: bytes) -> None:
        self.data = data
        self._open_namespaces: set[int] = set()

    def unpack(self, layout: struct.Struct, offset: int, what: str) -> tuple:
        if offset < 0 or offset + layout.size > len(self.data):
            raise MetadataError(f"{what} at offset {offset} lies outside the metadata")
        return layout.unpack_from(self.data, offset)

    def string(self, offset: int) -> str | None:
        if offset == 0:
            return None
        if offset >= len(self.data):
            raise MetadataError(f"string at offset {offset} lies outside the metadata")
        end = self.data.find(b"\0", offset)
        if end == -1:
            raise MetadataError(f"string at offset {offset} is not terminated")
        try:
            return self.data[offset:end].decode("utf-8")
        except UnicodeDecodeError as exc:
            raise MetadataError(f"string at offset {offset} is not valid UTF-8") from exc

    @staticmethod
    def _count(value: int, what: str) -> int:
        if value < 0:
            raise MetadataError(f"{what} count {value} is negative")
        return value

    def ints(self, offset: int, count: int, what: str) -> list[int]:
        count = self._count(count, what)
        return [self.unpack(_INT, offset + i * _INT.size, what)[0] for i in range(count)]

    def pointers(self, offset: int, count: int, what: str) -> list[int]:
        count = self._count(count, what)
        return [
            self.unpack(_POINTER, offset + i * _POINTER.size, what)[0]
            for i in range(count)
        ]

    def component(self) -> MetaComponent:
        (magic, size, name, ns_count, sq_count, if_count, type_count,
         ns_at, sq_at, if_at, types_at, pool_size, _pool_at) = self.unpack(
            _COMPONENT, 0, "component header")
        return MetaComponent(
            name=self.string(name),
            namespaces=[self.namespace(p)
                        for p in self.pointers(ns_at, ns_count, "namespace")],
            sequenceables=[self.sequenceable(p)
                           for p in self.pointers(sq_at, sq_count, "sequenceable")],
            interfaces=[self.interface(p)
                        for p in self.pointers(if_at, if_count, "interface")],
            types=[self.type(p) for p in self.pointers(types_at, type_count, "type")],
            magic=magic,
            size=size,
            string_pool_size=pool_size,
        )

    def namespace(self, offset: int) -> MetaNamespace:
        if offset in self._open_namespaces:
            raise MetadataError(f"namespace at offset {offset} contains itself")
        self._open_namespaces.add(offset)
        try:
            name, sq_count, if_count, ns_count, sq_at, if_at, ns_at = self.unpack(
                _NAMESPACE, offset, "namespace")
            return MetaNamespace(
                name=self.string(name),
                sequenceable_indexes=self.ints(sq_at, sq_count, "sequenceable index"),
                interface_indexes=self.ints(if_at, if_count, "interface index"),
                namespaces=[self.namespace(p)
                            for p in self.pointers(ns_at, ns_count, "namespace")],
            )
        finally:
            self._open_namespaces.discard(offset)

    def sequenceable(self, offset: int) -> MetaSequenceable:
        name, namespace = self.unpack(_SEQUENCEABLE, offset, "sequenceable")
        return MetaSequenceable(name=self.string(name), namespace=self.string(namespace))

    def interface(self, offset: int) -> MetaInterface:
        (license_, name, namespace, properties, method_count,
         methods_at, external) = self.unpack(_INTERFACE, offset, "interface")
        return MetaInterface(
            license=self.string(license_),
            name=self.string(name),
            namespace=self.string(namespace),
            properties=properties,
            methods=[self.method(p)
                     for p in self.pointers(methods_at, method_count, "method")],
            external=bool(external),
        )

    def method(self, offset: int) -> MetaMethod:
        name, signature, properties, return_index, param_count, params_at = self.unpack(
            _METHOD, offset, "method")
        return MetaMethod(
            name=self.string(name),
            signature=self.string(signature),
            properties=properties,
            return_type_index=return_index,
            parameters=[self.parameter(p)
                        for p in self.pointers(params_at, param_count, "parameter")],
        )

    def parameter(self, offset: int) -> MetaParameter:
        name, attributes, type_index = self.unpack(_PARAMETER, offset, "parameter")
        return MetaParameter(name=self.string(name), attributes=attributes,
                             type_index=type_index)

    def type(self, offset: int) -> MetaType:
        kind, index, nested_count, nested_at = self.unpack(_TYPE, offset, "type")
        try:
            type_kind = TypeKind(kind)
        except ValueError:
            type_kind = TypeKind.UNKNOWN
        return MetaType(
            kind=type_kind,
            index=index,
            nested_type_indexes=self.ints(nested_at, nested_count, "nested type index"),
        )


def _check_header(data: bytes, origin: str) -> int:
    if len(data) < _COMPONENT.size:
        raise MetadataError(f"the metadata in {origin} is too short")
    magic, size = struct.unpack_from("<ii", data, 0)
    if magic != METADATA_MAGIC_NUMBER or size < 0:
        raise MetadataError(f"the metadata in {origin} is bad")
    if size > len(data):
        raise MetadataError(f"the metadata in {origin} is truncated")
    return size


def read_metadata(data: bytes) -> MetaComponent:
    """Decode a metadata block into a :class:`MetaComponent`.

    Raises :class:`MetadataError` when the block is malformed.
    """
    data = bytes(data)
    size = _check_header(data, "the buffer")
    return _BlockReader(data[:size]).component()


def read_metadata_file(path: str | os.PathLike[str]) -> MetaComponent:
    """Read and decode the metadata block stored in the file at ``path``."""
    with open(path, "rb") as stream:
        data = stream.read()
    size = _check_header(data, f'"{os.fspath(path)}" file')
    return _BlockReader(data[:size]).component()
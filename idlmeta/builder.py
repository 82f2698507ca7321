"""Flattening of a metadata tree into its binary, position-independent form.

The layout follows the 64-bit little-endian form of the metadata structs.
Every pointer is stored as a byte offset from the start of the block, and a
null pointer is stored as 0. The block starts with the component header,
followed by the header's pointer arrays, the namespaces, sequenceables,
interfaces (with their methods and parameters) and types, and ends with the
string pool. Empty and missing strings are both stored as null pointers.
"""

from __future__ import annotations

import struct
from typing import Sequence

from .model import (
    ATTR_MASK,
    INTERFACE_PROPERTY_ONEWAY,
    METADATA_MAGIC_NUMBER,
    METHOD_PROPERTY_ONEWAY,
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
from .string_pool import StringPool

_COMPONENT = struct.Struct("<iiQiiiiQQQQi4xQ")
_NAMESPACE = struct.Struct("<Qiii4xQQQ")
_SEQUENCEABLE = struct.Struct("<QQ")
_INTERFACE = struct.Struct("<QQQIiQ?7x")
_METHOD = struct.Struct("<QQIii4xQ")
_PARAMETER = struct.Struct("<QIi")
_TYPE = struct.Struct("<iii4xQ")
_POINTER = struct.Struct("<Q")
_INT = struct.Struct("<i")

_POINTER_SIZE = _POINTER.size
_INT_SIZE = _INT.size
_NESTED_COUNTS = {TypeKind.LIST: 1, TypeKind.MAP: 2, TypeKind.ARRAY: 1}


def _align8(value: int) -> int:
    return (value + 7) & ~7


def _check_index(index: int, items: Sequence[object], what: str) -> None:
    if not 0 <= index < len(items):
        raise MetadataError(f"{what} index {index} is out of range")


class MetadataBuilder:
    """Turns a :class:`MetaComponent` into a block of metadata bytes."""

    def __init__(self, component: MetaComponent) -> None:
        self.component = component
        self._cursor = 0
        self._buffer = bytearray()
        self._pool = StringPool()
        self._pool_base = 0

    # -- validation and string collection ---------------------------------

    def _validate(self) -> None:
        mc = self.component
        if not mc.name:
            raise MetadataError("the component has no name")

        def check_namespace(mn: MetaNamespace) -> None:
            for index in mn.sequenceable_indexes:
                _check_index(index, mc.sequenceables, "sequenceable")
            for index in mn.interface_indexes:
                _check_index(index, mc.interfaces, "interface")
            for child in mn.namespaces:
                check_namespace(child)

        for mn in mc.namespaces:
            check_namespace(mn)
        for mi in mc.interfaces:
            for mm in mi.methods:
                _check_index(mm.return_type_index, mc.types, "type")
                for mp in mm.parameters:
                    _check_index(mp.type_index, mc.types, "type")
        for mt in mc.types:
            if mt.kind == TypeKind.SEQUENCEABLE:
                _check_index(mt.index, mc.sequenceables, "sequenceable")
            elif mt.kind == TypeKind.INTERFACE:
                _check_index(mt.index, mc.interfaces, "interface")
            needed = _NESTED_COUNTS.get(mt.kind, 0)
            if len(mt.nested_type_indexes) < needed:
                raise MetadataError(f"{mt.kind.name} type lacks nested type indexes")
            for index in mt.nested_type_indexes[:needed]:
                _check_index(index, mc.types, "type")

    def _string_pool(self) -> StringPool:
        pool = StringPool()
        mc = self.component
        pool.add(mc.name)

        def add_namespace(mn: MetaNamespace) -> None:
            pool.add(mn.name)
            for child in mn.namespaces:
                add_namespace(child)

        for mn in mc.namespaces:
            add_namespace(mn)
        for sq in mc.sequenceables:
            pool.add(sq.name)
            pool.add(sq.namespace)
        for mi in mc.interfaces:
            pool.add(mi.license)
            pool.add(mi.name)
            pool.add(mi.namespace)
            for mm in mi.methods:
                pool.add(mm.name)
                pool.add(mm.signature)
                for mp in mm.parameters:
                    pool.add(mp.name)
        return pool

    # -- size calculation --------------------------------------------------

    def calculate_size(self) -> int:
        """Return the size in bytes of the block :meth:`build` produces."""
        self._validate()
        return self._calculate(self._string_pool())

    def _calculate(self, pool: StringPool) -> int:
        mc = self.component
        cursor = _align8(0)
        cursor = _align8(cursor + _COMPONENT.size)
        cursor = _align8(cursor + _POINTER_SIZE * len(mc.namespaces))
        cursor = _align8(cursor + _POINTER_SIZE * len(mc.sequenceables))
        cursor = _align8(cursor + _POINTER_SIZE * len(mc.interfaces))
        cursor += _POINTER_SIZE * len(mc.types)
        self._cursor = cursor
        for mn in mc.namespaces:
            self._calculate_namespace(mn)
        for _ in mc.sequenceables:
            self._cursor = _align8(self._cursor) + _SEQUENCEABLE.size
        for mi in mc.interfaces:
            self._calculate_interface(mi)
        for mt in mc.types:
            self._calculate_type(mt)
        return _align8(self._cursor) + len(pool)

    def _calculate_namespace(self, mn: MetaNamespace) -> None:
        cursor = _align8(self._cursor)
        cursor = _align8(cursor + _NAMESPACE.size)
        cursor = _align8(cursor + _INT_SIZE * len(mn.sequenceable_indexes))
        cursor = _align8(cursor + _INT_SIZE * len(mn.interface_indexes))
        self._cursor = cursor + _POINTER_SIZE * len(mn.namespaces)
        for child in mn.namespaces:
            self._calculate_namespace(child)

    def _calculate_interface(self, mi: MetaInterface) -> None:
        cursor = _align8(self._cursor)
        cursor = _align8(cursor + _INTERFACE.size)
        self._cursor = cursor + _POINTER_SIZE * len(mi.methods)
        for mm in mi.methods:
            cursor = _align8(self._cursor)
            cursor = _align8(cursor + _METHOD.size)
            self._cursor = cursor + _POINTER_SIZE * len(mm.parameters)
            for _ in mm.parameters:
                self._cursor = _align8(self._cursor) + _PARAMETER.size

    def _calculate_type(self, mt: MetaType) -> None:
        cursor = _align8(self._cursor) + _TYPE.size
        nested = _NESTED_COUNTS.get(mt.kind, 0)
        if nested:
            cursor = _align8(cursor) + _POINTER_SIZE * nested
        self._cursor = cursor

    # -- writing -----------------------------------------------------------

    def build(self) -> bytes:
        """Return the metadata block for the component.

        Raises :class:`MetadataError` when the component is not consistent.
        """
        self._validate()
        pool = self._string_pool()
        size = self._calculate(pool)
        self._pool = pool
        self._pool_base = size - len(pool)
        self._buffer = bytearray(size)
        self._buffer[self._pool_base:] = pool.data()
        self._write_component(size)
        return bytes(self._buffer)

    def _string(self, value: str | None) -> int:
        if not value:
            return 0
        return self._pool_base + self._pool.offset(value)

    def _write_component(self, size: int) -> None:
        mc = self.component
        start = _align8(0)
        namespaces_at = _align8(start + _COMPONENT.size)
        sequenceables_at = _align8(namespaces_at + _POINTER_SIZE * len(mc.namespaces))
        interfaces_at = _align8(sequenceables_at + _POINTER_SIZE * len(mc.sequenceables))
        types_at = _align8(interfaces_at + _POINTER_SIZE * len(mc.interfaces))
        self._cursor = types_at + _POINTER_SIZE * len(mc.types)

        _COMPONENT.pack_into(
            self._buffer,
            start,
            METADATA_MAGIC_NUMBER,
            size,
            self._string(mc.name),
            len(mc.namespaces),
            len(mc.sequenceables),
            len(mc.interfaces),
            len(mc.types),
            namespaces_at,
            sequenceables_at,
            interfaces_at,
            types_at,
            len(self._pool),
            self._pool_base,
        )

        for i, mn in enumerate(mc.namespaces):
            _POINTER.pack_into(self._buffer, namespaces_at + i * _POINTER_SIZE,
                               self._write_namespace(mn))
        for i, sq in enumerate(mc.sequenceables):
            _POINTER.pack_into(self._buffer, sequenceables_at + i * _POINTER_SIZE,
                               self._write_sequenceable(sq))
        for i, mi in enumerate(mc.interfaces):
            _POINTER.pack_into(self._buffer, interfaces_at + i * _POINTER_SIZE,
                               self._write_interface(mi))
        for i, mt in enumerate(mc.types):
            _POINTER.pack_into(self._buffer, types_at + i * _POINTER_SIZE,
                               self._write_type(mt))

    def _write_namespace(self, mn: MetaNamespace) -> int:
        start = _align8(self._cursor)
        sequenceables_at = _align8(start + _NAMESPACE.size)
        interfaces_at = _align8(sequenceables_at + _INT_SIZE * len(mn.sequenceable_indexes))
        namespaces_at = _align8(interfaces_at + _INT_SIZE * len(mn.interface_indexes))
        self._cursor = namespaces_at + _POINTER_SIZE * len(mn.namespaces)

        _NAMESPACE.pack_into(
            self._buffer,
            start,
            self._string(mn.name),
            len(mn.sequenceable_indexes),
            len(mn.interface_indexes),
            len(mn.namespaces),
            sequenceables_at,
            interfaces_at,
            namespaces_at,
        )
        for i, index in enumerate(mn.sequenceable_indexes):
            _INT.pack_into(self._buffer, sequenceables_at + i * _INT_SIZE, index)
        for i, index in enumerate(mn.interface_indexes):
            _INT.pack_into(self._buffer, interfaces_at + i * _INT_SIZE, index)
        for i, child in enumerate(mn.namespaces):
            _POINTER.pack_into(self._buffer, namespaces_at + i * _POINTER_SIZE,
                               self._write_namespace(child))
        return start

    def _write_sequenceable(self, sq: MetaSequenceable) -> int:
        start = _align8(self._cursor)
        _SEQUENCEABLE.pack_into(self._buffer, start,
                                self._string(sq.name), self._string(sq.namespace))
        self._cursor = start + _SEQUENCEABLE.size
        return start

    def _write_interface(self, mi: MetaInterface) -> int:
        start = _align8(self._cursor)
        methods_at = _align8(start + _INTERFACE.size)
        self._cursor = methods_at + _POINTER_SIZE * len(mi.methods)
        _INTERFACE.pack_into(
            self._buffer,
            start,
            self._string(mi.license),
            self._string(mi.name),
            self._string(mi.namespace),
            INTERFACE_PROPERTY_ONEWAY if mi.is_oneway() else 0,
            len(mi.methods),
            methods_at,
            bool(mi.external),
        )
        for i, mm in enumerate(mi.methods):
            _POINTER.pack_into(self._buffer, methods_at + i * _POINTER_SIZE,
                               self._write_method(mm))
        return start

    def _write_method(self, mm: MetaMethod) -> int:
        start = _align8(self._cursor)
        parameters_at = _align8(start + _METHOD.size)
        self._cursor = parameters_at + _POINTER_SIZE * len(mm.parameters)
        _METHOD.pack_into(
            self._buffer,
            start,
            self._string(mm.name),
            self._string(mm.signature),
            METHOD_PROPERTY_ONEWAY if mm.is_oneway() else 0,
            mm.return_type_index,
            len(mm.parameters),
            parameters_at,
        )
        for i, mp in enumerate(mm.parameters):
            _POINTER.pack_into(self._buffer, parameters_at + i * _POINTER_SIZE,
                               self._write_parameter(mp))
        return start

    def _write_parameter(self, mp: MetaParameter) -> int:
        start = _align8(self._cursor)
        _PARAMETER.pack_into(self._buffer, start, self._string(mp.name),
                             mp.attributes & ATTR_MASK, mp.type_index)
        self._cursor = start + _PARAMETER.size
        return start

    def _write_type(self, mt: MetaType) -> int:
        start = _align8(self._cursor)
        cursor = start + _TYPE.size
        nested = _NESTED_COUNTS.get(mt.kind, 0)
        nested_at = 0
        if nested:
            nested_at = _align8(cursor)
            for i, index in enumerate(mt.nested_type_indexes[:nested]):
                _INT.pack_into(self._buffer, nested_at + i * _INT_SIZE, index)
            cursor = nested_at + _POINTER_SIZE * nested
        _TYPE.pack_into(self._buffer, start, int(mt.kind), mt.index, nested, nested_at)
        self._cursor = cursor
        return start


def build_metadata(component: MetaComponent) -> bytes:
    """Return the binary metadata block for ``component``."""
    return MetadataBuilder(component).build()
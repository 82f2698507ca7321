"""Human-readable dump of a metadata component."""

from __future__ import annotations

from typing import Sequence, TypeVar

from .model import (
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

TAB = "    "

_T = TypeVar("_T")

_PRIMITIVE_NAMES = {
    TypeKind.CHAR: "char",
    TypeKind.BOOLEAN: "boolean",
    TypeKind.BYTE: "byte",
    TypeKind.SHORT: "short",
    TypeKind.INTEGER: "int",
    TypeKind.LONG: "long",
    TypeKind.FLOAT: "float",
    TypeKind.DOUBLE: "double",
    TypeKind.STRING: "String",
    TypeKind.VOID: "void",
}


def _text(value: str | None) -> str:
    return "(null)" if value is None else value


def _lookup(items: Sequence[_T], index: int, what: str) -> _T:
    if not 0 <= index < len(items):
        raise MetadataError(f"{what} index {index} is out of range")
    return items[index]


def _block(prefix: str, key: str, items: list[str], comma: str) -> str:
    if not items:
        return f'{prefix}"{key}" : []{comma}\n'
    return f'{prefix}"{key}" : [\n' + ",\n".join(items) + f"\n{prefix}]{comma}\n"


class MetadataDumper:
    """Renders a :class:`MetaComponent` as an indented, JSON-like text."""

    def __init__(self, component: MetaComponent) -> None:
        self.component = component

    def dump(self, prefix: str = "") -> str:
        mc = self.component
        inner = prefix + TAB
        nested = inner + TAB
        parts = [
            f"{prefix}MetaComponent\n",
            f"{prefix}{{\n",
            f'{inner}"magic_" : "0x{mc.magic:x}",\n',
            f'{inner}"size_" : "{mc.size}",\n',
            f'{inner}"name_" : "{_text(mc.name)}",\n',
            f'{inner}"namespaceNumber_" : "{len(mc.namespaces)}",\n',
            f'{inner}"sequenceableNumber_" : "{len(mc.sequenceables)}",\n',
            f'{inner}"interfaceNumber_" : "{len(mc.interfaces)}",\n',
            f'{inner}"typeNumber_" : "{len(mc.types)}",\n',
            _block(inner, "namespaces_",
                   [self._namespace(ns, nested) for ns in mc.namespaces], ","),
            _block(inner, "sequenceables_",
                   [self._sequenceable(sq, nested) for sq in mc.sequenceables], ","),
            _block(inner, "interfaces_",
                   [self._interface(it, nested) for it in mc.interfaces], ","),
            f'{inner}"stringPoolSize_" : "{mc.string_pool_size}"\n',
            f"{prefix}}}\n",
        ]
        return "".join(parts)

    def _namespace(self, mn: MetaNamespace, prefix: str) -> str:
        inner = prefix + TAB
        nested = inner + TAB
        sequenceables = [
            f'{nested}{{ "name" : "{_text(_lookup(self.component.sequenceables, i, "sequenceable").name)}" }}'
            for i in mn.sequenceable_indexes
        ]
        interfaces = [
            f'{nested}{{ "name" : "{_text(_lookup(self.component.interfaces, i, "interface").name)}" }}'
            for i in mn.interface_indexes
        ]
        parts = [
            f"{prefix}{{\n",
            f'{inner}"name_" : "{_text(mn.name)}",\n',
            f'{inner}"sequenceableNumber_" : "{len(mn.sequenceable_indexes)}",\n',
            f'{inner}"interfaceNumber_" : "{len(mn.interface_indexes)}",\n',
            f'{inner}"namespaceNumber_" : "{len(mn.namespaces)}",\n',
            _block(inner, "sequenceableIndexes_", sequenceables, ","),
            _block(inner, "interfaceIndexes_", interfaces, ","),
            _block(inner, "namespaces_",
                   [self._namespace(child, nested) for child in mn.namespaces], ""),
            f"{prefix}}}",
        ]
        return "".join(parts)

    def _sequenceable(self, mp: MetaSequenceable, prefix: str) -> str:
        inner = prefix + TAB
        return (
            f"{prefix}{{\n"
            f'{inner}"name_" : "{_text(mp.name)}",\n'
            f'{inner}"namespace_" : "{_text(mp.namespace)}"\n'
            f"{prefix}}}"
        )

    def _interface(self, mi: MetaInterface, prefix: str) -> str:
        inner = prefix + TAB
        oneway = "oneway" if mi.is_oneway() else ""
        parts = [
            f"{prefix}{{\n",
            f'{inner}"name_" : "{_text(mi.name)}",\n',
            f'{inner}"namespace_" : "{_text(mi.namespace)}",\n',
            f'{inner}"properties_" : "{oneway}",\n',
            f'{inner}"methodNumber_" : "{len(mi.methods)}",\n',
            f'{inner}"external_" : "{int(mi.external)}",\n',
            _block(inner, "methods_",
                   [self._method(mm, inner + TAB) for mm in mi.methods], ""),
            f"{prefix}}}",
        ]
        return "".join(parts)

    def _method(self, mm: MetaMethod, prefix: str) -> str:
        inner = prefix + TAB
        oneway = "oneway" if mm.is_oneway() else ""
        return_type = _lookup(self.component.types, mm.return_type_index, "type")
        parts = [
            f"{prefix}{{\n",
            f'{inner}"name_" : "{_text(mm.name)}",\n',
            f'{inner}"signature_" : "{_text(mm.signature)}",\n',
            f'{inner}"properties_" : "{oneway}",\n',
            f'{inner}"returnType_" : "{self.type_name(return_type)}",\n',
            f'{inner}"parameterNumber_" : "{len(mm.parameters)}",\n',
            _block(inner, "parameters_",
                   [self._parameter(mp, inner + TAB) for mp in mm.parameters], ""),
            f"{prefix}}}",
        ]
        return "".join(parts)

    def _parameter(self, mp: MetaParameter, prefix: str) -> str:
        inner = prefix + TAB
        attributes = []
        if mp.is_in():
            attributes.append("in")
        if mp.is_out():
            attributes.append("out")
        param_type = _lookup(self.component.types, mp.type_index, "type")
        return (
            f"{prefix}{{\n"
            f'{inner}"name_" : "{_text(mp.name)}",\n'
            f'{inner}"attributes_" : "{", ".join(attributes)}",\n'
            f'{inner}"type_" : "{self.type_name(param_type)}"\n'
            f"{prefix}}}"
        )

    def type_name(self, meta_type: MetaType) -> str:
        """Return the source-level spelling of ``meta_type``."""
        mc = self.component
        kind = meta_type.kind
        if kind in _PRIMITIVE_NAMES:
            return _PRIMITIVE_NAMES[kind]
        if kind == TypeKind.SEQUENCEABLE:
            return _text(_lookup(mc.sequenceables, meta_type.index, "sequenceable").name)
        if kind == TypeKind.INTERFACE:
            return _text(_lookup(mc.interfaces, meta_type.index, "interface").name)
        if kind in (TypeKind.LIST, TypeKind.MAP, TypeKind.ARRAY):
            needed = 2 if kind == TypeKind.MAP else 1
            if len(meta_type.nested_type_indexes) < needed:
                raise MetadataError(f"{kind.name} type lacks nested type indexes")
            nested = [
                self.type_name(_lookup(mc.types, i, "type"))
                for i in meta_type.nested_type_indexes[:needed]
            ]
            if kind == TypeKind.LIST:
                return f"List<{nested[0]}>"
            if kind == TypeKind.MAP:
                return f"Map<{nested[0]}, {nested[1]}>"
            return f"{nested[0]}[]"
        return "unknown"
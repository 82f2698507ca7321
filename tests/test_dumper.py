import json

import pytest

from idlmeta.dumper import MetadataDumper
from idlmeta.model import (
    ATTR_IN,
    ATTR_OUT,
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


def _component():
    types = [
        MetaType(kind=TypeKind.VOID),
        MetaType(kind=TypeKind.INTEGER),
        MetaType(kind=TypeKind.LIST, nested_type_indexes=[1]),
        MetaType(kind=TypeKind.STRING),
        MetaType(kind=TypeKind.MAP, nested_type_indexes=[3, 1]),
        MetaType(kind=TypeKind.ARRAY, nested_type_indexes=[1]),
        MetaType(kind=TypeKind.SEQUENCEABLE, index=0),
        MetaType(kind=TypeKind.INTERFACE, index=0),
    ]
    method = MetaMethod(
        name="Send",
        signature="(I)V",
        properties=METHOD_PROPERTY_ONEWAY,
        return_type_index=0,
        parameters=[
            MetaParameter(name="items", attributes=ATTR_IN | ATTR_OUT, type_index=2),
            MetaParameter(name="count", attributes=ATTR_IN, type_index=1),
        ],
    )
    interface = MetaInterface(
        license="lic",
        name="IDemo",
        namespace="demo.ns",
        properties=INTERFACE_PROPERTY_ONEWAY,
        methods=[method],
        external=True,
    )
    namespace = MetaNamespace(
        name="demo",
        sequenceable_indexes=[0],
        interface_indexes=[0],
        namespaces=[MetaNamespace(name="inner")],
    )
    return MetaComponent(
        name="demo_module",
        namespaces=[namespace],
        sequenceables=[MetaSequenceable(name="Parcel", namespace="demo.ns")],
        interfaces=[interface],
        types=types,
        size=512,
        string_pool_size=64,
    )


def _parse(text):
    header, body = text.split("\n", 1)
    assert header.strip() == "MetaComponent"
    return json.loads(body)


def test_dump_is_structured_and_matches_component():
    component = _component()
    parsed = _parse(MetadataDumper(component).dump())
    assert parsed["magic_"] == hex(METADATA_MAGIC_NUMBER)
    assert parsed["size_"] == str(component.size)
    assert parsed["name_"] == component.name
    assert parsed["typeNumber_"] == str(len(component.types))
    assert parsed["stringPoolSize_"] == str(component.string_pool_size)


def test_dump_namespaces_resolve_indexes_to_names():
    parsed = _parse(MetadataDumper(_component()).dump())
    namespace = parsed["namespaces_"][0]
    assert namespace["name_"] == "demo"
    assert namespace["sequenceableIndexes_"] == [{"name": "Parcel"}]
    assert namespace["interfaceIndexes_"] == [{"name": "IDemo"}]
    assert namespace["namespaces_"][0]["name_"] == "inner"
    assert namespace["namespaces_"][0]["namespaces_"] == []


def test_dump_interface_method_and_parameters():
    parsed = _parse(MetadataDumper(_component()).dump())
    interface = parsed["interfaces_"][0]
    assert interface["properties_"] == "oneway"
    assert interface["external_"] == "1"
    assert "license" not in json.dumps(interface)
    method = interface["methods_"][0]
    assert method["returnType_"] == "void"
    assert method["parameterNumber_"] == "2"
    items, count = method["parameters_"]
    assert items["attributes_"].split(", ") == ["in", "out"]
    assert items["type_"] == "List<int>"
    assert count["attributes_"] == "in"
    assert count["type_"] == "int"


def test_dump_empty_component_uses_empty_lists():
    text = MetadataDumper(MetaComponent(name="empty")).dump()
    assert '"namespaces_" : [],\n' in text
    assert '"sequenceables_" : [],\n' in text
    assert '"interfaces_" : [],\n' in text
    parsed = _parse(text)
    assert parsed["name_"] == "empty"


def test_dump_prefix_applies_to_every_line():
    prefix = ">>"
    text = MetadataDumper(_component()).dump(prefix)
    lines = text.splitlines()
    assert lines[0] == prefix + "MetaComponent"
    assert all(line.startswith(prefix) for line in lines)
    assert text.endswith(prefix + "}\n")


def test_null_name_is_rendered_as_null_marker():
    text = MetadataDumper(MetaComponent()).dump()
    assert _parse(text)["name_"] == "(null)"


@pytest.mark.parametrize(
    "kind, expected",
    [
        (TypeKind.CHAR, "char"),
        (TypeKind.BOOLEAN, "boolean"),
        (TypeKind.BYTE, "byte"),
        (TypeKind.SHORT, "short"),
        (TypeKind.INTEGER, "int"),
        (TypeKind.LONG, "long"),
        (TypeKind.FLOAT, "float"),
        (TypeKind.DOUBLE, "double"),
        (TypeKind.STRING, "String"),
        (TypeKind.VOID, "void"),
        (TypeKind.UNKNOWN, "unknown"),
    ],
)
def test_type_name_of_simple_kinds(kind, expected):
    dumper = MetadataDumper(MetaComponent())
    assert dumper.type_name(MetaType(kind=kind)) == expected


def test_type_name_of_composite_kinds():
    component = _component()
    dumper = MetadataDumper(component)
    assert dumper.type_name(component.types[4]) == "Map<String, int>"
    assert dumper.type_name(component.types[5]) == "int[]"
    assert dumper.type_name(component.types[6]) == "Parcel"
    assert dumper.type_name(component.types[7]) == "IDemo"


def test_type_name_with_bad_index_raises():
    dumper = MetadataDumper(MetaComponent(types=[MetaType(kind=TypeKind.INTEGER)]))
    with pytest.raises(MetadataError):
        dumper.type_name(MetaType(kind=TypeKind.LIST, nested_type_indexes=[5]))
    with pytest.raises(MetadataError):
        dumper.type_name(MetaType(kind=TypeKind.SEQUENCEABLE, index=0))
    with pytest.raises(MetadataError):
        dumper.type_name(MetaType(kind=TypeKind.MAP, nested_type_indexes=[0]))


def test_dump_with_dangling_return_type_raises():
    component = MetaComponent(
        interfaces=[MetaInterface(name="I", methods=[MetaMethod(name="f", return_type_index=3)])]
    )
    with pytest.raises(MetadataError):
        MetadataDumper(component).dump()
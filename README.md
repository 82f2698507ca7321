# idlmeta

`idlmeta` works with the compact binary metadata that describes an IDL
component: its namespaces, sequenceable types, interfaces, methods,
parameters and types. It can lay a component out as a binary image, read
such an image back from bytes or from a file, and render a component as a
readable, JSON-like text.

## Modules

| Module                | Contents                                                                |
|-----------------------|-------------------------------------------------------------------------|
| `idlmeta.model`       | `MetaComponent`, `MetaNamespace`, `MetaSequenceable`, `MetaInterface`, `MetaMethod`, `MetaParameter`, `MetaType`, the `TypeKind` enum and `MetadataError` |
| `idlmeta.builder`     | `MetadataBuilder` and `build_metadata()`                                |
| `idlmeta.reader`      | `read_metadata()` and `read_metadata_file()`                            |
| `idlmeta.dumper`      | `MetadataDumper`                                                        |
| `idlmeta.string_pool` | `StringPool`, a deduplicated table of NUL-terminated strings            |
| `idlmeta.options`     | `parse_options()` and `Options`, the idl tool's command-line options   |
| `idlmeta.sourcefile`  | `SourceFile`, a character reader that tracks line and column           |
| `idlmeta.logger`      | `Logger` and `LogLevel`, tagged messages filtered by level             |

## The model

Components are plain dataclasses. Cross references are indexes:
`MetaNamespace.sequenceable_indexes` and `interface_indexes` point into the
component's `sequenceables` and `interfaces`, `MetaMethod.return_type_index`
and `MetaParameter.type_index` point into `types`, and a `MetaType` of kind
`LIST`, `MAP` or `ARRAY` lists its element (or key and value) types in
`nested_type_indexes`. `MetaParameter.is_in()` / `is_out()` and
`is_oneway()` on methods and interfaces read the flag bits.

```python
from idlmeta.model import (
    MetaComponent, MetaInterface, MetaMethod, MetaParameter, MetaType,
    TypeKind, ATTR_IN,
)

component = MetaComponent(
    name="demo",
    interfaces=[MetaInterface(
        name="IFoo", namespace="ohos.demo",
        methods=[MetaMethod(
            name="Add", signature="(I)I", return_type_index=0,
            parameters=[MetaParameter(name="value", attributes=ATTR_IN, type_index=0)],
        )],
    )],
    types=[MetaType(kind=TypeKind.INTEGER)],
)
```

## Building an image

```python
from idlmeta.builder import MetadataBuilder, build_metadata

image = build_metadata(component)
print(MetadataBuilder(component).calculate_size() == len(image))  # True
```

The image uses a 64-bit little-endian layout in which every pointer is a
byte offset from the start of the image and 0 stands for a null pointer.
The component header comes first, then the structures, and all strings are
stored once in a string pool at the end. Empty and missing strings are both
written as null pointers.

`build()` raises `MetadataError` when the component has no name or when an
index points outside the table it refers to.

## Reading an image

```python
from idlmeta.reader import read_metadata, read_metadata_file

again = read_metadata(image)
print(again.interfaces[0].methods[0].name)   # Add
print(again.size == len(image))               # True

component = read_metadata_file("service.metadata")
```

The reader fills in `magic`, `size` and `string_pool_size` from the image
header, and gives back empty strings as `None`. Data that is shorter than a
header, does not carry the magic number `0x1DF02ED1`, declares a negative
size or a size larger than the data, or whose offsets lead outside the
image, is rejected with `MetadataError`.

## Dumping

```python
from idlmeta.dumper import MetadataDumper

dumper = MetadataDumper(component)
print(dumper.dump(""), end="")
print(dumper.type_name(component.types[0]))   # int
```

`dump(prefix)` returns the text, each line starting with `prefix`. Missing
names are shown as `(null)`. `type_name()` gives the IDL spelling of a type,
such as `int`, `String`, `List<int>`, `Map<String, long>` or `byte[]`, and
the name of the sequenceable or interface a type refers to. An index that
points outside its table raises `MetadataError`.

## The string pool

```python
from idlmeta.string_pool import StringPool

pool = StringPool()
pool.add("IFoo")
pool.add("ohos.demo")
pool.add("IFoo")             # already present, not stored again
pool.add("")                 # empty strings are never stored

print(len(pool))              # 15: bytes used, terminators included
print(pool.offset("ohos.demo"))  # 5
print("IFoo" in pool)         # True
print(pool.data())            # b'IFoo\x00ohos.demo\x00'
```

`offset()` returns 0 for a string that was never added.

## Command-line options

```python
import sys
from idlmeta.options import parse_options

options = parse_options(["idl", "-c", "-dump-metadata", "-s", "out.metadata", "demo.idl"])
if options.has_errors():
    options.show_errors(sys.stdout)
```

The first element of the list is the program name; with no argument,
`parse_options()` reads `sys.argv`. The recognised options are `--help`,
`--version`, `-c`, `-dump-ast`, `-dump-metadata`, `-s <file>`, `-gen-cpp`,
`-gen-ts` and `-d <directory>`; they set the `do_*` flags and the
`metadata_file`, `target_language` and `generation_directory` fields. An
argument that does not start with `-` becomes `source_file`. Anything else
is listed by `illegal_options()` and reported by `show_errors()`;
`has_errors()` is also true when no source file was given. `show_usage()`
prints the help text and `show_version()` prints `idl 0.1`.

## Reading source text

```python
from idlmeta.sourcefile import SourceFile

with SourceFile("demo.idl") as source:
    while not source.is_eof():
        ch = source.get_char()
    print(source.line(), source.column())
```

`peek_char()` looks at the next character without consuming it; at end of
file both `peek_char()` and `get_char()` return `""`.

## Logging

```python
from idlmeta.logger import Logger, LogLevel

log = Logger(LogLevel.DEBUG)
log.debug("Builder", "writing metadata")   # [Builder]: writing metadata  (stdout)
log.error("Reader", "bad metadata")        # written to stderr
log.verbose("Builder", "hidden")           # below the level, not written
```

## What the package does not do

There is no IDL parser and no code generator here, and no `idl` command:
the options above can be parsed and shown, but nothing in the package
compiles an `.idl` file or writes C++ or TypeScript code. Metadata
components are built by hand from the model classes or read from an
existing image.
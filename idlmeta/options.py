"""Command-line options of the idl tool."""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from typing import Sequence, TextIO

VERSION_MAJOR = 0
VERSION_MINOR = 1

USAGE = (
    "Compile a .idl file and generate metadata, or generate C++ and Ts codes from metadata.\n"
    "Usage: idl [options] file\n"
    "Options:\n"
    "  --help            Display command line options\n"
    "  --version         Display toolchain version information\n"
    "  -dump-ast         Display the AST of the compiled file\n"
    "  -dump-metadata    Display the metadata generated from the compiled file\n"
    "  -c                Compile the .idl file\n"
    "  -s <file>         Place the metadata into <file>\n"
    "  -gen-cpp          Generate C++ codes\n"
    "  -gen-ts           Generate Ts codes\n"
    "  -d <directory>    Place generated codes into <directory>\n"
)


@dataclass
class Options:
    """Parsed command-line settings."""

    program: str = ""
    source_file: str | None = None
    metadata_file: str | None = None
    target_language: str | None = None
    generation_directory: str | None = None
    do_show_usage: bool = False
    do_show_version: bool = False
    do_compile: bool = False
    do_dump_ast: bool = False
    do_dump_metadata: bool = False
    do_save_metadata: bool = False
    do_generate_code: bool = False
    _illegal: list[str] = field(default_factory=list, repr=False)

    def illegal_options(self) -> list[str]:
        """Return the unrecognised options in the order they appeared."""
        return list(self._illegal)

    def has_errors(self) -> bool:
        return bool(self._illegal) or not self.source_file

    def show_errors(self, out: TextIO | None = None) -> None:
        out = out if out is not None else sys.stdout
        for option in self._illegal:
            out.write(f'The Option "{option}" is illegal.\n')
        out.write('Use "--help" to show usage.\n')

    def show_version(self, out: TextIO | None = None) -> None:
        out = out if out is not None else sys.stdout
        out.write(f"idl {VERSION_MAJOR}.{VERSION_MINOR}\n\n")

    def show_usage(self, out: TextIO | None = None) -> None:
        out = out if out is not None else sys.stdout
        out.write(USAGE)


def parse_options(argv: Sequence[str] | None = None) -> Options:
    """Parse ``argv`` (program name first) into an :class:`Options`."""
    args = list(sys.argv if argv is None else argv)
    options = Options(program=args[0] if args else "")
    rest = iter(args[1:])
    for option in rest:
        if option == "--help":
            options.do_show_usage = True
        elif option == "--version":
            options.do_show_version = True
        elif option == "-c":
            options.do_compile = True
        elif option == "-dump-ast":
            options.do_dump_ast = True
        elif option == "-dump-metadata":
            options.do_dump_metadata = True
        elif option == "-s":
            options.do_save_metadata = True
            options.metadata_file = next(rest, None)
        elif option == "-gen-cpp":
            options.do_generate_code = True
            options.target_language = "cpp"
        elif option == "-gen-ts":
            options.do_generate_code = True
            options.target_language = "ts"
        elif option == "-d":
            options.generation_directory = next(rest, None)
        elif not option.startswith("-"):
            options.source_file = option
        else:
            options._illegal.append(option)
    return options
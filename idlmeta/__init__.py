"""Model, build, read and dump the binary metadata of IDL components."""

__version__ = "0.1.0"
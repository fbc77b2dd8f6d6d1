from .compiler import (
    CompiledItem,
    Compiler,
    Descriptor,
    compile_file,
    compile_lines,
    compile_text,
)
from .errors import (
    ArgumentError,
    CompileError,
    EncodingError,
    MissingContextError,
    RdsSyntaxError,
    StructuralError,
    TableError,
    UndefinedSymbolError,
    UnknownFunctionError,
)
from .tables import LookupTables, load_tables

__all__ = [
    "ArgumentError",
    "CompileError",
    "CompiledItem",
    "Compiler",
    "Descriptor",
    "EncodingError",
    "LookupTables",
    "MissingContextError",
    "RdsSyntaxError",
    "StructuralError",
    "TableError",
    "UndefinedSymbolError",
    "UnknownFunctionError",
    "compile_file",
    "compile_lines",
    "compile_text",
    "load_tables",
]

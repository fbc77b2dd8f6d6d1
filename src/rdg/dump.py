import sys
from typing import IO, Literal

from .compiler import CompiledItem, Descriptor

DumpFormat = Literal["default", "kernel"]
DUMP_FORMATS: tuple[DumpFormat, ...] = ("default", "kernel")


def _raw_values(item: CompiledItem) -> str:
    """The raw values as comma-separated hex numbers"""
    return " ".join(f"0x{b:02x}," for b in item.bytes)


def get_human_descr(item: CompiledItem, indent: int) -> tuple[str, int]:
    """
    Return a human-readable description of this item and the indentation
    of the next one, e.g. ``Usage Page (generic_desktop)``.

    :param int indent: The indentation to prefix
    """
    descr = item.item.title
    if item.args:
        descr += f" ({', '.join(item.args)})"

    eff_indent = indent
    match item.item.name:
        case "collection":
            indent += 1
        case "end_collection":
            indent = max(indent - 1, 0)
            eff_indent = indent
    return " " * eff_indent + descr, indent


def dump_rdesc_array(item: CompiledItem, offset: int, indent: int, f: IO) -> int:
    """
    Format the item in hexadecimal format with a double-slash comment, e.g. ::

       0x05, 0x01,        // 000: Usage Page (generic_desktop)
    """
    descr, indent = get_human_descr(item, indent)
    f.write(f"{_raw_values(item):18s} // {offset:03x}: {descr}\n")
    return indent


def dump_rdesc_kernel(item: CompiledItem, offset: int, indent: int, f: IO) -> int:
    """
    Format the item in C format, e.g. ::

        0x05, 0x01,                    /* Usage Page (generic_desktop)      */
    """
    line = _raw_values(item)
    line += "\t" * (int((40 - len(line)) / 8))

    descr, indent = get_human_descr(item, indent)
    descr += "\t" * (int((52 - len(descr)) / 8))
    f.write(f"\t{line}/* {descr}*/\n")
    return indent


def dump(desc: Descriptor, f: IO = sys.stdout, fmt: DumpFormat = "default") -> None:
    """
    Write the compiled report descriptor as a listing.

    The "default" format prints each item as hexadecimal with its offset
    and source in a comment. The "kernel" format prints valid C, for easy
    copy-paste into a kernel or C source file.
    """
    assert fmt in DUMP_FORMATS, f"Invalid dump format '{fmt}'."

    indent = 0
    offset = 0
    for item in desc.items:
        if fmt == "default":
            indent = dump_rdesc_array(item, offset, indent, f)
        else:
            indent = dump_rdesc_kernel(item, offset, indent, f)
        offset += len(item.bytes)

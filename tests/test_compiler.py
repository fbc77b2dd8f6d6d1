"""End-to-end tests of the compiler driver."""

import pytest

from rdg.compiler import Compiler, compile_lines, compile_text
from rdg.errors import (
    ArgumentError,
    CompileError,
    MissingContextError,
    RdsSyntaxError,
    StructuralError,
    UndefinedSymbolError,
    UnknownFunctionError,
)
from rdg.parser import parse_line

MOUSE_SRC = """\
Usage_Page(Generic_Desktop)
Usage(Mouse)
Collection(Application)
End_Collection()
"""

BOOT_KEYBOARD_SRC = """\
# Boot protocol keyboard, HID 1.11 appendix B.1
Usage_Page(Generic_Desktop)
Usage(Keyboard)
Collection(Application)
    ; modifier byte
    Usage_Page(Keyboard)
    Usage_Minimum(Keyboard_LeftControl)
    Usage_Maximum(Keyboard_Right_GUI)
    Logical_Minimum(0)
    Logical_Maximum(1)
    Report_Size(1)
    Report_Count(8)
    Input(Data, Variable, Absolute)

    ; reserved byte
    Report_Count(1)
    Report_Size(8)
    Input(Constant)

    ; LEDs
    Report_Count(5)
    Report_Size(1)
    Usage_Page(LED)
    Usage_Minimum(Num_Lock)
    Usage_Maximum(Kana)
    Output(Data, Variable, Absolute)
    Report_Count(1)
    Report_Size(3)
    Output(Constant)

    ; key codes
    Report_Count(6)
    Report_Size(8)
    Logical_Minimum(0)
    Logical_Maximum(101)
    Usage_Page(Keypad)
    Usage_Minimum(0)
    Usage_Maximum(Keyboard_Application)
    Input(Data, Array)
End_Collection()
"""

BOOT_KEYBOARD_BIN = bytes(
    [
        0x05, 0x01, 0x09, 0x06, 0xA1, 0x01,
        0x05, 0x07, 0x19, 0xE0, 0x29, 0xE7, 0x15, 0x00, 0x25, 0x01,
        0x75, 0x01, 0x95, 0x08, 0x81, 0x02,
        0x95, 0x01, 0x75, 0x08, 0x81, 0x01,
        0x95, 0x05, 0x75, 0x01, 0x05, 0x08, 0x19, 0x01, 0x29, 0x05,
        0x91, 0x02, 0x95, 0x01, 0x75, 0x03, 0x91, 0x01,
        0x95, 0x06, 0x75, 0x08, 0x15, 0x00, 0x25, 0x65,
        0x05, 0x07, 0x19, 0x00, 0x29, 0x65, 0x81, 0x00,
        0xC0,
    ]
)  # fmt: skip


def test_mouse_scenario(tables):
    c = Compiler(tables)
    for i, text in enumerate(MOUSE_SRC.splitlines(), start=1):
        c.feed(parse_line(text, i))
    desc = c.finish()

    assert [i.item.name for i in desc.items] == [
        "usage_page",
        "usage",
        "collection",
        "end_collection",
    ]
    assert desc.data == bytes([0x05, 0x01, 0x09, 0x02, 0xA1, 0x01, 0xC0])
    assert c.ctx.depth == 0
    assert c.state == "done"


def test_boot_keyboard(compile_src):
    assert compile_src(BOOT_KEYBOARD_SRC) == BOOT_KEYBOARD_BIN


def test_deterministic(tables):
    a = compile_text(BOOT_KEYBOARD_SRC, tables)
    b = compile_text(BOOT_KEYBOARD_SRC, tables)
    assert a.data == b.data
    assert a.size == len(BOOT_KEYBOARD_BIN)


def test_comments_and_blanks_only(compile_src):
    assert compile_src("# nothing\n\n   ; here\n") == b""


def test_case_insensitive(compile_src):
    assert compile_src("USAGE_PAGE(generic_DESKTOP)\nreport_SIZE( 8 )") == bytes(
        [0x05, 0x01, 0x75, 0x08]
    )


def test_multi_byte_values(compile_src):
    src = """\
    Logical_Minimum(-200)
    Logical_Maximum(1000)
    Physical_Maximum(0x10000)
    Report_ID(3)
    """
    assert compile_src(src) == bytes(
        [0x16, 0xC8, 0x80, 0x26, 0xE8, 0x03, 0x47, 0x00, 0x00, 0x01, 0x00, 0x85, 0x03]
    )


def test_byte_wide_logical_maximum(compile_src):
    assert compile_src("Logical_Minimum(0)\nLogical_Maximum(255)") == bytes(
        [0x15, 0x00, 0x26, 0xFF, 0x00]
    )
    assert compile_src("Usage_Page(Button)\nUsage_Maximum(255)\nReport_Count(255)") == bytes(
        [0x05, 0x09, 0x29, 0xFF, 0x95, 0xFF]
    )


def test_nested_collections(tables):
    src = """\
    Usage_Page(Generic_Desktop)
    Usage(Mouse)
    Collection(Application)
        Usage(Pointer)
        Collection(Physical)
            Usage_Page(Button)
            Usage_Minimum(1)
            Usage_Maximum(3)
            Input(Data, Variable, Absolute)
            Usage_Page(Generic_Desktop)
            Usage(X)
            Usage(Y)
            Logical_Minimum(-127)
            Logical_Maximum(127)
            Input(Data, Variable, Relative)
        End_Collection()
    End_Collection()
    """
    desc = compile_text(src, tables)
    assert desc.data[:4] == bytes([0x05, 0x01, 0x09, 0x02])
    assert desc.data[-2:] == bytes([0xC0, 0xC0])
    assert bytes([0x15, 0xFF, 0x25, 0x7F, 0x81, 0x06]) in desc.data


def test_usage_page_persists_across_collections(compile_src):
    src = """\
    Usage_Page(Generic_Desktop)
    Collection(Application)
    Collection(Physical)
    Usage(X)
    End_Collection()
    Usage(Y)
    End_Collection()
    """
    assert bytes([0x09, 0x30]) in compile_src(src)
    assert bytes([0x09, 0x31]) in compile_src(src)


def test_unterminated_collection(tables):
    with pytest.raises(StructuralError, match="extra context stack detected"):
        compile_text("Collection(Application)", tables)


@pytest.mark.parametrize(
    "tail",
    [
        "",
        "Usage_Page(Generic_Desktop)\nUsage(Mouse)",
        "Collection(Physical)\nEnd_Collection()",
        "Report_Size(8)\nInput(Constant)",
    ],
)
def test_unterminated_regardless_of_tail(tables, tail):
    with pytest.raises(StructuralError):
        compile_text("Collection(Application)\n" + tail, tables)


def test_end_collection_without_collection(tables):
    with pytest.raises(StructuralError) as e:
        compile_text("Usage_Page(Generic_Desktop)\nEnd_Collection()", tables)
    assert e.value.line_number == 2


@pytest.mark.parametrize("name", ["Usage", "Usage_Minimum", "Usage_Maximum"])
def test_usage_before_page(tables, name):
    with pytest.raises(MissingContextError) as e:
        compile_text(f"Report_Size(8)\n{name}(1)", tables)
    assert e.value.line_number == 2
    assert e.value.line == f"{name}(1)"


def test_unknown_function(tables):
    with pytest.raises(UnknownFunctionError, match="unexpected function name 'frobnicate' at line 2"):
        compile_text("Usage_Page(LED)\nFrobnicate(1)", tables)


def test_item_without_handler(tables):
    with pytest.raises(UnknownFunctionError):
        compile_text("Unit(0x11)", tables)


def test_errors_carry_location(tables):
    src = "Usage_Page(Generic_Desktop)\n\n  Usage(Keyboard_A)\n"
    with pytest.raises(UndefinedSymbolError) as e:
        compile_text(src, tables)
    err = e.value
    assert err.line_number == 3
    assert err.line == "  Usage(Keyboard_A)"
    assert "usage()" in err.reason
    assert str(err).startswith("in line 3:")


@pytest.mark.parametrize(
    "src,exc",
    [
        ("Usage_Page Generic_Desktop", RdsSyntaxError),
        ("Logical_Minimum(abc)", ArgumentError),
        ("Report_Count(1, 2)", ArgumentError),
        ("Logical_Maximum(0x100000000)", ArgumentError),
        ("Input(data, nope)", UndefinedSymbolError),
    ],
)
def test_error_kinds(tables, src, exc):
    with pytest.raises(exc):
        compile_text(src, tables)
    assert issubclass(exc, CompileError)


def test_failed_compiler_rejects_more_lines(tables):
    c = Compiler(tables)
    with pytest.raises(UnknownFunctionError):
        c.feed(parse_line("Nope()", 1))
    assert c.state == "failed"
    with pytest.raises(RuntimeError):
        c.feed(parse_line("End_Collection()", 2))
    with pytest.raises(RuntimeError):
        c.finish()


def test_independent_runs(tables):
    a = Compiler(tables)
    b = Compiler(tables)
    a.feed(parse_line("Usage_Page(LED)", 1))
    a.feed(parse_line("Collection(Application)", 2))
    assert b.ctx.current("usage_page") is None
    assert b.ctx.depth == 0
    assert b.finish().data == b""


def test_compile_lines_default_tables():
    assert compile_lines(["Report_Size(8)"]).data == bytes([0x75, 0x08])

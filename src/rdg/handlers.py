import enum
from typing import Any, Callable, Final, NamedTuple, Sequence

from .context import Context
from .errors import (
    ArgumentError,
    MissingContextError,
    UndefinedSymbolError,
)
from .tables import LookupTables
from .values import compose_flags, parse_int, parse_value, to_bytes


class Update(enum.Enum):
    """How the context changes after an item is emitted."""

    NONE = enum.auto()
    SET_GLOBAL = enum.auto()
    CLEAR_GLOBAL = enum.auto()
    PUSH = enum.auto()
    POP = enum.auto()


class Outcome(NamedTuple):
    payload: list[int]
    update: Update = Update.NONE
    value: Any = None


Handler = Callable[[Context, LookupTables, str, Sequence[str]], Outcome]


def _one_arg(name: str, args: Sequence[str]) -> str:
    if len(args) != 1:
        raise ArgumentError(
            f"function {name}() takes exactly one argument ({len(args)} given)"
        )
    return args[0]


def _undefined(name: str, arg: str):
    return UndefinedSymbolError(f"invalid argument '{arg}' in function {name}()")


def usage_page(ctx: Context, tables: LookupTables, name: str, args: Sequence[str]):
    page = _one_arg(name, args)
    b = parse_value(tables.usage_pages, page)
    if b is None:
        raise _undefined(name, page)
    # Keep the name so usage*() can pick the page's table
    return Outcome(b, Update.SET_GLOBAL, page)


def usage(ctx: Context, tables: LookupTables, name: str, args: Sequence[str]):
    """usage(), usage_minimum() and usage_maximum()"""
    arg = _one_arg(name, args)
    page = ctx.current("usage_page")
    if page is None:
        raise MissingContextError(f"missing usage_page() before {name}()")
    if page == "keypad":
        page = "keyboard"
    table = tables.usage_table(page)
    if table is None:
        raise MissingContextError(f"undefined usage table for page '{page}'")
    b = parse_value(table, arg)
    if b is None:
        raise _undefined(name, arg)
    return Outcome(b)


def number(ctx: Context, tables: LookupTables, name: str, args: Sequence[str]):
    """logical_minimum(), logical_maximum(), physical_minimum(), physical_maximum()"""
    arg = _one_arg(name, args)
    v = parse_int(arg)
    if v is None:
        raise ArgumentError(f"invalid numeric value '{arg}' in function {name}()")
    return Outcome(to_bytes(v))


def count(ctx: Context, tables: LookupTables, name: str, args: Sequence[str]):
    """report_size(), report_count()"""
    arg = _one_arg(name, args)
    v = parse_int(arg)
    if v is None or v < 0:
        raise ArgumentError(f"invalid numeric value '{arg}' in function {name}()")
    return Outcome(to_bytes(v, signed=False))


def report_id(ctx: Context, tables: LookupTables, name: str, args: Sequence[str]):
    arg = _one_arg(name, args)
    v = parse_int(arg)
    if v is None or not 1 <= v <= 0xFF:
        raise ArgumentError(f"report id must be between 1 and 255, not '{arg}'")
    return Outcome([v])


def iof(ctx: Context, tables: LookupTables, name: str, args: Sequence[str]):
    """input(), output(), feature()"""
    v = compose_flags(tables.flags, args)
    if v is None:
        bad = [a for a in args if a not in tables.flags]
        raise UndefinedSymbolError(
            f"invalid argument '{bad[0]}' in function {name}()"
        )
    return Outcome(to_bytes(v, signed=False))


def collection(ctx: Context, tables: LookupTables, name: str, args: Sequence[str]):
    kind = _one_arg(name, args)
    b = parse_value(tables.collections, kind)
    if b is None:
        raise _undefined(name, kind)
    return Outcome(b, Update.PUSH, kind)


def end_collection(
    ctx: Context, tables: LookupTables, name: str, args: Sequence[str]
):
    if args:
        raise ArgumentError(f"function {name}() takes no arguments")
    return Outcome([], Update.POP)


HANDLERS: Final[dict[str, Handler]] = {
    "usage_page": usage_page,
    "usage": usage,
    "usage_minimum": usage,
    "usage_maximum": usage,
    "logical_minimum": number,
    "logical_maximum": number,
    "physical_minimum": number,
    "physical_maximum": number,
    "report_size": count,
    "report_count": count,
    "report_id": report_id,
    "input": iof,
    "output": iof,
    "feature": iof,
    "collection": collection,
    "end_collection": end_collection,
}


def get_handler(name: str) -> Handler | None:
    return HANDLERS.get(name)

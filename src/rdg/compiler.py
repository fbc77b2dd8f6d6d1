import logging
from typing import IO, Iterable, NamedTuple

from .context import Context
from .errors import CompileError, UnknownFunctionError
from .handlers import Outcome, Update, get_handler
from .items import ITEMS, ItemDescriptor, ItemType, encode_item
from .parser import Line, parse_lines
from .tables import LookupTables, load_tables

logger = logging.getLogger(__name__)


class CompiledItem(NamedTuple):
    item: ItemDescriptor
    payload: list[int]
    args: tuple[str, ...]
    line_number: int

    @property
    def bytes(self) -> bytes:
        return encode_item(self.item, self.payload)


class Descriptor(NamedTuple):
    """A compiled report descriptor."""

    items: list[CompiledItem]
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


class Compiler:
    """
    Single pass compiler from report descriptor source lines to bytes.

    Each instance owns its context and output, so a compiler compiles
    exactly one source. Use :func:`compile_lines` for the common case.
    """

    def __init__(self, tables: LookupTables) -> None:
        self.tables = tables
        self.ctx = Context()
        self.items: list[CompiledItem] = []
        self.out = bytearray()
        self.state = "scanning"

    def feed(self, line: Line) -> None:
        if self.state != "scanning":
            raise RuntimeError(f"Compiler is {self.state}, it can not take more lines.")
        if line.call is None:
            return

        name, args = line.call
        handler = get_handler(name)
        item = ITEMS.get(name)
        if handler is None or item is None:
            self.state = "failed"
            raise UnknownFunctionError(
                f"unexpected function name '{name}' at line {line.number}",
                line.number,
                line.text,
            )

        try:
            res = handler(self.ctx, self.tables, name, args)
            data = encode_item(item, res.payload)
            self._apply(item, res)
        except CompileError as e:
            self.state = "failed"
            raise e.at(line.number, line.text)

        logger.debug(f"{line.number:4d}: {data.hex(' ')}  {item.title} ({', '.join(args)})")
        self.out.extend(data)
        self.items.append(CompiledItem(item, res.payload, args, line.number))

    def _apply(self, item: ItemDescriptor, res: Outcome) -> None:
        match res.update:
            case Update.NONE:
                pass
            case Update.SET_GLOBAL:
                self.ctx.set_global(item.name, res.value)
            case Update.CLEAR_GLOBAL:
                self.ctx.set_global(item.name, None)
            case Update.PUSH:
                self.ctx.push_scope()
            case Update.POP:
                self.ctx.pop_scope()

        if item.type != ItemType.GLOBAL and res.value is not None:
            self.ctx.record_local(item.name, res.value)

    def finish(self) -> Descriptor:
        if self.state != "scanning":
            raise RuntimeError(f"Compiler is {self.state}, it can not finish.")
        try:
            self.ctx.check_closed()
        except CompileError:
            self.state = "failed"
            raise
        self.state = "done"
        return Descriptor(self.items, bytes(self.out))


def compile_lines(
    lines: Iterable[str], tables: LookupTables | None = None
) -> Descriptor:
    """Compiles report descriptor source lines.

    Raises a :class:`CompileError` on the first error, no partial output
    is returned.
    """
    if tables is None:
        tables = load_tables()
    c = Compiler(tables)
    for line in parse_lines(lines):
        c.feed(line)
    desc = c.finish()
    logger.info(f"Compiled {len(desc.items)} items into {desc.size} bytes.")
    return desc


def compile_text(text: str, tables: LookupTables | None = None) -> Descriptor:
    return compile_lines(text.splitlines(), tables)


def compile_file(f: IO[str], tables: LookupTables | None = None) -> Descriptor:
    return compile_lines(f, tables)


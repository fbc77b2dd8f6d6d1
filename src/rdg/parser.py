import re
from typing import Iterable, Iterator, Literal, NamedTuple

from .errors import RdsSyntaxError

LineKind = Literal["comment", "blank", "call"]

COMMENT_RE = re.compile(r"^\s*[#;]")
BLANK_RE = re.compile(r"^\s*$")
CALL_RE = re.compile(r"^\s*(?P<name>[A-Za-z0-9_]+)\s*\((?P<args>.*)\)\s*$")


class Call(NamedTuple):
    name: str
    args: tuple[str, ...]


class Line(NamedTuple):
    number: int
    text: str
    kind: LineKind
    call: Call | None = None


def parse_args(args: str) -> tuple[str, ...]:
    if not args.strip():
        return ()
    out = []
    for a in args.split(","):
        a = a.strip().lower()
        if not a:
            raise RdsSyntaxError("empty argument")
        out.append(a)
    return tuple(out)


def parse_line(text: str, number: int = 0) -> Line:
    """
    Classifies a line of report descriptor source, e.g.::

        # comment
        Usage_Page(Generic_Desktop)
        Input(Data, Variable, Absolute)

    Names and arguments are lower-cased and stripped of whitespace.
    """
    text = text.rstrip("\r\n")
    if COMMENT_RE.match(text):
        return Line(number, text, "comment")
    if BLANK_RE.match(text):
        return Line(number, text, "blank")

    m = CALL_RE.match(text)
    if not m:
        raise RdsSyntaxError("syntax error, expected 'function(arguments)'").at(
            number, text
        )
    try:
        args = parse_args(m.group("args"))
    except RdsSyntaxError as e:
        raise e.at(number, text)
    return Line(number, text, "call", Call(m.group("name").lower(), args))


def parse_lines(lines: Iterable[str]) -> Iterator[Line]:
    for i, text in enumerate(lines, start=1):
        yield parse_line(text, i)

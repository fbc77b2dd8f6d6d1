"""
Symbolic lookup tables used by the compiler.

Enumerations are stored as yaml lists of directives, e.g. ::

    - start: 0x01
    - pointer
    - mouse
    - skip: 1
    - joystick
    - alias: stick

and interpreted once into plain read-only mappings by :func:`build_enum`.
Flag tables are plain yaml mappings of flag name to bit value.
"""

import logging
import os
from types import MappingProxyType
from typing import Any, Iterable, Mapping, NamedTuple, Sequence

from ..errors import TableError
from ..utils import get_relative_fn, load_yaml

logger = logging.getLogger(__name__)

DATA_DIR = get_relative_fn(".")
USAGES_DIRNAME = "usages"

USAGE_PAGES_FN = "usage_pages.yml"
COLLECTIONS_FN = "collections.yml"
FLAGS_FN = "flags.yml"


class Assign(NamedTuple):
    name: str


class Skip(NamedTuple):
    n: int = 1


class Alias(NamedTuple):
    name: str


class StartAt(NamedTuple):
    index: int


Directive = Assign | Skip | Alias | StartAt


def _index(k: str, v: Any) -> int:
    try:
        return int(v)
    except (TypeError, ValueError) as e:
        raise TableError(f"Invalid index for directive '{k}': {v!r}") from e


def parse_directive(raw: Any) -> Directive:
    """Converts one yaml list entry into a builder directive."""
    if isinstance(raw, str):
        return Assign(raw.strip().lower())
    if isinstance(raw, Mapping) and len(raw) == 1:
        ((k, v),) = raw.items()
        match k:
            case "skip":
                return Skip(1 if v is None else _index(k, v))
            case "alias":
                return Alias(str(v).strip().lower())
            case "start":
                return StartAt(_index(k, v))
    raise TableError(f"Invalid enum directive: {raw!r}")


def build_enum(directives: Iterable[Directive], start: int = 0) -> Mapping[str, int]:
    """Interprets a sequence of directives into a `name -> index` mapping.

    Plain names take the next index, `skip` leaves indices unassigned,
    `alias` repeats the value of the previous name and `start` jumps
    forward to a given index.
    """
    index = start
    last: int | None = None
    res: dict[str, int] = {}

    def _put(name: str, value: int):
        if name in res:
            raise TableError(f"Duplicate enum name '{name}' (0x{value:02x}).")
        res[name] = value

    for d in directives:
        match d:
            case Assign(name):
                _put(name, index)
                last = index
                index += 1
            case Skip(n):
                if n < 0:
                    raise TableError(f"Skip count must be positive, not {n}.")
                index += n
            case Alias(name):
                if last is None:
                    raise TableError(f"Alias '{name}' has no previous name.")
                _put(name, last)
            case StartAt(i):
                if i < index:
                    raise TableError(
                        f"Start index 0x{i:02x} is below the next index 0x{index:02x}."
                    )
                index = i
            case _:
                raise TableError(f"Invalid enum directive: {d!r}")

    return MappingProxyType(res)


def build_flags(raw: Any) -> Mapping[str, int]:
    if not isinstance(raw, Mapping):
        raise TableError(f"Flag table must be a mapping, not {type(raw).__name__}.")
    res = {}
    for k, v in raw.items():
        if not isinstance(v, int) or isinstance(v, bool) or v < 0:
            raise TableError(f"Invalid value for flag '{k}': {v!r}")
        res[str(k).strip().lower()] = v
    return MappingProxyType(res)


def _build(raw: Any, fn: str) -> Mapping[str, int]:
    if raw is None:
        return MappingProxyType({})
    if isinstance(raw, Mapping):
        return build_flags(raw)
    if isinstance(raw, Sequence) and not isinstance(raw, str):
        try:
            return build_enum(parse_directive(d) for d in raw)
        except TableError as e:
            raise TableError(f"In '{fn}': {e}") from e
    raise TableError(f"Table '{fn}' must be a list or a mapping.")


def _load(fn: str) -> Mapping[str, int]:
    try:
        raw = load_yaml(fn)
    except Exception as e:
        raise TableError(f"Could not load table '{fn}', error:\n{e}") from e
    return _build(raw, fn)


def _merge(base: Mapping[str, int] | None, extra: Mapping[str, int]):
    out = dict(base or {})
    out.update(extra)
    return MappingProxyType(out)


class LookupTables(NamedTuple):
    """The read-only set of tables the compiler queries by name."""

    usage_pages: Mapping[str, int]
    usages: Mapping[str, Mapping[str, int]]
    collections: Mapping[str, int]
    flags: Mapping[str, int]

    def usage_table(self, page: str) -> Mapping[str, int] | None:
        return self.usages.get(page)


def load_tables(extra_dirs: Sequence[str] = ()) -> LookupTables:
    """Loads the bundled tables, then layers each of `extra_dirs` on top.

    An extra directory may hold any of `usage_pages.yml`, `collections.yml`,
    `flags.yml` and `usages/<page>.yml`. Its entries are added to the
    same-named table, replacing existing names.
    """
    tables = {}
    usages = {}

    for d in [DATA_DIR, *extra_dirs]:
        if d != DATA_DIR:
            if not os.path.isdir(d):
                raise TableError(f"Table directory '{d}' does not exist.")
            logger.info(f"Loading extra tables from '{d}'.")

        for key, fn in (
            ("usage_pages", USAGE_PAGES_FN),
            ("collections", COLLECTIONS_FN),
            ("flags", FLAGS_FN),
        ):
            path = os.path.join(d, fn)
            if os.path.isfile(path):
                tables[key] = _merge(tables.get(key), _load(path))

        udir = os.path.join(d, USAGES_DIRNAME)
        if os.path.isdir(udir):
            for fn in sorted(os.listdir(udir)):
                if not fn.endswith(".yml"):
                    continue
                page = fn[: -len(".yml")].lower()
                usages[page] = _merge(usages.get(page), _load(os.path.join(udir, fn)))

    for key in ("usage_pages", "collections", "flags"):
        if key not in tables:
            raise TableError(f"Missing table '{key}'.")

    logger.debug(
        f"Loaded {len(tables['usage_pages'])} usage pages, usage tables for: {', '.join(usages)}"
    )
    return LookupTables(
        usage_pages=tables["usage_pages"],
        usages=MappingProxyType(usages),
        collections=tables["collections"],
        flags=tables["flags"],
    )


__all__ = [
    "Alias",
    "Assign",
    "Directive",
    "LookupTables",
    "Skip",
    "StartAt",
    "build_enum",
    "build_flags",
    "load_tables",
    "parse_directive",
]

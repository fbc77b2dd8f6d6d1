import argparse
import logging
import os
import sys

from .compiler import Descriptor, compile_file
from .dump import DUMP_FORMATS, dump
from .errors import CompileError, TableError
from .logging import setup_logger
from .tables import load_tables
from .utils import split_paths

logger = logging.getLogger(__name__)

TABLES_ENV = "RDG_TABLES"
SOURCE_SUFFIX = ".rds"
BINARY_SUFFIX = ".rdb"

EXIT_OK = 0
EXIT_ERROR = 2


def default_output(input_fn: str) -> str:
    if input_fn == "-":
        return "-"
    return input_fn + BINARY_SUFFIX


def write_output(desc: Descriptor, output_fn: str, fmt: str) -> None:
    if fmt == "binary":
        if output_fn == "-":
            sys.stdout.buffer.write(desc.data)
            sys.stdout.buffer.flush()
        else:
            with open(output_fn, "wb") as f:
                f.write(desc.data)
    else:
        if output_fn == "-":
            dump(desc, sys.stdout, fmt)  # type: ignore
            sys.stdout.flush()
        else:
            with open(output_fn, "w", encoding="utf-8") as f:
                dump(desc, f, fmt)  # type: ignore


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="rdg",
        description="A HID report descriptor generator. Compiles report descriptor source code ("
        + SOURCE_SUFFIX
        + ") into a report descriptor binary ("
        + BINARY_SUFFIX
        + ").",
    )
    parser.add_argument(
        "input",
        help="Read source code from this file, '-' to read from stdin.",
    )
    parser.add_argument(
        "-o",
        "--output",
        default=None,
        help="Write data to this file, '-' to write to stdout. Default: <input>"
        + BINARY_SUFFIX,
        dest="output",
    )
    parser.add_argument(
        "-f",
        "--format",
        default="binary",
        choices=["binary", *DUMP_FORMATS],
        help="Output format: the raw binary, or a listing in the hid-tools (`default`) or C (`kernel`) format.",
        dest="format",
    )
    parser.add_argument(
        "-t",
        "--tables",
        action="append",
        default=[],
        help=f"Extra lookup table directory, may be repeated. Also read from ${TABLES_ENV}.",
        dest="tables",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Print every compiled item.",
        dest="verbose",
    )
    parser.add_argument(
        "--log",
        default=None,
        help="Also write the log to this file.",
        dest="log",
    )
    args = parser.parse_args(argv)

    setup_logger(args.verbose, args.log)

    table_dirs = [*split_paths(os.environ.get(TABLES_ENV)), *args.tables]
    output_fn = args.output or default_output(args.input)

    try:
        tables = load_tables(table_dirs)
        if args.input == "-":
            desc = compile_file(sys.stdin, tables)
        else:
            with open(args.input, "r", encoding="utf-8") as f:
                desc = compile_file(f, tables)
    except CompileError as e:
        logger.error(f"Error: {e}")
        return EXIT_ERROR
    except TableError as e:
        logger.error(f"Could not load the lookup tables, error:\n{e}")
        return EXIT_ERROR
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Could not read input file '{args.input}', error:\n{e}")
        return EXIT_ERROR

    try:
        write_output(desc, output_fn, args.format)
    except OSError as e:
        logger.error(f"Cannot open output file '{output_fn}', error:\n{e}")
        return EXIT_ERROR

    logger.info("Success")
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())

class CompileError(Exception):
    """Exception thrown while compiling a report descriptor source

    .. attribute:: reason

        What went wrong, without location information

    .. attribute:: line_number

        The 1-based number of the offending source line, ``None`` until the
        compiler attaches it

    .. attribute:: line

        The raw text of the offending source line
    """

    kind = "error"

    def __init__(
        self: "CompileError",
        reason: str,
        line_number: int | None = None,
        line: str | None = None,
    ) -> None:
        super().__init__(reason)
        self.reason = reason
        self.line_number = line_number
        self.line = line

    def at(self: "CompileError", line_number: int, line: str) -> "CompileError":
        """Attaches the source location, keeping one set by an inner stage."""
        if self.line_number is None:
            self.line_number = line_number
            self.line = line
        return self

    def __str__(self: "CompileError") -> str:
        if self.line_number is None:
            return self.reason
        if self.line is None:
            return f"{self.reason} (line {self.line_number})"
        return f"in line {self.line_number}:\n  {self.line.strip()}\n{self.reason}"


class RdsSyntaxError(CompileError):
    """A non-blank, non-comment line that is not a function call"""

    kind = "syntax error"


class UnknownFunctionError(CompileError):
    """A call to a function with no registered handler"""

    kind = "unknown function"


class ArgumentError(CompileError):
    """Wrong argument count or a numeric argument that does not parse"""

    kind = "argument error"


class UndefinedSymbolError(CompileError):
    """A symbolic argument missing from its lookup table"""

    kind = "undefined symbol"


class MissingContextError(CompileError):
    """An item used before the item it depends on, e.g. usage before usage_page"""

    kind = "missing context"


class StructuralError(CompileError):
    """Unbalanced collections"""

    kind = "structural error"


class EncodingError(CompileError):
    """A payload the short item format cannot represent"""

    kind = "encoding error"


class TableError(Exception):
    """Exception thrown while building the lookup tables from their data files"""

    pass

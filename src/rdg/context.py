from typing import Any

from .errors import StructuralError


class Context:
    """
    Compilation state of a report descriptor source.

    HID report descriptors use a stack-based model: global items set values
    that apply to all subsequent items until changed, while every
    collection opens a new scope that ends with its End Collection.

    .. attribute:: g

        Global items, the last value set for each item name
        (e.g. ``{"usage_page": "keyboard"}``)

    .. attribute:: l

        Stack of local scopes, one per open collection
    """

    def __init__(self) -> None:
        self.g: dict[str, Any] = {}
        self.l: list[dict[str, Any]] = []

    def set_global(self, name: str, value: Any | None) -> None:
        if value is None:
            self.g.pop(name, None)
        else:
            self.g[name] = value

    def current(self, name: str) -> Any | None:
        return self.g.get(name)

    def push_scope(self) -> dict[str, Any]:
        frame = {}
        self.l.append(frame)
        return frame

    def pop_scope(self) -> dict[str, Any]:
        if not self.l:
            raise StructuralError("end_collection() without a matching collection()")
        return self.l.pop()

    def top(self) -> dict[str, Any]:
        if not self.l:
            raise StructuralError("no open collection")
        return self.l[-1]

    def record_local(self, name: str, value: Any) -> None:
        self.top()[name] = value

    @property
    def depth(self) -> int:
        return len(self.l)

    def check_closed(self) -> None:
        """Raises if any collection is still open."""
        if self.l:
            names = ", ".join(str(f.get("collection", "?")) for f in self.l)
            raise StructuralError(
                f"extra context stack detected: {len(self.l)} unterminated collection(s) ({names})"
            )

"""
Report descriptor items and their binary encoding.

Each item in the report descriptor is a header byte followed by 0, 1, 2 or
4 payload bytes, LSB first. The header byte looks like this

+---------+---+---+---+---+---+---+---+---+
| bit     | 7 | 6 | 5 | 4 | 3 | 2 | 1 | 0 |
+=========+===+===+===+===+===+===+===+===+
|         |      tag      |  type | size  |
+---------+---------------+-------+-------+

.. note:: a size of 0x3 means payload size 4

Long items (header ``0b11111110``, then a size byte and a tag byte) are not
supported.
"""

import enum
from typing import Final, NamedTuple, Sequence

from .errors import EncodingError


class ItemType(enum.IntEnum):
    MAIN = 0
    GLOBAL = 1
    LOCAL = 2
    RESERVED = 3


class ItemDescriptor(NamedTuple):
    name: str
    tag: int
    type: ItemType

    @property
    def title(self) -> str:
        """Human-readable name, e.g. "Usage Page"."""
        return " ".join(
            w.upper() if w == "id" else w.capitalize() for w in self.name.split("_")
        )


hid_items: Final = {
    ItemType.MAIN: {
        "input": 0b1000,
        "output": 0b1001,
        "feature": 0b1011,
        "collection": 0b1010,
        "end_collection": 0b1100,
    },
    ItemType.GLOBAL: {
        "usage_page": 0b0000,
        "logical_minimum": 0b0001,
        "logical_maximum": 0b0010,
        "physical_minimum": 0b0011,
        "physical_maximum": 0b0100,
        "unit_exponent": 0b0101,
        "unit": 0b0110,
        "report_size": 0b0111,
        "report_id": 0b1000,
        "report_count": 0b1001,
        "push": 0b1010,
        "pop": 0b1011,
    },
    ItemType.LOCAL: {
        "usage": 0b0000,
        "usage_minimum": 0b0001,
        "usage_maximum": 0b0010,
        "designator_index": 0b0011,
        "designator_minimum": 0b0100,
        "designator_maximum": 0b0101,
        "string_index": 0b0111,
        "string_minimum": 0b1000,
        "string_maximum": 0b1001,
        "delimiter": 0b1010,
    },
}

ITEMS: Final[dict[str, ItemDescriptor]] = {}  # e.g. "input" : ItemDescriptor
for type, items in hid_items.items():
    for k, v in items.items():
        ITEMS[k] = ItemDescriptor(k, v, type)

SIZE_CODES: Final = {0: 0b00, 1: 0b01, 2: 0b10, 4: 0b11}

LONG_ITEM_HEADER: Final = 0b11111110
MAX_SHORT_PAYLOAD: Final = 4


def header(item: ItemDescriptor, size: int) -> int:
    """Returns the short item header byte for a payload of `size` bytes."""
    code = SIZE_CODES.get(size)
    if code is None:
        if size > MAX_SHORT_PAYLOAD:
            encode_long_item(item, size)
        raise EncodingError(
            f"invalid payload size {size} for item '{item.name}', must be 0, 1, 2 or 4"
        )
    return ((item.tag & 0xF) << 4) | ((item.type & 0x3) << 2) | code


def encode_item(item: ItemDescriptor, payload: Sequence[int]) -> bytes:
    """Encodes one short item: the header byte followed by the payload."""
    for b in payload:
        if not 0 <= b <= 0xFF:
            raise EncodingError(f"payload value {b} of item '{item.name}' is not a byte")
    return bytes([header(item, len(payload)), *payload])


def encode_long_item(item: ItemDescriptor, size: int) -> bytes:
    raise EncodingError(
        f"payload of {size} bytes for item '{item.name}' needs a long item"
        f" (header 0x{LONG_ITEM_HEADER:02x}), which is not supported"
    )

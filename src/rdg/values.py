import re
from typing import Mapping, Sequence

from .errors import ArgumentError

NUMBER_RE = re.compile(r"^-?(0x[0-9a-f]+|[0-9]+)$", flags=re.IGNORECASE)

# Payload widths a short item can carry, in bits
WIDTHS = (8, 16, 32)


def parse_int(token: str) -> int | None:
    """Parses a decimal or `0x` hex literal with an optional leading `-`.

    Returns `None` if the token is not a numeric literal.
    """
    if not NUMBER_RE.match(token):
        return None
    neg = token.startswith("-")
    body = token[1:] if neg else token
    if body[:2].lower() == "0x":
        v = int(body[2:], 16)
    else:
        v = int(body, 10)
    return -v if neg else v


def to_sign_magnitude(val: int, bits: int = 8) -> int:
    """Encodes `val` with the magnitude in the low bits and the sign at `bits - 1`.

    :param int val:
        the value to encode

    :param int bits:
        size of the encoded value in bits
    """
    if val >= 0:
        if val >= 1 << bits:
            raise ArgumentError(f"value {val} does not fit in {bits} bits")
        return val
    mag = -val
    if mag >= 1 << (bits - 1):
        raise ArgumentError(f"value {val} does not fit in {bits} bits")
    return mag | (1 << (bits - 1))


def from_sign_magnitude(val: int, bits: int = 8) -> int:
    """Reverses :func:`to_sign_magnitude` for a value read as signed."""
    sign = 1 << (bits - 1)
    if val & sign:
        return -(val & (sign - 1))
    return val


def fit_width(val: int, signed: bool = True) -> int:
    """Returns the smallest payload width in bits able to hold `val`.

    Signed values keep the top bit for the sign, so 128 needs 16 bits.
    Unsigned values (usages, counts, flags) may use every bit.
    """
    for bits in WIDTHS:
        if val >= 0 and not signed and val < 1 << bits:
            return bits
        if abs(val) < 1 << (bits - 1):
            return bits
    raise ArgumentError(f"value {val} does not fit in {WIDTHS[-1]} bits")


def to_bytes(val: int, bits: int | None = None, signed: bool = True) -> list[int]:
    """Encodes `val` as little-endian payload bytes.

    Negative values use the sign-magnitude convention over `bits`, picking
    the smallest short item width when `bits` is not given.
    """
    if bits is None:
        bits = fit_width(val, signed)
    raw = to_sign_magnitude(val, bits)
    return list(raw.to_bytes((bits + 7) // 8, "little"))


def parse_value(
    table: Mapping[str, int] | None, token: str, bits: int | None = None
) -> list[int] | None:
    """Resolves a token to payload bytes.

    Numeric literals are encoded directly, anything else is looked up
    in `table`. Returns `None` when the name is not in the table. Both are
    encoded unsigned.
    """
    num = parse_int(token)
    if num is not None:
        return to_bytes(num, bits, signed=False)
    if table is None:
        return None
    code = table.get(token)
    if code is None:
        return None
    return to_bytes(code, bits, signed=False)


def compose_flags(table: Mapping[str, int], tokens: Sequence[str]) -> int | None:
    """ORs the values of all flag names, `None` if any of them is unknown."""
    v = 0
    for t in tokens:
        c = table.get(t)
        if c is None:
            return None
        v |= c
    return v


def decode_bytes(payload: Sequence[int], signed: bool = True) -> int:
    """Reads little-endian payload bytes back into an integer."""
    if not payload:
        return 0
    v = int.from_bytes(bytes(payload), "little")
    if signed:
        return from_sign_magnitude(v, len(payload) * 8)
    return v

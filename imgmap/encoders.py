"""
Position label encoders.

Every sample in a run carries a "position" dimension that identifies the
pixel it came from. Two encodings are supported:

    decimal  - zero-padded decimal of the 0-based scan index ("007", "042").
               All labels in a run have the same width, so sorting labels
               as strings reproduces scan order. This is the default.

    alpha    - bijective base-26 letters of the 1-based scan index
               ("a", "z", "aa", ...), spreadsheet-column style. Labels grow
               in length, so string order and scan order disagree once
               lengths differ: "aa" (27) sorts before "b" (2).

Usage:
    encode = get_encoder("decimal")
    encode(7, 1000)      # "007"
    encode_alpha(28)     # "ab"
"""
import string
import sys
from typing import Callable, Dict

from .errors import ConfigurationError


# Largest value representable with 1, 2, 3, ... decimal digits
SIZE_TABLE = tuple(10 ** n - 1 for n in range(1, 19)) + (sys.maxsize,)

ALPHABET = string.ascii_lowercase

DEFAULT_ENCODING = "decimal"

PositionEncoder = Callable[[int, int], str]


# =============================================================================
# Decimal (fixed width)
# =============================================================================

def string_size(x: int) -> int:
    """Number of decimal digits in a non-negative integer."""
    if x < 0:
        raise ValueError(f"string_size() needs a non-negative value, got {x}")
    for digits, limit in enumerate(SIZE_TABLE, start=1):
        if x <= limit:
            return digits
    raise ValueError(f"{x} exceeds the largest supported pixel count")


def decimal_width(total: int) -> int:
    """Label width for a run of `total` pixels: digits of the largest index."""
    return string_size(max(total - 1, 0))


def encode_decimal(idx: int, total: int) -> str:
    """Zero-padded decimal label for 0-based index `idx` out of `total`."""
    if not 0 <= idx < total:
        raise ValueError(f"Index {idx} out of range for {total} pixels")
    digits = str(idx)
    return "0" * (decimal_width(total) - string_size(idx)) + digits


def decode_decimal(label: str) -> int:
    return int(label, 10)


# =============================================================================
# Alpha (bijective base-26)
# =============================================================================

def encode_alpha(n: int) -> str:
    """Letters for the 1-based position `n`: 1 -> "a", 27 -> "aa"."""
    if n < 1:
        raise ValueError(f"Alpha positions start at 1, got {n}")
    letters = []
    while n > 0:
        remainder = (n - 1) % 26
        letters.append(ALPHABET[remainder])
        n = (n - remainder - 1) // 26
    return "".join(reversed(letters))


def decode_alpha(label: str) -> int:
    """Inverse of encode_alpha(): "a" -> 1, "ba" -> 53."""
    if not label:
        raise ValueError("Empty alpha label")
    n = 0
    for ch in label:
        digit = ALPHABET.find(ch)
        if digit < 0:
            raise ValueError(f"Invalid character {ch!r} in alpha label {label!r}")
        n = n * 26 + digit + 1
    return n


def _alpha_from_scan_index(idx: int, total: int) -> str:
    if not 0 <= idx < total:
        raise ValueError(f"Index {idx} out of range for {total} pixels")
    return encode_alpha(idx + 1)


# =============================================================================
# Registry
# =============================================================================

ENCODERS: Dict[str, PositionEncoder] = {
    "decimal": encode_decimal,
    "alpha": _alpha_from_scan_index,
}


def get_encoder(name: str = DEFAULT_ENCODING) -> PositionEncoder:
    """
    Look up an encoder by name.

    The returned callable always takes the 0-based scan index and the total
    pixel count; "alpha" shifts the index to 1-based itself.
    """
    try:
        return ENCODERS[name]
    except KeyError:
        available = ", ".join(sorted(ENCODERS))
        raise ConfigurationError(
            f"Unknown position encoding: {name!r} (expected one of: {available})"
        ) from None

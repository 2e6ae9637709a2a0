"""
Hex text -> bit sequence conversion.

Bits are numbered MSB-first inside each byte and bytes keep their input order,
so bit 0 of the sequence is the most significant bit of the first byte.
"""

import string
from dataclasses import dataclass

import numpy as np

_STRIP_CHARS = (" ", "\r", "\n")
_HEX_DIGITS = frozenset(string.hexdigits)


class HexValidationError(ValueError):
    """Base class for hex input that cannot be turned into bytes."""


class EmptyInput(HexValidationError):
    def __init__(self):
        super().__init__("Enter HEX text or load a file")


class OddLength(HexValidationError):
    def __init__(self, length):
        self.length = length
        super().__init__(f"HEX text must have an even number of characters (got {length})")


class InvalidHexDigit(HexValidationError):
    def __init__(self, char, position):
        self.char = char
        self.position = position
        super().__init__(f"Invalid HEX digit {char!r} at position {position}")


@dataclass(frozen=True)
class HexInput:
    """Hex digits with whitespace removed; even length, not yet checked for content."""
    text: str

    @property
    def byte_count(self) -> int:
        return len(self.text) // 2


class BitSequence:
    """
    Read-only array of 0/1 values.

    Wraps a uint8 numpy array (the output of np.unpackbits) with the write
    flag cleared, so a sequence can be shared between callers safely.
    """

    def __init__(self, bits):
        arr = np.array(bits, dtype=np.uint8)
        if arr.ndim != 1:
            raise ValueError("bit sequence must be one-dimensional")
        if arr.size and arr.max() > 1:
            raise ValueError("bit sequence may only hold 0 and 1")
        arr.setflags(write=False)
        self._bits = arr

    @property
    def array(self):
        return self._bits

    def __len__(self):
        return len(self._bits)

    def __eq__(self, other):
        if not isinstance(other, BitSequence):
            return NotImplemented
        return np.array_equal(self._bits, other._bits)

    def __repr__(self):
        preview = self.to_string()
        if len(preview) > 32:
            preview = preview[:32] + "..."
        return f"BitSequence({len(self)} bits: {preview})"

    def slice(self, start_index: int, length: int) -> str:
        """Return `length` bits starting at zero-based `start_index` as a '0'/'1' string."""
        if start_index < 0 or length < 0 or start_index + length > len(self._bits):
            raise IndexError(
                f"bit range {start_index}+{length} outside sequence of {len(self._bits)} bits"
            )
        return _bits_to_text(self._bits[start_index:start_index + length])

    def to_string(self) -> str:
        return _bits_to_text(self._bits)


def _bits_to_text(arr) -> str:
    # '0' is 0x30, so adding it to each 0/1 byte yields ASCII digits directly
    return (arr + ord("0")).astype(np.uint8).tobytes().decode("ascii")


def normalize(raw_text) -> HexInput:
    """Strip spaces, CR and LF, trim, and check the result is non-empty and even."""
    text = raw_text or ""
    for ch in _STRIP_CHARS:
        text = text.replace(ch, "")
    text = text.strip()

    if not text:
        raise EmptyInput()
    if len(text) % 2 != 0:
        raise OddLength(len(text))
    return HexInput(text)


def to_bits(hex_input: HexInput) -> BitSequence:
    """Decode hex digits to bytes and expand every byte MSB-first."""
    text = hex_input.text
    for position, ch in enumerate(text):
        if ch not in _HEX_DIGITS:
            raise InvalidHexDigit(ch, position)

    byte_data = np.frombuffer(bytes.fromhex(text), dtype=np.uint8)
    return BitSequence(np.unpackbits(byte_data))


def bits_to_int(bits: str) -> int:
    """Parse a '0'/'1' string as an unsigned base-2 integer."""
    if not bits:
        raise ValueError("empty bit string")
    return int(bits, 2)

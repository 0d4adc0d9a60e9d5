"""Parse and render 20-byte Ethereum addresses.

Addresses are held as raw bytes. Letter case is only a rendering concern: the
EIP-55 checksum form uppercases hex letter ``i`` when nibble ``i`` of
``keccak256(lowercase_hex)`` is 8 or more.
"""
from __future__ import annotations

import logging
import re
from typing import Union

from keccak_primitives import keccak256_hex

logger = logging.getLogger(__name__)

ADDRESS_SIZE = 20
UINT256_SIZE = 32

CHECKSUM = "checksum"
PLAIN = "plain"
FORMATS = (CHECKSUM, PLAIN)

_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")
_DECIMAL = re.compile(r"[0-9]+")
_UINT256_MAX_DIGITS = len(str((1 << 256) - 1))


class ParseError(ValueError):
    """Input could not be turned into an address."""


class InvalidAddressSyntax(ParseError):
    pass


class InvalidInteger(ParseError):
    pass


class ChecksumMismatch(ParseError):
    pass


class Address:
    """Immutable 20-byte account address."""

    __slots__ = ("_raw",)

    def __init__(self, raw: Union[bytes, bytearray]):
        if len(raw) != ADDRESS_SIZE:
            raise ValueError(f"Address must be {ADDRESS_SIZE} bytes, got {len(raw)}")
        object.__setattr__(self, "_raw", bytes(raw))

    def __setattr__(self, name, value):
        raise AttributeError("Address is immutable")

    @classmethod
    def from_uint256(cls, value: int) -> "Address":
        """Keep the low 160 bits of an unsigned 256-bit integer."""
        word = value.to_bytes(UINT256_SIZE, "big")
        return cls(word[UINT256_SIZE - ADDRESS_SIZE:])

    @property
    def raw(self) -> bytes:
        return self._raw

    def __bytes__(self):
        return self._raw

    def __str__(self):
        return render(self, CHECKSUM)

    def __repr__(self):
        return f"Address('{render(self, CHECKSUM)}')"

    def __eq__(self, other):
        if isinstance(other, Address):
            return self._raw == other._raw
        return NotImplemented

    def __hash__(self):
        return hash(self._raw)


def _strip_prefix(text: str) -> str:
    if text.startswith("0x") or text.startswith("0X"):
        return text[2:]
    return text


def _checksum_digits(lc: str) -> str:
    h = keccak256_hex(lc.encode("ascii"))
    out = []
    for i, c in enumerate(lc):
        if c in "abcdef" and int(h[i], 16) >= 8:
            out.append(c.upper())
        else:
            out.append(c)
    return "".join(out)


def parse_strict(text: str, verify_checksum: bool = False) -> Address:
    """Parse 40 hex digits with an optional ``0x`` prefix.

    Any casing is accepted unless *verify_checksum* is set, in which case
    mixed-case input must match its EIP-55 checksum.
    """
    digits = _strip_prefix(text)
    if len(digits) % 2:
        raise InvalidAddressSyntax("odd number of digits")
    if len(digits) != 2 * ADDRESS_SIZE:
        raise InvalidAddressSyntax("invalid string length")
    for pos, c in enumerate(digits):
        if c not in _HEX_DIGITS:
            raise InvalidAddressSyntax(f"invalid character {c!r} at position {pos}")

    address = Address(bytes.fromhex(digits))
    if verify_checksum and digits.lower() != digits and digits.upper() != digits:
        expected = _checksum_digits(digits.lower())
        if digits != expected:
            raise ChecksumMismatch(f"bad checksum, expected 0x{expected}")
    return address


def parse_tolerant(text: str) -> Address:
    """Parse a base-10 unsigned 256-bit integer and keep its low 160 bits."""
    if not text:
        raise InvalidInteger("cannot parse integer from empty string")
    if not _DECIMAL.fullmatch(text):
        raise InvalidInteger("invalid digit found in string")
    # int() refuses very long strings, so bound the digit count first.
    significant = text.lstrip("0")
    if len(significant) > _UINT256_MAX_DIGITS:
        raise InvalidInteger(f"number too large to fit in {8 * UINT256_SIZE} bits")
    value = int(significant or "0")
    if value.bit_length() > 8 * UINT256_SIZE:
        raise InvalidInteger(f"number too large to fit in {8 * UINT256_SIZE} bits")
    if value.bit_length() > 8 * ADDRESS_SIZE:
        logger.debug("discarding high-order bits of %s", text)
    return Address.from_uint256(value)


def parse(text: str, tolerant: bool = False, verify_checksum: bool = False) -> Address:
    if tolerant:
        logger.debug("parsing %r as uint256", text)
        return parse_tolerant(text)
    logger.debug("parsing %r as hex address", text)
    return parse_strict(text, verify_checksum=verify_checksum)


def render(address: Address, fmt: str = CHECKSUM) -> str:
    lc = address.raw.hex()
    if fmt == PLAIN:
        return "0x" + lc
    if fmt == CHECKSUM:
        return "0x" + _checksum_digits(lc)
    raise ValueError(f"unknown address format {fmt!r}, expected one of {FORMATS}")


def to_checksum(text: str) -> str:
    """Recompute the EIP-55 casing of an address string."""
    return render(parse_strict(text), CHECKSUM)


def is_checksum_address(text: str) -> bool:
    try:
        address = parse_strict(text)
    except ParseError:
        return False
    return _strip_prefix(text) == render(address, CHECKSUM)[2:]

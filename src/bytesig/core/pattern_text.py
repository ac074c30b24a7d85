"""Textual signature notations.

Two common ways of writing signatures are supported:

- IDA style: space separated hex bytes with ``?`` or ``??`` for unknown
  bytes, e.g. ``"48 8B 05 ?? ?? ?? ?? 48 85 C0"``.
- Code style: an escaped byte string plus a mask where ``x`` marks a literal
  and ``?`` an unknown byte, e.g. ``"\\x48\\x8B\\x05\\x00"`` with ``"xxx?"``.

Both produce a masked Signature, so the wildcard byte is always resolved
from the literal bytes rather than assumed.
"""

from __future__ import annotations

import string

from bytesig.core.errors import InvalidArgument
from bytesig.core.signature import Signature
from bytesig.core.wildcard import DEFAULT_UNKNOWN, ByteLike, ByteValue, to_buffer

_HEX = frozenset(string.hexdigits)
_LITERAL = ord("x")


def parse_ida(text: str, wildcard_token: str = "?") -> Signature:
    """Parse an IDA-style signature string.

    A token made only of `wildcard_token` characters (``?`` or ``??``) is an
    unknown byte; any other token must be one or two hex digits.
    """
    if len(wildcard_token) != 1:
        raise InvalidArgument(f"wildcard token must be one character, got {wildcard_token!r}")

    pattern = bytearray()
    mask = bytearray()
    for token in text.split():
        if token.strip(wildcard_token) == "" and len(token) <= 2:
            pattern.append(0)
            mask.append(DEFAULT_UNKNOWN)
            continue
        if len(token) > 2 or not set(token) <= _HEX:
            raise InvalidArgument(f"invalid signature token: {token!r}")
        pattern.append(int(token, 16))
        mask.append(_LITERAL)
    return Signature.from_masked(pattern, mask, DEFAULT_UNKNOWN)


def decode_escaped(text: str) -> bytes:
    """Decode a code-style byte string such as ``"\\x48\\x8B"`` to bytes."""
    try:
        return text.encode("latin-1").decode("unicode_escape").encode("latin-1")
    except UnicodeError as e:
        raise InvalidArgument(f"invalid escaped pattern: {e}") from None


def parse_code(
    pattern: ByteLike,
    mask: ByteLike,
    unknown: ByteValue = DEFAULT_UNKNOWN,
) -> Signature:
    """Build a signature from a code-style pattern and mask.

    A str pattern is treated as escaped text (see `decode_escaped`).
    """
    if isinstance(pattern, str):
        pattern = decode_escaped(pattern)
    return Signature.from_masked(pattern, to_buffer(mask, "mask"), unknown)


def format_ida(signature: Signature) -> str:
    """Render `signature` in IDA notation, ``??`` at wildcard slots."""
    wc = signature.wildcard
    return " ".join("??" if b == wc else f"{b:02X}" for b in signature.view())

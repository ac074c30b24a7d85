"""Byte coercion helpers and wildcard resolution.

The wildcard chosen for a masked pattern is the lowest byte value that never
appears as a literal (non-masked) pattern byte. Picking the lowest free value
keeps the result reproducible for equal inputs.
"""

from __future__ import annotations

from collections.abc import Iterable

from bytesig.core.errors import InvalidArgument, RangeError

ByteLike = bytes | bytearray | memoryview | str | Iterable[int]
ByteValue = int | str | bytes | bytearray

DEFAULT_UNKNOWN = ord("?")


def to_byte(value: ByteValue, what: str = "byte") -> int:
    """Coerce an int, one-character str or length-1 bytes object to 0..255."""
    if isinstance(value, bool):
        raise InvalidArgument(f"{what} must be a byte value, got bool")
    if isinstance(value, int):
        if not 0 <= value <= 255:
            raise InvalidArgument(f"{what} out of range 0..255: {value}")
        return value
    if isinstance(value, str):
        if len(value) != 1:
            raise InvalidArgument(f"{what} must be a single character, got {value!r}")
        return to_byte(ord(value), what)
    if isinstance(value, (bytes, bytearray)):
        if len(value) != 1:
            raise InvalidArgument(f"{what} must be a single byte, got {bytes(value)!r}")
        return value[0]
    raise InvalidArgument(f"{what} must be int, str or bytes, got {type(value).__name__}")


def to_buffer(data: ByteLike, what: str = "pattern") -> bytearray:
    """Copy a byte-like input into a new bytearray.

    Strings are taken one character per byte (latin-1); characters above
    U+00FF are rejected.
    """
    if isinstance(data, str):
        try:
            return bytearray(data.encode("latin-1"))
        except UnicodeEncodeError:
            raise InvalidArgument(f"{what} contains characters outside 0..255") from None
    if isinstance(data, (bytes, bytearray, memoryview)):
        return bytearray(data)
    if isinstance(data, int):
        # bytearray(n) would silently allocate n zero bytes
        raise InvalidArgument(f"{what} is not a byte sequence: int")
    try:
        return bytearray(data)
    except (TypeError, ValueError) as e:
        raise InvalidArgument(f"{what} is not a byte sequence: {e}") from None


def resolve_wildcard(
    pattern: ByteLike,
    mask: ByteLike | None = None,
    unknown: ByteValue = DEFAULT_UNKNOWN,
) -> int:
    """Return the lowest byte value absent from the literal bytes of `pattern`.

    Without a mask every byte counts as literal. With a mask, positions whose
    mask entry equals `unknown` are skipped.

    Raises:
        InvalidArgument: If `mask` length differs from `pattern` length
        RangeError: If all 256 byte values occur as literals
    """
    pat = to_buffer(pattern)
    present = [False] * 256

    if mask is None:
        for b in pat:
            present[b] = True
    else:
        msk = to_buffer(mask, "mask")
        if len(msk) != len(pat):
            raise InvalidArgument("pattern size did not match mask size")
        marker = to_byte(unknown, "unknown marker")
        for b, m in zip(pat, msk):
            if m != marker:
                present[b] = True

    for value in range(256):
        if not present[value]:
            return value

    raise RangeError("unable to find unused byte value in the provided pattern")

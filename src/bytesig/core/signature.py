"""Byte signatures with wildcard slots and first-match search."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any

from bytesig.core.errors import BuildResult, InvalidArgument, SignatureError
from bytesig.core.log import get_logger
from bytesig.core.wildcard import (
    DEFAULT_UNKNOWN,
    ByteLike,
    ByteValue,
    resolve_wildcard,
    to_buffer,
    to_byte,
)

log = get_logger(__name__)

BytePredicate = Callable[[int, int], bool]


def search_range(
    haystack: Sequence[int],
    needle: Sequence[int],
    start: int,
    end: int,
    predicate: BytePredicate,
) -> int:
    """Find the first window of `haystack[start:end]` matching `needle`.

    A window matches when `predicate(haystack_byte, needle_byte)` holds at
    every position. Returns the absolute index of the window, or `end` when
    there is none. An empty needle matches at `start`.
    """
    size = len(needle)
    if size == 0:
        return start
    for pos in range(start, end - size + 1):
        for i in range(size):
            if not predicate(haystack[pos + i], needle[i]):
                break
        else:
            return pos
    return end


def _longest_literal_run(pattern: bytearray, wildcard: int) -> tuple[int, int]:
    """Return (offset, length) of the longest run without wildcard bytes."""
    best_off, best_len = 0, 0
    run_off, run_len = 0, 0
    for i, b in enumerate(pattern):
        if b == wildcard:
            run_len = 0
            continue
        if run_len == 0:
            run_off = i
        run_len += 1
        if run_len > best_len:
            best_off, best_len = run_off, run_len
    return best_off, best_len


class Signature:
    """A byte pattern where every byte equal to `wildcard` matches anything.

    The pattern buffer is owned by the instance and never changes after
    construction; `copy()` clones it, `take()` moves it out.
    """

    def __init__(self, pattern: ByteLike = b"", wildcard: ByteValue = 0) -> None:
        self._pattern = to_buffer(pattern)
        self._wildcard = to_byte(wildcard, "wildcard")

    @classmethod
    def from_masked(
        cls,
        pattern: ByteLike,
        mask: ByteLike,
        unknown: ByteValue = DEFAULT_UNKNOWN,
    ) -> Signature:
        """Build a signature from a pattern and a same-length mask.

        Positions whose mask entry equals `unknown` become wildcards. The
        wildcard value is the lowest byte not used by any literal position.

        Raises:
            InvalidArgument: If the lengths differ or an input is not byte-like
            RangeError: If the literal bytes use all 256 values
        """
        pat = to_buffer(pattern)
        msk = to_buffer(mask, "mask")
        if len(pat) != len(msk):
            raise InvalidArgument("pattern size did not match mask size")
        marker = to_byte(unknown, "unknown marker")

        wildcard = resolve_wildcard(pat, msk, marker)
        for i, m in enumerate(msk):
            if m == marker:
                pat[i] = wildcard
        log.debug("masked signature: %d bytes, wildcard 0x%02X", len(pat), wildcard)

        sig = cls.__new__(cls)
        sig._pattern = pat
        sig._wildcard = wildcard
        return sig

    @property
    def pattern(self) -> bytes:
        """Stored pattern, wildcard slots included."""
        return bytes(self._pattern)

    @property
    def wildcard(self) -> int:
        return self._wildcard

    def view(self) -> memoryview:
        """Read-only view of the stored buffer without copying."""
        return memoryview(self._pattern).toreadonly()

    def wildcard_positions(self) -> list[int]:
        return [i for i, b in enumerate(self._pattern) if b == self._wildcard]

    def __len__(self) -> int:
        return len(self._pattern)

    def __bool__(self) -> bool:
        return bool(self._pattern)

    def __repr__(self) -> str:
        return f"Signature(pattern={bytes(self._pattern)!r}, wildcard=0x{self._wildcard:02X})"

    # Copy / move
    def copy(self) -> Signature:
        """Return an independent signature with its own buffer."""
        sig = Signature.__new__(Signature)
        sig._pattern = bytearray(self._pattern)
        sig._wildcard = self._wildcard
        return sig

    def __copy__(self) -> Signature:
        return self.copy()

    def __deepcopy__(self, memo: dict[int, Any]) -> Signature:
        return self.copy()

    def take(self) -> Signature:
        """Move the buffer into a new signature and reset this one to empty.

        The moved-from signature behaves like `Signature()` afterwards.
        """
        sig = Signature.__new__(Signature)
        sig._pattern = self._pattern
        sig._wildcard = self._wildcard
        self._pattern = bytearray()
        self._wildcard = 0
        return sig

    # Matching
    def _match_byte(self, hay: int, pat: int) -> bool:
        return hay == pat or pat == self._wildcard

    def matches_at(self, haystack: ByteLike, offset: int) -> bool:
        """True if the window of `haystack` starting at `offset` matches."""
        if isinstance(haystack, str):
            haystack = to_buffer(haystack, "haystack")
        size = len(self._pattern)
        if size == 0 or offset < 0 or offset + size > len(haystack):
            return False
        wc = self._wildcard
        for i, b in enumerate(self._pattern):
            if b != wc and haystack[offset + i] != b:
                return False
        return True

    def find(self, haystack: ByteLike, start: int = 0, end: int | None = None) -> int:
        """Return the index of the first match in `haystack[start:end]`.

        Bounds follow slice semantics. When nothing matches (including the
        empty signature and ranges shorter than the pattern) the return
        value is `end`, clamped to the haystack.
        """
        if isinstance(haystack, str):
            haystack = to_buffer(haystack, "haystack")
        start, end, _ = slice(start, end).indices(len(haystack))
        size = len(self._pattern)
        if size == 0 or end - start < size:
            return end
        if hasattr(haystack, "find"):
            return self._find_anchored(haystack, start, end)
        return search_range(haystack, self._pattern, start, end, self._match_byte)

    def _find_anchored(self, haystack: Any, start: int, end: int) -> int:
        # Locate the longest literal run with the buffer's native find, then
        # verify the remaining literal positions of each candidate window.
        size = len(self._pattern)
        wc = self._wildcard
        off, run = _longest_literal_run(self._pattern, wc)
        if run == 0:
            return start

        anchor = bytes(self._pattern[off : off + run])
        if run == size:
            idx = haystack.find(anchor, start, end)
            return end if idx == -1 else idx

        checks = [(i, b) for i, b in enumerate(self._pattern) if b != wc]
        stop = end - (size - off - run)
        pos = start + off
        while True:
            idx = haystack.find(anchor, pos, stop)
            if idx == -1:
                return end
            cand = idx - off
            if all(haystack[cand + i] == b for i, b in checks):
                return cand
            pos = idx + 1


def build_wildcarded(pattern: ByteLike, wildcard: ByteValue) -> BuildResult:
    """Build a pre-wildcarded signature, reporting failure as a result."""
    try:
        return BuildResult.success(Signature(pattern, wildcard))
    except SignatureError as e:
        return BuildResult.failure(e)


def build_masked(
    pattern: ByteLike, mask: ByteLike, unknown: ByteValue = DEFAULT_UNKNOWN
) -> BuildResult:
    """Build a masked signature, reporting failure as a result."""
    try:
        return BuildResult.success(Signature.from_masked(pattern, mask, unknown))
    except SignatureError as e:
        return BuildResult.failure(e)

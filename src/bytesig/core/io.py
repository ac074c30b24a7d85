from __future__ import annotations

import mmap
import os
from collections import OrderedDict
from collections.abc import Iterator
from contextlib import suppress

from bytesig.core.log import get_logger

log = get_logger(__name__)

DEFAULT_PAGE_SIZE = 64 * 1024


class InvalidOffset(ValueError):
    """Raised when a negative offset or length is requested."""


class PagedReader:
    """Bounds-checked reader for binary files scanned for signatures.

    Maps the file read-only when possible. Otherwise pages are read on demand
    and kept in a small LRU cache, so large dumps are never loaded whole.
    """

    def __init__(
        self,
        path: str | os.PathLike[str],
        *,
        page_size: int = DEFAULT_PAGE_SIZE,
        cache_pages: int = 16,
        use_mmap: bool = True,
    ) -> None:
        if page_size <= 0:
            raise ValueError("page_size must be positive")
        if cache_pages <= 0:
            raise ValueError("cache_pages must be positive")

        self._path = os.fspath(path)
        try:
            self._size = os.stat(self._path).st_size
        except FileNotFoundError:
            raise FileNotFoundError(f"File not found: {self._path}") from None

        self._fh = open(self._path, "rb", buffering=0)  # noqa: SIM115
        self._page_size = page_size
        self._cache_limit = cache_pages
        self._pages: OrderedDict[int, bytes] = OrderedDict()

        self._mmap: mmap.mmap | None = None
        if use_mmap and self._size > 0:
            try:
                self._mmap = mmap.mmap(self._fh.fileno(), length=0, access=mmap.ACCESS_READ)
            except (OSError, ValueError) as e:
                log.debug("mmap unavailable for %s (%s); using paged reads", self._path, e)

    def close(self) -> None:
        if self._mmap is not None:
            with suppress(BufferError):
                self._mmap.close()
            self._mmap = None
        self._fh.close()

    def __enter__(self) -> PagedReader:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def size(self) -> int:
        """File size in bytes."""
        return self._size

    @property
    def path(self) -> str:
        return self._path

    @property
    def mapped(self) -> bool:
        """True while reads are served from a memory map."""
        return self._mmap is not None

    def _page(self, index: int) -> bytes:
        data = self._pages.get(index)
        if data is not None:
            self._pages.move_to_end(index)
            return data

        start = index * self._page_size
        self._fh.seek(start)
        data = self._fh.read(min(self._page_size, max(0, self._size - start)))
        self._pages[index] = data
        if len(self._pages) > self._cache_limit:
            self._pages.popitem(last=False)
        return data

    @staticmethod
    def _check(offset: int, length: int = 0) -> None:
        if offset < 0:
            raise InvalidOffset("offset must be >= 0")
        if length < 0:
            raise InvalidOffset("length must be >= 0")

    def read(self, offset: int, length: int) -> bytes:
        """Read up to `length` bytes at `offset`, truncated at EOF.

        Reads starting at or past EOF return b"".
        """
        self._check(offset, length)
        end = min(self._size, offset + length)
        if offset >= end:
            return b""
        if self._mmap is not None:
            return self._mmap[offset:end]

        out = bytearray()
        pos = offset
        while pos < end:
            index, within = divmod(pos, self._page_size)
            page = self._page(index)
            take = min(len(page) - within, end - pos)
            if take <= 0:
                break
            out += page[within : within + take]
            pos += take
        return bytes(out)

    def byte_at(self, offset: int) -> int | None:
        """Byte value at `offset`, or None at/after EOF."""
        self._check(offset)
        if offset >= self._size:
            return None
        if self._mmap is not None:
            return self._mmap[offset]
        index, within = divmod(offset, self._page_size)
        page = self._page(index)
        return page[within] if within < len(page) else None

    def slice(self, offset: int, length: int) -> memoryview | bytes:
        """Zero-copy view when mapped, else the same bytes `read` returns."""
        self._check(offset, length)
        end = min(self._size, offset + length)
        if offset >= end:
            return b""
        if self._mmap is not None:
            return memoryview(self._mmap)[offset:end]
        return self.read(offset, length)

    def chunks(self, start: int, chunk_size: int, overlap: int = 0) -> Iterator[tuple[int, bytes]]:
        """Yield (offset, data) windows covering [start, size).

        Consecutive windows share `overlap` bytes so that a needle of length
        `overlap + 1` crossing a boundary appears whole in one window.
        """
        self._check(start)
        if chunk_size <= overlap:
            raise ValueError("chunk_size must exceed overlap")
        pos = start
        while pos < self._size:
            end = min(self._size, pos + chunk_size)
            yield pos, self.read(pos, end - pos)
            if end >= self._size:
                return
            pos = end - overlap

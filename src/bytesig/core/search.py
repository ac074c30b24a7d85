from __future__ import annotations

import os

from bytesig.core.io import DEFAULT_PAGE_SIZE, PagedReader
from bytesig.core.log import get_logger
from bytesig.core.signature import Signature

log = get_logger(__name__)


def find_signature(
    reader: PagedReader,
    signature: Signature,
    start: int = 0,
    *,
    chunk_size: int = DEFAULT_PAGE_SIZE,
) -> int | None:
    """Find the first match of `signature` at or after `start`. Returns offset or None.

    Scans in chunks without loading the whole file. Chunks overlap by
    len(signature)-1 so matches crossing a chunk boundary are still found.
    """
    if start < 0:
        start = 0
    if not signature or start >= reader.size:
        return None

    overlap = len(signature) - 1
    # A chunk must hold at least one full window past the overlap.
    chunk_size = max(chunk_size, overlap + 1)
    for pos, data in reader.chunks(start, chunk_size, overlap):
        idx = signature.find(data)
        if idx != len(data):
            log.debug("match in %s at 0x%X", reader.path, pos + idx)
            return pos + idx
    return None


def find_in_file(
    path: str | os.PathLike[str],
    signature: Signature,
    start: int = 0,
    *,
    chunk_size: int = DEFAULT_PAGE_SIZE,
    use_mmap: bool = True,
) -> int | None:
    """Open `path` and return the offset of the first match, or None."""
    with PagedReader(path, use_mmap=use_mmap) as reader:
        return find_signature(reader, signature, start, chunk_size=chunk_size)

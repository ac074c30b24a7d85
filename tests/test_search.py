from __future__ import annotations

from pathlib import Path

import pytest

from bytesig.core.io import PagedReader
from bytesig.core.pattern_text import parse_ida
from bytesig.core.search import find_in_file, find_signature
from bytesig.core.signature import Signature


def test_find_signature_basic(tmp_path: Path) -> None:
    data = b"hello world\x00\x01\x02\xde\xad\xbe\xeftrail"
    p = tmp_path / "data.bin"
    p.write_bytes(data)
    with PagedReader(p) as r:
        assert find_signature(r, parse_ida("DE ?? BE EF"), 0) == data.index(b"\xde\xad")
        assert find_signature(r, parse_ida("DE AD BE 00"), 0) is None


@pytest.mark.parametrize("use_mmap", [True, False])
def test_find_signature_across_chunk_boundary(tmp_path: Path, use_mmap: bool) -> None:
    chunk = 64 * 1024
    buf = bytearray(b"A" * (chunk + 10))
    needle = b"XYZW"
    start = chunk - 2  # crosses the boundary by 2 bytes
    buf[start : start + len(needle)] = needle
    p = tmp_path / "boundary.bin"
    p.write_bytes(buf)
    sig = Signature.from_masked(needle, b"x??x")
    with PagedReader(p, use_mmap=use_mmap) as r:
        assert find_signature(r, sig, 0) == start


def test_find_signature_small_chunks(tmp_path: Path) -> None:
    p = tmp_path / "small.bin"
    p.write_bytes(b"..........AxxD....")
    sig = Signature("A??D", "?")
    with PagedReader(p) as r:
        for chunk_size in (1, 2, 3, 4, 7):
            assert find_signature(r, sig, 0, chunk_size=chunk_size) == 10


def test_find_signature_start_offset(tmp_path: Path) -> None:
    p = tmp_path / "twice.bin"
    p.write_bytes(b"AB..AB..")
    sig = Signature(b"AB", 0)
    with PagedReader(p) as r:
        assert find_signature(r, sig, 0) == 0
        assert find_signature(r, sig, 1) == 4
        assert find_signature(r, sig, 5) is None
        assert find_signature(r, sig, -3) == 0
        assert find_signature(r, sig, 100) is None


def test_empty_signature_never_found(tmp_path: Path) -> None:
    p = tmp_path / "x.bin"
    p.write_bytes(b"abc")
    with PagedReader(p) as r:
        assert find_signature(r, Signature(), 0) is None


def test_find_in_file(tmp_path: Path) -> None:
    p = tmp_path / "f.bin"
    p.write_bytes(bytes(range(256)) * 4)
    sig = parse_ida("FE FF 00 ?? 02")
    assert find_in_file(p, sig) == 254
    assert find_in_file(p, sig, 255, use_mmap=False) == 510
    assert find_in_file(p, sig, 1000) is None

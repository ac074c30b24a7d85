from __future__ import annotations

from pathlib import Path

import pytest

from bytesig.cli import EXIT_ERROR, EXIT_FOUND, EXIT_NOT_FOUND, main


@pytest.fixture()
def dump(tmp_path: Path) -> Path:
    p = tmp_path / "dump.bin"
    p.write_bytes(b"\x00" * 32 + b"\x48\x8b\x05\x10\x20\x30\x40\xc3" + b"\x00" * 8)
    return p


@pytest.fixture()
def config(tmp_path: Path) -> Path:
    p = tmp_path / "config.yaml"
    p.write_text("chunk_size: 16\n", encoding="utf-8")
    return p


def test_scan_ida_match(dump: Path, config: Path, capsys: pytest.CaptureFixture[str]) -> None:
    rc = main(["--config", str(config), "scan", str(dump), "48 8B 05 ?? ?? ?? ?? C3"])
    assert rc == EXIT_FOUND
    assert capsys.readouterr().out.strip().endswith(": 0x20")


def test_scan_no_match(dump: Path, config: Path, capsys: pytest.CaptureFixture[str]) -> None:
    rc = main(["--config", str(config), "scan", str(dump), "48 8B 06"])
    assert rc == EXIT_NOT_FOUND
    assert "no match" in capsys.readouterr().out


def test_scan_code_style_with_start(dump: Path, config: Path, capsys: pytest.CaptureFixture[str]) -> None:
    args = ["--config", str(config), "scan", str(dump), r"\x48\x8B\x00\x00", "--mask", "xx??"]
    assert main(args) == EXIT_FOUND
    assert capsys.readouterr().out.strip().endswith(": 0x20")
    assert main([*args, "--start", "0x21"]) == EXIT_NOT_FOUND


def test_scan_custom_unknown(dump: Path, config: Path, capsys: pytest.CaptureFixture[str]) -> None:
    args = ["--config", str(config), "scan", str(dump), r"\x05\x00\x20", "--mask", "x.x", "--unknown", "."]
    assert main(args) == EXIT_FOUND
    assert capsys.readouterr().out.strip().endswith(": 0x22")


def test_scan_errors(dump: Path, config: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["--config", str(config), "scan", str(dump), "48 ZZ"]) == EXIT_ERROR
    assert "invalid signature token" in capsys.readouterr().err

    assert main(["--config", str(config), "scan", str(dump), r"\x48", "--mask", "xx"]) == EXIT_ERROR
    assert "mask size" in capsys.readouterr().err

    missing = tmp_path / "missing.bin"
    assert main(["--config", str(config), "scan", str(missing), "48"]) == EXIT_ERROR
    assert "File not found" in capsys.readouterr().err


def test_bad_config(dump: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    bad = tmp_path / "bad.yaml"
    bad.write_text("chunk_size: 0\n", encoding="utf-8")
    assert main(["--config", str(bad), "scan", str(dump), "48"]) == EXIT_ERROR
    assert "chunk_size" in capsys.readouterr().err


def test_info(config: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["--config", str(config), "info", "00 ?? 01"]) == EXIT_FOUND
    out = capsys.readouterr().out
    assert "0x02" in out
    assert "00 ?? 01" in out


def test_usage_error_exits() -> None:
    with pytest.raises(SystemExit) as exc:
        main(["scan"])
    assert exc.value.code == 2

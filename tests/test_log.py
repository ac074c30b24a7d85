from __future__ import annotations

import logging
from collections.abc import Iterator

import pytest

from bytesig.core.log import LOGGER_NAME, get_logger, setup_logging
from bytesig.core.signature import Signature


@pytest.fixture()
def clean_logger() -> Iterator[logging.Logger]:
    logger = logging.getLogger(LOGGER_NAME)
    saved = (logger.level, list(logger.handlers))
    logger.handlers.clear()
    yield logger
    logger.handlers[:] = saved[1]
    logger.setLevel(saved[0])


def test_setup_is_idempotent(clean_logger: logging.Logger) -> None:
    setup_logging("info")
    setup_logging(logging.DEBUG)
    assert len(clean_logger.handlers) == 1
    assert clean_logger.level == logging.DEBUG
    assert clean_logger.handlers[0].level == logging.DEBUG


def test_env_var_selects_debug(clean_logger: logging.Logger, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("BYTESIG_DEBUG", "1")
    setup_logging()
    assert clean_logger.level == logging.DEBUG


def test_default_level_is_warning(clean_logger: logging.Logger, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("BYTESIG_DEBUG", raising=False)
    setup_logging()
    assert clean_logger.level == logging.WARNING


def test_child_logger_names() -> None:
    assert get_logger("search").name == "bytesig.search"
    assert get_logger("bytesig.core.signature").name == "bytesig.core.signature"


def test_masked_build_logs_wildcard(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.DEBUG, logger=LOGGER_NAME):
        Signature.from_masked(b"\x00\x01", b"x?")
    assert "wildcard 0x01" in caplog.text

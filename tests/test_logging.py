"""Tests for solutiondiff logging setup."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator

import pytest

from solutiondiff.logging import configure_logging, get_logger


@pytest.fixture(autouse=True)
def _reset_logger() -> Iterator[None]:
    yield
    logger = logging.getLogger("solutiondiff")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


def test_console_lines_name_the_emitting_component(capsys: pytest.CaptureFixture[str]) -> None:
    configure_logging(verbose=True)

    get_logger("archive").debug("Read 12 bytes")

    assert "[solutiondiff.archive] DEBUG Read 12 bytes" in capsys.readouterr().err


def test_debug_hidden_without_verbose(capsys: pytest.CaptureFixture[str]) -> None:
    configure_logging()

    get_logger("diff").debug("fallback used")
    get_logger("orchestrator").info("Comparing a.zip and b.zip")

    err = capsys.readouterr().err
    assert "fallback used" not in err
    assert "[solutiondiff.orchestrator] INFO Comparing a.zip and b.zip" in err


def test_log_file_receives_records(tmp_path: Path) -> None:
    log_file = tmp_path / "run.log"
    configure_logging(verbose=True, log_file=log_file)

    get_logger("parsing").warning("no components")
    for handler in logging.getLogger("solutiondiff").handlers:
        handler.flush()

    assert "WARNING solutiondiff.parsing: no components" in log_file.read_text(encoding="utf-8")

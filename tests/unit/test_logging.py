from __future__ import annotations

import json

import structlog

from pagesmith import logger as package_logger
from pagesmith.logging import bind_operation, configure_logging, get_logger
from pagesmith.settings import Settings


def test_stdlib_logger_is_configured(capsys) -> None:
    configure_logging(settings=Settings(log_json=False, log_level="INFO"), force=True)
    logger = get_logger("tests")
    logger.info("hello")

    captured = capsys.readouterr()
    assert "hello" in captured.err.lower()


def test_json_logs_carry_extra_and_operation(capsys) -> None:
    configure_logging(settings=Settings(log_json=True, log_level="INFO"), force=True)
    logger = get_logger("tests.json")

    bind_operation("split", source="report.pdf")
    logger.info("Transform completed", extra={"outputs": 2})
    structlog.contextvars.clear_contextvars()

    line = capsys.readouterr().err.strip().splitlines()[-1]
    payload = json.loads(line)
    assert payload["message"] == "Transform completed"
    assert payload["operation"] == "split"
    assert payload["source"] == "report.pdf"
    assert payload["outputs"] == 2
    assert "extra" not in payload


def test_bind_operation_replaces_previous_context() -> None:
    bind_operation("merge", source="a.pdf")
    bind_operation("compress-image")

    assert structlog.contextvars.get_contextvars() == {"operation": "compress-image"}
    structlog.contextvars.clear_contextvars()


def test_package_logger_created_on_import() -> None:
    assert callable(getattr(package_logger, "info", None))

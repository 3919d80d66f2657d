from __future__ import annotations

import json
import logging

import pytest
from PIL import Image

from qrstyle.logging import AUDIT, ConsoleFormatter, JsonFormatter, audit, get_logger, setup_logging, trace


def test_audit_records_event_and_context(caplog) -> None:
    caplog.set_level(logging.DEBUG, logger="qrstyle")
    audit("qr.generated", logger=get_logger("test"), size=256, ecc="H")
    record = caplog.records[-1]
    assert record.levelno == AUDIT
    assert record.name == "qrstyle.test"
    assert record.event == "qr.generated"
    assert record.ctx == {"size": 256, "ecc": "H"}


def test_trace_logs_entry_exit_and_summarises_images(caplog) -> None:
    caplog.set_level(logging.DEBUG, logger="qrstyle")

    @trace(logger_name="test")
    def make(size):
        return Image.new("RGB", (size, size))

    make(12)
    events = [(r.event, r.levelno) for r in caplog.records]
    assert ("make.enter", logging.DEBUG) in events
    assert ("make.done", logging.INFO) in events
    done = next(r for r in caplog.records if r.event == "make.done")
    assert done.ctx["result"] == "<Image 12x12 RGB>"
    assert done.duration_ms >= 0


def test_trace_logs_errors_and_reraises(caplog) -> None:
    caplog.set_level(logging.DEBUG, logger="qrstyle")

    @trace(logger_name="test")
    def boom():
        raise RuntimeError("nope")

    with pytest.raises(RuntimeError):
        boom()
    error = next(r for r in caplog.records if r.event == "boom.error")
    assert error.levelno == logging.ERROR
    assert error.exc_info[0] is RuntimeError


def test_formatters_render_events() -> None:
    log = get_logger("fmt")
    record = log.makeRecord(log.name, AUDIT, fn="", lno=0, msg="", args=(), exc_info=None)
    record.event = "logo.skipped"
    record.ctx = {"reason": "timeout"}

    entry = json.loads(JsonFormatter().format(record))
    assert entry["level"] == "AUDIT"
    assert entry["event"] == "logo.skipped"
    assert entry["ctx"] == {"reason": "timeout"}

    line = ConsoleFormatter(color=False).format(record)
    assert "logo.skipped" in line
    assert "reason=timeout" in line
    assert "[qrstyle.fmt]" in line


def test_plain_messages_pass_through_formatters() -> None:
    record = logging.LogRecord("qrstyle.x", logging.WARNING, "", 0, "ratio %.1f clamped", (5.0,), None)
    assert json.loads(JsonFormatter().format(record))["msg"] == "ratio 5.0 clamped"
    assert "ratio 5.0 clamped" in ConsoleFormatter(color=False).format(record)


def test_setup_logging_sets_level_and_file(tmp_path) -> None:
    path = tmp_path / "log.jsonl"
    setup_logging(level="audit", log_file=str(path))
    root = logging.getLogger("qrstyle")
    assert root.level == AUDIT
    assert len(root.handlers) == 2
    audit("cli.start", command="generate")
    for handler in root.handlers:
        handler.flush()
    assert json.loads(path.read_text().splitlines()[-1])["event"] == "cli.start"

"""Tests for observability/logger.py and observability/metrics.py"""
import io
import json
import logging
import sys

from datemarkers.observability import (
    MetricsHook,
    NoopMetricsHook,
    StructuredFormatter,
    get_logger,
    resolve_metrics,
)


class TestStructuredFormatter:
    def _get_record(self, msg, exc_info=None, extra_fields=None):
        record = logging.LogRecord(
            name="test",
            level=logging.INFO,
            pathname="",
            lineno=0,
            msg=msg,
            args=(),
            exc_info=exc_info,
        )
        if extra_fields is not None:
            record.extra_fields = extra_fields
        return record

    def test_basic_format(self):
        result = json.loads(StructuredFormatter().format(self._get_record("hello")))
        assert result["message"] == "hello"
        assert result["level"] == "INFO"
        assert "ts" in result

    def test_extra_fields_merged(self):
        record = self._get_record("msg", extra_fields={"op": "reconcile", "added": 2})
        result = json.loads(StructuredFormatter().format(record))
        assert result["op"] == "reconcile"
        assert result["added"] == 2

    def test_exception_info_included(self):
        try:
            raise ValueError("test error")
        except ValueError:
            exc_info = sys.exc_info()
        result = json.loads(StructuredFormatter().format(self._get_record("e", exc_info)))
        assert "ValueError" in result["exception"]

    def test_non_serialisable_values_stringified(self):
        record = self._get_record("msg", extra_fields={"position": float("nan"), "obj": object()})
        result = json.loads(StructuredFormatter().format(record))
        assert "obj" in result


class TestGetLogger:
    def test_idempotent(self):
        first = get_logger("datemarkers.test.unique1")
        second = get_logger("datemarkers.test.unique1")
        assert first is second
        assert len(first.handlers) == 1

    def test_writes_json_to_stream(self):
        stream = io.StringIO()
        logger = get_logger("datemarkers.test.unique2", level="INFO", stream=stream)
        logger.info("pass complete", extra={"extra_fields": {"markers": 3}})
        line = json.loads(stream.getvalue().strip())
        assert line["markers"] == 3
        assert line["logger"] == "datemarkers.test.unique2"

    def test_level_string_resolved(self):
        logger = get_logger("datemarkers.test.unique3", level="warning")
        assert logger.level == logging.WARNING


class TestMetrics:
    def test_noop_satisfies_protocol(self):
        assert isinstance(NoopMetricsHook(), MetricsHook)

    def test_noop_accepts_calls(self):
        hook = NoopMetricsHook()
        hook.increment("x")
        hook.timing("x", 1.0, tags={"a": "b"})
        hook.gauge("x", 2.0)

    def test_resolve_metrics(self):
        custom = object()
        assert resolve_metrics(custom) is custom
        assert isinstance(resolve_metrics(None), NoopMetricsHook)

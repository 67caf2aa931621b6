"""Tests for MarkerRegistry."""

from __future__ import annotations

import pytest
from conftest import MarkerElement, RecordingRenderer

from datemarkers.errors import ErrorCode, InternalInvariantViolation
from datemarkers.models import MarkerRecord
from datemarkers.reconcile.registry import MarkerRegistry


def _record(position=0.0, label="Today", handle=None):
    return MarkerRecord(
        position=position,
        label=label,
        handle=handle if handle is not None else MarkerElement(position, label),
    )


class TestRegister:
    def test_register_and_lookup(self):
        registry = MarkerRegistry()
        record = _record()
        registry.register("k1", record)
        assert "k1" in registry
        assert registry.get("k1") is record
        assert len(registry) == 1

    def test_duplicate_key_rejected(self):
        registry = MarkerRegistry()
        registry.register("k1", _record())
        with pytest.raises(InternalInvariantViolation) as exc_info:
            registry.register("k1", _record())
        assert exc_info.value.code == ErrorCode.INVARIANT_VIOLATION
        assert exc_info.value.context["reason"] == "duplicate_key"

    def test_shared_handle_rejected(self):
        registry = MarkerRegistry()
        handle = MarkerElement(0, "Today")
        registry.register("k1", _record(handle=handle))
        with pytest.raises(InternalInvariantViolation, match="already owned"):
            registry.register("k2", _record(handle=handle))

    def test_forget_returns_record(self):
        registry = MarkerRegistry()
        record = _record()
        registry.register("k1", record)
        assert registry.forget("k1") is record
        assert len(registry) == 0

    def test_snapshot(self):
        registry = MarkerRegistry()
        registry.register("a", _record(10, "Today"))
        registry.register("b", _record(50, "Yesterday"))
        assert registry.snapshot() == {"a": (10, "Today"), "b": (50, "Yesterday")}


class TestVerify:
    def test_healthy_registry_passes(self):
        registry = MarkerRegistry()
        registry.register("a", _record())
        registry.register("b", _record())
        registry.verify()

    def test_missing_handle_detected(self):
        registry = MarkerRegistry()
        registry.register("a", _record())
        registry.get("a").handle = None
        with pytest.raises(InternalInvariantViolation, match="no element handle"):
            registry.verify()

    def test_shared_handle_detected(self):
        registry = MarkerRegistry()
        registry.register("a", _record())
        registry.register("b", _record())
        registry.get("b").handle = registry.get("a").handle
        with pytest.raises(InternalInvariantViolation, match="share an element handle"):
            registry.verify()


class TestClear:
    def test_clear_destroys_every_element(self):
        renderer = RecordingRenderer()
        registry = MarkerRegistry()
        for key in ("a", "b", "c"):
            registry.register(key, MarkerRecord(0, key, renderer.create_marker(0, key)))
        assert registry.clear(renderer) == 3
        assert len(registry) == 0
        assert renderer.live == []

    def test_clear_survives_renderer_failure(self):
        renderer = RecordingRenderer()
        registry = MarkerRegistry()
        registry.register("a", _record())
        registry.register("b", MarkerRecord(0, "b", renderer.create_marker(0, "b")))

        calls = []

        def destroy(handle):
            calls.append(handle)
            if len(calls) == 1:
                raise RuntimeError("element already detached")
            handle.alive = False

        renderer.destroy_marker = destroy
        assert registry.clear(renderer) == 2
        assert len(registry) == 0
        assert len(calls) == 2

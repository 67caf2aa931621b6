"""Shared test fixtures for the datemarkers test suite."""

from __future__ import annotations

from datetime import date
from typing import Any

import pytest

from datemarkers.config import MarkerConfig
from datemarkers.errors import CollaboratorUnavailableError
from datemarkers.models import ChangeBatch, Item

TODAY = date(2026, 10, 18)


class MarkerElement:
    """Stand-in for a rendered marker element."""

    def __init__(self, position: float, label: str) -> None:
        self.position = position
        self.label = label
        self.alive = True


class RecordingRenderer:
    """A rendering collaborator that records every call."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, Any]] = []
        self.elements: list[MarkerElement] = []

    def create_marker(self, position: float, label: str) -> MarkerElement:
        element = MarkerElement(position, label)
        self.elements.append(element)
        self.calls.append(("create", (position, label)))
        return element

    def update_marker(self, handle: MarkerElement, position: float, label: str) -> None:
        handle.position = position
        handle.label = label
        self.calls.append(("update", (position, label)))

    def destroy_marker(self, handle: MarkerElement) -> None:
        handle.alive = False
        self.calls.append(("destroy", (handle.position, handle.label)))

    @property
    def live(self) -> list[MarkerElement]:
        return [e for e in self.elements if e.alive]

    def reset_calls(self) -> None:
        self.calls.clear()


class FakeListSource:
    """A list source backed by a mutable Python list."""

    def __init__(self, items: list[Item] | None = None) -> None:
        self.rows: list[Item] = list(items or [])
        self.unavailable = False

    def items(self) -> list[Item]:
        if self.unavailable:
            raise CollaboratorUnavailableError(
                "list container not found", context={"collaborator": "list"},
            )
        return list(self.rows)


class FakeChangeSource:
    """A change source whose notifications are fired by the test."""

    def __init__(self) -> None:
        self.handlers: list[Any] = []

    def on_items_changed(self, handler: Any):
        self.handlers.append(handler)

        def unsubscribe() -> None:
            self.handlers.remove(handler)

        return unsubscribe

    def emit(self, added: int = 0, removed: int = 0) -> list[Any]:
        return [handler(ChangeBatch(added=added, removed=removed)) for handler in self.handlers]


def long_stamp(day: date, time: str = "9:15 AM") -> str:
    """Format *day* the way the mail client's tooltip does."""
    weekday = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday",
               "Saturday", "Sunday")[day.weekday()]
    month = ("January", "February", "March", "April", "May", "June", "July",
             "August", "September", "October", "November", "December")[day.month - 1]
    return f"{weekday}, {month} {day.day}, {day.year} at {time}"


def make_items(*rows: tuple[Any, Any]) -> list[Item]:
    """Build items from ``(position, day-or-raw)`` pairs."""
    items = []
    for ordinal, (position, when) in enumerate(rows):
        raw = long_stamp(when) if isinstance(when, date) else when
        items.append(Item(ordinal=ordinal, position=position, raw_timestamp=raw))
    return items


@pytest.fixture
def config() -> MarkerConfig:
    """Default test configuration."""
    return MarkerConfig()


@pytest.fixture
def position_config() -> MarkerConfig:
    """Configuration using position-derived keys."""
    return MarkerConfig(key_strategy="position")


@pytest.fixture
def renderer() -> RecordingRenderer:
    return RecordingRenderer()


@pytest.fixture
def source() -> FakeListSource:
    return FakeListSource()


@pytest.fixture
def changes() -> FakeChangeSource:
    return FakeChangeSource()

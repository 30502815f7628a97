"""Small helpers shared by the runner: internal errors, tag sets and fixtures."""

from __future__ import annotations

import inspect
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterable, Iterator


@dataclass(frozen=True)
class SourceLocation:
    """Where an error was raised."""

    filename: str
    lineno: int
    function: str


def _caller_location(depth: int) -> SourceLocation:
    frame = inspect.currentframe()
    try:
        for _ in range(depth + 1):
            if frame is None:
                break
            frame = frame.f_back
        if frame is None:
            return SourceLocation("<unknown>", 0, "<unknown>")
        return SourceLocation(frame.f_code.co_filename, frame.f_lineno, frame.f_code.co_name)
    finally:
        del frame


class InternalError(RuntimeError):
    """An error in the runner itself, remembering where it was created."""

    def __init__(self, message: str, location: SourceLocation | None = None) -> None:
        super().__init__(message)
        self.location = location if location is not None else _caller_location(2)


def tags_to_set(tags: Iterable[Any]) -> set[str]:
    """Return the names of the given tag objects as a set."""
    return {tag.name for tag in tags}


@contextmanager
def set_up_tear_down(fixture: Any) -> Iterator[Any]:
    """Call ``fixture.set_up()`` on entry and ``fixture.tear_down()`` on exit.

    Tear-down runs even when the body raises, but not when set-up fails.
    """
    fixture.set_up()
    try:
        yield fixture
    finally:
        fixture.tear_down()
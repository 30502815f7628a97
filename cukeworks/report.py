"""Report handlers and the forwarder that feeds them events from a test run.

Durations are given in seconds as floats.
"""

from __future__ import annotations

import enum
from abc import ABC, abstractmethod
from contextlib import contextmanager
from os import PathLike
from typing import Any, Iterator, Protocol, Union

PathType = Union[str, "PathLike[str]", None]


class Result(enum.Enum):
    """Outcome of a feature, rule, scenario or step."""

    PASSED = "passed"
    SKIPPED = "skipped"
    FAILED = "failed"
    PENDING = "pending"
    AMBIGUOUS = "ambiguous"
    UNDEFINED = "undefined"


class StepType(enum.Enum):
    """The keyword a step was written with."""

    GIVEN = "given"
    WHEN = "when"
    THEN = "then"
    ANY = "any"


class ReportHandler(ABC):
    """Receives the events of a test run and reports them somewhere."""

    @abstractmethod
    def feature_start(self, feature_info: Any) -> None:
        """A feature begins."""

    @abstractmethod
    def feature_end(self, result: Result, feature_info: Any, duration: float) -> None:
        """A feature has finished."""

    @abstractmethod
    def rule_start(self, rule_info: Any) -> None:
        """A rule begins."""

    @abstractmethod
    def rule_end(self, result: Result, rule_info: Any, duration: float) -> None:
        """A rule has finished."""

    @abstractmethod
    def scenario_start(self, scenario_info: Any) -> None:
        """A scenario begins."""

    @abstractmethod
    def scenario_end(self, result: Result, scenario_info: Any, duration: float) -> None:
        """A scenario has finished."""

    @abstractmethod
    def step_skipped(self, step_info: Any) -> None:
        """A step was not run."""

    @abstractmethod
    def step_start(self, step_info: Any) -> None:
        """A step begins."""

    @abstractmethod
    def step_end(self, result: Result, step_info: Any, duration: float) -> None:
        """A step has finished."""

    @abstractmethod
    def failure(
        self,
        error: str,
        path: PathType = None,
        line: int | None = None,
        column: int | None = None,
    ) -> None:
        """An assertion failed."""

    @abstractmethod
    def error(
        self,
        error: str,
        path: PathType = None,
        line: int | None = None,
        column: int | None = None,
    ) -> None:
        """An unexpected error occurred."""

    @abstractmethod
    def trace(self, trace: str) -> None:
        """Free-form trace output."""

    @abstractmethod
    def summary(self, duration: float) -> None:
        """The whole run has finished."""


class Reporters:
    """Named report handlers, of which some are selected for use."""

    def __init__(self) -> None:
        self._available: dict[str, ReportHandler | None] = {}
        self._active: list[ReportHandler] = []

    def add(self, name: str, reporter: ReportHandler) -> None:
        """Make a handler available under a name, replacing any earlier one."""
        self._available[name] = reporter

    def use(self, name: str) -> None:
        """Activate the handler registered under ``name``.

        A handler can be activated once; the name stays listed afterwards.
        An unknown name is recorded without a handler and activates nothing.
        """
        reporter = self._available.get(name)
        self._available[name] = None
        if reporter is not None:
            self._active.append(reporter)

    def available_reporters(self) -> list[str]:
        """Return the registered names in sorted order."""
        return sorted(self._available)

    @property
    def active(self) -> list[ReportHandler]:
        """The handlers that receive events, in the order they were activated."""
        return self._active

    def _forward(self, method: str, *args: Any) -> None:
        for reporter in self._active:
            getattr(reporter, method)(*args)


class ScopeContext(Protocol):
    """What a running feature, rule, scenario or step exposes to reports."""

    info: Any
    execution_status: Result
    duration: float


class ContextSource(Protocol):
    """Supplies the contexts of the currently running program, feature and so on."""

    program_context: ScopeContext
    feature_context: ScopeContext
    rule_context: ScopeContext
    scenario_context: ScopeContext
    step_context: ScopeContext


class ReportForwarder(Reporters):
    """Forwards run events, taken from a context source, to every active handler."""

    def __init__(self, context_manager: ContextSource) -> None:
        super().__init__()
        self._contexts = context_manager

    @contextmanager
    def program_scope(self) -> Iterator[None]:
        """Run the program; the summary is reported when the scope closes."""
        try:
            yield
        finally:
            self._forward("summary", self._contexts.program_context.duration)

    @contextmanager
    def feature_scope(self) -> Iterator[None]:
        """Report the start and, on closing, the end of the current feature."""
        ctx = self._contexts.feature_context
        self._forward("feature_start", ctx.info)
        try:
            yield
        finally:
            self._forward("feature_end", ctx.execution_status, ctx.info, ctx.duration)

    @contextmanager
    def rule_scope(self) -> Iterator[None]:
        """Report the start and, on closing, the end of the current rule."""
        ctx = self._contexts.rule_context
        self._forward("rule_start", ctx.info)
        try:
            yield
        finally:
            self._forward("rule_end", ctx.execution_status, ctx.info, ctx.duration)

    @contextmanager
    def scenario_scope(self) -> Iterator[None]:
        """Report the start and, on closing, the end of the current scenario."""
        ctx = self._contexts.scenario_context
        self._forward("scenario_start", ctx.info)
        try:
            yield
        finally:
            self._forward("scenario_end", ctx.execution_status, ctx.info, ctx.duration)

    @contextmanager
    def step_scope(self) -> Iterator[None]:
        """Report the start and, on closing, the end of the current step."""
        ctx = self._contexts.step_context
        self._forward("step_start", ctx.info)
        try:
            yield
        finally:
            self._forward("step_end", ctx.execution_status, ctx.info, ctx.duration)

    def step_skipped(self) -> None:
        """Report that the current step was skipped."""
        self._forward("step_skipped", self._contexts.step_context.info)

    def failure(
        self,
        error: str,
        path: PathType = None,
        line: int | None = None,
        column: int | None = None,
    ) -> None:
        """Forward an assertion failure."""
        self._forward("failure", error, path, line, column)

    def error(
        self,
        error: str,
        path: PathType = None,
        line: int | None = None,
        column: int | None = None,
    ) -> None:
        """Forward an unexpected error."""
        self._forward("error", error, path, line, column)

    def trace(self, trace: str) -> None:
        """Forward trace output."""
        self._forward("trace", trace)

    def summary(self, duration: float) -> None:
        """Forward the end-of-run summary."""
        self._forward("summary", duration)
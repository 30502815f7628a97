"""A report handler that prints progress and a summary to the console."""

from __future__ import annotations

import sys
from typing import Any, TextIO

from cukeworks.report import PathType, ReportHandler, Result, StepType

_RED = "\x1b[1m\x1b[31m"
_GREEN = "\x1b[1m\x1b[32m"
_CYAN = "\x1b[1m\x1b[36m"
_DEFAULT = "\x1b[0m\x1b[39m"

_SUCCESS_TEXT = {
    Result.PASSED: "done",
    Result.SKIPPED: "skipped",
    Result.FAILED: "failed",
    Result.PENDING: "pending",
    Result.AMBIGUOUS: "ambiguous",
    Result.UNDEFINED: "undefined",
}

_STEP_TYPE_TEXT = {
    StepType.GIVEN: "Given",
    StepType.WHEN: "When",
    StepType.THEN: "Then",
}

_SCALES = (
    (1e-6, 1e9, "ns"),
    (1e-3, 1e6, "µs"),
    (1.0, 1e3, "ms"),
    (60.0, 1.0, "s"),
    (3600.0, 1.0 / 60.0, "min"),
)


def scaled_duration(duration: float) -> str:
    """Format a duration in seconds using the largest unit that keeps it above one."""
    for limit, factor, unit in _SCALES:
        if duration < limit:
            return f"{duration * factor:g}{unit}"
    return f"{duration / 3600.0:g}h"


def _quoted(text: str) -> str:
    escaped = text.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _location(kind: str, path: PathType, line: int | None, column: int | None) -> str:
    if path is not None and line is not None and column is not None:
        return f"\n{kind} @ ./{path}:{line}:{column}:"
    if path is not None and line is not None:
        return f"\n{kind} @ ./{path}:{line}:"
    return ""


class StdOutReport(ReportHandler):
    """Prints each step as it runs and a pass/fail summary at the end.

    Output goes to ``stream``, or to the current ``sys.stdout`` when none is given.
    """

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream
        self._nr_of_scenarios = 0
        self._failed_scenarios: list[Any] = []

    def _write(self, text: str) -> None:
        (self._stream if self._stream is not None else sys.stdout).write(text)

    def feature_start(self, feature_info: Any) -> None:
        pass

    def feature_end(self, result: Result, feature_info: Any, duration: float) -> None:
        pass

    def rule_start(self, rule_info: Any) -> None:
        self._write(f"\n{rule_info.title}")

    def rule_end(self, result: Result, rule_info: Any, duration: float) -> None:
        pass

    def scenario_start(self, scenario_info: Any) -> None:
        self._nr_of_scenarios += 1
        self._write(f"\n{scenario_info.title}")

    def scenario_end(self, result: Result, scenario_info: Any, duration: float) -> None:
        self._write("\n")
        if result is not Result.PASSED:
            self._failed_scenarios.append(scenario_info)

    def step_skipped(self, step_info: Any) -> None:
        keyword = _STEP_TYPE_TEXT[step_info.type]
        self._write(
            f"\n{_CYAN}{_SUCCESS_TEXT[Result.SKIPPED]} {keyword} {step_info.text}{_DEFAULT}"
        )

    def step_start(self, step_info: Any) -> None:
        self._write(f"\n{_STEP_TYPE_TEXT[step_info.type]} {step_info.text}")

    def step_end(self, result: Result, step_info: Any, duration: float) -> None:
        parts = [_GREEN if result is Result.PASSED else _RED, f"\n -> {_SUCCESS_TEXT[result]}"]
        if result is not Result.PASSED:
            feature_path = str(step_info.scenario_info.feature_info.path)
            parts.append(f" {_quoted(feature_path)}:{step_info.line}:{step_info.column}")
        parts.append(f" ({scaled_duration(duration)})")
        parts.append(_DEFAULT)
        self._write("".join(parts))

    def failure(
        self,
        error: str,
        path: PathType = None,
        line: int | None = None,
        column: int | None = None,
    ) -> None:
        self._write(f"{_RED}{_location('Failure', path, line, column)}\n{error}{_DEFAULT}")

    def error(
        self,
        error: str,
        path: PathType = None,
        line: int | None = None,
        column: int | None = None,
    ) -> None:
        self._write(f"{_RED}{_location('Error', path, line, column)}\n{error}{_DEFAULT}")

    def trace(self, trace: str) -> None:
        self._write(trace)

    def summary(self, duration: float) -> None:
        passed = self._nr_of_scenarios - len(self._failed_scenarios)
        lines = [
            "\n====================summary====================",
            f"\nduration: {scaled_duration(duration)}",
            f"\ntests   : {passed}/{self._nr_of_scenarios} passed",
        ]
        if self._failed_scenarios:
            lines.append("\n\nfailed tests:")
            lines.extend(
                f"\n{_quoted(str(info.path))}:{info.line}:{info.column} : {_quoted(info.title)}"
                for info in self._failed_scenarios
            )
        self._write("".join(lines))
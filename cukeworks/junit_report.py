"""A report handler that writes a JUnit-style XML file."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from os import PathLike
from pathlib import Path
from typing import Any, Union

from cukeworks.report import PathType, ReportHandler, Result
from cukeworks.support import InternalError

_PRECISION = 0.0000001

_SKIP_MESSAGES = {
    Result.SKIPPED: "Test is skipped due to previous errors.",
    Result.UNDEFINED: "Test is undefined.",
    Result.PENDING: "Test is pending.",
    Result.AMBIGUOUS: "Test result unkown.",
}


def _round_to(value: float, precision: float = _PRECISION) -> str:
    return f"{round(value / precision) * precision:.6f}"


def _located_text(error: str, kind: str, path: PathType, line: int | None, column: int | None) -> str:
    if path is not None and line is not None and column is not None:
        return f"\n{path}:{line}:{column}: {kind}\n{error}"
    return f"\n{error}"


class JunitReport(ReportHandler):
    """Collects features as test suites and scenarios as test cases.

    The XML file ``<output_folder>/<report_file>.xml`` is written by
    :meth:`close`, or on leaving a ``with`` block.
    """

    def __init__(self, output_folder: Union[str, "PathLike[str]"], report_file: str) -> None:
        self.output_folder = Path(output_folder)
        self.report_file = report_file

        self._testsuites = ET.Element("testsuites", {"name": "Test run", "time": "0"})
        self._testsuite: ET.Element | None = None
        self._testcase: ET.Element | None = None

        self._total_tests = 0
        self._total_failures = 0
        self._total_skipped = 0
        self._total_time = 0.0

        self._scenario_tests = 0
        self._scenario_failures = 0
        self._scenario_skipped = 0

        self._closed = False

    @property
    def output_file(self) -> Path:
        """The path of the XML file written on closing."""
        return self.output_folder / f"{self.report_file}.xml"

    def __enter__(self) -> JunitReport:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        """Write the totals and save the document; later calls do nothing."""
        if self._closed:
            return
        self._closed = True

        self._testsuites.set("tests", str(self._total_tests))
        self._testsuites.set("failures", str(self._total_failures))
        self._testsuites.set("skipped", str(self._total_skipped))
        self._testsuites.set("time", _round_to(self._total_time))

        try:
            self.output_folder.mkdir(parents=True, exist_ok=True)
            tree = ET.ElementTree(self._testsuites)
            ET.indent(tree, space="\t")
            tree.write(self.output_file, encoding="utf-8", xml_declaration=True)
        except OSError as ex:
            print(
                f"\nwhat():  {ex}\n"
                f"path1(): {ex.filename!r}\n"
                f"path2(): {ex.filename2!r}\n"
                f"code().value():    {ex.errno}\n"
                f"code().message():  {ex.strerror}\n"
                f"code().category(): {type(ex).__name__}"
            )

    def _current_suite(self) -> ET.Element:
        if self._testsuite is None:
            raise InternalError("no feature has been started")
        return self._testsuite

    def _current_case(self) -> ET.Element:
        if self._testcase is None:
            raise InternalError("no scenario has been started")
        return self._testcase

    def feature_start(self, feature_info: Any) -> None:
        self._testsuite = ET.SubElement(
            self._testsuites,
            "testsuite",
            {"name": feature_info.title, "file": str(feature_info.path)},
        )
        self._scenario_tests = 0
        self._scenario_failures = 0
        self._scenario_skipped = 0

    def feature_end(self, result: Result, feature_info: Any, duration: float) -> None:
        suite = self._current_suite()
        suite.set("time", _round_to(duration))

        self._total_tests += self._scenario_tests
        self._total_failures += self._scenario_failures
        self._total_skipped += self._scenario_skipped

        suite.set("tests", str(self._scenario_tests))
        suite.set("failures", str(self._scenario_failures))
        suite.set("skipped", str(self._scenario_skipped))

    def rule_start(self, rule_info: Any) -> None:
        pass

    def rule_end(self, result: Result, rule_info: Any, duration: float) -> None:
        pass

    def scenario_start(self, scenario_info: Any) -> None:
        self._testcase = ET.SubElement(self._current_suite(), "testcase", {"name": scenario_info.title})
        self._scenario_tests += 1

    def scenario_end(self, result: Result, scenario_info: Any, duration: float) -> None:
        case = self._current_case()
        case.set("time", _round_to(duration))

        if result is Result.FAILED:
            self._scenario_failures += 1
        elif result is not Result.PASSED:
            self._scenario_skipped += 1
            ET.SubElement(case, "skipped", {"message": _SKIP_MESSAGES[result]})

        self._total_time += duration

    def step_skipped(self, step_info: Any) -> None:
        pass

    def step_start(self, step_info: Any) -> None:
        pass

    def step_end(self, result: Result, step_info: Any, duration: float) -> None:
        pass

    def failure(
        self,
        error: str,
        path: PathType = None,
        line: int | None = None,
        column: int | None = None,
    ) -> None:
        node = ET.SubElement(self._current_case(), "failure", {"message": error})
        node.text = _located_text(error, "Failure", path, line, column)

    def error(
        self,
        error: str,
        path: PathType = None,
        line: int | None = None,
        column: int | None = None,
    ) -> None:
        node = ET.SubElement(self._current_case(), "error", {"message": error})
        node.text = _located_text(error, "Error", path, line, column)

    def trace(self, trace: str) -> None:
        pass

    def summary(self, duration: float) -> None:
        pass
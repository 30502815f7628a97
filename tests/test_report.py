from types import SimpleNamespace

import pytest

from cukeworks.report import ReportForwarder, ReportHandler, Reporters, Result, StepType


class Recorder(ReportHandler):
    def __init__(self, log=None, tag="r"):
        self.log = log if log is not None else []
        self.tag = tag

    def _record(self, name, *args):
        self.log.append((self.tag, name, args))

    def feature_start(self, feature_info):
        self._record("feature_start", feature_info)

    def feature_end(self, result, feature_info, duration):
        self._record("feature_end", result, feature_info, duration)

    def rule_start(self, rule_info):
        self._record("rule_start", rule_info)

    def rule_end(self, result, rule_info, duration):
        self._record("rule_end", result, rule_info, duration)

    def scenario_start(self, scenario_info):
        self._record("scenario_start", scenario_info)

    def scenario_end(self, result, scenario_info, duration):
        self._record("scenario_end", result, scenario_info, duration)

    def step_skipped(self, step_info):
        self._record("step_skipped", step_info)

    def step_start(self, step_info):
        self._record("step_start", step_info)

    def step_end(self, result, step_info, duration):
        self._record("step_end", result, step_info, duration)

    def failure(self, error, path=None, line=None, column=None):
        self._record("failure", error, path, line, column)

    def error(self, error, path=None, line=None, column=None):
        self._record("error", error, path, line, column)

    def trace(self, trace):
        self._record("trace", trace)

    def summary(self, duration):
        self._record("summary", duration)


def make_contexts():
    def ctx(info, status, duration):
        return SimpleNamespace(info=info, execution_status=status, duration=duration)

    return SimpleNamespace(
        program_context=ctx("program", Result.PASSED, 9.0),
        feature_context=ctx("feature", Result.PASSED, 4.0),
        rule_context=ctx("rule", Result.FAILED, 3.0),
        scenario_context=ctx("scenario", Result.FAILED, 2.0),
        step_context=ctx("step", Result.UNDEFINED, 1.0),
    )


@pytest.fixture
def forwarder():
    fwd = ReportForwarder(make_contexts())
    recorder = Recorder()
    fwd.add("console", recorder)
    fwd.use("console")
    return fwd, recorder


def test_report_handler_is_abstract():
    with pytest.raises(TypeError):
        ReportHandler()


def test_every_result_is_forwarded_at_step_end():
    contexts = make_contexts()
    fwd = ReportForwarder(contexts)
    recorder = Recorder()
    fwd.add("console", recorder)
    fwd.use("console")
    for result in Result:
        contexts.step_context.execution_status = result
        with fwd.step_scope():
            pass
    ends = [args[0].name for _, name, args in recorder.log if name == "step_end"]
    assert ends == ["PASSED", "SKIPPED", "FAILED", "PENDING", "AMBIGUOUS", "UNDEFINED"]
    assert [s.name for s in StepType] == ["GIVEN", "WHEN", "THEN", "ANY"]


def test_available_reporters_sorted():
    reporters = Reporters()
    reporters.add("junit", Recorder())
    reporters.add("console", Recorder())
    assert reporters.available_reporters() == ["console", "junit"]


def test_use_activates_once():
    reporters = Reporters()
    recorder = Recorder()
    reporters.add("console", recorder)
    reporters.use("console")
    reporters.use("console")
    assert reporters.active == [recorder]
    assert reporters.available_reporters() == ["console"]


def test_use_unknown_name_activates_nothing():
    reporters = Reporters()
    reporters.use("missing")
    assert reporters.active == []
    assert reporters.available_reporters() == ["missing"]


def test_add_replaces_same_name():
    reporters = Reporters()
    first, second = Recorder(), Recorder()
    reporters.add("console", first)
    reporters.add("console", second)
    reporters.use("console")
    assert reporters.active == [second]


def test_unused_reporter_receives_nothing():
    fwd = ReportForwarder(make_contexts())
    recorder = Recorder()
    fwd.add("console", recorder)
    fwd.trace("hello")
    assert recorder.log == []


def test_nested_scopes_order(forwarder):
    fwd, recorder = forwarder
    with fwd.program_scope():
        with fwd.feature_scope():
            with fwd.rule_scope():
                with fwd.scenario_scope():
                    with fwd.step_scope():
                        pass
    names = [name for _, name, _ in recorder.log]
    assert names == [
        "feature_start", "rule_start", "scenario_start", "step_start",
        "step_end", "scenario_end", "rule_end", "feature_end", "summary",
    ]


def test_scope_end_carries_context_values(forwarder):
    fwd, recorder = forwarder
    with fwd.scenario_scope():
        pass
    assert recorder.log == [
        ("r", "scenario_start", ("scenario",)),
        ("r", "scenario_end", (Result.FAILED, "scenario", 2.0)),
    ]


def test_program_scope_reports_summary(forwarder):
    fwd, recorder = forwarder
    with fwd.program_scope():
        assert recorder.log == []
    assert recorder.log == [("r", "summary", (9.0,))]


def test_scope_end_reported_on_exception(forwarder):
    fwd, recorder = forwarder
    with pytest.raises(ValueError):
        with fwd.step_scope():
            raise ValueError("boom")
    assert [name for _, name, _ in recorder.log] == ["step_start", "step_end"]


def test_end_uses_status_at_close():
    contexts = make_contexts()
    fwd = ReportForwarder(contexts)
    recorder = Recorder()
    fwd.add("console", recorder)
    fwd.use("console")
    with fwd.step_scope():
        contexts.step_context.execution_status = Result.PASSED
        contexts.step_context.duration = 5.0
    assert recorder.log[-1] == ("r", "step_end", (Result.PASSED, "step", 5.0))


def test_step_skipped(forwarder):
    fwd, recorder = forwarder
    fwd.step_skipped()
    assert recorder.log == [("r", "step_skipped", ("step",))]


def test_failure_and_error_forwarded(forwarder):
    fwd, recorder = forwarder
    fwd.failure("bad", "a.feature", 3, 7)
    fwd.error("worse")
    assert recorder.log == [
        ("r", "failure", ("bad", "a.feature", 3, 7)),
        ("r", "error", ("worse", None, None, None)),
    ]


def test_trace_and_summary_forwarded(forwarder):
    fwd, recorder = forwarder
    fwd.trace("text")
    fwd.summary(1.5)
    assert recorder.log == [("r", "trace", ("text",)), ("r", "summary", (1.5,))]


def test_forwarded_to_all_active_in_order():
    log = []
    fwd = ReportForwarder(make_contexts())
    fwd.add("b", Recorder(log, "b"))
    fwd.add("a", Recorder(log, "a"))
    fwd.use("b")
    fwd.use("a")
    fwd.trace("x")
    assert [tag for tag, _, _ in log] == ["b", "a"]
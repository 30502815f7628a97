# cukeworks

Building blocks for running Gherkin-style (Given/When/Then) tests. The
package has no third-party dependencies.

- **`cukeworks.context`**: scoped key/value storage. A child context sees
  the values of its parent and can shadow them. It never writes into the
  parent. `ThreadSafeContextStorageFactory` makes every access hold a
  re-entrant lock.
- **`cukeworks.support`**: three helpers.
  - `InternalError` records where it was raised.
  - `tags_to_set` turns tag objects into a set of their `name`s.
  - `set_up_tear_down` is a context manager that calls a fixture's `set_up()`
    before a block and `tear_down()` after it.
- **`cukeworks.report`**: the reporting interface.
  - The `Result` and `StepType` enums.
  - The abstract `ReportHandler`.
  - `Reporters`, a registry of named handlers.
  - `ReportForwarder`, which sends every event to all active handlers. It
    offers context managers for the program, feature, rule, scenario and
    step scopes.
- **`cukeworks.junit_report`**: `JunitReport`, which writes a JUnit XML file.
- **`cukeworks.stdout_report`**: `StdOutReport`, a coloured console report
  with a summary, and `scaled_duration` for readable durations.

## Installing

```
pip install cukeworks
```

## Context

```python
from cukeworks.context import Context, ContextStorageFactory

program = Context(ContextStorageFactory())
scenario = program.child()

program.insert_at("answer", 42)
assert scenario.contains("answer")

scenario.insert_at("answer", 7)      # shadows the parent's value
assert scenario.get("answer") == 7
assert program.get("answer") == 42
```

Values can be keyed by type or by any hashable name:

- `emplace(cls, *args, **kwargs)` builds an instance and stores it under
  `cls`.
- `emplace_as(key_type, cls, ...)` stores the instance under another type.
- `emplace_at(key, cls, ...)` stores it under any key.
- `insert`, `insert_as` and `insert_at` store a shallow copy of a value.
- `insert_ref`, `insert_ref_as` and `insert_ref_at` store the object itself.
- `set_shared(value, key=None)` stores the object under its type, or under
  `key` when one is given.
- `clear(key)` removes a key from this context only.

Looking up a missing key with `get` raises `KeyNotFound`, which is a
`LookupError`. The missing key is also printed to standard error.

## Reporting

Durations are given in seconds, as floats.

```python
from cukeworks.report import ReportForwarder
from cukeworks.stdout_report import StdOutReport
from cukeworks.junit_report import JunitReport

forwarder = ReportForwarder(contexts)
forwarder.add("console", StdOutReport())
forwarder.add("junit", JunitReport("out", "results"))
forwarder.use("console")
forwarder.use("junit")

with forwarder.program_scope():
    with forwarder.feature_scope():
        with forwarder.scenario_scope():
            with forwarder.step_scope():
                ...
```

`contexts` is any object with the attributes `program_context`,
`feature_context`, `rule_context`, `scenario_context` and `step_context`.
Each of these has the attributes `info`, `execution_status` (a `Result`)
and `duration`.

Each scope reports its start on entry and its end on exit. The program
scope reports only the summary on exit. `available_reporters()` lists the
registered names in sorted order. A registered handler can be activated
with `use` once.

The handlers read these attributes from the info objects they receive:

- A feature: `title` and `path`.
- A scenario: `title`, plus `path`, `line` and `column` for the console
  summary.
- A step: `type` (a `StepType`), `text`, `line`, `column` and
  `scenario_info.feature_info.path`.

`StdOutReport(stream=None)` writes to the given stream, or to `sys.stdout`
when none is given.

`JunitReport(output_folder, report_file)` writes
`<output_folder>/<report_file>.xml`. The file is written when `close()` is
called or when a `with` block is left. Each feature becomes a `testsuite`
and each scenario a `testcase`.

## What this package does not do

The package does not:

- read `.feature` files or parse Gherkin,
- keep a registry of step definitions or hooks,
- evaluate tag expressions,
- provide a command that runs tests.

It supplies the context storage and the reporting that such a runner
would use.
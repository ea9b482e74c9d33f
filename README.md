# ttpforge

Building blocks for running Tactics, Techniques, and Procedures (TTPs)
during purple team engagements. Everything is a plain Python library with
no third-party dependencies.

## Modules

- **`ttpforge.args`**: declare TTP arguments with `ArgSpec` (`name`,
  `type` of `""`/`"string"`, `"int"` or `"bool"`, `default`, `choices`) and
  turn `NAME=VALUE` strings into typed values with
  `parse_and_validate(specs, arg_kv_strs)`. Defaults are applied first and
  overridden by supplied values; unknown names, duplicate specs, values
  outside `choices`, values of the wrong type and missing required
  arguments raise `ArgumentError`.
- **`ttpforge.paths`**:
  - `fetch_abs(path, workdir)` expands `~/` to the home directory, keeps
    absolute paths and resolves other paths against `workdir`; an empty
    path raises `ValueError`.
  - `find_file_path(path, workdir, fs_root=None)` returns the path of an
    existing file, looked up beneath `fs_root` when it is given, and raises
    `FileNotFoundError` otherwise.
  - `fetch_env(environ)` turns a mapping into `KEY=VALUE` strings.
- **`ttpforge.actions`**: the abstract `Action` base class (`execute`,
  `validate`, `is_nil`, `default_cleanup_action`) and the `ActResult`
  record (`stdout`, `stderr`, `outputs`) that every step returns.
- **`ttpforge.context`**: `ExecutionConfig` (`dry_run`, `no_cleanup`,
  `cleanup_delay_seconds`, `args`, `repo`, `stdout`, `stderr`) and
  `ExecutionContext` (`cfg`, `work_dir`, `step_results`, a mapping of step
  names to `ActResult`). `ExecutionContext.expand_variables(in_strs)`
  replaces `$forge.steps.<name>.stdout` and
  `$forge.steps.<name>.outputs.<key>`; write `$$forge.` to keep a literal
  `$forge.`. Bad references raise `VariableExpansionError`.

## Steps

Each step is an `Action`: call `validate(exec_ctx)` to check its
definition, then `execute(exec_ctx)` to do the work and get an `ActResult`.

- **`BasicStep`** (`ttpforge.basicstep`): feeds `inline` on standard input
  to `executor` (`bash` by default, run with `-o errexit`; also e.g. `sh`,
  `python3`, `ruby`), with extra variables from `environment`. Variables in
  the script and environment are expanded first. Output is written to the
  context's `stdout`/`stderr` streams (or the process's own) and returned in
  the result; a non-zero exit raises `subprocess.CalledProcessError`.
- **`CreateFileStep`** (`ttpforge.createfile`): writes `contents` to
  `path` with an optional `mode`; an existing file raises
  `FileExistsError` unless `overwrite` is set.
- **`EditStep`** (`ttpforge.editstep`): applies a list of `Edit`
  find-and-replace pairs (`old`, `new`, and `regexp` to treat `old` as a
  regular expression, with `$name` / `${name}` group references in `new`)
  to `file_to_edit`, optionally saving the original to `backup_file`. A
  pattern that is not found raises `ValueError`.
- **`FetchURIStep`** (`ttpforge.fetchuri`): downloads `fetch_uri` to
  `location`, optionally through `proxy`; an existing file raises
  `FileExistsError` unless `overwrite` is set. `cleanup(exec_ctx)` runs the
  same download.

`CreateFileStep`, `EditStep` and `FetchURIStep` accept `fs_root`, a
directory under which their paths are placed instead of the real
filesystem locations.

## Example

```python
from ttpforge.args import ArgSpec, parse_and_validate

specs = [ArgSpec(name="alpha"), ArgSpec(name="beta", type="int", default="1337")]
print(parse_and_validate(specs, ["alpha=foo"]))
# {'alpha': 'foo', 'beta': 1337}
```

```python
from ttpforge.actions import ActResult
from ttpforge.context import ExecutionContext

ctx = ExecutionContext(step_results={"first_step": ActResult(stdout="hello")})
print(ctx.expand_variables(["first: $forge.steps.first_step.stdout"]))
# ['first: hello']
```

## What it does not do

The package has no command-line program. It does not read TTP definitions
from YAML files, run a whole TTP's steps in order with their cleanups,
manage repositories of TTPs, or parse named outputs from a step's standard
output; `BasicStep` results carry the captured output only.

## Installing

```
pip install .
```

Install the test extra with `pip install .[test]` and run `pytest`.
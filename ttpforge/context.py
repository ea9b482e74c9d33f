"""Execution configuration and context, including variable expansion."""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any, TextIO

from .actions import ActResult

_CONTEXT_VARIABLE_PREFIX = "$forge."
_VARIABLE_RE = re.compile(
    r"\$*" + re.escape(_CONTEXT_VARIABLE_PREFIX) + r"[\w.]*", re.ASCII
)


class VariableExpansionError(ValueError):
    """Raised when a ``$forge.`` variable expression cannot be expanded."""


@dataclass
class ExecutionConfig:
    """Options that control how a TTP is executed."""

    dry_run: bool = False
    no_cleanup: bool = False
    cleanup_delay_seconds: int = 0
    args: dict[str, Any] = field(default_factory=dict)
    repo: Any = None
    stdout: TextIO | None = None
    stderr: TextIO | None = None


@dataclass
class ExecutionContext:
    """Configuration and state of the currently executing TTP."""

    cfg: ExecutionConfig = field(default_factory=ExecutionConfig)
    work_dir: str = ""
    step_results: dict[str, ActResult] = field(default_factory=dict)

    def expand_variables(self, in_strs: Iterable[str]) -> list[str]:
        """Expand ``$forge.steps.<name>.stdout`` and ``.outputs.<key>`` references.

        ``$$forge.`` escapes a reference, dropping one leading ``$``.
        """
        return [self._expand_one(text) for text in in_strs]

    def _expand_one(self, text: str) -> str:
        failure: tuple[str, VariableExpansionError] | None = None

        def replace(match: re.Match[str]) -> str:
            nonlocal failure
            try:
                return self._process_match(match.group(0))
            except VariableExpansionError as exc:
                failure = (match.group(0), exc)
                return ""

        expanded = _VARIABLE_RE.sub(replace, text)
        if failure is not None:
            bad_match, exc = failure
            raise VariableExpansionError(
                f"invalid variable expression {bad_match}: {exc}"
            ) from exc
        return expanded

    def _process_match(self, match: str) -> str:
        if match.startswith("$$"):
            return match[1:]
        specifier = match.removeprefix(_CONTEXT_VARIABLE_PREFIX)
        tokens = specifier.split(".")
        if any(token == "" for token in tokens):
            raise VariableExpansionError("leading or trailing '.' in variable expression")
        if len(tokens) < 2:
            raise VariableExpansionError(f"invalid variable expression: {match}")

        prefix, path = tokens[0], ".".join(tokens[1:])
        if prefix == "steps":
            return self._process_steps_variable(path)
        raise VariableExpansionError(f"invalid variable prefix: {prefix}")

    def _process_steps_variable(self, path: str) -> str:
        tokens = path.split(".")
        full_ref = "steps." + path
        if len(tokens) < 2:
            raise VariableExpansionError(f"invalid step result reference: {full_ref}")

        step_name = tokens[0]
        result = self.step_results.get(step_name)
        if result is None:
            raise VariableExpansionError(f"invalid step name in variable path: {full_ref}")

        selector = tokens[1]
        if selector == "stdout":
            if len(tokens) != 2:
                raise VariableExpansionError(
                    f"invalid step result reference (should end at stdout): {full_ref}"
                )
            return result.stdout
        if selector == "outputs":
            if len(tokens) != 3:
                raise VariableExpansionError(
                    f"step output reference {full_ref} should be exactly one level deep "
                    "(e.g. steps.foo.outputs.bar)"
                )
            key = tokens[2]
            if key not in result.outputs:
                raise VariableExpansionError(
                    f"key {key} not found in output of step {step_name}"
                )
            return result.outputs[key]
        raise VariableExpansionError(f"invalid step result field selector: {selector}")
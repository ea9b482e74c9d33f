"""Argument specifications for TTPs and validation of command-line values."""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any

_INT_RE = re.compile(r"[+-]?[0-9]+")
_INT_MIN = -(2**63)
_INT_MAX = 2**63 - 1

_TRUE_STRINGS = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE_STRINGS = frozenset({"0", "f", "F", "FALSE", "false", "False"})


class ArgumentError(ValueError):
    """Raised when argument specifications or supplied values are invalid."""


@dataclass
class ArgSpec:
    """A command-line argument accepted by a TTP."""

    name: str
    type: str = ""
    default: str = ""
    choices: list[str] = field(default_factory=list)

    def validate_choice_types(self) -> None:
        """Check that every choice converts to the declared type."""
        for choice in self.choices:
            self.convert(choice)

    def is_valid_choice(self, value: str) -> bool:
        """Return whether ``value`` is allowed by the choices (if any)."""
        return not self.choices or value in self.choices

    def convert(self, value: str) -> Any:
        """Convert a raw string value to this argument's declared type."""
        if self.type in ("", "string"):
            return value
        if self.type == "int":
            if not _INT_RE.fullmatch(value):
                raise ArgumentError("non-integer value provided")
            number = int(value)
            if not _INT_MIN <= number <= _INT_MAX:
                raise ArgumentError("non-integer value provided")
            return number
        if self.type == "bool":
            if value in _TRUE_STRINGS:
                return True
            if value in _FALSE_STRINGS:
                return False
            raise ArgumentError("no-boolean value provided")
        raise ArgumentError(
            f"invalid type {self.type} specified in configuration for argument {self.name}"
        )


def parse_and_validate(
    specs: Sequence[ArgSpec], arg_kv_strs: Iterable[str]
) -> dict[str, Any]:
    """Check ``NAME=VALUE`` strings against ``specs`` and return typed values.

    Defaults from the specs are applied first and overridden by supplied
    values. Raises :class:`ArgumentError` on any problem.
    """
    processed: dict[str, Any] = {}
    specs_by_name: dict[str, ArgSpec] = {}

    for spec in specs:
        if spec.name == "":
            raise ArgumentError("argument name cannot be empty")

        try:
            spec.validate_choice_types()
        except ArgumentError as exc:
            raise ArgumentError(f"failed to validate types of choice values: {exc}") from exc

        if spec.default != "":
            if not spec.is_valid_choice(spec.default):
                raise ArgumentError(
                    f"invalid default value: {spec.default}, "
                    f"allowed values: {', '.join(spec.choices)} "
                )
            try:
                processed[spec.name] = spec.convert(spec.default)
            except ArgumentError as exc:
                raise ArgumentError(f"default value type does not match spec: {exc}") from exc

        if spec.name in specs_by_name:
            raise ArgumentError(f"duplicate argument name: {spec.name}")
        specs_by_name[spec.name] = spec

    for kv in arg_kv_strs:
        name, sep, value = kv.partition("=")
        if not sep:
            raise ArgumentError(f"invalid argument specification string: {kv}")

        spec = specs_by_name.get(name)
        if spec is None:
            raise ArgumentError(f"received unexpected argument: {name} ")

        if not spec.is_valid_choice(value):
            raise ArgumentError(
                f"received unexpected value: {value}, "
                f"allowed values: {', '.join(spec.choices)} "
            )

        try:
            processed[name] = spec.convert(value)
        except ArgumentError as exc:
            raise ArgumentError(
                f"failed to process value '{value}' specified for argument '{name}': {exc}"
            ) from exc

    for spec in specs:
        if spec.name not in processed:
            raise ArgumentError(
                f"value for required argument '{spec.name}' was not provided "
                "and no default value was specified"
            )
    return processed
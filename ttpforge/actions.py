"""The action interface shared by all step types, and their results."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .context import ExecutionContext


@dataclass
class ActResult:
    """What an action produced: captured output and named outputs."""

    stdout: str = ""
    stderr: str = ""
    outputs: dict[str, str] = field(default_factory=dict)


class Action(ABC):
    """An action that can run as a step or as a cleanup."""

    @abstractmethod
    def execute(self, exec_ctx: ExecutionContext) -> ActResult:
        """Run the action and return its result."""

    @abstractmethod
    def validate(self, exec_ctx: ExecutionContext) -> None:
        """Check the action's configuration, raising on any problem."""

    @abstractmethod
    def is_nil(self) -> bool:
        """Return whether the action is empty or unconfigured."""

    def default_cleanup_action(self) -> Action | None:
        """Return the cleanup that undoes this action, if it has one."""
        return None
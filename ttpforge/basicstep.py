"""A step that runs an inline script through an interpreter."""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import sys
from dataclasses import dataclass, field
from typing import TextIO

from .actions import Action, ActResult
from .context import ExecutionContext
from .paths import fetch_env

logger = logging.getLogger(__name__)

EXECUTOR_PYTHON = "python3"
EXECUTOR_BASH = "bash"
EXECUTOR_SH = "sh"
EXECUTOR_POWERSHELL = "powershell"
EXECUTOR_RUBY = "ruby"
EXECUTOR_BINARY = "binary"
EXECUTOR_CMD = "cmd.exe"

_TIMEOUT_SECONDS = 100 * 60


def _env_list_to_dict(entries: list[str]) -> dict[str, str]:
    """Turn ``KEY=VALUE`` strings into a mapping; later keys win."""
    env: dict[str, str] = {}
    for entry in entries:
        key, sep, value = entry.partition("=")
        if sep:
            env[key] = value
    return env


def _emit(text: str, stream: TextIO | None, fallback: TextIO) -> None:
    if not text:
        return
    target = stream if stream is not None else fallback
    target.write(text)
    target.flush()


@dataclass
class BasicStep(Action):
    """Run ``inline`` by feeding it to ``executor`` on standard input."""

    inline: str = ""
    executor: str = ""
    environment: dict[str, str] = field(default_factory=dict)

    def is_nil(self) -> bool:
        return self.inline == ""

    def validate(self, exec_ctx: ExecutionContext) -> None:
        if self.inline == "":
            raise ValueError("inline must be provided")

        if self.executor == "":
            logger.debug("defaulting to bash since executor was not provided")
            self.executor = EXECUTOR_BASH

        if self.executor == EXECUTOR_BINARY:
            return

        if shutil.which(self.executor) is None:
            raise FileNotFoundError(
                f'exec: "{self.executor}": executable file not found in $PATH'
            )
        logger.debug("command found in path: %s", self.executor)

    def execute(self, exec_ctx: ExecutionContext) -> ActResult:
        logger.info("========= Executing ==========")
        if self.inline == "":
            raise ValueError("empty inline value in Execute(...)")
        result = self._run(exec_ctx)
        logger.info("========= Done ==========")
        return result

    def _command(self) -> list[str]:
        executor = self.executor or EXECUTOR_BASH
        if executor == EXECUTOR_BASH:
            return [executor, "-o", "errexit"]
        return [executor]

    def _run(self, exec_ctx: ExecutionContext) -> ActResult:
        (script,) = exec_ctx.expand_variables([self.inline])

        env_entries = fetch_env(self.environment) + [
            f"{key}={value}" for key, value in os.environ.items()
        ]
        env = _env_list_to_dict(exec_ctx.expand_variables(env_entries))

        completed = subprocess.run(
            self._command(),
            input=script,
            capture_output=True,
            text=True,
            env=env,
            cwd=exec_ctx.work_dir or None,
            timeout=_TIMEOUT_SECONDS,
            check=False,
        )

        _emit(completed.stdout, exec_ctx.cfg.stdout, sys.stdout)
        _emit(completed.stderr, exec_ctx.cfg.stderr, sys.stderr)

        if completed.returncode != 0:
            raise subprocess.CalledProcessError(
                completed.returncode,
                completed.args,
                output=completed.stdout,
                stderr=completed.stderr,
            )
        return ActResult(stdout=completed.stdout, stderr=completed.stderr)
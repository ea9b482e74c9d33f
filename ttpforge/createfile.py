"""A step that creates a file with given contents."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from .actions import Action, ActResult
from .context import ExecutionContext

logger = logging.getLogger(__name__)


def _within(root: str, path: str) -> str:
    return os.path.join(root, path.lstrip("/" + os.sep))


def _exists(path: str) -> bool:
    try:
        os.stat(path)
    except FileNotFoundError:
        return False
    return True


@dataclass
class CreateFileStep(Action):
    """Create a file and fill it with ``contents``.

    With ``fs_root`` set, ``path`` is placed beneath that directory and any
    missing parent directories are created.
    """

    path: str = ""
    contents: str = ""
    overwrite: bool = False
    mode: int = 0
    fs_root: str | None = None

    def is_nil(self) -> bool:
        return self.path == ""

    def validate(self, exec_ctx: ExecutionContext) -> None:
        if self.path == "":
            raise ValueError("path field cannot be empty")

    def execute(self, exec_ctx: ExecutionContext) -> ActResult:
        logger.info("Creating file %s", self.path)
        if self.fs_root is not None:
            target = _within(self.fs_root, self.path)
            parent = os.path.dirname(target)
            if parent:
                os.makedirs(parent, exist_ok=True)
        else:
            target = self.path

        if _exists(target) and not self.overwrite:
            raise FileExistsError(
                f"path {self.path} already exists and overwrite was not set"
            )

        mode = self.mode or 0o666
        fd = os.open(target, os.O_WRONLY | os.O_CREAT, mode)
        with os.fdopen(fd, "wb") as handle:
            handle.write(self.contents.encode())
        return ActResult()
"""A step that applies find-and-replace edits to a file."""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field

from .actions import Action, ActResult
from .context import ExecutionContext
from .paths import fetch_abs

logger = logging.getLogger(__name__)

_TEMPLATE_RE = re.compile(r"\$(?:(\$)|\{(\w+)\}|(\w+))", re.ASCII)


def _within(root: str, path: str) -> str:
    return os.path.join(root, path.lstrip("/" + os.sep))


def _expand_template(template: str, match: re.Match[str]) -> str:
    """Expand ``$name``, ``${name}`` and ``$$`` in ``template`` from ``match``."""

    def replace(ref: re.Match[str]) -> str:
        if ref.group(1):
            return "$"
        name = ref.group(2) or ref.group(3)
        try:
            value = match.group(int(name) if name.isdigit() else name)
        except IndexError:
            return ""
        return value or ""

    return _TEMPLATE_RE.sub(replace, template)


def _read(path: str) -> str:
    with open(path, encoding="utf-8", errors="surrogateescape", newline="") as handle:
        return handle.read()


def _write(path: str, text: str) -> None:
    with open(
        path, "w", encoding="utf-8", errors="surrogateescape", newline=""
    ) as handle:
        handle.write(text)


@dataclass
class Edit:
    """A single find-and-replace pair; ``old`` is a regex when ``regexp`` is set."""

    old: str = ""
    new: str = ""
    regexp: bool = False
    _pattern: re.Pattern[str] | None = field(
        default=None, init=False, repr=False, compare=False
    )

    def _compile(self) -> re.Pattern[str]:
        source = self.old if self.regexp else re.escape(self.old)
        self._pattern = re.compile(source)
        return self._pattern


@dataclass
class EditStep(Action):
    """One or more edits to a file, optionally saving a backup first.

    With ``fs_root`` set, the file and backup are looked up beneath it.
    """

    file_to_edit: str = ""
    edits: list[Edit] = field(default_factory=list)
    fs_root: str | None = None
    backup_file: str = ""

    def is_nil(self) -> bool:
        return self.file_to_edit == ""

    def validate(self, exec_ctx: ExecutionContext) -> None:
        if not self.edits:
            raise ValueError("no edits specified")
        for number, edit in enumerate(self.edits, start=1):
            if edit.old == "":
                raise ValueError(f"edit #{number} is missing 'old:'")
            if edit.new == "":
                raise ValueError(f"edit #{number} is missing 'new:'")
            try:
                edit._compile()
            except re.error as exc:
                raise ValueError(f"edit #{number} has invalid regex for 'old:'") from exc

    def execute(self, exec_ctx: ExecutionContext) -> ActResult:
        if self.fs_root is None:
            target = fetch_abs(self.file_to_edit, exec_ctx.work_dir)
            backup = self.backup_file
        else:
            target = _within(self.fs_root, self.file_to_edit)
            backup = _within(self.fs_root, self.backup_file) if self.backup_file else ""

        contents = _read(target)

        if backup:
            try:
                _write(backup, contents)
            except OSError as exc:
                raise OSError(
                    f"could not write backup file {self.backup_file}: {exc}"
                ) from exc

        for number, edit in enumerate(self.edits, start=1):
            pattern = edit._pattern or edit._compile()
            if pattern.search(contents) is None:
                raise ValueError(
                    f"pattern '{edit.old}' from edit #{number} "
                    f"was not found in file {self.file_to_edit}"
                )
            contents = pattern.sub(lambda m, e=edit: _expand_template(e.new, m), contents)

        _write(target, contents)
        logger.debug("edited file %s", target)
        return ActResult()
import stat

import pytest

from ttpforge.context import ExecutionContext
from ttpforge.createfile import CreateFileStep


def _resolve(root, path):
    return root / path.lstrip("/")


@pytest.mark.parametrize(
    "step, existing",
    [
        (CreateFileStep(path="valid-file.txt", contents="hello world"), None),
        (
            CreateFileStep(path="/directory/does/not/exist", contents="should still work"),
            None,
        ),
        (
            CreateFileStep(
                path="already-exists.txt", contents="will succeed", overwrite=True
            ),
            {"already-exists.txt": b"whoops"},
        ),
        (
            CreateFileStep(path="make-read-only", contents="very-read-only", mode=0o400),
            None,
        ),
    ],
    ids=["valid", "nested-dirs", "overwrite", "read-only"],
)
def test_create_file_execute(tmp_path, step, existing):
    for name, data in (existing or {}).items():
        (tmp_path / name).write_bytes(data)
    step.fs_root = str(tmp_path)

    step.execute(ExecutionContext())

    target = _resolve(tmp_path, step.path)
    assert target.read_text() == step.contents
    if step.mode:
        assert stat.S_IMODE(target.stat().st_mode) == step.mode


def test_already_exists_without_overwrite(tmp_path):
    (tmp_path / "already-exists.txt").write_bytes(b"whoops")
    step = CreateFileStep(
        path="already-exists.txt", contents="will fail", fs_root=str(tmp_path)
    )
    with pytest.raises(FileExistsError):
        step.execute(ExecutionContext())
    assert (tmp_path / "already-exists.txt").read_bytes() == b"whoops"


def test_create_on_real_filesystem(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    step = CreateFileStep(path="real.txt", contents="hello world")
    result = step.execute(ExecutionContext())
    assert result.stdout == ""
    assert result.outputs == {}
    assert (tmp_path / "real.txt").read_text() == "hello world"


def test_validate_requires_path():
    with pytest.raises(ValueError, match="path field cannot be empty"):
        CreateFileStep().validate(ExecutionContext())


def test_is_nil():
    assert CreateFileStep().is_nil() is True
    assert CreateFileStep(path="x").is_nil() is False
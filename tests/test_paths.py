import os

import pytest

from ttpforge.paths import fetch_abs, fetch_env, find_file_path


def test_fetch_abs_absolute():
    assert fetch_abs("/tmp", "") == "/tmp"


def test_fetch_abs_home(monkeypatch, tmp_path):
    monkeypatch.setenv("HOME", str(tmp_path))
    assert os.path.normpath(fetch_abs("~/", "")) == str(tmp_path)


def test_fetch_abs_home_subpath(monkeypatch, tmp_path):
    monkeypatch.setenv("HOME", str(tmp_path))
    assert fetch_abs("~/a/b.txt", "/ignored") == str(tmp_path / "a" / "b.txt")


def test_fetch_abs_relative(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    cwd = os.getcwd()
    assert fetch_abs("test_directory", ".") == os.path.join(cwd, "test_directory")


def test_fetch_abs_empty_path():
    with pytest.raises(ValueError, match="empty path provided"):
        fetch_abs("", "")


def test_fetch_abs_dot_prefix():
    assert fetch_abs("./test_directory", "/tmp") == "/tmp/test_directory"


def test_fetch_abs_common_prefix():
    workdir = "/Users/test/ttpforge/ttps/privilege-escalation/credential-theft/hello-world"
    path = "./ttps/privilege-escalation/credential-theft/hello-world/hello-world.sh"
    expected = (
        "/Users/test/ttpforge/ttps/privilege-escalation/credential-theft/hello-world"
        "/ttps/privilege-escalation/credential-theft/hello-world/hello-world.sh"
    )
    assert fetch_abs(path, workdir) == expected


def test_fetch_abs_relative_workdir_strips_common_prefix(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    cwd = os.getcwd()
    assert fetch_abs("a/b", "a") == os.path.join(cwd, "a", "b")


@pytest.fixture
def file_tree(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    workdir = os.getcwd()
    temp_dir = os.path.join(workdir, "temp_test_directory")
    os.mkdir(temp_dir)
    temp_file = os.path.join(temp_dir, "test_file.txt")
    open(temp_file, "w").close()
    home = os.path.join(workdir, "home")
    os.mkdir(home)
    open(os.path.join(home, "tilde_test_file.txt"), "w").close()
    monkeypatch.setenv("HOME", home)
    return workdir, temp_file, home


def test_find_file_path_absolute(file_tree):
    _, temp_file, _ = file_tree
    assert find_file_path(temp_file, "") == temp_file


def test_find_file_path_relative(file_tree):
    workdir, temp_file, _ = file_tree
    assert find_file_path("temp_test_directory/test_file.txt", workdir) == temp_file


def test_find_file_path_missing(file_tree):
    with pytest.raises(FileNotFoundError, match="invalid path non_existent_file.txt"):
        find_file_path("non_existent_file.txt", "")


def test_find_file_path_tilde(file_tree):
    _, _, home = file_tree
    expected = os.path.join(home, "tilde_test_file.txt")
    assert find_file_path("~/tilde_test_file.txt", "") == expected


def test_find_file_path_with_fs_root(file_tree):
    workdir, _, _ = file_tree
    result = find_file_path("test_file.txt", "temp_test_directory", fs_root=workdir)
    assert result == os.path.join("temp_test_directory", "test_file.txt")


def test_find_file_path_with_fs_root_missing(file_tree):
    workdir, _, _ = file_tree
    with pytest.raises(FileNotFoundError):
        find_file_path("nope.txt", "temp_test_directory", fs_root=workdir)


@pytest.mark.parametrize(
    "environ, expected",
    [
        ({}, []),
        ({"TEST_ENV_VAR": "test_value"}, ["TEST_ENV_VAR=test_value"]),
        (
            {"TEST_ENV_VAR_1": "test_value_1", "TEST_ENV_VAR_2": "test_value_2"},
            ["TEST_ENV_VAR_1=test_value_1", "TEST_ENV_VAR_2=test_value_2"],
        ),
    ],
)
def test_fetch_env(environ, expected):
    assert sorted(fetch_env(environ)) == sorted(expected)


def test_fetch_env_keeps_equals_in_value():
    assert fetch_env({"K": "a=b"}) == ["K=a=b"]
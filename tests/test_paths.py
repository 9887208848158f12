import io

import pytest

from minish.errors import format_error
from minish.paths import find_in_path, folder_path, path_list, resolve_command, setup_path
from minish.state import create_shell


def _shell(*entries):
    return create_shell(list(entries), stdout=io.StringIO(), stderr=io.StringIO())


@pytest.fixture
def tool(tmp_path):
    path = tmp_path / "tool"
    path.write_text("#!/bin/sh\n")
    path.chmod(0o755)
    return path


def test_path_list_drops_empty_fields():
    shell = _shell("PATH=/a::/b", "HOME=/h")
    assert path_list(shell.env) == ["/a", "/b"]


def test_path_list_without_path():
    shell = _shell("HOME=/h")
    assert path_list(shell.env) is None


def test_find_in_path(tmp_path, tool):
    assert find_in_path("tool", ["/nonexistent-dir", str(tmp_path)]) == f"{tmp_path}/tool"


def test_find_in_path_first_directory_wins(tmp_path, tool):
    other = tmp_path / "other"
    other.mkdir()
    (other / "tool").write_text("")
    assert find_in_path("tool", [str(other), str(tmp_path)]) == f"{other}/tool"


def test_find_in_path_missing(tmp_path):
    assert find_in_path("missing", [str(tmp_path)]) is None


def test_setup_path_with_slash_is_kept():
    shell = _shell("HOME=/h")
    assert setup_path("./x/y", shell.env) == "./x/y"


def test_setup_path_searches_path(tmp_path, tool):
    shell = _shell(f"PATH={tmp_path}", "HOME=/h")
    assert setup_path("tool", shell.env) == f"{tmp_path}/tool"


def test_setup_path_falls_back_to_working_directory(tmp_path, tool, monkeypatch):
    monkeypatch.chdir(tmp_path)
    shell = _shell("PATH=/nonexistent-dir", "HOME=/h")
    assert setup_path("tool", shell.env) == "tool"


def test_resolve_builtin():
    shell = _shell("HOME=/h")
    assert resolve_command(["cd", "/"], shell) == "cd"
    assert shell.exit_code == 0


def test_resolve_empty_argv():
    shell = _shell("HOME=/h")
    assert resolve_command([], shell) is None


def test_resolve_found(tmp_path, tool):
    shell = _shell(f"PATH={tmp_path}", "HOME=/h")
    assert resolve_command(["tool", "-x"], shell) == f"{tmp_path}/tool"


def test_resolve_not_found(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    shell = _shell(f"PATH={tmp_path}", "HOME=/h")
    assert resolve_command(["missing-tool"], shell) is None
    assert shell.exit_code == 127
    assert shell.stderr.getvalue() == format_error(
        "cmd: `", "missing-tool", "': command not found."
    )


def test_resolve_without_path(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    shell = _shell("HOME=/h")
    assert resolve_command(["missing-tool"], shell) is None
    assert shell.exit_code == 127
    assert shell.stderr.getvalue() == format_error(
        "cmd: ", "missing-tool", ": no such file in directory"
    )


@pytest.mark.parametrize("name", [":", "!", "#"])
def test_resolve_silent_names(tmp_path, monkeypatch, name):
    monkeypatch.chdir(tmp_path)
    shell = _shell(f"PATH={tmp_path}", "HOME=/h")
    assert resolve_command([name], shell) is None
    assert shell.exit_code == 0
    assert shell.stderr.getvalue() == ""


def test_folder_path(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    result = folder_path()
    assert result.endswith(tmp_path.name + "/")
    assert not result.startswith("/")
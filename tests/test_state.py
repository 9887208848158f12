import io

import pytest

from minish.errors import ShellExit
from minish.state import create_shell


def test_create_shell_from_mapping():
    out, err = io.StringIO(), io.StringIO()
    shell = create_shell({"PATH": "/bin", "SHLVL": "1"}, stdout=out, stderr=err)
    assert shell.exit_code == 0
    assert shell.env.search("PATH") == "/bin"
    assert shell.env.search("SHLVL") == "2"
    assert shell.stdout is out
    assert shell.stderr is err
    assert shell.tokens == []
    assert shell.commands == []
    assert shell.input is None


def test_create_shell_with_explicit_shlvl():
    shell = create_shell(["SHLVL=1", "HOME=/h"], shlvl="5")
    assert shell.env.search("SHLVL") == "6"
    assert shell.env.search("HOME") == "/h"


def test_create_shell_adds_uid():
    shell = create_shell(["A=b"])
    assert shell.env.search("UID") == "1000"


def test_create_shell_empty_environment_exits():
    err = io.StringIO()
    with pytest.raises(ShellExit) as info:
        create_shell({}, stderr=err)
    assert info.value.status == 12
    assert err.getvalue() == "Error! No environment variables detected."


def test_shells_do_not_share_lists():
    first = create_shell(["A=1"])
    second = create_shell(["A=1"])
    first.tokens.append("x")
    assert second.tokens == []
import pytest

from minish.textutils import (
    atoi,
    atol,
    has_non_name_char,
    is_alnum,
    is_long,
    is_space,
    same_prefix,
    split_fields,
)


@pytest.mark.parametrize(
    "text, expected",
    [("  -42", -42), ("--5", 5), ("+-3", -3), ("12abc", 12), ("abc", 0), ("\t\v9", 9)],
)
def test_atoi(text, expected):
    assert atoi(text) == expected


@pytest.mark.parametrize(
    "text, expected",
    [("\t\n 7", 7), ("-9", -9), ("+8", 8), ("--5", 0), ("", 0)],
)
def test_atol(text, expected):
    assert atol(text) == expected


def test_atol_matches_is_long_range():
    assert atol("9223372036854775807") == 9223372036854775807
    assert atol("-9223372036854775808") == -9223372036854775808


@pytest.mark.parametrize(
    "text, expected",
    [
        ("9223372036854775807", True),
        ("9223372036854775808", False),
        ("-9223372036854775808", True),
        ("-9223372036854775809", False),
        (" 12 ", True),
        ("12a", False),
        ("", False),
        ("+", False),
        ("-", False),
        ("1 2", False),
    ],
)
def test_is_long(text, expected):
    assert is_long(text) is expected


@pytest.mark.parametrize("char", [" ", "\t", "\n", "\v", "\f", "\r"])
def test_is_space_true(char):
    assert is_space(char) is True


@pytest.mark.parametrize("char", ["a", "_", "", "\0"])
def test_is_space_false(char):
    assert is_space(char) is False


@pytest.mark.parametrize("char, expected", [("a", True), ("Z", True), ("5", True), ("_", False), ("é", False)])
def test_is_alnum(char, expected):
    assert is_alnum(char) is expected


def test_split_fields_drops_empty():
    assert split_fields("/usr/bin::/bin:", ":") == ["/usr/bin", "/bin"]
    assert split_fields("", ":") == []
    assert split_fields(":::", ":") == []


def test_split_fields_round_trip():
    text = "/a:/b/c:/d"
    assert ":".join(split_fields(text, ":")) == text


@pytest.mark.parametrize("text, expected", [("HOME", False), ("_my_var1", False), ("A-B", True), ("x=y", True), ("", False)])
def test_has_non_name_char(text, expected):
    assert has_non_name_char(text) is expected


@pytest.mark.parametrize(
    "left, right, count, expected",
    [
        ("cd", "cd\0", 3, True),
        ("cdx", "cd\0", 3, False),
        ("PATH", "PATH_X", 4, True),
        ("PATH", "PATH_X", 5, False),
        ("abc", "xyz", 0, True),
        (None, "a", 1, False),
        ("a", None, 1, False),
    ],
)
def test_same_prefix(left, right, count, expected):
    assert same_prefix(left, right, count) is expected
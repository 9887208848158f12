import pytest

from minish.conditions import TokenType
from minish.errors import ParseError
from minish.tokens import Token, tokenize, validate_grammar


def values(line):
    return [token.value for token in tokenize(line)]


def test_simple_words():
    assert values("echo hello") == ["echo", "hello"]


def test_empty_and_blank_lines():
    assert tokenize("") == []
    assert tokenize("    ") == []


def test_leading_and_repeated_spaces():
    assert values("   ls    -l   ") == ["ls", "-l"]


def test_operators_split_words():
    assert values("cat<<EOF|wc>out") == ["cat", "<<", "EOF", "|", "wc", ">", "out"]


def test_triple_greater_splits():
    assert values("a >>> b") == ["a", ">>", ">", "b"]


def test_quoted_text_is_one_token():
    assert values('echo "a | b" c') == ["echo", '"a | b"', "c"]
    assert values("echo 'x  y'") == ["echo", "'x  y'"]


def test_token_kinds():
    kinds = [token.kind for token in tokenize("ls -l | grep x >> out < in << end > f")]
    assert kinds == [
        TokenType.WORD,
        TokenType.WORD,
        TokenType.PIPE,
        TokenType.WORD,
        TokenType.WORD,
        TokenType.APPEND,
        TokenType.WORD,
        TokenType.REDIR_IN,
        TokenType.WORD,
        TokenType.HEREDOC,
        TokenType.WORD,
        TokenType.REDIR_OUT,
        TokenType.WORD,
    ]


def test_values_reappear_in_line_order():
    line = "echo one two | cat > file"
    tokens = tokenize(line)
    position = 0
    for token in tokens:
        found = line.index(token.value, position)
        assert found >= position
        position = found + len(token.value)


def test_valid_grammar_returns_tokens():
    tokens = tokenize("ls -l | grep x > out")
    assert validate_grammar(tokens) == tokens


def test_empty_token_list_is_valid():
    assert validate_grammar([]) == []


@pytest.mark.parametrize(
    "line",
    ["| ls", "ls |", "ls | | wc", "cat <", "cat < | wc", "echo hi > >> f"],
)
def test_syntax_errors(line):
    with pytest.raises(ParseError) as info:
        validate_grammar(tokenize(line))
    assert info.value.status == 2
    assert "unexpected token." in info.value.message


def test_unclosed_quote_in_last_token():
    with pytest.raises(ParseError) as info:
        validate_grammar(tokenize('echo "abc'))
    assert "EOF while expecting quote" in info.value.message


def test_closed_quotes_are_valid():
    tokens = tokenize("echo \"it's\" 'ok'")
    assert validate_grammar(tokens) == tokens


def test_manual_tokens_validated():
    tokens = [Token("cat"), Token("<", TokenType.REDIR_IN), Token("file")]
    assert validate_grammar(tokens) == tokens
    with pytest.raises(ParseError):
        validate_grammar([Token("|", TokenType.PIPE), Token("ls")])
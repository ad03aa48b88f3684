import pytest

from djangoql_completion.core.lexer import Token, TokenKind, tokenize, tokenize_all


def kinds_and_values(text: str) -> list[tuple[TokenKind, str]]:
    return [(token.name, token.value) for token in tokenize(text)]


def test_punctuation_and_whitespace() -> None:
    assert kinds_and_values("() ., = != >\t >= < <= ~ !~") == [
        (TokenKind.PAREN_L, "("),
        (TokenKind.PAREN_R, ")"),
        (TokenKind.DOT, "."),
        (TokenKind.COMMA, ","),
        (TokenKind.EQUALS, "="),
        (TokenKind.NOT_EQUALS, "!="),
        (TokenKind.GREATER, ">"),
        (TokenKind.GREATER_EQUAL, ">="),
        (TokenKind.LESS, "<"),
        (TokenKind.LESS_EQUAL, "<="),
        (TokenKind.CONTAINS, "~"),
        (TokenKind.NOT_CONTAINS, "!~"),
    ]


@pytest.mark.parametrize("name", ["a", "myVar_42", "__LOL__", "_", "_0", "author.groups.id"])
def test_names(name: str) -> None:
    assert kinds_and_values(name) == [(TokenKind.NAME, name)]


def test_reserved_words() -> None:
    assert kinds_and_values("True False None or and in not startswith endswith") == [
        (TokenKind.TRUE, "True"),
        (TokenKind.FALSE, "False"),
        (TokenKind.NONE, "None"),
        (TokenKind.OR, "or"),
        (TokenKind.AND, "and"),
        (TokenKind.IN, "in"),
        (TokenKind.NOT, "not"),
        (TokenKind.STARTSWITH, "startswith"),
        (TokenKind.ENDSWITH, "endswith"),
    ]


def test_reserved_word_prefix_is_a_name() -> None:
    assert kinds_and_values("order index nothing Truely") == [
        (TokenKind.NAME, "order"),
        (TokenKind.NAME, "index"),
        (TokenKind.NAME, "nothing"),
        (TokenKind.NAME, "Truely"),
    ]


def test_strings_keep_escapes_and_drop_quotes() -> None:
    strings = ['""', '"42"', '"\\t\\n\\u0042 \\" ^"']
    assert kinds_and_values(" ".join(strings)) == [(TokenKind.STRING_VALUE, s[1:-1]) for s in strings]


def test_unterminated_string_is_skipped() -> None:
    assert kinds_and_values('a = "abc') == [(TokenKind.NAME, "a"), (TokenKind.EQUALS, "="), (TokenKind.NAME, "abc")]


@pytest.mark.parametrize("number", ["0", "-0", "42", "-42"])
def test_int_values(number: str) -> None:
    assert kinds_and_values(number) == [(TokenKind.INT_VALUE, number)]


@pytest.mark.parametrize("number", ["-0.5e+42", "42.0", "2E64", "2.71e-0002"])
def test_float_values(number: str) -> None:
    assert kinds_and_values(number) == [(TokenKind.FLOAT_VALUE, number)]


def test_offsets() -> None:
    tokens = tokenize_all('name ~ "Tol"')
    assert tokens == [
        Token(TokenKind.NAME, "name", 0, 4),
        Token(TokenKind.CONTAINS, "~", 5, 6),
        Token(TokenKind.STRING_VALUE, "Tol", 7, 12),
    ]


def test_newlines_are_whitespace() -> None:
    assert kinds_and_values("id = 1\r\nand name") == [
        (TokenKind.NAME, "id"),
        (TokenKind.EQUALS, "="),
        (TokenKind.INT_VALUE, "1"),
        (TokenKind.AND, "and"),
        (TokenKind.NAME, "name"),
    ]


def test_unknown_characters_are_skipped() -> None:
    assert kinds_and_values("id @ 1") == [(TokenKind.NAME, "id"), (TokenKind.INT_VALUE, "1")]


def test_tokenize_is_restartable() -> None:
    first = tokenize_all("a and b")
    assert tokenize_all("a and b") == first
    assert tokenize_all("") == []


def test_token_spans_cover_input() -> None:
    text = '(author.name ~ "Tol" or price >= -1.5e3)\tand id in (1, 2)'
    tokens = tokenize_all(text)

    position = 0
    for token in tokens:
        assert text[position : token.start].strip() == ""
        position = token.end
    assert text[position:].strip() == ""
    assert text[tokens[3].start : tokens[3].end] == '"Tol"'

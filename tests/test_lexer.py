import pytest

from snlc.lexer import (
    Token,
    format_tokens,
    parse_token_lines,
    read_token_file,
    tokenize,
)


def test_program_header():
    assert tokenize("program p") == [
        Token("reserved word", "PROGRAM"),
        Token("CHAR", "p"),
    ]


def test_identifiers_and_reserved_words():
    assert tokenize("integer abc1 while") == [
        Token("reserved word", "INTEGER"),
        Token("ID", "abc1"),
        Token("reserved word", "WHILE"),
    ]


def test_array_bounds_and_numbers():
    assert tokenize("a[10] 5") == [
        Token("CHAR", "a"),
        Token(" LMIDPAREN", "["),
        Token("UNDERANGE", "10"),
        Token("RMIDPAREN", "]"),
        Token("NUM", "5"),
    ]


def test_number_at_end_of_input():
    assert tokenize("42") == [Token("NUM", "42")]


def test_assign_and_colon():
    assert tokenize("x:=y:z") == [
        Token("CHAR", "x"),
        Token("ASSIGN", ":="),
        Token("CHAR", "y"),
        Token("COLON", ":"),
        Token("CHAR", "z"),
    ]


@pytest.mark.parametrize(
    "char,kind",
    [
        ("+", "PLUS"), ("-", "MINUS"), ("*", "TIMES"), ("/", "OVER"),
        ("(", "LPAREN"), (")", "RPAREN"), (";", "SEMI"), (".", "DOT"),
        ("<", "LT"), ("=", "EQ"), ("'", "COMMA"), (">", "RT"),
        ('"', "SY"), (",", "JSP1"), (":", "COLON"),
    ],
)
def test_single_delimiters(char, kind):
    assert tokenize(char) == [Token(kind, char)]


def test_comments_and_unknown_characters_skipped():
    assert tokenize("{ a comment } x @ } \t") == [Token("CHAR", "x")]


def test_unterminated_comment_raises():
    with pytest.raises(ValueError):
        tokenize("x { never closed")


def test_format_tokens_ends_with_eof():
    text = format_tokens([Token("ID", "abc"), Token("SEMI", ";")])
    assert text.splitlines() == ["ID,abc", "SEMI,;", "EOF"]


def test_round_trip_through_lines():
    tokens = tokenize("program p var integer a, b; begin a := b + 1 end.")
    lines = format_tokens(tokens).splitlines(keepends=True)
    assert parse_token_lines(lines) == tokens


def test_parse_keeps_commas_in_value():
    assert parse_token_lines(["JSP1,,\n", "garbage\n"]) == [Token("JSP1", ",")]


def test_read_token_file(tmp_path):
    tokens = tokenize("if a < 10 then b := a fi")
    path = tmp_path / "tokens.txt"
    path.write_text(format_tokens(tokens), encoding="utf-8")
    assert read_token_file(path) == tokens
import pytest

from csspat.lex import NumberToken, Token, UnicodeRangeToken, each_token, tokenize


def toks(text):
    return list(each_token(text))


def ws(text=" "):
    return Token("whitespace", text)


def ident(name):
    return Token("identifier", name)


def sym(ch):
    return Token("symbol", ch)


# ---- whitespace / comments ----

def test_whitespace_run_is_one_token():
    assert toks(" \r\n \t \f \r \n ") == [ws(" \r\n \t \f \r \n ")]


def test_comments_do_not_nest():
    assert toks("/* nested /* comments are */ not supported */") == [
        Token("comment", " nested /* comments are "),
        ws(), ident("not"), ws(), ident("supported"), ws(), sym("*"), sym("/"),
    ]


def test_unterminated_comment():
    with pytest.raises(SyntaxError):
        toks("a /* never closed")


# ---- identifiers / calls / at / hash ----

@pytest.mark.parametrize("name", [
    "an_identifier-123e9",
    "-single-dash-identifier",
    "--1-double-dash-identifier",
    "--",
])
def test_identifiers(name):
    assert toks(name) == [ident(name)]


def test_escaped_space_identifier():
    assert toks(" \\  ") == [ws(), ident(" "), ws()]


def test_hex_escapes_in_identifier():
    assert toks("\\4F \\00004B3") == [ident("OK3")]


def test_escape_out_of_range():
    with pytest.raises(SyntaxError):
        toks("\\110000")


def test_stray_backslash():
    with pytest.raises(SyntaxError):
        toks("a \\\n")


def test_call_open():
    assert toks("an_identifier-123e9()") == [Token("call-open", "an_identifier-123e9"), sym(")")]


def test_at_and_hash():
    assert toks("@media #-x #1a") == [
        Token("at-identifier", "media"), ws(), Token("hash", "-x"), ws(), Token("hash", "1a"),
    ]


def test_lone_sigils_are_symbols():
    assert toks("@1") == [sym("@"), NumberToken(1)]
    assert toks("# x") == [sym("#"), ws(), ident("x")]


# ---- numbers ----

@pytest.mark.parametrize("text,value,unit", [
    ("100", 100, None),
    ("+5", 5, None),
    ("0.5", 0.5, None),
    ("-.25", -0.25, None),
    ("1e3", 1000.0, None),
    ("1E5", 100000.0, None),
    ("-1e+2", -100.0, None),
    ("3px", 3, "px"),
    ("-11%", -11, "%"),
    ("2.5e", 2.5, "e"),
    ("45deg", 45, "deg"),
    ("1e3e3", 1000.0, "e3"),
])
def test_numbers(text, value, unit):
    (tok,) = toks(text)
    assert tok.type == "number"
    assert tok.value == value
    assert tok.unit == unit


def test_number_value_types():
    assert isinstance(toks("7")[0].value, int)
    assert isinstance(toks("7.0")[0].value, float)


# ---- strings ----

def test_strings():
    assert toks('"blah"') == [Token("string", "blah")]
    assert toks("'it\\'s'") == [Token("string", "it's")]


def test_string_escapes():
    src = '"' + '\\"' + '\\\\' + '\\4F ' + '\\00004B3' + '\\\r\n' + '"'
    assert toks(src) == [Token("string", '"\\OK3')]


@pytest.mark.parametrize("src", ['"', "'", '"abc', '"string\r\n"', "'line\nbreak'"])
def test_unterminated_strings(src):
    with pytest.raises(SyntaxError):
        toks(src)


# ---- url ----

@pytest.mark.parametrize("src,arg", [
    ("url(foo.png)", "foo.png"),
    ("url(  a/b.png  )", "a/b.png"),
    ("URL(x)", "x"),
    ("\\75 rl(x)", "x"),
])
def test_unquoted_url(src, arg):
    assert toks(src) == [Token("url", arg)]


def test_quoted_url_is_a_call():
    assert toks('url("x")') == [Token("call-open", "url"), Token("string", "x"), sym(")")]


# ---- unicode ranges ----

@pytest.mark.parametrize("src,lo,hi", [
    ("U+26", 0x26, 0x26),
    ("u+0-7F", 0, 0x7F),
    ("U+3??", 0x300, 0x3FF),
    ("U+??????", 0, 0x10FFFF),
])
def test_unicode_range(src, lo, hi):
    assert toks(src) == [UnicodeRangeToken(lo, hi)]


@pytest.mark.parametrize("src", ["U+1?-5", "U+110000", "U+20-10", "U+1?2"])
def test_bad_unicode_range(src):
    with pytest.raises(SyntaxError):
        toks(src)


# ---- whole stream ----

def test_contents_reconstruct_plain_input():
    text = "a > b + c ~ d, e.f"
    assert "".join(t.content for t in tokenize(text)) == text


def test_error_reports_position():
    with pytest.raises(SyntaxError, match="2:3"):
        toks("a\nb \"open")

import dataclasses

import pytest

from csspat.lex import CallUnit, ContainerUnit, NumberToken, Token, each_token, to_units


def test_nested_blocks():
    assert to_units("a(b [c] {d})") == [
        CallUnit("a", [
            Token("identifier", "b"),
            Token("whitespace", " "),
            ContainerUnit("square", [Token("identifier", "c")]),
            Token("whitespace", " "),
            ContainerUnit("curly", [Token("identifier", "d")]),
        ]),
    ]


def test_round_block_inside_call():
    (call,) = to_units("f((1))")
    assert call.func_name == "f"
    assert call.params == (ContainerUnit("round", (NumberToken(1),)),)


@pytest.mark.parametrize("src", [")", "(", "]", "[", "}", "{", "a(", "(]", "a(}", "[)", "{(}"])
def test_unbalanced(src):
    with pytest.raises(SyntaxError):
        to_units(src)


def test_url_forms_are_unified():
    expected = [CallUnit("url", [Token("string", "x.png")])]
    assert to_units("url(x.png)") == expected
    assert to_units('url("x.png")') == expected


def test_ignore_options():
    src = "a /* c */ (b)"
    assert to_units(src, ignore_whitespace=True) == [
        Token("identifier", "a"),
        Token("comment", " c "),
        ContainerUnit("round", [Token("identifier", "b")]),
    ]
    assert to_units(src, ignore_whitespace=True, ignore_comments=True) == [
        Token("identifier", "a"),
        ContainerUnit("round", [Token("identifier", "b")]),
    ]


def test_accepts_token_iterable():
    assert to_units(each_token("[x]")) == to_units("[x]")


def test_empty_input():
    assert to_units("") == []


def test_blocks_are_frozen():
    (block,) = to_units("(a)")
    assert isinstance(block.contents, tuple)
    with pytest.raises(dataclasses.FrozenInstanceError):
        block.contents = ()
    (call,) = to_units("f(a)")
    assert isinstance(call.params, tuple)
    with pytest.raises(dataclasses.FrozenInstanceError):
        call.func_name = "g"

from pathlib import Path

import pytest

from csspat.grammar import load_rules_text, parse_rules
from csspat.lex import Token, to_units
from csspat.match import match_all

SELECTORS = Path(__file__).parent / "grammar_test" / "selectors.g"


@pytest.fixture(scope="module")
def rules():
    return parse_rules(load_rules_text(SELECTORS))


def selectors(rules, text):
    return match_all(to_units(text), rules["selectors"])


def test_compound_selector_with_combinator(rules):
    assert selectors(rules, 'div.foo > #bar[data-x~="y" i]') == [[{
        "initial": [
            {"name": "div", "type": "element"},
            {"className": "foo", "type": "class"},
        ],
        "subsequent": [{
            "combinator": "child",
            "clauses": [
                {"id": "bar", "type": "id"},
                {
                    "type": "attribute",
                    "name": "data-x",
                    "operator": "word-list-contains",
                    "value": "y",
                    "caseSensitive": False,
                },
            ],
        }],
    }]]


def test_rejects_double_dot(rules):
    assert selectors(rules, "div..foo") is None


def test_selector_list(rules):
    (result,) = selectors(rules, "a, b")
    assert [sel["initial"][0]["name"] for sel in result] == ["a", "b"]


@pytest.mark.parametrize("text,combinator", [
    ("div p", "descendant"),
    ("div > p", "child"),
    ("div + p", "next-sibling"),
    ("div ~ p", "subsequent-sibling"),
    ("col || td", "column"),
])
def test_combinators(rules, text, combinator):
    ((sel,),) = selectors(rules, text)
    assert sel["subsequent"][0]["combinator"] == combinator


def test_trailing_whitespace_is_not_a_combinator(rules):
    ((sel,),) = selectors(rules, "div ")
    assert "subsequent" not in sel


def test_namespaces(rules):
    ((sel,),) = selectors(rules, "svg|rect")
    assert sel["initial"] == [{"namespace": "svg", "name": "rect", "type": "element"}]
    ((sel,),) = selectors(rules, "*|*")
    assert sel["initial"] == [{"namespace": True, "name": True, "type": "element"}]


def test_attribute_forms(rules):
    ((sel,),) = selectors(rules, "[href]")
    assert sel["initial"] == [{"type": "attribute", "name": "href", "operator": "present"}]
    ((sel,),) = selectors(rules, "a[lang^=en s]")
    assert sel["initial"][1] == {
        "type": "attribute",
        "name": "lang",
        "operator": "starts-with",
        "value": "en",
        "caseSensitive": True,
    }
    ((sel,),) = selectors(rules, "[title='x']")
    assert sel["initial"][0]["operator"] == "equals"


def test_pseudo_classes_and_elements(rules):
    ((sel,),) = selectors(rules, "a:hover")
    assert sel["initial"][1] == {"name": "hover", "type": "pseudo-class"}
    ((sel,),) = selectors(rules, "p::before")
    assert sel["initial"][1] == {"name": "before", "type": "pseudo-element"}
    ((sel,),) = selectors(rules, "li:nth-child(2n+1)")
    clause = sel["initial"][1]
    assert clause["type"] == "pseudo-class-func"
    assert clause["funcUnit"].func_name == "nth-child"
    ((sel,),) = selectors(rules, "::slotted(span)")
    (clause,) = sel["initial"]
    assert clause["type"] == "pseudo-element-func"
    assert clause["funcUnit"].func_name == "slotted"
    assert clause["funcUnit"].params == (Token("identifier", "span"),)


def test_relative_selectors(rules):
    (result,) = match_all(to_units("> p, a"), rules["relative-selectors"])
    first, second = result
    assert first == [{"combinator": "child", "clauses": [{"name": "p", "type": "element"}]}]
    assert second == [{"clauses": [{"name": "a", "type": "element"}], "combinator": "descendant"}]

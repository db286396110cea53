import pytest

from csspat.grammar import load_rules, load_rules_text
from csspat.lex import to_units
from csspat.match import match_all


def test_text_normalised(tmp_path):
    path = tmp_path / "crlf.g"
    path.write_bytes(b"\xef\xbb\xbfa: number;\r\nb: string;\r")
    assert load_rules_text(path) == "a: number;\nb: string;\n"


def test_load_rules(tmp_path):
    path = tmp_path / "pair.g"
    path.write_text("pair: CAP_ARRAY(CAP(identifier) ':' CAP(number));", encoding="utf-8")
    rules = load_rules(path)
    assert match_all(to_units("width: 10"), rules["pair"]) == [["width", 10]]


def test_errors_name_the_file(tmp_path):
    path = tmp_path / "broken.g"
    path.write_text("a: NOPE(x);", encoding="utf-8")
    with pytest.raises(SyntaxError, match="broken.g: unknown rule function NOPE"):
        load_rules(path)

import json
from pathlib import Path

from csspat.csspatc import main

SELECTORS = str(Path(__file__).parent / "grammar_test" / "selectors.g")


def test_lex(capsys):
    assert main(["lex", "--text", "a b"]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert len(lines) == 3
    assert "identifier" in lines[0]


def test_lex_error(capsys):
    assert main(["lex", "--text", '"open']) == 2
    assert "[SYNTAX ERROR]" in capsys.readouterr().err


def test_units(capsys):
    assert main(["units", "--text", "f([x])", "--ignore-whitespace"]) == 0
    out = capsys.readouterr().out.splitlines()
    assert out[0] == "call f"
    assert out[1] == "  square"


def test_check(capsys):
    assert main(["check", SELECTORS, "-D"]) == 0
    captured = capsys.readouterr()
    assert "[CHECK OK] rules=10" in captured.out
    assert "selectors: CaptureArray" in captured.out
    assert "[DEBUG] rules compiled" in captured.err


def test_check_syntax_error(tmp_path, capsys):
    bad = tmp_path / "bad.g"
    bad.write_text("a: NOPE(x);", encoding="utf-8")
    assert main(["check", str(bad)]) == 2
    assert "[SYNTAX ERROR]" in capsys.readouterr().err


def test_check_missing_file(tmp_path, capsys):
    assert main(["check", str(tmp_path / "missing.g")]) == 2
    assert "[ERROR]" in capsys.readouterr().err


def test_match(capsys):
    assert main(["match", SELECTORS, "selectors", "--text", "div > p"]) == 0
    result = json.loads(capsys.readouterr().out)
    assert result[0][0]["subsequent"][0]["combinator"] == "child"


def test_match_call_unit_is_serialized(capsys):
    assert main(["match", SELECTORS, "selectors", "--text", "li:nth-child(2)"]) == 0
    result = json.loads(capsys.readouterr().out)
    func = result[0][0]["initial"][1]["funcUnit"]
    assert func["type"] == "call"
    assert func["func_name"] == "nth-child"


def test_no_match(capsys):
    assert main(["match", SELECTORS, "selectors", "--text", "div..foo"]) == 1
    assert "[NO MATCH]" in capsys.readouterr().out


def test_unknown_rule(capsys):
    assert main(["match", SELECTORS, "nope", "--text", "div"]) == 2
    assert "no rule named" in capsys.readouterr().err


def test_lex_missing_input(tmp_path, capsys):
    assert main(["lex", "--input", str(tmp_path / "nope.txt")]) == 2
    assert "[ERROR] FileNotFoundError" in capsys.readouterr().err


def test_units_missing_input(tmp_path, capsys):
    assert main(["units", "--input", str(tmp_path / "nope.txt")]) == 2
    assert "[ERROR] FileNotFoundError" in capsys.readouterr().err


def test_units_from_input_file(tmp_path, capsys):
    src = tmp_path / "in.css"
    src.write_text("(a)", encoding="utf-8")
    assert main(["units", "--input", str(src)]) == 0
    assert capsys.readouterr().out.splitlines()[0] == "round"

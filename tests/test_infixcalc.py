from __future__ import annotations

import json

import pytest

import infixcalc
from infixcalc import main


def test_eval_prints_value(capsys):
    main(["eval", "1 + 2 * 3"])

    assert capsys.readouterr().out == "7\n"


def test_eval_with_definitions(capsys):
    main(["eval", "x * 2", "-D", "x=3/4"])

    assert capsys.readouterr().out == "3/2\n"


def test_definitions_can_use_earlier_definitions(capsys):
    main(["eval", "y + 1", "-D", "x=2", "-D", "y=x * 3"])

    assert capsys.readouterr().out == "7\n"


def test_parse_prints_infix_and_names(capsys):
    main(["parse", "f 4"])

    assert capsys.readouterr().out == "f(4)\nnames: f\n"


def test_parse_json(capsys):
    main(["parse", "--json", "a + 1"])

    payload = json.loads(capsys.readouterr().out)
    assert payload["names"] == ["a", "+"]
    assert payload["ast"]["node_type"] == "binop"


def test_errors_exit_with_status_1(capsys):
    with pytest.raises(SystemExit) as info:
        main(["eval", "1 +"])

    assert info.value.code == 1
    assert capsys.readouterr().err.startswith("Error: Parse failure at position 3")


def test_unbound_name_exits_with_status_1(capsys):
    with pytest.raises(SystemExit) as info:
        main(["eval", "nope + 1"])

    assert info.value.code == 1
    assert "nope is not bound in environment" in capsys.readouterr().err


def test_too_deep_to_render_exits_with_status_1(capsys, monkeypatch):
    def bottomless(ast):
        raise RecursionError("maximum recursion depth exceeded")

    monkeypatch.setattr(infixcalc, "to_infix", bottomless)

    with pytest.raises(SystemExit) as info:
        main(["parse", "1 + 2"])

    assert info.value.code == 1
    assert "nested too deeply" in capsys.readouterr().err

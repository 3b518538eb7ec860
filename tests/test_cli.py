import json
import pathlib

import pytest
from flask import Flask

from grammar_validator import cli


@pytest.fixture
def grammar_file(tmp_path):
    path = tmp_path / "grammar.json"
    path.write_text(
        json.dumps(
            {
                "id": "anbn",
                "startSymbol": "S",
                "productions": [{"nonTerminal": "S", "rightSide": "a S b | c | ε"}],
            }
        ),
        encoding="utf-8",
    )
    return str(path)


def test_generate(grammar_file, capsys):
    status = cli.main(["grammar_validator", "generate", grammar_file, "--max-depth", "2"])
    assert status == 0

    out, err = capsys.readouterr()
    assert out.splitlines() == ["c", cli.EMPTY_WORD, "a c b", "a b"]
    assert "cut short" in err


def test_check(grammar_file, capsys):
    assert cli.main(["grammar_validator", "check", grammar_file, "a  c b"]) == 0
    assert capsys.readouterr().out.strip() == "yes"

    args = ["grammar_validator", "check", grammar_file, "a a a c b b b", "--max-depth", "3"]
    assert cli.main(args) == 1
    assert capsys.readouterr().out.strip() == "no"


def test_missing_grammar_file(tmp_path, capsys):
    status = cli.main(["grammar_validator", "generate", str(tmp_path / "nope.json")])
    assert status == 2
    assert "Unable to load" in capsys.readouterr().err


def test_example_grammar(capsys):
    path = pathlib.Path(__file__).parent.parent / "examples" / "statements.json"

    assert cli.main(["grammar_validator", "check", str(path), "int id ;"]) == 0
    assert cli.main(["grammar_validator", "check", str(path), "{ float   id ; }"]) == 0
    assert cli.main(["grammar_validator", "check", str(path), "int id"]) == 1


def test_serve(monkeypatch):
    runs = []

    def run(app, host=None, port=None, **kwargs):
        runs.append((app, host, port, kwargs))

    monkeypatch.setattr(Flask, "run", run)

    assert cli.main(["grammar_validator", "serve", "--host", "0.0.0.0", "--port", "8123"]) == 0

    [(app, host, port, kwargs)] = runs
    assert isinstance(app, Flask)
    assert (host, port) == ("0.0.0.0", 8123)
    assert kwargs == {"debug": False}
    assert app.url_map.bind("localhost").match("/api/validator/message")

import pytest

from grammar_validator.grammar import (
    Grammar,
    Production,
    ProductionTable,
    build_production_table,
    split_alternatives,
    tokenize,
)


def test_tokenize_identifiers():
    assert tokenize("a S b") == ("a", "S", "b")
    assert tokenize("id_1 _x Expr") == ("id_1", "_x", "Expr")


def test_tokenize_punctuation():
    assert tokenize("x=(y+z);") == ("x", "=", "(", "y", "+", "z", ")", ";")
    assert tokenize("{ - }") == ("{", "-", "}")


def test_tokenize_drops_unknown_characters():
    """Tokenizing is a best-effort scan; anything we don't recognize just
    disappears instead of raising."""
    assert tokenize("a # b * c") == ("a", "b", "c")
    assert tokenize("x = 1 ;") == ("x", "=", ";")
    assert tokenize("@@@") == ()


def test_tokenize_whitespace_is_only_a_separator():
    assert tokenize("  a\t\tb \n c ") == ("a", "b", "c")
    assert tokenize("ab") == ("ab",)


def test_tokenize_epsilon():
    assert tokenize("ε") == ()
    assert tokenize("") == ()
    assert tokenize("   ") == ()
    assert tokenize("epsilon") == ()
    assert tokenize("EPSILON") == ()

    # Only a bare marker means epsilon; as part of a longer alternative it's
    # just an identifier.
    assert tokenize("epsilon a") == ("epsilon", "a")


def test_split_alternatives():
    assert split_alternatives("a S b | c") == ["a S b", "c"]
    assert split_alternatives(" | |  ") == []
    assert split_alternatives("a||b") == ["a", "b"]


def test_table_concatenates_rules_in_order():
    G = Grammar(
        id="g",
        start_symbol="S",
        productions=[
            Production("S", "a S b | c"),
            Production("A", "x"),
            Production(" S ", "ε"),
        ],
    )
    table = build_production_table(G)

    assert table.nonterminals == ["S", "A"]
    assert table.alternatives("S") == (("a", "S", "b"), ("c",), ())
    assert table.alternatives("A") == (("x",),)


def test_table_keeps_declared_nonterminals_without_alternatives():
    G = Grammar(id="g", start_symbol="S", productions=[Production("A", " | ")])
    table = ProductionTable.from_grammar(G)

    assert table.is_nonterminal("A")
    assert table.alternatives("A") == ()


def test_undeclared_symbols_are_terminals():
    G = Grammar(id="g", start_symbol="S", productions=[Production("S", "B c")])
    table = ProductionTable.from_grammar(G)

    assert table.is_nonterminal("S")
    assert not table.is_nonterminal("B")
    assert not table.is_nonterminal("c")
    assert table.alternatives("B") == ()


def test_leftmost_nonterminal():
    table = ProductionTable({"S": [("a",)], "A": [("b",)]})

    assert table.leftmost_nonterminal(("x", "A", "S")) == 1
    assert table.leftmost_nonterminal(("S", "A")) == 0
    assert table.leftmost_nonterminal(("x", "y")) is None
    assert table.leftmost_nonterminal(()) is None


def test_missing_grammar_is_an_error():
    with pytest.raises(ValueError):
        build_production_table(None)


def test_grammar_is_immutable():
    G = Grammar(id="g", start_symbol="S", productions=[Production("S", "a")])
    assert isinstance(G.productions, tuple)
    with pytest.raises(AttributeError):
        G.start_symbol = "T"  # type: ignore


def test_format():
    table = ProductionTable({"S": [("a", "S"), ()], "T": []})
    assert table.format() == "S -> a S | ε\nT -> "

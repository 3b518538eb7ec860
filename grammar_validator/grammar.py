"""Grammars and production tables.

A grammar arrives as a list of loose rules, each one a non-terminal name and
the raw text of its right-hand side:

    S -> a S b | c
    S -> ε

We normalize that into a `ProductionTable`, which maps every declared
non-terminal to the ordered alternatives it can be rewritten to:

    {
        'S': (
            ('a', 'S', 'b'),
            ('c',),
            (),
        ),
    }

Rules that share a non-terminal have their alternatives concatenated in the
order they appear. Nothing is checked against the rest of the grammar: if an
alternative mentions a symbol that was never declared, that symbol is simply
a terminal. There is no separate notion of "terminal" or "non-terminal" on a
symbol either- a symbol is a non-terminal exactly when the table has an entry
for it.

Tokenizing alternatives is a best-effort scan, not a validating lexer.
Identifiers and a small set of punctuation become tokens, everything else
(including the `ε` marker) is dropped on the floor. An alternative that ends
up with no tokens at all is the empty production.
"""

import dataclasses
import re
import typing


@dataclasses.dataclass(frozen=True)
class Production:
    """One rule as written: a non-terminal and the raw text of its
    right-hand side, which may hold several `|`-separated alternatives."""

    non_terminal: str
    right_side: str


@dataclasses.dataclass(frozen=True)
class Grammar:
    id: str
    start_symbol: str
    productions: typing.Tuple[Production, ...] = ()

    def __post_init__(self):
        # Accept any iterable of productions but always store a tuple, so
        # the grammar stays hashable and immutable.
        object.__setattr__(self, "productions", tuple(self.productions))


Symbol = str
Alternative = typing.Tuple[Symbol, ...]
SententialForm = typing.Tuple[Symbol, ...]


ALTERNATIVE_SEPARATOR = "|"

_TOKEN_PATTERN = re.compile(r"[A-Za-z_][A-Za-z0-9_]*|[(){}+\-=;|]")

_EPSILON_WORDS = {"epsilon"}


def tokenize(alternative: str) -> Alternative:
    """Split the text of a single alternative into symbols.

    Unrecognized characters are silently skipped, so the result may be
    shorter than you expect (or empty, which means epsilon).
    """
    if alternative.strip().lower() in _EPSILON_WORDS:
        return ()
    return tuple(_TOKEN_PATTERN.findall(alternative))


def split_alternatives(right_side: str) -> list[str]:
    pieces = [piece.strip() for piece in right_side.split(ALTERNATIVE_SEPARATOR)]
    return [piece for piece in pieces if len(piece) > 0]


class ProductionTable:
    """The normalized, read-only form of a grammar.

    Once built, a table is never modified, so a single instance can be
    shared between any number of concurrent enumerations.
    """

    _rules: dict[Symbol, typing.Tuple[Alternative, ...]]

    def __init__(self, rules: typing.Mapping[Symbol, typing.Iterable[Alternative]]):
        self._rules = {name: tuple(tuple(alt) for alt in alts) for name, alts in rules.items()}

    @classmethod
    def from_grammar(cls, grammar: Grammar | None) -> "ProductionTable":
        if grammar is None:
            raise ValueError("A grammar is required to build a production table")

        rules: dict[Symbol, list[Alternative]] = {}
        for production in grammar.productions:
            name = production.non_terminal.strip()
            alternatives = rules.setdefault(name, [])
            for alternative in split_alternatives(production.right_side):
                alternatives.append(tokenize(alternative))

        return cls(rules)

    def is_nonterminal(self, symbol: Symbol) -> bool:
        return symbol in self._rules

    def alternatives(self, symbol: Symbol) -> typing.Tuple[Alternative, ...]:
        """The alternatives for `symbol`, in declaration order. Terminals (and
        declared non-terminals with nothing on their right-hand side) have no
        alternatives."""
        return self._rules.get(symbol, ())

    def leftmost_nonterminal(self, form: SententialForm) -> int | None:
        for index, symbol in enumerate(form):
            if symbol in self._rules:
                return index
        return None

    @property
    def nonterminals(self) -> list[Symbol]:
        return list(self._rules.keys())

    def format(self) -> str:
        lines = []
        for name, alternatives in self._rules.items():
            bodies = [" ".join(alt) if len(alt) > 0 else "ε" for alt in alternatives]
            lines.append(f"{name} -> {' | '.join(bodies)}")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return f"ProductionTable({self._rules!r})"


def build_production_table(grammar: Grammar | None) -> ProductionTable:
    return ProductionTable.from_grammar(grammar)

"""Sample the language of a context-free grammar, and check words against
the sample.

    grammar = Grammar(
        id="anbn",
        start_symbol="S",
        productions=[Production("S", "a S b | c")],
    )
    gen = GrammarGenerator(grammar)
    words = gen.generate_words(max_depth=3)
    assert "a a c b b" in words

Generation is a bounded breadth-first search, so membership is membership
in the sample, not in the language. See `generator` for the details.
"""

from .grammar import (
    Grammar,
    Production,
    ProductionTable,
    build_production_table,
    tokenize,
)
from .generator import (
    DEFAULT_MAX_DEPTH,
    DEFAULT_MAX_TOKENS,
    DEFAULT_MAX_WORDS,
    GrammarGenerator,
    WordSet,
    generate_words,
    normalize_word,
    word_belongs,
)

"""Bounded enumeration of the words of a grammar.

This is a breadth-first walk over sentential forms, always rewriting the
leftmost non-terminal. The derivation graph of an interesting grammar is
infinite (and, with left recursion, cyclic), so the walk is fenced in three
independent ways:

    - `max_depth` limits how many rewrites a derivation may use. A form that
      was reached in more than `max_depth` steps is dropped when it comes off
      the queue. The comparison is strict: a word that took exactly
      `max_depth` rewrites is still produced.
    - `max_tokens` limits how wide a single sentential form may get. A
      rewrite that would produce a longer form is never queued.
    - `max_words` limits how many distinct words we collect in total. We stop
      as soon as we have that many.

On top of that, each run keeps a set of every form it has queued so far and
never queues the same form twice. That's what keeps a rule like
`A -> A a | a` from flooding the queue with copies of itself.

None of the bounds are errors. Branches that run into them just disappear,
and the caller gets whatever words were found. `WordSet.truncated` says
whether anything was cut off, but it can't tell you *what* was cut off.

## Membership

`word_belongs` answers "is this word in the sample?", NOT "is this word in
the language?". A word whose only derivations are deeper or wider than the
bounds, or that we never got to because `max_words` filled up first, is
reported as not belonging even though the grammar can produce it. If you need
a real answer you need a real parser.
"""

import collections
import dataclasses
import logging
import threading
import typing

from .grammar import Grammar, ProductionTable, SententialForm, Symbol


DEFAULT_MAX_DEPTH = 10
DEFAULT_MAX_WORDS = 1000
DEFAULT_MAX_TOKENS = 30

WORD_SEPARATOR = " "


enumerate_log = logging.getLogger("grammar_validator.enumerate")


def serialize(form: typing.Iterable[Symbol]) -> str:
    return WORD_SEPARATOR.join(form).strip()


def normalize_word(word: str) -> str:
    """Collapse all the whitespace in a candidate word down to single spaces,
    which is how generated words are spelled."""
    return WORD_SEPARATOR.join(word.split())


@dataclasses.dataclass
class WordSet:
    """The distinct words found by one enumeration.

    This behaves like a set for membership and equality, but it remembers
    the order the words were discovered in so that output is stable.
    """

    words: list[str] = dataclasses.field(default_factory=list)

    # True if any branch was dropped because of a bound, or if the run was
    # cancelled. False means the sample is every word the grammar has.
    truncated: bool = False

    _index: set[str] = dataclasses.field(
        default_factory=set, init=False, repr=False, compare=False
    )

    def __post_init__(self):
        unique = list(dict.fromkeys(self.words))
        self.words = unique
        self._index = set(unique)

    def add(self, word: str):
        if word not in self._index:
            self._index.add(word)
            self.words.append(word)

    def __contains__(self, word: object) -> bool:
        return word in self._index

    def __iter__(self) -> typing.Iterator[str]:
        return iter(self.words)

    def __len__(self) -> int:
        return len(self.words)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, WordSet):
            return self._index == other._index
        if isinstance(other, (set, frozenset)):
            return self._index == other
        return NotImplemented

    def as_set(self) -> frozenset[str]:
        return frozenset(self._index)


def generate_words(
    table: ProductionTable,
    start: SententialForm,
    *,
    max_depth: int = DEFAULT_MAX_DEPTH,
    max_words: int = DEFAULT_MAX_WORDS,
    max_tokens: int = DEFAULT_MAX_TOKENS,
    cancel: threading.Event | None = None,
) -> WordSet:
    """Enumerate words reachable from `start`, breadth first, within the
    given bounds.

    `cancel`, if provided, is checked once for every form taken off the
    queue. Setting it stops the run early; the words found so far are
    returned, marked as truncated.
    """
    start = tuple(start)
    result = WordSet()

    # Everything below is local to this call. The table is only ever read.
    queue: collections.deque[typing.Tuple[SententialForm, int]] = collections.deque()
    queue.append((start, 0))
    visited: set[str] = {serialize(start)}

    el = enumerate_log
    steps = 0
    while len(queue) > 0 and len(result) < max_words:
        if cancel is not None and cancel.is_set():
            el.info("enumeration cancelled after %d steps", steps)
            result.truncated = True
            break

        form, depth = queue.popleft()
        steps += 1

        if depth > max_depth:
            result.truncated = True
            continue

        index = table.leftmost_nonterminal(form)
        if index is None:
            word = serialize(form)
            if el.isEnabledFor(logging.DEBUG):
                el.debug(f"word @ {depth}: '{word}'")
            result.add(word)
            continue

        # A declared non-terminal with no alternatives is a dead end. There's
        # nothing to rewrite it to, so this branch produces nothing.
        symbol = form[index]
        for alternative in table.alternatives(symbol):
            candidate = form[:index] + alternative + form[index + 1 :]
            if len(candidate) > max_tokens:
                result.truncated = True
                continue

            key = serialize(candidate)
            if key in visited:
                continue
            visited.add(key)
            queue.append((candidate, depth + 1))

    if len(queue) > 0:
        # Either we filled up on words or we were cancelled; anything still
        # waiting is work we didn't do.
        result.truncated = True

    el.info(
        "enumerated %d words in %d steps (visited %d forms, truncated=%s)",
        len(result),
        steps,
        len(visited),
        result.truncated,
    )
    return result


def word_belongs(word: str | None, words: typing.Collection[str]) -> bool:
    """Test whether `word` is one of `words` after whitespace normalization.

    Remember that this is membership in a bounded *sample*: see the module
    documentation for why a `False` here does not mean the grammar can't
    derive the word.
    """
    if word is None or word.strip() == "":
        return False
    return normalize_word(word) in words


class GrammarGenerator:
    """Binds a grammar to its production table so it can be sampled
    repeatedly.

    The table is built once, here, and then shared by every call. Each call
    to `generate_words` gets its own queue and visited set, so it is fine to
    call this from several threads at once.
    """

    grammar: Grammar
    table: ProductionTable
    max_depth: int

    def __init__(self, grammar: Grammar | None, max_depth: int = DEFAULT_MAX_DEPTH):
        if grammar is None:
            raise ValueError("A grammar is required")
        self.grammar = grammar
        self.max_depth = max_depth
        self.table = ProductionTable.from_grammar(grammar)

    @property
    def start_form(self) -> SententialForm:
        return (self.grammar.start_symbol,)

    def generate_words(
        self,
        max_words: int = DEFAULT_MAX_WORDS,
        *,
        max_depth: int | None = None,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        cancel: threading.Event | None = None,
    ) -> WordSet:
        return generate_words(
            self.table,
            self.start_form,
            max_depth=self.max_depth if max_depth is None else max_depth,
            max_words=max_words,
            max_tokens=max_tokens,
            cancel=cancel,
        )

    def word_belongs(
        self,
        word: str | None,
        max_words: int = DEFAULT_MAX_WORDS,
        *,
        max_depth: int | None = None,
        max_tokens: int = DEFAULT_MAX_TOKENS,
    ) -> bool:
        """Regenerate the sample with the given bounds and look `word` up in
        it. If you already have a `WordSet` built with the bounds you want,
        call the module-level `word_belongs` on it instead."""
        if word is None or word.strip() == "":
            return False
        words = self.generate_words(max_words, max_depth=max_depth, max_tokens=max_tokens)
        return word_belongs(word, words)

"""Where grammars come from.

The enumerator never does I/O itself; it is handed a `Grammar`. This module
is the boundary that produces one, either from the remote grammar service
or from a JSON file on disk. Both speak the same payload:

    {
        "id": "g1",
        "startSymbol": "S",
        "productions": [
            {"nonTerminal": "S", "rightSide": "a S b | c"}
        ]
    }

Any failure to get a grammar (the network, a bad status, a payload that
doesn't validate) comes back as `None`. Callers don't get told which one it
was; it's logged here instead.
"""

import asyncio
import logging
import pathlib
import typing
import urllib.parse

import aiohttp
import pydantic
from pydantic.alias_generators import to_camel

from .grammar import Grammar, Production


source_log = logging.getLogger("grammar_validator.source")


class _Payload(pydantic.BaseModel):
    model_config = pydantic.ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ProductionPayload(_Payload):
    non_terminal: str
    right_side: str = ""


class GrammarPayload(_Payload):
    id: str
    start_symbol: str
    productions: list[ProductionPayload] = []

    def to_grammar(self) -> Grammar:
        return Grammar(
            id=self.id,
            start_symbol=self.start_symbol,
            productions=tuple(
                Production(non_terminal=p.non_terminal, right_side=p.right_side)
                for p in self.productions
            ),
        )


def parse_grammar_payload(data: str | bytes) -> Grammar | None:
    """Validate a JSON document into a `Grammar`, or `None` if it isn't one."""
    try:
        payload = GrammarPayload.model_validate_json(data)
    except pydantic.ValidationError as e:
        source_log.warning("invalid grammar payload: %s", e.errors(include_url=False))
        return None
    return payload.to_grammar()


def load_grammar_file(path: str | pathlib.Path) -> Grammar | None:
    path = pathlib.Path(path)
    try:
        data = path.read_text(encoding="utf-8")
    except OSError as e:
        source_log.warning("unable to read grammar file %s: %s", path, e)
        return None
    return parse_grammar_payload(data)


class GrammarSource(typing.Protocol):
    async def fetch(self, grammar_id: str) -> Grammar | None:
        """Resolve a grammar id, or return `None` if it can't be resolved."""
        ...


class StaticGrammarSource:
    """A grammar source backed by a dictionary. Handy for tests and for
    serving a fixed set of grammars without the remote service."""

    def __init__(self, grammars: typing.Iterable[Grammar] = ()):
        self.grammars = {g.id: g for g in grammars}

    async def fetch(self, grammar_id: str) -> Grammar | None:
        return self.grammars.get(grammar_id)


class HttpGrammarSource:
    """Fetches grammars from the grammar service at `{base_url}/{id}`."""

    base_url: str
    timeout: float

    def __init__(self, base_url: str, timeout: float = 10.0):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def url_for(self, grammar_id: str) -> str:
        # Ids are a single path segment; "#", "?" and "/" must not escape it.
        segment = urllib.parse.quote(grammar_id, safe="")
        return f"{self.base_url}/{segment}"

    async def fetch(self, grammar_id: str) -> Grammar | None:
        url = self.url_for(grammar_id)
        timeout = aiohttp.ClientTimeout(total=self.timeout)
        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.get(url) as resp:
                    resp.raise_for_status()
                    body = await resp.read()
        except aiohttp.ClientResponseError as e:
            source_log.warning("grammar service returned %s for %s", e.status, url)
            return None
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            source_log.warning("unable to fetch %s: %r", url, e)
            return None

        grammar = parse_grammar_payload(body)
        if grammar is not None:
            source_log.info(
                "fetched grammar %s (%d productions)", grammar.id, len(grammar.productions)
            )
        return grammar

import argparse
import sys

from . import generator
from .config import Settings, configure_logging
from .source import load_grammar_file


EMPTY_WORD = "ε"


def _add_bounds(parser: argparse.ArgumentParser, settings: Settings):
    parser.add_argument(
        "--max-depth",
        type=int,
        default=settings.max_depth,
        help="The most rewrites a derivation may use (default: %(default)s)",
    )
    parser.add_argument(
        "--max-words",
        type=int,
        default=settings.max_words,
        help="Stop after this many distinct words (default: %(default)s)",
    )
    parser.add_argument(
        "--max-tokens",
        type=int,
        default=settings.max_tokens,
        help="The longest sentential form to consider, in symbols (default: %(default)s)",
    )


def _load(path: str) -> generator.GrammarGenerator | None:
    grammar = load_grammar_file(path)
    if grammar is None:
        print(f"Unable to load a grammar from {path}", file=sys.stderr)
        return None
    return generator.GrammarGenerator(grammar)


def _generate(parsed) -> int:
    gen = _load(parsed.grammar)
    if gen is None:
        return 2

    words = gen.generate_words(
        parsed.max_words, max_depth=parsed.max_depth, max_tokens=parsed.max_tokens
    )
    for word in words:
        print(word if word != "" else EMPTY_WORD)
    if words.truncated:
        print(
            f"({len(words)} words; the search was cut short by its bounds)",
            file=sys.stderr,
        )
    return 0


def _check(parsed) -> int:
    gen = _load(parsed.grammar)
    if gen is None:
        return 2

    belongs = gen.word_belongs(
        parsed.word,
        parsed.max_words,
        max_depth=parsed.max_depth,
        max_tokens=parsed.max_tokens,
    )
    print("yes" if belongs else "no")
    return 0 if belongs else 1


def _serve(parsed, settings: Settings) -> int:
    from .server import create_app

    app = create_app(settings)
    app.run(host=parsed.host, port=parsed.port, debug=False)
    return 0


def main(args: list[str]) -> int:
    settings = Settings.from_env()
    configure_logging(settings.log_level)

    parser = argparse.ArgumentParser(
        prog="grammar_validator",
        description="Sample the words of a context-free grammar, and check words against the "
        "sample. Membership is only ever checked against the bounded sample, so a 'no' may "
        "just mean the bounds were too small.",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    generate = commands.add_parser("generate", help="Print the sampled words of a grammar")
    generate.add_argument("grammar", help="Path to a JSON grammar file")
    _add_bounds(generate, settings)

    check = commands.add_parser("check", help="Check whether a word is in the sample")
    check.add_argument("grammar", help="Path to a JSON grammar file")
    check.add_argument("word", help="The word to check, symbols separated by spaces")
    _add_bounds(check, settings)

    serve = commands.add_parser("serve", help="Run the validator HTTP service")
    serve.add_argument("--host", default="127.0.0.1", help="(default: %(default)s)")
    serve.add_argument("--port", type=int, default=5000, help="(default: %(default)s)")

    parsed = parser.parse_args(args[1:])
    match parsed.command:
        case "generate":
            return _generate(parsed)
        case "check":
            return _check(parsed)
        case "serve":
            return _serve(parsed, settings)
        case _:
            parser.error(f"unknown command {parsed.command}")
            return 2


def run():
    sys.exit(main(sys.argv))


if __name__ == "__main__":
    run()

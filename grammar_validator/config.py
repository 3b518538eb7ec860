import dataclasses
import logging
import os
import typing

from dotenv import load_dotenv

from . import generator


DEFAULT_GRAMMAR_SERVICE_URL = "https://localhost:7107/api/grammar"
DEFAULT_FETCH_TIMEOUT = 10.0
DEFAULT_CORS_ORIGINS = ("http://localhost:3000", "http://localhost:5173")


def _env_int(env: typing.Mapping[str, str], name: str, default: int) -> int:
    value = env.get(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _env_float(env: typing.Mapping[str, str], name: str, default: float) -> float:
    value = env.get(name)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


@dataclasses.dataclass(frozen=True)
class Settings:
    grammar_service_url: str = DEFAULT_GRAMMAR_SERVICE_URL
    fetch_timeout: float = DEFAULT_FETCH_TIMEOUT
    cors_origins: typing.Tuple[str, ...] = DEFAULT_CORS_ORIGINS
    max_depth: int = generator.DEFAULT_MAX_DEPTH
    max_words: int = generator.DEFAULT_MAX_WORDS
    max_tokens: int = generator.DEFAULT_MAX_TOKENS
    log_level: str = "INFO"

    @classmethod
    def from_env(
        cls, env: typing.Mapping[str, str] | None = None, *, dotenv: bool = True
    ) -> "Settings":
        """Read settings from the environment (by default, `os.environ` after
        loading any `.env` file). Values that don't parse are ignored in favor
        of the defaults."""
        if env is None:
            if dotenv:
                load_dotenv()
            env = os.environ

        origins = env.get("VALIDATOR_CORS_ORIGINS")
        if origins is None:
            cors_origins = DEFAULT_CORS_ORIGINS
        else:
            cors_origins = tuple(o.strip() for o in origins.split(",") if o.strip())

        return cls(
            grammar_service_url=env.get("GRAMMAR_SERVICE_URL", DEFAULT_GRAMMAR_SERVICE_URL).rstrip(
                "/"
            ),
            fetch_timeout=_env_float(env, "GRAMMAR_FETCH_TIMEOUT", DEFAULT_FETCH_TIMEOUT),
            cors_origins=cors_origins,
            max_depth=_env_int(env, "VALIDATOR_MAX_DEPTH", generator.DEFAULT_MAX_DEPTH),
            max_words=_env_int(env, "VALIDATOR_MAX_WORDS", generator.DEFAULT_MAX_WORDS),
            max_tokens=_env_int(env, "VALIDATOR_MAX_TOKENS", generator.DEFAULT_MAX_TOKENS),
            log_level=env.get("LOG_LEVEL", "INFO").upper(),
        )


LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: str = "INFO"):
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
    )

import logging

from flask import Flask, Response, jsonify, request

from . import generator
from .config import Settings, configure_logging
from .source import GrammarSource, HttpGrammarSource


server_log = logging.getLogger("grammar_validator.server")

MESSAGE = "Hello World"
NOT_FOUND_MESSAGE = "Grammar not found."


def _bound_parameter(name: str, default: int) -> dict:
    return {
        "name": name,
        "in": "query",
        "required": False,
        "schema": {"type": "integer", "default": default},
    }


def openapi_document(settings: Settings) -> dict:
    return {
        "openapi": "3.0.3",
        "info": {"title": "Grammar validator", "version": "v1"},
        "paths": {
            "/api/validator/message": {
                "get": {
                    "responses": {
                        "200": {
                            "description": "Acknowledgement",
                            "content": {"text/plain": {"schema": {"type": "string"}}},
                        }
                    }
                }
            },
            "/api/validator/validate/{id}": {
                "get": {
                    "parameters": [
                        {
                            "name": "id",
                            "in": "path",
                            "required": True,
                            "schema": {"type": "string"},
                        },
                        {
                            "name": "word",
                            "in": "query",
                            "required": False,
                            "schema": {"type": "string"},
                        },
                        _bound_parameter("maxDepth", settings.max_depth),
                        _bound_parameter("maxWords", settings.max_words),
                        _bound_parameter("maxTokens", settings.max_tokens),
                    ],
                    "responses": {
                        "200": {
                            "description": "The sampled words and whether `word` is among them",
                            "content": {
                                "application/json": {
                                    "schema": {
                                        "type": "object",
                                        "properties": {
                                            "id": {"type": "string"},
                                            "startSymbol": {"type": "string"},
                                            "generatedCount": {"type": "integer"},
                                            "words": {
                                                "type": "array",
                                                "items": {"type": "string"},
                                            },
                                            "testWord": {"type": "string", "nullable": True},
                                            "belongs": {"type": "boolean"},
                                            "truncated": {"type": "boolean"},
                                        },
                                    }
                                }
                            },
                        },
                        "404": {"description": "Unknown grammar id"},
                    },
                }
            },
        },
    }


def create_app(settings: Settings | None = None, source: GrammarSource | None = None) -> Flask:
    if settings is None:
        # Started straight from a WSGI runner, e.g. `flask --app ... run`.
        settings = Settings.from_env()
        configure_logging(settings.log_level)
    if source is None:
        source = HttpGrammarSource(settings.grammar_service_url, settings.fetch_timeout)

    app = Flask(__name__)
    app.config["VALIDATOR_SETTINGS"] = settings
    allowed_origins = set(settings.cors_origins)

    @app.after_request
    def send_cors_headers(response: Response) -> Response:
        origin = request.headers.get("Origin")
        if origin is not None and origin in allowed_origins:
            response.headers["Access-Control-Allow-Origin"] = origin
            response.headers["Vary"] = "Origin"
            response.headers["Access-Control-Allow-Methods"] = (
                request.headers.get("Access-Control-Request-Method") or "*"
            )
            response.headers["Access-Control-Allow-Headers"] = (
                request.headers.get("Access-Control-Request-Headers") or "*"
            )
        return response

    @app.get("/api/validator/openapi.json")
    def openapi():
        return jsonify(openapi_document(settings))

    @app.get("/api/validator/message")
    def message():
        return Response(MESSAGE, mimetype="text/plain")

    @app.get("/api/validator/validate/<grammar_id>")
    async def validate(grammar_id: str):
        word = request.args.get("word")
        max_depth = request.args.get("maxDepth", settings.max_depth, type=int)
        max_words = request.args.get("maxWords", settings.max_words, type=int)
        max_tokens = request.args.get("maxTokens", settings.max_tokens, type=int)

        grammar = await source.fetch(grammar_id)
        if grammar is None:
            server_log.info("grammar %s not found", grammar_id)
            return Response(NOT_FOUND_MESSAGE, status=404, mimetype="text/plain")

        # One sample per request. Membership is checked against the same
        # sample, with the same bounds, so there's no need to regenerate it.
        gen = generator.GrammarGenerator(grammar, max_depth=max_depth)
        words = gen.generate_words(max_words, max_tokens=max_tokens)
        belongs = generator.word_belongs(word, words)

        server_log.info(
            "validated %r against %s: %d words, belongs=%s",
            word,
            grammar.id,
            len(words),
            belongs,
        )
        return jsonify(
            {
                "id": grammar.id,
                "startSymbol": grammar.start_symbol,
                "generatedCount": len(words),
                "words": list(words),
                "testWord": word,
                "belongs": belongs,
                "truncated": words.truncated,
            }
        )

    return app

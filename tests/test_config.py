from grammar_validator.config import DEFAULT_CORS_ORIGINS, Settings


def test_defaults():
    settings = Settings.from_env({})
    assert settings == Settings()
    assert settings.cors_origins == DEFAULT_CORS_ORIGINS
    assert (settings.max_depth, settings.max_words, settings.max_tokens) == (10, 1000, 30)


def test_from_env():
    settings = Settings.from_env(
        {
            "GRAMMAR_SERVICE_URL": "http://grammars.local/api/grammar/",
            "GRAMMAR_FETCH_TIMEOUT": "2.5",
            "VALIDATOR_CORS_ORIGINS": "http://a.local, http://b.local,",
            "VALIDATOR_MAX_DEPTH": "4",
            "VALIDATOR_MAX_WORDS": "50",
            "VALIDATOR_MAX_TOKENS": "12",
            "LOG_LEVEL": "debug",
        }
    )
    assert settings.grammar_service_url == "http://grammars.local/api/grammar"
    assert settings.fetch_timeout == 2.5
    assert settings.cors_origins == ("http://a.local", "http://b.local")
    assert (settings.max_depth, settings.max_words, settings.max_tokens) == (4, 50, 12)
    assert settings.log_level == "DEBUG"


def test_bad_numbers_fall_back():
    settings = Settings.from_env({"VALIDATOR_MAX_DEPTH": "ten", "GRAMMAR_FETCH_TIMEOUT": "soon"})
    assert settings.max_depth == 10
    assert settings.fetch_timeout == 10.0

import json

import pytest

from djangoql_completion.config import CompletionConfig, load_config, load_config_file


def test_defaults() -> None:
    config = load_config()

    assert config.completion_enabled is True
    assert config.values_case_sensitive is False
    assert config.cache_size == 100
    assert config.syntax_help_url is None
    assert config.fetch_delay == 0.3


def test_camel_case_and_snake_case() -> None:
    assert load_config({"valuesCaseSensitive": True}).values_case_sensitive is True
    assert load_config({"values_case_sensitive": True}).values_case_sensitive is True
    assert load_config({"cacheSize": 5}).cache_size == 5


def test_invalid_option_falls_back_to_default() -> None:
    config = load_config({"cacheSize": -3, "completionEnabled": False})

    assert config.cache_size == 100
    assert config.completion_enabled is False


def test_invalid_snake_case_option() -> None:
    assert load_config({"cache_size": "lots"}).cache_size == 100


def test_unknown_options_are_ignored() -> None:
    assert load_config({"selector": "textarea[name=q]"}) == CompletionConfig()


def test_not_a_mapping() -> None:
    assert load_config(["cacheSize", 5]) == CompletionConfig()  # type: ignore[arg-type]


def test_config_is_frozen() -> None:
    config = CompletionConfig()
    with pytest.raises(Exception):
        config.cache_size = 5  # type: ignore[misc]


def test_load_config_file(tmp_path) -> None:
    path = tmp_path / "completion.json"
    path.write_text(json.dumps({"cacheSize": 10, "syntaxHelpUrl": "/help/"}))

    config = load_config_file(path)

    assert config.cache_size == 10
    assert config.syntax_help_url == "/help/"


def test_load_config_file_missing(tmp_path) -> None:
    with pytest.raises(FileNotFoundError):
        load_config_file(tmp_path / "missing.json")


def test_load_config_file_invalid_json(tmp_path) -> None:
    path = tmp_path / "broken.json"
    path.write_text("{not json")

    with pytest.raises(json.JSONDecodeError):
        load_config_file(path)

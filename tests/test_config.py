"""Tests for environment configuration."""

from pathlib import Path

import pytest

from survivalfox.config import DEFAULT_DATA_DIR, ConfigError, load_settings

BASE_ENV = {"SUPABASE_URL": "https://proj.supabase.co", "SUPABASE_ANON_KEY": "anon"}


def test_defaults():
    settings = load_settings(dict(BASE_ENV))
    assert settings.function_name == "rag-answer-dev"
    assert settings.data_dir == DEFAULT_DATA_DIR
    assert settings.timeout == 120.0
    assert settings.developer_mode is None


def test_overrides():
    settings = load_settings({
        **BASE_ENV,
        "RAG_FUNCTION_NAME": "rag-answer",
        "DATA_DIR": "/tmp/fox",
        "RAG_TIMEOUT": "30",
        "DEVELOPER_MODE": "yes",
    })
    assert settings.function_name == "rag-answer"
    assert settings.data_dir == Path("/tmp/fox")
    assert settings.timeout == 30.0
    assert settings.developer_mode is True


@pytest.mark.parametrize("missing", ["SUPABASE_URL", "SUPABASE_ANON_KEY"])
def test_missing_required_value(missing):
    env = dict(BASE_ENV)
    del env[missing]
    with pytest.raises(ConfigError, match="Supabase config missing"):
        load_settings(env)


def test_bad_timeout():
    with pytest.raises(ConfigError, match="RAG_TIMEOUT"):
        load_settings({**BASE_ENV, "RAG_TIMEOUT": "soon"})


def test_bad_flag():
    with pytest.raises(ConfigError, match="DEVELOPER_MODE"):
        load_settings({**BASE_ENV, "DEVELOPER_MODE": "maybe"})


def test_make_gateway_uses_settings():
    gateway = load_settings({**BASE_ENV, "RAG_FUNCTION_NAME": "rag-answer"}).make_gateway()
    assert gateway.url == "https://proj.supabase.co/functions/v1/rag-answer"


def test_reads_dotenv_file(tmp_path, monkeypatch):
    monkeypatch.setenv("SUPABASE_URL", "placeholder")
    monkeypatch.setenv("SUPABASE_ANON_KEY", "placeholder")
    monkeypatch.delenv("SUPABASE_URL")
    monkeypatch.delenv("SUPABASE_ANON_KEY")
    env_file = tmp_path / ".env"
    env_file.write_text("SUPABASE_URL=https://dot.supabase.co\nSUPABASE_ANON_KEY=k\n")
    settings = load_settings(dotenv_path=env_file)
    assert settings.supabase_url == "https://dot.supabase.co"

"""Tests for loader configuration."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from unires.config import LoaderConfig

ENV_VARS = (
    "UNIRES_BASE_PATH",
    "UNIRES_CLASSPATH_ANCHOR",
    "UNIRES_HTTP_TIMEOUT",
    "UNIRES_MAX_REDIRECTS",
    "UNIRES_CHUNK_SIZE",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    config = LoaderConfig()
    assert config.base_path is None
    assert config.classpath_anchor is None
    assert config.http_timeout == 30.0
    assert config.max_redirects == 5
    assert config.chunk_size == 8192
    assert config.http_headers == {}


def test_validation():
    with pytest.raises(ValidationError):
        LoaderConfig(http_timeout=0)
    with pytest.raises(ValidationError):
        LoaderConfig(chunk_size=-1)


def test_from_env(monkeypatch):
    monkeypatch.setenv("UNIRES_BASE_PATH", "/srv/app")
    monkeypatch.setenv("UNIRES_CLASSPATH_ANCHOR", "myapp")
    monkeypatch.setenv("UNIRES_HTTP_TIMEOUT", "2.5")
    monkeypatch.setenv("UNIRES_MAX_REDIRECTS", "0")
    config = LoaderConfig.from_env()
    assert config.base_path == Path("/srv/app")
    assert config.classpath_anchor == "myapp"
    assert config.http_timeout == 2.5
    assert config.max_redirects == 0
    assert config.chunk_size == 8192


def test_from_env_file(tmp_path, monkeypatch):
    env_file = tmp_path / ".env"
    env_file.write_text("UNIRES_BASE_PATH=/from/file\nUNIRES_CHUNK_SIZE=1024\n")
    monkeypatch.setenv("UNIRES_CHUNK_SIZE", "4096")
    config = LoaderConfig.from_env(env_file)
    assert config.base_path == Path("/from/file")
    # variables already in the environment win over the file
    assert config.chunk_size == 4096


def test_from_env_with_prefix(monkeypatch):
    monkeypatch.setenv("MYAPP_BASE_PATH", "/opt/myapp")
    assert LoaderConfig.from_env(prefix="MYAPP_").base_path == Path("/opt/myapp")

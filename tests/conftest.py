# tests/conftest.py
import logging
import pytest

from llmcore import Context, UserMessage, get_model

BASE_URL = "http://llm.test/v1"


@pytest.fixture(autouse=True)
def provider_env(monkeypatch):
    # API_KEY / BASE_URL are read per call, so patching the env is enough
    monkeypatch.setenv("BASE_URL", BASE_URL)
    monkeypatch.setenv("API_KEY", "test-key")


@pytest.fixture
def model():
    return get_model("kimi", "kimi-k2.5")


@pytest.fixture
def context():
    return Context(
        system_prompt="You are a helpful assistant.",
        messages=[UserMessage(content="Hello")],
    )


@pytest.fixture
def caplog_debug(caplog):
    caplog.set_level(logging.DEBUG)
    return caplog

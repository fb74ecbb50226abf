# tests/test_config.py
from importlib import reload
import llmcore.core.config as cfg_mod


def test_defaults_present(monkeypatch):
    # Timeouts fall back to sane positive defaults when the env says nothing.
    monkeypatch.delenv("CONNECT_TIMEOUT", raising=False)
    monkeypatch.delenv("REQUEST_TIMEOUT", raising=False)
    reload(cfg_mod)
    assert cfg_mod.CONNECT_TIMEOUT > 0
    assert cfg_mod.REQUEST_TIMEOUT > 0


def test_timeout_parsing(monkeypatch):
    monkeypatch.setenv("REQUEST_TIMEOUT", "5.5")
    reload(cfg_mod)
    assert cfg_mod.REQUEST_TIMEOUT == 5.5
    monkeypatch.delenv("REQUEST_TIMEOUT")
    reload(cfg_mod)
    assert cfg_mod.REQUEST_TIMEOUT == 120.0


def test_key_and_url_read_at_call_time(monkeypatch):
    # No reload needed: the values are looked up on every call.
    monkeypatch.setenv("API_KEY", "k-1")
    monkeypatch.setenv("BASE_URL", "http://one/v1")
    assert cfg_mod.api_key() == "k-1"
    assert cfg_mod.base_url() == "http://one/v1"
    monkeypatch.setenv("API_KEY", "k-2")
    assert cfg_mod.api_key() == "k-2"


def test_base_url_default_and_missing_key(monkeypatch):
    monkeypatch.delenv("BASE_URL")
    monkeypatch.delenv("API_KEY")
    assert cfg_mod.base_url() == cfg_mod.DEFAULT_BASE_URL
    assert cfg_mod.api_key() is None

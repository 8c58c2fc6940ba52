import pytest

from careerflow.config import ConfigManager, ConfigurationError
from careerflow.config.settings import REMOTE_KEY_KEY, REMOTE_URL_KEY
from careerflow.storage import LocalStore

ENV_VARS = ("API_KEY", "GEMINI_API_KEY", "SUPABASE_URL", "SUPABASE_KEY", "FAST_MODEL", "PRO_MODEL")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def make_manager(tmp_path, store=None):
    store = store or LocalStore(tmp_path / "storage")
    return ConfigManager(env_file=str(tmp_path / "missing.env"), local_store=store)


def test_missing_api_key_is_a_configuration_error(tmp_path):
    manager = make_manager(tmp_path)

    with pytest.raises(ConfigurationError, match="API_KEY"):
        manager.require_api_key()
    assert manager.validate_config()["errors"]


def test_api_key_and_models_from_environment(tmp_path, monkeypatch):
    monkeypatch.setenv("API_KEY", "secret-key-123")
    monkeypatch.setenv("FAST_MODEL", "gemini-test-flash")

    manager = make_manager(tmp_path)

    assert manager.require_api_key() == "secret-key-123"
    assert manager.get_llm_config().fast_model == "gemini-test-flash"
    assert manager.get_llm_config().pro_model == "gemini-3-pro-preview"


def test_gemini_api_key_is_accepted(tmp_path, monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "other-key")

    assert make_manager(tmp_path).require_api_key() == "other-key"


def test_remote_not_configured_by_default(tmp_path):
    remote = make_manager(tmp_path).get_remote_config()

    assert not remote.is_configured
    assert remote.source is None


def test_environment_remote_settings_win(tmp_path, monkeypatch):
    store = LocalStore(tmp_path / "storage")
    store.set_item(REMOTE_URL_KEY, "https://local.supabase.co")
    store.set_item(REMOTE_KEY_KEY, "local-key")
    monkeypatch.setenv("SUPABASE_URL", "https://env.supabase.co")
    monkeypatch.setenv("SUPABASE_KEY", "env-key")

    remote = make_manager(tmp_path, store).get_remote_config()

    assert remote.url == "https://env.supabase.co"
    assert remote.is_from_env


def test_update_and_clear_remote_settings(tmp_path):
    manager = make_manager(tmp_path)

    remote = manager.update_remote_config(" https://mine.supabase.co ", "anon-key")

    assert remote.is_configured
    assert remote.source == "local"
    assert remote.url == "https://mine.supabase.co"
    assert manager.local_store.get_item(REMOTE_KEY_KEY) == "anon-key"

    # Saved settings are picked up by a fresh manager
    assert make_manager(tmp_path, manager.local_store).get_remote_config().is_configured

    cleared = manager.clear_remote_config()

    assert not cleared.is_configured
    assert manager.local_store.get_item(REMOTE_URL_KEY) is None


def test_mask_sensitive_config(tmp_path, monkeypatch):
    monkeypatch.setenv("API_KEY", "secret-key-123")
    monkeypatch.setenv("SUPABASE_URL", "https://env.supabase.co")
    monkeypatch.setenv("SUPABASE_KEY", "abc")

    masked = make_manager(tmp_path).mask_sensitive_config()

    assert masked["llm"]["api_key"] == "secret-k..."
    assert masked["remote"]["key"] == "***"
    assert masked["remote"]["url"] == "https://env.supabase.co"

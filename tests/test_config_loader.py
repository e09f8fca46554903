import pytest
from pydantic import ValidationError

from trustay.utils.config_loader import load_app_config


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("TRUSTAY_API_URL", "TRUSTAY_API_TIMEOUT", "INTEGRATIONS_MODE", "REDIS_URL"):
        monkeypatch.delenv(name, raising=False)
    # keep a developer's .env out of the tests
    monkeypatch.setattr("trustay.utils.config_loader.load_dotenv", lambda: None)


def test_defaults_when_file_missing(tmp_path):
    cfg = load_app_config(tmp_path / "missing.yml")

    assert cfg.api.base_url == "http://localhost:3000"
    assert cfg.integrations.mode == "auto"
    assert cfg.message_metadata.expiry_days == 30
    assert cfg.message_metadata.redis_url is None


def test_yaml_values_are_loaded(tmp_path):
    path = tmp_path / "trustay.yml"
    path.write_text(
        "api:\n  base_url: https://api.trustay.vn\n  timeout_seconds: 5\n"
        "integrations:\n  mode: real\n"
        "message_metadata:\n  expiry_days: 7\n",
        encoding="utf-8",
    )

    cfg = load_app_config(path)

    assert cfg.api.base_url == "https://api.trustay.vn"
    assert cfg.api.timeout_seconds == 5
    assert cfg.integrations.mode == "real"
    assert cfg.message_metadata.expiry_days == 7


def test_environment_overrides_file(tmp_path, monkeypatch):
    path = tmp_path / "trustay.yml"
    path.write_text("integrations:\n  mode: real\n", encoding="utf-8")
    monkeypatch.setenv("TRUSTAY_API_URL", "https://staging.trustay.vn/")
    monkeypatch.setenv("INTEGRATIONS_MODE", " Mock ")
    monkeypatch.setenv("REDIS_URL", "redis://localhost:6379/0")

    cfg = load_app_config(path)

    assert cfg.api.base_url == "https://staging.trustay.vn"
    assert cfg.integrations.mode == "mock"
    assert cfg.message_metadata.redis_url == "redis://localhost:6379/0"


def test_invalid_values_raise(tmp_path, monkeypatch):
    monkeypatch.setenv("INTEGRATIONS_MODE", "sometimes")

    with pytest.raises(ValidationError):
        load_app_config(tmp_path / "missing.yml")


def test_repository_config_is_valid():
    cfg = load_app_config()

    assert cfg.pagination.default_limit == 12
    assert cfg.message_metadata.key_prefix == "trustay_message_metadata"

import pytest
from config.settings import (
    DEFAULT_BASE_URL,
    ConfigurationError,
    Settings,
    SweetProcessConfig,
    load_settings,
)

def test_load_settings_success(mock_env):
    """Test loading settings with valid environment variables."""
    settings = load_settings()

    assert isinstance(settings, Settings)
    assert settings.sweetprocess.api_token == "test_token"
    assert settings.sweetprocess.base_url == "https://sweetprocess.test/api/v1"
    assert settings.sweetprocess.timeout == 10.0
    assert settings.log_level == "DEBUG"

def test_load_settings_defaults(clean_env, monkeypatch):
    """Test that only the token is required."""
    monkeypatch.setenv("SWEETPROCESS_API_TOKEN", "token")

    settings = load_settings()

    assert settings.sweetprocess.base_url == DEFAULT_BASE_URL
    assert settings.sweetprocess.timeout == 30.0
    assert settings.log_level == "INFO"

def test_load_settings_missing_token(clean_env):
    """Test error when the API token is missing."""
    with pytest.raises(ConfigurationError, match="SWEETPROCESS_API_TOKEN is required"):
        load_settings()

def test_load_settings_invalid_url(clean_env, monkeypatch):
    """Test error when the base URL is not HTTPS."""
    monkeypatch.setenv("SWEETPROCESS_API_TOKEN", "token")
    monkeypatch.setenv("SWEETPROCESS_BASE_URL", "http://insecure.test")

    with pytest.raises(ConfigurationError, match="must use HTTPS"):
        load_settings()

def test_load_settings_invalid_timeout(clean_env, monkeypatch):
    """Test that an unparsable timeout is wrapped in ConfigurationError."""
    monkeypatch.setenv("SWEETPROCESS_API_TOKEN", "token")
    monkeypatch.setenv("SWEETPROCESS_TIMEOUT", "soon")

    with pytest.raises(ConfigurationError, match="Failed to load configuration"):
        load_settings()

def test_load_settings_invalid_log_level(clean_env, monkeypatch):
    monkeypatch.setenv("SWEETPROCESS_API_TOKEN", "token")
    monkeypatch.setenv("LOG_LEVEL", "chatty")

    with pytest.raises(ConfigurationError, match="LOG_LEVEL"):
        load_settings()

def test_load_settings_from_env_file(clean_env, tmp_path):
    """Test loading values from a .env file."""
    env_file = tmp_path / "custom.env"
    env_file.write_text(
        "# SweetProcess\n"
        "SWEETPROCESS_API_TOKEN=\"from_file\"\n"
        "\n"
        "not a setting\n"
        "SWEETPROCESS_TIMEOUT='5'\n"
    )

    settings = load_settings(env_file=env_file)

    assert settings.sweetprocess.api_token == "from_file"
    assert settings.sweetprocess.timeout == 5.0

def test_environment_overrides_env_file(clean_env, monkeypatch, tmp_path):
    monkeypatch.setenv("SWEETPROCESS_API_TOKEN", "from_environment")
    (tmp_path / ".env").write_text("SWEETPROCESS_API_TOKEN=from_file\n")

    settings = load_settings()

    assert settings.sweetprocess.api_token == "from_environment"

def test_config_headers():
    config = SweetProcessConfig(api_token="abc")
    assert config.headers["Authorization"] == "Token abc"
    assert config.headers["Content-Type"] == "application/json"

def test_config_repr_redacts_token():
    config = SweetProcessConfig(api_token="super-secret")
    assert "super-secret" not in repr(config)
    assert "super-secret" not in repr(Settings(sweetprocess=config))

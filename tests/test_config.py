import pytest

from core.config import DEFAULT_PORT, load_settings
from core.exceptions import ConfigError


def test_missing_database_is_fatal():
    with pytest.raises(ConfigError):
        load_settings({"PORT": "5000"}, dotenv=False)


def test_defaults():
    settings = load_settings({"DATABASE": "serviceAccountKey.json"}, dotenv=False)

    assert settings.port == DEFAULT_PORT
    assert settings.cors_origins == ["*"]
    assert settings.db_connect_retries == 3
    assert settings.uses_application_default is False


def test_environment_overrides():
    settings = load_settings(
        {
            "DATABASE": "default",
            "PORT": "8080",
            "CORS_ORIGINS": "https://a.example.com, https://b.example.com",
            "DB_CONNECT_RETRIES": "5",
            "LOG_LEVEL": "debug",
        },
        dotenv=False,
    )

    assert settings.port == 8080
    assert settings.cors_origins == ["https://a.example.com", "https://b.example.com"]
    assert settings.db_connect_retries == 5
    assert settings.log_level == "DEBUG"
    assert settings.uses_application_default is True


def test_empty_values_fall_back_to_defaults():
    settings = load_settings({"DATABASE": "default", "PORT": ""}, dotenv=False)

    assert settings.port == DEFAULT_PORT


@pytest.mark.parametrize("name,value", [
    ("PORT", "not-a-port"),
    ("PORT", "70000"),
    ("DB_CONNECT_RETRIES", "0"),
    ("LOG_LEVEL", "chatty"),
])
def test_invalid_values_raise_config_error(name, value):
    with pytest.raises(ConfigError):
        load_settings({"DATABASE": "default", name: value}, dotenv=False)


def test_dotenv_is_read_from_working_directory(tmp_path, monkeypatch):
    (tmp_path / ".env").write_text("DATABASE=from-dotenv.json\n")
    monkeypatch.setenv("DATABASE", "placeholder")
    monkeypatch.delenv("DATABASE")
    monkeypatch.chdir(tmp_path)

    settings = load_settings()

    assert settings.database == "from-dotenv.json"

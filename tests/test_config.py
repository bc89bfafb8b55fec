"""Config tests: environment loading and validation."""
import pytest
from bloodq.config import Config


@pytest.fixture(autouse=True)
def _no_dotenv(monkeypatch):
    monkeypatch.setattr("bloodq.config.load_dotenv", lambda **_: None)
    for name in (
        "GOOGLE_GEMINI_API_KEY",
        "LOG_LEVEL",
        "BLOODQ_HOST",
        "BLOODQ_PORT",
        "BLOODQ_SETTINGS_PATH",
        "BLOODQ_USAGE_PATH",
        "BLOODQ_MAX_IMAGES_PER_DAY",
    ):
        monkeypatch.delenv(name, raising=False)


def test_config_defaults():
    """Everything is optional; defaults apply."""
    config = Config.from_env()

    assert config.gemini_api_key is None
    assert config.log_level == "INFO"
    assert config.host == "127.0.0.1"
    assert config.port == 8000
    assert config.max_images_per_day == 2
    assert config.settings_path.endswith(".json")


def test_config_from_env(monkeypatch):
    monkeypatch.setenv("GOOGLE_GEMINI_API_KEY", "g-key")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("BLOODQ_HOST", "0.0.0.0")
    monkeypatch.setenv("BLOODQ_PORT", "9090")
    monkeypatch.setenv("BLOODQ_USAGE_PATH", "/tmp/usage.json")
    monkeypatch.setenv("BLOODQ_MAX_IMAGES_PER_DAY", "5")

    config = Config.from_env()

    assert config.gemini_api_key == "g-key"
    assert config.log_level == "DEBUG"
    assert config.host == "0.0.0.0"
    assert config.port == 9090
    assert config.usage_path == "/tmp/usage.json"
    assert config.max_images_per_day == 5


def test_config_blank_gemini_key_becomes_none(monkeypatch):
    monkeypatch.setenv("GOOGLE_GEMINI_API_KEY", "")
    assert Config.from_env().gemini_api_key is None


@pytest.mark.parametrize("port", ["abc", "0", "-1"])
def test_config_invalid_port_fails(monkeypatch, port):
    monkeypatch.setenv("BLOODQ_PORT", port)
    with pytest.raises(ValueError, match="BLOODQ_PORT"):
        Config.from_env()


def test_config_invalid_limit_fails(monkeypatch):
    monkeypatch.setenv("BLOODQ_MAX_IMAGES_PER_DAY", "two")
    with pytest.raises(ValueError, match="BLOODQ_MAX_IMAGES_PER_DAY"):
        Config.from_env()


def test_config_immutable():
    """Frozen dataclass: attribute assignment must fail."""
    config = Config.from_env()

    with pytest.raises(Exception):
        config.port = 1

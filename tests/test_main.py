"""Command-line client tests."""
import json
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

from bloodq.analyzer import AnalysisOutcome, AnalysisResult
from bloodq.main import format_time_remaining, image_to_data_uri, main, mask_key


@pytest.fixture
def env(tmp_path, monkeypatch):
    monkeypatch.setattr("bloodq.config.load_dotenv", lambda **_: None)
    monkeypatch.delenv("GOOGLE_GEMINI_API_KEY", raising=False)
    monkeypatch.setenv("BLOODQ_SETTINGS_PATH", str(tmp_path / "settings.json"))
    monkeypatch.setenv("BLOODQ_USAGE_PATH", str(tmp_path / "usage.json"))
    monkeypatch.setenv("BLOODQ_MAX_IMAGES_PER_DAY", "1")
    return tmp_path


@pytest.fixture
def image(tmp_path) -> Path:
    p = tmp_path / "panel.jpg"
    p.write_bytes(b"\xff\xd8\xff")
    return p


def test_format_time_remaining():
    assert format_time_remaining(0) == "0h 0m"
    assert format_time_remaining((5 * 60 + 7) * 60 * 1000 + 999) == "5h 7m"


def test_mask_key():
    assert mask_key(None) == "not set"
    assert mask_key("  ") == "not set"
    assert mask_key("short") == "set"
    assert mask_key("sk-1234567890abcd") == "sk-1…abcd"


def test_image_to_data_uri(image):
    assert image_to_data_uri(image) == "data:image/jpeg;base64,/9j/"


def test_image_to_data_uri_rejects_non_image(tmp_path):
    p = tmp_path / "notes.txt"
    p.write_text("hello")
    with pytest.raises(ValueError):
        image_to_data_uri(p)


def test_settings_command_saves_key_and_preference(env):
    assert main(["settings", "--key", "claude", "ant-key", "--prefer", "claude"]) == 0

    saved = json.loads((env / "settings.json").read_text())
    assert saved == {"apiKeys": {"claude": "ant-key"}, "preferredProvider": "claude"}


def test_settings_command_rejects_unknown_provider(env):
    assert main(["settings", "--key", "mistral", "x"]) == 2
    assert not (env / "settings.json").exists()


def test_analyze_command_passes_stored_key(env, image):
    main(["settings", "--key", "openai", "sk-key", "--prefer", "openai"])
    outcome = AnalysisOutcome.ok(AnalysisResult(text="# ok", provider="openai", timestamp=1))

    with patch("bloodq.main.Analyzer.analyze", new=AsyncMock(return_value=outcome)) as analyze:
        assert main(["analyze", str(image), "--context", "  fasting  "]) == 0

    request, api_key = analyze.call_args.args
    assert request.provider == "openai"
    assert request.context_text == "fasting"
    assert request.image.startswith("data:image/jpeg;base64,")
    assert api_key == "sk-key"


def test_analyze_command_enforces_daily_limit(env, image):
    outcome = AnalysisOutcome.ok(AnalysisResult(text="ok", provider="gemini", timestamp=1))

    with patch("bloodq.main.Analyzer.analyze", new=AsyncMock(return_value=outcome)) as analyze:
        assert main(["analyze", str(image)]) == 0
        assert main(["analyze", str(image)]) == 1

    assert analyze.call_count == 1


def test_analyze_command_reports_failure(env, image):
    outcome = AnalysisOutcome.fail("No Gemini API key provided")

    with patch("bloodq.main.Analyzer.analyze", new=AsyncMock(return_value=outcome)):
        assert main(["analyze", str(image)]) == 1

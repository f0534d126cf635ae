from __future__ import annotations

import os

import pytest

from cli.config import load_config
from settings import DEFAULT_SENSOR_ID, DEFAULT_URL, get_settings, load_environment

_KEYS = (
    "URL",
    "LOG_FILE",
    "SENSOR_ID",
    "SOUND_HIGH_THRESHOLD",
    "SOUND_MEDIUM_THRESHOLD",
    "FAN_OUT",
    "POLL_INTERVAL",
    "REQUEST_TIMEOUT",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    # setenv first so monkeypatch restores keys that dotenv adds during a test
    for key in _KEYS:
        monkeypatch.setenv(key, "placeholder")
        monkeypatch.delenv(key)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_defaults() -> None:
    settings = get_settings()

    assert settings.url == DEFAULT_URL
    assert settings.log_file == "sensor.log"
    assert settings.sensor_id == DEFAULT_SENSOR_ID == "AM.R1B7B"
    assert settings.sound_high_threshold == 3500.0
    assert settings.sound_medium_threshold == 350.0
    assert settings.fan_out == 5
    assert settings.poll_interval == 1.0
    assert settings.log_level == "WARNING"


def test_environment_overrides_apply(monkeypatch) -> None:
    monkeypatch.setenv("URL", "https://seismic.example/objects.json")
    monkeypatch.setenv("LOG_FILE", "/tmp/monitor.log")
    monkeypatch.setenv("SENSOR_ID", "AM.R0000")
    monkeypatch.setenv("SOUND_HIGH_THRESHOLD", "1200.5")
    monkeypatch.setenv("SOUND_MEDIUM_THRESHOLD", "80")
    monkeypatch.setenv("FAN_OUT", "3")
    monkeypatch.setenv("POLL_INTERVAL", "2.5")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = get_settings()

    assert settings.url == "https://seismic.example/objects.json"
    assert settings.log_file == "/tmp/monitor.log"
    assert settings.sensor_id == "AM.R0000"
    assert settings.sound_high_threshold == 1200.5
    assert settings.sound_medium_threshold == 80.0
    assert settings.fan_out == 3
    assert settings.poll_interval == 2.5
    assert settings.log_level == "DEBUG"


def test_invalid_values_fall_back_to_defaults(monkeypatch) -> None:
    monkeypatch.setenv("SOUND_HIGH_THRESHOLD", "very loud")
    monkeypatch.setenv("FAN_OUT", "-2")
    monkeypatch.setenv("POLL_INTERVAL", "soon")
    monkeypatch.setenv("REQUEST_TIMEOUT", "0")
    monkeypatch.setenv("SENSOR_ID", "   ")
    monkeypatch.setenv("LOG_LEVEL", "verbose")

    settings = get_settings()

    assert settings.sound_high_threshold == 3500.0
    assert settings.fan_out == 5
    assert settings.poll_interval == 1.0
    assert settings.request_timeout == 10.0
    assert settings.sensor_id == "AM.R1B7B"
    assert settings.log_level == "WARNING"


def test_env_file_preferred_over_example(tmp_path) -> None:
    (tmp_path / ".env").write_text("SENSOR_ID=FROM.ENV\n")
    (tmp_path / ".env.example").write_text("SENSOR_ID=FROM.EXAMPLE\n")

    loaded = load_environment(tmp_path)

    assert loaded == tmp_path / ".env"
    assert get_settings().sensor_id == "FROM.ENV"


def test_example_file_used_when_env_missing(tmp_path) -> None:
    (tmp_path / ".env.example").write_text("SENSOR_ID=FROM.EXAMPLE\n")

    assert load_environment(tmp_path) == tmp_path / ".env.example"
    assert get_settings().sensor_id == "FROM.EXAMPLE"


def test_process_environment_wins_over_file(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv("SENSOR_ID", "FROM.PROCESS")
    (tmp_path / ".env").write_text("SENSOR_ID=FROM.ENV\n")

    load_environment(tmp_path)

    assert os.environ["SENSOR_ID"] == "FROM.PROCESS"


def test_no_env_file_is_fine(tmp_path) -> None:
    assert load_environment(tmp_path) is None


def test_cli_overrides_layer_on_settings(monkeypatch) -> None:
    monkeypatch.setenv("SENSOR_ID", "AM.ENV")

    settings = load_config(sensor_id="AM.CLI", fan_out=2, interval=0.0)

    assert settings.sensor_id == "AM.CLI"
    assert settings.fan_out == 2
    assert settings.poll_interval == 0.0
    assert settings.url == DEFAULT_URL

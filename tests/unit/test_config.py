"""Unit tests for configuration loading."""

import sys
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent / "src"))

from synthcache import config as config_module
from synthcache.config import (
    DEFAULT_CONFIG,
    CacheConfig,
    HTTPConfig,
    SynthcacheConfig,
    TTSConfig,
    generate_config,
    load_config,
)
from synthcache.tts.models import AudioEncoding


class TestDefaults:
    """Test built-in defaults when nothing is configured."""

    def test_missing_file_gives_defaults(self, tmp_path: Path) -> None:
        config = load_config(tmp_path / "absent.toml")

        assert config == SynthcacheConfig()

    def test_default_values(self) -> None:
        config = load_config()

        assert config.tts.provider == "google"
        assert config.tts.language_code == "en-US"
        assert config.tts.voice == "en-US-Neural2-F"
        assert config.tts.speaking_rate == 1.0
        assert config.tts.pitch == 0.0
        assert config.tts.audio_encoding is AudioEncoding.MP3
        assert config.cache.enabled is True
        assert config.cache.max_size == 100
        assert config.cache.ttl_hours == 24
        assert config.cache.ttl_seconds == 86400
        assert config.cache.eviction_fraction == 0.2
        assert config.cache.coalesce is True
        assert config.http.host == "127.0.0.1"
        assert config.http.port == 3000
        assert config.http.max_text_length == 5000


class TestConfigFile:
    """Test values read from the TOML file."""

    def test_file_values(self, tmp_path: Path) -> None:
        path = tmp_path / "config.toml"
        path.write_text(
            """
[tts]
provider = "elevenlabs"
voice = "en-GB-Neural2-B"
speaking_rate = 1.5
audio_encoding = "ogg_opus"

[cache]
enabled = false
max_size = 10
ttl_hours = 0.5

[http]
port = 8080
"""
        )

        config = load_config(path)

        assert config.tts == TTSConfig(
            provider="elevenlabs",
            voice="en-GB-Neural2-B",
            speaking_rate=1.5,
            audio_encoding=AudioEncoding.OGG_OPUS,
        )
        assert config.cache == CacheConfig(enabled=False, max_size=10, ttl_hours=0.5)
        assert config.http == HTTPConfig(port=8080)

    def test_default_path_is_used(self) -> None:
        config_module.CONFIG_PATH.write_text('[tts]\nvoice = "from-file"\n')

        assert load_config().tts.voice == "from-file"

    def test_invalid_toml_exits(self, tmp_path: Path, capsys) -> None:
        path = tmp_path / "config.toml"
        path.write_text("[tts\nvoice = ")

        with pytest.raises(SystemExit) as exc_info:
            load_config(path)

        assert exc_info.value.code == 1
        assert "Invalid config file" in capsys.readouterr().err

    def test_generated_config_loads_as_defaults(self, tmp_path: Path) -> None:
        path = generate_config(tmp_path / "nested" / "config.toml")

        assert path.read_text() == DEFAULT_CONFIG
        assert load_config(path) == SynthcacheConfig()


class TestEnvironmentOverrides:
    """Test environment variables taking priority over the file."""

    def test_env_overrides_file(self, tmp_path: Path, monkeypatch) -> None:
        path = tmp_path / "config.toml"
        path.write_text('[tts]\nvoice = "file-voice"\n[cache]\nmax_size = 10\n')
        monkeypatch.setenv("TTS_VOICE_NAME", "env-voice")
        monkeypatch.setenv("CACHE_MAX_SIZE", "42")

        config = load_config(path)

        assert config.tts.voice == "env-voice"
        assert config.cache.max_size == 42

    def test_empty_env_value_ignored(self, monkeypatch) -> None:
        monkeypatch.setenv("TTS_VOICE_NAME", "")

        assert load_config().tts.voice == "en-US-Neural2-F"

    def test_numeric_env_values(self, monkeypatch) -> None:
        monkeypatch.setenv("TTS_SPEAKING_RATE", "0.75")
        monkeypatch.setenv("TTS_PITCH", "-2.5")
        monkeypatch.setenv("CACHE_TTL_HOURS", "48")
        monkeypatch.setenv("CACHE_EVICTION_FRACTION", "0.5")
        monkeypatch.setenv("SYNTHCACHE_HTTP_PORT", "9000")
        monkeypatch.setenv("SYNTHCACHE_MAX_TEXT_LENGTH", "100")

        config = load_config()

        assert config.tts.speaking_rate == 0.75
        assert config.tts.pitch == -2.5
        assert config.cache.ttl_seconds == 48 * 60 * 60
        assert config.cache.eviction_fraction == 0.5
        assert config.http.port == 9000
        assert config.http.max_text_length == 100

    @pytest.mark.parametrize(
        ("value", "expected"),
        [("false", False), ("FALSE", False), ("true", True), ("0", True), ("no", True)],
    )
    def test_only_false_disables_cache(
        self, monkeypatch, value: str, expected: bool
    ) -> None:
        monkeypatch.setenv("CACHE_ENABLED", value)

        assert load_config().cache.enabled is expected

    def test_coalesce_can_be_disabled(self, monkeypatch) -> None:
        monkeypatch.setenv("CACHE_COALESCE", "false")

        assert load_config().cache.coalesce is False

    def test_provider_and_encoding(self, monkeypatch) -> None:
        monkeypatch.setenv("SYNTHCACHE_PROVIDER", "elevenlabs")
        monkeypatch.setenv("TTS_AUDIO_ENCODING", "linear16")

        config = load_config()

        assert config.tts.provider == "elevenlabs"
        assert config.tts.audio_encoding is AudioEncoding.LINEAR16


class TestInvalidValues:
    """Test that bad values stop startup with a readable message."""

    @pytest.mark.parametrize(
        ("env", "value"),
        [
            ("CACHE_MAX_SIZE", "many"),
            ("TTS_SPEAKING_RATE", "fast"),
            ("TTS_AUDIO_ENCODING", "FLAC"),
            ("SYNTHCACHE_HTTP_PORT", "http"),
        ],
    )
    def test_unparseable_values_exit(
        self, monkeypatch, capsys, env: str, value: str
    ) -> None:
        monkeypatch.setenv(env, value)

        with pytest.raises(SystemExit) as exc_info:
            load_config()

        assert exc_info.value.code == 1
        assert "Invalid config value" in capsys.readouterr().err

    @pytest.mark.parametrize(
        ("env", "value", "problem"),
        [
            ("CACHE_MAX_SIZE", "0", "cache.max_size must be at least 1"),
            ("CACHE_TTL_HOURS", "0", "cache.ttl_hours must be positive"),
            ("CACHE_EVICTION_FRACTION", "1.5", "cache.eviction_fraction"),
            ("TTS_SPEAKING_RATE", "0", "tts.speaking_rate must be positive"),
            ("SYNTHCACHE_MAX_TEXT_LENGTH", "0", "http.max_text_length"),
        ],
    )
    def test_out_of_range_values_exit(
        self, monkeypatch, capsys, env: str, value: str, problem: str
    ) -> None:
        monkeypatch.setenv(env, value)

        with pytest.raises(SystemExit):
            load_config()

        assert problem in capsys.readouterr().err

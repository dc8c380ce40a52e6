"""Configuration management for synthcache.

Loads configuration from ~/.config/synthcache/config.toml when present.
Priority chain: CLI flags > env vars > config file > built-in defaults.
"""

import os
import sys
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .tts.models import AudioEncoding

CONFIG_DIR = Path.home() / ".config" / "synthcache"
CONFIG_PATH = CONFIG_DIR / "config.toml"

DEFAULT_CONFIG = """\
# synthcache configuration
# Every value can also be set through the environment variable named above it.

[tts]
# Provider: "google" (Google Cloud Text-to-Speech), "elevenlabs"
# SYNTHCACHE_PROVIDER
provider = "google"

# TTS_LANGUAGE_CODE
language_code = "en-US"

# TTS_VOICE_NAME
voice = "en-US-Neural2-F"

# TTS_SPEAKING_RATE
speaking_rate = 1.0

# TTS_PITCH
pitch = 0.0

# "MP3", "OGG_OPUS" or "LINEAR16" (TTS_AUDIO_ENCODING)
audio_encoding = "MP3"

[cache]
# In-memory synthesis cache (CACHE_ENABLED)
enabled = true

# Maximum number of cached clips (CACHE_MAX_SIZE)
max_size = 100

# Entries older than this are synthesized again (CACHE_TTL_HOURS)
ttl_hours = 24

# Share of max_size evicted at once when the cache is full (CACHE_EVICTION_FRACTION)
eviction_fraction = 0.2

# Concurrent misses for the same request share one synthesis call (CACHE_COALESCE)
coalesce = true

[http]
# SYNTHCACHE_HTTP_HOST
host = "127.0.0.1"

# SYNTHCACHE_HTTP_PORT
port = 3000

# Longest text accepted by the HTTP API (SYNTHCACHE_MAX_TEXT_LENGTH)
max_text_length = 5000

# Credentials are read from the environment, not this file:
#   GOOGLE_APPLICATION_CREDENTIALS  - Google Cloud service account JSON
#   ELEVENLABS_API_KEY              - ElevenLabs provider
"""


@dataclass(frozen=True)
class TTSConfig:
    """Synthesis defaults and provider selection."""

    provider: str = "google"
    language_code: str = "en-US"
    voice: str = "en-US-Neural2-F"
    speaking_rate: float = 1.0
    pitch: float = 0.0
    audio_encoding: AudioEncoding = AudioEncoding.MP3


@dataclass(frozen=True)
class CacheConfig:
    """Synthesis cache configuration."""

    enabled: bool = True
    max_size: int = 100
    ttl_hours: float = 24.0
    eviction_fraction: float = 0.2
    coalesce: bool = True

    @property
    def ttl_seconds(self) -> float:
        return self.ttl_hours * 60 * 60


@dataclass(frozen=True)
class HTTPConfig:
    """HTTP API configuration."""

    host: str = "127.0.0.1"
    port: int = 3000
    max_text_length: int = 5000


@dataclass(frozen=True)
class SynthcacheConfig:
    """Top-level synthcache configuration."""

    tts: TTSConfig = TTSConfig()
    cache: CacheConfig = CacheConfig()
    http: HTTPConfig = HTTPConfig()


def generate_config(path: Path | None = None) -> Path:
    """Generate default config file at ~/.config/synthcache/config.toml."""
    path = path or CONFIG_PATH
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(DEFAULT_CONFIG)
    return path


def _fail(message: str, path: Path) -> None:
    print(message, file=sys.stderr)
    print(f"Fix the environment or edit {path}.", file=sys.stderr)
    raise SystemExit(1)


def _parse_bool(value: Any) -> bool:
    # Anything but an explicit "false" enables a flag
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() != "false"


def load_config(path: Path | None = None) -> SynthcacheConfig:
    """Load configuration from the config file with env var overrides.

    A missing config file is not an error: built-in defaults make the
    service usable with zero configuration.

    Args:
        path: Config file to read (defaults to ~/.config/synthcache/config.toml)

    Returns:
        Loaded and validated SynthcacheConfig.

    Raises:
        SystemExit: If the config file or an env var holds an invalid value.
    """
    path = path or CONFIG_PATH
    data: dict[str, Any] = {}
    if path.exists():
        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            _fail(f"Invalid config file {path}: {e}", path)

    tts = data.get("tts", {})
    cache = data.get("cache", {})
    http_cfg = data.get("http", {})
    defaults = SynthcacheConfig()

    def pick(env: str, section: dict[str, Any], key: str, default: Any) -> Any:
        # Env vars override config file values
        value = os.getenv(env)
        if value is not None and value != "":
            return value
        return section.get(key, default)

    try:
        tts_config = TTSConfig(
            provider=str(
                pick("SYNTHCACHE_PROVIDER", tts, "provider", defaults.tts.provider)
            ),
            language_code=str(
                pick(
                    "TTS_LANGUAGE_CODE",
                    tts,
                    "language_code",
                    defaults.tts.language_code,
                )
            ),
            voice=str(pick("TTS_VOICE_NAME", tts, "voice", defaults.tts.voice)),
            speaking_rate=float(
                pick(
                    "TTS_SPEAKING_RATE",
                    tts,
                    "speaking_rate",
                    defaults.tts.speaking_rate,
                )
            ),
            pitch=float(pick("TTS_PITCH", tts, "pitch", defaults.tts.pitch)),
            audio_encoding=AudioEncoding(
                str(
                    pick(
                        "TTS_AUDIO_ENCODING",
                        tts,
                        "audio_encoding",
                        defaults.tts.audio_encoding.value,
                    )
                ).upper()
            ),
        )
        cache_config = CacheConfig(
            enabled=_parse_bool(
                pick("CACHE_ENABLED", cache, "enabled", defaults.cache.enabled)
            ),
            max_size=int(
                pick("CACHE_MAX_SIZE", cache, "max_size", defaults.cache.max_size)
            ),
            ttl_hours=float(
                pick("CACHE_TTL_HOURS", cache, "ttl_hours", defaults.cache.ttl_hours)
            ),
            eviction_fraction=float(
                pick(
                    "CACHE_EVICTION_FRACTION",
                    cache,
                    "eviction_fraction",
                    defaults.cache.eviction_fraction,
                )
            ),
            coalesce=_parse_bool(
                pick("CACHE_COALESCE", cache, "coalesce", defaults.cache.coalesce)
            ),
        )
        http_config = HTTPConfig(
            host=str(pick("SYNTHCACHE_HTTP_HOST", http_cfg, "host", defaults.http.host)),
            port=int(pick("SYNTHCACHE_HTTP_PORT", http_cfg, "port", defaults.http.port)),
            max_text_length=int(
                pick(
                    "SYNTHCACHE_MAX_TEXT_LENGTH",
                    http_cfg,
                    "max_text_length",
                    defaults.http.max_text_length,
                )
            ),
        )
    except ValueError as e:
        _fail(f"Invalid config value: {e}", path)

    # Validate ranges
    problems = []
    if tts_config.speaking_rate <= 0:
        problems.append("tts.speaking_rate must be positive")
    if cache_config.max_size < 1:
        problems.append("cache.max_size must be at least 1")
    if cache_config.ttl_hours <= 0:
        problems.append("cache.ttl_hours must be positive")
    if not 0.0 < cache_config.eviction_fraction <= 1.0:
        problems.append("cache.eviction_fraction must be in (0.0, 1.0]")
    if http_config.max_text_length < 1:
        problems.append("http.max_text_length must be at least 1")

    if problems:
        _fail(f"Invalid config values: {', '.join(problems)}", path)

    return SynthcacheConfig(tts=tts_config, cache=cache_config, http=http_config)

"""Pytest configuration and fixtures for synthcache tests."""

import pytest

from test_helpers import FakeClock, FakeSynthesizer

from synthcache.cache.manager import SynthesisCache
from synthcache.config import TTSConfig
from synthcache.tts.service import SynthesisService


@pytest.fixture(autouse=True)
def isolate_config(monkeypatch, tmp_path) -> None:
    """Keep tests away from the user's config file and environment."""
    monkeypatch.setattr("synthcache.config.CONFIG_PATH", tmp_path / "config.toml")
    for name in (
        "SYNTHCACHE_PROVIDER",
        "TTS_LANGUAGE_CODE",
        "TTS_VOICE_NAME",
        "TTS_SPEAKING_RATE",
        "TTS_PITCH",
        "TTS_AUDIO_ENCODING",
        "CACHE_ENABLED",
        "CACHE_MAX_SIZE",
        "CACHE_TTL_HOURS",
        "CACHE_EVICTION_FRACTION",
        "CACHE_COALESCE",
        "SYNTHCACHE_HTTP_HOST",
        "SYNTHCACHE_HTTP_PORT",
        "SYNTHCACHE_MAX_TEXT_LENGTH",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def synthesizer() -> FakeSynthesizer:
    return FakeSynthesizer()


@pytest.fixture
def defaults() -> TTSConfig:
    return TTSConfig(provider="fake")


@pytest.fixture
def make_service(synthesizer, clock, defaults):
    """Build a service around the fake synthesizer with a controllable cache."""

    def _make(
        max_size: int = 100,
        ttl_seconds: float = 24 * 60 * 60,
        eviction_fraction: float = 0.2,
        enabled: bool = True,
        coalesce: bool = True,
    ) -> SynthesisService:
        cache = SynthesisCache(
            max_size=max_size,
            ttl_seconds=ttl_seconds,
            eviction_fraction=eviction_fraction,
            enabled=enabled,
            clock=clock,
        )
        return SynthesisService(
            synthesizer=synthesizer,
            cache=cache,
            defaults=defaults,
            coalesce=coalesce,
        )

    return _make

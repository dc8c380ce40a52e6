"""Synthesis cache service for synthcache.

Coordinates a SpeechSynthesizer and a SynthesisCache: resolves request
defaults, fingerprints the request, serves valid cache hits, and otherwise
calls the synthesizer and stores the fresh audio.
"""

import asyncio
import logging
from functools import partial

from ..cache.fingerprint import compute_fingerprint
from ..cache.manager import SynthesisCache
from ..cache.models import CacheStats
from ..config import SynthcacheConfig, TTSConfig
from ..providers import ProviderRegistry
from ..providers.base import SpeechSynthesizer
from .errors import SynthesisFailure
from .models import (
    AudioEncoding,
    ResolvedRequest,
    SynthesisRequest,
    SynthesisResult,
    VoiceDescriptor,
)

logger = logging.getLogger(__name__)


def _preview(text: str) -> str:
    return text[:50] + "..." if len(text) > 50 else text


class SynthesisService:
    """Caching front for an expensive speech synthesizer.

    One instance is built at startup and handed to whatever needs it (the
    HTTP app, the CLI); there is no module-level singleton.

    Concurrent misses for the same fingerprint share a single in-flight
    synthesis when ``coalesce`` is on; otherwise each caller synthesizes
    and the last write wins. Synthesis always runs in its own task, so a
    caller that gives up does not cancel work that has already been paid
    for, and the result still lands in the cache.

    Example:
        service = SynthesisService(
            synthesizer=GoogleTTSProvider(),
            cache=SynthesisCache(max_size=100),
        )

        result = await service.synthesize(SynthesisRequest(text="Hello"))
        # SynthesisResult(audio=b"...", voice="en-US-Neural2-F", cached=False)

        result = await service.synthesize(SynthesisRequest(text="  hello "))
        # Same fingerprint: cached=True, synthesizer not called
    """

    def __init__(
        self,
        synthesizer: SpeechSynthesizer,
        cache: SynthesisCache | None = None,
        defaults: TTSConfig | None = None,
        coalesce: bool = True,
    ) -> None:
        """Initialize the service.

        Args:
            synthesizer: Provider that performs the actual synthesis
            cache: Cache to serve from; a default-sized one when omitted
            defaults: Defaults for omitted request fields and audio encoding
            coalesce: Share in-flight synthesis between concurrent misses
        """
        self.synthesizer = synthesizer
        self.cache = cache if cache is not None else SynthesisCache()
        self.defaults = defaults or TTSConfig()
        self.coalesce = coalesce
        self._in_flight: dict[str, asyncio.Task[bytes]] = {}

        logger.info("TTS service initialized")
        logger.info(f"  Default voice: {self.defaults.voice}")
        logger.info(f"  Cache enabled: {self.cache.enabled}")
        logger.info(f"  Cache max size: {self.cache.max_size}")

    @classmethod
    def from_config(
        cls,
        config: SynthcacheConfig,
        synthesizer: SpeechSynthesizer | None = None,
    ) -> "SynthesisService":
        """Build a service from loaded configuration.

        Args:
            config: Loaded configuration
            synthesizer: Provider to use instead of the configured one

        Raises:
            KeyError: If the configured provider is not registered
        """
        return cls(
            synthesizer=synthesizer
            or ProviderRegistry.get_instance(config.tts.provider),
            cache=SynthesisCache.from_config(config.cache),
            defaults=config.tts,
            coalesce=config.cache.coalesce,
        )

    @property
    def audio_encoding(self) -> AudioEncoding:
        return self.defaults.audio_encoding

    def resolve(self, request: SynthesisRequest) -> ResolvedRequest:
        """Apply configured defaults to a request."""
        return request.resolve(self.defaults)

    async def synthesize(self, request: SynthesisRequest) -> SynthesisResult:
        """Return audio for a request, from the cache when possible.

        The request is assumed valid; length and emptiness checks belong to
        the caller.

        Args:
            request: Text and optional voice parameters

        Returns:
            SynthesisResult with the audio, the voice used and a cached flag

        Raises:
            SynthesisFailure: If the synthesizer fails or returns no audio.
                Other synthesizer exceptions propagate unchanged as well.
        """
        resolved = self.resolve(request)

        if not self.cache.enabled:
            audio = await self._call_synthesizer(resolved)
            return SynthesisResult(audio=audio, voice=resolved.voice, cached=False)

        fingerprint = compute_fingerprint(resolved)
        entry = self.cache.lookup(fingerprint)
        if entry is not None:
            logger.info(f'Cache HIT for: "{_preview(request.text)}"')
            return SynthesisResult(audio=entry.audio, voice=entry.voice, cached=True)

        task = self._in_flight.get(fingerprint) if self.coalesce else None
        if task is None or task.done():
            task = asyncio.create_task(self._synthesize_and_store(fingerprint, resolved))
            task.add_done_callback(partial(self._finish_task, fingerprint))
            if self.coalesce:
                self._in_flight[fingerprint] = task
        else:
            logger.debug(f"Joining in-flight synthesis for fingerprint {fingerprint}")

        audio = await asyncio.shield(task)
        return SynthesisResult(audio=audio, voice=resolved.voice, cached=False)

    async def _synthesize_and_store(
        self, fingerprint: str, resolved: ResolvedRequest
    ) -> bytes:
        try:
            audio = await self._call_synthesizer(resolved)
            # Eviction and insert complete without yielding to the event loop
            self.cache.store(fingerprint, audio, resolved.voice)
            return audio
        finally:
            # Leave the in-flight map in the same step that settles the task
            if self._in_flight.get(fingerprint) is asyncio.current_task():
                del self._in_flight[fingerprint]

    async def _call_synthesizer(self, resolved: ResolvedRequest) -> bytes:
        logger.info(
            f'Synthesizing: "{_preview(resolved.text)}" with voice {resolved.voice}'
        )
        audio = await self.synthesizer.synthesize(resolved, self.audio_encoding)
        if not audio:
            raise SynthesisFailure("No audio content received from synthesizer")
        return audio

    def _finish_task(self, fingerprint: str, task: asyncio.Task[bytes]) -> None:
        # Normally already removed by _synthesize_and_store
        if self._in_flight.get(fingerprint) is task:
            del self._in_flight[fingerprint]
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error(f"Synthesis failed for fingerprint {fingerprint}: {error}")

    async def list_voices(
        self, language_code: str | None = None
    ) -> list[VoiceDescriptor]:
        """List the synthesizer's voices, sorted by name. Not cached."""
        voices = await self.synthesizer.list_voices(language_code)
        return sorted(voices, key=lambda voice: voice.name)

    def get_stats(self) -> CacheStats:
        return self.cache.stats()

    def clear_cache(self) -> None:
        self.cache.clear()

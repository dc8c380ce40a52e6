"""Integration tests for the cache under concurrent load."""

import asyncio
import random
import sys
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent / "src"))

from test_helpers import FakeSynthesizer

from synthcache.cache.manager import SynthesisCache
from synthcache.config import TTSConfig
from synthcache.tts.errors import SynthesisFailure
from synthcache.tts.models import AudioEncoding, ResolvedRequest, SynthesisRequest
from synthcache.tts.service import SynthesisService


class JitterSynthesizer(FakeSynthesizer):
    """Synthesizer with random latency and occasional failures."""

    def __init__(self, seed: int, failure_rate: float = 0.0) -> None:
        super().__init__()
        self.random = random.Random(seed)
        self.failure_rate = failure_rate

    async def synthesize(
        self,
        request: ResolvedRequest,
        audio_encoding: AudioEncoding = AudioEncoding.MP3,
    ) -> bytes:
        await asyncio.sleep(self.random.uniform(0, 0.005))
        if self.random.random() < self.failure_rate:
            raise SynthesisFailure(f"transient failure for {request.text}")
        return await super().synthesize(request, audio_encoding)


def build_service(
    synthesizer: FakeSynthesizer, max_size: int, coalesce: bool = True
) -> SynthesisService:
    return SynthesisService(
        synthesizer=synthesizer,
        cache=SynthesisCache(max_size=max_size),
        defaults=TTSConfig(provider="fake"),
        coalesce=coalesce,
    )


class TestConcurrentCacheIntegration:
    """Test size and accounting invariants with many concurrent callers."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("coalesce", [True, False])
    async def test_size_never_exceeds_capacity(self, coalesce: bool) -> None:
        """
        INVARIANT: Concurrent inserts never push the cache past max_size
        BREAKS: Memory grows without bound under load
        """
        synthesizer = JitterSynthesizer(seed=7)
        service = build_service(synthesizer, max_size=5, coalesce=coalesce)
        texts = [f"phrase {i % 12}" for i in range(120)]
        random.Random(3).shuffle(texts)

        results = await asyncio.gather(
            *(service.synthesize(SynthesisRequest(text=t)) for t in texts)
        )

        stats = service.get_stats()
        assert len(results) == 120
        assert stats.size <= 5
        assert stats.hits + stats.misses == 120
        assert stats.hits == sum(1 for r in results if r.cached)

    @pytest.mark.asyncio
    async def test_coalescing_synthesizes_each_text_once(self) -> None:
        """
        INVARIANT: With coalescing, a cold burst synthesizes each text once
        BREAKS: Duplicate provider calls for the same request
        """
        synthesizer = JitterSynthesizer(seed=11)
        service = build_service(synthesizer, max_size=100)
        texts = [f"phrase {i % 10}" for i in range(100)]

        results = await asyncio.gather(
            *(service.synthesize(SynthesisRequest(text=t)) for t in texts)
        )

        assert len(synthesizer.calls) == 10
        assert service.get_stats().size == 10
        by_text: dict[str, set[bytes]] = {}
        for text, result in zip(texts, results):
            by_text.setdefault(text, set()).add(result.audio)
        assert all(len(audio) == 1 for audio in by_text.values())

    @pytest.mark.asyncio
    async def test_failures_never_cached_under_load(self) -> None:
        """
        INVARIANT: Failed syntheses leave no entry and do not disturb others
        BREAKS: Errors are replayed from the cache
        """
        synthesizer = JitterSynthesizer(seed=5, failure_rate=0.3)
        service = build_service(synthesizer, max_size=50)
        texts = [f"phrase {i}" for i in range(40)]

        results = await asyncio.gather(
            *(service.synthesize(SynthesisRequest(text=t)) for t in texts),
            return_exceptions=True,
        )

        failures = [r for r in results if isinstance(r, SynthesisFailure)]
        successes = [r for r in results if not isinstance(r, BaseException)]
        assert len(failures) + len(successes) == 40
        assert service.get_stats().size == len(successes)
        assert service._in_flight == {}

    @pytest.mark.asyncio
    async def test_clear_during_inflight_synthesis(self) -> None:
        """
        INVARIANT: Clearing while a synthesis is in flight leaves a consistent cache
        BREAKS: Clear races with inserts and corrupts counters
        """
        synthesizer = FakeSynthesizer()
        synthesizer.gate = asyncio.Event()
        service = build_service(synthesizer, max_size=5)

        pending = asyncio.create_task(service.synthesize(SynthesisRequest(text="x")))
        for _ in range(10):
            await asyncio.sleep(0)
        service.clear_cache()
        synthesizer.gate.set()
        result = await pending

        stats = service.get_stats()
        assert result.cached is False
        # The in-flight result lands after the clear
        assert stats.size == 1
        assert (stats.hits, stats.misses) == (0, 0)

"""Bounded in-memory cache for synthesized audio.

Maps request fingerprints to CacheEntry objects, checks expiry at read time,
evicts the oldest entries in batches when full, and keeps hit/miss counters.
Nothing is persisted: the cache lives and dies with the process.
"""

import itertools
import logging
import math
import threading
import time
from collections.abc import Callable

from ..config import CacheConfig
from ..tts.errors import CacheIntegrityError
from .models import CacheEntry, CacheStats

logger = logging.getLogger(__name__)


class SynthesisCache:
    """Fingerprint-addressed store of synthesized audio.

    Every public method completes without suspending, and all state changes
    happen under one lock, so lookups, inserts and clears are atomic with
    respect to each other whether callers share an event loop or not.

    Example:
        cache = SynthesisCache(max_size=5)

        entry = cache.lookup(fingerprint)  # None, counted as a miss
        if entry is None:
            audio = await synthesizer.synthesize(resolved)
            cache.store(fingerprint, audio, resolved.voice)

        cache.lookup(fingerprint)  # CacheEntry, counted as a hit
    """

    def __init__(
        self,
        max_size: int = 100,
        ttl_seconds: float = 24 * 60 * 60,
        eviction_fraction: float = 0.2,
        enabled: bool = True,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize an empty cache.

        Args:
            max_size: Maximum number of entries held at once
            ttl_seconds: Age after which an entry no longer counts as a hit
            eviction_fraction: Share of max_size removed per eviction pass
            enabled: Reported in stats; the service skips the cache when False
            clock: Source of entry timestamps, in seconds

        Raises:
            ValueError: If any limit is out of range
        """
        if max_size < 1:
            raise ValueError(f"max_size must be at least 1, got {max_size}")
        if ttl_seconds <= 0:
            raise ValueError(f"ttl_seconds must be positive, got {ttl_seconds}")
        if not 0.0 < eviction_fraction <= 1.0:
            raise ValueError(
                f"eviction_fraction must be in (0.0, 1.0], got {eviction_fraction}"
            )

        self.max_size = max_size
        self.ttl_seconds = ttl_seconds
        self.eviction_fraction = eviction_fraction
        self.enabled = enabled
        self._clock = clock

        self._entries: dict[str, CacheEntry] = {}
        self._sequence = itertools.count()
        self._hits = 0
        self._misses = 0
        self._lock = threading.Lock()

    @classmethod
    def from_config(
        cls, config: CacheConfig, clock: Callable[[], float] = time.monotonic
    ) -> "SynthesisCache":
        return cls(
            max_size=config.max_size,
            ttl_seconds=config.ttl_seconds,
            eviction_fraction=config.eviction_fraction,
            enabled=config.enabled,
            clock=clock,
        )

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, fingerprint: str) -> bool:
        return fingerprint in self._entries

    @property
    def eviction_batch_size(self) -> int:
        """Number of entries removed by one eviction pass."""
        # Rounding first keeps float noise (e.g. 0.2 * 15) from adding an entry
        return max(1, math.ceil(round(self.max_size * self.eviction_fraction, 9)))

    def is_valid(self, entry: CacheEntry) -> bool:
        """Check whether an entry is still young enough to be served."""
        return self._clock() - entry.created_at < self.ttl_seconds

    def lookup(self, fingerprint: str) -> CacheEntry | None:
        """Return the entry for a fingerprint if present and not expired.

        Counts a hit when a valid entry is found and a miss otherwise.
        Expired entries stay in place until evicted or overwritten.
        """
        with self._lock:
            entry = self._entries.get(fingerprint)
            if entry is not None and self.is_valid(entry):
                self._hits += 1
                logger.debug(f"Cache hit for fingerprint {fingerprint}")
                return entry

            self._misses += 1
            if entry is None:
                logger.debug(f"Cache miss for fingerprint {fingerprint}")
            else:
                logger.debug(f"Cache entry {fingerprint} expired")
            return None

    def store(self, fingerprint: str, audio: bytes, voice: str) -> CacheEntry:
        """Insert or replace the entry for a fingerprint.

        Runs the eviction policy first when a new fingerprint would not fit.

        Args:
            fingerprint: Cache key computed from the resolved request
            audio: Synthesized audio bytes
            voice: Voice that produced the audio

        Returns:
            The stored entry

        Raises:
            CacheIntegrityError: If the store ends up above max_size
        """
        with self._lock:
            if (
                fingerprint not in self._entries
                and len(self._entries) >= self.max_size
            ):
                self._evict_oldest()

            # Checked before writing so a failed store leaves the cache untouched
            new_size = len(self._entries) + (fingerprint not in self._entries)
            if new_size > self.max_size:
                raise CacheIntegrityError(
                    f"Cache size {new_size} exceeds max_size {self.max_size}"
                )

            entry = CacheEntry(
                audio=audio,
                voice=voice,
                created_at=self._clock(),
                sequence=next(self._sequence),
            )
            self._entries[fingerprint] = entry

        logger.debug(f"Cached {len(audio)} bytes under fingerprint {fingerprint}")
        return entry

    def _evict_oldest(self) -> None:
        # Caller holds the lock
        needed = len(self._entries) - self.max_size + 1
        count = min(len(self._entries), max(self.eviction_batch_size, needed))

        oldest = sorted(
            self._entries.items(),
            key=lambda item: (item[1].created_at, item[1].sequence),
        )[:count]
        for fingerprint, _ in oldest:
            del self._entries[fingerprint]

        logger.info(f"Evicted {len(oldest)} cache entries")

    def stats(self) -> CacheStats:
        """Snapshot of counters and size; does not mutate anything."""
        with self._lock:
            return CacheStats(
                enabled=self.enabled,
                size=len(self._entries),
                max_size=self.max_size,
                hits=self._hits,
                misses=self._misses,
            )

    def clear(self) -> None:
        """Remove every entry and reset the hit/miss counters."""
        with self._lock:
            self._entries.clear()
            self._hits = 0
            self._misses = 0
        logger.info("TTS cache cleared")

"""Data models for the synthesis cache."""

from dataclasses import dataclass


@dataclass(frozen=True)
class CacheEntry:
    """Cached synthesis result.

    Entries are immutable; updating a fingerprint replaces the whole entry.

    Attributes:
        audio: Encoded audio bytes returned by the synthesizer
        voice: Resolved voice used for synthesis
        created_at: Cache clock reading when the entry was stored
        sequence: Insertion counter, breaks ties between equal timestamps
    """

    audio: bytes
    voice: str
    created_at: float
    sequence: int


@dataclass(frozen=True)
class CacheStats:
    """Point-in-time view of cache size and hit/miss counters."""

    enabled: bool
    size: int
    max_size: int
    hits: int
    misses: int

    @property
    def hit_rate(self) -> str:
        """Hit rate as a percentage string, or "N/A" before any lookup."""
        total = self.hits + self.misses
        if total == 0:
            return "N/A"
        return f"{self.hits / total * 100:.1f}%"

    def to_dict(self) -> dict:
        return {
            "enabled": self.enabled,
            "size": self.size,
            "maxSize": self.max_size,
            "hits": self.hits,
            "misses": self.misses,
            "hitRate": self.hit_rate,
        }

"""In-memory synthesis cache for synthcache."""

from .fingerprint import compute_fingerprint
from .manager import SynthesisCache
from .models import CacheEntry, CacheStats

__all__ = ["CacheEntry", "CacheStats", "SynthesisCache", "compute_fingerprint"]

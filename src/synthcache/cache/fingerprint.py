"""Deterministic request fingerprints used as cache keys."""

import hashlib
import json

from ..tts.models import ResolvedRequest

FINGERPRINT_LENGTH = 16


def normalize_text(text: str) -> str:
    """Normalize text for fingerprinting: trimmed and lower-cased."""
    return text.strip().lower()


def compute_fingerprint(request: ResolvedRequest) -> str:
    """Generate the cache key for a resolved synthesis request.

    The five normalized fields are serialized as a JSON array so the field
    order is fixed, hashed with SHA-256, and the hex digest is truncated.
    No salt or process state is involved, so keys are stable across restarts.

    Args:
        request: Request with configured defaults already applied

    Returns:
        16-character lowercase hex string
    """
    canonical = json.dumps(
        [
            normalize_text(request.text),
            request.voice,
            request.language_code,
            float(request.speaking_rate),
            float(request.pitch),
        ],
        ensure_ascii=False,
        separators=(",", ":"),
    )
    digest = hashlib.sha256(canonical.encode("utf-8")).hexdigest()
    return digest[:FINGERPRINT_LENGTH]

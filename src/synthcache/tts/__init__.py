"""TTS (Text-to-Speech) package for synthcache.

This package holds the request/result models, the error taxonomy and the
caching synthesis service.
"""

from .errors import (
    CacheIntegrityError,
    SynthesisFailure,
    TTSAPIError,
    TTSAuthError,
    TTSError,
)
from .models import (
    AudioEncoding,
    ResolvedRequest,
    SynthesisRequest,
    SynthesisResult,
    VoiceDescriptor,
    VoiceSettings,
)

__all__ = [
    "AudioEncoding",
    "CacheIntegrityError",
    "ResolvedRequest",
    "SynthesisFailure",
    "SynthesisRequest",
    "SynthesisResult",
    "TTSAPIError",
    "TTSAuthError",
    "TTSError",
    "VoiceDescriptor",
    "VoiceSettings",
]

"""Abstract base class for speech synthesizers.

This module defines the interface that all TTS providers must implement,
so the synthesis cache can sit in front of any backend.
"""

from abc import ABC, abstractmethod

from ..tts.models import AudioEncoding, ResolvedRequest, VoiceDescriptor


class SpeechSynthesizer(ABC):
    """Abstract base class for text-to-speech providers.

    All TTS providers must inherit from this class and implement
    the required methods for synthesizing speech and listing voices.
    Requests arrive with defaults already applied; providers pass rate
    and pitch through without clamping them.
    """

    name: str = "base"

    @abstractmethod
    async def synthesize(
        self,
        request: ResolvedRequest,
        audio_encoding: AudioEncoding = AudioEncoding.MP3,
    ) -> bytes:
        """Convert a resolved request to audio bytes.

        Args:
            request: Text and voice parameters with defaults applied
            audio_encoding: Encoding of the returned audio

        Returns:
            Encoded audio data

        Raises:
            SynthesisFailure: If synthesis fails or returns no audio
        """
        pass

    @abstractmethod
    async def list_voices(
        self, language_code: str | None = None
    ) -> list[VoiceDescriptor]:
        """Return available voices for this provider.

        Args:
            language_code: Only return voices supporting this language

        Raises:
            SynthesisFailure: If voice listing fails
        """
        pass

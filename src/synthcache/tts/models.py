"""TTS data models with validation."""

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..config import TTSConfig


class AudioEncoding(str, Enum):
    """Audio encodings a synthesizer can be asked for."""

    MP3 = "MP3"
    OGG_OPUS = "OGG_OPUS"
    LINEAR16 = "LINEAR16"

    @property
    def media_type(self) -> str:
        """HTTP media type for audio in this encoding."""
        return _MEDIA_TYPES[self]


_MEDIA_TYPES = {
    AudioEncoding.MP3: "audio/mpeg",
    AudioEncoding.OGG_OPUS: "audio/ogg",
    AudioEncoding.LINEAR16: "audio/wav",
}


@dataclass(frozen=True)
class ResolvedRequest:
    """Synthesis parameters after configured defaults were applied.

    The same resolved request feeds both fingerprinting and the synthesizer
    call, so the two can never disagree about which parameters were used.
    """

    text: str
    voice: str
    language_code: str
    speaking_rate: float
    pitch: float


@dataclass
class SynthesisRequest:
    """Caller-facing synthesis request.

    Args:
        text: Text to synthesize (length is capped by the caller)
        voice: Voice name, configured default when omitted
        language_code: BCP-47 language code, configured default when omitted
        speaking_rate: Speaking rate multiplier, configured default when omitted
        pitch: Pitch shift in semitones, configured default when omitted
    """

    text: str
    voice: str | None = None
    language_code: str | None = None
    speaking_rate: float | None = None
    pitch: float | None = None

    def resolve(self, defaults: "TTSConfig") -> ResolvedRequest:
        """Apply configured defaults for every omitted field.

        Empty strings count as omitted, and so does a zero speaking rate
        since only positive rates are meaningful.
        """
        return ResolvedRequest(
            text=self.text,
            voice=self.voice or defaults.voice,
            language_code=self.language_code or defaults.language_code,
            speaking_rate=float(
                self.speaking_rate
                if self.speaking_rate
                else defaults.speaking_rate
            ),
            pitch=float(self.pitch if self.pitch is not None else defaults.pitch),
        )


@dataclass(frozen=True)
class SynthesisResult:
    """Audio returned by the synthesis service.

    Args:
        audio: Encoded audio bytes
        voice: Voice that produced the audio
        cached: True when the audio was served from the cache
    """

    audio: bytes
    voice: str
    cached: bool


@dataclass
class VoiceDescriptor:
    """Information about an available voice.

    Args:
        name: Voice name, usable as the ``voice`` of a request
        language_code: Primary language code of the voice
        gender: SSML gender name (e.g., "FEMALE", "MALE", "NEUTRAL")
        sample_rate_hz: Natural sample rate of the voice
    """

    name: str
    language_code: str
    gender: str = "NEUTRAL"
    sample_rate_hz: int = 24000

    def __post_init__(self) -> None:
        """Validate voice information."""
        if not self.name or not self.name.strip():
            raise ValueError("name cannot be empty")
        if not self.language_code or not self.language_code.strip():
            raise ValueError("language_code cannot be empty")
        if self.sample_rate_hz <= 0:
            raise ValueError("sample_rate_hz must be positive")


@dataclass
class VoiceSettings:
    """ElevenLabs voice generation settings.

    Args:
        stability: Voice stability (0.0-1.0)
        similarity_boost: Voice similarity boost (0.0-1.0)
        style: Voice style exaggeration (0.0-1.0)
        use_speaker_boost: Whether to use speaker boost
        speed: Speaking speed multiplier (0.25-4.0)
    """

    stability: float = 0.65
    similarity_boost: float = 0.75
    style: float = 0.4
    use_speaker_boost: bool = True
    speed: float = 1.0

    def __post_init__(self) -> None:
        """Validate voice settings."""
        if not 0.0 <= self.stability <= 1.0:
            raise ValueError("stability must be between 0.0 and 1.0")
        if not 0.0 <= self.similarity_boost <= 1.0:
            raise ValueError("similarity_boost must be between 0.0 and 1.0")
        if not 0.0 <= self.style <= 1.0:
            raise ValueError("style must be between 0.0 and 1.0")
        if not 0.25 <= self.speed <= 4.0:
            raise ValueError("speed must be between 0.25 and 4.0")

    def to_dict(self) -> dict:
        """Settings in the shape the ElevenLabs API expects."""
        return {
            "stability": self.stability,
            "similarity_boost": self.similarity_boost,
            "style": self.style,
            "use_speaker_boost": self.use_speaker_boost,
            "speed": self.speed,
        }

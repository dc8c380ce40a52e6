"""
Pydantic schemas for API requests and responses.
"""

from pydantic import BaseModel, ConfigDict, Field

from synthcache.tts.models import SynthesisRequest, VoiceDescriptor


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "ok"
    version: str
    provider: str


class ErrorResponse(BaseModel):
    """Error envelope shared by every failing route."""

    error: str
    message: str


class TTSRequest(BaseModel):
    """TTS synthesis request.

    Length limits are checked by the route against the configured maximum.
    """

    model_config = ConfigDict(populate_by_name=True)

    text: str
    voice: str | None = None
    language_code: str | None = Field(default=None, alias="languageCode")
    speaking_rate: float | None = Field(default=None, alias="speakingRate")
    pitch: float | None = None

    def to_synthesis_request(self) -> SynthesisRequest:
        return SynthesisRequest(
            text=self.text,
            voice=self.voice,
            language_code=self.language_code,
            speaking_rate=self.speaking_rate,
            pitch=self.pitch,
        )


class Base64AudioResponse(BaseModel):
    """Synthesized audio as base64, for clients that prefer JSON."""

    audio: str
    mimeType: str
    voice: str
    cached: bool
    characterCount: int


class VoiceInfo(BaseModel):
    """Voice information."""

    name: str
    languageCode: str
    ssmlGender: str
    naturalSampleRateHertz: int

    @classmethod
    def from_descriptor(cls, voice: VoiceDescriptor) -> "VoiceInfo":
        return cls(
            name=voice.name,
            languageCode=voice.language_code,
            ssmlGender=voice.gender,
            naturalSampleRateHertz=voice.sample_rate_hz,
        )


class VoiceListResponse(BaseModel):
    """List of available voices."""

    voices: list[VoiceInfo]


class CacheStatsResponse(BaseModel):
    """Cache statistics."""

    enabled: bool
    size: int
    maxSize: int
    hits: int
    misses: int
    hitRate: str


class MessageResponse(BaseModel):
    """Plain acknowledgement."""

    message: str

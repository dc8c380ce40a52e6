"""ElevenLabs text-to-speech provider implementation."""

import asyncio
import os

from elevenlabs.client import ElevenLabs

from ..tts.errors import TTSAPIError, TTSAuthError
from ..tts.models import (
    AudioEncoding,
    ResolvedRequest,
    VoiceDescriptor,
    VoiceSettings,
)
from .base import SpeechSynthesizer

# Raw PCM from the API has no container, so LINEAR16 (served as WAV) is not offered
OUTPUT_FORMATS = {
    AudioEncoding.MP3: "mp3_44100_128",
}


def _map_error(e: Exception, action: str) -> TTSAPIError | TTSAuthError:
    # The SDK's ApiError carries the HTTP status; transport errors do not
    status_code = getattr(e, "status_code", None)
    if status_code == 401 or "unauthorized" in str(e).lower():
        return TTSAuthError(f"Authentication failed: {e}", e)
    elif status_code == 429:
        return TTSAPIError(f"Rate limit exceeded: {e}", 429, e)
    elif isinstance(status_code, int) and status_code >= 500:
        return TTSAPIError(f"Server error: {e}", status_code, e)
    else:
        return TTSAPIError(f"{action} failed: {e}", status_code, e)


class ElevenLabsProvider(SpeechSynthesizer):
    """ElevenLabs TTS provider implementation.

    The voice of a request is an ElevenLabs voice ID. Speaking rate maps to
    the ``speed`` voice setting; ElevenLabs has no pitch control, so pitch is
    ignored.
    """

    name = "elevenlabs"

    def __init__(
        self, api_key: str | None = None, model_id: str = "eleven_turbo_v2_5"
    ) -> None:
        """Initialize ElevenLabs provider.

        Args:
            api_key: ElevenLabs API key. If not provided, reads from
                    ELEVENLABS_API_KEY environment variable.
            model_id: ElevenLabs model ID to use

        Raises:
            TTSAuthError: If API key is not provided or invalid.
        """
        self._api_key = api_key or os.getenv("ELEVENLABS_API_KEY")
        if not self._api_key:
            raise TTSAuthError(
                "ElevenLabs API key not found. Set ELEVENLABS_API_KEY environment "
                "variable or provide api_key parameter."
            )

        try:
            self._client = ElevenLabs(api_key=self._api_key)
        except Exception as e:
            raise TTSAuthError(f"Failed to initialize ElevenLabs client: {e}") from e

        self.model_id = model_id

    async def synthesize(
        self,
        request: ResolvedRequest,
        audio_encoding: AudioEncoding = AudioEncoding.MP3,
    ) -> bytes:
        """Convert text to speech audio bytes.

        Args:
            request: Resolved synthesis parameters
            audio_encoding: Only MP3 is offered

        Returns:
            Audio data as bytes

        Raises:
            TTSAPIError: If API call fails, or the encoding or speaking rate
                is not accepted by ElevenLabs
            TTSAuthError: If authentication fails
        """
        if audio_encoding not in OUTPUT_FORMATS:
            raise TTSAPIError(
                f"ElevenLabs does not support {audio_encoding.value} output"
            )

        try:
            voice_settings = VoiceSettings(speed=request.speaking_rate)
        except ValueError as e:
            raise TTSAPIError(f"Invalid voice settings: {e}", None, e) from e

        # Run synchronous ElevenLabs client in thread to avoid blocking event loop
        def _sync_convert() -> bytes:
            audio_generator = self._client.text_to_speech.convert(
                text=request.text,
                voice_id=request.voice,
                model_id=self.model_id,
                output_format=OUTPUT_FORMATS[audio_encoding],
                voice_settings=voice_settings.to_dict(),
            )
            # Collect all audio chunks
            return b"".join(audio_generator)

        try:
            audio_bytes = await asyncio.to_thread(_sync_convert)
        except Exception as e:
            raise _map_error(e, "API call") from e

        if not audio_bytes:
            raise TTSAPIError("No audio data received from API")

        return audio_bytes

    async def list_voices(
        self, language_code: str | None = None
    ) -> list[VoiceDescriptor]:
        """Get list of available voices.

        ElevenLabs labels voices with a language and gender; unlabeled voices
        are reported as English and neutral.

        Raises:
            TTSAPIError: If API call fails
            TTSAuthError: If authentication fails
        """

        def _sync_get_voices() -> list[VoiceDescriptor]:
            response = self._client.voices.get_all()
            voices = []
            for voice in response.voices:
                labels = voice.labels or {}
                voices.append(
                    VoiceDescriptor(
                        name=voice.voice_id,
                        language_code=labels.get("language", "en"),
                        gender=labels.get("gender", "neutral").upper(),
                        sample_rate_hz=44100,
                    )
                )
            return voices

        try:
            voices = await asyncio.to_thread(_sync_get_voices)
        except Exception as e:
            raise _map_error(e, "Listing voices") from e

        if language_code:
            prefix = language_code.split("-")[0].lower()
            voices = [
                v for v in voices if v.language_code.lower().startswith(prefix)
            ]
        return voices

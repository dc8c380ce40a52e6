"""Google Cloud Text-to-Speech provider implementation."""

import logging

from google.api_core import exceptions as google_exceptions
from google.auth import exceptions as auth_exceptions
from google.cloud import texttospeech

from ..tts.errors import SynthesisFailure, TTSAPIError, TTSAuthError
from ..tts.models import AudioEncoding, ResolvedRequest, VoiceDescriptor
from .base import SpeechSynthesizer

logger = logging.getLogger(__name__)

EFFECTS_PROFILE = "small-bluetooth-speaker-class-device"
DEFAULT_SAMPLE_RATE_HZ = 24000


def _map_api_error(e: Exception, action: str) -> SynthesisFailure:
    if isinstance(
        e,
        (
            google_exceptions.Unauthenticated,
            google_exceptions.PermissionDenied,
            auth_exceptions.DefaultCredentialsError,
        ),
    ):
        return TTSAuthError(f"Authentication failed: {e}", e)
    if isinstance(e, google_exceptions.ResourceExhausted):
        return TTSAPIError(f"Rate limit exceeded: {e}", 429, e)
    if isinstance(e, google_exceptions.GoogleAPICallError):
        return TTSAPIError(f"{action} failed: {e}", e.code, e)
    return TTSAPIError(f"{action} failed: {e}", None, e)


class GoogleTTSProvider(SpeechSynthesizer):
    """Google Cloud TTS provider implementation.

    Credentials are resolved by the Google client library:
    GOOGLE_APPLICATION_CREDENTIALS, application default credentials,
    or the metadata server when running on Google Cloud.
    """

    name = "google"

    def __init__(
        self, client: texttospeech.TextToSpeechAsyncClient | None = None
    ) -> None:
        # Created on first use so that construction needs no credentials
        self._client = client

    @property
    def client(self) -> texttospeech.TextToSpeechAsyncClient:
        if self._client is None:
            try:
                self._client = texttospeech.TextToSpeechAsyncClient()
            except auth_exceptions.DefaultCredentialsError as e:
                raise TTSAuthError(
                    "Google Cloud credentials not found. Set "
                    "GOOGLE_APPLICATION_CREDENTIALS or configure application "
                    "default credentials.",
                    e,
                ) from e
            logger.debug("Created Google Cloud TTS client")
        return self._client

    async def synthesize(
        self,
        request: ResolvedRequest,
        audio_encoding: AudioEncoding = AudioEncoding.MP3,
    ) -> bytes:
        """Convert text to speech audio bytes.

        Args:
            request: Resolved synthesis parameters
            audio_encoding: Encoding of the returned audio

        Returns:
            Audio data as bytes

        Raises:
            TTSAPIError: If the API call fails or returns no audio
            TTSAuthError: If authentication fails
        """
        client = self.client
        try:
            response = await client.synthesize_speech(
                input=texttospeech.SynthesisInput(text=request.text),
                voice=texttospeech.VoiceSelectionParams(
                    language_code=request.language_code,
                    name=request.voice,
                ),
                audio_config=texttospeech.AudioConfig(
                    audio_encoding=texttospeech.AudioEncoding[audio_encoding.value],
                    speaking_rate=request.speaking_rate,
                    pitch=request.pitch,
                    effects_profile_id=[EFFECTS_PROFILE],
                ),
            )
        except Exception as e:
            raise _map_api_error(e, "Synthesis") from e

        if not response.audio_content:
            raise TTSAPIError("No audio content received from TTS API")

        return bytes(response.audio_content)

    async def list_voices(
        self, language_code: str | None = None
    ) -> list[VoiceDescriptor]:
        """Get voices from the Google catalog.

        Voices without a name or language are skipped.

        Raises:
            TTSAPIError: If API call fails
            TTSAuthError: If authentication fails
        """
        client = self.client
        try:
            response = await client.list_voices(language_code=language_code or "")
        except Exception as e:
            raise _map_api_error(e, "Listing voices") from e

        voices = []
        for voice in response.voices or []:
            if not voice.name or not voice.language_codes:
                continue
            if voice.ssml_gender:
                gender = texttospeech.SsmlVoiceGender(voice.ssml_gender).name
            else:
                gender = "NEUTRAL"
            voices.append(
                VoiceDescriptor(
                    name=voice.name,
                    language_code=voice.language_codes[0],
                    gender=gender,
                    sample_rate_hz=voice.natural_sample_rate_hertz
                    or DEFAULT_SAMPLE_RATE_HZ,
                )
            )
        return voices

"""Provider abstraction for text-to-speech services.

This module provides a registry pattern for managing TTS providers,
allowing runtime selection of the synthesizer behind the cache.
"""

from typing import TYPE_CHECKING, ClassVar

if TYPE_CHECKING:
    from .base import SpeechSynthesizer

from .elevenlabs import ElevenLabsProvider
from .google import GoogleTTSProvider

__all__ = ["ProviderRegistry"]


class ProviderRegistry:
    """Registry for managing TTS providers.

    This class maintains a registry of available TTS providers,
    allowing registration and retrieval by name.
    """

    _providers: ClassVar[dict[str, type["SpeechSynthesizer"]]] = {}
    _instances: ClassVar[dict[str, "SpeechSynthesizer"]] = {}

    @classmethod
    def register(cls, name: str, provider_class: type["SpeechSynthesizer"]) -> None:
        """Register a TTS provider.

        Args:
            name: Name to register the provider under
            provider_class: Provider class that implements SpeechSynthesizer
        """
        cls._providers[name] = provider_class
        cls._instances.pop(name, None)

    @classmethod
    def get(cls, name: str) -> type["SpeechSynthesizer"]:
        """Get a provider class by name.

        Args:
            name: Name of the provider to retrieve

        Returns:
            Provider class

        Raises:
            KeyError: If provider name not found
        """
        if name not in cls._providers:
            available = ", ".join(cls._providers.keys()) if cls._providers else "none"
            raise KeyError(
                f"Provider '{name}' not found. Available providers: {available}"
            )
        return cls._providers[name]

    @classmethod
    def get_instance(cls, name: str) -> "SpeechSynthesizer":
        """Get a cached provider instance by name.

        Creates the instance on first call, returns cached instance after,
        so SDK clients and their connections are reused across requests.

        Args:
            name: Name of the provider

        Returns:
            Cached provider instance

        Raises:
            KeyError: If provider name not found
        """
        if name not in cls._instances:
            provider_class = cls.get(name)
            cls._instances[name] = provider_class()
        return cls._instances[name]


# Register providers
ProviderRegistry.register("google", GoogleTTSProvider)
ProviderRegistry.register("elevenlabs", ElevenLabsProvider)

"""synthcache - cached text-to-speech synthesis service."""

__version__ = "0.1.0"
__all__ = ["SynthesisCache", "SynthesisService"]


def __getattr__(name: str):  # type: ignore[no-untyped-def]
    if name == "SynthesisService":
        from .tts.service import SynthesisService

        return SynthesisService
    if name == "SynthesisCache":
        from .cache.manager import SynthesisCache

        return SynthesisCache
    raise AttributeError(f"module 'synthcache' has no attribute {name!r}")

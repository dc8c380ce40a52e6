"""Typer CLI definition for synthcache."""

import asyncio
import dataclasses
import logging
import sys
from pathlib import Path

import typer

from .config import SynthcacheConfig, generate_config, load_config
from .tts.errors import SynthesisFailure, TTSAuthError
from .tts.models import AudioEncoding, SynthesisRequest

app = typer.Typer(help="Cached text-to-speech synthesis")

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

FILE_EXTENSIONS = {
    AudioEncoding.MP3: ".mp3",
    AudioEncoding.OGG_OPUS: ".ogg",
    AudioEncoding.LINEAR16: ".wav",
}


def process_text_input(text: str | None, max_length: int | None = None) -> str:
    """Validate text input and return the text to synthesize.

    Args:
        text: Optional text input from CLI argument, file or stdin
        max_length: Longest accepted text, unlimited when None

    Returns:
        The text to synthesize, unchanged

    Raises:
        ValueError: If no text is provided, it is blank, or it is too long
    """
    if text is None:
        raise ValueError("No text provided")
    if not text.strip():
        raise ValueError("Text cannot be empty")
    if max_length is not None and len(text) > max_length:
        raise ValueError(f"Text must be {max_length} characters or less")

    return text


def _configure_logging(debug: bool, default_level: int = logging.WARNING) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else default_level,
        format=LOG_FORMAT,
    )


def _fail(message: str, error: Exception, debug: bool) -> None:
    if debug:
        typer.echo(f"Debug - {message}: {error!r}", err=True)
    else:
        typer.echo(f"Error: {message}: {error}", err=True)
    raise typer.Exit(1) from None


def _with_overrides(
    config: SynthcacheConfig,
    provider: str | None = None,
    no_cache: bool = False,
) -> SynthcacheConfig:
    tts = config.tts
    if provider:
        tts = dataclasses.replace(tts, provider=provider)
    cache = config.cache
    if no_cache:
        cache = dataclasses.replace(cache, enabled=False)
    return dataclasses.replace(config, tts=tts, cache=cache)


@app.command()
def serve(
    host: str | None = typer.Option(None, "--host", help="Bind address (from config if omitted)"),
    port: int | None = typer.Option(None, "--port", help="HTTP port (from config if omitted)"),
    provider: str | None = typer.Option(
        None, "-p", "--provider", help="TTS provider (from config if omitted)"
    ),
    no_cache: bool = typer.Option(False, "--no-cache", help="Disable the synthesis cache"),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
) -> None:
    """Run the HTTP API."""
    import uvicorn

    from .server.app import create_app

    _configure_logging(debug, logging.INFO)
    config = _with_overrides(load_config(), provider=provider, no_cache=no_cache)

    try:
        application = create_app(config=config)
    except (KeyError, TTSAuthError) as e:
        _fail("Failed to start server", e, debug)

    uvicorn.run(
        application,
        host=host or config.http.host,
        port=port or config.http.port,
        log_level="debug" if debug else "info",
    )


@app.command()
def say(
    text: str | None = typer.Argument(None, help="Text to convert to speech"),
    file: Path | None = typer.Option(None, "-f", "--file", help="Read text from file"),
    output: Path | None = typer.Option(
        None, "-o", "--output", help="Output audio file (speech.<ext> if omitted)"
    ),
    voice: str | None = typer.Option(None, "-v", "--voice", help="Voice name"),
    language: str | None = typer.Option(None, "-l", "--language", help="Language code"),
    rate: float | None = typer.Option(None, "--rate", help="Speaking rate"),
    pitch: float | None = typer.Option(None, "--pitch", help="Pitch in semitones"),
    provider: str | None = typer.Option(
        None, "-p", "--provider", help="TTS provider (from config if omitted)"
    ),
    no_cache: bool = typer.Option(False, "--no-cache", help="Disable the synthesis cache"),
    debug: bool = typer.Option(False, "--debug", help="Show verbose errors and cache activity"),
) -> None:
    """Synthesize text and save the audio to a file."""
    from .tts.service import SynthesisService

    _configure_logging(debug)
    config = _with_overrides(load_config(), provider=provider, no_cache=no_cache)

    # Get text from argument, file, or stdin (in priority order)
    if text is None:
        if file:
            try:
                text = file.read_text()
            except (OSError, UnicodeDecodeError) as e:
                _fail(f"Unable to read {file}", e, debug)
        elif not sys.stdin.isatty():
            text = sys.stdin.read().strip()

    try:
        text = process_text_input(text, config.http.max_text_length)
    except ValueError as e:
        if debug:
            typer.echo(f"Debug - Text processing error: {e!r}", err=True)
        else:
            typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None

    try:
        service = SynthesisService.from_config(config)
        result = asyncio.run(
            service.synthesize(
                SynthesisRequest(
                    text=text,
                    voice=voice,
                    language_code=language,
                    speaking_rate=rate,
                    pitch=pitch,
                )
            )
        )
    except KeyError as e:
        _fail("Unknown provider", e, debug)
    except TTSAuthError as e:
        _fail("Authentication failed", e, debug)
    except SynthesisFailure as e:
        _fail("TTS synthesis failed", e, debug)
    except Exception as e:
        _fail("An unexpected error occurred", e, debug)

    output = output or Path("speech" + FILE_EXTENSIONS[config.tts.audio_encoding])
    try:
        output.write_bytes(result.audio)
    except OSError as e:
        _fail("Failed to save audio file", e, debug)

    typer.echo(f"Audio saved to {output} (voice: {result.voice})")


@app.command()
def voices(
    language: str | None = typer.Option(None, "-l", "--language", help="Language code filter"),
    provider: str | None = typer.Option(
        None, "-p", "--provider", help="TTS provider (from config if omitted)"
    ),
    debug: bool = typer.Option(False, "--debug", help="Show verbose errors"),
) -> None:
    """List available voices."""
    from .tts.service import SynthesisService

    _configure_logging(debug)
    config = _with_overrides(load_config(), provider=provider)

    try:
        service = SynthesisService.from_config(config)
        catalog = asyncio.run(service.list_voices(language))
    except Exception as e:
        _fail("Failed to list voices", e, debug)

    for voice in catalog:
        typer.echo(
            f"{voice.name}: {voice.language_code}, {voice.gender}, "
            f"{voice.sample_rate_hz} Hz"
        )


@app.command("init-config")
def init_config(
    force: bool = typer.Option(False, "--force", help="Overwrite an existing config file"),
) -> None:
    """Write the default config file."""
    from .config import CONFIG_PATH

    if CONFIG_PATH.exists() and not force:
        typer.echo(f"Config already exists at {CONFIG_PATH} (use --force to overwrite)")
        raise typer.Exit(1)

    path = generate_config()
    typer.echo(f"Wrote {path}")

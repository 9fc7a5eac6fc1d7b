"""CLI interface for pcm_extract."""

import logging
from pathlib import Path
from uuid import uuid4

import typer

from .application.decode_service import DecodeAudioToPcm
from .errors import PcmExtractError
from .infrastructure.logging_event_publisher import LoggingEventPublisher
from .infrastructure.pyav_source import open_media_source
from .io.audio_file import write_waveform
from .resample_options import ResampleMode
from .utils.config import DecodeSettings, load_decode_settings

app = typer.Typer(help="pcm_extract command line interface")


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s: %(name)s: %(message)s",
    )


def _build_service(config: Path | None) -> DecodeAudioToPcm:
    settings = load_decode_settings(config) if config is not None else DecodeSettings()
    return DecodeAudioToPcm(settings=settings, event_publisher=LoggingEventPublisher())


@app.command("decode")
def decode_command(
    source: Path = typer.Argument(..., help="Path to an audio or video file"),
    sample_rate: int | None = typer.Option(
        None,
        "--sample-rate",
        "-r",
        min=1,
        help="Target sample rate in Hz (default from settings, 16000).",
    ),
    resample_mode: ResampleMode | None = typer.Option(
        None,
        "--resample-mode",
        case_sensitive=False,
        help="Rate conversion: nearest (zero-order hold) or linear.",
    ),
    output: Path | None = typer.Option(
        None,
        "--output",
        "-o",
        help="Write the mono waveform to a .wav, .json or .npy file.",
    ),
    config: Path | None = typer.Option(
        None,
        "--config",
        help="Optional YAML/JSON decode settings file.",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """Decode the first audio stream of a file to mono PCM."""

    _configure_logging(verbose)
    correlation_id = str(uuid4())
    service = _build_service(config)
    try:
        waveform = service.decode(
            source,
            sample_rate,
            resample_mode=resample_mode,
            correlation_id=correlation_id,
        )
    except PcmExtractError as error:
        typer.echo(f"[{error.code}] Failed to decode audio: {error.message}", err=True)
        raise typer.Exit(code=1) from error

    typer.echo(
        f"Decoded {len(waveform)} samples at {waveform.sample_rate_hz} Hz "
        f"({waveform.duration_seconds:.3f}s) from stream #{waveform.source.index} "
        f"({waveform.source.codec}, {waveform.source.sample_rate_hz} Hz, "
        f"{waveform.source.channel_count} ch)"
    )
    if output is not None:
        written = write_waveform(output, waveform)
        typer.echo(f"Waveform written to: {written}")
    typer.echo(f"Correlation ID: {correlation_id}")


@app.command("streams")
def streams_command(
    source: Path = typer.Argument(..., help="Path to an audio or video file"),
) -> None:
    """List the elementary streams of a file and the audio stream that would be decoded."""

    try:
        media = open_media_source(source)
    except PcmExtractError as error:
        typer.echo(f"[{error.code}] {error.message}", err=True)
        raise typer.Exit(code=1) from error

    try:
        for stream in media.streams:
            typer.echo(f"#{stream.index} {stream.media_type} {stream.codec}")
        try:
            descriptor = media.select_audio_stream()
        except PcmExtractError as error:
            typer.echo(f"[{error.code}] {error.message}", err=True)
            raise typer.Exit(code=1) from error
        typer.echo(
            f"Selected audio stream #{descriptor.index}: {descriptor.codec}, "
            f"{descriptor.sample_rate_hz} Hz, {descriptor.channel_count} ch"
        )
    finally:
        media.close()


def main() -> None:
    app()


if __name__ == "__main__":
    main()

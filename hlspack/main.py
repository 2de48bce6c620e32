import typer
import uuid
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from hlspack.config.loader import load_config
from hlspack.config.models import AppConfig
from hlspack.domain.errors import HlsPackError
from hlspack.domain.models import ProcessConfig
from hlspack.infrastructure.encoders import EncoderDiscovery
from hlspack.infrastructure.event_bus import EventBus
from hlspack.infrastructure.ffmpeg import FFmpegAdapter
from hlspack.infrastructure.housekeeping import HousekeepingService
from hlspack.infrastructure.logging import setup_logging
from hlspack.infrastructure.prober import MediaProber
from hlspack.infrastructure.tool import FFmpegTool
from hlspack.pipeline.orchestrator import Orchestrator
from hlspack.pipeline.planner import normalize_qualities
from hlspack.ui.progress import ProgressReporter

app = typer.Typer(help="hlspack - package a video into an HLS adaptive-bitrate ladder")

DEFAULT_CONFIG_PATH = Path("conf/hlspack.yaml")

console = Console()


def _load_app_config(config_path: Optional[Path]) -> AppConfig:
    """Explicit --config must exist; the default location is optional."""
    if config_path is None:
        if DEFAULT_CONFIG_PATH.exists():
            return load_config(DEFAULT_CONFIG_PATH)
        return AppConfig()
    return load_config(config_path)


def _fail(message: str) -> None:
    typer.secho(f"Error: {message}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)


@app.command()
def package(
    input_path: Path = typer.Argument(..., help="Source media file"),
    output_dir: Path = typer.Argument(..., help="Directory receiving master.m3u8 and one folder per quality"),
    qualities: Optional[List[str]] = typer.Option(None, "--quality", "-q", help="Quality label (repeatable, in ladder order)"),
    segment_duration: Optional[int] = typer.Option(None, "--segment-duration", "-s", help="Segment length in seconds"),
    encoder: Optional[str] = typer.Option(None, "--encoder", "-e", help="ffmpeg video encoder (libx264, h264_nvenc, ...)"),
    job_id: Optional[str] = typer.Option(None, "--job-id", help="Identifier attached to progress events"),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to YAML config"),
    clean_on_failure: bool = typer.Option(False, "--clean-on-failure", help="Remove partial rendition folders if the job fails"),
    debug: bool = typer.Option(False, "--debug/--no-debug", help="Enable verbose debug logging"),
):
    """Encode every requested rendition and write the master playlist."""
    try:
        config = _load_app_config(config_path)
    except (FileNotFoundError, ValueError) as exc:
        _fail(str(exc))

    if not input_path.exists():
        _fail(f"Input file {input_path} does not exist.")
    if segment_duration is not None and segment_duration < 1:
        _fail("--segment-duration must be >= 1")

    try:
        process_config = ProcessConfig(
            id=job_id or uuid.uuid4().hex,
            input_path=input_path,
            output_dir=output_dir,
            qualities=list(qualities) if qualities else list(config.defaults.qualities),
            segment_duration=segment_duration or config.defaults.segment_duration,
            encoder=encoder or config.defaults.encoder,
        )
    except ValidationError as exc:
        _fail(str(exc))

    if debug:
        config.general.debug = True
    log_path = Path(config.general.log_path) if config.general.log_path else None
    setup_logging(output_dir, debug=config.general.debug, log_path=log_path)

    bus = EventBus()
    tool = FFmpegTool(config.general.ffmpeg_path)
    orchestrator = Orchestrator(
        event_bus=bus,
        prober=MediaProber(tool),
        ffmpeg_adapter=FFmpegAdapter(bus, tool),
    )

    with ProgressReporter(bus, console):
        result = orchestrator.run(process_config)

    if not result.succeeded:
        if clean_on_failure:
            HousekeepingService().cleanup_partial_output(output_dir, normalize_qualities(process_config.qualities))
        _fail(result.error_message or "job failed")


@app.command()
def probe(
    input_path: Path = typer.Argument(..., help="Media file to inspect"),
    ffmpeg_path: Optional[str] = typer.Option(None, "--ffmpeg", help="ffmpeg binary (default: from PATH)"),
):
    """Print duration and frame geometry reported by ffmpeg."""
    try:
        result = MediaProber(FFmpegTool(ffmpeg_path)).probe(input_path)
    except HlsPackError as exc:
        _fail(str(exc))
    console.print(f"duration: {result.duration:.2f}s")
    console.print(f"geometry: {result.width}x{result.height}")
    console.print(f"format:   {result.format_name}")


@app.command()
def encoders(
    ffmpeg_path: Optional[str] = typer.Option(None, "--ffmpeg", help="ffmpeg binary (default: from PATH)"),
):
    """List encoders usable for packaging."""
    try:
        found = EncoderDiscovery(FFmpegTool(ffmpeg_path)).list_encoders()
    except HlsPackError as exc:
        _fail(str(exc))

    table = Table(title="Encoders")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    for info in found:
        table.add_row(info.id, info.name)
    console.print(table)


@app.command()
def thumbnail(
    input_path: Path = typer.Argument(..., help="Source media file"),
    output_path: Path = typer.Argument(..., help="JPEG file to write"),
    ffmpeg_path: Optional[str] = typer.Option(None, "--ffmpeg", help="ffmpeg binary (default: from PATH)"),
):
    """Extract a frame from 25% into the video."""
    tool = FFmpegTool(ffmpeg_path)
    try:
        written = FFmpegAdapter(EventBus(), tool).generate_thumbnail(input_path, output_path)
    except HlsPackError as exc:
        _fail(str(exc))
    console.print(f"[green]Thumbnail:[/green] {written}")


if __name__ == "__main__":
    app()

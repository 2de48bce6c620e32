import logging
import subprocess
import time
from pathlib import Path
from typing import List, Optional

from hlspack.domain.errors import EncodeFailure, IOFailure, ThumbnailFailure
from hlspack.domain.events import JobProgressUpdated
from hlspack.domain.models import EncoderProfile, ProcessConfig, TranscodeJob
from hlspack.infrastructure.diagnostics import parse_progress_time
from hlspack.infrastructure.event_bus import EventBus
from hlspack.infrastructure.prober import MediaProber
from hlspack.infrastructure.tool import FFmpegTool, iter_lines
from hlspack.domain.layout import RENDITION_PLAYLIST, SEGMENT_PATTERN

AUDIO_ARGS = ["-c:a", "aac", "-ar", "48000", "-b:a", "128k"]
THUMBNAIL_POSITION = 0.25
THUMBNAIL_WIDTH = 640


def format_seek(seconds: float) -> str:
    """HH:MM:SS.ss as accepted by -ss."""
    hours = int(seconds // 3600)
    minutes = int((seconds % 3600) // 60)
    return f"{hours:02d}:{minutes:02d}:{seconds % 60:05.2f}"


class FFmpegAdapter:
    """Wrapper around ffmpeg for HLS rendition encoding."""

    def __init__(self, event_bus: EventBus, tool: Optional[FFmpegTool] = None):
        self.event_bus = event_bus
        self.tool = tool or FFmpegTool()
        self.logger = logging.getLogger(__name__)

    def build_command(
        self,
        config: ProcessConfig,
        job: TranscodeJob,
        encoder: EncoderProfile,
        gop: int,
        quality_dir: Path,
    ) -> List[str]:
        """Constructs the ffmpeg argument vector for one rendition (binary excluded)."""
        rendition = job.rendition
        gop_str = str(gop)
        cmd = [
            "-i", str(config.input_path),
            "-y",
        ]
        cmd.extend(AUDIO_ARGS)
        cmd.extend(encoder.video_args())

        # Segmenting: keyframes forced every GOP frames, no scene-cut keyframes
        cmd.extend([
            "-sc_threshold", "0",
            "-g", gop_str, "-keyint_min", gop_str,
            "-hls_time", str(config.segment_duration),
            "-hls_playlist_type", "vod",
        ])

        cmd.extend([
            "-vf", rendition.scale,
            "-b:v", rendition.bitrate,
            "-maxrate", rendition.bitrate,
            "-bufsize", rendition.bufsize,
        ])

        cmd.extend([
            "-hls_segment_filename", str(quality_dir / SEGMENT_PATTERN),
            str(quality_dir / RENDITION_PLAYLIST),
        ])
        return cmd

    def encode(
        self,
        config: ProcessConfig,
        job: TranscodeJob,
        encoder: EncoderProfile,
        gop: int,
        quality_dir: Path,
        total_duration: float,
    ) -> None:
        """Runs one rendition encode, publishing progress; raises EncodeFailure on non-zero exit."""
        quality = job.rendition.quality
        start_time = time.monotonic()
        self.logger.info(f"FFMPEG_START: {config.id} {quality} (encoder={encoder.encoder}, family={encoder.family})")

        args = self.build_command(config, job, encoder, gop, quality_dir)
        process = self.tool.spawn(args)
        job.process = process

        output: List[str] = []
        try:
            for line in iter_lines(process.stderr):
                output.append(line)
                elapsed = parse_progress_time(line)
                if elapsed is None or total_duration <= 0:
                    continue
                progress = (elapsed / total_duration) * 100.0
                job.progress_percent = progress
                self.event_bus.publish(JobProgressUpdated(job_id=config.id, progress=progress))
            process.wait()
        except BaseException as exc:
            # Ctrl-C or a failing subscriber: the child must not outlive this call
            if process.poll() is None:
                self.logger.info(f"FFMPEG_INTERRUPTED: {config.id} {quality} ({type(exc).__name__})")
                self._stop(process)
            raise
        finally:
            job.output = "\n".join(output)
            job.process = None

        job.exit_code = process.returncode
        elapsed_wall = time.monotonic() - start_time
        if process.returncode != 0:
            self.logger.error(
                f"FFMPEG_END: {config.id} {quality} status=failed code={process.returncode} elapsed={elapsed_wall:.2f}s"
            )
            raise EncodeFailure(quality, process.returncode, job.output)
        self.logger.info(f"FFMPEG_END: {config.id} {quality} status=completed elapsed={elapsed_wall:.2f}s")

    @staticmethod
    def _stop(process) -> None:
        process.terminate()
        try:
            process.wait(timeout=3)
        except subprocess.TimeoutExpired:
            process.kill()
            process.wait()

    def generate_thumbnail(self, input_path: Path, output_path: Path, prober: Optional[MediaProber] = None) -> Path:
        """Extracts one JPEG frame from 25% into the source, scaled to 640px wide."""
        prober = prober or MediaProber(self.tool)
        probe = prober.probe(input_path)
        seek = format_seek(probe.duration * THUMBNAIL_POSITION)

        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise IOFailure(f"Failed to create {output_path.parent}: {exc}") from exc

        process = self.tool.spawn([
            "-ss", seek,
            "-i", str(input_path),
            "-vframes", "1",
            "-vf", f"scale={THUMBNAIL_WIDTH}:-1",
            "-q:v", "2",
            "-y",
            str(output_path),
        ])
        output = "\n".join(iter_lines(process.stderr))
        process.wait()
        if process.returncode != 0:
            raise ThumbnailFailure(f"ffmpeg thumbnail failed: code {process.returncode}: {output}")

        self.logger.info(f"THUMBNAIL: {input_path.name} at {seek} -> {output_path}")
        return output_path

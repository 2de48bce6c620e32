"""Job orchestrator for HLS packaging.

Runs one job through an explicit state machine:

    PROBING -> PLANNING -> ENCODING (one rendition at a time) -> FINALIZING -> DONE

Any failure moves the job to FAILED. Renditions encode sequentially because
they compete for the same CPU/GPU encoder. The first non-zero ffmpeg exit
stops the job: later renditions are skipped and master.m3u8 is never written.
Partial rendition directories are left on disk for the caller to clean up.
Errors that are not HlsPackError (Ctrl-C, a failing subscriber) still fail
the job and publish JobFailed, then propagate to the caller.
"""

import logging
from pathlib import Path
from typing import Optional

from hlspack.domain.errors import HlsPackError, IOFailure
from hlspack.domain.events import (
    JobCompleted,
    JobFailed,
    JobStateChanged,
    RenditionCompleted,
    RenditionStarted,
)
from hlspack.domain.layout import rendition_dir
from hlspack.domain.models import JobResult, JobState, ProcessConfig, TranscodeJob
from hlspack.infrastructure.event_bus import EventBus
from hlspack.infrastructure.ffmpeg import FFmpegAdapter
from hlspack.infrastructure.prober import MediaProber
from hlspack.pipeline.planner import plan_job
from hlspack.pipeline.playlist import PlaylistAssembler, entry_for


class Orchestrator:
    """Drives probe, plan, sequential encodes and master playlist write for one job at a time.

    Args:
        event_bus: EventBus receiving state, progress and completion events.
        prober: MediaProber used for the duration that progress is measured against.
        ffmpeg_adapter: FFmpegAdapter running each rendition encode.
    """

    def __init__(self, event_bus: EventBus, prober: MediaProber, ffmpeg_adapter: FFmpegAdapter):
        self.event_bus = event_bus
        self.prober = prober
        self.ffmpeg_adapter = ffmpeg_adapter
        self.logger = logging.getLogger(__name__)
        self.state = JobState.PENDING
        self._active_job: Optional[TranscodeJob] = None

    def _transition(self, config: ProcessConfig, state: JobState) -> None:
        self.logger.debug(f"JOB_STATE: {config.id} {self.state.value} -> {state.value}")
        self.state = state
        self.event_bus.publish(JobStateChanged(job_id=config.id, state=state))

    def _ensure_dir(self, path: Path) -> None:
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise IOFailure(f"Failed to create {path}: {exc}") from exc

    def cancel(self) -> None:
        """Terminates the running ffmpeg; the job then fails as an EncodeFailure."""
        job = self._active_job
        if job is not None and job.process is not None:
            self.logger.info(f"JOB_CANCEL: {job.job_id} {job.rendition.quality}")
            job.process.terminate()

    def run(self, config: ProcessConfig) -> JobResult:
        self.state = JobState.PENDING
        completed = 0
        try:
            self._transition(config, JobState.PROBING)
            probe = self.prober.probe(config.input_path)

            self._transition(config, JobState.PLANNING)
            plan = plan_job(config.qualities, config.encoder, config.segment_duration)
            self.logger.info(
                f"JOB_PLAN: {config.id} renditions={[r.quality for r in plan.renditions]} "
                f"encoder={plan.encoder.encoder} gop={plan.gop}"
            )
            self._ensure_dir(config.output_dir)

            assembler = PlaylistAssembler()
            self._transition(config, JobState.ENCODING)
            total = len(plan.renditions)
            for index, rendition in enumerate(plan.renditions):
                quality_dir = rendition_dir(config.output_dir, rendition.quality)
                self._ensure_dir(quality_dir)

                self.event_bus.publish(
                    RenditionStarted(job_id=config.id, quality=rendition.quality, index=index, total=total)
                )
                job = TranscodeJob(job_id=config.id, rendition=rendition)
                self._active_job = job
                try:
                    self.ffmpeg_adapter.encode(config, job, plan.encoder, plan.gop, quality_dir, probe.duration)
                finally:
                    self._active_job = None

                assembler.record(entry_for(rendition))
                completed += 1
                self.event_bus.publish(RenditionCompleted(job_id=config.id, quality=rendition.quality))

            self._transition(config, JobState.FINALIZING)
            manifest_path = assembler.finalize(config.output_dir)
        except HlsPackError as exc:
            self.logger.error(f"JOB_FAILED: {config.id} after {completed} rendition(s): {exc}")
            self._transition(config, JobState.FAILED)
            self.event_bus.publish(JobFailed(job_id=config.id, error_message=str(exc)))
            return JobResult(
                job_id=config.id,
                state=JobState.FAILED,
                renditions_completed=completed,
                error_message=str(exc),
                failure=exc,
            )
        except BaseException as exc:
            self.logger.error(f"JOB_FAILED: {config.id} after {completed} rendition(s): {type(exc).__name__}: {exc}")
            self._transition(config, JobState.FAILED)
            self.event_bus.publish(JobFailed(job_id=config.id, error_message=f"{type(exc).__name__}: {exc}"))
            raise

        self._transition(config, JobState.DONE)
        self.event_bus.publish(JobCompleted(job_id=config.id, manifest_path=manifest_path))
        self.logger.info(f"JOB_DONE: {config.id} -> {manifest_path}")
        return JobResult(
            job_id=config.id,
            state=JobState.DONE,
            manifest_path=manifest_path,
            renditions_completed=completed,
        )

"""Domain events for the packaging pipeline.

Events flow through the EventBus, decoupling the orchestrator from whatever
presents progress (the rich progress bar in the CLI, or a GUI host).

See `infrastructure/event_bus.py` for the pub/sub mechanism.
"""

from pathlib import Path
from pydantic import BaseModel
from .models import JobState


class Event(BaseModel):
    """Base class for all domain events."""

    pass


class JobEvent(Event):
    """Base class for events keyed by a job identifier."""

    job_id: str


class JobStateChanged(JobEvent):
    """Emitted on every job state machine transition."""

    state: JobState


class JobProgressUpdated(JobEvent):
    """Emitted for each parsed ffmpeg time= line.

    Not clamped: values above 100 occur near the end of an encode.
    """

    progress: float


class RenditionStarted(JobEvent):
    quality: str
    index: int
    total: int


class RenditionCompleted(JobEvent):
    quality: str


class JobCompleted(JobEvent):
    manifest_path: Path


class JobFailed(JobEvent):
    """Emitted once when a job reaches FAILED."""

    error_message: str

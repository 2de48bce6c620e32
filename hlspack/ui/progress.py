from typing import Dict, Optional

from rich.console import Console
from rich.progress import BarColumn, Progress, TaskID, TextColumn, TimeElapsedColumn

from hlspack.domain.events import (
    JobCompleted,
    JobFailed,
    JobProgressUpdated,
    RenditionCompleted,
    RenditionStarted,
)
from hlspack.infrastructure.event_bus import EventBus


class ProgressReporter:
    """Subscribes to EventBus and renders one rich progress bar per rendition."""

    def __init__(self, bus: EventBus, console: Optional[Console] = None):
        self.bus = bus
        self.console = console or Console()
        self.progress = Progress(
            TextColumn("[bold]{task.description}"),
            BarColumn(),
            TextColumn("{task.percentage:>5.1f}%"),
            TimeElapsedColumn(),
            console=self.console,
        )
        self._current: Optional[TaskID] = None
        self.last_progress: Dict[str, float] = {}
        self._setup_subscriptions()

    def _setup_subscriptions(self):
        self._subscriptions = [
            (RenditionStarted, self.on_rendition_started),
            (JobProgressUpdated, self.on_progress),
            (RenditionCompleted, self.on_rendition_completed),
            (JobCompleted, self.on_job_completed),
            (JobFailed, self.on_job_failed),
        ]
        for event_type, handler in self._subscriptions:
            self.bus.subscribe(event_type, handler)

    def __enter__(self):
        self.progress.start()
        return self

    def __exit__(self, *exc_info):
        self.progress.stop()
        # The bus may outlive this reporter (several jobs on one bus).
        for event_type, handler in self._subscriptions:
            self.bus.unsubscribe(event_type, handler)

    def on_rendition_started(self, event: RenditionStarted):
        label = f"{event.quality} ({event.index + 1}/{event.total})"
        self._current = self.progress.add_task(label, total=100.0)

    def on_progress(self, event: JobProgressUpdated):
        # Raw values may exceed 100; only the bar is capped.
        self.last_progress[event.job_id] = event.progress
        if self._current is not None:
            self.progress.update(self._current, completed=min(event.progress, 100.0))

    def on_rendition_completed(self, event: RenditionCompleted):
        if self._current is not None:
            self.progress.update(self._current, completed=100.0)
        self._current = None

    def on_job_completed(self, event: JobCompleted):
        self.console.print(f"[green]Done:[/green] {event.manifest_path}")

    def on_job_failed(self, event: JobFailed):
        self._current = None

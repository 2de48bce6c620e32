"""Failure taxonomy for the packaging pipeline.

Every fatal condition aborts the whole job. The exception message is the
single user-visible description of what went wrong.
"""

from typing import Optional


class HlsPackError(Exception):
    """Base class for all pipeline failures."""


class ToolNotFound(HlsPackError):
    """The ffmpeg binary could not be located."""

    def __init__(self, binary: str, detail: Optional[str] = None):
        self.binary = binary
        message = f"ffmpeg binary not found: {binary}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class SpawnFailure(HlsPackError):
    """The OS refused to start the subprocess."""


class IOFailure(HlsPackError):
    """Directory creation or manifest write failed."""


class ProbeFailure(HlsPackError):
    """Media inspection could not run at all."""


class ThumbnailFailure(HlsPackError):
    """Frame extraction exited non-zero."""


class EncodeFailure(HlsPackError):
    """A rendition encode exited non-zero."""

    def __init__(self, quality: str, exit_code: int, output: str):
        self.quality = quality
        self.exit_code = exit_code
        self.output = output
        super().__init__(f"ffmpeg failed for {quality}: code {exit_code}: {output}")

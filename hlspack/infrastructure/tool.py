import logging
import queue
import shutil
import subprocess
import threading
from typing import IO, Iterator, List, Optional, Sequence

from hlspack.domain.errors import SpawnFailure, ToolNotFound

DEFAULT_BINARY = "ffmpeg"


class FFmpegTool:
    """Locates the ffmpeg binary and starts it with a given argument vector."""

    def __init__(self, binary: Optional[str] = None):
        self.binary = binary or DEFAULT_BINARY
        self.logger = logging.getLogger(__name__)

    def resolve(self) -> str:
        path = shutil.which(self.binary)
        if path is None:
            raise ToolNotFound(self.binary, "not on PATH or not executable")
        return path

    def command(self, args: Sequence[str]) -> List[str]:
        return [self.resolve(), *args]

    def spawn(self, args: Sequence[str]) -> subprocess.Popen:
        """Starts ffmpeg with stderr piped as text; ffmpeg's \\r progress lines split as lines."""
        cmd = self.command(args)
        self.logger.debug(f"FFMPEG_CMD: {' '.join(cmd)}")
        try:
            return subprocess.Popen(
                cmd,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.PIPE,
                universal_newlines=True,
                errors="replace",
                bufsize=1,
            )
        except FileNotFoundError as exc:
            raise ToolNotFound(self.binary, str(exc)) from exc
        except OSError as exc:
            raise SpawnFailure(f"Failed to start {self.binary}: {exc}") from exc

    def run(self, args: Sequence[str]) -> subprocess.CompletedProcess:
        """Runs a short ffmpeg invocation to completion, capturing both streams."""
        cmd = self.command(args)
        self.logger.debug(f"FFMPEG_CMD: {' '.join(cmd)}")
        try:
            return subprocess.run(cmd, capture_output=True, text=True, errors="replace")
        except FileNotFoundError as exc:
            raise ToolNotFound(self.binary, str(exc)) from exc
        except OSError as exc:
            raise SpawnFailure(f"Failed to start {self.binary}: {exc}") from exc


def iter_lines(stream: Optional[IO[str]]) -> Iterator[str]:
    """Yields lines from a process stream, read on a background thread."""
    if stream is None:
        return

    output_queue: "queue.Queue[Optional[str]]" = queue.Queue()

    def _reader():
        try:
            for line in stream:
                output_queue.put(line)
        finally:
            output_queue.put(None)

    reader_thread = threading.Thread(target=_reader, daemon=True)
    reader_thread.start()

    while True:
        line = output_queue.get()
        if line is None:
            break
        yield line.rstrip("\r\n")

    reader_thread.join()

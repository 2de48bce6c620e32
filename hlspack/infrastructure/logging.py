import logging
from pathlib import Path
from typing import Optional

DEFAULT_LOG_FILE = "hlspack.log"
LOG_FORMAT = '%(asctime)s - %(levelname)s - %(name)s - %(message)s'


def resolve_log_file(output_dir: Path, log_path: Optional[Path] = None) -> Path:
    """An explicit log_path wins; otherwise the log sits beside master.m3u8."""
    if log_path:
        return Path(log_path)
    return Path(output_dir) / DEFAULT_LOG_FILE


def setup_logging(output_dir: Path, debug: bool = False, log_path: Optional[Path] = None) -> logging.Logger:
    """Routes all hlspack logging for one packaging run to a single file.

    Debug level adds the per-state JOB_STATE lines and full encoder details.
    Any earlier root configuration is replaced, so repeated runs in one
    process log to the latest file only.
    """
    log_file = resolve_log_file(output_dir, log_path)
    log_file.parent.mkdir(parents=True, exist_ok=True)

    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format=LOG_FORMAT,
        handlers=[logging.FileHandler(log_file)],
        force=True,
    )

    logger = logging.getLogger("hlspack")
    logger.info(f"LOGGING: {log_file} (debug={'ON' if debug else 'OFF'})")
    return logger

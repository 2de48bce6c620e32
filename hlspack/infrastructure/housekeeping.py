import logging
import shutil
from pathlib import Path
from typing import Iterable, List

from hlspack.domain.layout import MASTER_PLAYLIST, rendition_dir

class HousekeepingService:
    """Removes partial output left behind by a failed job."""

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    def cleanup_partial_output(self, output_dir: Path, qualities: Iterable[str]) -> List[Path]:
        """Deletes the rendition directories of a job; other content in output_dir is kept.

        Only direct children of output_dir are ever removed.
        """
        removed: List[Path] = []
        root = Path(output_dir).resolve()
        for quality in dict.fromkeys(qualities):
            path = rendition_dir(output_dir, quality)
            if path.resolve().parent != root:
                self.logger.warning(f"CLEANUP: skipping {path} (outside {root})")
                continue
            if path.is_dir():
                shutil.rmtree(path, ignore_errors=True)
                removed.append(path)
        master = Path(output_dir) / MASTER_PLAYLIST
        if master.exists():
            try:
                master.unlink()
                removed.append(master)
            except OSError as exc:
                self.logger.warning(f"CLEANUP: could not remove {master}: {exc}")
        for path in removed:
            self.logger.info(f"CLEANUP: removed {path}")
        return removed

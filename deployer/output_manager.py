"""
Output Manager — Per-run result folders and retention cleanup.

Every deployment (live or preview) gets its own folder under the output
directory, named YYYYMMDD_HHMM_{label} where label is the environment host
(e.g. "20261018_0930_contoso.crm.dynamics.com"). The orchestrator writes
deployment_results.json into it.

Folders older than retention_days are removed before a new run starts;
retention_days=0 keeps everything.
"""

import json
import re
import shutil
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Optional

RUN_FOLDER_PATTERN = re.compile(r'^(\d{8}_\d{4})_.+$')


class OutputManager:
    """Creates run folders and prunes old ones.

    Attributes:
        base_dir: Root output directory.
        label: Suffix of the run folder name (sanitized).
        retention_days: Age in days after which run folders are deleted.
        current_dir: This run's folder, None until create_run_dir() is called.
    """

    def __init__(self, base_dir: str, label: str, retention_days: int = 30):
        self.base_dir = Path(base_dir)
        self.label = label
        self.retention_days = retention_days
        self.current_dir: Optional[Path] = None
        self._started = datetime.now()

    def create_run_dir(self) -> Path:
        """Create this run's folder.

        Format: {base_dir}/YYYYMMDD_HHMM_{label}, where characters other than
        alphanumerics, '-', '_' and '.' in the label become '_'. The timestamp
        is fixed at construction, so repeated calls return the same folder.

        Returns:
            Path of the created folder (also stored in current_dir).
        """
        safe_label = "".join(c if c.isalnum() or c in '-_.' else '_' for c in self.label) or "run"
        self.current_dir = self.base_dir / f"{self._started:%Y%m%d_%H%M}_{safe_label}"
        self.current_dir.mkdir(parents=True, exist_ok=True)
        return self.current_dir

    def save_json(self, filename: str, data: Any) -> Path:
        """Write ``data`` as indented JSON into the current run folder.

        Args:
            filename: File name inside the run folder (e.g. "deployment_results.json").
            data: JSON-serializable value; other objects are written with str().

        Returns:
            Path of the written file. The run folder is created if needed.
        """
        if self.current_dir is None:
            self.create_run_dir()
        path = self.current_dir / filename
        with open(path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, default=str)
        return path

    def cleanup_old_folders(self, debug: bool = False) -> int:
        """Remove run folders older than retention_days.

        Only folders matching YYYYMMDD_HHMM_* are considered; anything else in
        the output directory is left alone.

        Args:
            debug: If True, print each deleted folder name.

        Returns:
            The number of folders deleted.
        """
        if self.retention_days <= 0 or not self.base_dir.is_dir():
            return 0

        cutoff = datetime.now() - timedelta(days=self.retention_days)
        deleted = 0

        for folder in self.base_dir.iterdir():
            match = RUN_FOLDER_PATTERN.match(folder.name)
            if not folder.is_dir() or not match:
                continue

            try:
                if datetime.strptime(match.group(1), "%Y%m%d_%H%M") < cutoff:
                    shutil.rmtree(folder)
                    deleted += 1
                    if debug:
                        print(f"  Deleted old output folder: {folder.name}")
            except (ValueError, OSError) as e:
                print(f"  Warning: Could not remove {folder.name}: {e}")

        return deleted

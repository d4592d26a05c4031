"""Run-scoped cache directory for artifacts collected during a run."""

from __future__ import annotations

import base64
import json
import logging
import os
import shutil
import time
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from synthqa.core.models import Step

logger = logging.getLogger(__name__)


def default_cache_path() -> Path:
    """Per-process cache location under the working directory."""
    return Path.cwd() / ".synthqa" / str(os.getpid())


class RunCache:
    """Manages the cache directory that lives for exactly one run.

    This class handles:
    - Creating the directory layout when a run starts
    - Persisting step screenshots for post-processing by reporters
    - Removing everything when the run ends
    """

    def __init__(self, path: str | Path | None = None) -> None:
        """Initialize the run cache.

        Args:
            path: Cache root. Defaults to ``.synthqa/<pid>`` in the working
                directory.
        """
        self.path = Path(path) if path else default_cache_path()
        self.screenshots_path = self.path / "screenshots"
        self._written = 0

    def create(self) -> None:
        self.screenshots_path.mkdir(parents=True, exist_ok=True)
        logger.debug(f"Cache created at {self.path}")

    def write_screenshot(self, step: Step, data: bytes) -> Path:
        """Persist one screenshot together with the step that produced it.

        Args:
            step: Step the screenshot belongs to.
            data: Raw image bytes.

        Returns:
            Path of the written JSON file.
        """
        file_path = self.screenshots_path / f"{time.time_ns()}-{self._written}.json"
        payload = {
            "step": step.to_dict(),
            "data": base64.b64encode(data).decode("ascii"),
        }
        file_path.write_text(json.dumps(payload), encoding="utf-8")
        self._written += 1
        return file_path

    def read_screenshots(self) -> list[dict[str, Any]]:
        """Load every persisted screenshot, oldest first."""
        if not self.screenshots_path.exists():
            return []
        return [
            json.loads(p.read_text(encoding="utf-8"))
            for p in sorted(self.screenshots_path.glob("*.json"))
        ]

    def clear_screenshots(self) -> None:
        """Drop screenshots that have already been reported."""
        for p in self.screenshots_path.glob("*.json"):
            p.unlink()

    def remove(self) -> None:
        """Delete the cache directory and everything in it."""
        if self.path.exists():
            shutil.rmtree(self.path)
            logger.debug(f"Cache removed at {self.path}")
        self._written = 0

"""
Progress Display Module

Show which provisioning step is running and how long each one took.
Azure operations such as VM creation take minutes, so the user needs to
see that the sample is still moving.

Security Requirements:
- No credential exposure in output
"""

import logging
import sys
import time
from dataclasses import dataclass
from enum import Enum
from typing import Optional

logger = logging.getLogger(__name__)


class ProgressStage(Enum):
    """Progress stage indicators."""

    STARTED = "started"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class ProgressUpdate:
    """Progress update information."""

    stage: ProgressStage
    message: str
    timestamp: float
    step: int
    total_steps: int


class ProgressDisplay:
    """
    Step counter for the provisioning sequence.

    Prints lines such as "[3/10] ► Creating virtual network" and, when the
    step ends, "[3/10] ✓ Creating virtual network (42.1s)".
    """

    SYMBOLS = {
        ProgressStage.STARTED: "►",
        ProgressStage.COMPLETED: "✓",
        ProgressStage.FAILED: "✗",
    }

    ASCII_SYMBOLS = {
        ProgressStage.STARTED: ">",
        ProgressStage.COMPLETED: "OK",
        ProgressStage.FAILED: "FAIL",
    }

    def __init__(self, total_steps: int, use_unicode: bool = True, output_file=None):
        """
        Initialize progress display.

        Args:
            total_steps: Number of steps in the sequence
            use_unicode: Use Unicode symbols (True) or ASCII (False)
            output_file: Output file object (default: sys.stdout)
        """
        self.total_steps = total_steps
        self.use_unicode = use_unicode
        self.output_file = output_file or sys.stdout
        self.current_step = 0
        self.current_operation: Optional[str] = None
        self.start_time: Optional[float] = None
        self.updates: list[ProgressUpdate] = []

    def start_step(self, name: str) -> None:
        """Begin the next step."""
        self.current_step += 1
        self.current_operation = name
        self.start_time = time.time()
        self._record(ProgressStage.STARTED, name)

    def complete(self, success: bool = True, message: Optional[str] = None) -> None:
        """
        Mark the current step complete.

        Args:
            success: Whether the step succeeded
            message: Optional completion message (defaults to the step name)
        """
        stage = ProgressStage.COMPLETED if success else ProgressStage.FAILED
        final_message = message or self.current_operation or "step"

        if self.start_time:
            elapsed = time.time() - self.start_time
            final_message += f" ({self._format_duration(elapsed)})"

        self._record(stage, final_message)

        self.current_operation = None
        self.start_time = None

    def _record(self, stage: ProgressStage, message: str) -> None:
        update = ProgressUpdate(
            stage=stage,
            message=message,
            timestamp=time.time(),
            step=self.current_step,
            total_steps=self.total_steps,
        )
        self.updates.append(update)
        self._print(self._format_update(update))

    def _format_update(self, update: ProgressUpdate) -> str:
        symbols = self.SYMBOLS if self.use_unicode else self.ASCII_SYMBOLS
        return f"[{update.step}/{update.total_steps}] {symbols[update.stage]} {update.message}"

    def _format_duration(self, seconds: float) -> str:
        """
        Format duration in human-readable format.

        Returns:
            str: Formatted duration (e.g., "2m 30s")
        """
        if seconds < 60:
            return f"{seconds:.1f}s"
        if seconds < 3600:
            minutes = int(seconds // 60)
            secs = int(seconds % 60)
            return f"{minutes}m {secs}s"
        hours = int(seconds // 3600)
        minutes = int((seconds % 3600) // 60)
        return f"{hours}h {minutes}m"

    def _print(self, message: str) -> None:
        print(message, file=self.output_file, flush=True)

    def get_updates(self) -> list[ProgressUpdate]:
        """Get all progress updates."""
        return self.updates.copy()

"""
Monitoring Utilities
Dispatch metrics, warnings and module load failures
"""

import time
from collections import deque
from typing import Any, Deque, Dict, List

MAX_WARNINGS = 100


class Monitoring:
    """Observability sink for the command engine."""

    def __init__(self):
        self.start_time = time.time()
        self.metrics = {
            "messagesProcessed": 0,
            "commandsExecuted": 0,
            "permissionDenials": 0,
            "errors": 0,
            "warnings": 0,
            "loadFailures": 0,
        }
        self.warnings: Deque[str] = deque(maxlen=MAX_WARNINGS)
        self.load_failures: Dict[str, str] = {}

    def record_message(self) -> None:
        self.metrics["messagesProcessed"] += 1

    def record_command(self) -> None:
        self.metrics["commandsExecuted"] += 1

    def record_permission_denied(self) -> None:
        self.metrics["permissionDenials"] += 1

    def record_error(self) -> None:
        self.metrics["errors"] += 1

    def record_warning(self, message: str) -> None:
        self.metrics["warnings"] += 1
        self.warnings.append(message)

    def record_load_failure(self, module_id: str, error: BaseException) -> None:
        """Remember the latest failure for a module id."""
        self.metrics["loadFailures"] += 1
        self.load_failures[module_id] = f"{type(error).__name__}: {error}"

    def clear_load_failure(self, module_id: str) -> None:
        self.load_failures.pop(module_id, None)

    def get_app_metrics(self) -> Dict[str, Any]:
        """
        Get application metrics.

        Returns:
            Dict with counters and hourly rates
        """
        return {
            **self.metrics,
            "commandsPerHour": self._per_hour(self.metrics["commandsExecuted"]),
            "messagesPerHour": self._per_hour(self.metrics["messagesProcessed"]),
        }

    def _per_hour(self, count: int) -> int:
        hours = (time.time() - self.start_time) / 3600
        return round(count / hours) if hours > 0 else 0

    def format_status(self) -> str:
        """
        Format metrics for display.

        Returns:
            Multi-line status summary
        """
        app = self.get_app_metrics()

        lines = [
            "📈 **Command Metrics:**",
            f"Commands: {app['commandsExecuted']} ({app['commandsPerHour']}/hr)",
            f"Messages: {app['messagesProcessed']} ({app['messagesPerHour']}/hr)",
            f"Permission denials: {app['permissionDenials']}",
            f"Errors: {app['errors']} | Warnings: {app['warnings']}",
            f"Uptime: {self.format_duration(int(time.time() - self.start_time))}",
        ]

        if self.load_failures:
            lines.append("")
            lines.append("⚠️ **Load failures:**")
            for module_id, reason in self.load_failures.items():
                lines.append(f"• `{module_id}`: {reason}")

        return "\n".join(lines)

    @staticmethod
    def format_duration(seconds: int) -> str:
        """
        Format duration in human readable format.

        Args:
            seconds: Duration in seconds

        Returns:
            Formatted duration string
        """
        days = seconds // 86400
        hours = (seconds % 86400) // 3600
        mins = (seconds % 3600) // 60
        secs = seconds % 60

        parts: List[str] = []
        if days > 0:
            parts.append(f"{days}d")
        if hours > 0:
            parts.append(f"{hours}h")
        if mins > 0:
            parts.append(f"{mins}m")
        if secs > 0 or not parts:
            parts.append(f"{secs}s")

        return " ".join(parts)

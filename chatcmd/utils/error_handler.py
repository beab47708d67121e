"""
Error Handler
Reporting for failures raised by command handlers
"""

import traceback
from typing import Any, Awaitable, Callable, Dict, List, Optional

from chatcmd.utils.logger import get_logger
from chatcmd.utils.monitoring import Monitoring

ErrorListener = Callable[[Any, BaseException], Awaitable[None]]

ERROR_REPLY = "There was an error when trying to run your command:"


class ErrorHandler:
    """Logs, counts and reports command errors."""

    def __init__(self, debug: bool = False, monitoring: Optional[Monitoring] = None):
        self.logger = get_logger("ErrorHandler")
        self.debug = debug
        self.monitoring = monitoring
        self.error_counts: Dict[str, int] = {}
        self.listeners: List[ErrorListener] = []

    def add_listener(self, listener: ErrorListener) -> None:
        """Register an async callback receiving ``(ctx, error)``."""
        self.listeners.append(listener)

    def handle_exception(self, error: BaseException, context: str = "") -> int:
        """
        Log and count an exception.

        Args:
            error: The exception that occurred
            context: Optional context string (usually the command name)

        Returns:
            How many times this context/error type pair has been seen
        """
        error_key = f"{context}:{type(error).__name__}"

        if context:
            self.logger.error(f"[{context}] {error}")
        else:
            self.logger.error(f"{error}")

        self.logger.debug(f"Traceback:\n{self.format_traceback(error)}")

        count = self.error_counts.get(error_key, 0) + 1
        self.error_counts[error_key] = count

        if self.monitoring:
            self.monitoring.record_error()

        return count

    async def handle_command_error(self, ctx: Any, error: BaseException) -> None:
        """
        Report a handler failure to the invoking user and to listeners.

        Args:
            ctx: Context the command was run from
            error: The exception raised by the command
        """
        self.handle_exception(error, getattr(ctx, "cmd", ""))

        detail = self.format_traceback(error) if self.debug else str(error)
        try:
            await ctx.send(f"{ERROR_REPLY}\n{detail}")
        except Exception as send_error:
            self.logger.error(f"Failed to report command error: {send_error}")

        for listener in self.listeners:
            try:
                await listener(ctx, error)
            except Exception as listener_error:
                self.handle_exception(listener_error, "error-listener")

    @staticmethod
    def format_traceback(error: BaseException) -> str:
        return "".join(traceback.format_exception(type(error), error, error.__traceback__))

"""
Error context management.

Non-fatal failures (an unreachable backend, a misbehaving hook) are not
raised to callers. They are captured as ErrorContext records and carried
on the query spec or search outcome instead.
"""

from datetime import datetime
from typing import Any, Dict
from dataclasses import dataclass, field


@dataclass
class ErrorContext:
    """
    Structured error context information.

    Attributes:
        stage: Where the failure happened (``backend``, ``query_hook``,
            ``result_hook``)
        error_type: Exception class name
        error_message: Exception message, suitable for display
    """

    stage: str = ""
    error_type: str = ""
    error_message: str = ""
    timestamp: datetime = field(default_factory=datetime.utcnow)
    context_data: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert error context to dictionary.

        Returns:
            Dict[str, Any]: Dictionary representation
        """
        return {
            "stage": self.stage,
            "timestamp": self.timestamp.isoformat(),
            "error_type": self.error_type,
            "error_message": self.error_message,
            "context_data": self.context_data
        }


class ErrorContextManager:
    """Helpers for creating and rendering error contexts."""

    @staticmethod
    def create_context(
        error: Exception,
        stage: str,
        **context_data: Any
    ) -> ErrorContext:
        """
        Create error context from exception.

        Args:
            error: The exception to create context from
            stage: Processing stage the error belongs to
            **context_data: Additional context data

        Returns:
            ErrorContext: Created error context
        """
        return ErrorContext(
            stage=stage,
            error_type=error.__class__.__name__,
            error_message=str(error),
            context_data=context_data
        )

    @staticmethod
    def format_context(context: ErrorContext) -> str:
        """
        Format error context as a single display string.

        Args:
            context: Error context to format

        Returns:
            str: Formatted error context
        """
        parts = [f"[{context.stage}] {context.error_type}: {context.error_message}"]

        if context.context_data:
            context_str = ", ".join(
                f"{k}={v}" for k, v in context.context_data.items()
            )
            parts.append(f"({context_str})")

        return " ".join(parts)

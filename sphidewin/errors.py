"""
Error handling for the window hider daemon.

Errors are split into fatal ones (connection, usage) and per-window ones
(resolve, operation) that the dispatcher logs and skips.
"""

from enum import Enum
from typing import Optional, Dict, Any


class ErrorCode(Enum):
    """
    Error codes for sphidewin.

    - 1000-1099: Usage errors
    - 1100-1199: X connection errors
    - 1200-1299: Per-window errors
    """

    # Usage errors (1000-1099)
    INVALID_ARGUMENTS = 1000
    INVALID_CONFIG = 1001

    # X connection errors (1100-1199)
    DISPLAY_UNAVAILABLE = 1100

    # Per-window errors (1200-1299)
    RESOLVE_FAILED = 1200
    REQUEST_FAILED = 1201


class HiderError(Exception):
    """Base exception for window hider errors."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        context: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize hider error.

        Args:
            code: Error code from ErrorCode enum
            message: Human-readable error message
            context: Additional context for debugging
        """
        self.code = code
        self.message = message
        self.context = context or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert error to a dictionary suitable for structured logging.

        Returns:
            Error dictionary with code, message and context
        """
        result = {
            "code": self.code.value,
            "message": self.message
        }

        if self.context:
            result["context"] = self.context

        return result


class UsageError(HiderError):
    """Command-line usage error."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.INVALID_ARGUMENTS):
        super().__init__(code=code, message=message)


class XConnectionError(HiderError):
    """The X server connection could not be established."""

    def __init__(self, display_name: Optional[str], reason: str):
        """
        Initialize connection error.

        Args:
            display_name: Display that was requested (None means $DISPLAY)
            reason: Reason for failure
        """
        super().__init__(
            code=ErrorCode.DISPLAY_UNAVAILABLE,
            message=f"Cannot open display {display_name or '$DISPLAY'}: {reason}",
            context={"display": display_name, "reason": reason}
        )


class ResolveError(HiderError):
    """The class names of a window could not be read."""

    def __init__(self, window_id: int, reason: str):
        super().__init__(
            code=ErrorCode.RESOLVE_FAILED,
            message=f"Cannot resolve WM_CLASS of window {window_id}: {reason}",
            context={"window_id": window_id, "reason": reason}
        )
        self.window_id = window_id


class OperationError(HiderError):
    """A request on a single window (property query, map, unmap) failed."""

    def __init__(self, operation: str, window_id: int, reason: str):
        """
        Initialize operation error.

        Args:
            operation: Request that failed (e.g., "unmap", "map")
            window_id: Window the request targeted
            reason: Reason for failure
        """
        super().__init__(
            code=ErrorCode.REQUEST_FAILED,
            message=f"{operation} of window {window_id} failed: {reason}",
            context={"operation": operation, "window_id": window_id, "reason": reason}
        )
        self.operation = operation
        self.window_id = window_id

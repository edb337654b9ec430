"""Data models for the window hider daemon.

HiderConfig is built once per invocation from the command line; the other
models describe dispatcher state and restore results.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class HiderConfig(BaseModel):
    """Runtime configuration for a single daemon invocation."""

    target_class: str = Field(
        ...,
        min_length=1,
        description="WM_CLASS instance or class name whose windows are hidden",
    )

    prescan: bool = Field(
        default=False,
        description="Also hide matching windows mapped before the daemon started",
    )

    log_level: str = Field(
        default="INFO",
        description="Root logger level name",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize and validate the log level name."""
        level = v.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"Unknown log level '{v}' (expected one of {', '.join(LOG_LEVELS)})")
        return level


class DispatcherState(Enum):
    """Lifecycle of the event dispatcher. SHUTTING_DOWN is terminal."""

    RUNNING = "running"
    SHUTTING_DOWN = "shutting_down"


@dataclass
class RestoreOutcome:
    """Result of one map attempt during a restore pass."""

    window_id: int
    classes: List[str] = field(default_factory=list)
    success: bool = True
    error: Optional[str] = None

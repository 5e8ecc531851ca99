"""
Pydantic model for a single CloudWatch Logs event
"""

import time
from typing import Any, Dict, Mapping, Union

from pydantic import BaseModel, ConfigDict, Field


def current_millis() -> int:
    """Current wall-clock time in epoch milliseconds"""
    return int(time.time() * 1000)


class LogEvent(BaseModel):
    """One timestamped, formatted message queued for upload"""
    model_config = ConfigDict(frozen=True)

    timestamp: int = Field(default_factory=current_millis, ge=0, description="Event time in epoch milliseconds")
    message: str = Field(default="", description="Formatted log message")

    @classmethod
    def coerce(cls, value: Union['LogEvent', Mapping[str, Any]]) -> 'LogEvent':
        """Accept an existing event or a mapping with optional timestamp/message keys"""
        if isinstance(value, cls):
            return value
        if isinstance(value, Mapping):
            return cls(**dict(value))
        raise TypeError(f"Cannot build a LogEvent from {type(value).__name__}")

    def to_cloudwatch(self) -> Dict[str, Any]:
        """Shape expected by the PutLogEvents API"""
        return {
            'timestamp': self.timestamp,
            'message': self.message
        }

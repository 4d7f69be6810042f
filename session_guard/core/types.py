"""
Type definitions for session-guard.
Contains: ErrorCategory, ErrorSeverity, MessageType, FaultRecord.
"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional
import json
import traceback
class ErrorCategory(Enum):
    """Error category for routing recovery strategies."""
    NETWORK = "network" # Remote API, connection, fetch failures
    FILE_SYSTEM = "file_system" # Missing files, permissions
    TOOL_EXECUTION = "tool_execution" # Tool invocation failures
    CONFIGURATION = "configuration" # Bad or missing settings
    INITIALIZATION = "initialization" # Component startup failures
    INPUT_VALIDATION = "input_validation" # Malformed user input
    UNKNOWN = "unknown" # Unclassified errors
class ErrorSeverity(Enum):
    """Classification of error severity levels."""
    LOW = "low" # Informational, user can carry on
    MEDIUM = "medium" # Feature degraded
    HIGH = "high" # Needs attention
    CRITICAL = "critical" # Session cannot continue in rich mode
class MessageType(Enum):
    """Kinds of lines printed by the fallback session."""
    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"
    ERROR = "error"
    SUCCESS = "success"
    WARNING = "warning"
    TOOL = "tool"
@dataclass(frozen=True)
class FaultRecord:
    """
    Classified description of one failure occurrence.
    Frozen: category and severity are assigned once, at classification time.
    The wrapped cause is kept for diagnostics and is never re-raised.
    """
    message: str
    category: ErrorCategory = ErrorCategory.UNKNOWN
    severity: ErrorSeverity = ErrorSeverity.MEDIUM
    recoverable: bool = True
    context: Optional[str] = None
    timestamp: datetime = field(default_factory=datetime.now)
    cause: Optional[BaseException] = field(default=None, compare=False)
    @classmethod
    def from_error(
        cls,
        error: BaseException,
        category: ErrorCategory = ErrorCategory.UNKNOWN,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        context: Optional[str] = None,
    ) -> "FaultRecord":
        """
        Create a recoverable fault record from a raw exception.
        Args:
            error: The original exception
            category: Assigned category
            severity: Assigned severity
            context: Optional locator such as "Claude API"
        Returns:
            FaultRecord wrapping the error
        """
        return cls(
            message=describe_error(error),
            category=category,
            severity=severity,
            recoverable=True,
            context=context,
            cause=error,
        )
    def display_message(self) -> str:
        """Get formatted message for display."""
        if self.context:
            return f"{self.message} ({self.context})"
        return self.message
    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a plain dictionary."""
        data: Dict[str, Any] = {
            "message": self.message,
            "category": self.category.value,
            "severity": self.severity.value,
            "context": self.context,
            "recoverable": self.recoverable,
            "timestamp": self.timestamp.isoformat(),
        }
        if self.cause is not None:
            data["cause"] = {
                "type": type(self.cause).__name__,
                "message": str(self.cause),
                "stack": "".join(traceback.format_exception(
                    type(self.cause), self.cause, self.cause.__traceback__
                )),
            }
        return data
    def detailed_info(self) -> str:
        """Get detailed JSON description for logging."""
        return json.dumps(self.to_dict(), indent=2)
def describe_error(error: BaseException) -> str:
    """Return the error message, falling back to the exception class name."""
    text = str(error)
    return text if text else type(error).__name__

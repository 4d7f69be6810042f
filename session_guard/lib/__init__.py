"""
Library module for session-guard.
Contains shared components:
    - logging: Logging configuration
    - errors: Custom exception classes
    - display: Fault display surface
    - error_handling: Fault classification, recovery and escalation
    - utils: Helper functions
These are internal utilities used across the package.
"""
# Exception classes - defined before submodule imports so they can use them
class SessionGuardError(Exception):
    """Base exception for session-guard errors."""
    pass
class ConfigurationError(SessionGuardError):
    """Invalid or missing configuration."""
    pass
class InferenceError(SessionGuardError):
    """Error calling the inference client."""
    pass
class ToolError(SessionGuardError):
    """Error during tool execution."""
    pass
class ToolNotFoundError(ToolError):
    """Requested tool is not registered."""
    pass
from .utils import truncate_text, to_tool_content
from .display import Display, ConsoleDisplay
from .error_handling import (
    FaultHandler,
    RecoveryStrategy,
    CallbackStrategy,
    NetworkRecoveryStrategy,
    FileSystemRecoveryStrategy,
    ConfigurationRecoveryStrategy,
    categorize_error,
    default_severity,
    should_escalate,
)
__all__ = [
    # Logging
    "setup_logging",
    "get_logger",
    # Exceptions
    "SessionGuardError",
    "ConfigurationError",
    "InferenceError",
    "ToolError",
    "ToolNotFoundError",
    # Utils
    "truncate_text",
    "to_tool_content",
    # Display
    "Display",
    "ConsoleDisplay",
    # Error handling
    "FaultHandler",
    "RecoveryStrategy",
    "CallbackStrategy",
    "NetworkRecoveryStrategy",
    "FileSystemRecoveryStrategy",
    "ConfigurationRecoveryStrategy",
    "categorize_error",
    "default_severity",
    "should_escalate",
]
def setup_logging(level: str = "WARNING", format: str = None, log_file: str = None):
    """
    Configure logging for session-guard.
    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR).
        format: Custom log format string.
        log_file: Optional log file path.
    """
    from .logging import setup_logging as _setup
    return _setup(level=level, format=format, log_file=log_file)
def get_logger(name: str = None):
    """
    Get a logger instance.
    Args:
        name: Logger name (defaults to session_guard).
    Returns:
        Configured logger instance.
    """
    from .logging import get_logger as _get
    return _get(name)

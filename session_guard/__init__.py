"""
session-guard - Fault classification and graceful degradation for
interactive Claude sessions.
Provides:
- FaultHandler: classify failures, run recovery strategies, decide escalation
- FallbackSession: minimal interactive loop used in degraded mode
- SessionSupervisor: switches a session into fallback mode, once
Usage:
    from session_guard import FaultHandler, ErrorCategory
    handler = FaultHandler()
    recovered = await handler.handle_network_error(err, "Claude API")
    if not recovered and handler.should_escalate(handler.last_fault):
        ...
"""
__version__ = "0.1.0"
from .core.types import ErrorCategory, ErrorSeverity, FaultRecord, MessageType
from .core.config import Config, DegradedConfig, ErrorHandlerConfig, SessionConfig
from .lib.error_handling import (
    FaultHandler,
    RecoveryStrategy,
    CallbackStrategy,
    categorize_error,
    should_escalate,
)
from .executors import FallbackSession, SessionSupervisor
__all__ = [
    "__version__",
    "ErrorCategory",
    "ErrorSeverity",
    "FaultRecord",
    "MessageType",
    "Config",
    "DegradedConfig",
    "ErrorHandlerConfig",
    "SessionConfig",
    "FaultHandler",
    "RecoveryStrategy",
    "CallbackStrategy",
    "categorize_error",
    "should_escalate",
    "FallbackSession",
    "SessionSupervisor",
]

"""
Core module for session-guard.
Exports the shared types, configuration and the inference client seam.
"""
from .types import (
    ErrorCategory,
    ErrorSeverity,
    MessageType,
    FaultRecord,
)
from .config import (
    Config,
    DegradedConfig,
    ErrorHandlerConfig,
    SessionConfig,
    MODEL_ALIASES,
    get_config,
    reset_config,
    resolve_model,
)
__all__ = [
    # Types
    "ErrorCategory",
    "ErrorSeverity",
    "MessageType",
    "FaultRecord",
    # Config
    "Config",
    "DegradedConfig",
    "ErrorHandlerConfig",
    "SessionConfig",
    "MODEL_ALIASES",
    "get_config",
    "reset_config",
    "resolve_model",
]

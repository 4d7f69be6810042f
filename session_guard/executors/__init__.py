"""
Executors Module - Interactive session runners.
Provides:
- FallbackSession: minimal degraded-mode loop
- SessionSupervisor: decides when to hand control to the fallback session
"""
from .fallback import FallbackSession, LineReader, RunnerState, HELP_TEXT
from .supervisor import SessionSupervisor, SWITCH_NOTICE
__all__ = [
    "FallbackSession",
    "LineReader",
    "RunnerState",
    "HELP_TEXT",
    "SessionSupervisor",
    "SWITCH_NOTICE",
]

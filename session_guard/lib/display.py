"""
Display surface used by the fault handler to report faults to the user.
"""
from abc import ABC, abstractmethod
from typing import Optional, TextIO
import sys
from ..core.types import ErrorSeverity, FaultRecord
SEVERITY_PREFIXES = {
    ErrorSeverity.CRITICAL: "[CRITICAL]",
    ErrorSeverity.HIGH: "[ERROR]",
    ErrorSeverity.MEDIUM: "[WARNING]",
    ErrorSeverity.LOW: "[INFO]",
}
SEVERITY_COLORS = {
    ErrorSeverity.CRITICAL: "\033[1;31m",
    ErrorSeverity.HIGH: "\033[31m",
    ErrorSeverity.MEDIUM: "\033[33m",
    ErrorSeverity.LOW: "\033[36m",
}
RESET = "\033[0m"
class Display(ABC):
    """Minimal output surface the fault handler reports through."""
    @abstractmethod
    def display_error(self, fault: FaultRecord, context: Optional[str] = None) -> None:
        ...
    @abstractmethod
    def display_warning(self, text: str) -> None:
        ...
class ConsoleDisplay(Display):
    """
    Built-in display: one severity-prefixed line per fault.
    Used whenever no richer display surface is injected.
    """
    def __init__(self, stream: Optional[TextIO] = None, use_colors: bool = False):
        self._stream = stream
        self.use_colors = use_colors
    @property
    def stream(self) -> TextIO:
        # Resolved lazily so pytest's capsys replacement of sys.stderr is honored
        return self._stream if self._stream is not None else sys.stderr
    def display_error(self, fault: FaultRecord, context: Optional[str] = None) -> None:
        prefix = SEVERITY_PREFIXES.get(fault.severity, "[ERROR]")
        message = fault.message
        if context or fault.context:
            message = f"{message} ({context or fault.context})"
        self._write(f"{prefix} {message}", SEVERITY_COLORS.get(fault.severity))
    def display_warning(self, text: str) -> None:
        self._write(f"[WARNING] {text}", SEVERITY_COLORS[ErrorSeverity.MEDIUM])
    def _write(self, line: str, color: Optional[str]) -> None:
        if self.use_colors and color:
            line = f"{color}{line}{RESET}"
        print(line, file=self.stream, flush=True)

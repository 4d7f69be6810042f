"""
Fault classification and recovery for interactive sessions.
Turns raw exceptions into classified FaultRecords, runs the recovery
strategy registered for the fault's category with bounded retries, and
decides when the session must degrade into fallback mode.
Supports both synchronous and asynchronous strategy callables.
"""
from abc import ABC, abstractmethod
from dataclasses import replace
from pathlib import Path
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Union
import asyncio
import inspect
import logging
import threading
import anthropic
import claude_agent_sdk
import pydantic
from ..core.config import DegradedConfig, ErrorHandlerConfig
from ..core.types import ErrorCategory, ErrorSeverity, FaultRecord, describe_error
from .display import ConsoleDisplay, Display
logger = logging.getLogger(__name__)
FallbackAction = Callable[[], Union[Awaitable[None], None]]
ErrorLike = Union[BaseException, FaultRecord]
FALLBACK_MODE_WARNING = (
    "Activating fallback mode due to critical error. Some features may be limited."
)
# ============================================================================
# RECOVERY STRATEGIES
# ============================================================================
class RecoveryStrategy(ABC):
    """
    Pluggable policy for resolving faults of one category.
    can_recover() must be free of side effects; recover() performs a single
    attempt; fallback_action() may supply a last-resort action that is run
    once all attempts are exhausted.
    """
    @abstractmethod
    def can_recover(self, fault: FaultRecord) -> bool:
        ...
    @abstractmethod
    async def recover(self, fault: FaultRecord) -> bool:
        ...
    def fallback_action(self, fault: FaultRecord) -> Optional[FallbackAction]:
        return None
class CallbackStrategy(RecoveryStrategy):
    """Adapts plain callables (sync or async) to the RecoveryStrategy interface."""
    def __init__(
        self,
        can_recover: Callable[[FaultRecord], bool],
        recover: Callable[[FaultRecord], Union[bool, Awaitable[bool]]],
        fallback_action: Optional[Callable[[FaultRecord], Optional[FallbackAction]]] = None,
    ):
        self._can_recover = can_recover
        self._recover = recover
        self._fallback_action = fallback_action
    def can_recover(self, fault: FaultRecord) -> bool:
        return bool(self._can_recover(fault))
    async def recover(self, fault: FaultRecord) -> bool:
        return bool(await _maybe_await(self._recover(fault)))
    def fallback_action(self, fault: FaultRecord) -> Optional[FallbackAction]:
        if self._fallback_action is None:
            return None
        return self._fallback_action(fault)
class NetworkRecoveryStrategy(RecoveryStrategy):
    """Network faults are retried by the handler loop; the fallback warns the user."""
    def __init__(self, warn: Callable[[str], None]):
        self._warn = warn
    def can_recover(self, fault: FaultRecord) -> bool:
        return fault.recoverable
    async def recover(self, fault: FaultRecord) -> bool:
        # The API client owns its own retries; nothing to repair locally
        return False
    def fallback_action(self, fault: FaultRecord) -> Optional[FallbackAction]:
        def _warn_user() -> None:
            self._warn("Network connectivity issues detected. Some features may be limited.")
        return _warn_user
class FileSystemRecoveryStrategy(RecoveryStrategy):
    """
    File system faults other than permission problems.
    With create_missing_dirs enabled, a FileNotFoundError whose parent
    directory is missing is repaired by creating that directory.
    """
    def __init__(self, create_missing_dirs: bool = False):
        self.create_missing_dirs = create_missing_dirs
    def can_recover(self, fault: FaultRecord) -> bool:
        return fault.recoverable and "permission" not in fault.message.lower()
    async def recover(self, fault: FaultRecord) -> bool:
        if not self.create_missing_dirs:
            return False
        cause = fault.cause
        if not isinstance(cause, FileNotFoundError) or not cause.filename:
            return False
        parent = Path(cause.filename).parent
        if parent.exists():
            return False
        parent.mkdir(parents=True, exist_ok=True)
        logger.info("Created missing directory %s", parent)
        return True
class ConfigurationRecoveryStrategy(RecoveryStrategy):
    """Configuration faults: optionally reset to defaults, else warn and continue."""
    def __init__(
        self,
        warn: Callable[[str], None],
        reset_defaults: Optional[Callable[[], Union[bool, Awaitable[bool]]]] = None,
    ):
        self._warn = warn
        self.reset_defaults = reset_defaults
    def can_recover(self, fault: FaultRecord) -> bool:
        return fault.recoverable
    async def recover(self, fault: FaultRecord) -> bool:
        if self.reset_defaults is None:
            return False
        return bool(await _maybe_await(self.reset_defaults()))
    def fallback_action(self, fault: FaultRecord) -> Optional[FallbackAction]:
        def _warn_user() -> None:
            self._warn("Using default configuration due to configuration error.")
        return _warn_user
# ============================================================================
# CLASSIFICATION
# ============================================================================
# Checked only when the message/context heuristics find nothing
_TYPE_CATEGORIES = (
    ((anthropic.AuthenticationError,), ErrorCategory.CONFIGURATION),
    ((anthropic.APIConnectionError, claude_agent_sdk.CLIConnectionError,
      ConnectionError, TimeoutError), ErrorCategory.NETWORK),
    ((FileNotFoundError, PermissionError, IsADirectoryError,
      NotADirectoryError), ErrorCategory.FILE_SYSTEM),
    ((claude_agent_sdk.CLINotFoundError,), ErrorCategory.INITIALIZATION),
    ((pydantic.ValidationError, claude_agent_sdk.CLIJSONDecodeError),
     ErrorCategory.INPUT_VALIDATION),
)
def categorize_error(error: BaseException, context: Optional[str] = None) -> ErrorCategory:
    """
    Categorize an error based on its message, context and type.
    Substring signals are checked in priority order and the first match
    wins. This is a heuristic: a message that mentions several signals
    (a tool error that happens to contain "connection") lands in the
    earliest category. Call sites that know the category should use the
    category-specific handle_* methods instead.
    Args:
        error: The exception to categorize
        context: Optional locator string for the failing operation
    Returns:
        The inferred ErrorCategory
    """
    message = str(error).lower()
    context_lower = (context or "").lower()
    if "network" in context_lower or any(
        term in message for term in ("network", "fetch", "connection")
    ):
        return ErrorCategory.NETWORK
    if "file" in context_lower or any(
        term in message for term in ("enoent", "permission", "access", "no such file")
    ):
        return ErrorCategory.FILE_SYSTEM
    if "tool" in context_lower or "execution" in context_lower:
        return ErrorCategory.TOOL_EXECUTION
    if "config" in context_lower or "config" in message:
        return ErrorCategory.CONFIGURATION
    if "init" in context_lower or "startup" in context_lower:
        return ErrorCategory.INITIALIZATION
    if "input" in context_lower or "invalid" in message:
        return ErrorCategory.INPUT_VALIDATION
    for types, category in _TYPE_CATEGORIES:
        if isinstance(error, types):
            return category
    return ErrorCategory.UNKNOWN
def default_severity(category: ErrorCategory) -> ErrorSeverity:
    """Severity assigned when the caller does not supply one."""
    if category == ErrorCategory.INITIALIZATION:
        return ErrorSeverity.CRITICAL
    if category in (ErrorCategory.NETWORK, ErrorCategory.CONFIGURATION):
        return ErrorSeverity.HIGH
    if category == ErrorCategory.INPUT_VALIDATION:
        return ErrorSeverity.LOW
    # FILE_SYSTEM, TOOL_EXECUTION, UNKNOWN
    return ErrorSeverity.MEDIUM
def should_escalate(fault: FaultRecord) -> bool:
    """True when the fault warrants abandoning rich mode for the fallback session."""
    return fault.severity == ErrorSeverity.CRITICAL or (
        fault.category == ErrorCategory.INITIALIZATION and not fault.recoverable
    )
# ============================================================================
# FAULT HANDLER
# ============================================================================
# Message prefix and severity used by the category-specific handle_* methods
_WRAPPED_FAULTS = {
    ErrorCategory.NETWORK: ("Network error", ErrorSeverity.HIGH),
    ErrorCategory.FILE_SYSTEM: ("File system error", ErrorSeverity.MEDIUM),
    ErrorCategory.TOOL_EXECUTION: ("Tool execution failed", ErrorSeverity.MEDIUM),
    ErrorCategory.CONFIGURATION: ("Configuration error", ErrorSeverity.HIGH),
    ErrorCategory.INITIALIZATION: ("Initialization failed", ErrorSeverity.CRITICAL),
    ErrorCategory.INPUT_VALIDATION: ("Invalid input", ErrorSeverity.LOW),
}
class FaultHandler:
    """
    Single entry point for turning failures into classified faults.
    Every handle* coroutine returns whether the fault was recovered and
    never raises. Recovered means a strategy's recover() succeeded within
    max_retries attempts, or its fallback action ran to completion; a
    fallback that merely warns the user still counts as handled.
    Mutating operations are serialized by a reentrant lock so a handler
    can be shared between sessions.
    """
    def __init__(
        self,
        config: Optional[ErrorHandlerConfig] = None,
        degraded_config: Optional[DegradedConfig] = None,
        display: Optional[Display] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        """Initialize the fault handler.
        Args:
            config: Retry and logging settings
            degraded_config: Initial fallback-session toggles
            display: Output surface; defaults to a ConsoleDisplay on stderr
            sleep: Coroutine used for the delay between attempts
        """
        self.config = config or ErrorHandlerConfig()
        self._degraded_config = degraded_config or DegradedConfig()
        self.display: Display = display or ConsoleDisplay()
        self._sleep = sleep
        self._lock = threading.RLock()
        self._error_log: List[FaultRecord] = []
        self._strategies: Dict[ErrorCategory, Optional[RecoveryStrategy]] = {
            category: None for category in ErrorCategory
        }
        self._fallback_announced = False
        self.last_fault: Optional[FaultRecord] = None
        self._setup_default_strategies()
    def _setup_default_strategies(self) -> None:
        self._strategies[ErrorCategory.NETWORK] = NetworkRecoveryStrategy(self._warn)
        self._strategies[ErrorCategory.FILE_SYSTEM] = FileSystemRecoveryStrategy()
        self._strategies[ErrorCategory.CONFIGURATION] = ConfigurationRecoveryStrategy(self._warn)
    def set_display(self, display: Display) -> None:
        """Replace the display surface (e.g. once a rich display is ready)."""
        self.display = display
    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------
    async def handle(self, error: ErrorLike, context: Optional[str] = None) -> bool:
        """
        Handle an error with recovery attempts.
        Args:
            error: Raw exception or an already classified FaultRecord
            context: Locator used for classification of raw exceptions
        Returns:
            True if the fault was recovered or handled by a fallback action
        """
        fault = self.create_fault(error, context=context)
        self.last_fault = fault
        self._log_error(fault)
        recovered = await self._attempt_recovery(fault)
        if not recovered:
            self._safe_display_error(fault)
            if should_escalate(fault):
                self._activate_fallback_mode()
        return recovered
    async def handle_network_error(self, error: BaseException, context: Optional[str] = None) -> bool:
        """Handle network-related errors."""
        return await self.handle(self.create_fault(error, ErrorCategory.NETWORK, context))
    async def handle_file_system_error(self, error: BaseException, context: Optional[str] = None) -> bool:
        """Handle file system errors."""
        return await self.handle(self.create_fault(error, ErrorCategory.FILE_SYSTEM, context))
    async def handle_tool_error(self, error: BaseException, tool_name: Optional[str] = None) -> bool:
        """Handle tool execution errors."""
        return await self.handle(self.create_fault(error, ErrorCategory.TOOL_EXECUTION, tool_name))
    async def handle_configuration_error(self, error: BaseException, context: Optional[str] = None) -> bool:
        """Handle configuration errors."""
        return await self.handle(self.create_fault(error, ErrorCategory.CONFIGURATION, context))
    async def handle_initialization_error(self, error: BaseException, component: Optional[str] = None) -> bool:
        """Handle initialization errors. Always critical and never recoverable."""
        return await self.handle(self.create_fault(error, ErrorCategory.INITIALIZATION, component))
    async def handle_input_error(self, error: BaseException, context: Optional[str] = None) -> bool:
        """Handle input validation errors."""
        return await self.handle(self.create_fault(error, ErrorCategory.INPUT_VALIDATION, context))
    def create_fault(
        self,
        error: ErrorLike,
        category: Optional[ErrorCategory] = None,
        context: Optional[str] = None,
    ) -> FaultRecord:
        """
        Build the fault record that a handle_* call would produce.
        Callers that need to inspect the record after handling (for the
        escalation decision) create it first and pass it to handle().
        Args:
            error: Raw exception or an already classified FaultRecord
            category: Known category; None or UNKNOWN classifies heuristically
            context: Locator; the tool name for TOOL_EXECUTION and the
                component name for INITIALIZATION
        Returns:
            FaultRecord for the error
        """
        if isinstance(error, FaultRecord):
            return error
        wrapped = _WRAPPED_FAULTS.get(category)
        if wrapped is None:
            try:
                return self._ensure_fault(error, context)
            except Exception:
                logger.exception("Failed to classify error")
                return FaultRecord(message=repr(error), context=context, cause=error)
        prefix, severity = wrapped
        if category == ErrorCategory.TOOL_EXECUTION:
            context = f"tool: {context}" if context else "tool execution"
        elif category == ErrorCategory.INITIALIZATION:
            context = f"component: {context}" if context else "initialization"
        return FaultRecord(
            message=f"{prefix}: {describe_error(error)}",
            category=category,
            severity=severity,
            recoverable=category != ErrorCategory.INITIALIZATION,
            context=context,
            cause=error,
        )
    # ------------------------------------------------------------------
    # Strategies and escalation
    # ------------------------------------------------------------------
    def register_strategy(self, category: ErrorCategory, strategy: RecoveryStrategy) -> None:
        """
        Register a recovery strategy, replacing any existing one.
        Args:
            category: Category the strategy handles
            strategy: Object providing can_recover and recover, and optionally
                fallback_action
        Raises:
            TypeError: If category or strategy has the wrong shape
        """
        if not isinstance(category, ErrorCategory):
            raise TypeError(f"category must be an ErrorCategory, got {category!r}")
        for attr in ("can_recover", "recover"):
            if not callable(getattr(strategy, attr, None)):
                raise TypeError(f"strategy is missing callable '{attr}'")
        fallback = getattr(strategy, "fallback_action", None)
        if fallback is not None and not callable(fallback):
            raise TypeError("strategy fallback_action must be callable")
        with self._lock:
            self._strategies[category] = strategy
    def get_strategy(self, category: ErrorCategory) -> Optional[RecoveryStrategy]:
        return self._strategies[category]
    @staticmethod
    def should_escalate(fault: FaultRecord) -> bool:
        """Check if fallback mode should be activated for this fault."""
        return should_escalate(fault)
    # ------------------------------------------------------------------
    # Fault log
    # ------------------------------------------------------------------
    def get_error_stats(self) -> Dict[ErrorCategory, int]:
        """Count logged faults per category; every category is present."""
        with self._lock:
            stats = {category: 0 for category in ErrorCategory}
            for fault in self._error_log:
                stats[fault.category] += 1
            return stats
    def get_recent_errors(self, count: int = 10) -> List[FaultRecord]:
        """Most recent faults, oldest first."""
        if count <= 0:
            return []
        with self._lock:
            return list(self._error_log[-count:])
    def get_error_log(self) -> List[FaultRecord]:
        with self._lock:
            return list(self._error_log)
    def clear_error_log(self) -> None:
        with self._lock:
            self._error_log.clear()
    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------
    def get_config(self) -> ErrorHandlerConfig:
        return replace(self.config)
    def get_degraded_config(self) -> DegradedConfig:
        """Copy of the current fallback-session configuration."""
        with self._lock:
            return DegradedConfig(**self._degraded_config.to_dict())
    def update_degraded_config(
        self,
        updates: Optional[Mapping[str, Any]] = None,
        **changes: Any,
    ) -> None:
        """
        Merge changes into the fallback-session configuration.
        Args:
            updates: Mapping of field name to value
            **changes: Same, as keyword arguments
        Raises:
            ValueError: If an unknown field is given
            TypeError: If a value is not a bool
        """
        merged = dict(updates or {})
        merged.update(changes)
        with self._lock:
            self._degraded_config = self._degraded_config.merge(merged)
    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _ensure_fault(self, error: ErrorLike, context: Optional[str]) -> FaultRecord:
        if isinstance(error, FaultRecord):
            return error
        category = categorize_error(error, context)
        return FaultRecord.from_error(error, category, default_severity(category), context)
    async def _attempt_recovery(self, fault: FaultRecord) -> bool:
        if not fault.recoverable:
            return False
        strategy = self._strategies.get(fault.category)
        if strategy is None:
            return False
        try:
            if not strategy.can_recover(fault):
                return False
        except Exception:
            logger.exception("can_recover failed for %s fault", fault.category.value)
            return False
        max_retries = self.config.max_retries
        for attempt in range(1, max_retries + 1):
            try:
                if await _maybe_await(strategy.recover(fault)):
                    logger.debug("Recovered %s fault on attempt %d", fault.category.value, attempt)
                    return True
            except Exception as e:
                logger.debug("Recovery attempt %d raised: %s", attempt, e)
            if attempt < max_retries:
                try:
                    await self._sleep(self.config.delay_for(attempt))
                except Exception:
                    logger.exception("Retry delay failed")
        return await self._run_fallback(strategy, fault)
    async def _run_fallback(self, strategy: RecoveryStrategy, fault: FaultRecord) -> bool:
        get_action = getattr(strategy, "fallback_action", None)
        if get_action is None:
            return False
        try:
            action = get_action(fault)
            if action is None:
                return False
            await _maybe_await(action())
            return True
        except Exception as e:
            logger.warning("Fallback action for %s fault failed: %s", fault.category.value, e)
            return False
    def _log_error(self, fault: FaultRecord) -> None:
        with self._lock:
            self._error_log.append(fault)
        if not self.config.log_errors:
            return
        try:
            detail = fault.detailed_info() if self.config.show_stack_trace else fault.display_message()
            logger.error(
                "[%s] %s: %s",
                fault.timestamp.isoformat(), fault.category.value.upper(), detail,
            )
        except Exception:
            logger.debug("Could not format fault for logging", exc_info=True)
    def _safe_display_error(self, fault: FaultRecord) -> None:
        try:
            self.display.display_error(fault, fault.context)
        except Exception:
            logger.exception("Display surface failed to show fault")
    def _warn(self, text: str) -> None:
        try:
            self.display.display_warning(text)
        except Exception:
            logger.exception("Display surface failed to show warning")
    def _activate_fallback_mode(self) -> None:
        with self._lock:
            self._degraded_config = DegradedConfig.fully_degraded()
            announce = not self._fallback_announced
            self._fallback_announced = True
        if announce:
            self._warn(FALLBACK_MODE_WARNING)
async def _maybe_await(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value

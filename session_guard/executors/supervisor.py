"""
Session Supervisor - Mode switch between rich mode and fallback mode.
Call sites report failures through report(); when a fault is unrecovered
and warrants escalation the supervisor stops the rich-mode loop and hands
control, once, to a FallbackSession seeded from the handler's current
degraded configuration.
"""
from typing import Any, Awaitable, Callable, Iterable, Optional, TextIO, Union
import logging
import sys
from ..core.agent_client import InferenceClient
from ..core.types import ErrorCategory, FaultRecord
from ..lib.error_handling import FaultHandler
from ..resources.tools import Tool, ToolRegistry
from .fallback import FallbackSession
logger = logging.getLogger(__name__)
SWITCH_NOTICE = "Switching to fallback mode. Type \"help\" for available commands."
ClientFactory = Callable[[], InferenceClient]
ToolsFactory = Callable[[], Union[ToolRegistry, Iterable[Tool]]]
PrimaryLoop = Callable[["SessionSupervisor"], Awaitable[Any]]
class SessionSupervisor:
    """
    Owns the decision to degrade a session.
    Rich-mode code receives the supervisor, reports each failure through
    report(), and returns from its loop once degradation_requested is set.
    """
    def __init__(
        self,
        handler: FaultHandler,
        client_factory: ClientFactory,
        tools_factory: Optional[ToolsFactory] = None,
        output_stream: Optional[TextIO] = None,
        input_stream: Optional[TextIO] = None,
        max_tool_rounds: int = 10,
    ):
        self.handler = handler
        self.client_factory = client_factory
        self.tools_factory = tools_factory
        self._output = output_stream
        self._input = input_stream
        self.max_tool_rounds = max_tool_rounds
        self._escalating_fault: Optional[FaultRecord] = None
        self._degradation_requested = False
        self._degraded = False
        self.fallback_session: Optional[FallbackSession] = None
    @property
    def output(self) -> TextIO:
        return self._output if self._output is not None else sys.stdout
    @property
    def degradation_requested(self) -> bool:
        return self._degradation_requested
    @property
    def degraded(self) -> bool:
        """True once the fallback session has been started."""
        return self._degraded
    @property
    def escalating_fault(self) -> Optional[FaultRecord]:
        return self._escalating_fault
    async def report(
        self,
        error: Union[BaseException, FaultRecord],
        category: Optional[ErrorCategory] = None,
        context: Optional[str] = None,
    ) -> bool:
        """
        Report a failure from a call site.
        Args:
            error: Raw exception or classified FaultRecord
            category: Known category; builds the same record as the
                matching handle_* method
            context: Locator for the failing operation (tool name for
                TOOL_EXECUTION, component name for INITIALIZATION)
        Returns:
            Whether the fault was recovered
        """
        # Escalation is judged on this call's own record, never handler.last_fault
        fault = self.handler.create_fault(error, category, context)
        recovered = await self.handler.handle(fault)
        if not recovered and self.handler.should_escalate(fault):
            self.request_degradation(fault)
        return recovered
    def request_degradation(self, fault: Optional[FaultRecord] = None) -> None:
        if not self._degradation_requested:
            logger.warning("Degradation requested: %s", fault.display_message() if fault else "manual")
        self._degradation_requested = True
        if fault is not None and self._escalating_fault is None:
            self._escalating_fault = fault
    async def run(self, primary: Optional[PrimaryLoop] = None) -> int:
        """
        Drive the session.
        Args:
            primary: Rich-mode loop; None starts directly in fallback mode
        Returns:
            Process exit status
        """
        if primary is not None:
            try:
                await primary(self)
            except Exception as e:
                await self.report(e, ErrorCategory.INITIALIZATION, "interactive session")
            if not self._degradation_requested:
                return 0
        return await self.run_fallback()
    async def run_fallback(self) -> int:
        """Hand control to the fallback session. Happens at most once."""
        if self._degraded:
            logger.debug("Fallback session already started; ignoring")
            return 0
        self._degraded = True
        if self._degradation_requested:
            print(SWITCH_NOTICE, file=self.output, flush=True)
        try:
            client = self.client_factory()
        except Exception as e:
            await self.handler.handle_configuration_error(e, "inference client")
            return 1
        tools: Union[ToolRegistry, Iterable[Tool]] = []
        if self.tools_factory is not None:
            try:
                tools = self.tools_factory()
            except Exception as e:
                # Continue without tools rather than give up the session
                await self.handler.handle_initialization_error(e, "tools")
                tools = []
        self.fallback_session = FallbackSession(
            client,
            tools,
            config=self.handler.get_degraded_config(),
            input_stream=self._input,
            output_stream=self._output,
            max_tool_rounds=self.max_tool_rounds,
        )
        await self.fallback_session.start()
        return 0

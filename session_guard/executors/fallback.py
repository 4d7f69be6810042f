"""
Fallback Session - Minimal interactive loop for degraded mode.
Used once the rich-mode session has hit an unrecoverable critical fault.
Depends only on the standard library, the inference client seam and the
tool registry: plain-text prompts, optional ANSI colors, three built-in
commands, and sequential tool dispatch. A failing turn prints an inline
error and the loop carries on.
"""
from dataclasses import replace
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, TextIO, Union
import asyncio
import logging
import signal
import sys
import threading
from ..core.agent_client import (
    InferenceClient,
    extract_text_from_message,
    extract_tool_uses_from_message,
)
from ..core.config import DegradedConfig
from ..core.types import MessageType, describe_error
from ..lib import InferenceError, ToolNotFoundError, to_tool_content, truncate_text
from ..resources.tools import Tool, ToolRegistry
logger = logging.getLogger(__name__)
RESET = "\033[0m"
MESSAGE_COLORS = {
    MessageType.USER: "\033[36m", # Cyan
    MessageType.ASSISTANT: "\033[32m", # Green
    MessageType.SYSTEM: "\033[90m", # Gray
    MessageType.ERROR: "\033[31m", # Red
    MessageType.SUCCESS: "\033[32m", # Green
    MessageType.WARNING: "\033[33m", # Yellow
    MessageType.TOOL: "\033[35m", # Magenta
}
HELP_TEXT = """
Available commands in fallback mode:
  help  - Show this help message
  clear - Clear the screen
  exit  - Exit the application
Note: Advanced features like history, auto-completion, and themes are disabled in fallback mode.
"""
class RunnerState(Enum):
    """Fallback session lifecycle."""
    STOPPED = "stopped"
    RUNNING = "running"
class LineReader:
    """
    Blocking line source for the fallback session.
    Closing the reader only marks it closed; the underlying stream (usually
    sys.stdin) is left open for whatever runs after the session.
    """
    def __init__(self, stream: TextIO, output: TextIO, use_builtin_input: bool = False):
        self.stream = stream
        self.output = output
        self.use_builtin_input = use_builtin_input
        self.closed = False
    def read_line(self, prompt: str) -> str:
        if self.closed:
            raise EOFError("reader closed")
        if self.use_builtin_input:
            # input() picks up GNU readline line editing when available
            return input(prompt)
        self.output.write(prompt)
        self.output.flush()
        line = self.stream.readline()
        if not line:
            raise EOFError("end of input")
        return line.rstrip("\r\n")
    def close(self) -> None:
        self.closed = True
class FallbackSession:
    """
    Degraded-mode interactive session.
    State machine: STOPPED -> start() -> RUNNING -> (exit | end of input |
    SIGINT/SIGTERM) -> shutdown() -> STOPPED.
    The DegradedConfig is copied at construction; later updates to the
    fault handler's config do not affect a running session.
    """
    def __init__(
        self,
        client: InferenceClient,
        tools: Union[ToolRegistry, Iterable[Tool], None] = None,
        config: Optional[DegradedConfig] = None,
        input_stream: Optional[TextIO] = None,
        output_stream: Optional[TextIO] = None,
        max_tool_rounds: int = 10,
    ):
        """
        Initialize the fallback session.
        Args:
            client: Inference client used for every turn
            tools: Registry or iterable of tools offered to the model
            config: Degraded-session toggles (copied)
            input_stream: Line source; defaults to sys.stdin
            output_stream: Output sink; defaults to sys.stdout
            max_tool_rounds: Tool-use round trips allowed per user turn
        """
        if max_tool_rounds < 1:
            raise ValueError("max_tool_rounds must be positive")
        self.client = client
        if isinstance(tools, ToolRegistry):
            self.tools = tools
        else:
            self.tools = ToolRegistry(list(tools or []))
        self.config = replace(config) if config else DegradedConfig()
        self.max_tool_rounds = max_tool_rounds
        self.conversation: List[Dict[str, Any]] = []
        self._input = input_stream
        self._output = output_stream
        self._state = RunnerState.STOPPED
        self._closed = False
        self._stop_event: Optional[asyncio.Event] = None
        self._installed_signals: List[int] = []
        self._reader = self._create_reader()
    @property
    def output(self) -> TextIO:
        return self._output if self._output is not None else sys.stdout
    @property
    def prompt(self) -> str:
        if self.config.disable_colors:
            return "You: "
        return f"{MESSAGE_COLORS[MessageType.USER]}You: {RESET}"
    @property
    def state(self) -> RunnerState:
        return self._state
    def _create_reader(self) -> LineReader:
        stream = self._input if self._input is not None else sys.stdin
        interactive = (
            stream is sys.stdin
            and self._output is None
            and not self.config.use_basic_input
            and stream.isatty()
        )
        return LineReader(stream, self.output, use_builtin_input=interactive)
    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    async def start(self) -> None:
        """Run the session until exit, end of input, or a termination signal."""
        if self._state == RunnerState.RUNNING:
            raise RuntimeError("Fallback session is already running")
        if self._reader.closed:
            self._reader = self._create_reader()
        self._state = RunnerState.RUNNING
        self._closed = False
        self._stop_event = asyncio.Event()
        self.display_message(
            "Running in fallback mode - advanced features are disabled",
            MessageType.WARNING,
        )
        self.display_message(
            'Type "exit" to quit, "help" for basic commands',
            MessageType.SYSTEM,
        )
        self._install_signal_handlers()
        try:
            await self._interaction_loop()
        finally:
            self._remove_signal_handlers()
            self.shutdown()
    def shutdown(self) -> None:
        """Stop the session. Safe to call more than once."""
        self._state = RunnerState.STOPPED
        if self._stop_event is not None:
            self._stop_event.set()
        if self._closed:
            return
        self._closed = True
        self._reader.close()
        self.display_message("Fallback CLI session ended.", MessageType.SYSTEM)
    def is_active(self) -> bool:
        return self._state == RunnerState.RUNNING
    async def get_input(self, prompt: str) -> str:
        """
        Read one line of input without blocking the event loop.
        The read runs on a daemon thread so an interrupted session can exit
        while the thread is still waiting on the terminal.
        Raises:
            EOFError: At end of input or once the session has shut down
        """
        loop = asyncio.get_running_loop()
        future = loop.create_future()
        def _deliver(result: Optional[str], error: Optional[BaseException]) -> None:
            if future.done():
                return
            if error is not None:
                future.set_exception(error)
            else:
                future.set_result(result)
        def _worker() -> None:
            try:
                line = self._reader.read_line(prompt)
            except BaseException as e:
                outcome = (None, e)
            else:
                outcome = (line, None)
            try:
                loop.call_soon_threadsafe(_deliver, *outcome)
            except RuntimeError:
                # Event loop already closed
                pass
        threading.Thread(target=_worker, name="fallback-input", daemon=True).start()
        return await future
    # ------------------------------------------------------------------
    # Interaction loop
    # ------------------------------------------------------------------
    async def _interaction_loop(self) -> None:
        while self.is_active():
            line = await self._next_line()
            if line is None:
                break
            command = line.strip()
            lowered = command.lower()
            if lowered == "exit":
                break
            if lowered == "help":
                self.display_help()
                continue
            if lowered == "clear":
                self._clear_screen()
                continue
            if not command:
                continue
            try:
                await self.process_user_input(command)
            except Exception as e:
                logger.exception("Unhandled error while processing input")
                self.display_error(e)
    async def _next_line(self) -> Optional[str]:
        """Next input line, or None once input ends or the session is stopped."""
        read_task = asyncio.ensure_future(self.get_input(self.prompt))
        stop_task = asyncio.ensure_future(self._stop_event.wait())
        done, pending = await asyncio.wait(
            {read_task, stop_task}, return_when=asyncio.FIRST_COMPLETED
        )
        for task in pending:
            task.cancel()
        if read_task not in done:
            return None
        try:
            return read_task.result()
        except EOFError:
            return None
        except (OSError, ValueError) as e:
            logger.warning("Input stream failed: %s", e)
            return None
    async def process_user_input(self, text: str) -> None:
        """
        Run one conversation turn for the given user text.
        On failure the conversation is rolled back to its state before the
        turn and an inline error is shown.
        """
        checkpoint = len(self.conversation)
        self.conversation.append({"role": "user", "content": text})
        if not self.config.disable_progress:
            self.display_message("Claude is thinking...", MessageType.SYSTEM)
        try:
            await self._run_turn()
        except Exception as e:
            del self.conversation[checkpoint:]
            logger.warning("Turn failed: %s", e)
            self.display_error(e)
    async def _run_turn(self) -> None:
        tool_specs = self.tools.to_api_format()
        for _ in range(self.max_tool_rounds):
            reply = await self.client.send(self.conversation, tool_specs)
            content = getattr(reply, "content", None)
            if content is None:
                raise InferenceError("Inference client returned a reply without content")
            self.conversation.append({"role": "assistant", "content": content})
            text = extract_text_from_message(reply)
            if text:
                self.display_message(f"Claude: {text}", MessageType.ASSISTANT)
            tool_uses = extract_tool_uses_from_message(reply)
            if not tool_uses:
                return
            results = []
            # Sequential, in the order the model requested them
            for tool_use in tool_uses:
                results.append(await self._execute_tool_call(tool_use))
            self.conversation.append({"role": "user", "content": results})
        self.display_message(
            f"Stopped after {self.max_tool_rounds} tool rounds without a final answer.",
            MessageType.WARNING,
        )
    async def _execute_tool_call(self, tool_use: Dict[str, Any]) -> Dict[str, Any]:
        name = tool_use["name"]
        tool = self.tools.find(name)
        if tool is None:
            error = ToolNotFoundError(f"Tool {name} not found.")
            self.display_error(error)
            return _tool_result(tool_use["id"], f"Error: {error}", is_error=True)
        self.display_message(f"Using tool: {name}", MessageType.TOOL)
        try:
            result = await tool.invoke(tool_use["input"])
        except Exception as e:
            logger.info("Tool %s failed: %s", name, e)
            self.display_error(f"Tool execution failed: {describe_error(e)}")
            return _tool_result(tool_use["id"], f"Error: {describe_error(e)}", is_error=True)
        content = to_tool_content(result)
        logger.debug("Tool %s returned: %s", name, truncate_text(content, 200))
        return _tool_result(tool_use["id"], content)
    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------
    def display_message(self, message: str, message_type: MessageType = MessageType.SYSTEM) -> None:
        if self.config.disable_colors:
            line = message
        else:
            line = f"{MESSAGE_COLORS.get(message_type, RESET)}{message}{RESET}"
        print(line, file=self.output, flush=True)
    def display_error(self, error: Union[BaseException, str]) -> None:
        text = error if isinstance(error, str) else describe_error(error)
        self.display_message(f"Error: {text}", MessageType.ERROR)
    def display_help(self) -> None:
        self.display_message(HELP_TEXT, MessageType.SYSTEM)
    def _clear_screen(self) -> None:
        isatty = getattr(self.output, "isatty", None)
        if isatty is not None and isatty():
            self.output.write("\033[2J\033[H")
            self.output.flush()
    # ------------------------------------------------------------------
    # Signals
    # ------------------------------------------------------------------
    def _install_signal_handlers(self) -> None:
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.add_signal_handler(sig, self._handle_signal, sig)
            except (NotImplementedError, RuntimeError, ValueError):
                # Windows event loops, or not running in the main thread
                logger.debug("Cannot install handler for %s", sig)
                continue
            self._installed_signals.append(sig)
    def _remove_signal_handlers(self) -> None:
        if not self._installed_signals:
            return
        loop = asyncio.get_running_loop()
        for sig in self._installed_signals:
            loop.remove_signal_handler(sig)
        self._installed_signals.clear()
    def _handle_signal(self, sig: int) -> None:
        logger.info("Received signal %s", sig)
        self.display_message("\nShutting down...", MessageType.SYSTEM)
        self.shutdown()
def _tool_result(tool_use_id: str, content: str, is_error: bool = False) -> Dict[str, Any]:
    block: Dict[str, Any] = {
        "type": "tool_result",
        "tool_use_id": tool_use_id,
        "content": content,
    }
    if is_error:
        block["is_error"] = True
    return block

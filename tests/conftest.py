"""Shared fakes for the session-guard test suite."""
import io
from types import SimpleNamespace
from typing import Any, Dict, List, Optional
import pytest
from session_guard.core.agent_client import InferenceClient
from session_guard.core.config import ErrorHandlerConfig
from session_guard.lib.display import Display
from session_guard.lib.error_handling import FaultHandler
def text_reply(text: str) -> SimpleNamespace:
    """Assistant reply holding a single text block."""
    return SimpleNamespace(content=[{"type": "text", "text": text}])
def tool_reply(*calls, text: str = "") -> SimpleNamespace:
    """Assistant reply requesting tools; calls are (id, name, input) tuples."""
    content: List[Dict[str, Any]] = []
    if text:
        content.append({"type": "text", "text": text})
    for tool_id, name, tool_input in calls:
        content.append({"type": "tool_use", "id": tool_id, "name": name, "input": tool_input})
    return SimpleNamespace(content=content)
class ScriptedClient(InferenceClient):
    """Returns queued replies in order; queued exceptions are raised instead."""
    def __init__(self, replies: Optional[List[Any]] = None):
        self.replies = list(replies or [])
        self.calls: List[Dict[str, Any]] = []
    async def send(self, conversation, tools):
        self.calls.append({
            "conversation": [dict(message) for message in conversation],
            "tools": list(tools),
        })
        if not self.replies:
            return text_reply("")
        reply = self.replies.pop(0)
        if isinstance(reply, BaseException):
            raise reply
        return reply
class RecordingDisplay(Display):
    """Display surface that keeps everything it is asked to show."""
    def __init__(self):
        self.errors: List[tuple] = []
        self.warnings: List[str] = []
    def display_error(self, fault, context=None):
        self.errors.append((fault, context))
    def display_warning(self, text):
        self.warnings.append(text)
class SleepRecorder:
    """Stand-in for asyncio.sleep that records delays without waiting."""
    def __init__(self):
        self.delays: List[float] = []
    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)
@pytest.fixture
def display():
    return RecordingDisplay()
@pytest.fixture
def sleeper():
    return SleepRecorder()
@pytest.fixture
def handler(display, sleeper):
    """Fault handler with two retries, no real delay and a recording display."""
    return FaultHandler(
        config=ErrorHandlerConfig(max_retries=2, retry_delay=0.1),
        display=display,
        sleep=sleeper,
    )
@pytest.fixture
def output():
    return io.StringIO()

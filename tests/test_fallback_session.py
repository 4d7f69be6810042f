"""Test suite for the degraded-mode FallbackSession.
Tests cover:
- Lifecycle (start, end of input, exit, shutdown)
- Built-in commands
- Conversation turns and rollback on failure
- Sequential tool dispatch
- Output toggles from DegradedConfig
"""
import asyncio
import io
import os
import signal
import sys
import pytest
from conftest import ScriptedClient, text_reply, tool_reply
from session_guard.core.config import DegradedConfig
from session_guard.core.types import MessageType
from session_guard.executors.fallback import (
    HELP_TEXT,
    MESSAGE_COLORS,
    FallbackSession,
    LineReader,
    RunnerState,
)
from session_guard.resources.tools import default_registry
PLAIN = DegradedConfig(disable_colors=True)
def run_session(lines, client=None, output=None, config=PLAIN, **kwargs):
    session = FallbackSession(
        client or ScriptedClient(),
        config=config,
        input_stream=io.StringIO(lines),
        output_stream=output if output is not None else io.StringIO(),
        **kwargs,
    )
    asyncio.run(session.start())
    return session
class TestLifecycle:
    """Test session start and shutdown."""
    def test_end_of_input_stops_session(self, output):
        """Closing input ends the session and is_active turns false."""
        session = run_session("", output=output)
        assert session.is_active() is False
        assert session.state == RunnerState.STOPPED
        text = output.getvalue()
        assert "Running in fallback mode - advanced features are disabled" in text
        assert 'Type "exit" to quit, "help" for basic commands' in text
        assert text.count("Fallback CLI session ended.") == 1
    def test_exit_command(self, output):
        client = ScriptedClient()
        session = run_session("exit\nhello\n", client=client, output=output)
        assert client.calls == []
        assert session.is_active() is False
    def test_exit_is_case_insensitive(self):
        client = ScriptedClient()
        run_session("  EXIT  \nhello\n", client=client)
        assert client.calls == []
    def test_shutdown_is_idempotent(self, output):
        session = FallbackSession(ScriptedClient(), config=PLAIN, output_stream=output)
        session.shutdown()
        session.shutdown()
        assert output.getvalue().count("Fallback CLI session ended.") == 1
        assert session.is_active() is False
    def test_shutdown_during_turn_stops_loop(self, output):
        session = None
        class StoppingClient(ScriptedClient):
            async def send(self, conversation, tools):
                session.shutdown()
                return await super().send(conversation, tools)
        client = StoppingClient([text_reply("bye")])
        session = FallbackSession(
            client,
            config=PLAIN,
            input_stream=io.StringIO("first\nsecond\n"),
            output_stream=output,
        )
        asyncio.run(session.start())
        assert len(client.calls) == 1
        assert output.getvalue().count("Fallback CLI session ended.") == 1
    def test_shutdown_interrupts_blocked_read(self, output):
        """A pending read does not keep a stopped session alive."""
        read_fd, write_fd = os.pipe()
        stream = os.fdopen(read_fd, "r")
        session = FallbackSession(
            ScriptedClient(), config=PLAIN, input_stream=stream, output_stream=output,
        )
        async def main():
            asyncio.get_running_loop().call_later(0.05, session.shutdown)
            await asyncio.wait_for(session.start(), timeout=5)
        try:
            asyncio.run(main())
        finally:
            os.close(write_fd)
        assert session.is_active() is False
    @pytest.mark.skipif(sys.platform == "win32", reason="loop signal handlers need a Unix event loop")
    @pytest.mark.parametrize("sig", [signal.SIGTERM, signal.SIGINT])
    def test_signal_interrupts_blocked_read(self, output, sig):
        """A termination signal during a pending read stops the session."""
        read_fd, write_fd = os.pipe()
        stream = os.fdopen(read_fd, "r")
        session = FallbackSession(
            ScriptedClient(), config=PLAIN, input_stream=stream, output_stream=output,
        )
        def fire():
            if sig in session._installed_signals:
                os.kill(os.getpid(), sig)
            else:
                # Loop refused the handler (not the main thread)
                session._handle_signal(sig)
        async def main():
            asyncio.get_running_loop().call_later(0.05, fire)
            await asyncio.wait_for(session.start(), timeout=5)
        try:
            asyncio.run(main())
        finally:
            os.close(write_fd)
        assert session.is_active() is False
        assert "Shutting down..." in output.getvalue()
        assert session._installed_signals == []
    def test_invalid_max_tool_rounds(self):
        with pytest.raises(ValueError):
            FallbackSession(ScriptedClient(), max_tool_rounds=0)
    def test_config_is_copied(self):
        config = DegradedConfig()
        session = FallbackSession(ScriptedClient(), config=config)
        config.disable_colors = True
        assert session.config.disable_colors is False
class TestCommands:
    """Test built-in commands."""
    def test_help(self, output):
        client = ScriptedClient()
        run_session("help\n", client=client, output=output)
        assert "Available commands in fallback mode:" in output.getvalue()
        assert HELP_TEXT in output.getvalue()
        assert client.calls == []
    def test_clear_on_non_tty_writes_nothing(self, output):
        client = ScriptedClient()
        run_session("clear\n", client=client, output=output)
        assert "\033[2J" not in output.getvalue()
        assert client.calls == []
    def test_blank_lines_ignored(self):
        client = ScriptedClient()
        run_session("\n   \n", client=client)
        assert client.calls == []
class TestConversation:
    """Test turns against the inference client."""
    def test_single_turn(self, output):
        client = ScriptedClient([text_reply("Hi there")])
        session = run_session("hello\n", client=client, output=output)
        text = output.getvalue()
        assert "Claude is thinking..." in text
        assert "Claude: Hi there" in text
        assert session.conversation == [
            {"role": "user", "content": "hello"},
            {"role": "assistant", "content": [{"type": "text", "text": "Hi there"}]},
        ]
        assert client.calls[0]["conversation"] == [{"role": "user", "content": "hello"}]
    def test_conversation_accumulates(self):
        client = ScriptedClient([text_reply("one"), text_reply("two")])
        session = run_session("first\nsecond\n", client=client)
        assert len(client.calls) == 2
        assert len(client.calls[1]["conversation"]) == 3
        assert len(session.conversation) == 4
    def test_inference_failure_rolls_back(self, output):
        """A failed turn shows an inline error and the loop continues."""
        client = ScriptedClient([RuntimeError("API down"), text_reply("recovered")])
        session = run_session("first\nsecond\n", client=client, output=output)
        text = output.getvalue()
        assert "Error: API down" in text
        assert "Claude: recovered" in text
        assert session.conversation[0] == {"role": "user", "content": "second"}
        assert len(session.conversation) == 2
    def test_reply_without_content(self, output):
        client = ScriptedClient([object()])
        session = run_session("hello\n", client=client, output=output)
        assert "Error: Inference client returned a reply without content" in output.getvalue()
        assert session.conversation == []
    def test_tools_offered(self):
        client = ScriptedClient([text_reply("ok")])
        run_session("hi\n", client=client, tools=default_registry())
        assert [t["name"] for t in client.calls[0]["tools"]] == ["read_file", "list_files", "edit_file"]
    def test_no_tools(self):
        client = ScriptedClient([text_reply("ok")])
        run_session("hi\n", client=client)
        assert client.calls[0]["tools"] == []
class TestToolDispatch:
    """Test tool calls requested by the model."""
    def test_tools_run_in_order(self, tmp_path, output):
        notes = tmp_path / "notes.txt"
        notes.write_text("remember", encoding="utf-8")
        client = ScriptedClient([
            tool_reply(
                ("t1", "list_files", {"path": str(tmp_path)}),
                ("t2", "read_file", {"path": str(notes)}),
                text="Let me look.",
            ),
            text_reply("done"),
        ])
        session = run_session("look\n", client=client, output=output, tools=default_registry())
        text = output.getvalue()
        assert text.index("Claude: Let me look.") < text.index("Using tool: list_files")
        assert text.index("Using tool: list_files") < text.index("Using tool: read_file")
        assert text.index("Using tool: read_file") < text.index("Claude: done")
        results = client.calls[1]["conversation"][-1]
        assert results["role"] == "user"
        assert results["content"] == [
            {"type": "tool_result", "tool_use_id": "t1", "content": "notes.txt"},
            {"type": "tool_result", "tool_use_id": "t2", "content": "remember"},
        ]
        assert len(session.conversation) == 4
    def test_unknown_tool(self, output):
        client = ScriptedClient([tool_reply(("t1", "nope", {})), text_reply("ok")])
        run_session("go\n", client=client, output=output, tools=default_registry())
        assert "Error: Tool nope not found." in output.getvalue()
        result = client.calls[1]["conversation"][-1]["content"][0]
        assert result["is_error"] is True
        assert result["tool_use_id"] == "t1"
    def test_tool_failure_is_reported_to_model(self, tmp_path, output):
        missing = tmp_path / "missing.txt"
        client = ScriptedClient([tool_reply(("t1", "read_file", {"path": str(missing)})), text_reply("ok")])
        run_session("go\n", client=client, output=output, tools=default_registry())
        assert "Error: Tool execution failed:" in output.getvalue()
        result = client.calls[1]["conversation"][-1]["content"][0]
        assert result["is_error"] is True
        assert result["content"].startswith("Error:")
    def test_tool_rounds_are_bounded(self, tmp_path, output):
        call = ("t1", "list_files", {"path": str(tmp_path)})
        client = ScriptedClient([tool_reply(call), tool_reply(call), tool_reply(call)])
        run_session("loop\n", client=client, output=output, tools=default_registry(), max_tool_rounds=2)
        assert len(client.calls) == 2
        assert "Stopped after 2 tool rounds" in output.getvalue()
class TestOutput:
    """Test output toggles."""
    def test_colors_by_default(self, output):
        run_session("", output=output, config=DegradedConfig())
        assert MESSAGE_COLORS[MessageType.WARNING] in output.getvalue()
    def test_disable_colors(self, output):
        run_session("", output=output, config=DegradedConfig(disable_colors=True))
        assert "\033[" not in output.getvalue()
    def test_disable_progress(self, output):
        client = ScriptedClient([text_reply("hi")])
        run_session("hello\n", client=client, output=output, config=DegradedConfig(
            disable_colors=True, disable_progress=True,
        ))
        assert "Claude is thinking..." not in output.getvalue()
        assert "Claude: hi" in output.getvalue()
class TestInput:
    """Test line reading."""
    def test_get_input(self, output):
        session = FallbackSession(
            ScriptedClient(), config=PLAIN,
            input_stream=io.StringIO("typed line\r\n"), output_stream=output,
        )
        assert asyncio.run(session.get_input("> ")) == "typed line"
        assert output.getvalue() == "> "
    def test_get_input_end_of_input(self, output):
        session = FallbackSession(
            ScriptedClient(), config=PLAIN, input_stream=io.StringIO(""), output_stream=output,
        )
        with pytest.raises(EOFError):
            asyncio.run(session.get_input("> "))
    def test_closed_reader(self, output):
        reader = LineReader(io.StringIO("line\n"), output)
        reader.close()
        with pytest.raises(EOFError):
            reader.read_line("> ")

"""Tests for command-line parsing and the CLI entry point."""
from unittest.mock import AsyncMock, Mock, patch
import pytest
from session_guard import __version__
from session_guard.cli.arguments import build_config_from_args, parse_arguments
from session_guard.cli.main import build_client_factory, build_supervisor, main
from session_guard.core.agent_client import AnthropicInferenceClient
from session_guard.core.config import Config, DegradedConfig, get_config, reset_config, resolve_model
from session_guard.lib import ConfigurationError
from session_guard.lib.display import ConsoleDisplay
@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "SESSION_GUARD_MAX_RETRIES",
        "SESSION_GUARD_RETRY_DELAY",
        "SESSION_GUARD_LOG_ERRORS",
        "SESSION_GUARD_MODEL",
        "NO_COLOR",
    ):
        monkeypatch.delenv(name, raising=False)
    reset_config()
    yield
    reset_config()
class TestArguments:
    """Test argument parsing and config overrides."""
    def test_defaults(self):
        args = parse_arguments([])
        assert args.log_level == "WARNING"
        assert args.model is None
        assert args.no_color is False
        assert build_config_from_args(args, Config()) == Config()
    def test_overrides(self):
        args = parse_arguments([
            "--model", "haiku",
            "--max-tokens", "512",
            "--max-tool-rounds", "4",
            "--max-retries", "5",
            "--retry-delay", "0.5",
            "--show-stack-trace",
            "--no-color",
            "--basic-input",
        ])
        config = build_config_from_args(args, Config())
        assert config.session.model_id == resolve_model("haiku")
        assert config.session.max_tokens == 512
        assert config.session.max_tool_rounds == 4
        assert config.errors.max_retries == 5
        assert config.errors.retry_delay == 0.5
        assert config.errors.show_stack_trace is True
        assert config.degraded == DegradedConfig(disable_colors=True, use_basic_input=True)
    def test_base_not_mutated(self):
        base = Config()
        build_config_from_args(parse_arguments(["--model", "opus", "--no-progress"]), base)
        assert base.session.model == "sonnet"
        assert base.degraded.disable_progress is False
    def test_out_of_range(self):
        with pytest.raises(ValueError):
            build_config_from_args(parse_arguments(["--max-tokens", "0"]), Config())
        with pytest.raises(ValueError):
            build_config_from_args(parse_arguments(["--max-retries", "0"]), Config())
    def test_env_is_base(self, monkeypatch):
        monkeypatch.setenv("NO_COLOR", "1")
        config = build_config_from_args(parse_arguments([]))
        assert config.degraded.disable_colors is True
    def test_global_config_is_base(self):
        """Overrides start from the global config and leave it untouched."""
        get_config().session.max_tokens = 2048
        config = build_config_from_args(parse_arguments(["--no-progress"]))
        assert config.session.max_tokens == 2048
        assert config.degraded.disable_progress is True
        assert get_config().degraded.disable_progress is False
class TestMain:
    """Test the main() entry point."""
    def test_version(self, capsys):
        assert main(["--version"]) == 0
        assert __version__ in capsys.readouterr().out
    def test_bad_flag(self, capsys):
        assert main(["--bogus"]) == 2
    @patch("session_guard.cli.main.setup_logging")
    def test_invalid_config(self, mock_logging, capsys):
        assert main(["--max-tokens", "0"]) == 2
        assert "--max-tokens must be positive" in capsys.readouterr().err
    @patch("session_guard.cli.main.setup_logging")
    @patch("session_guard.cli.main.build_supervisor")
    def test_runs_supervisor(self, mock_build, mock_logging):
        supervisor = Mock(run=AsyncMock(return_value=0))
        mock_build.return_value = supervisor
        assert main(["--log-level", "DEBUG", "--no-color"]) == 0
        mock_logging.assert_called_once_with(level="DEBUG", log_file=None)
        config = mock_build.call_args[0][0]
        assert config.degraded.disable_colors is True
        supervisor.run.assert_awaited_once()
    @patch("session_guard.cli.main.setup_logging")
    @patch("session_guard.cli.main.build_supervisor")
    def test_exit_status_propagates(self, mock_build, mock_logging):
        mock_build.return_value = Mock(run=AsyncMock(return_value=1))
        assert main([]) == 1
class TestWiring:
    """Test construction of the runtime objects."""
    def test_client_factory_requires_api_key(self, monkeypatch):
        monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
        factory = build_client_factory(Config())
        with pytest.raises(ConfigurationError):
            factory()
    def test_client_factory(self, monkeypatch):
        monkeypatch.setenv("ANTHROPIC_API_KEY", "test-key")
        config = Config()
        config.session.model = "haiku"
        client = build_client_factory(config)()
        assert isinstance(client, AnthropicInferenceClient)
        assert client.model == resolve_model("haiku")
    def test_build_supervisor(self):
        config = build_config_from_args(parse_arguments(["--max-retries", "2", "--max-tool-rounds", "7"]), Config())
        supervisor = build_supervisor(config)
        assert supervisor.handler.config.max_retries == 2
        assert supervisor.max_tool_rounds == 7
        assert isinstance(supervisor.handler.display, ConsoleDisplay)
        assert supervisor.handler.display.use_colors is True

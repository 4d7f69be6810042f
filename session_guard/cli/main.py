"""
CLI entry point for session-guard.
Builds the fault handler and supervisor from command-line and environment
settings, then runs the fallback session.
"""
import asyncio
import logging
import os
import sys
from typing import List, Optional
from .arguments import build_config_from_args, parse_arguments
from ..core.agent_client import AnthropicInferenceClient
from ..core.config import Config
from ..executors.supervisor import SessionSupervisor
from ..lib import ConfigurationError, setup_logging
from ..lib.display import ConsoleDisplay
from ..lib.error_handling import FaultHandler
from ..resources.tools import default_registry
logger = logging.getLogger(__name__)
def build_client_factory(config: Config):
    """Factory for the inference client; fails fast when no API key is configured."""
    def _factory() -> AnthropicInferenceClient:
        if not os.environ.get("ANTHROPIC_API_KEY"):
            raise ConfigurationError("ANTHROPIC_API_KEY is not set")
        return AnthropicInferenceClient.from_config(config.session)
    return _factory
def build_supervisor(config: Config) -> SessionSupervisor:
    """Wire a FaultHandler and SessionSupervisor from configuration."""
    handler = FaultHandler(
        config=config.errors,
        degraded_config=config.degraded,
        display=ConsoleDisplay(use_colors=not config.degraded.disable_colors),
    )
    return SessionSupervisor(
        handler,
        client_factory=build_client_factory(config),
        tools_factory=default_registry,
        max_tool_rounds=config.session.max_tool_rounds,
    )
def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI.
    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    try:
        args = parse_arguments(argv)
    except SystemExit as e:
        return e.code if isinstance(e.code, int) else 0
    try:
        setup_logging(level=args.log_level, log_file=args.log_file)
    except (OSError, ValueError) as e:
        print(f"Error: could not configure logging: {e}", file=sys.stderr)
        return 2
    try:
        config = build_config_from_args(args)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    supervisor = build_supervisor(config)
    try:
        return asyncio.run(supervisor.run())
    except KeyboardInterrupt:
        # Raised only where no signal handler could be installed
        print("\nInterrupted.", file=sys.stderr)
        return 130
if __name__ == "__main__":
    sys.exit(main())

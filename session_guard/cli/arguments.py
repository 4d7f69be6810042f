"""
Command-line argument definitions for session-guard.
"""
import argparse
from dataclasses import replace
from typing import List, Optional
from .. import __version__
from ..core.config import Config, MODEL_ALIASES, get_config
def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser.
    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        prog="session-guard",
        description="session-guard - Fault-tolerant interactive Claude session (fallback mode)",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Plain session with defaults
  session-guard
  # Monochrome, no progress lines, faster retries
  session-guard --no-color --no-progress --retry-delay 0.2
  # Debug logging to a file
  session-guard --log-level DEBUG --log-file ~/.session-guard/debug.log
"""
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    # Model settings
    parser.add_argument(
        "--model",
        type=str,
        default=None,
        help=f"Model alias or ID (aliases: {', '.join(sorted(MODEL_ALIASES))})"
    )
    parser.add_argument(
        "--max-tokens",
        type=int,
        default=None,
        help="Maximum tokens per reply (default: 1024)"
    )
    parser.add_argument(
        "--max-tool-rounds",
        type=int,
        default=None,
        help="Tool-use round trips allowed per turn (default: 10)"
    )
    # Recovery settings
    parser.add_argument(
        "--max-retries",
        type=int,
        default=None,
        help="Recovery attempts per fault (default: 3)"
    )
    parser.add_argument(
        "--retry-delay",
        type=float,
        default=None,
        help="Seconds between recovery attempts (default: 1.0)"
    )
    parser.add_argument(
        "--show-stack-trace",
        action="store_true",
        help="Log full fault details including tracebacks"
    )
    # Fallback-session toggles
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable ANSI colors"
    )
    parser.add_argument(
        "--basic-input",
        action="store_true",
        help="Read raw lines from stdin without line editing"
    )
    parser.add_argument(
        "--no-progress",
        action="store_true",
        help="Hide the 'thinking' indicator"
    )
    # Logging
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Log level (default: WARNING)"
    )
    parser.add_argument(
        "--log-file",
        type=str,
        default=None,
        help="Write logs to this file instead of stderr"
    )
    return parser
def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments.
    Args:
        argv: Argument list (defaults to sys.argv[1:])
    Returns:
        Parsed arguments namespace
    """
    return create_parser().parse_args(argv)
def build_config_from_args(args: argparse.Namespace, base: Optional[Config] = None) -> Config:
    """Apply command-line overrides on top of a Config.
    Args:
        args: Parsed arguments
        base: Starting configuration (defaults to the global get_config())
    Returns:
        New Config with overrides applied
    Raises:
        ValueError: If an override is out of range
    """
    base = base or get_config()
    errors = base.errors
    if args.max_retries is not None:
        errors = replace(errors, max_retries=args.max_retries)
    if args.retry_delay is not None:
        errors = replace(errors, retry_delay=args.retry_delay)
    if args.show_stack_trace:
        errors = replace(errors, show_stack_trace=True)
    degraded = base.degraded.merge({
        key: True
        for key, flag in (
            ("disable_colors", args.no_color),
            ("use_basic_input", args.basic_input),
            ("disable_progress", args.no_progress),
        )
        if flag
    })
    session = replace(base.session)
    if args.model:
        session.model = args.model
    if args.max_tokens is not None:
        if args.max_tokens < 1:
            raise ValueError("--max-tokens must be positive")
        session.max_tokens = args.max_tokens
    if args.max_tool_rounds is not None:
        if args.max_tool_rounds < 1:
            raise ValueError("--max-tool-rounds must be positive")
        session.max_tool_rounds = args.max_tool_rounds
    return Config(errors=errors, degraded=degraded, session=session)

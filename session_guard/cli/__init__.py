"""
CLI module for session-guard.
Usage:
    python -m session_guard [--no-color] [--max-retries N] ...
"""
from .arguments import create_parser, parse_arguments, build_config_from_args
from .main import main, build_supervisor
__all__ = [
    "create_parser",
    "parse_arguments",
    "build_config_from_args",
    "main",
    "build_supervisor",
]

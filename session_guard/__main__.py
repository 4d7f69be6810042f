"""
Entry point for running session-guard as a module.
Usage:
    python -m session_guard --no-color
"""
import sys
from .cli.main import main
if __name__ == "__main__":
    sys.exit(main())

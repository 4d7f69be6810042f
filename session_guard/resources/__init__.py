"""
Resources Module - Tools available to interactive sessions.
Usage:
    from session_guard.resources import default_registry
    registry = default_registry()
    specs = registry.to_api_format()
    result = await registry.get("read_file").invoke({"path": "README.md"})
"""
from .tools import (
    ToolDefinition,
    Tool,
    ToolRegistry,
    ReadFileInput,
    ListFilesInput,
    EditFileInput,
    READ_FILE_TOOL,
    LIST_FILES_TOOL,
    EDIT_FILE_TOOL,
    default_tools,
    default_registry,
)
__all__ = [
    "ToolDefinition",
    "Tool",
    "ToolRegistry",
    "ReadFileInput",
    "ListFilesInput",
    "EditFileInput",
    "READ_FILE_TOOL",
    "LIST_FILES_TOOL",
    "EDIT_FILE_TOOL",
    "default_tools",
    "default_registry",
]

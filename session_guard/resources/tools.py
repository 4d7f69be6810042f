"""
Tool Definitions with Pydantic Validation.
Tools available to the interactive session. Each tool pairs a Claude API
definition with a Pydantic input model and a handler; invoke() validates
the raw input before the handler runs.
DESIGN PRINCIPLES:
- Each tool has a clear, single purpose
- Input schemas are strict (validate early, fail fast)
- Handlers raise on failure; the session turns exceptions into tool errors
"""
from __future__ import annotations
import asyncio
import inspect
import logging
from pathlib import Path
from typing import Any, Callable
from pydantic import BaseModel, Field, field_validator, model_validator
from ..lib import ToolError, ToolNotFoundError
logger = logging.getLogger(__name__)
# =============================================================================
# Tool Definition Model
# =============================================================================
class ToolDefinition(BaseModel):
    """
    Definition of a tool available to agents.
    Attributes:
        name: Unique identifier for the tool.
        description: LLM-friendly description of what the tool does.
        input_schema: JSON Schema defining expected input parameters.
    """
    name: str = Field(..., min_length=1, max_length=64)
    description: str = Field(..., min_length=10, max_length=1024)
    input_schema: dict[str, Any]
    def to_api_format(self) -> dict[str, Any]:
        """Convert to Claude API tool format."""
        return {
            "name": self.name,
            "description": self.description,
            "input_schema": self.input_schema,
        }
class Tool:
    """
    An invocable tool: definition, input model and handler.
    Sync handlers are run in a worker thread so file I/O never blocks the
    session's event loop.
    """
    def __init__(
        self,
        definition: ToolDefinition,
        input_model: type[BaseModel],
        handler: Callable[[BaseModel], Any],
    ):
        self.definition = definition
        self.input_model = input_model
        self.handler = handler
    @classmethod
    def create(
        cls,
        name: str,
        description: str,
        input_model: type[BaseModel],
        handler: Callable[[BaseModel], Any],
    ) -> Tool:
        """Build a tool whose JSON schema is derived from its input model."""
        definition = ToolDefinition(
            name=name,
            description=description,
            input_schema=input_model.model_json_schema(),
        )
        return cls(definition, input_model, handler)
    @property
    def name(self) -> str:
        return self.definition.name
    @property
    def description(self) -> str:
        return self.definition.description
    async def invoke(self, raw_input: dict[str, Any] | None) -> Any:
        """
        Validate input and run the handler.
        Args:
            raw_input: Tool input as sent by the model.
        Returns:
            Handler result.
        Raises:
            pydantic.ValidationError: If the input does not match the schema.
            Exception: Whatever the handler raises.
        """
        params = self.input_model.model_validate(raw_input or {})
        if inspect.iscoroutinefunction(self.handler):
            return await self.handler(params)
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.handler, params)
# =============================================================================
# Input Validation Models
# =============================================================================
class ReadFileInput(BaseModel):
    """Input schema for read_file tool."""
    path: str = Field(
        ...,
        description="The relative path of a file in the working directory.",
    )
    @field_validator("path")
    @classmethod
    def validate_path(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("path cannot be empty")
        return v
class ListFilesInput(BaseModel):
    """Input schema for list_files tool."""
    path: str = Field(
        default=".",
        description="Optional relative path to list files from. Defaults to current directory if not provided.",
    )
class EditFileInput(BaseModel):
    """Input schema for edit_file tool."""
    path: str = Field(
        ...,
        min_length=1,
        description="The path to the file.",
    )
    old_str: str = Field(
        ...,
        description="Text to search for - must match exactly and must only have one match exactly.",
    )
    new_str: str = Field(
        ...,
        description="Text to replace old_str with",
    )
    @model_validator(mode="after")
    def old_must_differ_from_new(self) -> EditFileInput:
        if self.old_str == self.new_str:
            raise ValueError("old_str must be different from new_str")
        return self
# =============================================================================
# Handlers
# =============================================================================
def read_file(params: ReadFileInput) -> str:
    """Return the contents of a UTF-8 text file."""
    return Path(params.path).read_text(encoding="utf-8")
def list_files(params: ListFilesInput) -> str:
    """List directory entries, one per line, directories suffixed with '/'."""
    entries = sorted(Path(params.path).iterdir(), key=lambda p: p.name)
    return "\n".join(f"{p.name}/" if p.is_dir() else p.name for p in entries)
def edit_file(params: EditFileInput) -> str:
    """
    Replace the first occurrence of old_str with new_str.
    A missing file is created (with its parent directories) holding new_str.
    """
    path = Path(params.path)
    if not path.exists():
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(params.new_str, encoding="utf-8")
        return f"File created: {params.path}"
    old_content = path.read_text(encoding="utf-8")
    if params.old_str and params.old_str not in old_content:
        raise ToolError(f"'{params.old_str}' not found in file {params.path}")
    if params.old_str:
        new_content = old_content.replace(params.old_str, params.new_str, 1)
    else:
        new_content = params.new_str + old_content
    path.write_text(new_content, encoding="utf-8")
    return f"File edited: {params.path}"
READ_FILE_TOOL = Tool.create(
    name="read_file",
    description="Read the contents of a given relative file path. Use this when you want to see what's inside a file. Do not use this with directory names.",
    input_model=ReadFileInput,
    handler=read_file,
)
LIST_FILES_TOOL = Tool.create(
    name="list_files",
    description="List files and directories at a given path. If no path is provided, lists files in the current directory.",
    input_model=ListFilesInput,
    handler=list_files,
)
EDIT_FILE_TOOL = Tool.create(
    name="edit_file",
    description="""Make edits to a text file.
Replaces 'old_str' with 'new_str' in the given file. 'old_str' and 'new_str' MUST be different from each other.
If the file specified with path doesn't exist, it will be created.""",
    input_model=EditFileInput,
    handler=edit_file,
)
# =============================================================================
# Tool Registry
# =============================================================================
class ToolRegistry:
    """
    Registry of invocable tools, keyed by name.
    Instances are independent so each session owns its tool set.
    """
    def __init__(self, tools: list[Tool] | None = None):
        self._tools: dict[str, Tool] = {}
        for tool in tools or []:
            self.register(tool)
    def register(self, tool: Tool) -> None:
        """Register a tool, replacing any tool with the same name."""
        if tool.name in self._tools:
            logger.debug("Replacing tool %s", tool.name)
        self._tools[tool.name] = tool
    def get(self, name: str) -> Tool:
        """
        Get a tool by name.
        Raises:
            ToolNotFoundError: If tool not found.
        """
        if name not in self._tools:
            raise ToolNotFoundError(f"Tool {name} not found.")
        return self._tools[name]
    def find(self, name: str) -> Tool | None:
        return self._tools.get(name)
    def list_tools(self) -> list[Tool]:
        """All registered tools, in registration order."""
        return list(self._tools.values())
    def to_api_format(self) -> list[dict[str, Any]]:
        """All tools in Claude API format."""
        return [tool.definition.to_api_format() for tool in self._tools.values()]
    def __len__(self) -> int:
        return len(self._tools)
    def __contains__(self, name: object) -> bool:
        return name in self._tools
def default_tools() -> list[Tool]:
    """The built-in file tools."""
    return [READ_FILE_TOOL, LIST_FILES_TOOL, EDIT_FILE_TOOL]
def default_registry() -> ToolRegistry:
    """A fresh registry holding the built-in file tools."""
    return ToolRegistry(default_tools())

"""
Agent Client - Inference seam used by interactive sessions.
Sessions depend only on InferenceClient.send(); the Anthropic-backed
implementation is created lazily so that a missing API key surfaces at the
first request, where the fault handler can classify it.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence
import logging
import anthropic
from .config import SessionConfig, resolve_model
logger = logging.getLogger(__name__)
class InferenceClient(ABC):
    """Sends the conversation so far and returns one assistant reply."""
    @abstractmethod
    async def send(
        self,
        conversation: Sequence[Dict[str, Any]],
        tools: Sequence[Dict[str, Any]],
    ) -> Any:
        """
        Request the next assistant message.
        Args:
            conversation: Messages in Claude API format
            tools: Tool specs in Claude API format
        Returns:
            Reply object exposing a ``content`` list of blocks
        """
        ...
class AnthropicInferenceClient(InferenceClient):
    """InferenceClient backed by the Anthropic Messages API."""
    def __init__(
        self,
        model: str = "sonnet",
        max_tokens: int = 1024,
        api_key: Optional[str] = None,
        system_prompt: str = "",
    ):
        self.model = resolve_model(model)
        self.max_tokens = max_tokens
        self.system_prompt = system_prompt
        self._api_key = api_key
        self._client: Optional[anthropic.AsyncAnthropic] = None
    @classmethod
    def from_config(cls, config: SessionConfig, api_key: Optional[str] = None) -> "AnthropicInferenceClient":
        return cls(model=config.model, max_tokens=config.max_tokens, api_key=api_key)
    @property
    def client(self) -> anthropic.AsyncAnthropic:
        if self._client is None:
            # Falls back to ANTHROPIC_API_KEY from the environment
            self._client = anthropic.AsyncAnthropic(api_key=self._api_key)
        return self._client
    async def send(
        self,
        conversation: Sequence[Dict[str, Any]],
        tools: Sequence[Dict[str, Any]],
    ) -> Any:
        kwargs: Dict[str, Any] = {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "messages": list(conversation),
        }
        if tools:
            kwargs["tools"] = list(tools)
        if self.system_prompt:
            kwargs["system"] = self.system_prompt
        logger.debug("Sending %d messages to %s", len(conversation), self.model)
        return await self.client.messages.create(**kwargs)
def _block_type(block: Any) -> Optional[str]:
    if isinstance(block, dict):
        return block.get("type")
    return getattr(block, "type", None)
def _block_attr(block: Any, name: str, default: Any = None) -> Any:
    if isinstance(block, dict):
        return block.get(name, default)
    return getattr(block, name, default)
def extract_text_from_message(message: Any) -> str:
    """Extract text content from an assistant reply."""
    texts = []
    for block in getattr(message, "content", None) or []:
        if _block_type(block) == "text":
            texts.append(_block_attr(block, "text", ""))
    return "".join(texts)
def extract_tool_uses_from_message(message: Any) -> List[Dict[str, Any]]:
    """Extract tool use blocks from an assistant reply, in request order."""
    tool_uses = []
    for block in getattr(message, "content", None) or []:
        if _block_type(block) == "tool_use":
            tool_uses.append({
                "id": _block_attr(block, "id", ""),
                "name": _block_attr(block, "name", ""),
                "input": _block_attr(block, "input", {}) or {},
            })
    return tool_uses

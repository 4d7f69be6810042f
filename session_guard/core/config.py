"""
Configuration - Single Source of Truth for session-guard.
Contains: error handler tuning, degraded-session toggles, model settings.
"""
from dataclasses import dataclass, field, fields, asdict, replace
from typing import Any, Dict, Mapping, Optional
import os
# Aliases for convenience
MODEL_ALIASES: Dict[str, str] = {
    "haiku": "claude-haiku-4-5-20251001",
    "haiku-4.5": "claude-haiku-4-5-20251001",
    "sonnet": "claude-sonnet-4-5-20250929",
    "sonnet-4.5": "claude-sonnet-4-5-20250929",
    "opus": "claude-opus-4-5-20251101",
    "opus-4.5": "claude-opus-4-5-20251101",
}
def resolve_model(model: str) -> str:
    """Resolve model alias to actual model ID."""
    return MODEL_ALIASES.get(model, model)
@dataclass
class ErrorHandlerConfig:
    """Retry and logging settings for the fault handler."""
    log_errors: bool = True
    show_stack_trace: bool = False
    max_retries: int = 3
    retry_delay: float = 1.0 # Seconds between recovery attempts
    backoff_multiplier: float = 1.0 # 1.0 = fixed delay
    def __post_init__(self):
        if self.max_retries < 1:
            raise ValueError("max_retries must be positive")
        if self.retry_delay < 0:
            raise ValueError("retry_delay cannot be negative")
        if self.backoff_multiplier < 1.0:
            raise ValueError("backoff_multiplier must be >= 1.0")
    def delay_for(self, attempt: int) -> float:
        """
        Delay to wait after a failed attempt.
        Args:
            attempt: Attempt number that just failed (1-indexed)
        Returns:
            Delay in seconds
        """
        return self.retry_delay * (self.backoff_multiplier ** (attempt - 1))
@dataclass
class DegradedConfig:
    """Feature toggles for the degraded (fallback) session."""
    use_basic_input: bool = False
    disable_colors: bool = False
    disable_progress: bool = False
    disable_auto_complete: bool = False
    disable_history: bool = False
    @classmethod
    def field_names(cls) -> tuple:
        return tuple(f.name for f in fields(cls))
    def merge(self, updates: Mapping[str, Any]) -> "DegradedConfig":
        """
        Return a copy with the given fields replaced.
        Args:
            updates: Mapping of field name to new value
        Returns:
            New DegradedConfig; unspecified fields are retained
        Raises:
            ValueError: If an unknown field is given
            TypeError: If a value is not a bool
        """
        unknown = set(updates) - set(self.field_names())
        if unknown:
            raise ValueError(f"Unknown degraded config fields: {sorted(unknown)}")
        for name, value in updates.items():
            if not isinstance(value, bool):
                raise TypeError(f"{name} must be a bool, got {type(value).__name__}")
        return replace(self, **updates)
    @classmethod
    def fully_degraded(cls) -> "DegradedConfig":
        """Every advanced feature switched off."""
        return cls(**{name: True for name in cls.field_names()})
    def to_dict(self) -> Dict[str, bool]:
        return asdict(self)
@dataclass
class SessionConfig:
    """Inference settings for the interactive session."""
    model: str = "sonnet"
    max_tokens: int = 1024
    max_tool_rounds: int = 10 # Tool-use round trips per user turn
    @property
    def model_id(self) -> str:
        return resolve_model(self.model)
@dataclass
class Config:
    """Main configuration class - aggregates all config sections."""
    errors: ErrorHandlerConfig = field(default_factory=ErrorHandlerConfig)
    degraded: DegradedConfig = field(default_factory=DegradedConfig)
    session: SessionConfig = field(default_factory=SessionConfig)
    @classmethod
    def from_env(cls) -> "Config":
        """Create config with environment variable overrides."""
        config = cls()
        if retries := os.getenv("SESSION_GUARD_MAX_RETRIES"):
            config.errors = replace(config.errors, max_retries=int(retries))
        if delay := os.getenv("SESSION_GUARD_RETRY_DELAY"):
            config.errors = replace(config.errors, retry_delay=float(delay))
        if log_errors := os.getenv("SESSION_GUARD_LOG_ERRORS"):
            config.errors.log_errors = _parse_bool(log_errors)
        if model := os.getenv("SESSION_GUARD_MODEL"):
            config.session.model = model
        # https://no-color.org
        if os.getenv("NO_COLOR"):
            config.degraded.disable_colors = True
        return config
def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")
# Global config instance
_config: Optional[Config] = None
def get_config() -> Config:
    """Get or create global config instance."""
    global _config
    if _config is None:
        _config = Config.from_env()
    return _config
def reset_config() -> None:
    """Drop the global config so the next get_config() re-reads the environment."""
    global _config
    _config = None

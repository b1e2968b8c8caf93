"""External service integrations."""

from .anthropic import AnthropicClient
from .gemini import GeminiClient
from .generation import (
    GenerationKind,
    GenerationRequest,
    RemoteGenerationClient,
    TextResult,
)
from .veo import MediaFetcher, OperationPoller

__all__ = [
    "AnthropicClient",
    "GeminiClient",
    "GenerationKind",
    "GenerationRequest",
    "MediaFetcher",
    "OperationPoller",
    "RemoteGenerationClient",
    "TextResult",
]

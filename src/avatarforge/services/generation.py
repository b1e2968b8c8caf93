"""Single entry point for every generation request.

``RemoteGenerationClient`` routes text and structured requests to the
configured text backend and video requests to Veo, and turns whatever the
service returns into one of a closed set of results: a ``TextResult``, a
validated instance of the requested output model, or an ``OperationHandle``.
"""

import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, TypeVar, Union

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from ..composer import VideoPrompt
from ..config import TEXT_PROVIDERS, config
from ..errors import ConfigurationError, ContractViolation, ValidationError
from ..models import MediaPart, OperationHandle, VideoConfig
from .anthropic import AnthropicClient
from .gemini import GeminiClient

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)
PromptPart = Union[str, MediaPart]


class GenerationKind(str, Enum):
    """Kind of generation request."""

    TEXT = "text"
    STRUCTURED = "structured"
    VIDEO = "video"


@dataclass
class GenerationRequest:
    """A request to the generation service."""

    kind: GenerationKind
    parts: list[PromptPart]
    output_model: Optional[type[BaseModel]] = None
    model: Optional[str] = None
    config: Optional[VideoConfig] = None
    system: Optional[str] = None


@dataclass
class TextResult:
    """Free-text reply."""

    text: str
    metadata: dict = field(default_factory=dict)


GenerationResult = Union[TextResult, BaseModel, OperationHandle]


def extract_json(response: str) -> str:
    """Extract JSON from a response that may contain markdown or other text."""
    # Try to find JSON in code blocks
    if "```json" in response:
        start = response.find("```json") + 7
        end = response.find("```", start)
        if end > start:
            return response[start:end].strip()

    if "```" in response:
        start = response.find("```") + 3
        end = response.find("```", start)
        if end > start:
            return response[start:end].strip()

    # Try to find a raw JSON object
    start = response.find("{")
    if start != -1:
        depth = 0
        for i, char in enumerate(response[start:], start):
            if char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
                if depth == 0:
                    return response[start:i + 1]

    return response.strip()


def parse_structured(response: str, output_model: type[ModelT]) -> ModelT:
    """Validate a raw reply against the declared output model.

    Raises:
        ContractViolation: If the reply is not JSON or misses required fields.
    """
    try:
        data = json.loads(extract_json(response))
    except json.JSONDecodeError as e:
        logger.debug(f"Raw response: {response}")
        raise ContractViolation(f"Invalid JSON in response: {e}")

    try:
        return output_model.model_validate(data)
    except PydanticValidationError as e:
        raise ContractViolation(
            f"Response does not match {output_model.__name__}: {e.error_count()} error(s): {e}"
        )


class RemoteGenerationClient:
    """Routes generation requests to the text backend or to Veo."""

    def __init__(
        self,
        gemini: Optional[GeminiClient] = None,
        anthropic: Optional[AnthropicClient] = None,
        text_provider: Optional[str] = None,
    ) -> None:
        """Initialize the client.

        Args:
            gemini: Gemini client, used for video and (by default) text.
            anthropic: Claude client, used for text when text_provider is
                ``anthropic``. Created on first use if not provided.
            text_provider: ``gemini`` or ``anthropic``. Defaults to config.
        """
        self._gemini = gemini or GeminiClient()
        self._anthropic = anthropic
        self._text_provider = text_provider or config.text_provider

    @property
    def text_provider(self) -> str:
        return self._text_provider

    @property
    def gemini(self) -> GeminiClient:
        return self._gemini

    async def aclose(self) -> None:
        await self._gemini.aclose()
        if self._anthropic is not None:
            await self._anthropic.aclose()

    async def __aenter__(self) -> "RemoteGenerationClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def generate(self, request: GenerationRequest) -> GenerationResult:
        """Issue a single generation request.

        Returns:
            ``TextResult`` for text, an ``output_model`` instance for
            structured requests, an ``OperationHandle`` for video.
        """
        if not request.parts:
            raise ValidationError("A generation request needs at least one prompt part")

        if request.kind == GenerationKind.VIDEO:
            return await self._gemini.submit_video(
                request.parts, request.config or VideoConfig(), model=request.model
            )

        if request.kind == GenerationKind.STRUCTURED:
            if request.output_model is None:
                raise ValidationError("Structured requests need an output model")
            raw = await self._complete(request.parts, request.output_model, request.system, request.model)
            return parse_structured(raw, request.output_model)

        raw = await self._complete(request.parts, None, request.system, request.model)
        return TextResult(text=raw.strip(), metadata={"provider": self._text_provider})

    async def _complete(
        self,
        parts: list[PromptPart],
        output_model: Optional[type[BaseModel]],
        system: Optional[str],
        model: Optional[str],
    ) -> str:
        if self._text_provider not in TEXT_PROVIDERS:
            raise ConfigurationError(
                f"Unknown text provider: {self._text_provider}. "
                f"Must be one of: {', '.join(TEXT_PROVIDERS)}"
            )
        if self._text_provider == "anthropic":
            if self._anthropic is None:
                self._anthropic = AnthropicClient()
            if output_model is not None:
                schema = json.dumps(output_model.model_json_schema(), ensure_ascii=False)
                parts = list(parts) + [
                    "Respond with a single JSON object matching this JSON schema, "
                    f"with no additional text:\n{schema}"
                ]
            return await self._anthropic.create_message(parts, system=system, model=model)
        return await self._gemini.generate_content(
            parts, response_model=output_model, system=system, model=model
        )

    async def generate_text(
        self, parts: list[PromptPart], system: Optional[str] = None, model: Optional[str] = None
    ) -> str:
        result = await self.generate(
            GenerationRequest(kind=GenerationKind.TEXT, parts=parts, system=system, model=model)
        )
        return result.text

    async def generate_structured(
        self,
        parts: list[PromptPart],
        output_model: type[ModelT],
        system: Optional[str] = None,
        model: Optional[str] = None,
    ) -> ModelT:
        return await self.generate(
            GenerationRequest(
                kind=GenerationKind.STRUCTURED,
                parts=parts,
                output_model=output_model,
                system=system,
                model=model,
            )
        )

    async def submit_video(self, prompt: VideoPrompt, model: Optional[str] = None) -> OperationHandle:
        return await self.generate(
            GenerationRequest(
                kind=GenerationKind.VIDEO, parts=prompt.parts, config=prompt.config, model=model
            )
        )

    async def get_operation(self, name: str) -> OperationHandle:
        """Refresh an operation's state."""
        return await self._gemini.get_operation(name)

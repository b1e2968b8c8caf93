"""Anthropic Claude API client wrapper."""

import logging
from typing import Optional, Union

from anthropic import APIConnectionError, APIStatusError, APITimeoutError, AsyncAnthropic

from ..config import config
from ..errors import ContractViolation, GenerationError, TransportError
from ..models import MediaPart

logger = logging.getLogger(__name__)

PromptPart = Union[str, MediaPart]


def to_content_blocks(parts: list[PromptPart]) -> list[dict]:
    """Convert prompt parts to Claude content blocks, images first."""
    images = [
        {
            "type": "image",
            "source": {"type": "base64", "media_type": part.mime_type, "data": part.data},
        }
        for part in parts
        if isinstance(part, MediaPart)
    ]
    texts = [{"type": "text", "text": part} for part in parts if isinstance(part, str)]
    return images + texts


class AnthropicClient:
    """Client wrapper for the Anthropic Claude API.

    The SDK's own retries are disabled: a failed call surfaces immediately
    and retry policy is left to the caller.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> None:
        """Initialize the Anthropic client.

        Args:
            api_key: Anthropic API key. Defaults to ANTHROPIC_API_KEY env var.
            model: Model to use. Defaults to config.anthropic_model.
            timeout: Per-request timeout in seconds.
        """
        self._api_key = api_key
        self._model = model or config.anthropic_model
        self._timeout = timeout or config.request_timeout
        self._client: Optional[AsyncAnthropic] = None

    @property
    def model(self) -> str:
        """Return the model being used."""
        return self._model

    def _get_client(self) -> AsyncAnthropic:
        if self._client is None:
            api_key = self._api_key
            if not api_key:
                config.validate_anthropic_required()
                api_key = config.anthropic_api_key
            self._client = AsyncAnthropic(
                api_key=api_key, max_retries=0, timeout=self._timeout
            )
        return self._client

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.close()

    async def create_message(
        self,
        parts: list[PromptPart],
        max_tokens: int = 4096,
        system: Optional[str] = None,
        temperature: float = 0.7,
        model: Optional[str] = None,
    ) -> str:
        """Create a message using Claude.

        Args:
            parts: Prompt parts (text and images).
            max_tokens: Maximum tokens in the response.
            system: Optional system prompt.
            temperature: Sampling temperature (0.0-1.0).
            model: Model override.

        Returns:
            The text content of Claude's response.

        Raises:
            TransportError: On connection failures and timeouts.
            GenerationError: If the API rejects the request.
            ContractViolation: If the reply has no text.
        """
        client = self._get_client()
        kwargs = {
            "model": model or self._model,
            "max_tokens": max_tokens,
            "messages": [{"role": "user", "content": to_content_blocks(parts)}],
            "temperature": temperature,
        }
        if system:
            kwargs["system"] = system

        logger.debug(f"Sending request to Claude ({kwargs['model']})")
        try:
            response = await client.messages.create(**kwargs)
        except APITimeoutError as e:
            raise TransportError(f"Claude request timed out: {e}")
        except APIConnectionError as e:
            raise TransportError(f"Connection error: {e}")
        except APIStatusError as e:
            logger.error(f"API error: {e}")
            raise GenerationError(str(e), status_code=e.status_code)

        # Extract text content from response
        text = "".join(
            block.text for block in response.content if getattr(block, "type", None) == "text"
        )
        if not text.strip():
            raise ContractViolation("Claude response contains no text")
        return text

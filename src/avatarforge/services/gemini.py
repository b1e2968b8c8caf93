"""Google Gemini API client: text, structured output and Veo video jobs."""

import logging
from typing import Any, Optional, TypeVar, Union

import httpx
from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from ..config import config
from ..errors import ContractViolation, GenerationError, TransportError, ValidationError
from ..models import MediaPart, MediaRef, OperationError, OperationHandle, OperationPart, VideoConfig

logger = logging.getLogger(__name__)

PromptPart = Union[str, MediaPart]
RawT = TypeVar("RawT", bound=BaseModel)

_SCHEMA_TYPES = {str: "STRING", int: "INTEGER", float: "NUMBER", bool: "BOOLEAN"}


def response_schema(model: type[BaseModel]) -> dict:
    """Translate a flat pydantic model into a Gemini ``responseSchema``."""
    properties: dict[str, dict] = {}
    required: list[str] = []
    for name, field in model.model_fields.items():
        prop = {"type": _SCHEMA_TYPES.get(field.annotation, "STRING")}
        if field.description:
            prop["description"] = field.description
        properties[name] = prop
        if field.is_required():
            required.append(name)
    return {"type": "OBJECT", "properties": properties, "required": required}


def to_content_parts(parts: list[PromptPart]) -> list[dict]:
    """Convert prompt parts to Gemini content parts."""
    content = []
    for part in parts:
        if isinstance(part, MediaPart):
            content.append({"inlineData": {"mimeType": part.mime_type, "data": part.data}})
        else:
            content.append({"text": part})
    return content


class _RawError(BaseModel):
    code: Optional[int] = None
    message: Optional[str] = None


class _RawVideo(BaseModel):
    uri: Optional[str] = None
    mimeType: Optional[str] = None


class _RawSample(BaseModel):
    video: Optional[_RawVideo] = None


class _RawVideoResponse(BaseModel):
    generatedSamples: Optional[list[_RawSample]] = None
    raiMediaFilteredReasons: Optional[list[str]] = None


class _RawOperationResponse(BaseModel):
    generateVideoResponse: Optional[_RawVideoResponse] = None


class _RawOperation(BaseModel):
    """Long-running operation payload (predictLongRunning, operations.get)."""

    name: str = Field(..., min_length=1)
    done: bool = False
    error: Optional[_RawError] = None
    response: Optional[_RawOperationResponse] = None


class _RawPart(BaseModel):
    text: Optional[str] = None


class _RawContent(BaseModel):
    parts: Optional[list[_RawPart]] = None


class _RawCandidate(BaseModel):
    content: Optional[_RawContent] = None


class _RawPromptFeedback(BaseModel):
    blockReason: Optional[str] = None


class _RawGenerateResponse(BaseModel):
    """generateContent payload."""

    candidates: Optional[list[_RawCandidate]] = None
    promptFeedback: Optional[_RawPromptFeedback] = None


def _validate_payload(model: type[RawT], data: Any, what: str) -> RawT:
    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        raise ContractViolation(
            f"Unexpected {what} payload ({e.error_count()} error(s)): {str(data)[:200]}"
        )


def parse_operation(data: Any) -> OperationHandle:
    """Map a raw long-running operation payload onto an ``OperationHandle``.

    Raises:
        ContractViolation: If the payload is not an operation.
    """
    raw = _validate_payload(_RawOperation, data, "operation")

    error = None
    if raw.error is not None:
        error = OperationError(code=raw.error.code, message=raw.error.message or "Unknown error")

    video_response = (raw.response and raw.response.generateVideoResponse) or _RawVideoResponse()
    parts = []
    for sample in video_response.generatedSamples or []:
        video = sample.video
        uri = video.uri if video else None
        parts.append(
            OperationPart(media=MediaRef(url=uri, mime_type=video.mimeType) if uri else None)
        )

    return OperationHandle(
        name=raw.name,
        done=raw.done,
        error=error,
        parts=parts,
        filtered_reasons=list(video_response.raiMediaFilteredReasons or []),
    )


class GeminiClient:
    """Async client for the Gemini REST API.

    Handles:
    - generateContent for free text and schema-constrained JSON
    - predictLongRunning submissions for Veo video generation
    - operation status checks

    The API key is resolved when a request is made, so a client can be built
    before credentials are available.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        api_base: Optional[str] = None,
        text_model: Optional[str] = None,
        video_model: Optional[str] = None,
        timeout: Optional[float] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        """Initialize the Gemini client.

        Args:
            api_key: Gemini API key. Defaults to GEMINI_API_KEY env var.
            api_base: API base URL. Defaults to config.api_base.
            text_model: Model for text and structured calls.
            video_model: Veo model for video jobs.
            timeout: Per-request timeout in seconds.
            http_client: Preconfigured client (tests inject a mock transport).
        """
        self._api_key = api_key
        self._api_base = (api_base or config.api_base).rstrip("/")
        self._text_model = text_model or config.text_model
        self._video_model = video_model or config.video_model
        self._client = http_client or httpx.AsyncClient(
            timeout=timeout or config.request_timeout
        )

    @property
    def text_model(self) -> str:
        return self._text_model

    @property
    def video_model(self) -> str:
        return self._video_model

    @property
    def api_key(self) -> str:
        """Return the API key, failing if none is configured."""
        if self._api_key:
            return self._api_key
        config.validate_gemini_required()
        return config.gemini_api_key

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "GeminiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def _request(self, method: str, url: str, **kwargs) -> dict:
        headers = {"x-goog-api-key": self.api_key, "Content-Type": "application/json"}
        try:
            response = await self._client.request(method, url, headers=headers, **kwargs)
        except httpx.TimeoutException as e:
            raise TransportError(f"Request to {url} timed out: {e}")
        except httpx.HTTPError as e:
            raise TransportError(f"Request to {url} failed: {e}")

        if response.status_code != 200:
            message = response.text[:500]
            try:
                message = response.json()["error"]["message"]
            except (ValueError, KeyError, TypeError):
                pass
            logger.error(f"Gemini API error {response.status_code}: {message}")
            raise GenerationError(
                f"{response.status_code}: {message}", status_code=response.status_code
            )

        try:
            data = response.json()
        except ValueError:
            raise ContractViolation(f"Response from {url} is not JSON")
        if not isinstance(data, dict):
            raise ContractViolation(f"Response from {url} is not a JSON object")
        return data

    async def generate_content(
        self,
        parts: list[PromptPart],
        response_model: Optional[type[BaseModel]] = None,
        system: Optional[str] = None,
        model: Optional[str] = None,
    ) -> str:
        """Run generateContent and return the text of the first candidate.

        Args:
            parts: Prompt parts (text and inline images).
            response_model: When given, the reply is constrained to JSON
                matching this model's fields.
            system: Optional system instruction.
            model: Model override.

        Returns:
            The candidate's text (a JSON document when response_model is set).

        Raises:
            ContractViolation: If the response carries no candidate text.
        """
        model = model or self._text_model
        body: dict[str, Any] = {"contents": [{"role": "user", "parts": to_content_parts(parts)}]}
        if system:
            body["systemInstruction"] = {"parts": [{"text": system}]}
        if response_model is not None:
            body["generationConfig"] = {
                "responseMimeType": "application/json",
                "responseSchema": response_schema(response_model),
            }

        logger.debug(f"generateContent ({model}) with {len(parts)} part(s)")
        data = await self._request(
            "POST", f"{self._api_base}/models/{model}:generateContent", json=body
        )

        reply = _validate_payload(_RawGenerateResponse, data, "generateContent")
        if not reply.candidates:
            reason = reply.promptFeedback.blockReason if reply.promptFeedback else None
            raise ContractViolation(
                f"No candidates in response{f' (blocked: {reason})' if reason else ''}"
            )

        content = reply.candidates[0].content
        content_parts = (content.parts if content else None) or []
        text = "".join(p.text or "" for p in content_parts)
        if not text.strip():
            raise ContractViolation("Candidate contains no text")
        return text

    async def submit_video(
        self,
        parts: list[PromptPart],
        video_config: VideoConfig,
        model: Optional[str] = None,
    ) -> OperationHandle:
        """Submit a Veo generation job.

        Text parts are joined into the prompt; the first media part becomes
        the conditioning image.

        Returns:
            Handle of the pending operation.
        """
        model = model or self._video_model
        text = "\n\n".join(p for p in parts if isinstance(p, str))
        if not text.strip():
            raise ValidationError("Prompt cannot be empty")

        instance: dict[str, Any] = {"prompt": text}
        image = next((p for p in parts if isinstance(p, MediaPart)), None)
        if image is not None:
            instance["image"] = {"bytesBase64Encoded": image.data, "mimeType": image.mime_type}

        duration = video_config.duration_seconds
        parameters: dict[str, Any] = {
            "aspectRatio": video_config.aspect_ratio,
            "durationSeconds": int(duration) if float(duration).is_integer() else duration,
        }
        if video_config.negative_prompt:
            parameters["negativePrompt"] = video_config.negative_prompt

        logger.info(f"Starting Veo generation ({model}, {parameters['durationSeconds']}s, {parameters['aspectRatio']})")
        logger.debug(f"Prompt: {text[:100]}...")

        data = await self._request(
            "POST",
            f"{self._api_base}/models/{model}:predictLongRunning",
            json={"instances": [instance], "parameters": parameters},
        )
        handle = parse_operation(data)
        logger.info(f"Submitted operation {handle.name}")
        return handle

    async def get_operation(self, name: str) -> OperationHandle:
        """Fetch the current state of an operation."""
        data = await self._request("GET", f"{self._api_base}/{name}")
        return parse_operation(data)

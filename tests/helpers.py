"""Payload builders shared by the test modules."""

import base64
import json
from typing import Callable, Optional

import httpx

API_BASE = "https://gemini.test/v1beta"
API_KEY = "test-gemini-key"

PNG_URI = "data:image/png;base64," + base64.b64encode(b"\x89PNG fake image").decode("ascii")
JPEG_URI = "data:image/jpeg;base64," + base64.b64encode(b"\xff\xd8 fake jpeg").decode("ascii")
VIDEO_BYTES = b"\x00\x00\x00\x18ftypmp42 fake video payload"
VIDEO_URL = "https://gemini.test/v1beta/files/abc123:download?alt=media"
OPERATION_NAME = "models/veo-2.0-generate-001/operations/op-1"


def candidate_response(payload) -> dict:
    """A generateContent reply whose single candidate carries ``payload`` as text."""
    text = payload if isinstance(payload, str) else json.dumps(payload, ensure_ascii=False)
    return {"candidates": [{"content": {"role": "model", "parts": [{"text": text}]}}]}


def operation_payload(
    name: str = OPERATION_NAME,
    done: bool = False,
    uri: Optional[str] = None,
    error: Optional[dict] = None,
    filtered: Optional[list] = None,
) -> dict:
    """A predictLongRunning / operations.get reply."""
    data = {"name": name, "done": done}
    if error:
        data["error"] = error
    if done and not error:
        samples = [{"video": {"uri": uri, "mimeType": "video/mp4"}}] if uri else []
        response = {"generatedSamples": samples}
        if filtered:
            response["raiMediaFilteredReasons"] = filtered
        data["response"] = {"generateVideoResponse": response}
    return data


def recording_client(handler: Callable[[httpx.Request], httpx.Response]):
    """An ``httpx.AsyncClient`` backed by ``handler``, plus the list of requests it saw."""
    requests: list[httpx.Request] = []

    def record(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return handler(request)

    return httpx.AsyncClient(transport=httpx.MockTransport(record)), requests

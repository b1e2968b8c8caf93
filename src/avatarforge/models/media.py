"""Media payloads: data URIs in and out of the generation service."""

import base64
import binascii
import mimetypes
import re
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

from ..errors import ValidationError

DEFAULT_VIDEO_MIME = "video/mp4"

_DATA_URI_RE = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+);base64,(?P<data>.*)$", re.DOTALL)


def parse_data_uri(uri: str) -> tuple[str, str]:
    """Split a base64 data URI into its MIME type and payload.

    Args:
        uri: URI of the form ``data:<mimetype>;base64,<encoded_data>``.

    Returns:
        Tuple of (mime_type, base64_payload).

    Raises:
        ValidationError: If the URI is not a base64 data URI.
    """
    match = _DATA_URI_RE.match(uri or "")
    if not match:
        raise ValidationError(
            "Expected a data URI of the form 'data:<mimetype>;base64,<encoded_data>'"
        )
    return match.group("mime"), match.group("data")


def encode_file(path: Path) -> str:
    """Read a local file into a data URI."""
    mime_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
    payload = base64.b64encode(path.read_bytes()).decode("ascii")
    return f"data:{mime_type};base64,{payload}"


class MediaPart(BaseModel):
    """A media attachment in a multi-part prompt."""

    url: str = Field(..., description="Data URI of the attachment")

    @property
    def mime_type(self) -> str:
        return parse_data_uri(self.url)[0]

    @property
    def data(self) -> str:
        """Base64 payload."""
        return parse_data_uri(self.url)[1]


class EncodedAsset(BaseModel):
    """A fully materialized binary asset encoded as a data URI."""

    mime_type: str = Field(default=DEFAULT_VIDEO_MIME, description="Asset MIME type")
    data_uri: str = Field(..., description="data:<mime>;base64,<payload>")

    @classmethod
    def from_bytes(cls, data: bytes, mime_type: Optional[str] = None) -> "EncodedAsset":
        mime_type = mime_type or DEFAULT_VIDEO_MIME
        payload = base64.b64encode(data).decode("ascii")
        return cls(mime_type=mime_type, data_uri=f"data:{mime_type};base64,{payload}")

    def to_bytes(self) -> bytes:
        """Decode the asset back to raw bytes."""
        _, payload = parse_data_uri(self.data_uri)
        try:
            return base64.b64decode(payload, validate=True)
        except binascii.Error as e:
            raise ValidationError(f"Asset payload is not valid base64: {e}")

    @property
    def size(self) -> int:
        """Decoded byte length."""
        return len(self.to_bytes())

    def save(self, path: Path) -> Path:
        """Write the decoded asset to ``path``."""
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(self.to_bytes())
        return path

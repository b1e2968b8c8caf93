"""Long-running generation operation models."""

from typing import Optional

from pydantic import BaseModel, Field


class VideoConfig(BaseModel):
    """Generation parameters sent alongside a video prompt."""

    duration_seconds: float = Field(default=5, description="Clip duration in seconds", gt=0)
    aspect_ratio: str = Field(default="9:16", description="Aspect ratio, e.g. 9:16")
    negative_prompt: Optional[str] = Field(None, description="Terms to exclude")


class OperationError(BaseModel):
    """Error reported by a finished operation."""

    code: Optional[int] = None
    message: str = "Unknown error"


class MediaRef(BaseModel):
    """Reference to media produced by an operation."""

    url: str
    mime_type: Optional[str] = None


class OperationPart(BaseModel):
    """One output part of an operation; only media parts matter here."""

    media: Optional[MediaRef] = None


class OperationHandle(BaseModel):
    """State of an asynchronous generation job as last reported by the service.

    Returned by a video submission (``done`` false) and refreshed by every
    status check.
    """

    name: str = Field(..., description="Operation resource name")
    done: bool = Field(default=False, description="Whether the job has finished")
    error: Optional[OperationError] = Field(None, description="Set when the job failed")
    parts: list[OperationPart] = Field(default_factory=list, description="Output parts")
    filtered_reasons: list[str] = Field(
        default_factory=list, description="Why the service withheld output, if it says"
    )

    def find_media(self) -> Optional[MediaRef]:
        """Return the first media reference among the output parts."""
        for part in self.parts:
            if part.media and part.media.url:
                return part.media
        return None


class CompletedOperation(BaseModel):
    """A successfully finished operation with its media reference."""

    name: str
    media: MediaRef
    polls: int = Field(default=0, description="Number of status checks performed")

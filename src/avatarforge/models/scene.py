"""Scene data model."""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from ..errors import ValidationError
from .media import EncodedAsset
from .persona import PersonaProfile, new_id
from .product import ProductSpec

ALLOWED_DURATIONS = (5, 8)


class CameraAngle(str, Enum):
    """Camera framing for the generated video."""

    DYNAMIC = "dynamic"
    MEDIUM = "medium"
    WIDE = "wide"
    VLOG = "vlog"
    SELFIE = "selfie"
    POV = "pov"

    @property
    def label(self) -> str:
        return CAMERA_LABELS[self]


CAMERA_LABELS = {
    CameraAngle.DYNAMIC: "Dynamic Camera",
    CameraAngle.MEDIUM: "Medium Shot",
    CameraAngle.WIDE: "Wide Shot",
    CameraAngle.VLOG: "Vlog",
    CameraAngle.SELFIE: "Selfie",
    CameraAngle.POV: "Point of View (POV)",
}


class AspectRatio(str, Enum):
    """Output aspect ratio."""

    VERTICAL = "9:16"
    HORIZONTAL = "16:9"
    SQUARE = "1:1"


class SceneSpec(BaseModel):
    """A scene to render: scenario plus optional narrative and render options."""

    id: str = Field(default_factory=new_id, description="Unique scene identifier")
    title: Optional[str] = Field(None, description="Scene title (generated when absent)")
    scenario: str = Field(..., description="Environment description")
    action: Optional[str] = Field(None, description="Main action (generated when absent)")
    dialogue: Optional[str] = Field(None, description="Spoken dialogue (generated when absent)")
    camera_angle: CameraAngle = Field(default=CameraAngle.DYNAMIC, description="Camera angle")
    duration: int = Field(default=8, description="Duration in seconds")
    aspect_ratio: AspectRatio = Field(default=AspectRatio.VERTICAL, description="Aspect ratio")
    allow_digital_text: bool = Field(default=False, description="Allow digital overlay text")
    allow_physical_text: bool = Field(
        default=False, description="Restrict text to physical in-scene text (labels, signs)"
    )
    scene_image: Optional[str] = Field(None, description="Scene reference photo as a data URI")
    negative_prompt: Optional[str] = Field(None, description="Terms to exclude")
    hyperrealism: bool = Field(default=False, description="Hyperrealistic rendering")
    four_k: bool = Field(default=False, description="High-resolution rendering")
    professional_camera: bool = Field(default=False, description="Simulate a professional camera")

    class Config:
        """Pydantic config."""
        frozen = False

    @field_validator("duration")
    @classmethod
    def _check_duration(cls, value: int) -> int:
        if value not in ALLOWED_DURATIONS:
            raise ValueError(f"duration must be one of {ALLOWED_DURATIONS}, got {value}")
        return value

    @property
    def display_name(self) -> str:
        return self.title or self.scenario[:40]

    @property
    def has_narrative(self) -> bool:
        """Whether title, action and dialogue are all supplied."""
        return bool(self.title and self.action and self.dialogue)


class SceneNarrative(BaseModel):
    """Title, action and dialogue of a scene."""

    title: str = Field(..., description="A creative and concise title for the scene, less than 10 words.")
    action: str = Field(..., description="A clear and engaging main action for the influencer in the video scene.")
    dialogue: str = Field(..., description="A short and engaging dialogue for the influencer.")


class SceneRequest(BaseModel):
    """Everything the orchestrator needs to render one scene."""

    persona: PersonaProfile
    scene: SceneSpec
    product: Optional[ProductSpec] = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SceneRequest":
        """Build a request from untrusted input.

        Raises:
            ValidationError: If the input does not describe a valid request.
        """
        try:
            return cls.model_validate(data)
        except PydanticValidationError as e:
            raise ValidationError(f"Invalid scene request: {e}", stage="validate")


class GeneratedSceneResult(BaseModel):
    """Video plus the narrative actually used to generate it."""

    video: EncodedAsset
    title: str
    action: str
    dialogue: str
    operation_name: Optional[str] = None

    def apply_to(self, scene: SceneSpec) -> SceneSpec:
        """Return a copy of ``scene`` carrying the resolved narrative."""
        return scene.model_copy(
            update={"title": self.title, "action": self.action, "dialogue": self.dialogue}
        )

"""Structured script data model."""

from typing import Optional

from pydantic import BaseModel, Field

from .media import EncodedAsset


class ScriptCharacter(BaseModel):
    """The on-screen character of a script."""

    name: str
    appearance: str = Field(..., description="Detailed physical appearance")
    style: str = Field(..., description="Clothing and style")


class ScriptScene(BaseModel):
    """One timed scene of a script."""

    id: int
    visual_prompt: str = Field(..., description="Background, lighting and objects")
    camera_direction: str = Field(..., description="Camera movement and angle")
    expression: str = Field(..., description="Character's facial expression")
    dialogue: str = Field(..., description="Dialogue spoken in this scene")
    start_time: float
    end_time: float

    @property
    def duration(self) -> float:
        return self.end_time - self.start_time


class ProductIntegration(BaseModel):
    """How a product appears in the script."""

    is_present: bool
    product_name: Optional[str] = None
    integration_description: Optional[str] = None


class ScriptDocument(BaseModel):
    """A character plus an ordered list of scenes."""

    character: ScriptCharacter
    title: str
    format: Optional[str] = None
    duration_seconds: Optional[float] = None
    language: Optional[str] = None
    scenes: list[ScriptScene] = Field(default_factory=list)
    product_integration: Optional[ProductIntegration] = None


class ScriptVideoResult(BaseModel):
    """Video rendered from the first scene of a script."""

    video: EncodedAsset
    scene_id: int
    duration_seconds: float
    skipped_scenes: int = Field(default=0, description="Scenes present but not rendered")
    operation_name: Optional[str] = None

"""Agents that read photos or free text and fill in records."""

from .. import composer
from ..errors import ValidationError
from ..models import (
    AvatarAnalysis,
    MediaPart,
    ProductAnalysis,
    SceneAnalysis,
    TextAnalysis,
    parse_data_uri,
)
from .base import BaseAgent


def _photo_part(photo_data_uri: str) -> MediaPart:
    mime_type, _ = parse_data_uri(photo_data_uri)
    if not mime_type.startswith("image/"):
        raise ValidationError(f"Expected an image, got {mime_type}")
    return MediaPart(url=photo_data_uri)


class AvatarAnalysisAgent(BaseAgent[str, AvatarAnalysis]):
    """Builds an influencer profile from a photo of a person."""

    @property
    def name(self) -> str:
        return "AvatarAnalysisAgent"

    async def run(self, input_data: str) -> AvatarAnalysis:
        photo = _photo_part(input_data)
        self._logger.info("Analyzing avatar photo")
        return await self._generate([composer.avatar_analysis_prompt(), photo], AvatarAnalysis)


class ProductAnalysisAgent(BaseAgent[str, ProductAnalysis]):
    """Extracts product name, brand and description from a product photo."""

    @property
    def name(self) -> str:
        return "ProductAnalysisAgent"

    async def run(self, input_data: str) -> ProductAnalysis:
        photo = _photo_part(input_data)
        self._logger.info("Analyzing product photo")
        return await self._generate([composer.product_analysis_prompt(), photo], ProductAnalysis)


class SceneAnalysisAgent(BaseAgent[str, SceneAnalysis]):
    """Describes the scenery of a photo, ignoring any people in it."""

    @property
    def name(self) -> str:
        return "SceneAnalysisAgent"

    async def run(self, input_data: str) -> SceneAnalysis:
        photo = _photo_part(input_data)
        self._logger.info("Analyzing scene photo")
        return await self._generate([composer.scene_analysis_prompt(), photo], SceneAnalysis)


class TextAnalysisAgent(BaseAgent[str, TextAnalysis]):
    """Extracts an influencer's name and niche from a text description."""

    @property
    def name(self) -> str:
        return "TextAnalysisAgent"

    async def run(self, input_data: str) -> TextAnalysis:
        if not input_data or not input_data.strip():
            raise ValidationError("Text cannot be empty")
        return await self._generate([composer.text_analysis_prompt(input_data.strip())], TextAnalysis)

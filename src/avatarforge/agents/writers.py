"""Agents that write scene copy: narrative, title, action, dialogue, SEO, script."""

from dataclasses import dataclass
from enum import Enum

from .. import composer
from ..errors import ValidationError
from ..models import (
    ActionOutput,
    DialogueOutput,
    PersonaProfile,
    SceneNarrative,
    ScriptOutput,
    SeoOutput,
    TitleOutput,
)
from .base import BaseAgent


def _require_context(context: str) -> str:
    if not context or not context.strip():
        raise ValidationError("Context cannot be empty")
    return context.strip()


@dataclass
class NarrativeInput:
    """Input data for the narrative agent."""

    persona: PersonaProfile
    scenario: str


class NarrativeAgent(BaseAgent[NarrativeInput, SceneNarrative]):
    """Writes a scene's title, main action and dialogue in one call."""

    @property
    def name(self) -> str:
        return "NarrativeAgent"

    async def run(self, input_data: NarrativeInput) -> SceneNarrative:
        self._logger.info(f"Generating narrative for persona '{input_data.persona.name}'")
        prompt = composer.narrative_prompt(
            composer.describe_persona(input_data.persona),
            _require_context(input_data.scenario),
            self.language,
        )
        return await self._generate([prompt], SceneNarrative)


class TitleAgent(BaseAgent[str, TitleOutput]):
    """Writes a short, catchy scene title."""

    @property
    def name(self) -> str:
        return "TitleAgent"

    async def run(self, input_data: str) -> TitleOutput:
        return await self._generate([composer.title_prompt(_require_context(input_data))], TitleOutput)


class ActionAgent(BaseAgent[str, ActionOutput]):
    """Describes the influencer's main action in a scenario."""

    @property
    def name(self) -> str:
        return "ActionAgent"

    async def run(self, input_data: str) -> ActionOutput:
        return await self._generate([composer.action_prompt(_require_context(input_data))], ActionOutput)


class DialogueAgent(BaseAgent[str, DialogueOutput]):
    """Writes a short line of dialogue in the configured language."""

    @property
    def name(self) -> str:
        return "DialogueAgent"

    async def run(self, input_data: str) -> DialogueOutput:
        prompt = composer.dialogue_prompt(_require_context(input_data), self.language)
        return await self._generate([prompt], DialogueOutput)


class SeoAgent(BaseAgent[str, SeoOutput]):
    """Writes SEO copy: title, description and keywords."""

    @property
    def name(self) -> str:
        return "SeoAgent"

    async def run(self, input_data: str) -> SeoOutput:
        return await self._generate([composer.seo_prompt(_require_context(input_data))], SeoOutput)


class ScriptFormat(str, Enum):
    """Output formats for generated scripts."""

    MARKDOWN = "markdown"
    JSON = "json"


@dataclass
class ScriptInput:
    """Input data for the script agent."""

    influencer_details: str
    scene_details: str
    output_format: ScriptFormat = ScriptFormat.MARKDOWN


class ScriptAgent(BaseAgent[ScriptInput, ScriptOutput]):
    """Writes a full video script for an influencer and scene."""

    @property
    def name(self) -> str:
        return "ScriptAgent"

    @property
    def system_prompt(self) -> str:
        return "You are a professional screenwriter for short-form influencer videos."

    async def run(self, input_data: ScriptInput) -> ScriptOutput:
        self._logger.info(f"Generating {input_data.output_format.value} script")
        prompt = composer.script_prompt(
            _require_context(input_data.influencer_details),
            _require_context(input_data.scene_details),
            input_data.output_format.value,
            self.language,
        )
        return await self._generate([prompt], ScriptOutput)

"""AI agents for scene copy and record analysis."""

from .analysis import AvatarAnalysisAgent, ProductAnalysisAgent, SceneAnalysisAgent, TextAnalysisAgent
from .base import BaseAgent
from .writers import (
    ActionAgent,
    DialogueAgent,
    NarrativeAgent,
    NarrativeInput,
    ScriptAgent,
    ScriptFormat,
    ScriptInput,
    SeoAgent,
    TitleAgent,
)

__all__ = [
    "ActionAgent",
    "AvatarAnalysisAgent",
    "BaseAgent",
    "DialogueAgent",
    "NarrativeAgent",
    "NarrativeInput",
    "ProductAnalysisAgent",
    "SceneAnalysisAgent",
    "ScriptAgent",
    "ScriptFormat",
    "ScriptInput",
    "SeoAgent",
    "TextAnalysisAgent",
    "TitleAgent",
]

"""Base agent abstraction."""

import logging
from abc import ABC, abstractmethod
from typing import Generic, Optional, TypeVar

from pydantic import BaseModel

from ..config import config
from ..services.generation import PromptPart, RemoteGenerationClient

logger = logging.getLogger(__name__)

InputT = TypeVar("InputT")
OutputT = TypeVar("OutputT")
ModelT = TypeVar("ModelT", bound=BaseModel)


class BaseAgent(ABC, Generic[InputT, OutputT]):
    """Abstract base class for AI agents.

    An agent turns one input into one structured generation call. Subclasses
    implement ``run`` and define their system prompt.
    """

    def __init__(
        self,
        client: Optional[RemoteGenerationClient] = None,
        language: Optional[str] = None,
    ) -> None:
        """Initialize the agent.

        Args:
            client: RemoteGenerationClient instance. Created if not provided.
            language: Language for generated dialogue. Defaults to
                config.dialogue_language.
        """
        self._client = client or RemoteGenerationClient()
        self._language = language or config.dialogue_language
        self._logger = logging.getLogger(f"{__name__}.{self.name}")

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the agent's name."""
        ...

    @property
    def system_prompt(self) -> Optional[str]:
        """Return the system prompt for this agent."""
        return None

    @property
    def language(self) -> str:
        return self._language

    @abstractmethod
    async def run(self, input_data: InputT) -> OutputT:
        """Execute the agent's main task."""
        ...

    async def _generate(self, parts: list[PromptPart], output_model: type[ModelT]) -> ModelT:
        """Issue one structured call with the agent's system prompt."""
        self._logger.debug(
            f"Requesting {output_model.__name__} ({len(parts)} part(s), "
            f"prompt length: {sum(len(p) for p in parts if isinstance(p, str))})"
        )
        try:
            result = await self._client.generate_structured(
                parts, output_model, system=self.system_prompt
            )
        except Exception as e:
            self._logger.error(f"Error generating {output_model.__name__}: {e}")
            raise
        self._logger.debug(f"Received {output_model.__name__}")
        return result

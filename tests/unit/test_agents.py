"""Unit tests for the writer and analysis agents."""

from unittest.mock import AsyncMock, Mock

import pytest

from avatarforge.agents import (
    AvatarAnalysisAgent,
    DialogueAgent,
    NarrativeAgent,
    NarrativeInput,
    ProductAnalysisAgent,
    SceneAnalysisAgent,
    ScriptAgent,
    ScriptFormat,
    ScriptInput,
    TextAnalysisAgent,
    TitleAgent,
)
from avatarforge.errors import ContractViolation, ValidationError
from avatarforge.models import (
    MediaPart,
    ProductAnalysis,
    SceneAnalysis,
    SceneNarrative,
    ScriptOutput,
    TextAnalysis,
    TitleOutput,
)
from helpers import PNG_URI


def mock_client(result):
    """Mock RemoteGenerationClient whose structured calls return ``result``."""
    client = Mock()
    client.generate_structured = AsyncMock(return_value=result)
    return client


@pytest.mark.unit
class TestNarrativeAgent:
    """Tests for NarrativeAgent."""

    @pytest.mark.asyncio
    async def test_single_structured_call(self, persona):
        narrative = SceneNarrative(title="T", action="A", dialogue="D")
        client = mock_client(narrative)
        agent = NarrativeAgent(client=client)

        result = await agent.run(NarrativeInput(persona=persona, scenario="consultório azul"))

        assert result == narrative
        client.generate_structured.assert_awaited_once()
        parts, output_model = client.generate_structured.await_args.args
        assert output_model is SceneNarrative
        assert "**Nome:** Dr. Roberto" in parts[0]
        assert "consultório azul" in parts[0]
        assert "Brazilian Portuguese" in parts[0]

    @pytest.mark.asyncio
    async def test_language_override(self, persona):
        client = mock_client(SceneNarrative(title="T", action="A", dialogue="D"))
        agent = NarrativeAgent(client=client, language="English")

        await agent.run(NarrativeInput(persona=persona, scenario="beach"))

        assert "dialogue in English" in client.generate_structured.await_args.args[0][0]

    @pytest.mark.asyncio
    async def test_blank_scenario_rejected(self, persona):
        client = mock_client(None)

        with pytest.raises(ValidationError):
            await NarrativeAgent(client=client).run(NarrativeInput(persona=persona, scenario=" "))
        client.generate_structured.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_generation_errors_propagate(self, persona):
        client = Mock()
        client.generate_structured = AsyncMock(side_effect=ContractViolation("missing dialogue"))

        with pytest.raises(ContractViolation):
            await NarrativeAgent(client=client).run(NarrativeInput(persona=persona, scenario="sala"))


@pytest.mark.unit
class TestWriterAgents:
    """Tests for the single-field writers."""

    @pytest.mark.asyncio
    async def test_title_agent(self):
        client = mock_client(TitleOutput(title="Check-up"))

        result = await TitleAgent(client=client).run("consultório azul")

        assert result.title == "Check-up"
        assert client.generate_structured.await_args.kwargs == {"system": None}

    @pytest.mark.asyncio
    async def test_dialogue_agent_uses_language(self):
        client = mock_client(None)

        await DialogueAgent(client=client, language="Spanish").run("ctx")

        assert "must be in Spanish" in client.generate_structured.await_args.args[0][0]

    @pytest.mark.asyncio
    async def test_empty_context_rejected(self):
        client = mock_client(None)

        with pytest.raises(ValidationError):
            await TitleAgent(client=client).run("")
        client.generate_structured.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_script_agent_sends_system_prompt(self):
        client = mock_client(ScriptOutput(script="# Roteiro"))
        agent = ScriptAgent(client=client)

        result = await agent.run(
            ScriptInput(influencer_details="Ana", scene_details="praia", output_format=ScriptFormat.JSON)
        )

        assert result.script == "# Roteiro"
        assert client.generate_structured.await_args.kwargs["system"] == agent.system_prompt
        assert "The output must be in json format." in client.generate_structured.await_args.args[0][0]


@pytest.mark.unit
class TestAnalysisAgents:
    """Tests for photo and text analysis agents."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "agent_class,result",
        [
            (ProductAnalysisAgent, ProductAnalysis(product_name="p", partner_brand="b", product_description="d")),
            (SceneAnalysisAgent, SceneAnalysis(description="sala clara")),
        ],
    )
    async def test_photo_sent_after_prompt(self, agent_class, result):
        client = mock_client(result)

        assert await agent_class(client=client).run(PNG_URI) == result

        parts = client.generate_structured.await_args.args[0]
        assert isinstance(parts[0], str)
        assert parts[1] == MediaPart(url=PNG_URI)

    @pytest.mark.asyncio
    async def test_non_image_rejected(self):
        client = mock_client(None)

        with pytest.raises(ValidationError):
            await AvatarAnalysisAgent(client=client).run("data:video/mp4;base64,AAAA")
        with pytest.raises(ValidationError):
            await AvatarAnalysisAgent(client=client).run("/tmp/photo.png")
        client.generate_structured.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_text_analysis(self):
        client = mock_client(TextAnalysis(name="Maria", niche="Fitness"))

        result = await TextAnalysisAgent(client=client).run("Maria é personal trainer")

        assert result.niche == "Fitness"
        assert "Text: Maria é personal trainer" in client.generate_structured.await_args.args[0][0]

    @pytest.mark.asyncio
    async def test_blank_text_rejected(self):
        with pytest.raises(ValidationError):
            await TextAnalysisAgent(client=mock_client(None)).run("  ")

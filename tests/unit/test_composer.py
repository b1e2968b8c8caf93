"""Unit tests for prompt composition."""

import pytest

from avatarforge import composer
from avatarforge.models import (
    CameraAngle,
    PersonaProfile,
    ProductSpec,
    SceneNarrative,
    SceneSpec,
    ScriptDocument,
)
from helpers import JPEG_URI, PNG_URI


@pytest.fixture
def narrative() -> SceneNarrative:
    return SceneNarrative(
        title="Check-up em 1 minuto",
        action="Explica a importância do check-up anual",
        dialogue="Oi, gente! Hoje vamos falar de prevenção.",
    )


@pytest.mark.unit
class TestDescribePersona:
    """Tests for the persona block."""

    def test_renders_labelled_fields_in_order(self, persona):
        text = composer.describe_persona(persona)
        lines = text.splitlines()

        assert lines[0] == "**Nome:** Dr. Roberto"
        assert lines[1] == "**Nicho:** Saúde"
        assert "**Sotaque:** Carioca" in lines
        assert len(lines) == len(composer.PERSONA_FIELDS)

    def test_missing_fields_render_marker(self):
        text = composer.describe_persona(PersonaProfile(name="Ana"))

        assert "**Nome:** Ana" in text
        assert f"**Nicho:** {composer.NOT_SPECIFIED}" in text
        assert f"**Vestuário:** {composer.NOT_SPECIFIED}" in text


@pytest.mark.unit
class TestProductBlock:
    """Tests for product integration rendering."""

    def test_partnership_product(self, product):
        block = composer.render_product_block(product)

        assert block.startswith("**Integração de Produto:**")
        assert "- Produto: VitaMax" in block
        assert "- Marca: NutriCorp" in block
        assert "- Parceria: Sim" in block

    def test_missing_brand_renders_na(self):
        block = composer.render_product_block(ProductSpec(product_name="Garrafa"))

        assert "- Marca: N/A" in block
        assert "- Parceria: Não" in block

    def test_scenario_without_product_is_unchanged(self, scene):
        assert composer.compose_scenario(scene) == "consultório azul"

    def test_scenario_with_product_appends_block(self, scene, product):
        scenario = composer.compose_scenario(scene, product)

        assert scenario.startswith("consultório azul\n\n**Integração de Produto:**")


@pytest.mark.unit
class TestMergeNegativePrompts:
    """Tests for negative prompt merging."""

    def test_drops_case_insensitive_repeats(self):
        merged = composer.merge_negative_prompts("Blurry, text", "blurry, deformed hands")
        assert merged == "Blurry, text, deformed hands"

    def test_all_empty_returns_none(self):
        assert composer.merge_negative_prompts(None, "", " , ") is None


@pytest.mark.unit
class TestComposeVideoPrompt:
    """Tests for the scene video prompt."""

    def test_same_inputs_same_prompt(self, persona, scene, narrative):
        first = composer.compose_video_prompt(persona, scene, narrative)
        second = composer.compose_video_prompt(persona, scene, narrative)

        assert first == second

    def test_contains_all_sections(self, persona, scene, narrative):
        text = composer.compose_video_prompt(persona, scene, narrative).text

        assert "Scene Title: Check-up em 1 minuto" in text
        assert "**Nome:** Dr. Roberto" in text
        assert "**Cenário:** consultório azul" in text
        assert "Main Action: Explica a importância do check-up anual" in text
        assert "Dialogue: Oi, gente! Hoje vamos falar de prevenção." in text
        assert "Accent: Carioca" in text
        assert "Camera Angle: Dynamic Camera" in text
        assert "Video Format: 9:16" in text
        assert "Duration: 8 seconds" in text
        assert "Allow Digital On-Screen Text: No" in text
        assert f"Quality: {composer.NO_QUALITY}" in text

    def test_empty_dialogue_renders_marker(self, persona, scene):
        narrative = SceneNarrative(title="T", action="A", dialogue="  ")
        text = composer.compose_video_prompt(persona, scene, narrative).text

        assert f"Dialogue: {composer.NO_DIALOGUE}" in text

    def test_scene_options_are_rendered(self, persona, narrative):
        scene = SceneSpec(
            scenario="praia",
            camera_angle=CameraAngle.POV,
            duration=5,
            aspect_ratio="16:9",
            allow_digital_text=True,
            hyperrealism=True,
            four_k=True,
        )
        prompt = composer.compose_video_prompt(persona, scene, narrative)

        assert "Camera Angle: Point of View (POV)" in prompt.text
        assert "Duration: 5 seconds" in prompt.text
        assert "Allow Digital On-Screen Text: Yes" in prompt.text
        assert "Quality: hyperrealistic, 4K resolution" in prompt.text
        assert prompt.config.duration_seconds == 5
        assert prompt.config.aspect_ratio == "16:9"

    def test_product_block_inside_scenario(self, persona, scene, narrative, product):
        text = composer.compose_video_prompt(persona, scene, narrative, product).text
        assert "**Cenário:** consultório azul\n\n**Integração de Produto:**" in text

    def test_negative_prompts_are_merged(self, persona, narrative):
        scene = SceneSpec(scenario="sala", negative_prompt="text, Blurry")
        prompt = composer.compose_video_prompt(persona, scene, narrative)

        assert prompt.config.negative_prompt == "text, Blurry, deformed hands"

    def test_no_image_gives_text_only_parts(self, persona, scene, narrative):
        prompt = composer.compose_video_prompt(persona, scene, narrative)

        assert prompt.media is None
        assert prompt.parts == [prompt.text]

    @pytest.mark.parametrize(
        "scene_image,product_image,reference_image,expected",
        [
            (PNG_URI, JPEG_URI, JPEG_URI, PNG_URI),
            (None, PNG_URI, JPEG_URI, PNG_URI),
            (None, None, PNG_URI, PNG_URI),
        ],
    )
    def test_reference_image_precedence(
        self, narrative, scene_image, product_image, reference_image, expected
    ):
        persona = PersonaProfile(name="Ana", reference_image=reference_image)
        scene = SceneSpec(scenario="sala", scene_image=scene_image)
        product = ProductSpec(product_name="X", product_image=product_image)

        prompt = composer.compose_video_prompt(persona, scene, narrative, product)

        assert prompt.media.url == expected
        assert prompt.parts[-1] is prompt.media


@pytest.mark.unit
class TestComposeScriptVideoPrompt:
    """Tests for the script-driven video prompt."""

    def test_uses_only_first_scene(self, script_data):
        prompt = composer.compose_script_video_prompt(ScriptDocument.model_validate(script_data))

        assert "Consultório azul, plano 1" in prompt.text
        assert "Dialogue: Fala 1" in prompt.text
        assert "Fala 2" not in prompt.text
        assert "plano 4" not in prompt.text

    def test_duration_is_end_minus_start(self, script_data):
        script_data["scenes"][0]["start_time"] = 1.5
        script_data["scenes"][0]["end_time"] = 4.0
        prompt = composer.compose_script_video_prompt(ScriptDocument.model_validate(script_data))

        assert "Duration: 2.5 seconds" in prompt.text
        assert prompt.config.duration_seconds == 2.5

    def test_defaults_and_character(self, script_data):
        text = composer.compose_script_video_prompt(ScriptDocument.model_validate(script_data)).text

        assert "Scene Title: Rotina Saudável" in text
        assert "**Character Name:** Dr. Roberto" in text
        assert "Main Action: The character, Dr. Roberto, is performing. Slow push-in" in text
        assert "Accent: Padrão" in text
        assert "Camera Angle: Dynamic Camera" in text
        assert "Duration: 2 seconds" in text

    def test_product_integration_rendered_when_present(self, script_data):
        text = composer.compose_script_video_prompt(ScriptDocument.model_validate(script_data)).text
        assert "- Produto: VitaMax" in text

        script_data["product_integration"]["is_present"] = False
        text = composer.compose_script_video_prompt(ScriptDocument.model_validate(script_data)).text
        assert "Integração de Produto" not in text


@pytest.mark.unit
def test_ancillary_prompts_carry_context_and_language():
    ctx = composer.scene_context("Título", "consultório azul", None)

    assert ctx == f"Título: Título, Cenário: consultório azul, Ação: {composer.NOT_SPECIFIED}"
    assert "Context: " + ctx in composer.seo_prompt(ctx)
    assert "must be in Brazilian Portuguese" in composer.dialogue_prompt(ctx, "Brazilian Portuguese")
    assert "Text: Maria, fitness" in composer.text_analysis_prompt("Maria, fitness")

"""Prompt composition for every generation call.

All functions here are pure: the same records always render to the same
strings, so composed prompts can be compared, cached and asserted on.
Missing optional values are rendered as explicit markers instead of being
dropped.
"""

from dataclasses import dataclass
from typing import Optional

from .models import (
    MediaPart,
    PersonaProfile,
    ProductSpec,
    SceneNarrative,
    SceneSpec,
    ScriptDocument,
    VideoConfig,
)

NOT_SPECIFIED = "Não especificado"
DEFAULT_ACCENT = "Padrão"
DEFAULT_CAMERA = "Dynamic Camera"
DEFAULT_FORMAT = "9:16"
NO_DIALOGUE = "No dialogue."
NO_QUALITY = "Not specified"

# (label, attribute) pairs, in the order they appear in the persona block
PERSONA_FIELDS = (
    ("Nome", "name"),
    ("Nicho", "niche"),
    ("Idade", "age"),
    ("Gênero", "gender"),
    ("Sotaque", "accent"),
    ("Biografia", "short_bio"),
    ("Traço Único", "unique_trait"),
    ("Traços de Personalidade", "personality_traits"),
    ("Detalhes de Aparência", "appearance_details"),
    ("Vestuário", "clothing"),
    ("Características Adicionais", "characteristics"),
)


@dataclass(frozen=True)
class VideoPrompt:
    """Everything sent with a video generation request."""

    text: str
    config: VideoConfig
    media: Optional[MediaPart] = None

    @property
    def parts(self) -> list:
        """Multi-part prompt: the instruction block, then the reference image."""
        if self.media:
            return [self.text, self.media]
        return [self.text]


def _value(value: Optional[str], marker: str = NOT_SPECIFIED) -> str:
    if value is None:
        return marker
    value = str(value).strip()
    return value or marker


def _yes_no(flag: bool, yes: str = "Yes", no: str = "No") -> str:
    return yes if flag else no


def _format_seconds(seconds: float) -> str:
    if float(seconds).is_integer():
        return str(int(seconds))
    return str(seconds)


def merge_negative_prompts(*prompts: Optional[str]) -> Optional[str]:
    """Merge comma-separated negative prompts, dropping repeats.

    The first spelling of a term wins; comparison ignores case.
    """
    seen: set[str] = set()
    terms: list[str] = []
    for prompt in prompts:
        if not prompt:
            continue
        for term in prompt.split(","):
            term = term.strip()
            if term and term.lower() not in seen:
                seen.add(term.lower())
                terms.append(term)
    return ", ".join(terms) or None


# --- Records ----------------------------------------------------------------


def describe_persona(persona: PersonaProfile) -> str:
    """Render the persona as a labelled block."""
    return "\n".join(
        f"**{label}:** {_value(getattr(persona, attr))}" for label, attr in PERSONA_FIELDS
    )


def render_product_block(product: ProductSpec) -> str:
    """Render the product integration block appended to a scenario."""
    return "\n".join([
        "**Integração de Produto:**",
        f"- Produto: {_value(product.product_name)}",
        f"- Marca: {_value(product.partner_brand, 'N/A')}",
        f"- Descrição: {_value(product.description)}",
        f"- Parceria: {_yes_no(product.is_partnership, 'Sim', 'Não')}",
    ])


def compose_scenario(scene: SceneSpec, product: Optional[ProductSpec] = None) -> str:
    """Scenario text, with the product block appended when a product is attached."""
    scenario = scene.scenario.strip()
    if product is not None:
        scenario += "\n\n" + render_product_block(product)
    return scenario


def scene_context(title: Optional[str], scenario: str, action: Optional[str]) -> str:
    """One-line context used by the SEO and dialogue writers."""
    return f"Título: {_value(title)}, Cenário: {scenario}, Ação: {_value(action)}"


# --- Ancillary generators ---------------------------------------------------


def title_prompt(context: str) -> str:
    return "\n".join([
        "Based on the following context, generate a short, catchy title for a video scene.",
        f"Context: {context}",
        "Generate a title that is less than 10 words.",
    ])


def action_prompt(context: str) -> str:
    return "\n".join([
        "Based on the following scenario, describe a main action for an influencer in a video scene.",
        f"Scenario: {context}",
        "Describe a clear and engaging action.",
    ])


def dialogue_prompt(context: str, language: str) -> str:
    return "\n".join([
        "Based on the following context, generate a short and engaging dialogue "
        f"for an influencer in a video scene. The dialogue must be in {language}.",
        f"Context: {context}",
    ])


def seo_prompt(context: str) -> str:
    return "\n".join([
        "Based on the following context, generate SEO content for a video. "
        "Include a compelling title, a short description, and relevant keywords.",
        f"Context: {context}",
    ])


def script_prompt(persona_text: str, scene_text: str, output_format: str, language: str) -> str:
    return "\n".join([
        "You are a professional screenwriter. Create a detailed video script based on "
        "the influencer and scene provided.",
        "The script should include scene descriptions, camera directions, dialogues, and actions.",
        f"The dialogue must always be in {language}.",
        "",
        "Influencer Details:",
        persona_text,
        "",
        "Scene Details:",
        scene_text,
        "",
        f"The output must be in {output_format} format.",
        'If the output format is JSON, provide a structured script with keys like "title", '
        '"scenes", "camera_angles", "dialogue", "actions".',
        "If the output format is Markdown, use appropriate formatting for titles, scenes, and dialogues.",
    ])


def narrative_prompt(persona_text: str, scenario: str, language: str) -> str:
    """Single request for a scene's title, action and dialogue."""
    return "\n".join([
        "Based on the following influencer and scenario, generate the details for a "
        "compelling video scene.",
        "Provide a title of less than 10 words, a clear and engaging main action, and a "
        f"short and engaging dialogue in {language}.",
        "",
        "Influencer Description:",
        persona_text,
        "",
        "Scenario:",
        scenario,
    ])


# --- Analyses ---------------------------------------------------------------


def avatar_analysis_prompt() -> str:
    return "\n".join([
        "Analyze the provided image of a person and generate a detailed profile for them as a "
        "digital influencer. Fill in all the fields of the output schema based on the image. "
        "Be creative but realistic. The influencer should be relatable and have a clear niche.",
        "Also, provide a set of useful, comma-separated negative prompts to avoid common "
        "generation errors (like deformed hands, blurry images, etc.).",
    ])


def product_analysis_prompt() -> str:
    return (
        "Analyze the provided image of a product and generate details about it. "
        "Fill in all the fields of the output schema based on the image."
    )


def scene_analysis_prompt() -> str:
    return "\n".join([
        "Analyze the provided image of a scene and generate a detailed and faithful description.",
        "Focus on the environment, lighting, dominant colors, objects, materials, and the overall atmosphere.",
        "This description will be used to generate a video scene. Ignore any people in the "
        "image and focus only on the scenery.",
    ])


def text_analysis_prompt(text: str) -> str:
    return "\n".join([
        "Analyze the following text description of an influencer and extract their name and niche.",
        f"Text: {text}",
    ])


# --- Video ------------------------------------------------------------------


def _quality_directives(scene: SceneSpec) -> str:
    directives = []
    if scene.hyperrealism:
        directives.append("hyperrealistic")
    if scene.four_k:
        directives.append("4K resolution")
    if scene.professional_camera:
        directives.append("shot on a professional cinema camera")
    return ", ".join(directives) or NO_QUALITY


def _render_video_block(
    title: str,
    scenario_text: str,
    action: str,
    dialogue: Optional[str],
    accent: Optional[str],
    camera: Optional[str],
    video_format: Optional[str],
    duration: float,
    allow_digital_text: bool = False,
    allow_physical_text: bool = False,
    quality: str = NO_QUALITY,
) -> str:
    return "\n".join([
        f"Scene Title: {title}",
        f"Scenario and Influencer Details: {scenario_text}",
        f"Main Action: {action}",
        f"Dialogue: {_value(dialogue, NO_DIALOGUE)}",
        f"Accent: {_value(accent, DEFAULT_ACCENT)}",
        f"Camera Angle: {_value(camera, DEFAULT_CAMERA)}",
        f"Video Format: {_value(video_format, DEFAULT_FORMAT)}",
        f"Duration: {_format_seconds(duration)} seconds",
        f"Allow Digital On-Screen Text: {_yes_no(allow_digital_text)}",
        f"Allow Only Physical Text (labels, signs): {_yes_no(allow_physical_text)}",
        f"Quality: {quality}",
        "Generate a video of the described influencer in the specified scenario, "
        "performing the main action and speaking the dialogue.",
    ])


def compose_video_prompt(
    persona: PersonaProfile,
    scene: SceneSpec,
    narrative: SceneNarrative,
    product: Optional[ProductSpec] = None,
) -> VideoPrompt:
    """Compose the video instruction block, its config and reference image.

    The reference image is the scene photo, else the product photo, else the
    persona's reference photo.
    """
    scenario_text = (
        f"{describe_persona(persona)}\n\n**Cenário:** {compose_scenario(scene, product)}"
    )
    text = _render_video_block(
        title=narrative.title,
        scenario_text=scenario_text,
        action=narrative.action,
        dialogue=narrative.dialogue,
        accent=persona.accent,
        camera=scene.camera_angle.label,
        video_format=scene.aspect_ratio.value,
        duration=scene.duration,
        allow_digital_text=scene.allow_digital_text,
        allow_physical_text=scene.allow_physical_text,
        quality=_quality_directives(scene),
    )

    image = scene.scene_image or (product.product_image if product else None) or persona.reference_image
    config = VideoConfig(
        duration_seconds=scene.duration,
        aspect_ratio=scene.aspect_ratio.value,
        negative_prompt=merge_negative_prompts(scene.negative_prompt, persona.negative_prompt),
    )
    return VideoPrompt(text=text, config=config, media=MediaPart(url=image) if image else None)


def compose_script_video_prompt(script: ScriptDocument) -> VideoPrompt:
    """Compose the video prompt for the first scene of a script.

    Only ``scenes[0]`` is rendered; its duration is ``end_time - start_time``.
    """
    character = script.character
    first = script.scenes[0]

    scenario_lines = [
        f"**Character Name:** {character.name}",
        f"**Character Appearance:** {character.appearance}",
        f"**Character Style:** {character.style}",
        "",
        f"**Scene Description:** {first.visual_prompt}",
        f"**Character Expression:** {first.expression}",
    ]
    integration = script.product_integration
    if integration and integration.is_present:
        scenario_lines.extend([
            "",
            "**Integração de Produto:**",
            f"- Produto: {_value(integration.product_name)}",
            f"- Descrição: {_value(integration.integration_description)}",
        ])

    video_format = script.format or DEFAULT_FORMAT
    text = _render_video_block(
        title=script.title,
        scenario_text="\n".join(scenario_lines),
        action=f"The character, {character.name}, is performing. {first.camera_direction}",
        dialogue=first.dialogue,
        accent=DEFAULT_ACCENT if script.language == "pt-BR" else None,
        camera=None,
        video_format=video_format,
        duration=first.duration,
    )
    config = VideoConfig(duration_seconds=first.duration, aspect_ratio=video_format)
    return VideoPrompt(text=text, config=config)

"""CLI entry point for AvatarForge."""

import asyncio
import logging
from enum import Enum
from pathlib import Path
from typing import Optional

import typer
import yaml

from . import __version__
from .config import config
from .errors import ForgeError
from .models import AspectRatio, CameraAngle, PersonaProfile, ProductSpec, SceneRequest, encode_file
from .storage import open_gallery

app = typer.Typer(
    name="avatarforge",
    help="AI influencer scene and video generator",
    no_args_is_help=True
)
gallery_app = typer.Typer(help="Manage saved scenes, avatars and products", no_args_is_help=True)
app.add_typer(gallery_app, name="gallery")


def setup_logging(verbose: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
    )


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"avatarforge version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit"
    )
) -> None:
    """AvatarForge - Create influencer videos from personas and scenes using AI."""
    pass


class GalleryKind(str, Enum):
    """Saved record collections."""
    SCENES = "scenes"
    AVATARS = "avatars"
    PRODUCTS = "products"


class WriterKind(str, Enum):
    """Ancillary copy generators."""
    TITLE = "title"
    ACTION = "action"
    DIALOGUE = "dialogue"
    SEO = "seo"
    SCRIPT = "script"


class AnalysisKind(str, Enum):
    """Record analyses."""
    AVATAR = "avatar"
    PRODUCT = "product"
    SCENE = "scene"
    TEXT = "text"


def _fail(message: str) -> None:
    typer.echo(f"❌ {message}")
    raise typer.Exit(1)


def _load_record(reference: str, kind: str, model):
    """Load a record from a YAML file path or a gallery id."""
    path = Path(reference)
    if path.suffix in (".yaml", ".yml") and path.exists():
        with open(path, "r", encoding="utf-8") as f:
            return model.model_validate(yaml.safe_load(f))
    return open_gallery(kind).get(reference)


def _preview(text: str, limit: int = 70) -> str:
    return text[:limit] + "..." if len(text) > limit else text


def _elide_images(data: dict) -> dict:
    return {
        key: f"<data URI, {len(value)} chars>" if isinstance(value, str) and value.startswith("data:") else value
        for key, value in data.items()
    }


@app.command()
def scene(
    avatar: str = typer.Option(
        ...,
        "--avatar",
        "-a",
        help="Avatar gallery id or path to an avatar YAML file"
    ),
    scenario: str = typer.Option(
        ...,
        "--scenario",
        "-s",
        help="Environment description"
    ),
    title: Optional[str] = typer.Option(None, "--title", help="Scene title (generated if omitted)"),
    action: Optional[str] = typer.Option(None, "--action", help="Main action (generated if omitted)"),
    dialogue: Optional[str] = typer.Option(None, "--dialogue", help="Dialogue (generated if omitted)"),
    camera: CameraAngle = typer.Option(CameraAngle.DYNAMIC, "--camera", "-c", help="Camera angle"),
    duration: int = typer.Option(8, "--duration", "-d", help="Duration in seconds (5 or 8)"),
    aspect_ratio: AspectRatio = typer.Option(
        AspectRatio.VERTICAL, "--aspect-ratio", help="Aspect ratio"
    ),
    digital_text: bool = typer.Option(False, "--digital-text", help="Allow digital on-screen text"),
    physical_text: bool = typer.Option(
        False, "--physical-text", help="Allow only physical text (labels, signs)"
    ),
    scene_image: Optional[Path] = typer.Option(
        None, "--scene-image", "-i", help="Reference photo of the scene", exists=True, dir_okay=False
    ),
    product: Optional[str] = typer.Option(
        None, "--product", "-p", help="Product gallery id or path to a product YAML file"
    ),
    negative: Optional[str] = typer.Option(None, "--negative", "-n", help="Negative prompt"),
    hyperrealism: bool = typer.Option(False, "--hyperrealism", help="Hyperrealistic rendering"),
    four_k: bool = typer.Option(False, "--4k", help="High-resolution rendering"),
    professional_camera: bool = typer.Option(
        False, "--pro-camera", help="Simulate a professional camera"
    ),
    output: Path = typer.Option(Path("output/scene.mp4"), "--output", "-o", help="Output video path"),
    save: bool = typer.Option(False, "--save", help="Save the resolved scene to the gallery"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
) -> None:
    """Generate a full scene video: title, action and dialogue, then the video."""
    from .orchestrator import SceneOrchestrator, save_generation_metadata

    setup_logging(verbose)
    typer.echo(f"🎬 Composing scene: {_preview(scenario)}")

    try:
        persona = _load_record(avatar, "avatars", PersonaProfile)
        product_spec = _load_record(product, "products", ProductSpec) if product else None
        request = SceneRequest.from_dict({
            "persona": persona.model_dump(),
            "product": product_spec.model_dump() if product_spec else None,
            "scene": {
                "title": title,
                "scenario": scenario,
                "action": action,
                "dialogue": dialogue,
                "camera_angle": camera,
                "duration": duration,
                "aspect_ratio": aspect_ratio,
                "allow_digital_text": digital_text,
                "allow_physical_text": physical_text,
                "scene_image": encode_file(scene_image) if scene_image else None,
                "negative_prompt": negative,
                "hyperrealism": hyperrealism,
                "four_k": four_k,
                "professional_camera": professional_camera,
            },
        })
    except (ForgeError, ValueError) as e:
        _fail(f"Invalid input: {e}")

    typer.echo(f"   Avatar: {request.persona.name or request.persona.id}")
    if request.product:
        typer.echo(f"   Product: {request.product.product_name}")
    typer.echo(f"   Format: {aspect_ratio.value}, {duration}s, {camera.value}")
    typer.echo("   Generating (this may take a minute)...")

    async def _compose():
        async with SceneOrchestrator() as orchestrator:
            return await orchestrator.compose_scene(request)

    try:
        result = asyncio.run(_compose())
    except ForgeError as e:
        _fail(f"Generation failed: {e}")

    result.video.save(output)
    save_generation_metadata(result, output.with_suffix(".json"))
    typer.echo(f"\n✅ Video saved: {output} ({result.video.size} bytes)")
    typer.echo(f"   Title: {result.title}")
    typer.echo(f"   Action: {result.action}")
    typer.echo(f"   Dialogue: {result.dialogue}")

    if save:
        saved = open_gallery("scenes").upsert(result.apply_to(request.scene))
        typer.echo(f"   Saved scene {saved.id} to gallery")


@app.command()
def script(
    script_file: Path = typer.Argument(
        ...,
        help="Path to a JSON script file",
        exists=True,
        file_okay=True,
        dir_okay=False
    ),
    output: Path = typer.Option(Path("output/script.mp4"), "--output", "-o", help="Output video path"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
) -> None:
    """Generate a video from the first scene of a JSON script."""
    from .orchestrator import ScriptDrivenOrchestrator, parse_script, save_generation_metadata

    setup_logging(verbose)
    typer.echo(f"📜 Script: {script_file}")

    try:
        document = parse_script(script_file.read_text())
    except ForgeError as e:
        _fail(f"Error loading script: {e}")

    typer.echo(f"   Title: {document.title}")
    typer.echo(f"   Scenes: {len(document.scenes)}")
    if len(document.scenes) > 1:
        typer.echo("   ⚠️  Only the first scene is rendered; multi-scene stitching is not supported")

    async def _generate():
        async with ScriptDrivenOrchestrator() as orchestrator:
            return await orchestrator.generate_from_script(document)

    try:
        result = asyncio.run(_generate())
    except ForgeError as e:
        _fail(f"Generation failed: {e}")

    result.video.save(output)
    save_generation_metadata(result, output.with_suffix(".json"))
    typer.echo(f"\n✅ Scene {result.scene_id} saved: {output} ({result.duration_seconds:g}s)")


@app.command()
def write(
    kind: WriterKind = typer.Argument(..., help="What to write"),
    context: str = typer.Argument(..., help="Scenario, scene details or other context"),
    avatar: Optional[str] = typer.Option(
        None, "--avatar", "-a", help="Avatar id or YAML file (required for scripts)"
    ),
    output_format: str = typer.Option(
        "markdown", "--format", "-f", help="Script format: markdown or json"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
) -> None:
    """Write a title, action, dialogue, SEO copy or script with AI."""
    from . import composer
    from .agents import ActionAgent, DialogueAgent, ScriptAgent, ScriptFormat, ScriptInput, SeoAgent, TitleAgent
    from .services import RemoteGenerationClient

    setup_logging(verbose)
    typer.echo(f"✍️  Writing {kind.value} ({config.text_provider})")

    async def _write() -> str:
        async with RemoteGenerationClient() as client:
            if kind == WriterKind.TITLE:
                return (await TitleAgent(client=client).run(context)).title
            if kind == WriterKind.ACTION:
                return (await ActionAgent(client=client).run(context)).action
            if kind == WriterKind.DIALOGUE:
                return (await DialogueAgent(client=client).run(context)).dialogue
            if kind == WriterKind.SEO:
                return (await SeoAgent(client=client).run(context)).seo

            if not avatar:
                raise typer.BadParameter("--avatar is required for scripts")
            persona = _load_record(avatar, "avatars", PersonaProfile)
            script_input = ScriptInput(
                influencer_details=composer.describe_persona(persona),
                scene_details=context,
                output_format=ScriptFormat(output_format),
            )
            return (await ScriptAgent(client=client).run(script_input)).script

    try:
        text = asyncio.run(_write())
    except ValueError as e:
        _fail(f"Invalid input: {e}")
    except ForgeError as e:
        _fail(f"Generation failed: {e}")

    typer.echo("")
    typer.echo(text)


@app.command()
def analyze(
    kind: AnalysisKind = typer.Argument(..., help="What to analyze"),
    source: str = typer.Argument(..., help="Image path (avatar, product, scene) or text"),
    save: bool = typer.Option(False, "--save", help="Save the result to the gallery"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
) -> None:
    """Fill in an avatar, product or scene from a photo, or an avatar from text."""
    from .agents import AvatarAnalysisAgent, ProductAnalysisAgent, SceneAnalysisAgent, TextAnalysisAgent
    from .models import SceneSpec
    from .services import RemoteGenerationClient

    setup_logging(verbose)

    photo = None
    if kind != AnalysisKind.TEXT:
        path = Path(source)
        if not path.is_file():
            _fail(f"Image not found: {path}")
        photo = encode_file(path)
    typer.echo(f"🔎 Analyzing {kind.value}")

    async def _analyze():
        async with RemoteGenerationClient() as client:
            if kind == AnalysisKind.AVATAR:
                return "avatars", (await AvatarAnalysisAgent(client=client).run(photo)).to_persona(photo)
            if kind == AnalysisKind.PRODUCT:
                return "products", (await ProductAnalysisAgent(client=client).run(photo)).to_product(photo)
            if kind == AnalysisKind.SCENE:
                analysis = await SceneAnalysisAgent(client=client).run(photo)
                return "scenes", SceneSpec(scenario=analysis.description, scene_image=photo)
            analysis = await TextAnalysisAgent(client=client).run(source)
            return "avatars", PersonaProfile(name=analysis.name, niche=analysis.niche)

    try:
        gallery, record = asyncio.run(_analyze())
    except ForgeError as e:
        _fail(f"Analysis failed: {e}")

    typer.echo("")
    typer.echo(yaml.safe_dump(
        _elide_images(record.model_dump(mode="json", exclude={"id"})),
        allow_unicode=True,
        sort_keys=False,
    ))

    if save:
        open_gallery(gallery).upsert(record)
        typer.echo(f"✅ Saved to {gallery} gallery: {record.id}")


@gallery_app.command("list")
def gallery_list(kind: GalleryKind = typer.Argument(..., help="Gallery to list")) -> None:
    """List saved records."""
    try:
        records = open_gallery(kind.value).list()
    except ForgeError as e:
        _fail(f"Error loading gallery: {e}")

    if not records:
        typer.echo(f"No {kind.value} saved yet")
        return

    typer.echo(f"📁 {kind.value.capitalize()} ({len(records)}):")
    for record in records:
        typer.echo(f"   {record.id}  {_preview(record.display_name, 60)}")


@gallery_app.command("show")
def gallery_show(
    kind: GalleryKind = typer.Argument(..., help="Gallery"),
    record_id: str = typer.Argument(..., help="Record id"),
) -> None:
    """Show one saved record."""
    try:
        record = open_gallery(kind.value).get(record_id)
    except ForgeError as e:
        _fail(str(e))

    typer.echo(yaml.safe_dump(
        _elide_images(record.model_dump(mode="json")), allow_unicode=True, sort_keys=False
    ))


@gallery_app.command("delete")
def gallery_delete(
    kind: GalleryKind = typer.Argument(..., help="Gallery"),
    record_id: str = typer.Argument(..., help="Record id"),
) -> None:
    """Delete a saved record."""
    if not open_gallery(kind.value).delete(record_id):
        _fail(f"No record with id {record_id} in {kind.value}")
    typer.echo(f"🗑️  Deleted {record_id}")


@gallery_app.command("import")
def gallery_import(
    kind: GalleryKind = typer.Argument(..., help="Gallery"),
    file: Path = typer.Argument(..., help="YAML file with one record or a list", exists=True, dir_okay=False),
) -> None:
    """Import records from a YAML file."""
    repository = open_gallery(kind.value)
    with open(file, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    items = data if isinstance(data, list) else [data]

    try:
        for item in items:
            record = repository.upsert(repository.model.model_validate(item))
            typer.echo(f"   + {record.id}  {_preview(record.display_name, 60)}")
    except ValueError as e:
        _fail(f"Invalid record: {e}")

    typer.echo(f"✅ Imported {len(items)} record(s) into {kind.value}")


if __name__ == "__main__":
    app()

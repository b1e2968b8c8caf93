"""Scene orchestration: narrative, video submission, polling and download.

Stages run strictly in sequence. The first failure aborts the pipeline and
propagates with its ``stage`` set; nothing is retried and no partial video
is ever returned.
"""

import asyncio
import json
import logging
from contextlib import contextmanager
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Iterator, Optional, Union

from . import composer
from .agents import NarrativeAgent, NarrativeInput
from .composer import VideoPrompt
from .errors import ForgeError, ValidationError
from .models import (
    EncodedAsset,
    GeneratedSceneResult,
    PersonaProfile,
    SceneNarrative,
    SceneRequest,
    SceneSpec,
    ScriptDocument,
    ScriptVideoResult,
    parse_data_uri,
)
from .models.scene import ALLOWED_DURATIONS
from .services import MediaFetcher, OperationPoller, RemoteGenerationClient

logger = logging.getLogger(__name__)


class Stage(str, Enum):
    """Pipeline stages, in execution order."""

    VALIDATE = "validate"
    NARRATIVE = "narrative"
    COMPOSE = "compose"
    SUBMIT = "submit"
    POLL = "poll"
    FETCH = "fetch"


@contextmanager
def _stage(stage: Stage) -> Iterator[None]:
    """Tag any ForgeError escaping the block with ``stage``."""
    try:
        yield
    except ForgeError as e:
        if e.stage is None:
            e.stage = stage.value
        raise


def _present(value: Optional[str]) -> Optional[str]:
    if value and value.strip():
        return value.strip()
    return None


class VideoPipeline:
    """Submit → poll → fetch, shared by both orchestrators."""

    def __init__(
        self,
        client: Optional[RemoteGenerationClient] = None,
        poller: Optional[OperationPoller] = None,
        fetcher: Optional[MediaFetcher] = None,
    ) -> None:
        """Initialize the pipeline.

        Args:
            client: Generation client. Created from config if not provided.
            poller: Operation poller. Defaults to one polling ``client``.
            fetcher: Media fetcher. Created from config if not provided.
        """
        self._client = client or RemoteGenerationClient()
        self._poller = poller or OperationPoller(self._client)
        self._fetcher = fetcher or MediaFetcher()

    @property
    def client(self) -> RemoteGenerationClient:
        return self._client

    async def aclose(self) -> None:
        await self._client.aclose()
        await self._fetcher.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def _render(
        self, prompt: VideoPrompt, cancel_event: Optional[asyncio.Event] = None
    ) -> tuple[EncodedAsset, str]:
        with _stage(Stage.SUBMIT):
            handle = await self._client.submit_video(prompt)

        with _stage(Stage.POLL):
            completed = await self._poller.wait(handle, cancel_event=cancel_event)

        with _stage(Stage.FETCH):
            asset = await self._fetcher.fetch(completed.media)

        return asset, completed.name


class SceneOrchestrator(VideoPipeline):
    """Turns a persona, a scene and an optional product into a video."""

    def __init__(
        self,
        client: Optional[RemoteGenerationClient] = None,
        poller: Optional[OperationPoller] = None,
        fetcher: Optional[MediaFetcher] = None,
        narrative_agent: Optional[NarrativeAgent] = None,
    ) -> None:
        super().__init__(client, poller, fetcher)
        self._narrative_agent = narrative_agent or NarrativeAgent(client=self._client)

    def validate(self, request: SceneRequest) -> None:
        """Check the request before any remote call.

        Raises:
            ValidationError: If the scenario is blank, the duration is not
                supported, or an attached image is not a data URI.
        """
        scene = request.scene
        if not _present(scene.scenario):
            raise ValidationError("Scenario description is required")
        if scene.duration not in ALLOWED_DURATIONS:
            raise ValidationError(
                f"Duration must be one of {ALLOWED_DURATIONS}, got {scene.duration}"
            )

        images = {
            "scene image": scene.scene_image,
            "persona reference image": request.persona.reference_image,
            "product image": request.product.product_image if request.product else None,
        }
        for label, image in images.items():
            if image:
                try:
                    parse_data_uri(image)
                except ValidationError as e:
                    raise ValidationError(f"Invalid {label}: {e.message}")

    async def resolve_narrative(
        self, persona: PersonaProfile, scene: SceneSpec, scenario: Optional[str] = None
    ) -> SceneNarrative:
        """Fill in whichever of title, action and dialogue the scene lacks.

        Makes no remote call when all three are supplied, otherwise exactly
        one. Supplied values always win over generated ones.
        """
        title, action, dialogue = _present(scene.title), _present(scene.action), _present(scene.dialogue)
        if title and action and dialogue:
            logger.info("Scene narrative fully supplied; skipping generation")
            return SceneNarrative(title=title, action=action, dialogue=dialogue)

        missing = [name for name, value in (("title", title), ("action", action), ("dialogue", dialogue)) if not value]
        logger.info(f"Generating scene narrative (missing: {', '.join(missing)})")
        generated = await self._narrative_agent.run(
            NarrativeInput(persona=persona, scenario=scenario or scene.scenario)
        )
        return SceneNarrative(
            title=title or generated.title,
            action=action or generated.action,
            dialogue=dialogue or generated.dialogue,
        )

    async def compose_scene(
        self,
        request: Union[SceneRequest, dict],
        cancel_event: Optional[asyncio.Event] = None,
    ) -> GeneratedSceneResult:
        """Generate the full scene: narrative, then video.

        Args:
            request: Persona, scene and optional product.
            cancel_event: Stops the poll loop when set.

        Returns:
            The encoded video and the title, action and dialogue used.

        Raises:
            ForgeError: The first stage failure, with ``stage`` set.
        """
        with _stage(Stage.VALIDATE):
            if isinstance(request, dict):
                request = SceneRequest.from_dict(request)
            self.validate(request)

        persona, scene, product = request.persona, request.scene, request.product
        logger.info(f"Composing scene for '{persona.name or persona.id}'")

        with _stage(Stage.NARRATIVE):
            narrative = await self.resolve_narrative(
                persona, scene, composer.compose_scenario(scene, product)
            )

        with _stage(Stage.COMPOSE):
            prompt = composer.compose_video_prompt(persona, scene, narrative, product)

        video, operation_name = await self._render(prompt, cancel_event)

        logger.info(f"Scene '{narrative.title}' generated ({video.mime_type})")
        return GeneratedSceneResult(
            video=video,
            title=narrative.title,
            action=narrative.action,
            dialogue=narrative.dialogue,
            operation_name=operation_name,
        )


class ScriptDrivenOrchestrator(VideoPipeline):
    """Renders a video from a structured script.

    Only the first scene is rendered. Multi-scene stitching is not
    implemented; extra scenes are reported in ``skipped_scenes``.
    """

    def validate(self, script: ScriptDocument) -> None:
        if not script.scenes:
            raise ValidationError("The script must contain at least one scene.")
        first = script.scenes[0]
        if first.end_time <= first.start_time:
            raise ValidationError(
                f"Scene {first.id} must end after it starts "
                f"(start_time={first.start_time}, end_time={first.end_time})"
            )

    async def generate_from_script(
        self,
        script: Union[ScriptDocument, dict],
        cancel_event: Optional[asyncio.Event] = None,
    ) -> ScriptVideoResult:
        """Render the first scene of ``script``.

        Raises:
            ForgeError: The first stage failure, with ``stage`` set.
        """
        with _stage(Stage.VALIDATE):
            if isinstance(script, dict):
                script = parse_script(script)
            self.validate(script)

        skipped = len(script.scenes) - 1
        if skipped:
            logger.warning(
                f"Script has {len(script.scenes)} scenes; only the first is rendered"
            )

        with _stage(Stage.COMPOSE):
            prompt = composer.compose_script_video_prompt(script)

        video, operation_name = await self._render(prompt, cancel_event)

        first = script.scenes[0]
        return ScriptVideoResult(
            video=video,
            scene_id=first.id,
            duration_seconds=first.duration,
            skipped_scenes=skipped,
            operation_name=operation_name,
        )


def parse_script(data: Union[dict, str]) -> ScriptDocument:
    """Parse a script from a dict or a JSON string.

    Raises:
        ValidationError: If the data is not a valid script.
    """
    try:
        if isinstance(data, str):
            data = json.loads(data)
        return ScriptDocument.model_validate(data)
    except ValueError as e:
        raise ValidationError(f"Invalid script: {e}")


def save_generation_metadata(
    result: Union[GeneratedSceneResult, ScriptVideoResult],
    output_path: Path,
) -> None:
    """Save generation metadata (everything but the video bytes) to JSON.

    Args:
        result: Orchestrator result.
        output_path: Path to save the metadata JSON.
    """
    metadata = result.model_dump(exclude={"video"})
    metadata.update({
        "generated_at": datetime.now().isoformat(),
        "mime_type": result.video.mime_type,
        "size_bytes": result.video.size,
    })

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(metadata, f, indent=2, ensure_ascii=False)

    logger.info(f"Saved generation metadata to {output_path}")

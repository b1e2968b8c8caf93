"""Unit tests for the command-line interface."""

import json
from unittest.mock import AsyncMock, Mock

import pytest
import yaml
from typer.testing import CliRunner

from avatarforge import __version__
from avatarforge import orchestrator as orchestrator_module
from avatarforge.cli import app
from avatarforge.errors import RemoteOperationError
from avatarforge.models import EncodedAsset, GeneratedSceneResult, ScriptVideoResult
from avatarforge.storage import open_gallery
from helpers import VIDEO_BYTES

runner = CliRunner()


class FakeOrchestrator:
    """Stands in for an orchestrator; records the request it was given."""

    result = None
    error = None
    requests: list = []

    def __init__(self, *args, **kwargs):
        pass

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        return None

    async def _respond(self, request):
        FakeOrchestrator.requests.append(request)
        if self.error:
            raise self.error
        return self.result

    compose_scene = _respond
    generate_from_script = _respond


@pytest.fixture
def fake_orchestrators(monkeypatch):
    FakeOrchestrator.requests = []
    FakeOrchestrator.error = None
    monkeypatch.setattr(orchestrator_module, "SceneOrchestrator", FakeOrchestrator)
    monkeypatch.setattr(orchestrator_module, "ScriptDrivenOrchestrator", FakeOrchestrator)
    return FakeOrchestrator


@pytest.mark.unit
def test_version():
    result = runner.invoke(app, ["--version"])

    assert result.exit_code == 0
    assert __version__ in result.stdout


@pytest.mark.unit
class TestGalleryCommands:
    """Tests for gallery list/show/delete/import."""

    def test_import_list_show_delete(self, tmp_path, persona):
        records = [persona.model_dump(mode="json"), {"name": "Ana", "niche": "Fitness"}]
        source = tmp_path / "avatars.yaml"
        source.write_text(yaml.safe_dump(records, allow_unicode=True), encoding="utf-8")

        result = runner.invoke(app, ["gallery", "import", "avatars", str(source)])
        assert result.exit_code == 0
        assert "Imported 2 record(s)" in result.stdout

        result = runner.invoke(app, ["gallery", "list", "avatars"])
        assert result.exit_code == 0
        assert result.stdout.index("Ana") < result.stdout.index("Dr. Roberto")

        result = runner.invoke(app, ["gallery", "show", "avatars", persona.id])
        assert result.exit_code == 0
        assert "Saúde" in result.stdout

        result = runner.invoke(app, ["gallery", "delete", "avatars", persona.id])
        assert result.exit_code == 0
        assert open_gallery("avatars").find(persona.id) is None

    def test_show_missing_record(self):
        result = runner.invoke(app, ["gallery", "show", "products", "missing"])

        assert result.exit_code == 1
        assert "❌" in result.stdout

    def test_empty_gallery(self):
        result = runner.invoke(app, ["gallery", "list", "scenes"])

        assert result.exit_code == 0
        assert "No scenes saved yet" in result.stdout


@pytest.mark.unit
class TestSceneCommand:
    """Tests for the scene command."""

    def test_generates_and_saves(self, tmp_path, persona, fake_orchestrators):
        open_gallery("avatars").upsert(persona)
        fake_orchestrators.result = GeneratedSceneResult(
            video=EncodedAsset.from_bytes(VIDEO_BYTES),
            title="Check-up",
            action="Explica",
            dialogue="Olá, pessoal!",
            operation_name="operations/op-1",
        )
        output = tmp_path / "out" / "scene.mp4"

        result = runner.invoke(app, [
            "scene",
            "--avatar", persona.id,
            "--scenario", "consultório azul",
            "--duration", "5",
            "--camera", "selfie",
            "--output", str(output),
            "--save",
        ])

        assert result.exit_code == 0, result.stdout
        assert "Dialogue: Olá, pessoal!" in result.stdout
        assert output.read_bytes() == VIDEO_BYTES
        assert json.loads(output.with_suffix(".json").read_text())["title"] == "Check-up"

        request = fake_orchestrators.requests[0]
        assert request.persona.name == "Dr. Roberto"
        assert request.scene.duration == 5
        assert request.scene.camera_angle.value == "selfie"

        saved = open_gallery("scenes").list()
        assert len(saved) == 1
        assert saved[0].title == "Check-up"

    def test_unknown_avatar(self, fake_orchestrators):
        result = runner.invoke(app, ["scene", "--avatar", "missing", "--scenario", "sala"])

        assert result.exit_code == 1
        assert "Invalid input" in result.stdout
        assert fake_orchestrators.requests == []

    def test_invalid_duration(self, persona, fake_orchestrators):
        open_gallery("avatars").upsert(persona)

        result = runner.invoke(
            app, ["scene", "--avatar", persona.id, "--scenario", "sala", "--duration", "6"]
        )

        assert result.exit_code == 1
        assert fake_orchestrators.requests == []

    def test_generation_failure(self, tmp_path, persona, fake_orchestrators):
        avatar_file = tmp_path / "roberto.yaml"
        avatar_file.write_text(yaml.safe_dump(persona.model_dump(mode="json")), encoding="utf-8")
        fake_orchestrators.error = RemoteOperationError("failed to generate video: quota", stage="poll")

        result = runner.invoke(app, ["scene", "--avatar", str(avatar_file), "--scenario", "sala"])

        assert result.exit_code == 1
        assert "[poll] failed to generate video: quota" in result.stdout


@pytest.mark.unit
def test_script_command(tmp_path, script_data, fake_orchestrators):
    script_file = tmp_path / "script.json"
    script_file.write_text(json.dumps(script_data), encoding="utf-8")
    fake_orchestrators.result = ScriptVideoResult(
        video=EncodedAsset.from_bytes(VIDEO_BYTES), scene_id=1, duration_seconds=2, skipped_scenes=3
    )
    output = tmp_path / "script.mp4"

    result = runner.invoke(app, ["script", str(script_file), "--output", str(output)])

    assert result.exit_code == 0, result.stdout
    assert "Only the first scene is rendered" in result.stdout
    assert output.read_bytes() == VIDEO_BYTES
    assert fake_orchestrators.requests[0].title == "Rotina Saudável"


@pytest.mark.unit
def test_write_title(monkeypatch):
    from avatarforge.agents import TitleAgent
    from avatarforge.models import TitleOutput

    monkeypatch.setattr(TitleAgent, "run", AsyncMock(return_value=TitleOutput(title="Check-up anual")))
    monkeypatch.setattr("avatarforge.services.RemoteGenerationClient", Mock(return_value=AsyncMock()))

    result = runner.invoke(app, ["write", "title", "consultório azul"])

    assert result.exit_code == 0, result.stdout
    assert "Check-up anual" in result.stdout

"""Shared pytest fixtures for avatarforge tests."""

import pytest

from avatarforge.models import PersonaProfile, ProductSpec, SceneSpec
from helpers import API_BASE, API_KEY


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch, tmp_path):
    """Point the global config at test values; never touch the real environment."""
    from avatarforge.config import config

    monkeypatch.setattr(config, "gemini_api_key", API_KEY)
    monkeypatch.setattr(config, "anthropic_api_key", "")
    monkeypatch.setattr(config, "api_base", API_BASE)
    monkeypatch.setattr(config, "text_provider", "gemini")
    monkeypatch.setattr(config, "dialogue_language", "Brazilian Portuguese")
    monkeypatch.setattr(config, "poll_interval", 0.0)
    monkeypatch.setattr(config, "max_poll_time", 600.0)
    monkeypatch.setattr(config, "gallery_dir", tmp_path / "gallery")
    return config


@pytest.fixture
def persona() -> PersonaProfile:
    """A fully specified persona."""
    return PersonaProfile(
        name="Dr. Roberto",
        niche="Saúde",
        age="45",
        gender="Masculino",
        accent="Carioca",
        short_bio="Médico de família que explica saúde de forma simples.",
        unique_trait="Sempre usa um estetoscópio colorido",
        personality_traits="Calmo, didático, bem-humorado",
        appearance_details="Cabelo grisalho, óculos de armação fina",
        clothing="Jaleco branco sobre camisa azul",
        characteristics="Voz grave e tranquila",
        negative_prompt="blurry, deformed hands",
    )


@pytest.fixture
def scene() -> SceneSpec:
    """A scene with only a scenario."""
    return SceneSpec(scenario="consultório azul")


@pytest.fixture
def product() -> ProductSpec:
    return ProductSpec(
        product_name="VitaMax",
        partner_brand="NutriCorp",
        description="Multivitamínico diário",
        is_partnership=True,
    )


@pytest.fixture
def script_data() -> dict:
    """A four-scene script as parsed from JSON."""
    return {
        "title": "Rotina Saudável",
        "format": "9:16",
        "duration_seconds": 8,
        "language": "pt-BR",
        "character": {
            "name": "Dr. Roberto",
            "appearance": "Cabelo grisalho, óculos",
            "style": "Jaleco branco",
        },
        "scenes": [
            {
                "id": i + 1,
                "visual_prompt": f"Consultório azul, plano {i + 1}",
                "camera_direction": "Slow push-in",
                "expression": "Sorridente",
                "dialogue": f"Fala {i + 1}",
                "start_time": float(i * 2),
                "end_time": float(i * 2 + 2),
            }
            for i in range(4)
        ],
        "product_integration": {
            "is_present": True,
            "product_name": "VitaMax",
            "integration_description": "Segura o frasco ao falar",
        },
    }

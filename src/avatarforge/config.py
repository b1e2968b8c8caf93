"""Configuration management."""

import os
from pathlib import Path
from pydantic import BaseModel, Field
from dotenv import load_dotenv

from .errors import ConfigurationError

# Load environment variables
load_dotenv()

TEXT_PROVIDERS = ("gemini", "anthropic")


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    return float(value) if value else default


class Config(BaseModel):
    """Application configuration."""

    # API Keys
    gemini_api_key: str = Field(
        default_factory=lambda: os.getenv("GEMINI_API_KEY", ""),
        description="Google Gemini API key (text, structured output and Veo)"
    )
    anthropic_api_key: str = Field(
        default_factory=lambda: os.getenv("ANTHROPIC_API_KEY", ""),
        description="Anthropic API key (optional text provider)"
    )

    # Endpoints and models
    api_base: str = Field(
        default_factory=lambda: os.getenv(
            "FORGE_API_BASE", "https://generativelanguage.googleapis.com/v1beta"
        ),
        description="Gemini API base URL"
    )
    text_provider: str = Field(
        default_factory=lambda: os.getenv("FORGE_TEXT_PROVIDER", "gemini"),
        description="Backend for text and structured generation: gemini or anthropic"
    )
    text_model: str = Field(
        default_factory=lambda: os.getenv("FORGE_TEXT_MODEL", "gemini-2.0-flash"),
        description="Gemini model for text and structured generation"
    )
    anthropic_model: str = Field(
        default_factory=lambda: os.getenv("FORGE_ANTHROPIC_MODEL", "claude-sonnet-4-20250514"),
        description="Claude model used when text_provider is anthropic"
    )
    video_model: str = Field(
        default_factory=lambda: os.getenv("FORGE_VIDEO_MODEL", "veo-2.0-generate-001"),
        description="Veo model for video generation"
    )

    # Polling
    poll_interval: float = Field(
        default_factory=lambda: _env_float("FORGE_POLL_INTERVAL", 5.0),
        description="Seconds between operation status checks"
    )
    max_poll_time: float = Field(
        default_factory=lambda: _env_float("FORGE_MAX_POLL_TIME", 600.0),
        description="Maximum seconds to wait for a video operation (0 disables the cap)"
    )
    request_timeout: float = Field(
        default_factory=lambda: _env_float("FORGE_REQUEST_TIMEOUT", 120.0),
        description="HTTP timeout for a single remote call"
    )

    # Content
    dialogue_language: str = Field(
        default_factory=lambda: os.getenv("FORGE_DIALOGUE_LANGUAGE", "Brazilian Portuguese"),
        description="Language generated dialogue must be written in"
    )

    # Paths
    gallery_dir: Path = Field(
        default_factory=lambda: Path(os.getenv("FORGE_GALLERY_DIR", ".avatarforge")),
        description="Directory holding the scene, avatar and product galleries"
    )

    class Config:
        """Pydantic config."""
        frozen = False

    def validate_gemini_required(self) -> None:
        """Validate that the Gemini API key is set.

        Raises:
            ConfigurationError: If GEMINI_API_KEY is missing.
        """
        if not self.gemini_api_key:
            raise ConfigurationError(
                "GEMINI_API_KEY not set. Set the corresponding environment variable."
            )

    def validate_anthropic_required(self) -> None:
        """Validate that the Anthropic API key is set."""
        if not self.anthropic_api_key:
            raise ConfigurationError("ANTHROPIC_API_KEY not set")

    def validate_text_provider(self) -> None:
        """Validate the text provider name."""
        if self.text_provider not in TEXT_PROVIDERS:
            raise ConfigurationError(
                f"Unknown FORGE_TEXT_PROVIDER: {self.text_provider}. "
                f"Must be one of: {', '.join(TEXT_PROVIDERS)}"
            )


# Global config instance
config = Config()

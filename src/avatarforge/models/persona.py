"""Persona data model."""

from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, Field


def new_id() -> str:
    """Return a fresh record identifier."""
    return uuid4().hex


class PersonaProfile(BaseModel):
    """A synthetic influencer persona."""

    id: str = Field(default_factory=new_id, description="Unique persona identifier")
    name: str = Field(default="", description="Influencer name")
    niche: str = Field(default="", description="Content niche (e.g. Saúde, Games, Tech)")
    age: str = Field(default="", description="Age or estimated age")
    gender: str = Field(default="", description="Gender (Masculino, Feminino, Não-binário, Outro)")
    accent: str = Field(default="Padrão", description="Accent (Padrão, Paulistano, Carioca, ...)")
    short_bio: str = Field(default="", description="Short biography")
    unique_trait: str = Field(default="", description="Trait that makes the influencer stand out")
    personality_traits: str = Field(default="", description="Personality traits")
    appearance_details: str = Field(default="", description="Physical appearance description")
    clothing: str = Field(default="", description="Clothes, shoes and accessories")
    characteristics: str = Field(default="", description="Additional notable characteristics")
    reference_image: Optional[str] = Field(None, description="Reference photo as a data URI")
    negative_prompt: Optional[str] = Field(None, description="Terms to exclude from generation")

    class Config:
        """Pydantic config."""
        frozen = False

    @property
    def display_name(self) -> str:
        return self.name

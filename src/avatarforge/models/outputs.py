"""Output shapes for structured generation calls."""

from typing import Optional

from pydantic import BaseModel, Field

from .persona import PersonaProfile
from .product import ProductSpec


class TitleOutput(BaseModel):
    title: str = Field(..., description="A creative and concise title for the scene.")


class ActionOutput(BaseModel):
    action: str = Field(..., description="A description of what the influencer is doing.")


class DialogueOutput(BaseModel):
    dialogue: str = Field(..., description="The generated dialogue.")


class SeoOutput(BaseModel):
    seo: str = Field(
        ..., description="Generated SEO content, including a title, description, and keywords."
    )


class ScriptOutput(BaseModel):
    script: str = Field(..., description="The generated script in the requested format.")


class SceneAnalysis(BaseModel):
    description: str = Field(
        ...,
        description=(
            "A detailed and faithful description of the scene, including lighting, "
            "colors, objects, materials, and overall atmosphere."
        ),
    )


class TextAnalysis(BaseModel):
    name: str = Field(..., description="The influencer's name.")
    niche: str = Field(..., description="The influencer's niche (e.g., Fashion, Games).")


class AvatarAnalysis(BaseModel):
    """Influencer profile inferred from a photo."""

    name: str = Field(..., description="The influencer's name.")
    niche: str = Field(..., description="The influencer's niche (e.g., Fashion, Games, Tech).")
    characteristics: str = Field(..., description="A summary of the most notable characteristics of the influencer.")
    personality_traits: str = Field(..., description="A description of the influencer's personality traits.")
    appearance_details: str = Field(
        ...,
        description=(
            "A very detailed description of the influencer's physical appearance "
            "(face shape, eye color, hair texture, etc.)."
        ),
    )
    clothing: str = Field(..., description="A description of the clothes, shoes, and accessories the character is wearing.")
    short_bio: str = Field(..., description="A short biography for the influencer.")
    unique_trait: str = Field(..., description="A unique or peculiar trait that makes the influencer stand out.")
    age: str = Field(..., description="The estimated age of the influencer.")
    gender: str = Field(..., description="The gender of the influencer (Masculino, Feminino, Não-binário, Outro).")
    negative_prompt: str = Field(
        ...,
        description=(
            "A comma-separated list of common negative prompts to improve generation "
            "quality (e.g., bad hands, blurry, deformed)."
        ),
    )

    def to_persona(self, reference_image: Optional[str] = None) -> PersonaProfile:
        return PersonaProfile(**self.model_dump(), reference_image=reference_image)


class ProductAnalysis(BaseModel):
    """Product details inferred from a photo."""

    product_name: str = Field(..., description="The product's name.")
    partner_brand: str = Field(..., description="The product's brand.")
    product_description: str = Field(..., description="A detailed description of the product.")

    def to_product(self, product_image: Optional[str] = None) -> ProductSpec:
        return ProductSpec(
            product_name=self.product_name,
            partner_brand=self.partner_brand,
            description=self.product_description,
            product_image=product_image,
        )

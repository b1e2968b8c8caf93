"""Product placement data model."""

from typing import Optional

from pydantic import BaseModel, Field

from .persona import new_id


class ProductSpec(BaseModel):
    """A product to feature in a scene."""

    id: str = Field(default_factory=new_id, description="Unique product identifier")
    product_name: str = Field(..., description="Product name")
    partner_brand: str = Field(default="", description="Partner brand")
    description: str = Field(default="", description="Product description")
    product_image: Optional[str] = Field(None, description="Product photo as a data URI")
    is_partnership: bool = Field(default=False, description="Sponsored / partnership placement")

    class Config:
        """Pydantic config."""
        frozen = False

    @property
    def display_name(self) -> str:
        return self.product_name

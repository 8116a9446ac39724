"""
Pydantic schemas for advert endpoints.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Advert(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int = 0
    title: str = ""
    description: str = ""
    price: float = 0.0
    # Stored as `image_path`, exposed to clients as `ad_image`.
    image: str = Field(default="", alias="ad_image")

    def public(self) -> dict:
        return self.model_dump(by_alias=True)

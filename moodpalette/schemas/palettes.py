"""Pydantic schemas for palette generation APIs."""

from __future__ import annotations

from typing import List, Literal

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel
from pydantic.config import ConfigDict

from ..models import GenerationMode, GenerationRequest


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class GeneratePalettesPayload(CamelModel):
    prompt_text: str = Field(default="", max_length=2000, description="Theme or mood description")
    mode: Literal["prompt", "image"] = Field(default="prompt")
    image_data: str | None = Field(default=None, description="Encoded image reference for image mode")
    mood_prompt_text: str | None = Field(default=None, max_length=500)
    user_moods: List[str] | None = Field(default=None, description="Explicit moods, used verbatim")
    palette_size: int | None = Field(default=None, ge=1, le=10)

    def to_request(self, default_palette_size: int) -> GenerationRequest:
        return GenerationRequest(
            prompt_text=self.prompt_text,
            mode=GenerationMode(self.mode),
            image_data=self.image_data,
            mood_prompt_text=self.mood_prompt_text,
            user_moods=list(self.user_moods or []),
            palette_size=self.palette_size or default_palette_size,
        )


class PsychologySchema(CamelModel):
    mood: str
    meaning: str
    associations: List[str]
    application: str


class ColorSchema(CamelModel):
    name: str
    hex: str
    rgb: List[int]
    psychology: PsychologySchema


class WcagSchema(CamelModel):
    normal: str
    large: str


class AccessibilitySchema(CamelModel):
    contrast: str
    color_blindness: str
    readability: str
    wcag: WcagSchema


class PaletteSchema(CamelModel):
    id: str
    name: str
    mood: str
    colors: List[ColorSchema]
    description: str
    accessibility: AccessibilitySchema


class PalettesResponse(CamelModel):
    palettes: List[PaletteSchema]
    warning: str | None = None


class ErrorResponse(CamelModel):
    message: str
    error: str | None = None

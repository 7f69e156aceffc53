from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class OriginObject(BaseModel):
    model_config = ConfigDict(frozen=True)

    key: str
    data: bytes


class ImageMetadata(BaseModel):
    width: int = Field(..., ge=1)
    height: int = Field(..., ge=1)
    orientation: int | None = None  # EXIF tag 0x0112 before auto-orientation

from __future__ import annotations

from urllib.parse import unquote

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_FORMAT = "webp"


class TransformDirective(BaseModel):
    """Resize/format/quality request parsed from the query string."""

    model_config = ConfigDict(frozen=True)

    width: int | None = Field(None, ge=1)
    height: int | None = Field(None, ge=1)
    quality: int | None = Field(None, ge=1, le=100)
    format: str | None = Field(None, min_length=1)

    @property
    def is_empty(self) -> bool:
        return (
            self.width is None
            and self.height is None
            and self.quality is None
            and self.format is None
        )

    @property
    def output_format(self) -> str:
        return self.format or DEFAULT_FORMAT


class ObjectKey(BaseModel):
    """Logical object name and extension taken from the request URI."""

    model_config = ConfigDict(frozen=True)

    name: str
    extension: str = Field(..., min_length=1)

    @property
    def storage_key(self) -> str:
        return f"{unquote(self.name)}.{self.extension}"

"""Non-error results of one pipeline run.

Terminal failures are not outcomes; they are raised as
:class:`imgedge.errors.GatewayError` subclasses.
"""
from __future__ import annotations

from typing import Literal, Union

from pydantic import BaseModel, ConfigDict


class PassthroughOriginal(BaseModel):
    model_config = ConfigDict(frozen=True)

    reason: Literal["not_an_image", "not_found"]


class NoDirectiveOriginal(BaseModel):
    model_config = ConfigDict(frozen=True)

    data: bytes
    extension: str


class TransformedImage(BaseModel):
    model_config = ConfigDict(frozen=True)

    data: bytes
    format: str


PipelineOutcome = Union[PassthroughOriginal, NoDirectiveOriginal, TransformedImage]

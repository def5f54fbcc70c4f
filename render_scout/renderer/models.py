# render_scout/renderer/models.py
"""
Data models shared by the render, screenshot and availability pipelines.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

#: month key -> day label -> start times of the free slots
AvailabilityMap = Dict[str, Dict[str, List[str]]]


@dataclass(frozen=True, slots=True)
class SerializedResponse:
    """Final status, custom headers and markup of one render."""

    status: int
    custom_headers: Dict[str, str] = field(default_factory=dict)
    content: str = ""


@dataclass(frozen=True, slots=True)
class ViewportDimensions:
    width: int
    height: int


class ScreenshotOptions(BaseModel):
    """Image options forwarded to the browser's screenshot call."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    type: Literal["jpeg", "png"] = "jpeg"
    encoding: Literal["binary", "base64"] = "binary"
    full_page: bool = False
    quality: Optional[int] = Field(None, ge=0, le=100)

    @model_validator(mode="after")
    def _quality_only_for_jpeg(self) -> ScreenshotOptions:
        if self.quality is not None and self.type != "jpeg":
            raise ValueError("quality is only supported for jpeg screenshots")
        return self


class ScreenshotErrorType(str, Enum):
    FORBIDDEN = "Forbidden"
    NO_RESPONSE = "NoResponse"


class ScreenshotError(Exception):
    """Raised when no meaningful image can be captured for a URL."""

    def __init__(self, type: ScreenshotErrorType) -> None:
        super().__init__(type.value)
        self.type = type


class NavigationError(RuntimeError):
    """Navigation finished without producing a response."""


__all__ = [
    "AvailabilityMap",
    "SerializedResponse",
    "ViewportDimensions",
    "ScreenshotOptions",
    "ScreenshotErrorType",
    "ScreenshotError",
    "NavigationError",
]

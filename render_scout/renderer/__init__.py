"""
render_scout.renderer: rendering, screenshot and availability pipelines.
"""
from render_scout.renderer.availability import NOT_SCHEDULING_PAGE, AvailabilityScraper
from render_scout.renderer.models import (
    AvailabilityMap,
    NavigationError,
    ScreenshotError,
    ScreenshotErrorType,
    ScreenshotOptions,
    SerializedResponse,
    ViewportDimensions,
)
from render_scout.renderer.navigation import navigate_with_retry
from render_scout.renderer.renderer import Renderer
from render_scout.renderer.restriction import RestrictionPolicy, is_restricted

__all__ = [
    "NOT_SCHEDULING_PAGE",
    "AvailabilityMap",
    "AvailabilityScraper",
    "NavigationError",
    "Renderer",
    "RestrictionPolicy",
    "ScreenshotError",
    "ScreenshotErrorType",
    "ScreenshotOptions",
    "SerializedResponse",
    "ViewportDimensions",
    "is_restricted",
    "navigate_with_retry",
]

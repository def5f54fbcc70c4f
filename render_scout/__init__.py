# render_scout/__init__.py
"""
RenderScout package initializer.
Defines package version and exposes the renderer API.
"""
__version__ = "0.1.0"

from render_scout.renderer import (  # noqa: E402
    AvailabilityScraper,
    Renderer,
    ScreenshotError,
    ScreenshotErrorType,
    SerializedResponse,
    ViewportDimensions,
    is_restricted,
)

__all__ = [
    "__version__",
    "AvailabilityScraper",
    "Renderer",
    "ScreenshotError",
    "ScreenshotErrorType",
    "SerializedResponse",
    "ViewportDimensions",
    "is_restricted",
]

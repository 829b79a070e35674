"""
Centralized configuration for the application.
This module contains all configuration classes and settings used throughout the application.
"""

import os
import logging
from pathlib import Path
from dataclasses import dataclass, field
from typing import Optional
from typing_extensions import Literal, get_args
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# Load environment variables
if not load_dotenv():
    logger.debug("No .env file found, using environment and defaults")

# Get workspace root
WORKSPACE_ROOT = Path(__file__).parent.parent.absolute()

# Render modes understood by the image service
RenderMode = Literal["hillshade", "contour"]
RENDER_MODES = list(get_args(RenderMode))

DEFAULT_IMAGE_ENDPOINT = "http://127.0.0.1:8000/api/image"


def _optional_float(name: str) -> Optional[float]:
    """Read a float from the environment, treating unset or 0 as None."""
    value = os.getenv(name, "")
    return float(value) or None if value else None

# ======================
# Image Service Configuration
# ======================

@dataclass
class ImageServiceConfig:
    """Remote image generation service"""
    endpoint: str = field(default_factory=lambda: os.getenv("IMAGE_ENDPOINT", DEFAULT_IMAGE_ENDPOINT))
    timeout: Optional[float] = field(default_factory=lambda: _optional_float("IMAGE_TIMEOUT"))  # None = wait forever

# ======================
# Map Configuration
# ======================

@dataclass
class MapConfig:
    """Initial view and tile source of the interactive map"""
    center_lat: float = field(default_factory=lambda: float(os.getenv("MAP_CENTER_LAT", "45.102")))
    center_lon: float = field(default_factory=lambda: float(os.getenv("MAP_CENTER_LON", "1.460")))
    zoom: int = field(default_factory=lambda: int(os.getenv("MAP_ZOOM", "13")))
    max_zoom: int = field(default_factory=lambda: int(os.getenv("MAP_MAX_ZOOM", "19")))
    tile_url: str = field(default_factory=lambda: os.getenv("TILE_URL", "https://{s}.tile.openstreetmap.org/{z}/{x}/{y}.png"))
    attribution: str = "© OpenStreetMap contributors"

# ======================
# Server Configuration
# ======================

@dataclass
class ServerConfig:
    """Where the UI is served"""
    host: str = field(default_factory=lambda: os.getenv("CHAINLIT_HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: int(os.getenv("CHAINLIT_PORT", "8080")))

# ======================
# User Settings
# ======================

@dataclass
class UserSettings:
    """User-configurable settings"""
    debug_mode: bool = False
    default_render_mode: str = field(default_factory=lambda: os.getenv("DEFAULT_RENDER_MODE", "hillshade"))

# ======================
# Main Application Configuration
# ======================

@dataclass
class AppConfig:
    """Main Application Configuration"""
    image_service: ImageServiceConfig = field(default_factory=ImageServiceConfig)
    map: MapConfig = field(default_factory=MapConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    settings: UserSettings = field(default_factory=UserSettings)

    def validate(self):
        """Validate configuration values."""
        if not self.image_service.endpoint.startswith(("http://", "https://")):
            raise ValueError("image endpoint must be an http(s) URL")
        if self.image_service.timeout is not None and self.image_service.timeout < 0:
            raise ValueError("timeout must not be negative")
        if self.map.zoom < 0 or self.map.zoom > self.map.max_zoom:
            raise ValueError(f"zoom must be between 0 and {self.map.max_zoom}")
        if self.settings.default_render_mode not in RENDER_MODES:
            raise ValueError(
                f"default render mode must be one of {', '.join(RENDER_MODES)}"
            )

# ======================
# Create Configuration Instances
# ======================

APP_CONFIG = AppConfig()
APP_CONFIG.validate()

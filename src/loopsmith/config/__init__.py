"""Configuration management for loopsmith.

This module provides configuration management using Pydantic models.
Configuration can be provided via CLI arguments or defaults.

Key classes:
- GeometryConfig: Tolerances and arc flattening
- OffsetConfig: Ordered offset distances, colours and patterns
- CompositionConfig: Reconstruction output styling and layer filter
- LoggingConfig: Logging settings
- LoopsmithSettings: Main application settings
"""

from loopsmith.config.settings import (
    CompositionConfig,
    GeometryConfig,
    LoggingConfig,
    LoopsmithSettings,
    OffsetConfig,
    get_default_settings,
)

__all__ = [
    "CompositionConfig",
    "GeometryConfig",
    "LoggingConfig",
    "LoopsmithSettings",
    "OffsetConfig",
    "get_default_settings",
]

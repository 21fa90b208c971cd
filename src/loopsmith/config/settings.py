"""Configuration settings for Loopsmith."""

from pathlib import Path

from pydantic import BaseModel, Field


class GeometryConfig(BaseModel):
    """Configuration for geometric tolerances.

    All distances are in drawing units.
    """

    tolerance: float = Field(
        default=1e-6,
        gt=0.0,
        le=1.0,
        description="Endpoint matching tolerance for stitching fragments",
    )
    min_loop_area: float = Field(
        default=1e-9,
        ge=0.0,
        description="Loops with an absolute area below this are flagged incomplete",
    )
    arc_segments: int = Field(
        default=64,
        ge=8,
        le=1024,
        description="Line segments per full circle when flattening arcs for the region kernel",
    )


class OffsetConfig(BaseModel):
    """Configuration for the ordered offset and band fill workflow."""

    distance: float = Field(
        default=2.0,
        gt=0.0,
        description="Inward offset distance",
    )
    outer_color: int = Field(default=1, ge=0, le=256, description="Colour of the outer loop")
    inner_color: int = Field(default=3, ge=0, le=256, description="Colour of the inner loop")
    outer_offset_color: int = Field(
        default=2, ge=0, le=256, description="Colour of the outer loop's offset"
    )
    inner_offset_color: int = Field(
        default=4, ge=0, le=256, description="Colour of the inner loop's offset"
    )
    core_color: int = Field(
        default=6, ge=0, le=256, description="Colour of the solid core fill"
    )
    band_pattern: str = Field(
        default="SOLID",
        description="Pattern between each loop and its own offset",
    )
    gap_pattern: str = Field(
        default="ANSI31",
        description="Pattern between the outer offset and the inner loop",
    )
    pattern_scale: float = Field(
        default=20.0,
        gt=0.0,
        description="Hatch pattern scale",
    )


class CompositionConfig(BaseModel):
    """Configuration for reconstruction and boolean composition."""

    loop_color: int = Field(default=7, ge=0, le=256, description="Colour of rebuilt loops")
    incomplete_color: int = Field(
        default=1, ge=0, le=256, description="Colour of loops that did not close"
    )
    region_color: int = Field(default=8, ge=0, le=256, description="Colour of composed regions")
    region_pattern: str = Field(default="SOLID", description="Fill pattern of composed regions")
    region_pattern_scale: float = Field(default=1.0, gt=0.0)
    layers: list[str] | None = Field(
        default=None,
        description="Only read fragments from these layers (None = all)",
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    log_file: Path | None = Field(
        default=None,
        description="Path to log file",
    )
    log_level: str = Field(
        default="WARNING",
        description="Console log level",
    )
    file_log_level: str = Field(
        default="DEBUG",
        description="File log level (more verbose)",
    )


class LoopsmithSettings(BaseModel):
    """Main application settings."""

    geometry: GeometryConfig = Field(default_factory=GeometryConfig)
    offset: OffsetConfig = Field(default_factory=OffsetConfig)
    composition: CompositionConfig = Field(default_factory=CompositionConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def get_default_settings() -> LoopsmithSettings:
    """Get default application settings."""
    return LoopsmithSettings()

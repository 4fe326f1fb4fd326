"""Boundary validation and YAML config loading.

Provides pydantic schemas for:
    - Color inputs: RGB byte triples, finite Lab triples
    - Logging config (logging.v1.yaml): level, file, rotation, format

Conversion functions in cielab.utils.color never validate (they are total
over their domain). Validation happens once at the edge, when a caller hands
us values of unknown provenance, and fails fast with a ValueError naming the
offending field.

Usage:
    from cielab.utils import validators
    from cielab.utils.logging_config import setup_logging

    r, g, b = validators.validate_rgb(12, 200, 255)
    cfg = validators.load_logging_config("configs/logging.v1.yaml")
    setup_logging(**cfg.to_setup_kwargs(), context={"app": "cielab"})
"""

import operator
from pathlib import Path
from typing import Any, Dict, List, Literal, Optional, Tuple, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator


# ============================================================================
# COLOR INPUTS
# ============================================================================

class RGBTriple(BaseModel):
    """sRGB color, 8 bits per channel."""
    model_config = ConfigDict(frozen=True, strict=True)

    r: int = Field(..., ge=0, le=255, description="Red channel")
    g: int = Field(..., ge=0, le=255, description="Green channel")
    b: int = Field(..., ge=0, le=255, description="Blue channel")


class LabTriple(BaseModel):
    """CIE L*a*b* color; any finite values (out-of-gamut allowed)."""
    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    L: float = Field(..., description="Lightness, nominally [0, 100]")
    a: float = Field(..., description="Green-red axis")
    b: float = Field(..., description="Blue-yellow axis")


def validate_rgb(r: Any, g: Any, b: Any) -> Tuple[int, int, int]:
    """Validate an RGB byte triple.

    Raises
    ------
    ValueError
        If any channel is not an int in [0, 255]

    Notes
    -----
    Integer-like scalars (e.g. numpy.uint8 pixels) are accepted; floats are not.
    """
    try:
        rgb = RGBTriple(r=operator.index(r), g=operator.index(g), b=operator.index(b))
    except (TypeError, ValidationError) as e:
        raise ValueError(f"Invalid RGB triple {(r, g, b)!r}: {e}") from e
    return rgb.r, rgb.g, rgb.b


def validate_lab(L: Any, a: Any, b: Any) -> Tuple[float, float, float]:
    """Validate a Lab triple (finite floats).

    Raises
    ------
    ValueError
        If any component is non-numeric, NaN or infinite
    """
    try:
        lab = LabTriple(L=L, a=a, b=b)
    except ValidationError as e:
        raise ValueError(f"Invalid Lab triple {(L, a, b)!r}: {e}") from e
    return lab.L, lab.a, lab.b


# ============================================================================
# LOGGING CONFIG V1
# ============================================================================

class RotateConfig(BaseModel):
    """Log file rotation (size- or time-based)."""
    mode: Literal["size", "time"] = "size"
    max_bytes: int = Field(50_000_000, gt=0, description="Size mode: bytes per file")
    when: str = Field("D", description="Time mode: TimedRotatingFileHandler 'when'")
    interval: int = Field(1, ge=1, description="Time mode: rotation interval")
    backup_count: int = Field(5, ge=0, description="Rotated files kept")


class LoggingConfigV1(BaseModel):
    """Logging config (logging.v1.yaml schema).

    Field names match setup_logging() keyword arguments.
    """
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_file: Optional[str] = None
    json_format: bool = Field(False, alias="json", description="JSON lines instead of human format")
    color: bool = True
    to_stderr: bool = True
    rotate: Optional[RotateConfig] = None
    tz: Literal["UTC", "local"] = "UTC"
    capture_warnings: bool = True
    quiet_libs: List[str] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    @model_validator(mode="after")
    def validate_rotation_target(self) -> "LoggingConfigV1":
        if self.rotate is not None and not self.log_file:
            raise ValueError("rotate requires log_file to be set")
        return self

    def to_setup_kwargs(self) -> Dict[str, Any]:
        """Keyword arguments for logging_config.setup_logging()."""
        return self.model_dump(by_alias=True)


def _load_yaml(path: Path) -> Dict[str, Any]:
    """Load YAML file safely; an empty file yields an empty dict."""
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    return data or {}


def load_logging_config(path: Union[str, Path]) -> LoggingConfigV1:
    """Load and validate logging config from YAML.

    Parameters
    ----------
    path : Union[str, Path]
        Path to logging.v1.yaml file

    Returns
    -------
    LoggingConfigV1
        Validated logging configuration

    Raises
    ------
    FileNotFoundError
        If path doesn't exist
    ValueError
        If validation fails (with actionable error message)
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Logging config not found: {path}")

    data = _load_yaml(path)
    try:
        return LoggingConfigV1(**data)
    except (ValidationError, TypeError) as e:
        raise ValueError(f"Logging config validation failed at {path}: {e}") from e

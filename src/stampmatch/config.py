"""
Configuration management for StampMatch.

Loads YAML configuration with sensible defaults for capture surfaces,
comparison and tracing.
"""

import os
from dataclasses import asdict, dataclass, field

import yaml


@dataclass
class CaptureConfig:
    """Configuration for stamp capture surfaces."""
    width: int = 400
    height: int = 400
    stamp_size: float = 30.0  # circle radius and square side, 20-30
    line_width: int = 4  # freehand stroke, 2-4
    mouse_pressure: float = 1.0
    touch_pressure: float = 0.5
    base_radius: float = 6.0
    pressure_radius: float = 20.0
    ellipse_padding: float = 6.0
    shading_alpha: float = 0.1
    curve_samples: int = 8  # points per quadratic segment


@dataclass
class ColorConfig:
    """Ink colour used for every stamp."""
    ink: list = field(default_factory=lambda: [0, 0, 0])


@dataclass
class ComparisonConfig:
    """Configuration for buffer comparison."""
    default_tolerance: float = 0.3
    max_tolerance: float = 0.8
    pixel_tolerance_scale: float = 2.0


@dataclass
class TracingConfig:
    """Configuration for runtime tracing."""
    enabled: bool = False
    level: str = "INFO"
    file_path: str = None
    json_output: bool = False


@dataclass
class StampConfig:
    """Complete application configuration."""
    capture: CaptureConfig = field(default_factory=CaptureConfig)
    color: ColorConfig = field(default_factory=ColorConfig)
    comparison: ComparisonConfig = field(default_factory=ComparisonConfig)
    tracing: TracingConfig = field(default_factory=TracingConfig)


STAMP_SIZE_RANGE = (20.0, 30.0)
LINE_WIDTH_RANGE = (2, 4)


def load_config(config_path=None):
    """
    Load configuration from YAML file.

    Falls back to defaults for any missing values.
    """
    config = StampConfig()

    if config_path and os.path.exists(config_path):
        with open(config_path, "r", encoding="utf-8") as f:
            yaml_data = yaml.safe_load(f) or {}

        config = _merge_config(config, yaml_data)

    return _clamp_ranges(config)


def _merge_config(config, yaml_data):
    """Merge YAML data into config dataclass, ignoring unknown keys."""
    for section in ("capture", "color", "comparison", "tracing"):
        if section not in yaml_data or not isinstance(yaml_data[section], dict):
            continue
        target = getattr(config, section)
        for key, value in yaml_data[section].items():
            if hasattr(target, key):
                setattr(target, key, value)

    return config


def _clamp_ranges(config):
    """Keep fixed-shape sizes inside their documented ranges."""
    capture = config.capture
    capture.stamp_size = min(STAMP_SIZE_RANGE[1], max(STAMP_SIZE_RANGE[0], float(capture.stamp_size)))
    capture.line_width = min(LINE_WIDTH_RANGE[1], max(LINE_WIDTH_RANGE[0], int(capture.line_width)))
    capture.curve_samples = max(1, int(capture.curve_samples))

    comparison = config.comparison
    comparison.max_tolerance = min(1.0, max(0.0, float(comparison.max_tolerance)))
    comparison.default_tolerance = min(
        comparison.max_tolerance, max(0.0, float(comparison.default_tolerance))
    )
    return config


def save_default_config(path):
    """Save default configuration to YAML file for reference."""
    yaml_data = asdict(StampConfig())
    yaml_data["tracing"].pop("file_path", None)
    yaml_data["tracing"].pop("json_output", None)

    with open(path, "w", encoding="utf-8") as f:
        yaml.dump(yaml_data, f, default_flow_style=False, sort_keys=False)

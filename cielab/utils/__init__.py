"""Color engine and cross-cutting utilities.

This package provides:
    - Color science: sRGB ↔ XYZ ↔ Lab, ΔE (color)
    - Immutable Lab value type (lab)
    - Input/config validation (validators)
    - Unified logging (logging_config)

Convenience imports:
    from cielab.utils import color, lab, validators
    from cielab.utils.logging_config import setup_logging, get_logger
"""

from . import color
from . import lab
from . import logging_config
from . import validators

from .logging_config import get_logger, push_context, setup_logging

__all__ = [
    # Modules
    'color',
    'lab',
    'logging_config',
    'validators',
    # Direct exports
    'setup_logging',
    'get_logger',
    'push_context',
]

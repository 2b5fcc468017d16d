"""dipcolor: per-pixel color model conversions over numpy samples."""

import logging

from dipcolor.core import Color, ColorSpace, DefaultConverter
from dipcolor.color import convert_color, list_colorspaces

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "Color",
    "ColorSpace",
    "DefaultConverter",
    "convert_color",
    "list_colorspaces",
    "__version__",
]

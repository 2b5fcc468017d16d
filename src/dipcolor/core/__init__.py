"""Core types: traits, colors, registry and errors."""

from dipcolor.core.data_types import Color, ColorSpace, DefaultConverter
from dipcolor.core.exceptions import (
    ColorConversionError,
    ConversionNotAvailableError,
    UnsupportedChannelCountError,
    UnsupportedSampleTypeError,
)
from dipcolor.core.registry import ConverterRegistry, register_converter
from dipcolor.core.traits import ColorTrait, SampleTrait, color_trait, sample_trait

__all__ = [
    "Color",
    "ColorSpace",
    "DefaultConverter",
    "ColorConversionError",
    "ConversionNotAvailableError",
    "UnsupportedChannelCountError",
    "UnsupportedSampleTypeError",
    "ConverterRegistry",
    "register_converter",
    "ColorTrait",
    "SampleTrait",
    "color_trait",
    "sample_trait",
]

"""Exceptions raised by the conversion framework."""

from __future__ import annotations


class ColorConversionError(Exception):
    """Base class for conversion errors."""


class UnsupportedSampleTypeError(ColorConversionError, TypeError):
    """Sample dtype has no registered trait."""


class UnsupportedChannelCountError(ColorConversionError, TypeError):
    """Color channel count does not match what a converter accepts."""


class ConversionNotAvailableError(ColorConversionError, NotImplementedError):
    """No converter exists (or is implemented) for a model pair."""

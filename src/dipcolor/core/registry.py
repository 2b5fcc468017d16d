"""
Converter registration system.

Provides a global registry of conversion functors keyed by their
(source, target) model pair, plus a decorator for registration.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Type

from dipcolor.core.data_types import ColorSpace

if TYPE_CHECKING:
    from dipcolor.color.conversions import ColorConverter

logger = logging.getLogger(__name__)

Pair = tuple[ColorSpace, ColorSpace]


class ConverterRegistry:
    """
    Global registry of available conversion functors.

    Usage:
        # Register a converter class
        ConverterRegistry.register(RgbToHsv)

        # Or use the decorator
        @register_converter
        class RgbToHsv(ColorConverter):
            source = ColorSpace.RGB
            target = ColorSpace.HSV
            ...

        # Look up and instantiate
        to_hsv = ConverterRegistry.create("RGB", "HSV")
    """

    _registry: dict[Pair, Type[ColorConverter]] = {}

    @staticmethod
    def _key(source: ColorSpace | str, target: ColorSpace | str) -> Pair:
        return ColorSpace.parse(source), ColorSpace.parse(target)

    @classmethod
    def register(cls, converter_class: Type[ColorConverter]) -> Type[ColorConverter]:
        """
        Register a converter class under its (source, target) pair.

        Args:
            converter_class: The converter class to register

        Returns:
            The registered class (for decorator use)
        """
        key = cls._key(converter_class.source, converter_class.target)

        previous = cls._registry.get(key)
        if previous is not None and previous is not converter_class:
            logger.debug(
                "[Color] Replacing %s with %s for %s -> %s",
                previous.__name__, converter_class.__name__, key[0].value, key[1].value,
            )

        cls._registry[key] = converter_class
        logger.debug(
            "[Color] Registered %s for %s -> %s",
            converter_class.__name__, key[0].value, key[1].value,
        )
        return converter_class

    @classmethod
    def unregister(cls, source: ColorSpace | str, target: ColorSpace | str) -> bool:
        """
        Remove the converter for a pair.

        Returns:
            True if unregistered, False if not found
        """
        key = cls._key(source, target)
        if key not in cls._registry:
            return False
        del cls._registry[key]
        return True

    @classmethod
    def get(
        cls, source: ColorSpace | str, target: ColorSpace | str
    ) -> Type[ColorConverter] | None:
        """Get the converter class for a pair, or None."""
        return cls._registry.get(cls._key(source, target))

    @classmethod
    def create(
        cls, source: ColorSpace | str, target: ColorSpace | str
    ) -> ColorConverter | None:
        """Create a converter instance for a pair, or None if unregistered."""
        converter_class = cls.get(source, target)
        if converter_class is not None:
            return converter_class()
        return None

    @classmethod
    def list_pairs(cls) -> list[Pair]:
        """All registered (source, target) pairs."""
        return list(cls._registry.keys())

    @classmethod
    def list_spaces(cls) -> list[ColorSpace]:
        """Every model that appears on either side of a registered pair."""
        spaces = {space for pair in cls._registry for space in pair}
        return [space for space in ColorSpace if space in spaces]

    @classmethod
    def get_registry(cls) -> dict[Pair, Type[ColorConverter]]:
        """Copy of the full registry dictionary."""
        return cls._registry.copy()

    @classmethod
    def clear(cls) -> None:
        """Clear all registrations (useful for testing)."""
        cls._registry.clear()


def register_converter(cls: Type[ColorConverter]) -> Type[ColorConverter]:
    """
    Decorator to register a converter class.

    Usage:
        @register_converter
        class RgbToXyz(ColorConverter):
            ...
    """
    return ConverterRegistry.register(cls)

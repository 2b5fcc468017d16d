"""
Numeric and color traits.

Maps a storage sample dtype to the wider dtype used for intermediate
arithmetic and to its per-type constants (full-scale value, neutral chroma
offset, hue scale). Every conversion reads these once per call; nothing here
branches on values at runtime.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import numpy as np
from numpy.typing import DTypeLike, NDArray

from dipcolor.core.exceptions import UnsupportedSampleTypeError

if TYPE_CHECKING:
    from dipcolor.core.data_types import Color


@dataclass(frozen=True)
class SampleTrait:
    """
    Per-dtype constants for one sample representation.

    Attributes:
        dtype: Storage dtype of a sample
        extended: Dtype used inside a conversion before narrowing
        opaque: Full-scale value (255 for uint8, 1.0 for floats)
        hue_scale: Factor applied to hue degrees when stored
    """

    dtype: np.dtype
    extended: np.dtype
    opaque: float
    hue_scale: float = 1.0

    @property
    def is_integer(self) -> bool:
        """True for integer storage types."""
        return bool(np.issubdtype(self.dtype, np.integer))

    @property
    def half(self) -> float:
        """
        Neutral chroma offset (delta).

        128 for uint8, 32768 for uint16, 0.5 for floating point.
        """
        if self.is_integer:
            return float((int(self.opaque) + 1) // 2)
        return self.opaque / 2.0

    def narrow(self, values: Any) -> Any:
        """
        Cast extended values back to the storage dtype.

        Integer targets are rounded to nearest and saturated to the dtype's
        range. Returns a numpy scalar for scalar input.
        """
        values = np.asarray(values)
        if self.is_integer:
            info = np.iinfo(self.dtype)
            values = np.clip(np.rint(values), info.min, info.max)
        return values.astype(self.dtype)[()]

    def to_unit(self, values: Any) -> NDArray:
        """Scale storage values into the 0..1 convention."""
        values = np.asarray(values, dtype=self.extended)
        if self.is_integer:
            return values / self.opaque
        return values

    def from_unit(self, values: Any) -> NDArray:
        """Scale 0..1 values into the storage convention (still extended)."""
        values = np.asarray(values, dtype=self.extended)
        if self.is_integer:
            return values * self.opaque
        return values


_SAMPLE_TRAITS: dict[np.dtype, SampleTrait] = {
    np.dtype(np.uint8): SampleTrait(
        np.dtype(np.uint8), np.dtype(np.float64), 255.0, hue_scale=0.5
    ),
    np.dtype(np.uint16): SampleTrait(
        np.dtype(np.uint16), np.dtype(np.float64), 65535.0
    ),
    np.dtype(np.float32): SampleTrait(
        np.dtype(np.float32), np.dtype(np.float64), 1.0
    ),
    np.dtype(np.float64): SampleTrait(
        np.dtype(np.float64), np.dtype(np.float64), 1.0
    ),
}


def sample_trait(dtype: DTypeLike) -> SampleTrait:
    """
    Look up the trait for a sample dtype.

    Raises:
        UnsupportedSampleTypeError: If the dtype is not a supported sample type
    """
    try:
        key = np.dtype(dtype)
    except TypeError as exc:
        raise UnsupportedSampleTypeError(f"Not a sample type: {dtype!r}") from exc

    trait = _SAMPLE_TRAITS.get(key)
    if trait is None:
        supported = ", ".join(str(d) for d in _SAMPLE_TRAITS)
        raise UnsupportedSampleTypeError(
            f"Unsupported sample type {key} (supported: {supported})"
        )
    return trait


def supported_sample_types() -> list[np.dtype]:
    """Dtypes usable as color samples."""
    return list(_SAMPLE_TRAITS)


@dataclass(frozen=True)
class ColorTrait:
    """Base sample trait and channel count of a color type."""

    base: SampleTrait
    channels: int

    @property
    def extended(self) -> SampleTrait:
        """Trait of the extended (compute) color with the same channel count."""
        return sample_trait(self.base.extended)


def color_trait(color: Color) -> ColorTrait:
    """Build the trait of a color value."""
    return ColorTrait(sample_trait(color.dtype), color.channels)

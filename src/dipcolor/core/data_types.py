"""
Core data types.

Provides ColorSpace (model names), Color (an immutable channel-first sample
tuple) and DefaultConverter (element-wise sample type conversion).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterator

import numpy as np
from numpy.typing import DTypeLike, NDArray

from dipcolor.core.traits import ColorTrait, SampleTrait, color_trait, sample_trait


class ColorSpace(str, Enum):
    """Supported color models."""

    RGB = "RGB"
    GRAY = "GRAY"
    XYZ = "XYZ"
    YCRCB = "YCrCb"
    HSV = "HSV"
    HSL = "HSL"
    LAB = "Lab"
    LUV = "Luv"

    @classmethod
    def parse(cls, name: ColorSpace | str) -> ColorSpace:
        """
        Resolve a model name (case-insensitive, with aliases).

        Raises:
            ValueError: If the name does not denote a supported model
        """
        if isinstance(name, ColorSpace):
            return name
        key = str(name).upper()
        space = _ALIASES.get(key)
        if space is None:
            raise ValueError(f"Unknown colorspace: {name}")
        return space


_ALIASES: dict[str, ColorSpace] = {space.value.upper(): space for space in ColorSpace}
_ALIASES.update({
    "HSB": ColorSpace.HSV,
    "GREY": ColorSpace.GRAY,
    "GRAYSCALE": ColorSpace.GRAY,
})


@dataclass(frozen=True, eq=False)
class Color:
    """
    One color value: a fixed-length tuple of samples.

    The model the samples belong to is not part of the value; it is implied
    by the converter that produced it.

    Attributes:
        data: Read-only sample array with shape (C,) for a single pixel or
            (C, ...) for a plane of pixels sharing one conversion

    Shape Convention:
        - Channel-first, like ImageBuffer planes: data[i] is channel i
        - Supported dtypes: uint8, uint16, float32, float64
    """

    data: NDArray

    def __post_init__(self) -> None:
        """Copy, validate and freeze the sample array."""
        data = np.array(self.data)
        if data.ndim == 0:
            raise ValueError("Color data needs a leading channel axis")
        if data.shape[0] == 0:
            raise ValueError("Color must have at least one channel")

        sample_trait(data.dtype)
        data.setflags(write=False)
        object.__setattr__(self, "data", data)

    @classmethod
    def of(cls, *values: Any, dtype: DTypeLike = np.float32) -> Color:
        """Create a color from explicit channel values."""
        return cls(np.asarray(values, dtype=dtype))

    @property
    def channels(self) -> int:
        """Number of channels."""
        return self.data.shape[0]

    @property
    def dtype(self) -> np.dtype:
        """Sample dtype."""
        return self.data.dtype

    @property
    def trait(self) -> ColorTrait:
        """Color trait (base sample trait and channel count)."""
        return color_trait(self)

    @property
    def sample(self) -> SampleTrait:
        """Trait of the base sample type."""
        return sample_trait(self.data.dtype)

    def astype(self, dtype: DTypeLike) -> Color:
        """Element-wise cast into another sample type."""
        return DefaultConverter(dtype)(self)

    def tolist(self) -> list:
        """Samples as Python numbers."""
        return self.data.tolist()

    def __len__(self) -> int:
        return self.channels

    def __getitem__(self, index: int) -> Any:
        return self.data[index]

    def __iter__(self) -> Iterator[Any]:
        return iter(self.data)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Color):
            return NotImplemented
        return self.dtype == other.dtype and np.array_equal(self.data, other.data)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        if self.data.ndim == 1:
            return f"Color({self.tolist()}, dtype={self.dtype})"
        return f"Color(shape={self.data.shape}, dtype={self.dtype})"


class DefaultConverter:
    """
    Element-wise converter between sample types.

    Keeps the channel count and the model; applies no rescaling. Narrowing
    to an integer type rounds to nearest and saturates.

    Usage:
        wide = DefaultConverter(np.float64)(Color.of(255, 0, 0, dtype=np.uint8))
        # Color([255.0, 0.0, 0.0], dtype=float64)
    """

    def __init__(self, dtype: DTypeLike) -> None:
        self.target = sample_trait(dtype)

    def __call__(self, color: Color) -> Color:
        if color.dtype == self.target.dtype:
            return color
        return Color(self.target.narrow(color.data))

    @classmethod
    def lift(cls, color: Color) -> Color:
        """Convert a color into its extended-precision counterpart."""
        return cls(color.trait.extended.dtype)(color)

    def __repr__(self) -> str:
        return f"DefaultConverter({self.target.dtype})"

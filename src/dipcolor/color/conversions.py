"""
Color space conversion functors.

One stateless functor per directional model pair. Each takes a Color and
returns a new Color (RgbToGray returns a bare sample or plane) without
touching its input. Arithmetic runs in the sample type's extended dtype and
is narrowed to the storage dtype only when the result is assembled.

RGB is treated as linear. Gray, XYZ and YCrCb work directly on storage
values; HSV, HSL, Lab and Luv work on a 0..1 copy and store their results in
the per-type conventions below.

    model    float32 / float64        uint8                      uint16
    HSV/HSL  H 0..360, S, V/L 0..1    H/2, S*255, V*255          H, S*65535, V*65535
    Lab      L 0..100, a, b           L*255/100, a+128, b+128    L*65535/100, a+32768, b+32768
    Luv      L 0..100, u, v           L*255/100, (u+134)*255/354, (v+140)*255/262
"""

from __future__ import annotations

import logging
from typing import Any, ClassVar

import numpy as np
from numpy.typing import NDArray

from dipcolor.core.data_types import Color, ColorSpace, DefaultConverter
from dipcolor.core.exceptions import (
    ConversionNotAvailableError,
    UnsupportedChannelCountError,
)
from dipcolor.core.registry import ConverterRegistry, register_converter
from dipcolor.core.traits import SampleTrait

logger = logging.getLogger(__name__)

# Luma weights (ITU-R BT.601)
LUMA_R = 0.299
LUMA_G = 0.587
LUMA_B = 0.114

# YCrCb chroma scales and their inverses
CR_SCALE = 0.713
CB_SCALE = 0.564
CR_TO_R = 1.403
CR_TO_G = 0.714
CB_TO_G = 0.344
CB_TO_B = 1.773

# Linear RGB <-> CIE XYZ, D65
RGB_TO_XYZ = (
    (0.412453, 0.357580, 0.180423),
    (0.212671, 0.715160, 0.072169),
    (0.019334, 0.119193, 0.950227),
)
XYZ_TO_RGB = (
    (3.240479, -1.53715, -0.498535),
    (-0.969256, 1.875991, 0.041556),
    (0.055648, -0.204043, 1.057311),
)

# Reference white
D65X = 0.950456
D65Z = 1.088754
LUV_UN = 0.19793943
LUV_VN = 0.46831096

# CIE lightness and f(t)
ONE_THIRD = 1.0 / 3.0
CIE_EPSILON = 0.008856
CIE_KAPPA = 903.3
LAB_F_SLOPE = 7.787
LAB_F_OFFSET = 16.0 / 116.0
CIE_F_EPSILON = CIE_EPSILON ** ONE_THIRD
CIE_L_EPSILON = 116.0 * CIE_F_EPSILON - 16.0

# Luv storage ranges for integer samples
LUV_U_MIN = -134.0
LUV_U_SPAN = 354.0
LUV_V_MIN = -140.0
LUV_V_SPAN = 262.0


# =============================================================================
# Helpers
# =============================================================================

def _assemble(sample: SampleTrait, *channels: Any) -> Color:
    """Narrow each channel to the storage dtype and build a Color."""
    return Color(np.stack([sample.narrow(c) for c in channels], axis=0))


def _unit(color: Color) -> Color:
    """Extended copy of a color scaled to the 0..1 convention."""
    lifted = DefaultConverter.lift(color)
    return Color(color.sample.to_unit(lifted.data))


def _mat3(m: tuple, a: Any, b: Any, c: Any) -> tuple[Any, Any, Any]:
    return (
        m[0][0] * a + m[0][1] * b + m[0][2] * c,
        m[1][0] * a + m[1][1] * b + m[1][2] * c,
        m[2][0] * a + m[2][1] * b + m[2][2] * c,
    )


def _safe_div(num: Any, den: Any) -> NDArray:
    """num / den, with 0 wherever den is exactly zero."""
    num, den = np.broadcast_arrays(np.asarray(num), np.asarray(den))
    out = np.zeros(num.shape, dtype=np.result_type(num, den, np.float64))
    np.divide(num, den, out=out, where=den != 0)
    return out


def _luma(r: Any, g: Any, b: Any) -> Any:
    return LUMA_R * r + LUMA_G * g + LUMA_B * b


def _hue(r: Any, g: Any, b: Any, vmax: Any, delta: Any) -> NDArray:
    """Hue in degrees on [0, 360]; 0 for achromatic pixels."""
    h = np.where(
        vmax == r,
        60.0 * _safe_div(g - b, delta),
        np.where(
            vmax == g,
            120.0 + 60.0 * _safe_div(b - r, delta),
            240.0 + 60.0 * _safe_div(r - g, delta),
        ),
    )
    h = np.where(delta > 0, h, 0.0)
    return np.where(h < 0, h + 360.0, h)


def _sector(h: Any) -> tuple[NDArray, NDArray]:
    """Split hue degrees into a sector index 0..5 and the fraction within it."""
    h6 = np.mod(h, 360.0) / 60.0
    floor = np.floor(h6)
    return floor.astype(np.int64) % 6, h6 - floor


def _lab_f(t: Any) -> NDArray:
    return np.where(t > CIE_EPSILON, np.cbrt(t), LAB_F_SLOPE * t + LAB_F_OFFSET)


def _lab_f_inv(t: Any) -> NDArray:
    return np.where(t > CIE_F_EPSILON, t * t * t, (t - LAB_F_OFFSET) / LAB_F_SLOPE)


def _lightness(y: Any) -> NDArray:
    """CIE L* (0..100) from relative luminance Y."""
    return np.where(y > CIE_EPSILON, 116.0 * np.cbrt(y) - 16.0, CIE_KAPPA * y)


def _lightness_inv(l: Any) -> NDArray:
    fy = (l + 16.0) / 116.0
    return np.where(l > CIE_L_EPSILON, fy * fy * fy, l / CIE_KAPPA)


def _encode_hsx(sample: SampleTrait, h: Any, s: Any, x: Any) -> tuple[Any, Any, Any]:
    if sample.is_integer:
        return h * sample.hue_scale, s * sample.opaque, x * sample.opaque
    return h, s, x


def _decode_hsx(sample: SampleTrait, h: Any, s: Any, x: Any) -> tuple[Any, Any, Any]:
    if sample.is_integer:
        return h / sample.hue_scale, s / sample.opaque, x / sample.opaque
    return h, s, x


def _encode_lab(sample: SampleTrait, l: Any, a: Any, b: Any) -> tuple[Any, Any, Any]:
    if sample.is_integer:
        return l * sample.opaque / 100.0, a + sample.half, b + sample.half
    return l, a, b


def _decode_lab(sample: SampleTrait, l: Any, a: Any, b: Any) -> tuple[Any, Any, Any]:
    if sample.is_integer:
        return l * 100.0 / sample.opaque, a - sample.half, b - sample.half
    return l, a, b


def _encode_luv(sample: SampleTrait, l: Any, u: Any, v: Any) -> tuple[Any, Any, Any]:
    if sample.is_integer:
        return (
            l * sample.opaque / 100.0,
            (u - LUV_U_MIN) * sample.opaque / LUV_U_SPAN,
            (v - LUV_V_MIN) * sample.opaque / LUV_V_SPAN,
        )
    return l, u, v


def _decode_luv(sample: SampleTrait, l: Any, u: Any, v: Any) -> tuple[Any, Any, Any]:
    if sample.is_integer:
        return (
            l * 100.0 / sample.opaque,
            u * LUV_U_SPAN / sample.opaque + LUV_U_MIN,
            v * LUV_V_SPAN / sample.opaque + LUV_V_MIN,
        )
    return l, u, v


def _xyz_unit_to_rgb(sample: SampleTrait, x: Any, y: Any, z: Any) -> Color:
    """Unit-scale XYZ into RGB stored in the given sample type."""
    rgb = XyzToRgb()(Color(np.stack([x, y, z], axis=0)))
    return _assemble(sample, *sample.from_unit(rgb.data))


# =============================================================================
# Base class
# =============================================================================

class ColorConverter:
    """
    Base class for conversion functors.

    Subclasses set `source` and `target` and override `convert`. Calling an
    instance checks the channel count and then delegates to `convert`.

    Class Attributes:
        source: Model of the input color
        target: Model of the output color
        channels: Channel count the converter accepts (never 2)
        allow_extra_channels: Accept more channels than `channels` and ignore
            the extras (e.g. RGBA into RgbToGray)
    """

    source: ClassVar[ColorSpace]
    target: ClassVar[ColorSpace]
    channels: ClassVar[int] = 3
    allow_extra_channels: ClassVar[bool] = False

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if cls.channels == 2:
            raise TypeError(
                f"{cls.__name__}: two-channel colors are not supported by any conversion"
            )
        if cls.channels < 1:
            raise TypeError(f"{cls.__name__}: channel count must be positive")

    def __call__(self, color: Color) -> Any:
        self.check_channels(color)
        return self.convert(color)

    def check_channels(self, color: Color) -> None:
        """Raise UnsupportedChannelCountError unless the color fits."""
        n = color.channels
        if n == self.channels:
            return
        if self.allow_extra_channels and n > self.channels and n != 2:
            return
        raise UnsupportedChannelCountError(
            f"{type(self).__name__} expects {self.channels} channels, got {n}"
        )

    def convert(self, color: Color) -> Any:
        """Perform the conversion. Placeholder converters fail here."""
        raise ConversionNotAvailableError(f"{type(self).__name__} is not implemented")

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


# =============================================================================
# RGB <-> Gray
# =============================================================================

@register_converter
class RgbToGray(ColorConverter):
    """Y <- 0.299*R + 0.587*G + 0.114*B, on storage values.

    Returns a bare sample (or plane), not a Color.
    """

    source = ColorSpace.RGB
    target = ColorSpace.GRAY
    allow_extra_channels = True

    def convert(self, color: Color) -> Any:
        r, g, b = DefaultConverter.lift(color)[:3]
        return color.sample.narrow(_luma(r, g, b))


@register_converter
class GrayToRgb(ColorConverter):
    """Replicate a single gray channel into R, G and B."""

    source = ColorSpace.GRAY
    target = ColorSpace.RGB
    channels = 1

    def convert(self, color: Color) -> Color:
        y = color[0]
        return Color(np.stack([y, y, y], axis=0))


# =============================================================================
# RGB <-> XYZ
# =============================================================================

@register_converter
class RgbToXyz(ColorConverter):
    """Linear RGB to CIE XYZ (D65) on storage values."""

    source = ColorSpace.RGB
    target = ColorSpace.XYZ

    def convert(self, color: Color) -> Color:
        r, g, b = DefaultConverter.lift(color)
        return _assemble(color.sample, *_mat3(RGB_TO_XYZ, r, g, b))


@register_converter
class XyzToRgb(ColorConverter):
    """CIE XYZ (D65) to linear RGB; numeric inverse of RgbToXyz."""

    source = ColorSpace.XYZ
    target = ColorSpace.RGB

    def convert(self, color: Color) -> Color:
        x, y, z = DefaultConverter.lift(color)
        return _assemble(color.sample, *_mat3(XYZ_TO_RGB, x, y, z))


# =============================================================================
# RGB <-> YCrCb
# =============================================================================

@register_converter
class RgbToYCrCb(ColorConverter):
    """
    RGB to YCrCb.

        Y  <- 0.299*R + 0.587*G + 0.114*B
        Cr <- (R - Y)*0.713 + delta
        Cb <- (B - Y)*0.564 + delta

    delta is 128 for uint8, 32768 for uint16 and 0.5 for floats.
    """

    source = ColorSpace.RGB
    target = ColorSpace.YCRCB

    def convert(self, color: Color) -> Color:
        sample = color.sample
        r, _, b = DefaultConverter.lift(color)
        y = RgbToGray()(color)
        delta = sample.half

        cr = (r - y) * CR_SCALE + delta
        cb = (b - y) * CB_SCALE + delta

        return _assemble(sample, y, cr, cb)


@register_converter
class YCrCbToRgb(ColorConverter):
    """
    YCrCb to RGB.

        R <- Y + 1.403*(Cr - delta)
        G <- Y - 0.714*(Cr - delta) - 0.344*(Cb - delta)
        B <- Y + 1.773*(Cb - delta)
    """

    source = ColorSpace.YCRCB
    target = ColorSpace.RGB

    def convert(self, color: Color) -> Color:
        sample = color.sample
        y, cr, cb = DefaultConverter.lift(color)
        cr = cr - sample.half
        cb = cb - sample.half

        r = y + CR_TO_R * cr
        g = y - CR_TO_G * cr - CB_TO_G * cb
        b = y + CB_TO_B * cb

        return _assemble(sample, r, g, b)


# =============================================================================
# RGB <-> HSV
# =============================================================================

@register_converter
class RgbToHsv(ColorConverter):
    """
    RGB to HSV.

    On 0..1 RGB:
        V <- max(R, G, B)
        S <- (V - min(R, G, B)) / V if V != 0, 0 otherwise
        H <- 60*(G - B)/delta        if V = R
             120 + 60*(B - R)/delta  if V = G
             240 + 60*(R - G)/delta  if V = B
        H <- H + 360 if H < 0

    Achromatic pixels (delta = 0) get H = 0.
    """

    source = ColorSpace.RGB
    target = ColorSpace.HSV

    def convert(self, color: Color) -> Color:
        r, g, b = _unit(color)

        vmax = np.maximum(np.maximum(r, g), b)
        vmin = np.minimum(np.minimum(r, g), b)
        delta = vmax - vmin

        s = _safe_div(delta, vmax)
        h = _hue(r, g, b, vmax, delta)

        return _assemble(color.sample, *_encode_hsx(color.sample, h, s, vmax))


@register_converter
class HsvToRgb(ColorConverter):
    """HSV to RGB. S = 0 yields R = G = B = V whatever H holds."""

    source = ColorSpace.HSV
    target = ColorSpace.RGB

    def convert(self, color: Color) -> Color:
        sample = color.sample
        h, s, v = _decode_hsx(sample, *DefaultConverter.lift(color))
        i, f = _sector(h)

        p = v * (1.0 - s)
        q = v * (1.0 - s * f)
        t = v * (1.0 - s * (1.0 - f))

        r = np.choose(i, [v, q, p, p, t, v])
        g = np.choose(i, [t, v, v, q, p, p])
        b = np.choose(i, [p, p, t, v, v, q])

        return _assemble(sample, *sample.from_unit(np.stack([r, g, b], axis=0)))


# =============================================================================
# RGB <-> HSL
# =============================================================================

@register_converter
class RgbToHsl(ColorConverter):
    """
    RGB to HSL.

    On 0..1 RGB:
        L <- (Vmax + Vmin) / 2
        S <- (Vmax - Vmin) / (Vmax + Vmin)        if L < 0.5
             (Vmax - Vmin) / (2 - (Vmax + Vmin))  if L >= 0.5
        H as for HSV

    Black and white have zero denominators; S is 0 there.
    """

    source = ColorSpace.RGB
    target = ColorSpace.HSL

    def convert(self, color: Color) -> Color:
        r, g, b = _unit(color)

        vmax = np.maximum(np.maximum(r, g), b)
        vmin = np.minimum(np.minimum(r, g), b)
        delta = vmax - vmin
        total = vmax + vmin

        l = total / 2.0
        s = np.where(l < 0.5, _safe_div(delta, total), _safe_div(delta, 2.0 - total))
        h = _hue(r, g, b, vmax, delta)

        return _assemble(color.sample, *_encode_hsx(color.sample, h, s, l))


@register_converter
class HslToRgb(ColorConverter):
    """HSL to RGB via chroma C = (1 - |2L - 1|) * S."""

    source = ColorSpace.HSL
    target = ColorSpace.RGB

    def convert(self, color: Color) -> Color:
        sample = color.sample
        h, s, l = _decode_hsx(sample, *DefaultConverter.lift(color))
        i, f = _sector(h)

        c = (1.0 - np.abs(2.0 * l - 1.0)) * s
        # Second-largest component; rises in even sectors, falls in odd ones
        x = c * np.where(i % 2 == 0, f, 1.0 - f)
        zero = np.zeros_like(c)
        m = l - c / 2.0

        r = np.choose(i, [c, x, zero, zero, x, c]) + m
        g = np.choose(i, [x, c, c, x, zero, zero]) + m
        b = np.choose(i, [zero, zero, x, c, c, x]) + m

        return _assemble(sample, *sample.from_unit(np.stack([r, g, b], axis=0)))


# =============================================================================
# RGB <-> Lab (CIE L*a*b*)
# =============================================================================

@register_converter
class RgbToLab(ColorConverter):
    """
    RGB to CIE L*a*b*.

    On 0..1 RGB, through RgbToXyz:
        X <- X/Xn, Z <- Z/Zn  (Xn = 0.950456, Zn = 1.088754)
        L <- 116*Y^(1/3) - 16  for Y > 0.008856
             903.3*Y           otherwise
        a <- 500*(f(X) - f(Y))
        b <- 200*(f(Y) - f(Z))
    where f(t) = t^(1/3) for t > 0.008856, 7.787*t + 16/116 otherwise.
    """

    source = ColorSpace.RGB
    target = ColorSpace.LAB

    def convert(self, color: Color) -> Color:
        x, y, z = RgbToXyz()(_unit(color))
        x = x / D65X
        z = z / D65Z

        fy = _lab_f(y)
        l = _lightness(y)
        a = 500.0 * (_lab_f(x) - fy)
        b = 200.0 * (fy - _lab_f(z))

        return _assemble(color.sample, *_encode_lab(color.sample, l, a, b))


@register_converter
class LabToRgb(ColorConverter):
    """CIE L*a*b* to RGB; inverts each branch of RgbToLab."""

    source = ColorSpace.LAB
    target = ColorSpace.RGB

    def convert(self, color: Color) -> Color:
        sample = color.sample
        l, a, b = _decode_lab(sample, *DefaultConverter.lift(color))

        y = _lightness_inv(l)
        fy = _lab_f(y)
        x = _lab_f_inv(fy + a / 500.0) * D65X
        z = _lab_f_inv(fy - b / 200.0) * D65Z

        return _xyz_unit_to_rgb(sample, x, y, z)


# =============================================================================
# RGB <-> Luv (CIE L*u*v*)
# =============================================================================

@register_converter
class RgbToLuv(ColorConverter):
    """
    RGB to CIE L*u*v*.

    On 0..1 RGB, through RgbToXyz:
        L  <- 116*Y^(1/3) - 16 for Y > 0.008856, 903.3*Y otherwise
        u' <- 4*X / (X + 15*Y + 3*Z)
        v' <- 9*Y / (X + 15*Y + 3*Z)
        u  <- 13*L*(u' - un), un = 0.19793943
        v  <- 13*L*(v' - vn), vn = 0.46831096
    """

    source = ColorSpace.RGB
    target = ColorSpace.LUV

    def convert(self, color: Color) -> Color:
        x, y, z = RgbToXyz()(_unit(color))

        l = _lightness(y)
        denom = x + 15.0 * y + 3.0 * z
        u = 13.0 * l * (_safe_div(4.0 * x, denom) - LUV_UN)
        v = 13.0 * l * (_safe_div(9.0 * y, denom) - LUV_VN)

        return _assemble(color.sample, *_encode_luv(color.sample, l, u, v))


@register_converter
class LuvToRgb(ColorConverter):
    """
    CIE L*u*v* to RGB.

        u' <- u/(13*L) + un,  v' <- v/(13*L) + vn
        X  <- 9*u'*Y / (4*v')
        Z  <- (12 - 3*u' - 20*v')*Y / (4*v')

    L = 0 is black.
    """

    source = ColorSpace.LUV
    target = ColorSpace.RGB

    def convert(self, color: Color) -> Color:
        sample = color.sample
        l, u, v = _decode_luv(sample, *DefaultConverter.lift(color))

        y = _lightness_inv(l)
        l13 = 13.0 * l
        u_ = _safe_div(u, l13) + LUV_UN
        v_ = _safe_div(v, l13) + LUV_VN

        x = _safe_div(9.0 * u_ * y, 4.0 * v_)
        z = _safe_div((12.0 - 3.0 * u_ - 20.0 * v_) * y, 4.0 * v_)

        return _xyz_unit_to_rgb(sample, x, y, z)


# =============================================================================
# Conversion dispatch
# =============================================================================

def convert_color(
    color: Color,
    from_space: ColorSpace | str,
    to_space: ColorSpace | str,
) -> Color:
    """
    Convert a color between models.

    Uses the registered converter for the pair when there is one, otherwise
    goes through RGB. Gray results are wrapped as 1-channel colors.

    Args:
        color: Source color (one pixel or a channel-first plane)
        from_space: Source model name
        to_space: Target model name

    Returns:
        Converted color

    Raises:
        ValueError: If either model name is unknown
        ConversionNotAvailableError: If no route between the models exists
    """
    source = ColorSpace.parse(from_space)
    target = ColorSpace.parse(to_space)

    if source == target:
        return color

    converter = ConverterRegistry.create(source, target)
    if converter is not None:
        result = converter(color)
    else:
        to_rgb = ConverterRegistry.create(source, ColorSpace.RGB)
        from_rgb = ConverterRegistry.create(ColorSpace.RGB, target)
        if to_rgb is None or from_rgb is None:
            raise ConversionNotAvailableError(
                f"No conversion from {source.value} to {target.value}"
            )
        logger.debug("[Color] Routing %s -> %s via RGB", source.value, target.value)
        result = from_rgb(to_rgb(color))

    if not isinstance(result, Color):
        result = Color(np.asarray(result)[np.newaxis])
    return result


def list_colorspaces() -> list[str]:
    """Names of the models reachable through registered converters."""
    return [space.value for space in ConverterRegistry.list_spaces()]

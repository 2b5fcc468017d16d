"""Color model conversion functors."""

from dipcolor.color.conversions import (
    ColorConverter,
    GrayToRgb,
    HslToRgb,
    HsvToRgb,
    LabToRgb,
    LuvToRgb,
    RgbToGray,
    RgbToHsl,
    RgbToHsv,
    RgbToLab,
    RgbToLuv,
    RgbToXyz,
    RgbToYCrCb,
    XyzToRgb,
    YCrCbToRgb,
    convert_color,
    list_colorspaces,
)

__all__ = [
    "ColorConverter",
    "GrayToRgb",
    "HslToRgb",
    "HsvToRgb",
    "LabToRgb",
    "LuvToRgb",
    "RgbToGray",
    "RgbToHsl",
    "RgbToHsv",
    "RgbToLab",
    "RgbToLuv",
    "RgbToXyz",
    "RgbToYCrCb",
    "XyzToRgb",
    "YCrCbToRgb",
    "convert_color",
    "list_colorspaces",
]

"""
Tests for sample and color traits.
"""

import numpy as np
import pytest

from dipcolor.core.data_types import Color
from dipcolor.core.exceptions import UnsupportedSampleTypeError
from dipcolor.core.traits import color_trait, sample_trait, supported_sample_types


class TestSampleTrait:
    """Tests for per-dtype constants."""

    def test_uint8(self):
        trait = sample_trait(np.uint8)

        assert trait.dtype == np.uint8
        assert trait.extended == np.float64
        assert trait.opaque == 255.0
        assert trait.half == 128.0
        assert trait.hue_scale == 0.5
        assert trait.is_integer

    def test_uint16(self):
        trait = sample_trait(np.uint16)

        assert trait.opaque == 65535.0
        assert trait.half == 32768.0
        assert trait.hue_scale == 1.0

    @pytest.mark.parametrize("dtype", [np.float32, np.float64])
    def test_float(self, dtype):
        trait = sample_trait(dtype)

        assert trait.extended == np.float64
        assert trait.opaque == 1.0
        assert trait.half == 0.5
        assert not trait.is_integer

    def test_accepts_dtype_objects_and_names(self):
        assert sample_trait(np.dtype("uint8")) is sample_trait("uint8")

    @pytest.mark.parametrize("dtype", [np.int32, np.int64, np.complex128, bool])
    def test_unsupported_dtype(self, dtype):
        with pytest.raises(UnsupportedSampleTypeError, match="Unsupported sample type"):
            sample_trait(dtype)

    def test_unsupported_is_type_error(self):
        with pytest.raises(TypeError):
            sample_trait("not a dtype")

    def test_supported_sample_types(self):
        assert set(supported_sample_types()) == {
            np.dtype(np.uint8),
            np.dtype(np.uint16),
            np.dtype(np.float32),
            np.dtype(np.float64),
        }


class TestNarrowing:
    """Tests for narrowing extended values back to storage."""

    def test_integer_rounds_and_saturates(self):
        trait = sample_trait(np.uint8)
        result = trait.narrow(np.array([-3.0, 12.4, 12.6, 300.0]))

        assert result.dtype == np.uint8
        np.testing.assert_array_equal(result, [0, 12, 13, 255])

    def test_uint16_saturates(self):
        result = sample_trait(np.uint16).narrow(np.array([70000.0, -1.0]))
        np.testing.assert_array_equal(result, [65535, 0])

    def test_scalar_stays_scalar(self):
        result = sample_trait(np.uint8).narrow(3.6)

        assert isinstance(result, np.uint8)
        assert result == 4

    def test_float_is_plain_cast(self):
        result = sample_trait(np.float32).narrow(np.array([1.5, -0.25], dtype=np.float64))

        assert result.dtype == np.float32
        np.testing.assert_array_equal(result, [1.5, -0.25])


class TestUnitScaling:
    """Tests for 0..1 scaling."""

    def test_integer_to_unit(self):
        trait = sample_trait(np.uint8)
        np.testing.assert_allclose(trait.to_unit(np.array([0, 255])), [0.0, 1.0])

    def test_integer_from_unit(self):
        trait = sample_trait(np.uint16)
        np.testing.assert_allclose(trait.from_unit(np.array([0.0, 1.0])), [0.0, 65535.0])

    def test_float_unchanged(self):
        trait = sample_trait(np.float32)
        result = trait.to_unit(np.array([0.25], dtype=np.float32))

        assert result.dtype == np.float64
        np.testing.assert_allclose(result, [0.25])


class TestColorTrait:
    """Tests for color traits."""

    def test_from_color(self):
        trait = color_trait(Color.of(1, 2, 3, dtype=np.uint8))

        assert trait.channels == 3
        assert trait.base.dtype == np.uint8
        assert trait.extended.dtype == np.float64

    def test_extended_keeps_channel_count(self):
        color = Color.of(0.1, 0.2, 0.3, 1.0)
        assert color.trait.channels == 4
        assert color.trait.extended.dtype == np.float64

"""
Unit tests for HSL helpers
"""

import numpy as np
import pytest

from boundary_scan.domain.entities import Segment
from boundary_scan.infrastructure.color import hsl_to_rgb, hue_sweep, rgb_to_hex, to_named_color


class TestHueSweep:

    def test_one_item_per_degree(self):
        sweep = hue_sweep(50, 50)
        assert len(sweep) == 360
        assert sweep[0] == (0, 50, 50)
        assert sweep[-1] == (359, 50, 50)

    def test_partial_sweep(self):
        assert hue_sweep(100, 25, count=3) == [(0, 100, 25), (1, 100, 25), (2, 100, 25)]

    @pytest.mark.parametrize("saturation,lightness,count", [
        (-1, 50, 360),
        (50, 101, 360),
        (50, 50, 0),
        (50, 50, 361),
    ])
    def test_out_of_range(self, saturation, lightness, count):
        with pytest.raises(ValueError):
            hue_sweep(saturation, lightness, count=count)


class TestHslToRgb:

    @pytest.mark.parametrize("hsl,rgb", [
        ((0, 100, 50), (255, 0, 0)),
        ((120, 100, 50), (0, 255, 0)),
        ((240, 100, 50), (0, 0, 255)),
        ((120, 50, 50), (64, 191, 64)),
        ((0, 0, 100), (255, 255, 255)),
        ((0, 0, 0), (0, 0, 0)),
    ])
    def test_reference_colours(self, hsl, rgb):
        assert tuple(hsl_to_rgb(np.array(hsl))) == rgb

    def test_batch_conversion(self):
        result = hsl_to_rgb(np.array([[0, 100, 50], [360, 100, 50]]))
        assert result.shape == (2, 3)
        assert result.tolist() == [[255, 0, 0], [255, 0, 0]]

    def test_hex(self):
        assert rgb_to_hex((64, 191, 64)) == "#40bf40"

    def test_hex_never_shortened(self):
        assert rgb_to_hex((255, 0, 0)) == "#ff0000"
        assert rgb_to_hex((0, 0, 0)) == "#000000"


class TestToNamedColor:

    def test_segment_enrichment(self):
        named = to_named_color(Segment(index=120, label="Fern", item=(120, 50, 50)))

        assert named.name == "Fern"
        assert named.index == 120
        assert named.color.hsl == [120.0, 50.0, 50.0]
        assert named.color.rgb == [64, 191, 64]
        assert named.color.hex == "#40bf40"

"""
HSL colour helpers for hue scans.

Builds the item sequence a hue scan walks over (one HSL triple per hue
degree at fixed saturation/lightness) and turns emitted segments into the
NamedColor shape shown to users (name plus hsl/rgb/hex swatch).
"""

from typing import List, Sequence, Tuple

import numpy as np

from boundary_scan.domain.entities import Segment
from boundary_scan.models import ColorValue, NamedColor

HSL = Tuple[float, float, float]


def hue_sweep(saturation: float, lightness: float, count: int = 360) -> List[HSL]:
    """
    One HSL colour per hue degree: [(0, s, l), (1, s, l), ..., (count-1, s, l)].

    Args:
        saturation: Percent, 0-100
        lightness: Percent, 0-100
        count: Number of hues (1-360)
    """
    if not 0 <= saturation <= 100:
        raise ValueError(f"saturation must be in [0, 100], got {saturation}")
    if not 0 <= lightness <= 100:
        raise ValueError(f"lightness must be in [0, 100], got {lightness}")
    if not 1 <= count <= 360:
        raise ValueError(f"count must be in [1, 360], got {count}")
    return [(hue, saturation, lightness) for hue in range(count)]


def hsl_to_rgb(hsl: np.ndarray) -> np.ndarray:
    """
    Convert HSL (hue degrees, saturation %, lightness %) to 8-bit sRGB.

    Accepts a single triple or an (N, 3) array; returns the same leading shape.
    """
    hsl = np.asarray(hsl, dtype=np.float64)
    single = hsl.ndim == 1
    hsl = np.atleast_2d(hsl)

    h = np.mod(hsl[:, 0], 360.0)
    s = np.clip(hsl[:, 1] / 100.0, 0.0, 1.0)
    l = np.clip(hsl[:, 2] / 100.0, 0.0, 1.0)

    # CSS Color 4 hsl-to-rgb
    a = s * np.minimum(l, 1 - l)
    channels = []
    for n in (0, 8, 4):
        k = np.mod(n + h / 30.0, 12)
        channels.append(l - a * np.maximum(-1, np.minimum(np.minimum(k - 3, 9 - k), 1)))
    rgb = np.column_stack(channels)

    rgb = np.clip(np.round(rgb * 255), 0, 255).astype(np.int64)
    return rgb[0] if single else rgb


def rgb_to_hex(rgb: Sequence[int]) -> str:
    r, g, b = (int(c) for c in rgb)
    return f"#{r:02x}{g:02x}{b:02x}"


def to_named_color(segment: Segment) -> NamedColor:
    """Enrich a segment whose item is an HSL triple into a NamedColor."""
    hsl = [float(c) for c in segment.item]
    rgb = [int(c) for c in hsl_to_rgb(np.array(hsl))]
    return NamedColor(
        name=str(segment.label),
        color=ColorValue(hsl=hsl, rgb=rgb, hex=rgb_to_hex(rgb)),
        index=segment.index,
    )

"""
Colour helpers: item generation and segment enrichment for hue scans.
"""

from .hsl import hue_sweep, hsl_to_rgb, rgb_to_hex, to_named_color

__all__ = [
    'hue_sweep',
    'hsl_to_rgb',
    'rgb_to_hex',
    'to_named_color',
]

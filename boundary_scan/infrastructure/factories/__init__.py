"""
Factories for wiring scan use cases.
"""

from .scan_factory import ScanFactory

__all__ = [
    'ScanFactory',
]

"""
Application Use Cases
"""

from .discover_boundaries_use_case import DiscoverBoundariesUseCase

__all__ = [
    'DiscoverBoundariesUseCase',
]

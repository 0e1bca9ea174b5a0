"""
Application DTOs

Data Transfer Objects for scan use cases.
"""

from .discover_request import DiscoverRequest

__all__ = [
    'DiscoverRequest',
]

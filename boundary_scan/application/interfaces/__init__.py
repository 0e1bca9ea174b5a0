"""
Application Interfaces

Abstractions the use cases depend on (dependency inversion).
"""

from .classifier import IClassifier

__all__ = [
    'IClassifier',
]

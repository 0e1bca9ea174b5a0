"""
Classifier Clients

Concrete implementations of IClassifier.

Available Clients:
- ColorApiClassifier: names HSL colours via TheColorAPI (aiohttp)
- CallableClassifier: wraps a plain function
"""

from .color_api_client import ColorApiClassifier, format_hsl_param
from .callable_classifier import CallableClassifier

__all__ = [
    'ColorApiClassifier',
    'format_hsl_param',
    'CallableClassifier',
]

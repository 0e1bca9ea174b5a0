"""
Domain Services for the boundary scan engine
"""

from .classifier_cache import ClassifierCache, default_item_key
from .sampler import Sampler, sample_indices
from .range_bisector import RangeBisector
from .ordered_emitter import OrderedEmitter
from .concurrency import cancel_and_wait, gather_or_cancel

__all__ = [
    "ClassifierCache",
    "default_item_key",
    "Sampler",
    "sample_indices",
    "RangeBisector",
    "OrderedEmitter",
    "cancel_and_wait",
    "gather_or_cancel",
]

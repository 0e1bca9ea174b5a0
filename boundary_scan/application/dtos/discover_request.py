"""
DiscoverRequest DTO

Tuning knobs for one boundary discovery run.
"""

from dataclasses import dataclass


@dataclass
class DiscoverRequest:
    """
    Request parameters for DiscoverBoundariesUseCase.

    Attributes:
        stride: Distance between coarse sample indices (>= 2)
        max_concurrency: Upper bound on in-flight classifier calls (>= 1)

    Design Notes:
        - Items, classifier and cancellation token are NOT part of the request;
          items and token are passed per run, the classifier is injected
    """
    stride: int = 10
    max_concurrency: int = 8

    def __post_init__(self):
        """Validate request parameters"""
        if self.stride < 2:
            raise ValueError(f"stride must be >= 2, got {self.stride}")
        if self.max_concurrency < 1:
            raise ValueError(
                f"max_concurrency must be >= 1, got {self.max_concurrency}"
            )

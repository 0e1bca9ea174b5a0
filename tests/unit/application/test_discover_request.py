"""
Unit tests for DiscoverRequest validation
"""

import pytest

from boundary_scan.application.dtos import DiscoverRequest


class TestDiscoverRequest:

    def test_defaults(self):
        request = DiscoverRequest()
        assert request.stride == 10
        assert request.max_concurrency == 8

    @pytest.mark.parametrize("stride", [1, 0, -5])
    def test_rejects_small_stride(self, stride):
        with pytest.raises(ValueError, match="stride"):
            DiscoverRequest(stride=stride)

    def test_rejects_zero_concurrency(self):
        with pytest.raises(ValueError, match="max_concurrency"):
            DiscoverRequest(max_concurrency=0)

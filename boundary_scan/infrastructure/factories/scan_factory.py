"""
Scan Factory

Factory for creating fully-wired scan use cases with all dependencies.

This factory handles the dependency injection needed for scans, making it
easy to create properly configured use cases in different contexts
(CLI, name service, tests, notebooks).
"""

import os
from typing import Any, Callable, Dict, Hashable, Optional

from boundary_scan.application.dtos import DiscoverRequest
from boundary_scan.application.interfaces import IClassifier
from boundary_scan.application.use_cases import DiscoverBoundariesUseCase
from boundary_scan.config import get_section
from boundary_scan.domain.services import ClassifierCache
from boundary_scan.infrastructure.clients import ColorApiClassifier


class ScanFactory:
    """
    Factory to create fully-wired scan use cases.

    Precedence for every setting: explicit argument, then environment
    variable, then boundary_scan_config.yaml.

    Environment Variables:
    - SCAN_STRIDE: Coarse sample stride
    - SCAN_MAX_CONCURRENCY: In-flight classifier call limit
    - COLOR_API_URL: TheColorAPI base URL
    - COLOR_API_TIMEOUT: Per-request timeout in seconds
    """

    @staticmethod
    def engine_settings(
        stride: Optional[int] = None,
        max_concurrency: Optional[int] = None,
    ) -> DiscoverRequest:
        """Resolve stride/concurrency into a validated DiscoverRequest."""
        engine = get_section("engine")
        stride = stride or int(os.getenv("SCAN_STRIDE", engine.get("stride", 10)))
        max_concurrency = max_concurrency or int(
            os.getenv("SCAN_MAX_CONCURRENCY", engine.get("max_concurrency", 8))
        )
        return DiscoverRequest(stride=stride, max_concurrency=max_concurrency)

    @staticmethod
    def color_api_settings(
        api_url: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> Dict[str, Any]:
        section = get_section("color_api")
        return {
            "base_url": api_url or os.getenv(
                "COLOR_API_URL", section.get("base_url", "https://www.thecolorapi.com")
            ),
            "timeout": timeout or float(
                os.getenv("COLOR_API_TIMEOUT", section.get("timeout_seconds", 15.0))
            ),
            "max_retries": int(section.get("max_retries", 2)),
            "retry_backoff": float(section.get("retry_backoff", 2.0)),
        }

    @staticmethod
    def create_color_classifier(
        api_url: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> ColorApiClassifier:
        return ColorApiClassifier(**ScanFactory.color_api_settings(api_url, timeout))

    @staticmethod
    def create_use_case(
        classifier: IClassifier,
        stride: Optional[int] = None,
        max_concurrency: Optional[int] = None,
        cache: Optional[ClassifierCache] = None,
        key_fn: Optional[Callable[[Any], Hashable]] = None,
    ) -> DiscoverBoundariesUseCase:
        """
        Create a DiscoverBoundariesUseCase around any classifier.

        Args:
            classifier: Label source
            stride: Coarse sample stride (default from env/config)
            max_concurrency: In-flight call limit (default from env/config)
            cache: Shared cache to reuse labels across runs
            key_fn: Item key function when a new cache is built
        """
        request = ScanFactory.engine_settings(stride, max_concurrency)
        return DiscoverBoundariesUseCase(
            classifier=classifier,
            request=request,
            cache=cache,
            key_fn=key_fn,
        )

    @staticmethod
    def create_color_scan_use_case(
        stride: Optional[int] = None,
        max_concurrency: Optional[int] = None,
        api_url: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> DiscoverBoundariesUseCase:
        """
        Create a use case that names HSL colours via TheColorAPI.

        The caller owns the classifier's HTTP session and should close it
        (`await use_case.classifier.close()`) when done.
        """
        classifier = ScanFactory.create_color_classifier(api_url, timeout)
        return ScanFactory.create_use_case(classifier, stride, max_concurrency)

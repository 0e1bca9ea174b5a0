"""
Colour Name Classifier (TheColorAPI)

Names an HSL colour by asking https://www.thecolorapi.com/id. This is the
production label source for hue scans; the engine only ever sees the
returned name string.

Transient failures (408, 429, 5xx, timeouts, connection errors) are retried
here with jittered exponential backoff. Everything else surfaces at once as
ClassifierError.
"""

import asyncio
import random
import time
from typing import Any, Optional, Sequence

import aiohttp
from pydantic import ValidationError

from boundary_scan.application.interfaces import IClassifier
from boundary_scan.domain.exceptions import ClassifierError
from boundary_scan.logging_utils import StructuredLogger
from boundary_scan.models import ColorApiResponse, ComponentType


def format_hsl_param(hsl: Sequence[float]) -> str:
    """Render (h, s, l) the way the API expects it: "h,s,l" without trailing .0"""
    if len(hsl) != 3:
        raise ValueError(f"HSL colour needs 3 components, got {len(hsl)}")
    parts = []
    for value in hsl:
        if isinstance(value, float) and value.is_integer():
            value = int(value)
        parts.append(str(value))
    return ",".join(parts)


class ColorApiClassifier(IClassifier):
    """
    aiohttp client returning the API's colour name for an HSL triple.

    One ClientSession is shared by all concurrent lookups; it is created on
    first use (inside the running loop) unless one is injected.
    """

    _RETRYABLE_STATUS = {408, 429}
    _MAX_BACKOFF_SECONDS = 30.0

    def __init__(
        self,
        base_url: str = "https://www.thecolorapi.com",
        timeout: float = 15.0,
        max_retries: int = 2,
        retry_backoff: float = 2.0,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        """
        Initialize colour name classifier.

        Args:
            base_url: API root; "/id" is appended unless already present
            timeout: Per-request timeout in seconds
            max_retries: Retries for transient failures (0 disables retrying)
            retry_backoff: Multiplier applied to the delay after each retry
            session: Optional pre-built aiohttp session (not closed by close())
        """
        if base_url.rstrip("/").endswith("/id"):
            self._endpoint = base_url.rstrip("/")
        else:
            self._endpoint = f"{base_url.rstrip('/')}/id"
        self._timeout = timeout
        self._max_retries = max(0, max_retries)
        self._retry_backoff = retry_backoff
        self._session = session
        self._owns_session = session is None
        self.logger = StructuredLogger(ComponentType.CLASSIFIER)

    @property
    def endpoint(self) -> str:
        return self._endpoint

    @property
    def classifier_id(self) -> str:
        return "thecolorapi"

    async def classify(self, item: Any) -> str:
        """
        Name one HSL colour.

        Args:
            item: (hue, saturation, lightness) with saturation/lightness in percent

        Returns:
            The colour name reported by the API

        Raises:
            ClassifierError: After retries are exhausted or on a permanent failure
        """
        hsl_param = format_hsl_param(item)
        attempt = 0
        delay = 1.0
        while True:
            try:
                return await self._single_request(hsl_param)
            except ClassifierError as exc:
                if not exc.retryable or attempt >= self._max_retries:
                    raise
                self.logger.logger.warning(
                    f"Colour lookup hsl={hsl_param} attempt {attempt + 1} failed "
                    f"({exc.error_type}): {exc}; retrying"
                )
                await asyncio.sleep(self._jittered_delay(delay))
                delay = min(delay * self._retry_backoff, self._MAX_BACKOFF_SECONDS)
                attempt += 1

    async def _single_request(self, hsl_param: str) -> str:
        session = self._get_session()
        params = {"format": "json", "hsl": hsl_param}
        start_time = time.time()
        try:
            async with session.get(
                self._endpoint,
                params=params,
                timeout=aiohttp.ClientTimeout(total=self._timeout),
            ) as response:
                if response.status >= 400:
                    body = await response.text()
                    raise ClassifierError(
                        f"HTTP {response.status} for hsl={hsl_param}: {body[:200]}",
                        status_code=response.status,
                        error_type=f"http_{response.status}",
                        retryable=(
                            response.status in self._RETRYABLE_STATUS
                            or response.status >= 500
                        ),
                    )
                data = await response.json(content_type=None)

        except asyncio.TimeoutError as e:
            raise ClassifierError(
                f"Timeout after {self._timeout}s for hsl={hsl_param}",
                error_type="timeout",
                retryable=True,
            ) from e

        except aiohttp.ClientError as e:
            raise ClassifierError(
                f"HTTP Client Error for hsl={hsl_param}: {str(e)}",
                error_type=type(e).__name__,
                retryable=True,
            ) from e

        except ValueError as e:
            # Body was not JSON
            raise ClassifierError(
                f"Undecodable response for hsl={hsl_param}: {str(e)}",
                error_type="decode_error",
            ) from e

        try:
            parsed = ColorApiResponse.model_validate(data)
        except ValidationError as e:
            raise ClassifierError(
                f"Unexpected response shape for hsl={hsl_param}: {str(e)[:200]}",
                error_type="invalid_response",
            ) from e

        latency_ms = (time.time() - start_time) * 1000
        self.logger.logger.debug(
            f"Named hsl={hsl_param} as {parsed.name.value!r} in {latency_ms:.0f} ms"
        )
        return parsed.name.value

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None:
            self._session = aiohttp.ClientSession()
        return self._session

    async def close(self):
        """Close the owned aiohttp session."""
        if self._session is not None and self._owns_session:
            await self._session.close()
            self._session = None

    @classmethod
    def _jittered_delay(cls, delay: float) -> float:
        if delay <= 0:
            return 0.0
        factor = 0.8 + random.random() * 0.4
        return min(delay * factor, cls._MAX_BACKOFF_SECONDS)

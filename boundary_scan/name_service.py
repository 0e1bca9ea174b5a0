"""
Colour Name Service

HTTP front end for hue scans. GET /names streams one NDJSON line per named
colour as soon as it is resolved, in hue order. Labels are cached for the
life of the process, so repeated scans of overlapping sweeps reuse earlier
lookups. A client that disconnects mid-stream cancels its run.

Run locally:
    python -m boundary_scan.name_service
"""

import json
import os
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List, Optional

import uvicorn
from fastapi import FastAPI, HTTPException, Query
from fastapi.responses import StreamingResponse

from .application.dtos import DiscoverRequest
from .application.interfaces import IClassifier
from .application.use_cases import DiscoverBoundariesUseCase
from .config import get_section
from .domain.entities import CancellationToken
from .domain.exceptions import ClassifierError
from .domain.services import ClassifierCache
from .infrastructure.color import hue_sweep, to_named_color
from .infrastructure.factories import ScanFactory
from .logging_utils import StructuredLogger
from .models import ComponentType

logger = StructuredLogger(ComponentType.NAME_SERVICE)

_state: Dict[str, Any] = {"classifier": None, "cache": None}


def set_classifier(classifier: IClassifier, max_concurrency: Optional[int] = None) -> None:
    """Swap the label source; the process-wide cache starts empty again."""
    settings = ScanFactory.engine_settings(max_concurrency=max_concurrency)
    _state["classifier"] = classifier
    _state["cache"] = ClassifierCache(classifier, max_concurrency=settings.max_concurrency)


def _get_cache() -> ClassifierCache:
    if _state["cache"] is None:
        set_classifier(ScanFactory.create_color_classifier())
    return _state["cache"]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for FastAPI startup/shutdown"""
    _get_cache()
    logger.logger.info(
        f"Name Service Started (classifier: {_state['classifier'].classifier_id})"
    )
    yield
    logger.logger.info("Name Service Shutting Down")
    if _state["classifier"] is not None:
        await _state["classifier"].close()


app = FastAPI(title="BoundaryScan-NameService", lifespan=lifespan)


@app.get("/health")
async def health():
    cache = _state["cache"]
    return {
        "status": "healthy",
        "classifier": _state["classifier"].classifier_id if _state["classifier"] else None,
        "cache_entries": len(cache) if cache is not None else 0,
    }


async def _stream_named_colors(
    use_case: DiscoverBoundariesUseCase,
    items: List,
) -> AsyncIterator[str]:
    token = CancellationToken()
    stream = use_case.discover_all(items, token)
    try:
        async for segment in stream:
            yield to_named_color(segment).model_dump_json() + "\n"
    except ClassifierError as exc:
        # Headers are already sent; report the failure in-band
        logger.logger.error(f"Scan failed: {exc}")
        yield json.dumps({"error": str(exc), "error_type": exc.error_type}) + "\n"
    finally:
        await stream.aclose()


@app.get("/names")
async def names(
    saturation: float = Query(50, ge=0, le=100),
    lightness: float = Query(50, ge=0, le=100),
    hue_count: int = Query(360, ge=1, le=360),
    stride: Optional[int] = Query(None, ge=2),
):
    """Stream the named colours of a hue sweep as NDJSON."""
    try:
        settings = ScanFactory.engine_settings(stride=stride)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    cache = _get_cache()
    use_case = DiscoverBoundariesUseCase(
        classifier=_state["classifier"],
        request=DiscoverRequest(stride=settings.stride, max_concurrency=cache.max_concurrency),
        cache=cache,
    )
    items = hue_sweep(saturation, lightness, count=hue_count)
    return StreamingResponse(
        _stream_named_colors(use_case, items),
        media_type="application/x-ndjson",
    )


def run():
    service = get_section("service")
    uvicorn.run(
        app,
        host=service.get("host", "0.0.0.0"),
        port=int(os.getenv("PORT", service.get("port", 8080))),
    )


if __name__ == "__main__":
    run()
